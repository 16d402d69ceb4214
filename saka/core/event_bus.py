"""EventBus - 서비스/엔진 간 이벤트 통신 인프라

규칙:
- 서비스는 다른 서비스를 직접 import하지 않는다
- 이벤트는 식별자(ID) 위주로만 전달한다
- 전파 깊이 최대 MAX_DEPTH 단계
- 한 체인 안에서 완전히 동일한 이벤트(source + type + data)의 재발행 금지
"""

import json
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Set

from saka.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 한 호스트 액션 내 이벤트 전파 최대 깊이


@dataclass
class GameEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "chapter_completed", "battle_requested")
        data: 이벤트 데이터 (ID 위주, 무거운 객체 금지)
        source: 발행한 서비스/엔진 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # 내부 추적용 (외부에서 설정하지 않음)
    _depth: int = field(default=0, repr=False)

    @property
    def chain_key(self) -> str:
        """중복 판정 키. data 순서와 무관하게 동일하면 같은 키."""
        payload = json.dumps(self.data, sort_keys=True, default=str)
        return f"{self.source}:{self.event_type}:{payload}"


# 핸들러 타입: GameEvent를 받는 callable
EventHandler = Callable[[GameEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe("battle_requested", host.on_battle_requested)
        bus.emit(GameEvent(event_type="battle_requested", data={"enemy_id": "toyol"}, source="chapter_director"))
        ...
        bus.reset_chain()  # 호스트 액션 종료 시
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0
        self._emitted_in_chain: Set[str] = set()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 등록"""
        self._handlers[event_type].append(handler)
        logger.debug("EventBus subscribe: %s -> %s", event_type, _name_of(handler))

    def subscribe_many(self, event_types: List[str], handler: EventHandler) -> None:
        """여러 이벤트에 같은 핸들러 등록"""
        for event_type in event_types:
            self.subscribe(event_type, handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 해제"""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(
                    "EventBus unsubscribe: %s -> %s", event_type, _name_of(handler)
                )
            except ValueError:
                logger.warning(
                    "Handler not registered: %s -> %s", event_type, _name_of(handler)
                )

    def emit(self, event: GameEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 동기 호출.

        안전장치:
        1. 전파 깊이 MAX_DEPTH 초과 시 무시
        2. 같은 체인에서 동일 이벤트 재발행 시 무시
        3. 핸들러 예외는 로그만 남기고 다음 핸들러 계속 호출
        """
        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                "EventBus depth exceeded (%d): %s:%s dropped",
                MAX_DEPTH,
                event.source,
                event.event_type,
            )
            return

        chain_key = event.chain_key
        if chain_key in self._emitted_in_chain:
            logger.warning("EventBus duplicate event blocked: %s", chain_key)
            return

        self._emitted_in_chain.add(chain_key)
        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug("EventBus: no subscribers for %s", event.event_type)
            return

        logger.info(
            "EventBus emit: %s (source=%s, depth=%d, handlers=%d)",
            event.event_type,
            event.source,
            self._current_depth,
            len(handlers),
        )

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "EventBus handler error: %s (event=%s)",
                        _name_of(handler),
                        event.event_type,
                    )
        finally:
            self._current_depth -= 1

    def reset_chain(self) -> None:
        """호스트 액션 종료 시 호출. 중복 추적 초기화."""
        self._emitted_in_chain.clear()
        self._current_depth = 0

    def clear(self) -> None:
        """모든 구독 해제 (테스트용)"""
        self._handlers.clear()
        self.reset_chain()

    @property
    def handler_count(self) -> int:
        """등록된 총 핸들러 수"""
        return sum(len(h) for h in self._handlers.values())


def _name_of(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))
