"""퀘스트 원장 Service — Core↔DB 연결, EventBus 통신

Service → Core, Service → DB 허용
Service → Service 금지. 진행 상태 쪽에는 snapshot()으로 ID만 넘긴다.

불변식: 활성 퀘스트는 항상 체인에서 첫 번째 미완료 퀘스트 (없으면 None).
"""

import json
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from saka.core.event_bus import EventBus, GameEvent
from saka.core.event_types import EventTypes
from saka.core.quest.chain_logic import (
    build_default_ledger,
    is_completion_met,
    ledger_to_dict,
    mark_complete,
    reconcile_ledger,
)
from saka.core.quest.models import Quest, QuestLedgerState, QuestProgress
from saka.db.save_store import SaveStore

logger = logging.getLogger(__name__)

QUEST_STATE_KEY = "saka-quest-state"


class QuestService:
    """퀘스트 체인 진행 + 저장"""

    def __init__(self, db: Session, event_bus: EventBus):
        self._store = SaveStore(db)
        self._bus = event_bus
        self._state = self._load()

    def _load(self) -> QuestLedgerState:
        raw = self._store.load(QUEST_STATE_KEY)
        if raw is None:
            return build_default_ledger()
        try:
            saved = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Corrupt quest save, starting from defaults")
            return build_default_ledger()
        if not isinstance(saved, dict):
            logger.warning("Unexpected quest save shape: %s", type(saved).__name__)
            return build_default_ledger()
        return reconcile_ledger(saved)

    def _save(self) -> None:
        self._store.save(QUEST_STATE_KEY, ledger_to_dict(self._state))

    # === 진행 ===

    def complete_quest(self, quest_id: str) -> bool:
        """활성 퀘스트만 완료 가능. 그 외에는 경고 후 False."""
        active = self._state.active_quest
        if active is None or active.id != quest_id:
            logger.warning(
                "Cannot complete quest %s: not active (active=%s)",
                quest_id,
                active.id if active else None,
            )
            return False

        mark_complete(self._state, quest_id)
        self._save()
        logger.info("Quest completed: %s", quest_id)

        self._bus.emit(
            GameEvent(
                event_type=EventTypes.QUEST_COMPLETED,
                data={"quest_id": quest_id},
                source="quest_service",
            )
        )
        next_active = self._state.active_quest
        if next_active is not None:
            logger.info("Quest activated: %s", next_active.id)
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.QUEST_ACTIVATED,
                    data={"quest_id": next_active.id},
                    source="quest_service",
                )
            )
        return True

    def check_quest_completion(
        self, quest_id: str, context: Mapping[str, Any]
    ) -> bool:
        """활성 + 미완료 퀘스트에 대해서만 완료 술어 평가"""
        quest = self._find(quest_id)
        if quest is None or quest.is_complete:
            return False
        if not self.is_quest_active(quest_id):
            return False
        return is_completion_met(quest_id, context)

    def update_quest_progress(self, context: Mapping[str, Any]) -> bool:
        """활성 퀘스트의 조건이 충족되면 완료. 완료했으면 True."""
        active = self._state.active_quest
        if active is None:
            return False
        if self.check_quest_completion(active.id, context):
            return self.complete_quest(active.id)
        return False

    # === 조회 ===

    def get_active_quest(self) -> Optional[Quest]:
        return self._state.active_quest

    def is_quest_complete(self, quest_id: str) -> bool:
        return quest_id in self._state.completed_quests

    def is_quest_active(self, quest_id: str) -> bool:
        active = self._state.active_quest
        return active is not None and active.id == quest_id

    def get_quest_for_location(self, location_id: str) -> Optional[Quest]:
        """활성 퀘스트의 목표 장소가 일치할 때만 반환"""
        active = self._state.active_quest
        if active is not None and active.target_location == location_id:
            return active
        return None

    def get_completed_quests(self) -> list[str]:
        return list(self._state.completed_quests)

    def get_quest_progress(self) -> tuple[int, int]:
        """(완료 수, 전체 수)"""
        return len(self._state.completed_quests), len(self._state.chain)

    def get_quest_display_text(self) -> str:
        active = self._state.active_quest
        if active is None:
            return ""
        return f"{active.title}: {active.description}"

    def get_chain(self) -> list[Quest]:
        return list(self._state.chain)

    def snapshot(self) -> QuestProgress:
        """진행 상태 판정용 읽기 전용 스냅샷"""
        active = self._state.active_quest
        return QuestProgress(
            active_quest_id=active.id if active else None,
            completed_quest_ids=frozenset(self._state.completed_quests),
        )

    def new_game(self) -> None:
        self._state = build_default_ledger()
        self._store.delete(QUEST_STATE_KEY)
        logger.info("Quest ledger reset")

    def _find(self, quest_id: str) -> Optional[Quest]:
        for quest in self._state.chain:
            if quest.id == quest_id:
                return quest
        return None
