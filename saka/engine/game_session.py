"""GameSession — 한 플레이어 세션의 조립 지점

EventBus, 두 Service, ChapterDirector를 직접 생성해서 소유한다.
호스트(HTTP 계층 등)는 이 객체 하나만 잡고 행동을 호출한 뒤
drain_triggers()로 그 사이 발행된 호스트 트리거를 받아간다.

호스트 행동 1회 = 이벤트 체인 1개. 행동이 끝나면 체인을 초기화한다.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from saka.config import settings
from saka.core.dialogue.models import Chapter, DialogueLine
from saka.core.dialogue.registry import ChapterRegistry
from saka.core.event_bus import EventBus, GameEvent
from saka.core.event_types import HOST_TRIGGER_TYPES, EventTypes
from saka.core.progress.locations import LOCATION_IDS
from saka.core.spirit.registry import SpiritCatalog
from saka.core.story.models import ChapterOutcome, StartBattle
from saka.engine.chapter_director import ChapterDirector
from saka.services.progress_service import ProgressService
from saka.services.quest_service import QuestService

logger = logging.getLogger(__name__)


class GameSession:
    """진행 상태 + 퀘스트 원장 + 챕터 재생을 묶은 세션"""

    def __init__(
        self,
        db: Session,
        registry: ChapterRegistry,
        catalog: Optional[SpiritCatalog] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.bus = event_bus or EventBus()
        self.registry = registry
        self.catalog = catalog
        self.progress = ProgressService(db, self.bus)
        self.quests = QuestService(db, self.bus)
        self.director = ChapterDirector(registry, self.progress, self.quests, self.bus)

        self._triggers: list[GameEvent] = []
        self._pending_battle: Optional[StartBattle] = None
        self.bus.subscribe_many(HOST_TRIGGER_TYPES, self._collect_trigger)

    @classmethod
    def from_settings(cls, db: Session) -> "GameSession":
        """설정된 경로에서 챕터/Spirit 카탈로그를 읽어 세션 생성"""
        registry = ChapterRegistry()
        registry.load_from_dir(settings.CHAPTERS_DIR)

        catalog = SpiritCatalog()
        try:
            catalog.load_from_json(settings.SPIRITS_FILE)
        except (OSError, TypeError, ValueError):
            logger.warning(
                "Spirit catalog unavailable: %s", settings.SPIRITS_FILE, exc_info=True
            )
            catalog = None

        return cls(db, registry, catalog)

    # === 트리거 수집 ===

    def _collect_trigger(self, event: GameEvent) -> None:
        self._triggers.append(event)

    def drain_triggers(self) -> list[GameEvent]:
        """쌓인 호스트 트리거를 발행 순서대로 꺼낸다"""
        triggers = self._triggers
        self._triggers = []
        return triggers

    @contextmanager
    def _action(self) -> Iterator[None]:
        try:
            yield
        finally:
            self.bus.reset_chain()

    # === 조회 ===

    @property
    def pending_battle(self) -> Optional[StartBattle]:
        return self._pending_battle

    def current_line(self) -> Optional[DialogueLine]:
        return self.director.engine.get_current_line()

    def has_chapter(self) -> bool:
        return self.director.chapter is not None

    def is_known_location(self, location_id: str) -> bool:
        return location_id in LOCATION_IDS

    def is_location_unlocked(self, location_id: str) -> bool:
        return any(
            info.id == location_id for info in self.progress.get_available_locations()
        )

    # === 행동 ===

    def new_game(self) -> None:
        with self._action():
            self.progress.new_game()
            self.quests.new_game()
            self._pending_battle = None
            self._triggers = []
            self.bus.emit(
                GameEvent(
                    event_type=EventTypes.GAME_RESET, data={}, source="game_session"
                )
            )
            logger.info("New game started")

    def start_chapter(self, chapter_id: str) -> Optional[Chapter]:
        with self._action():
            chapter = self.director.start_chapter(chapter_id)
            if chapter is not None:
                self._pending_battle = None
            return chapter

    def advance(self) -> Optional[DialogueLine]:
        with self._action():
            return self.director.advance()

    def choose(self, index: int) -> Optional[DialogueLine]:
        with self._action():
            return self.director.choose(index)

    def finish_chapter(self) -> Optional[ChapterOutcome]:
        """챕터 종료 처리. 전투로 끝나면 결과 보고 전까지 전투를 보류해 둔다."""
        with self._action():
            outcome = self.director.finish_chapter()
            if isinstance(outcome, StartBattle):
                self._pending_battle = outcome
            return outcome

    def report_battle(
        self, victory: bool, captured: bool = False
    ) -> Optional[ChapterOutcome]:
        """보류 중인 전투의 결과 반영. 보류 전투가 없으면 None."""
        if self._pending_battle is None:
            logger.warning("Battle result reported with no pending battle")
            return None
        with self._action():
            trigger = self._pending_battle
            self._pending_battle = None
            return self.director.finish_battle(trigger, victory, captured)

    def visit_location(self, location_id: str) -> Optional[Chapter]:
        """장소 방문 후 해당 장소 챕터 시작"""
        with self._action():
            chapter_id = self.director.visit_location(location_id)
            chapter = self.director.start_chapter(chapter_id)
            if chapter is not None:
                self._pending_battle = None
            return chapter

    def rest(self) -> None:
        with self._action():
            self.director.rest()
