"""진행 상태 Service — Core↔DB 연결, EventBus 통신

날짜/시간대, 허기, 포획 Spirit, 해금 장소, 완료 이벤트, 동료 유대, 현재 챕터,
튜토리얼 완료 여부를 관리한다. 모든 변경은 즉시 저장 슬롯에 통째로 기록된다.

퀘스트 원장은 직접 참조하지 않는다 (Service → Service 금지).
장소 해금에 필요한 퀘스트 정보는 호출자가 QuestProgress 스냅샷으로 넘긴다.
"""

import json
import logging
from typing import Optional

from sqlalchemy.orm import Session

from saka.core.event_bus import EventBus, GameEvent
from saka.core.event_types import EventTypes
from saka.core.progress.locations import available_locations
from saka.core.progress.models import (
    BOND_MAX,
    CAPTURE_HUNGER_REWARD,
    COMPANIONS,
    DEFAULT_BOND_INCREASE,
    DEFAULT_RESTORE_AMOUNT,
    HUNGER_DECAY_PER_SLOT,
    GameState,
    LocationInfo,
)
from saka.core.progress.state_logic import (
    clamp,
    clamp_hunger,
    evaluate_location_unlocks,
    format_time_display,
    game_state_to_dict,
    next_time_slot,
    TUTORIAL_FINAL_CHAPTER,
    next_tutorial_chapter,
    reconcile_game_state,
)
from saka.core.quest.models import QuestProgress
from saka.db.save_store import SaveStore

logger = logging.getLogger(__name__)

GAME_STATE_KEY = "saka-game-state"


class ProgressService:
    """플레이어 진행 상태 관리"""

    def __init__(self, db: Session, event_bus: EventBus):
        self._store = SaveStore(db)
        self._bus = event_bus
        self._state = self._load()

    # === 저장/로드 ===

    def _load(self) -> GameState:
        raw = self._store.load(GAME_STATE_KEY)
        if raw is None:
            return GameState()
        try:
            saved = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Corrupt game state save, starting from defaults")
            return GameState()
        if not isinstance(saved, dict):
            logger.warning("Unexpected game state save shape: %s", type(saved).__name__)
            return GameState()
        return reconcile_game_state(saved)

    def _save(self) -> None:
        self._store.save(GAME_STATE_KEY, game_state_to_dict(self._state))

    def _emit(self, event_type: str, data: dict) -> None:
        self._bus.emit(
            GameEvent(event_type=event_type, data=data, source="progress_service")
        )

    # === 조회 ===

    def get_game_state(self) -> GameState:
        """현재 상태 사본"""
        return self._state.copy()

    def get_time_display(self) -> str:
        return format_time_display(self._state)

    def get_available_locations(self) -> list[LocationInfo]:
        return available_locations(self._state)

    def has_completed_event(self, event_id: str) -> bool:
        return event_id in self._state.completed_events

    def get_current_chapter(self) -> str:
        return self._state.current_chapter

    def is_tutorial_completed(self) -> bool:
        return self._state.tutorial_completed

    def should_go_to_hub(self) -> bool:
        """튜토리얼이 끝났으면 (또는 마지막 튜토리얼 챕터를 마쳤으면) 챕터 종료 후 허브로"""
        return (
            self._state.tutorial_completed
            or f"{TUTORIAL_FINAL_CHAPTER}-complete" in self._state.completed_events
        )

    def has_save_data(self) -> bool:
        return self._store.exists(GAME_STATE_KEY)

    # === 시간 / 허기 ===

    def advance_time(self, quest_progress: Optional[QuestProgress] = None) -> None:
        """시간대 1칸 진행. malam → 다음 날 pagi. 매번 허기 감소."""
        state = self._state
        slot, rolled = next_time_slot(state.time_slot)
        state.time_slot = slot
        if rolled:
            state.day += 1
        state.hunger = clamp_hunger(state.hunger - HUNGER_DECAY_PER_SLOT)

        logger.info(
            "Time advanced: day=%d slot=%s hunger=%d",
            state.day,
            state.time_slot.value,
            state.hunger,
        )

        if rolled:
            self.check_location_unlocks(quest_progress)

        self._save()
        self._emit(
            EventTypes.TIME_ADVANCED,
            {"day": state.day, "time_slot": state.time_slot.value},
        )
        if rolled:
            self._emit(EventTypes.DAY_STARTED, {"day": state.day})

    def restore_hunger(self, amount: int = DEFAULT_RESTORE_AMOUNT) -> None:
        """허기 회복 (음수면 감소). [0, 100]으로 클램프."""
        self._state.hunger = clamp_hunger(self._state.hunger + amount)
        self._save()

    # === 포획 / 이벤트 / 장소 ===

    def capture_spirit(self, spirit_id: str) -> bool:
        """처음 포획한 Spirit이면 True + 허기 보상"""
        if spirit_id in self._state.captured_spirits:
            return False
        self._state.captured_spirits.append(spirit_id)
        self._state.hunger = clamp_hunger(self._state.hunger + CAPTURE_HUNGER_REWARD)
        self._save()
        logger.info(
            "Spirit captured: %s (total=%d)",
            spirit_id,
            len(self._state.captured_spirits),
        )
        self._emit(
            EventTypes.SPIRIT_CAPTURED,
            {
                "spirit_id": spirit_id,
                "captured_count": len(self._state.captured_spirits),
            },
        )
        return True

    def complete_event(self, event_id: str) -> bool:
        if event_id in self._state.completed_events:
            return False
        self._state.completed_events.append(event_id)
        self._save()
        logger.debug("Event completed: %s", event_id)
        return True

    def unlock_location(self, location_id: str) -> bool:
        if location_id in self._state.unlocked_locations:
            return False
        self._state.unlocked_locations.append(location_id)
        self._save()
        logger.info("Location unlocked: %s", location_id)
        self._emit(EventTypes.LOCATION_UNLOCKED, {"location_id": location_id})
        return True

    def check_location_unlocks(
        self, quest_progress: Optional[QuestProgress] = None
    ) -> list[str]:
        """조건을 만족한 장소 해금. 새로 해금된 ID 목록 반환."""
        unlocked: list[str] = []
        for location_id in evaluate_location_unlocks(self._state, quest_progress):
            if self.unlock_location(location_id):
                unlocked.append(location_id)
        return unlocked

    # === 유대 ===

    def increase_bond(
        self, companion: str, amount: int = DEFAULT_BOND_INCREASE
    ) -> None:
        if companion not in COMPANIONS:
            logger.warning("Unknown companion, bond ignored: %s", companion)
            return
        before = self._state.social_bonds.get(companion, 0)
        after = clamp(before + amount, 0, BOND_MAX)
        self._state.social_bonds[companion] = after
        self._save()
        if after != before:
            self._emit(
                EventTypes.BOND_CHANGED, {"companion": companion, "bond": after}
            )

    # === 챕터 / 튜토리얼 ===

    def set_current_chapter(self, chapter_id: str) -> None:
        self._state.current_chapter = chapter_id
        self._save()

    def get_next_chapter(self) -> Optional[str]:
        """튜토리얼 순서상 다음 챕터. 튜토리얼 밖이면 None.

        tutorial-capture 완료를 처리하는 호출에서 튜토리얼 완료가 기록된다.
        """
        next_chapter, finished = next_tutorial_chapter(self._state)
        if finished:
            self._state.tutorial_completed = True
            self._save()
            logger.info("Tutorial completed")
            self._emit(EventTypes.TUTORIAL_COMPLETED, {})
        return next_chapter

    def complete_tutorial(self) -> None:
        """튜토리얼 완료 + 계단 해금 (구버전 세이브 복구용 포함)"""
        if not self._state.tutorial_completed:
            self._state.tutorial_completed = True
            self._save()
            logger.info("Tutorial completed")
            self._emit(EventTypes.TUTORIAL_COMPLETED, {})
        self.unlock_location("tangga")

    # === 새 게임 ===

    def new_game(self) -> None:
        self._state = GameState()
        self._store.delete(GAME_STATE_KEY)
        logger.info("Game state reset")
