"""진행 상태 순수 로직 — 시간 진행, 클램핑, 해금 판정, 튜토리얼 순서, 저장 재조정"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from saka.core.quest.models import QuestProgress

from .models import (
    BOND_MAX,
    COMPANIONS,
    HUNGER_MAX,
    HUNGER_MIN,
    TIME_SLOT_ICONS,
    TIME_SLOT_NAMES,
    TIME_SLOT_ORDER,
    GameState,
    TimeSlot,
)

logger = logging.getLogger(__name__)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_hunger(value: int) -> int:
    return clamp(value, HUNGER_MIN, HUNGER_MAX)


def next_time_slot(slot: TimeSlot) -> tuple[TimeSlot, bool]:
    """다음 시간대. 반환: (다음 시간대, 날짜가 넘어갔는지)"""
    index = TIME_SLOT_ORDER.index(slot)
    if index == len(TIME_SLOT_ORDER) - 1:
        return TIME_SLOT_ORDER[0], True
    return TIME_SLOT_ORDER[index + 1], False


def format_time_display(state: GameState) -> str:
    slot = state.time_slot
    return f"Hari {state.day} — {TIME_SLOT_NAMES[slot]} {TIME_SLOT_ICONS[slot]}"


# --- 장소 해금 ---


def evaluate_location_unlocks(
    state: GameState, quest_progress: Optional[QuestProgress]
) -> list[str]:
    """지금 해금되어야 하는 (아직 잠긴) 장소 ID 목록.

    해금은 단조적이다. 이미 해금된 장소는 절대 다시 잠그지 않는다.

    튜토리얼 중: meet-dian 완료 시 tangga만.
    튜토리얼 후: 퀘스트 진행 기반 + 구버전 세이브용 날짜 폴백.
    """
    progress = quest_progress or QuestProgress()
    wanted: list[str] = []

    if not state.tutorial_completed:
        if progress.is_complete("meet-dian"):
            wanted.append("tangga")
    else:
        if progress.is_active("find-zafri") or progress.is_complete("find-zafri"):
            wanted.append("kedai-runcit")
        if progress.is_active("rooftop-boss"):
            wanted.append("rooftop")

        # 호환 심(shim): 퀘스트 체인 도입 전 세이브
        if state.day >= 2 and progress.is_complete("first-hunt"):
            wanted.append("tangga")
        if state.day >= 3 and progress.is_complete("collect-3-spirits"):
            wanted.append("rooftop")

    result: list[str] = []
    for location_id in wanted:
        if location_id not in state.unlocked_locations and location_id not in result:
            result.append(location_id)
    return result


# --- 튜토리얼 순서 ---

TUTORIAL_SEQUENCE = ["chapter1", "tutorial-wake", "tutorial-dian", "tutorial-capture"]

# (현재 챕터) → 완료 후 바로 이어지는 챕터. None = 외부 트리거(전투) 또는 허브.
_TUTORIAL_NEXT: dict[str, Optional[str]] = {
    "chapter1": "tutorial-wake",
    "tutorial-wake": "tutorial-dian",
    "tutorial-dian": None,
    "tutorial-capture": None,
}

TUTORIAL_FINAL_CHAPTER = "tutorial-capture"


def next_tutorial_chapter(state: GameState) -> tuple[Optional[str], bool]:
    """튜토리얼 상태 머신.

    반환: (다음 챕터 ID 또는 None, 이번 호출로 튜토리얼이 끝났는지)
    """
    if state.tutorial_completed:
        return None, False

    chapter = state.current_chapter
    if chapter not in _TUTORIAL_NEXT:
        return None, False
    if f"{chapter}-complete" not in state.completed_events:
        return None, False

    if chapter == TUTORIAL_FINAL_CHAPTER:
        return None, True
    return _TUTORIAL_NEXT[chapter], False


# --- 저장 데이터 ---

# 구버전(camelCase) 키 → 현재 필드. 필드 이름 변경 시 여기에 추가.
LEGACY_FIELD_NAMES: dict[str, str] = {
    "timeSlot": "time_slot",
    "sakaHunger": "hunger",
    "capturedSpirits": "captured_spirits",
    "unlockedLocations": "unlocked_locations",
    "completedEvents": "completed_events",
    "socialBonds": "social_bonds",
    "currentChapter": "current_chapter",
    "tutorialCompleted": "tutorial_completed",
}


def game_state_to_dict(state: GameState) -> dict[str, Any]:
    return {
        "day": state.day,
        "time_slot": state.time_slot.value,
        "hunger": state.hunger,
        "captured_spirits": list(state.captured_spirits),
        "unlocked_locations": list(state.unlocked_locations),
        "completed_events": list(state.completed_events),
        "social_bonds": dict(state.social_bonds),
        "current_chapter": state.current_chapter,
        "tutorial_completed": state.tutorial_completed,
    }


def _normalize_keys(saved: Mapping[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in saved.items():
        data[LEGACY_FIELD_NAMES.get(key, key)] = value
    # 현재 키가 있으면 구버전 키보다 우선
    for key, value in saved.items():
        if key not in LEGACY_FIELD_NAMES:
            data[key] = value
    return data


def _unique_strings(value: Any) -> Optional[list[str]]:
    if not isinstance(value, list):
        return None
    result: list[str] = []
    for item in value:
        if isinstance(item, str) and item not in result:
            result.append(item)
    return result


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def reconcile_game_state(saved: Mapping[str, Any] | None) -> GameState:
    """저장 데이터를 기본값 위에 필드 단위로 병합.

    필드마다 타입/범위를 확인하고, 맞지 않으면 그 필드만 기본값 유지.
    알 수 없는 키는 무시한다.
    """
    state = GameState()
    if not saved:
        return state

    data = _normalize_keys(saved)

    day = data.get("day")
    if _is_int(day) and day >= 1:
        state.day = day

    slot = data.get("time_slot")
    if isinstance(slot, str):
        try:
            state.time_slot = TimeSlot(slot)
        except ValueError:
            logger.warning("Unknown time slot in save: %s", slot)

    hunger = data.get("hunger")
    if isinstance(hunger, (int, float)) and not isinstance(hunger, bool):
        state.hunger = clamp_hunger(int(hunger))

    spirits = _unique_strings(data.get("captured_spirits"))
    if spirits is not None:
        state.captured_spirits = spirits

    locations = _unique_strings(data.get("unlocked_locations"))
    if locations is not None:
        # 기본 해금 장소는 항상 유지
        missing = [loc for loc in state.unlocked_locations if loc not in locations]
        state.unlocked_locations = missing + locations

    events = _unique_strings(data.get("completed_events"))
    if events is not None:
        state.completed_events = events

    bonds = data.get("social_bonds")
    if isinstance(bonds, Mapping):
        for name in COMPANIONS:
            value = bonds.get(name)
            if _is_int(value):
                state.social_bonds[name] = clamp(value, 0, BOND_MAX)

    chapter = data.get("current_chapter")
    if isinstance(chapter, str) and chapter:
        state.current_chapter = chapter

    tutorial = data.get("tutorial_completed")
    if isinstance(tutorial, bool):
        state.tutorial_completed = tutorial

    return state
