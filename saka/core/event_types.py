"""이벤트 유형 상수

호스트(렌더러)가 구독하는 트리거 + 도메인 이벤트.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # === Host triggers (렌더러가 소비하는 불투명 트리거) ===
    BATTLE_REQUESTED = "battle_requested"
    HUB_REQUESTED = "hub_requested"
    NARRATIVE_EFFECT = "narrative_effect"
    BACKGROUND_CHANGED = "background_changed"
    ENEMY_SHOWN = "enemy_shown"

    # === Dialogue / chapter ===
    CHAPTER_STARTED = "chapter_started"
    CHAPTER_COMPLETED = "chapter_completed"
    BATTLE_FINISHED = "battle_finished"

    # === Progress ===
    TIME_ADVANCED = "time_advanced"
    DAY_STARTED = "day_started"
    SPIRIT_CAPTURED = "spirit_captured"
    LOCATION_UNLOCKED = "location_unlocked"
    BOND_CHANGED = "bond_changed"
    TUTORIAL_COMPLETED = "tutorial_completed"

    # === Quest ===
    QUEST_ACTIVATED = "quest_activated"
    QUEST_COMPLETED = "quest_completed"

    # === Session ===
    GAME_RESET = "game_reset"


# 호스트 응답에 실어 보내는 트리거 목록
HOST_TRIGGER_TYPES = [
    EventTypes.BATTLE_REQUESTED,
    EventTypes.HUB_REQUESTED,
    EventTypes.NARRATIVE_EFFECT,
    EventTypes.BACKGROUND_CHANGED,
    EventTypes.ENEMY_SHOWN,
]
