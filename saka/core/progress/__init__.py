"""진행 상태(날짜/시간/허기/장소/이벤트/유대) Core 패키지"""

from saka.core.progress.locations import (
    LOCATIONS,
    available_locations,
    build_location_info,
    has_event_available,
)
from saka.core.progress.models import (
    CAPTURE_HUNGER_REWARD,
    COMPANIONS,
    DEFAULT_BOND_INCREASE,
    DEFAULT_RESTORE_AMOUNT,
    HUNGER_DECAY_PER_SLOT,
    GameState,
    LocationDef,
    LocationInfo,
    TimeSlot,
)
from saka.core.progress.state_logic import (
    TUTORIAL_SEQUENCE,
    clamp_hunger,
    evaluate_location_unlocks,
    format_time_display,
    game_state_to_dict,
    next_time_slot,
    next_tutorial_chapter,
    reconcile_game_state,
)

__all__ = [
    # models
    "GameState",
    "TimeSlot",
    "LocationDef",
    "LocationInfo",
    "COMPANIONS",
    "HUNGER_DECAY_PER_SLOT",
    "CAPTURE_HUNGER_REWARD",
    "DEFAULT_RESTORE_AMOUNT",
    "DEFAULT_BOND_INCREASE",
    # locations
    "LOCATIONS",
    "available_locations",
    "build_location_info",
    "has_event_available",
    # logic
    "TUTORIAL_SEQUENCE",
    "clamp_hunger",
    "next_time_slot",
    "format_time_display",
    "evaluate_location_unlocks",
    "next_tutorial_chapter",
    "game_state_to_dict",
    "reconcile_game_state",
]
