"""진행 상태 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

HUNGER_MAX = 100
HUNGER_MIN = 0
BOND_MAX = 100

HUNGER_DECAY_PER_SLOT = 5  # 시간대 1칸마다 감소
CAPTURE_HUNGER_REWARD = 30  # 첫 포획 시 회복 (핵심 보상 루프)
DEFAULT_RESTORE_AMOUNT = 30  # 휴식 등
DEFAULT_BOND_INCREASE = 10

COMPANIONS = ("dian", "zafri")


class TimeSlot(str, Enum):
    """하루 3구간. 정의 순서 = 진행 순서."""

    PAGI = "pagi"
    PETANG = "petang"
    MALAM = "malam"


TIME_SLOT_ORDER: list[TimeSlot] = [TimeSlot.PAGI, TimeSlot.PETANG, TimeSlot.MALAM]

TIME_SLOT_NAMES: dict[TimeSlot, str] = {
    TimeSlot.PAGI: "Pagi",
    TimeSlot.PETANG: "Petang",
    TimeSlot.MALAM: "Malam",
}

TIME_SLOT_ICONS: dict[TimeSlot, str] = {
    TimeSlot.PAGI: "☀️",
    TimeSlot.PETANG: "🌅",
    TimeSlot.MALAM: "🌙",
}


def _default_bonds() -> dict[str, int]:
    return {name: 0 for name in COMPANIONS}


def _default_locations() -> list[str]:
    return ["unit-9-4", "rumah-syafiq"]


@dataclass
class GameState:
    """세션을 넘어 유지되는 플레이어 진행 상태"""

    day: int = 1
    time_slot: TimeSlot = TimeSlot.MALAM
    hunger: int = 70
    captured_spirits: list[str] = field(default_factory=list)
    unlocked_locations: list[str] = field(default_factory=_default_locations)
    completed_events: list[str] = field(default_factory=list)
    social_bonds: dict[str, int] = field(default_factory=_default_bonds)
    current_chapter: str = "chapter1"
    tutorial_completed: bool = False

    def copy(self) -> GameState:
        return GameState(
            day=self.day,
            time_slot=self.time_slot,
            hunger=self.hunger,
            captured_spirits=list(self.captured_spirits),
            unlocked_locations=list(self.unlocked_locations),
            completed_events=list(self.completed_events),
            social_bonds=dict(self.social_bonds),
            current_chapter=self.current_chapter,
            tutorial_completed=self.tutorial_completed,
        )


@dataclass
class LocationDef:
    """장소 정의 (정적 데이터)"""

    id: str
    name: str
    icon: str
    description: str
    required_day: Optional[int] = None
    always_unlocked: bool = False


@dataclass
class LocationInfo:
    """호스트에 보여줄 장소 + 현재 상태"""

    id: str
    name: str
    icon: str
    description: str
    unlocked: bool
    has_event: bool = False
    required_day: Optional[int] = None
