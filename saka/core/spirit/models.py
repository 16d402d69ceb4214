"""Spirit 카탈로그 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SpiritStats:
    hp: int
    power: int
    defense: int
    speed: int
    willpower: int = 0


@dataclass(frozen=True)
class SpiritRecord:
    """포획 가능한 spirit / 적 1종. 전투 수치 계산은 이 패키지 범위 밖."""

    id: str
    name: str
    spirit_type: str
    tier: int
    base_stats: SpiritStats
    bottle_type: str
    special_ability: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
