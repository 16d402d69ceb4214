"""챕터 종료 후 흐름 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class ChapterEffects:
    """챕터 완료 시 적용할 스토리 부수효과 (데이터)"""

    events: tuple[str, ...] = ()
    complete_quests: tuple[str, ...] = ()
    unlock_locations: tuple[str, ...] = ()
    bonds: tuple[tuple[str, int], ...] = ()  # (동료 이름, 증가량)
    complete_tutorial: bool = False


@dataclass(frozen=True)
class LoadChapter:
    chapter_id: str
    kind: str = field(default="load_chapter", init=False)


@dataclass(frozen=True)
class StartBattle:
    """전투 시작. 승리 후 return_chapter가 있으면 그 챕터로 복귀."""

    enemy_id: str
    source_chapter: str
    return_chapter: Optional[str] = None
    kind: str = field(default="start_battle", init=False)


@dataclass(frozen=True)
class ReturnToHub:
    kind: str = field(default="return_to_hub", init=False)


ChapterOutcome = Union[LoadChapter, StartBattle, ReturnToHub]
