"""스토리 흐름 Core 패키지 — 챕터 완료 부수효과 표 + 장소 라우팅"""

from saka.core.story.models import (
    ChapterEffects,
    ChapterOutcome,
    LoadChapter,
    ReturnToHub,
    StartBattle,
)
from saka.core.story.routing import build_location_context, chapter_for_location
from saka.core.story.tables import (
    BATTLE_RETURN_CHAPTERS,
    BATTLE_VICTORY_EVENTS,
    CHAPTER_EFFECTS,
    FIRST_BATTLE_EVENT,
    FIRST_CAPTURE_EVENT,
    effects_for,
)

__all__ = [
    "ChapterEffects",
    "ChapterOutcome",
    "LoadChapter",
    "StartBattle",
    "ReturnToHub",
    "CHAPTER_EFFECTS",
    "BATTLE_RETURN_CHAPTERS",
    "BATTLE_VICTORY_EVENTS",
    "FIRST_BATTLE_EVENT",
    "FIRST_CAPTURE_EVENT",
    "effects_for",
    "chapter_for_location",
    "build_location_context",
]
