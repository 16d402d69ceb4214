"""스토리 부수효과 표 (챕터 ID / 적 ID 키)

일반 규칙이 아니라 스토리 콘텐츠다. 새 챕터는 여기에 한 줄 추가한다.
"""

from __future__ import annotations

from .models import ChapterEffects

NO_EFFECTS = ChapterEffects()

CHAPTER_EFFECTS: dict[str, ChapterEffects] = {
    "chapter1": NO_EFFECTS,
    "tutorial-wake": NO_EFFECTS,
    "tutorial-dian": ChapterEffects(
        events=("met-dian",),
        complete_quests=("meet-dian",),
        unlock_locations=("tangga",),
        bonds=(("dian", 10),),
    ),
    "tutorial-capture": ChapterEffects(complete_tutorial=True),
    "chapter2": ChapterEffects(
        events=("met-dian",),
        bonds=(("dian", 10),),
    ),
    "shop-visit": ChapterEffects(
        events=("met-zafri",),
        bonds=(("zafri", 10),),
    ),
    "home-visit": ChapterEffects(events=("talked-to-mum",)),
    "unit-9-4-return": ChapterEffects(events=("unit-94-explored-again",)),
}

# 전투로 끝나는 챕터 → 승리 후 이어질 챕터
BATTLE_RETURN_CHAPTERS: dict[str, str] = {
    "tutorial-dian": "tutorial-capture",
}

# 모든 승리에 공통으로 기록
FIRST_BATTLE_EVENT = "first-battle"
FIRST_CAPTURE_EVENT = "first-spirit-captured"

# 적별 추가 승리 이벤트
BATTLE_VICTORY_EVENTS: dict[str, tuple[str, ...]] = {
    "pontianak": ("rooftop-boss-defeated",),
}


def effects_for(chapter_id: str) -> ChapterEffects:
    return CHAPTER_EFFECTS.get(chapter_id, NO_EFFECTS)
