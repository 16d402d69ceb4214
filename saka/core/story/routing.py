"""장소 → 챕터 라우팅 + 장소 방문 시 퀘스트 컨텍스트"""

from __future__ import annotations

from typing import Any

from saka.core.progress.models import GameState

DEFAULT_CHAPTER = "chapter1"


def chapter_for_location(location_id: str, state: GameState) -> str:
    events = state.completed_events

    if location_id == "unit-9-4":
        if "chapter1-complete" not in events:
            return "chapter1"
        return "unit-9-4-return"

    if location_id == "tangga":
        if "met-dian" not in events:
            return "chapter2"
        # Dian을 만난 뒤 첫 방문은 Hantu Raya 조우
        if "first-battle" not in events:
            return "tangga-encounter"
        return "tangga-casual"

    if location_id == "rumah-syafiq":
        return "home-visit"
    if location_id == "rooftop":
        return "rooftop-exploration"
    if location_id == "kedai-runcit":
        return "shop-visit"

    return DEFAULT_CHAPTER


def build_location_context(location_id: str, state: GameState) -> dict[str, Any]:
    """update_quest_progress()에 넘길 컨텍스트"""
    context: dict[str, Any] = {
        "location": location_id,
        "captured_spirits_count": len(state.captured_spirits),
    }
    events = state.completed_events

    if location_id == "tangga" and "met-dian" not in events:
        context["event"] = "met-dian"
    if location_id == "kedai-runcit" and "met-zafri" not in events:
        context["event"] = "met-zafri"
    if location_id == "unit-9-4" and "first-battle" in events:
        context["event"] = "unit-94-explored-again"

    return context
