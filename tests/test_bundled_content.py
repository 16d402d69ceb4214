"""번들 챕터 콘텐츠 검사 — 모든 챕터 통과 + 라우팅/부수효과 표와 일치"""

import pytest

from saka.core.dialogue.validation import validate_chapter
from saka.core.progress.locations import LOCATION_IDS
from saka.core.progress.models import GameState
from saka.core.progress.state_logic import TUTORIAL_SEQUENCE
from saka.core.story.routing import chapter_for_location
from saka.core.story.tables import BATTLE_RETURN_CHAPTERS, CHAPTER_EFFECTS

EXPECTED_CHAPTERS = {
    "chapter1",
    "tutorial-wake",
    "tutorial-dian",
    "tutorial-capture",
    "chapter2",
    "tangga-encounter",
    "tangga-casual",
    "home-visit",
    "rooftop-exploration",
    "shop-visit",
    "unit-9-4-return",
}


def test_all_chapters_present(bundled_registry):
    assert set(bundled_registry.ids()) == EXPECTED_CHAPTERS


@pytest.mark.parametrize("chapter_id", sorted(EXPECTED_CHAPTERS))
def test_chapter_valid(bundled_registry, spirit_catalog, chapter_id):
    report = validate_chapter(bundled_registry.get(chapter_id), spirit_catalog.ids())
    assert report.ok, report.errors
    assert report.warnings == []


def test_tables_reference_real_chapters(bundled_registry):
    ids = set(bundled_registry.ids())
    assert set(CHAPTER_EFFECTS) <= ids
    assert set(BATTLE_RETURN_CHAPTERS) <= ids
    assert set(BATTLE_RETURN_CHAPTERS.values()) <= ids
    assert set(TUTORIAL_SEQUENCE) <= ids


def test_every_route_has_a_chapter(bundled_registry):
    states = [GameState()]
    later = GameState(tutorial_completed=True)
    later.completed_events.extend(["chapter1-complete", "met-dian", "first-battle"])
    states.append(later)
    middle = GameState()
    middle.completed_events.append("met-dian")
    states.append(middle)

    for state in states:
        for location_id in LOCATION_IDS:
            assert bundled_registry.get(chapter_for_location(location_id, state)) is not None


def test_tutorial_dian_ends_in_toyol_battle(bundled_registry):
    chapter = bundled_registry.get("tutorial-dian")
    battles = [line.battle for line in chapter.lines.values() if line.battle]
    assert battles == ["toyol"]
