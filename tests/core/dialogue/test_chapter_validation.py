"""챕터 검증 테스트 — 참조, 도달성, 경로, 화자, 전투 태그"""

from saka.core.dialogue.validation import (
    check_battles,
    check_competing_continuations,
    check_references,
    check_speakers,
    check_start_node,
    count_terminal_nodes,
    find_unreachable,
    validate_chapter,
    walk_first_choices,
    walk_paths,
)

GOOD_LINES = {
    "start": {"speaker": "Syafiq", "expression": "neutral", "text": "a", "next": "ask"},
    "ask": {
        "text": "b",
        "choices": [
            {"text": "1", "next": "left"},
            {"text": "2", "next": "right"},
        ],
    },
    "left": {"text": "c", "next": "end"},
    "right": {"speaker": "Dian", "expression": "worried", "text": "d", "next": "end"},
    "end": {"text": "e"},
}


class TestStructure:
    def test_good_chapter_passes(self, make_chapter):
        report = validate_chapter(make_chapter(GOOD_LINES), spirit_ids=["toyol"])
        assert report.ok, report.errors
        assert report.node_count == 5
        assert report.reachable_count == 5
        assert report.end_count == 1
        assert report.path_count == 2
        assert report.max_depth == 3
        assert report.warnings == []

    def test_missing_start_node(self, make_chapter):
        chapter = make_chapter(GOOD_LINES, start="ghost")
        assert check_start_node(chapter) == ['startNode "ghost" not found']
        assert not validate_chapter(chapter).ok

    def test_dangling_references(self, make_chapter):
        chapter = make_chapter(
            {
                "start": {"text": "a", "next": "nowhere"},
                "q": {"text": "b", "choices": [{"text": "x", "next": "void"}]},
            }
        )
        errors = check_references(chapter)
        assert 'start: next="nowhere" not found' in errors
        assert 'q: choice[0] next="void" not found' in errors

    def test_unreachable_nodes(self, make_chapter):
        lines = dict(GOOD_LINES, orphan={"text": "sendirian"})
        chapter = make_chapter(lines)
        assert find_unreachable(chapter) == ["orphan"]
        report = validate_chapter(chapter)
        assert any("unreachable" in e for e in report.errors)

    def test_terminal_counts(self, make_chapter):
        chapter = make_chapter(
            {
                "start": {"text": "a", "choices": [
                    {"text": "x", "next": "end"},
                    {"text": "y", "next": "fight"},
                ]},
                "end": {"text": "b"},
                "fight": {"text": "c", "battle": "toyol"},
            }
        )
        assert count_terminal_nodes(chapter) == (1, 1)

    def test_no_end_nodes(self, make_chapter):
        chapter = make_chapter(
            {"start": {"text": "a", "next": "b"}, "b": {"text": "b", "next": "start"}}
        )
        report = validate_chapter(chapter)
        assert any("no end nodes" in e for e in report.errors)
        assert any("Cycle detected" in e for e in report.errors)


class TestPathWalk:
    def test_merge_is_not_cycle(self, make_chapter):
        """분기 합류는 순환이 아니다"""
        result = walk_paths(make_chapter(GOOD_LINES))
        assert result.errors == []
        assert result.paths == 2

    def test_cycle_detected(self, make_chapter):
        chapter = make_chapter(
            {
                "start": {"text": "a", "choices": [
                    {"text": "lagi", "next": "start"},
                    {"text": "keluar", "next": "end"},
                ]},
                "end": {"text": "b"},
            }
        )
        result = walk_paths(chapter)
        assert result.paths == 1
        assert any("Cycle detected: start" in e for e in result.errors)

    def test_depth_limit(self, make_chapter):
        lines = {f"n{i}": {"text": "x", "next": f"n{i + 1}"} for i in range(10)}
        lines["n10"] = {"text": "end"}
        result = walk_paths(make_chapter(lines, start="n0"), max_depth=5)
        assert any("Exceeded max depth" in e for e in result.errors)
        assert result.paths == 0


class TestSpeakersAndBattles:
    def test_unknown_speaker(self, make_chapter):
        chapter = make_chapter({"start": {"speaker": "Hantu", "text": "boo"}})
        errors = check_speakers(chapter)
        assert errors == ['start: speaker "Hantu" has no portrait mapping']

    def test_unknown_expression(self, make_chapter):
        chapter = make_chapter({"start": {"speaker": "Mak", "expression": "smirk", "text": "x"}})
        errors = check_speakers(chapter)
        assert len(errors) == 1
        assert 'no expression "smirk"' in errors[0]

    def test_narration_without_speaker_ok(self, make_chapter):
        assert check_speakers(make_chapter({"start": {"text": "Sunyi."}})) == []

    def test_battle_not_in_catalog(self, make_chapter):
        chapter = make_chapter({"start": {"text": "x", "battle": "naga"}})
        errors, warnings = check_battles(chapter, ["toyol"])
        assert errors == ['start: battle="naga" not found in spirit catalog']
        assert warnings == []

    def test_battle_without_catalog_is_warning(self, make_chapter):
        chapter = make_chapter({"start": {"text": "x", "battle": "naga"}})
        errors, warnings = check_battles(chapter, None)
        assert errors == []
        assert len(warnings) == 1

    def test_battle_on_non_terminal_warns(self, make_chapter):
        chapter = make_chapter(
            {"start": {"text": "x", "battle": "toyol", "next": "end"}, "end": {"text": "y"}}
        )
        errors, warnings = check_battles(chapter, ["toyol"])
        assert errors == []
        assert any("never triggered" in w for w in warnings)

    def test_competing_next_and_choices(self, make_chapter):
        chapter = make_chapter(
            {
                "start": {"text": "x", "next": "end", "choices": [{"text": "a", "next": "end"}]},
                "end": {"text": "y"},
            }
        )
        warnings = check_competing_continuations(chapter)
        assert warnings == ['start: next="end" ignored because choices are present']
        report = validate_chapter(chapter)
        assert report.ok
        assert report.warnings == warnings


class TestFirstChoiceWalk:
    def test_walk_reaches_end(self, make_chapter):
        steps, issues = walk_first_choices(make_chapter(GOOD_LINES))
        assert issues == []
        assert steps == 3

    def test_walk_reports_missing_node(self, make_chapter):
        chapter = make_chapter({"start": {"text": "x", "next": "ghost"}})
        steps, issues = walk_first_choices(chapter)
        assert issues == ['Walk reached missing node "ghost"']

    def test_walk_step_limit(self, make_chapter):
        chapter = make_chapter(
            {"start": {"text": "a", "next": "b"}, "b": {"text": "b", "next": "start"}}
        )
        steps, issues = walk_first_choices(chapter, max_steps=10)
        assert steps == 10
        assert issues == ["Exceeded max steps, possible infinite loop"]
