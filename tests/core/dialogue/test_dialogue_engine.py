"""DialogueEngine 테스트 — 진행, 선택지, 플래그, 종료 판정"""

import pytest

from saka.core.dialogue.engine import DialogueEngine


@pytest.fixture()
def branching(make_chapter):
    return make_chapter(
        {
            "start": {"speaker": "Syafiq", "text": "Mula", "next": "ask"},
            "ask": {
                "text": "Pilih",
                "choices": [
                    {"text": "Kiri", "next": "left", "flag": "went-left"},
                    {"text": "Kanan", "next": "right"},
                ],
            },
            "left": {"text": "Kiri", "next": "end"},
            "right": {"text": "Kanan", "next": "end"},
            "end": {"text": "Tamat"},
        }
    )


class TestStartAndAdvance:
    def test_start_returns_start_node(self, branching):
        engine = DialogueEngine()
        engine.load_chapter(branching)
        line = engine.start()
        assert line is not None
        assert line.id == "start"
        assert engine.get_current_line() is line

    def test_start_without_chapter(self):
        engine = DialogueEngine()
        assert engine.start() is None
        assert engine.is_end() is True

    def test_start_with_missing_start_node(self, make_chapter):
        engine = DialogueEngine()
        engine.load_chapter(make_chapter({"a": {"text": "x"}}, start="nope"))
        assert engine.start() is None
        assert engine.is_end() is True

    def test_advance_linear(self, branching):
        engine = DialogueEngine()
        engine.load_chapter(branching)
        engine.start()
        line = engine.advance()
        assert line.id == "ask"

    def test_advance_on_choice_node_is_noop(self, branching):
        """선택지 노드에서 advance → 현재 노드 그대로"""
        engine = DialogueEngine()
        engine.load_chapter(branching)
        engine.start()
        ask = engine.advance()
        again = engine.advance()
        assert again is ask
        assert engine.get_current_line().id == "ask"

    def test_advance_on_terminal_returns_none_and_stays(self, make_chapter):
        engine = DialogueEngine()
        engine.load_chapter(make_chapter({"start": {"text": "Sahaja"}}))
        engine.start()
        assert engine.advance() is None
        assert engine.get_current_line().id == "start"
        assert engine.is_end() is True

    def test_advance_dangling_reference_ends(self, make_chapter):
        engine = DialogueEngine()
        engine.load_chapter(make_chapter({"start": {"text": "x", "next": "ghost"}}))
        engine.start()
        assert engine.advance() is None
        assert engine.get_current_line() is None
        assert engine.is_end() is True


class TestChoose:
    def _at_choice(self, chapter) -> DialogueEngine:
        engine = DialogueEngine()
        engine.load_chapter(chapter)
        engine.start()
        engine.advance()
        return engine

    def test_choose_moves_and_sets_flag(self, branching):
        engine = self._at_choice(branching)
        line = engine.choose(0)
        assert line.id == "left"
        assert engine.get_flag("went-left") is True

    def test_choose_without_flag(self, branching):
        engine = self._at_choice(branching)
        assert engine.choose(1).id == "right"
        assert engine.get_flag("went-left") is False

    @pytest.mark.parametrize("index", [-1, 2, 99])
    def test_choose_out_of_range_keeps_current(self, branching, index):
        engine = self._at_choice(branching)
        assert engine.choose(index) is None
        assert engine.get_current_line().id == "ask"
        assert engine.has_choices() is True

    def test_choose_on_linear_node(self, branching):
        engine = DialogueEngine()
        engine.load_chapter(branching)
        engine.start()
        assert engine.choose(0) is None
        assert engine.get_current_line().id == "start"

    def test_unknown_flag_defaults_false(self):
        assert DialogueEngine().get_flag("anything") is False


class TestEndAndLoad:
    def test_walk_to_end(self, branching):
        engine = DialogueEngine()
        engine.load_chapter(branching)
        engine.start()
        engine.advance()
        engine.choose(1)
        engine.advance()
        assert engine.get_current_line().id == "end"
        assert engine.is_end() is True

    def test_battle_terminal_counts_as_end(self, make_chapter):
        engine = DialogueEngine()
        engine.load_chapter(make_chapter({"start": {"text": "Lawan!", "battle": "toyol"}}))
        engine.start()
        assert engine.is_end() is True

    def test_load_resets_flags_and_position(self, branching, make_chapter):
        engine = DialogueEngine()
        engine.load_chapter(branching)
        engine.start()
        engine.advance()
        engine.choose(0)
        assert engine.get_flag("went-left") is True

        engine.load_chapter(make_chapter({"start": {"text": "baru"}}, chapter_id="other"))
        assert engine.get_flag("went-left") is False
        assert engine.get_current_line() is None

    def test_titles(self, branching):
        engine = DialogueEngine()
        assert engine.get_chapter_title() == ""
        assert engine.get_chapter_title_malay() == ""
        engine.load_chapter(branching)
        assert engine.get_chapter_title() == "Test"
        assert engine.get_chapter_title_malay() == "Ujian"
