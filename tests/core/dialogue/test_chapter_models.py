"""챕터 모델 + ChapterRegistry 테스트"""

import json

import pytest

from saka.core.dialogue.models import Chapter, DialogueLine
from saka.core.dialogue.registry import ChapterRegistry

RAW_CHAPTER = {
    "id": "sample",
    "title": "Sample",
    "titleMalay": "Contoh",
    "startNode": "a",
    "lines": {
        "a": {"speaker": "Dian", "expression": "happy", "text": "Hai", "next": "b"},
        "b": {
            "text": "Pilih",
            "choices": [{"text": "Ya", "next": "c", "flag": "said-yes"}],
        },
        "c": {"text": "Lawan", "battle": "toyol", "background": "stairwell"},
    },
}


class TestChapterFromDict:
    def test_wire_keys(self):
        chapter = Chapter.from_dict(RAW_CHAPTER)
        assert chapter.id == "sample"
        assert chapter.title_malay == "Contoh"
        assert chapter.start_node == "a"
        assert set(chapter.lines) == {"a", "b", "c"}

    def test_line_fields(self):
        chapter = Chapter.from_dict(RAW_CHAPTER)
        a = chapter.get_line("a")
        assert a.speaker == "Dian"
        assert a.expression == "happy"
        assert a.next == "b"
        b = chapter.get_line("b")
        assert b.has_choices
        assert b.choices[0].flag == "said-yes"
        c = chapter.get_line("c")
        assert c.battle == "toyol"
        assert c.is_terminal

    def test_get_line_missing(self):
        chapter = Chapter.from_dict(RAW_CHAPTER)
        assert chapter.get_line("zzz") is None
        assert chapter.get_line(None) is None

    def test_lines_must_be_object(self):
        with pytest.raises(ValueError):
            Chapter.from_dict({"id": "bad", "startNode": "a", "lines": ["a"]})

    def test_choices_must_be_list(self):
        with pytest.raises(ValueError):
            DialogueLine.from_dict("x", {"text": "?", "choices": 5})

    def test_lenient_missing_fields(self):
        line = DialogueLine.from_dict("x", {})
        assert line.text == ""
        assert line.speaker is None
        assert line.is_terminal

    def test_to_dict_keeps_wire_format(self):
        data = Chapter.from_dict(RAW_CHAPTER).to_dict()
        assert data["titleMalay"] == "Contoh"
        assert data["startNode"] == "a"
        assert data["lines"]["c"]["battle"] == "toyol"
        assert "id" not in data["lines"]["a"]


class TestChapterRegistry:
    def test_load_from_dir(self, tmp_path):
        (tmp_path / "sample.json").write_text(json.dumps(RAW_CHAPTER), encoding="utf-8")
        registry = ChapterRegistry()
        assert registry.load_from_dir(tmp_path) == 1
        assert registry.get("sample") is not None
        assert registry.ids() == ["sample"]

    def test_broken_file_skipped(self, tmp_path):
        (tmp_path / "good.json").write_text(json.dumps(RAW_CHAPTER), encoding="utf-8")
        (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
        registry = ChapterRegistry()
        assert registry.load_from_dir(tmp_path) == 1
        assert registry.count() == 1

    def test_malformed_lines_skipped(self, tmp_path):
        (tmp_path / "good.json").write_text(json.dumps(RAW_CHAPTER), encoding="utf-8")
        bad = {"id": "bad", "startNode": "a", "lines": ["a"]}
        (tmp_path / "bad.json").write_text(json.dumps(bad), encoding="utf-8")
        registry = ChapterRegistry()
        assert registry.load_from_dir(tmp_path) == 1
        assert registry.get("bad") is None

    def test_file_without_id_skipped(self, tmp_path):
        path = tmp_path / "noid.json"
        path.write_text(json.dumps({"title": "x"}), encoding="utf-8")
        assert ChapterRegistry().load_file(path) is None

    def test_missing_dir(self, tmp_path):
        assert ChapterRegistry().load_from_dir(tmp_path / "nope") == 0

    def test_register_overwrites(self):
        registry = ChapterRegistry()
        registry.register(Chapter.from_dict(RAW_CHAPTER))
        replacement = Chapter.from_dict(dict(RAW_CHAPTER, title="Baru"))
        registry.register(replacement)
        assert registry.get("sample").title == "Baru"
        assert registry.count() == 1
