"""챕터 저장소 — 디렉터리의 챕터 JSON 로드"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .models import Chapter

logger = logging.getLogger(__name__)


class ChapterRegistry:
    """
    챕터 저장소.
    chapters/*.json 로드 + 테스트용 동적 등록.
    """

    def __init__(self) -> None:
        self._chapters: dict[str, Chapter] = {}

    def load_from_dir(self, path: str | Path) -> int:
        """디렉터리의 *.json 전체 로드. 반환: 로드된 챕터 수.

        파싱 실패 파일은 경고 후 건너뛴다 (검증 CLI가 따로 실패 처리).
        """
        directory = Path(path)
        if not directory.is_dir():
            logger.warning("Chapters directory not found: %s", directory)
            return 0

        count = 0
        for file_path in sorted(directory.glob("*.json")):
            chapter = self.load_file(file_path)
            if chapter is not None:
                count += 1

        logger.info("Loaded %d chapters from %s", count, directory)
        return count

    def load_file(self, path: str | Path) -> Optional[Chapter]:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load chapter file %s: %s", path, e)
            return None

        if not isinstance(raw, dict) or not raw.get("id"):
            logger.warning("Chapter file %s has no id, skipped", path)
            return None

        try:
            chapter = Chapter.from_dict(raw)
        except ValueError as e:
            logger.warning("Malformed chapter file %s: %s", path, e)
            return None
        self.register(chapter)
        return chapter

    def register(self, chapter: Chapter) -> None:
        """챕터 등록. 이미 존재하는 id면 경고 로그 후 덮어쓴다."""
        if chapter.id in self._chapters:
            logger.warning("Overwriting existing chapter: %s", chapter.id)
        self._chapters[chapter.id] = chapter

    def get(self, chapter_id: str) -> Optional[Chapter]:
        return self._chapters.get(chapter_id)

    def get_all(self) -> list[Chapter]:
        return list(self._chapters.values())

    def ids(self) -> list[str]:
        return list(self._chapters)

    def count(self) -> int:
        return len(self._chapters)
