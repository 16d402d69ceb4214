"""Validate chapter JSON files and the tutorial flow.

Usage:
    python -m saka.tools.validate_chapters [--chapters DIR] [--spirits FILE]

Exit code 1 when any chapter fails or the tutorial simulation breaks.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from sqlalchemy.orm import sessionmaker

from saka.config import settings
from saka.core.dialogue.models import Chapter
from saka.core.dialogue.registry import ChapterRegistry
from saka.core.dialogue.validation import MAX_WALK_STEPS, ChapterReport, validate_chapter
from saka.core.logging import setup_logging
from saka.core.spirit.registry import SpiritCatalog
from saka.core.story.models import ChapterOutcome, LoadChapter, ReturnToHub, StartBattle
from saka.db.database import init_db, make_engine
from saka.engine.game_session import GameSession

TUTORIAL_START = "chapter1"
TUTORIAL_BATTLE_ENEMY = "toyol"

# (재생한 챕터, 기대 outcome)
EXPECTED_TUTORIAL_FLOW: list[tuple[str, str]] = [
    ("chapter1", "load_chapter:tutorial-wake"),
    ("tutorial-wake", "load_chapter:tutorial-dian"),
    ("tutorial-dian", "start_battle:toyol"),
    ("tutorial-dian", "load_chapter:tutorial-capture"),  # 전투 승리 후
    ("tutorial-capture", "return_to_hub"),
]


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate SAKA chapter content.")
    parser.add_argument(
        "--chapters",
        default=settings.CHAPTERS_DIR,
        help="Directory containing chapter *.json files.",
    )
    parser.add_argument(
        "--spirits",
        default=settings.SPIRITS_FILE,
        help="Spirit catalog JSON used to check battle tags.",
    )
    parser.add_argument(
        "--skip-tutorial",
        action="store_true",
        help="Only validate chapter graphs.",
    )
    return parser.parse_args(argv)


def load_spirit_catalog(path: Path) -> Optional[SpiritCatalog]:
    """카탈로그를 못 읽으면 None (battle 태그 검사는 경고로 강등)"""
    catalog = SpiritCatalog()
    try:
        catalog.load_from_json(path)
    except (OSError, TypeError, ValueError) as exc:
        print(f"⚠️  Spirit catalog unavailable ({path}): {exc}")
        return None
    return catalog


def load_chapters(directory: Path) -> tuple[ChapterRegistry, list[str]]:
    """디렉터리의 챕터 로드. JSON 파싱 실패는 실패 목록으로."""
    registry = ChapterRegistry()
    failures: list[str] = []
    for path in sorted(directory.glob("*.json")):
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            failures.append(f"{path.name}: cannot parse JSON ({exc})")
            continue
        if not isinstance(raw, dict) or not raw.get("id"):
            failures.append(f"{path.name}: missing chapter id")
            continue
        try:
            chapter = Chapter.from_dict(raw)
        except ValueError as exc:
            failures.append(f"{path.name}: malformed chapter ({exc})")
            continue
        registry.register(chapter)
    return registry, failures


def format_report(report: ChapterReport) -> list[str]:
    status = "✅" if report.ok else "❌"
    lines = [
        f"{status} {report.chapter_id}: {report.node_count} nodes, "
        f"{report.end_count} ends, {report.battle_end_count} battle ends, "
        f"{report.path_count} paths (max depth {report.max_depth}), "
        f"walk {report.walk_steps} steps"
    ]
    lines.extend(f"    ERROR: {error}" for error in report.errors)
    lines.extend(f"    WARN:  {warning}" for warning in report.warnings)
    return lines


# --- 튜토리얼 시뮬레이션 ---


def _describe(outcome: Optional[ChapterOutcome]) -> str:
    if isinstance(outcome, LoadChapter):
        return f"load_chapter:{outcome.chapter_id}"
    if isinstance(outcome, StartBattle):
        return f"start_battle:{outcome.enemy_id}"
    if isinstance(outcome, ReturnToHub):
        return "return_to_hub"
    return "none"


def _play_to_end(session: GameSession) -> bool:
    """첫 번째 선택지만 골라 챕터 끝까지. 끝에 도달하면 True."""
    engine = session.director.engine
    for _ in range(MAX_WALK_STEPS):
        if engine.is_end():
            return True
        if engine.has_choices():
            session.choose(0)
        else:
            session.advance()
    return engine.is_end()


def simulate_tutorial(
    registry: ChapterRegistry, catalog: Optional[SpiritCatalog] = None
) -> list[str]:
    """인메모리 DB 위에서 실제 세션으로 튜토리얼을 끝까지 진행. 반환: 오류 목록."""
    db_engine = make_engine("sqlite:///:memory:")
    init_db(db_engine)
    db = sessionmaker(bind=db_engine)()

    errors: list[str] = []
    try:
        session = GameSession(db, registry, catalog)
        played: list[tuple[str, str]] = []

        chapter_id: Optional[str] = TUTORIAL_START
        while chapter_id is not None and len(played) < len(EXPECTED_TUTORIAL_FLOW):
            if session.start_chapter(chapter_id) is None:
                errors.append(f"Chapter not found: {chapter_id}")
                break
            if not _play_to_end(session):
                errors.append(f"{chapter_id}: did not reach an end node")
                break

            outcome = session.finish_chapter()
            played.append((chapter_id, _describe(outcome)))

            if isinstance(outcome, StartBattle):
                outcome = session.report_battle(victory=True, captured=True)
                played.append((chapter_id, _describe(outcome)))

            chapter_id = outcome.chapter_id if isinstance(outcome, LoadChapter) else None

        if not errors and played != EXPECTED_TUTORIAL_FLOW:
            errors.append(
                "Tutorial flow mismatch: "
                + " -> ".join(f"{c}={o}" for c, o in played)
            )

        progress = session.progress
        if not errors:
            if not progress.is_tutorial_completed():
                errors.append("Tutorial not marked complete")
            if "tangga" not in progress.get_game_state().unlocked_locations:
                errors.append("tangga not unlocked after tutorial")
            if TUTORIAL_BATTLE_ENEMY not in progress.get_game_state().captured_spirits:
                errors.append(f"{TUTORIAL_BATTLE_ENEMY} not captured")
    finally:
        db.close()
        db_engine.dispose()

    return errors


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging("WARNING")

    chapters_dir = Path(args.chapters)
    if not chapters_dir.is_dir():
        print(f"Chapters directory not found: {chapters_dir}")
        return 1

    catalog = load_spirit_catalog(Path(args.spirits))
    spirit_ids = catalog.ids() if catalog is not None else None

    registry, load_failures = load_chapters(chapters_dir)

    passed = failed = warned = 0
    for failure in load_failures:
        print(f"❌ {failure}")
        failed += 1

    for chapter in registry.get_all():
        report = validate_chapter(chapter, spirit_ids)
        for line in format_report(report):
            print(line)
        if report.ok:
            passed += 1
        else:
            failed += 1
        warned += len(report.warnings)

    if not args.skip_tutorial:
        tutorial_errors = simulate_tutorial(registry, catalog)
        if tutorial_errors:
            print("❌ tutorial flow")
            for error in tutorial_errors:
                print(f"    ERROR: {error}")
            failed += 1
        else:
            print("✅ tutorial flow: chapter1 -> tutorial-wake -> tutorial-dian -> "
                  "battle(toyol) -> tutorial-capture -> hub")
            passed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed, {warned} warnings")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
