"""Shared test fixtures."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from saka.core.dialogue.models import Chapter
from saka.core.dialogue.registry import ChapterRegistry
from saka.core.event_bus import EventBus
from saka.core.spirit.registry import SpiritCatalog
from saka.db.database import get_db, init_db, make_engine
from saka.main import app

DATA_DIR = Path(__file__).resolve().parents[1] / "saka" / "data"
CHAPTERS_DIR = DATA_DIR / "chapters"
SPIRITS_FILE = DATA_DIR / "spirits.json"

TEST_ENGINE = make_engine("sqlite:///:memory:")
TestSession = sessionmaker(bind=TEST_ENGINE, autocommit=False, autoflush=False)


def _override_get_db():
    db = TestSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture()
def client() -> TestClient:
    """FastAPI TestClient wired to an in-memory SQLite database."""
    return TestClient(app)


@pytest.fixture()
def db_session() -> Session:
    """저장 슬롯 테이블이 있는 독립 인메모리 DB 세션"""
    engine = make_engine("sqlite:///:memory:")
    init_db(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture(scope="session")
def bundled_registry() -> ChapterRegistry:
    """saka/data/chapters 전체"""
    registry = ChapterRegistry()
    registry.load_from_dir(CHAPTERS_DIR)
    return registry


@pytest.fixture(scope="session")
def spirit_catalog() -> SpiritCatalog:
    catalog = SpiritCatalog()
    catalog.load_from_json(SPIRITS_FILE)
    return catalog


@pytest.fixture()
def make_chapter():
    """테스트용 챕터 팩토리 (wire 형식 lines dict에서)"""

    def _make(lines: dict, chapter_id: str = "test", start: str = "start") -> Chapter:
        return Chapter.from_dict(
            {
                "id": chapter_id,
                "title": "Test",
                "titleMalay": "Ujian",
                "startNode": start,
                "lines": lines,
            }
        )

    return _make
