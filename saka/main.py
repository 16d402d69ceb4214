"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from saka.api.game import battle_router, dialogue_router
from saka.api.game import router as game_router
from saka.api.health import router as health_router
from saka.config import settings
from saka.core.logging import get_logger, setup_logging
from saka.db.database import SessionLocal, init_db
from saka.db.database import engine as db_engine
from saka.engine.game_session import GameSession

setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    init_db(db_engine)
    logger.info("Database tables created.")

    # GameSession 초기화 (챕터 + Spirit 카탈로그 로드, 저장 슬롯 복원)
    logger.info("Initializing GameSession...")
    db_session = SessionLocal()
    game_session = GameSession.from_settings(db_session)
    app.state.game_session = game_session
    logger.info(
        "GameSession initialized (%d chapters, day %d).",
        game_session.registry.count(),
        game_session.progress.get_game_state().day,
    )

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    db_session.close()


app = FastAPI(title="SAKA", lifespan=lifespan)

app.include_router(health_router)
app.include_router(game_router)
app.include_router(dialogue_router)
app.include_router(battle_router)
