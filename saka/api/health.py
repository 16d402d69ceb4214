"""Health check — DB 연결 + 챕터 콘텐츠 로드 여부"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from saka.core.logging import get_logger
from saka.db.database import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, object]:
    """DB 핑 결과와 로드된 챕터 수. 세션이 아직 없으면 chapters=0."""
    session = getattr(request.app.state, "game_session", None)
    chapters = session.registry.count() if session is not None else 0
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        return {"status": "error", "database": "disconnected", "chapters": chapters}
    return {"status": "ok", "database": "connected", "chapters": chapters}
