"""DB 엔진/세션 구성 — 저장 슬롯 테이블 하나뿐인 SQLite가 기본"""

from collections.abc import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from saka.config import settings
from saka.db.models import Base


def make_engine(url: str, echo: bool = False) -> Engine:
    """URL에 맞는 엔진 생성.

    SQLite는 스레드 검사를 끄고, 인메모리 DB는 모든 세션이 같은 연결을
    보도록 StaticPool을 쓴다 (검증 CLI의 튜토리얼 시뮬레이션, 테스트).
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo)
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    return create_engine(url, connect_args={"check_same_thread": False}, echo=echo)


def init_db(bind: Engine) -> None:
    """save_slots 테이블 생성 (이미 있으면 그대로)"""
    Base.metadata.create_all(bind=bind)


engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """요청마다 세션 하나. FastAPI 의존성으로 사용."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
