"""SQLAlchemy declarative base + 저장 슬롯 테이블"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class SaveSlotModel(Base):
    """키-값 저장 슬롯. payload는 JSON 텍스트.

    slot_key 예: "saka-game-state", "saka-quest-state"
    """

    __tablename__ = "save_slots"

    slot_key: Mapped[str] = mapped_column(String, primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
