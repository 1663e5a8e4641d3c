import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from classweek.db.base import Base


class SessionType(str, Enum):
    theory = "theory"
    practice = "practice"


class TeachingSession(Base):
    """One weekly occurrence of a course.

    Rows are never updated: an edit deletes the row and inserts a new one,
    so there is no ``updated_at`` column.
    """

    __tablename__ = "teaching_sessions"
    __table_args__ = (
        Index("ix_teaching_sessions_day_start", "day_of_week", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    room: Mapped[str | None] = mapped_column(String(50), nullable=True)
    session_type: Mapped[SessionType] = mapped_column(SAEnum(SessionType, name="session_type"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
