from sqlalchemy import Integer, event
from sqlalchemy.orm import Mapped, mapped_column

from classweek.db.base import Base

WEEKDAYS = range(1, 8)


class ScheduleDayLock(Base):
    """One row per weekday, written before a create reads that day's sessions.

    The write takes a row lock on Postgres and the database write lock on
    SQLite, so check-then-insert runs one request at a time per day.
    """

    __tablename__ = "schedule_day_locks"

    day_of_week: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


@event.listens_for(ScheduleDayLock.__table__, "after_create")
def seed_day_locks(target, connection, **kw) -> None:
    connection.execute(target.insert(), [{"day_of_week": day, "version": 0} for day in WEEKDAYS])
