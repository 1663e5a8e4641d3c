import threading
import time

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from classweek.core.exceptions import SessionConflictError
from classweek.db.base import Base
from classweek.models import ScheduleDayLock, TeachingSession
from classweek.schemas.session import SessionDraft
from classweek.services import schedule_service

from factories import add_course, add_teacher


@pytest.fixture()
def file_session_factory(tmp_path):
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'classweek.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def run_creates(factory, drafts):
    barrier = threading.Barrier(len(drafts))
    outcomes = [None] * len(drafts)

    def worker(index, draft):
        db = factory()
        try:
            barrier.wait(timeout=10)
            schedule_service.create_session(db, draft)
            outcomes[index] = "created"
        except SessionConflictError:
            outcomes[index] = "conflict"
        finally:
            db.close()

    threads = [threading.Thread(target=worker, args=(index, draft)) for index, draft in enumerate(drafts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


def test_day_lock_rows_are_seeded(file_session_factory):
    with file_session_factory() as db:
        days = list(db.execute(select(ScheduleDayLock.day_of_week).order_by(ScheduleDayLock.day_of_week)).scalars())

    assert days == [1, 2, 3, 4, 5, 6, 7]


def test_concurrent_overlapping_creates_persist_only_one(file_session_factory, monkeypatch):
    with file_session_factory() as db:
        course = add_course(db, "CS101", "Algoritmos", add_teacher(db))
        course_id = course.id

    read_snapshot = schedule_service._same_day_snapshot

    def slow_snapshot(db, day_of_week):
        snapshot = read_snapshot(db, day_of_week)
        # Widen the gap between reading the day and inserting into it.
        time.sleep(0.3)
        return snapshot

    monkeypatch.setattr(schedule_service, "_same_day_snapshot", slow_snapshot)

    drafts = [
        SessionDraft(course_id=course_id, day_of_week=1, start_time="08:00", end_time="10:00", session_type="theory"),
        SessionDraft(course_id=course_id, day_of_week=1, start_time="09:00", end_time="11:00", session_type="theory"),
    ]
    outcomes = run_creates(file_session_factory, drafts)

    assert sorted(outcomes) == ["conflict", "created"]
    with file_session_factory() as db:
        assert db.query(TeachingSession).count() == 1


def test_concurrent_room_only_collision_persists_only_one(file_session_factory, monkeypatch):
    with file_session_factory() as db:
        first = add_course(db, "CS101", "Algoritmos", add_teacher(db, "Ana Torres"))
        second = add_course(db, "CS201", "Redes", add_teacher(db, "Bruno Díaz"))
        course_ids = [first.id, second.id]

    read_snapshot = schedule_service._same_day_snapshot

    def slow_snapshot(db, day_of_week):
        snapshot = read_snapshot(db, day_of_week)
        time.sleep(0.3)
        return snapshot

    monkeypatch.setattr(schedule_service, "_same_day_snapshot", slow_snapshot)

    drafts = [
        SessionDraft(
            course_id=course_id,
            day_of_week=3,
            start_time="14:00",
            end_time="16:00",
            room="301",
            session_type="practice",
        )
        for course_id in course_ids
    ]
    outcomes = run_creates(file_session_factory, drafts)

    assert sorted(outcomes) == ["conflict", "created"]
    with file_session_factory() as db:
        assert db.query(TeachingSession).count() == 1
