from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from classweek.core.config import get_settings
from classweek.core.exceptions import ResourceNotFoundError, ScheduleValidationError, SessionConflictError
from classweek.models.course import Course
from classweek.models.enrollment import Enrollment
from classweek.models.schedule_day_lock import ScheduleDayLock
from classweek.models.teacher import Teacher
from classweek.models.teaching_session import TeachingSession
from classweek.models.user import User, UserRole
from classweek.schemas.batch import BatchRejection, SessionBatchResult
from classweek.schemas.conflict import ConflictResult
from classweek.schemas.session import SessionBatchCreate, SessionDraft, SessionOut, day_label
from classweek.schemas.teacher import CourseWithSessions, TeacherWithCourses
from classweek.services.conflict_detector import detect_conflict
from classweek.services.session_validation import ensure_within_grid_hours

logger = logging.getLogger(__name__)

settings = get_settings()


def _session_order():
    return (TeachingSession.day_of_week, TeachingSession.start_time, TeachingSession.end_time)


def to_session_out(
    row: TeachingSession,
    course: Course | None,
    teacher: Teacher | None,
) -> SessionOut:
    return SessionOut(
        id=row.id,
        course_id=row.course_id,
        course_code=course.code if course is not None else None,
        course_name=course.name if course is not None else row.course_id,
        teacher_id=course.teacher_id if course is not None else None,
        teacher_name=teacher.name if teacher is not None else None,
        day_of_week=row.day_of_week,
        day_label=day_label(row.day_of_week, settings.day_labels_locale),
        start_time=row.start_time,
        end_time=row.end_time,
        room=row.room,
        session_type=row.session_type,
    )


def hydrate_sessions(db: Session, rows: Iterable[TeachingSession]) -> list[SessionOut]:
    """Attach course and teacher display fields to persisted rows."""
    rows = list(rows)
    if not rows:
        return []
    course_ids = {row.course_id for row in rows}
    courses = {
        course.id: course
        for course in db.execute(select(Course).where(Course.id.in_(course_ids))).scalars()
    }
    teacher_ids = {course.teacher_id for course in courses.values() if course.teacher_id}
    teachers = (
        {teacher.id: teacher for teacher in db.execute(select(Teacher).where(Teacher.id.in_(teacher_ids))).scalars()}
        if teacher_ids
        else {}
    )
    result = []
    for row in rows:
        course = courses.get(row.course_id)
        teacher = teachers.get(course.teacher_id) if course is not None and course.teacher_id else None
        result.append(to_session_out(row, course, teacher))
    return result


def get_course(db: Session, course_id: str) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    return course


def list_course_sessions(db: Session, course_id: str) -> list[SessionOut]:
    get_course(db, course_id)
    rows = db.execute(
        select(TeachingSession).where(TeachingSession.course_id == course_id).order_by(*_session_order())
    ).scalars()
    return hydrate_sessions(db, rows)


def list_sessions_for_courses(db: Session, course_ids: Sequence[str]) -> list[SessionOut]:
    if not course_ids:
        return []
    rows = db.execute(
        select(TeachingSession).where(TeachingSession.course_id.in_(course_ids)).order_by(*_session_order())
    ).scalars()
    return hydrate_sessions(db, rows)


def list_teacher_sessions(db: Session, teacher_id: str) -> list[SessionOut]:
    course_ids = list(db.execute(select(Course.id).where(Course.teacher_id == teacher_id)).scalars())
    return list_sessions_for_courses(db, course_ids)


def list_sessions_for_user(db: Session, user: User) -> list[SessionOut]:
    if user.role == UserRole.admin:
        rows = db.execute(select(TeachingSession).order_by(*_session_order())).scalars()
        return hydrate_sessions(db, rows)
    if user.role == UserRole.teacher:
        if not user.teacher_id:
            return []
        return list_teacher_sessions(db, user.teacher_id)
    course_ids = list(db.execute(select(Enrollment.course_id).where(Enrollment.user_id == user.id)).scalars())
    return list_sessions_for_courses(db, course_ids)


def _teacher_with_courses(
    teacher: Teacher,
    courses: Sequence[Course],
    sessions_by_course: dict[str, list[SessionOut]],
) -> TeacherWithCourses:
    return TeacherWithCourses(
        id=teacher.id,
        name=teacher.name,
        email=teacher.email,
        department=teacher.department,
        courses=[
            CourseWithSessions(
                id=course.id,
                code=course.code,
                name=course.name,
                credits=course.credits,
                hours_per_week=course.hours_per_week,
                cycle=course.cycle,
                sessions=sessions_by_course.get(course.id, []),
            )
            for course in courses
        ],
    )


def list_teachers_with_courses(db: Session, teacher_id: str | None = None) -> list[TeacherWithCourses]:
    query = select(Teacher).order_by(Teacher.name)
    if teacher_id is not None:
        query = query.where(Teacher.id == teacher_id)
    teachers = list(db.execute(query).scalars())
    if not teachers:
        return []
    courses = list(
        db.execute(
            select(Course)
            .where(Course.teacher_id.in_([teacher.id for teacher in teachers]))
            .order_by(Course.cycle, Course.name)
        ).scalars()
    )
    sessions_by_course: dict[str, list[SessionOut]] = {}
    for session in list_sessions_for_courses(db, [course.id for course in courses]):
        sessions_by_course.setdefault(session.course_id, []).append(session)

    courses_by_teacher: dict[str, list[Course]] = {}
    for course in courses:
        courses_by_teacher.setdefault(course.teacher_id, []).append(course)
    return [
        _teacher_with_courses(teacher, courses_by_teacher.get(teacher.id, []), sessions_by_course)
        for teacher in teachers
    ]


def get_teacher_with_courses(db: Session, teacher_id: str) -> TeacherWithCourses:
    listing = list_teachers_with_courses(db, teacher_id=teacher_id)
    if not listing:
        raise ResourceNotFoundError("Teacher", teacher_id)
    return listing[0]


def _same_day_snapshot(db: Session, day_of_week: int) -> list[SessionOut]:
    rows = db.execute(
        select(TeachingSession).where(TeachingSession.day_of_week == day_of_week).order_by(*_session_order())
    ).scalars()
    return hydrate_sessions(db, rows)


def _lock_schedule_days(db: Session, days: Iterable[int]) -> None:
    """Write the lock row of each day before its snapshot is read.

    Must be the first write of the transaction. Days are locked in ascending
    order so two batches never wait on each other.
    """
    for day_of_week in sorted(set(days)):
        result = db.execute(
            update(ScheduleDayLock)
            .where(ScheduleDayLock.day_of_week == day_of_week)
            .values(version=ScheduleDayLock.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.add(ScheduleDayLock(day_of_week=day_of_week, version=1))
            db.flush()


def check_session(db: Session, draft: SessionDraft) -> ConflictResult:
    course = get_course(db, draft.course_id)
    ensure_within_grid_hours(draft, settings.grid_start_hour, settings.grid_end_hour)
    candidate = draft.for_teacher(course.teacher_id)
    return detect_conflict(candidate, _same_day_snapshot(db, draft.day_of_week))


def _insert_session(db: Session, draft: SessionDraft, course: Course) -> SessionOut:
    row = TeachingSession(
        course_id=draft.course_id,
        day_of_week=draft.day_of_week,
        start_time=draft.start_time,
        end_time=draft.end_time,
        room=draft.room,
        session_type=draft.session_type,
    )
    db.add(row)
    db.flush()
    teacher = db.get(Teacher, course.teacher_id) if course.teacher_id else None
    return to_session_out(row, course, teacher)


def create_session(db: Session, draft: SessionDraft) -> SessionOut:
    course = get_course(db, draft.course_id)
    ensure_within_grid_hours(draft, settings.grid_start_hour, settings.grid_end_hour)
    _lock_schedule_days(db, [draft.day_of_week])

    result = detect_conflict(draft.for_teacher(course.teacher_id), _same_day_snapshot(db, draft.day_of_week))
    if result.has_conflict:
        db.rollback()
        logger.info(
            "Rejected session for course %s on day %s %s-%s: %s",
            draft.course_id,
            draft.day_of_week,
            draft.start_time,
            draft.end_time,
            result.reason.value,
        )
        raise SessionConflictError(result)

    created = _insert_session(db, draft, course)
    db.commit()
    logger.info(
        "Created session %s for course %s on day %s %s-%s",
        created.id,
        created.course_id,
        created.day_of_week,
        created.start_time,
        created.end_time,
    )
    return created


def create_sessions_batch(db: Session, payload: SessionBatchCreate) -> SessionBatchResult:
    """Create several sessions of one course in a single transaction.

    Each draft is checked against the persisted sessions and the ones
    accepted earlier in the same batch; rejected drafts are reported by index
    and do not block the others.
    """
    course = get_course(db, payload.course_id)
    drafts = payload.drafts()
    _lock_schedule_days(db, [draft.day_of_week for draft in drafts])

    snapshots: dict[int, list[SessionOut]] = {}
    result = SessionBatchResult()
    for index, draft in enumerate(drafts):
        try:
            ensure_within_grid_hours(draft, settings.grid_start_hour, settings.grid_end_hour)
        except ScheduleValidationError as exc:
            result.rejected.append(BatchRejection(index=index, message=exc.message))
            continue
        if draft.day_of_week not in snapshots:
            snapshots[draft.day_of_week] = _same_day_snapshot(db, draft.day_of_week)
        snapshot = snapshots[draft.day_of_week]
        conflict = detect_conflict(draft.for_teacher(course.teacher_id), snapshot)
        if conflict.has_conflict:
            result.rejected.append(BatchRejection(index=index, message=conflict.message, conflict=conflict))
            continue
        created = _insert_session(db, draft, course)
        snapshot.append(created)
        result.created.append(created)

    db.commit()
    logger.info(
        "Batch for course %s: %d created, %d rejected",
        payload.course_id,
        len(result.created),
        len(result.rejected),
    )
    return result


def delete_session(db: Session, session_id: str) -> None:
    row = db.get(TeachingSession, session_id)
    if row is None:
        raise ResourceNotFoundError("Session", session_id)
    course_id = row.course_id
    db.delete(row)
    db.commit()
    logger.info("Deleted session %s of course %s", session_id, course_id)
