from __future__ import annotations

from collections.abc import Sequence

from classweek.schemas.conflict import ConflictReason, ConflictResult
from classweek.schemas.session import SessionCandidate, SessionOut


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # Half-open: a session ending at 10:00 and one starting at 10:00 do not touch.
    return start_a < end_b and start_b < end_a


def shared_owner(candidate: SessionCandidate, other: SessionOut) -> ConflictReason | None:
    if candidate.teacher_id and other.teacher_id == candidate.teacher_id:
        return ConflictReason.same_teacher
    if candidate.room and other.room and other.room == candidate.room:
        return ConflictReason.same_room
    return None


def find_conflicts(candidate: SessionCandidate, existing: Sequence[SessionOut]) -> list[tuple[SessionOut, ConflictReason]]:
    """Every session in ``existing`` that collides with ``candidate``, earliest first."""
    start, end = candidate.start_minutes, candidate.end_minutes
    hits: list[tuple[SessionOut, ConflictReason]] = []
    for session in existing:
        if session.day_of_week != candidate.day_of_week:
            continue
        if candidate.id is not None and session.id == candidate.id:
            continue
        reason = shared_owner(candidate, session)
        if reason is None:
            continue
        if intervals_overlap(start, end, session.start_minutes, session.end_minutes):
            hits.append((session, reason))
    hits.sort(key=lambda hit: (hit[0].start_minutes, hit[0].end_minutes))
    return hits


def describe_owner(session: SessionOut, reason: ConflictReason) -> str:
    if reason == ConflictReason.same_teacher:
        return f"teacher {session.teacher_name or session.teacher_id}"
    return f"room {session.room}"


def conflict_message(session: SessionOut, reason: ConflictReason) -> str:
    return (
        f"Schedule conflict with {session.course_name} on {session.day_label} "
        f"{session.start_time}-{session.end_time}: {describe_owner(session, reason)} is already booked"
    )


def detect_conflict(candidate: SessionCandidate, existing: Sequence[SessionOut]) -> ConflictResult:
    hits = find_conflicts(candidate, existing)
    if not hits:
        return ConflictResult.no_conflict()
    session, reason = hits[0]
    return ConflictResult.conflict(
        with_session=session,
        reason=reason,
        owner_description=describe_owner(session, reason),
        message=conflict_message(session, reason),
    )
