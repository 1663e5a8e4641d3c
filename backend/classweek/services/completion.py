from __future__ import annotations

from collections.abc import Sequence

from classweek.schemas.teacher import BOARD_TITLES, BoardColumn, CompletionState, ScheduleBoard, TeacherWithCourses


def classify(teacher: TeacherWithCourses) -> CompletionState:
    if teacher.total_assigned_sessions == 0:
        return CompletionState.no_schedule
    if all(course.sessions for course in teacher.courses):
        return CompletionState.complete
    return CompletionState.in_progress


def matches_search(teacher: TeacherWithCourses, term: str) -> bool:
    needle = term.casefold()
    if needle in teacher.name.casefold():
        return True
    return any(needle in course.name.casefold() for course in teacher.courses)


def build_board(teachers: Sequence[TeacherWithCourses], search: str | None = None) -> ScheduleBoard:
    """Bucket teachers into the three completion columns, keeping source order.

    Totals always describe the whole listing; ``search`` only narrows the
    columns.
    """
    term = (search or "").strip()
    visible = [teacher for teacher in teachers if not term or matches_search(teacher, term)]

    buckets: dict[CompletionState, list[TeacherWithCourses]] = {state: [] for state in CompletionState}
    for teacher in visible:
        buckets[classify(teacher)].append(teacher)

    return ScheduleBoard(
        search=term or None,
        total_teachers=len(teachers),
        total_courses=sum(teacher.total_courses for teacher in teachers),
        total_sessions=sum(teacher.total_assigned_sessions for teacher in teachers),
        columns=[
            BoardColumn(state=state, title=BOARD_TITLES[state], teachers=buckets[state])
            for state in CompletionState
        ],
    )
