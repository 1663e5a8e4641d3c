import pytest

from classweek.schemas.teacher import CompletionState, CourseWithSessions, TeacherWithCourses
from classweek.services.completion import build_board, classify

from factories import make_session


def course(course_id, name=None, sessions=0):
    return CourseWithSessions(
        id=course_id,
        code=course_id.upper(),
        name=name or f"Course {course_id}",
        sessions=[
            make_session(f"{course_id}-s{index}", 1 + index, "08:00", "10:00", course_id=course_id)
            for index in range(sessions)
        ],
    )


def teacher(teacher_id, name, *courses):
    return TeacherWithCourses(id=teacher_id, name=name, courses=list(courses))


def test_teacher_with_some_courses_scheduled_is_in_progress():
    value = teacher("t1", "Ana Torres", course("c1", sessions=2), course("c2"), course("c3", sessions=1))

    assert classify(value) == CompletionState.in_progress
    assert value.total_assigned_sessions == 3
    assert value.courses_with_sessions == 2
    assert value.progress_percent == pytest.approx(66.7)


def test_teacher_without_courses_has_no_schedule():
    value = teacher("t1", "Ana Torres")

    assert classify(value) == CompletionState.no_schedule
    assert value.progress_percent == 0.0


def test_teacher_with_unscheduled_courses_has_no_schedule():
    value = teacher("t1", "Ana Torres", course("c1"), course("c2"))

    assert classify(value) == CompletionState.no_schedule


def test_teacher_with_every_course_scheduled_is_complete():
    value = teacher("t1", "Ana Torres", course("c1", sessions=1), course("c2", sessions=3))

    assert classify(value) == CompletionState.complete
    assert value.progress_percent == 100.0


def test_board_places_each_teacher_in_exactly_one_column():
    teachers = [
        teacher("t1", "Ana Torres", course("c1", sessions=1)),
        teacher("t2", "Bruno Díaz", course("c2"), course("c3", sessions=1)),
        teacher("t3", "Carla Ruiz"),
        teacher("t4", "Diego Paz", course("c4")),
    ]

    board = build_board(teachers)

    placed = [member.id for column in board.columns for member in column.teachers]
    assert sorted(placed) == ["t1", "t2", "t3", "t4"]
    assert [member.id for member in board.column(CompletionState.no_schedule).teachers] == ["t3", "t4"]
    assert [member.id for member in board.column(CompletionState.in_progress).teachers] == ["t2"]
    assert [member.id for member in board.column(CompletionState.complete).teachers] == ["t1"]
    assert [column.title for column in board.columns] == ["No schedule", "In progress", "Complete"]
    assert board.total_teachers == 4
    assert board.total_courses == 4
    assert board.total_sessions == 2


def test_board_search_matches_teacher_or_course_name_case_insensitively():
    teachers = [
        teacher("t1", "Ana Torres", course("c1", name="Cálculo I", sessions=1)),
        teacher("t2", "Bruno Díaz", course("c2", name="Redes")),
        teacher("t3", "Carla Ruiz", course("c3", name="Cálculo II")),
    ]

    by_course = build_board(teachers, search="CÁLCULO")
    by_teacher = build_board(teachers, search="  bruno ")

    assert sorted(member.id for column in by_course.columns for member in column.teachers) == ["t1", "t3"]
    assert [member.id for column in by_teacher.columns for member in column.teachers] == ["t2"]
    assert by_teacher.search == "bruno"
    assert by_course.total_teachers == 3
    assert by_course.total_courses == 3


def test_blank_search_keeps_everyone():
    teachers = [teacher("t1", "Ana Torres"), teacher("t2", "Bruno Díaz")]

    board = build_board(teachers, search="   ")

    assert board.search is None
    assert sum(column.count for column in board.columns) == 2
