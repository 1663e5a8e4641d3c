from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from classweek.api.deps import get_current_user, get_db, require_admin
from classweek.core.config import get_settings
from classweek.models.user import User
from classweek.schemas.batch import SessionBatchResult
from classweek.schemas.conflict import ConflictResult
from classweek.schemas.grid import WeeklyGrid
from classweek.schemas.session import SessionBatchCreate, SessionDraft, SessionOut
from classweek.schemas.teacher import ScheduleBoard, TeacherWithCourses
from classweek.services import schedule_service
from classweek.services.completion import build_board
from classweek.services.weekly_grid import build_grid

router = APIRouter()

settings = get_settings()


def _grid_for(sessions: list[SessionOut]) -> WeeklyGrid:
    return build_grid(
        sessions,
        (settings.grid_start_hour, settings.grid_end_hour),
        days=settings.grid_days,
        slot_minutes=settings.grid_slot_minutes,
        locale=settings.day_labels_locale,
    )


@router.get("/course/{course_id}", response_model=list[SessionOut])
def list_course_sessions(
    course_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SessionOut]:
    return schedule_service.list_course_sessions(db, course_id)


@router.get("/mine", response_model=list[SessionOut])
def list_my_sessions(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[SessionOut]:
    return schedule_service.list_sessions_for_user(db, current_user)


@router.get("/mine/grid", response_model=WeeklyGrid)
def my_weekly_grid(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> WeeklyGrid:
    return _grid_for(schedule_service.list_sessions_for_user(db, current_user))


@router.post("/", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionDraft,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> SessionOut:
    return schedule_service.create_session(db, payload)


@router.post("/batch", response_model=SessionBatchResult)
def create_sessions_batch(
    payload: SessionBatchCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> SessionBatchResult:
    return schedule_service.create_sessions_batch(db, payload)


@router.post("/check", response_model=ConflictResult)
def check_session(
    payload: SessionDraft,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ConflictResult:
    return schedule_service.check_session(db, payload)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_session(
    session_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Response:
    schedule_service.delete_session(db, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/teachers", response_model=list[TeacherWithCourses])
def list_teachers_with_courses(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[TeacherWithCourses]:
    return schedule_service.list_teachers_with_courses(db)


@router.get("/teachers/{teacher_id}/grid", response_model=WeeklyGrid)
def teacher_weekly_grid(
    teacher_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> WeeklyGrid:
    teacher = schedule_service.get_teacher_with_courses(db, teacher_id)
    return _grid_for([session for course in teacher.courses for session in course.sessions])


@router.get("/board", response_model=ScheduleBoard)
def schedule_board(
    search: str | None = Query(default=None, max_length=200),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ScheduleBoard:
    return build_board(schedule_service.list_teachers_with_courses(db), search=search)
