from classweek.core.exceptions import (
    AppError,
    ConflictError,
    ResourceNotFoundError,
    ScheduleClientError,
    ScheduleValidationError,
    SessionConflictError,
)
from classweek.schemas.conflict import ConflictReason, ConflictResult

from factories import make_session


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_validation_and_not_found_errors():
    invalid = ScheduleValidationError("Sessions must fall between 07:00 and 23:00", details={"startTime": "06:00"})
    missing = ResourceNotFoundError("Course", "c1")

    assert invalid.status_code == 422
    assert invalid.details == {"startTime": "06:00"}
    assert missing.status_code == 404
    assert missing.message == "Course with id c1 not found"
    assert isinstance(missing, AppError)


def test_conflict_error_carries_serialized_result():
    result = ConflictResult.conflict(
        with_session=make_session("s1", 1, "08:00", "10:00"),
        reason=ConflictReason.same_room,
        owner_description="room 301",
        message="Schedule conflict",
    )

    server_side = SessionConflictError(result)
    client_side = ConflictError(result, predicted=True)

    assert server_side.status_code == 409
    assert server_side.details["reason"] == "same_room"
    assert server_side.details["withSession"]["startTime"] == "08:00"
    assert server_side.conflict is result
    assert isinstance(client_side, ScheduleClientError)
    assert str(client_side) == "Schedule conflict"
