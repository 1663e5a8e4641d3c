class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ScheduleValidationError(AppError):
    """Raised when a session draft is well-formed but cannot be placed on the weekly grid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class SessionConflictError(AppError):
    """Raised when the authoritative check finds a colliding session."""
    def __init__(self, conflict):
        super().__init__(
            conflict.message,
            status_code=409,
            details=conflict.model_dump(mode="json", by_alias=True),
        )
        self.conflict = conflict


class ScheduleClientError(Exception):
    """Base class for errors raised by the schedule HTTP client."""


class ConflictError(ScheduleClientError):
    """The session collides with another one.

    ``predicted`` is True when the local pre-check caught it before any
    request was sent, False when the server rejected the create.
    """
    def __init__(self, conflict, *, predicted: bool):
        self.conflict = conflict
        self.predicted = predicted
        super().__init__(conflict.message)


class TransientNetworkError(ScheduleClientError):
    """Timeout or connectivity failure; the caller may re-submit."""


class RequestFailedError(ScheduleClientError):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
