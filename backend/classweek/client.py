"""HTTP client for the sessions API.

Creating a session is a two-stage operation. ``precheck`` runs the conflict
detector against a local snapshot and is advisory; the server repeats the
check against its own state and its answer is binding. ``create_session``
runs both stages and maps every outcome onto one exception type:

* a malformed draft never gets this far, building ``SessionDraft`` raises
  ``pydantic.ValidationError``;
* ``ConflictError`` for a local (``predicted=True``) or server-side
  (``predicted=False``) collision;
* ``TransientNetworkError`` for timeouts and connectivity failures;
* ``RequestFailedError`` for anything else.

Nothing is retried.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from classweek.core.exceptions import ConflictError, RequestFailedError, TransientNetworkError
from classweek.schemas.batch import SessionBatchResult
from classweek.schemas.conflict import ConflictResult
from classweek.schemas.grid import WeeklyGrid
from classweek.schemas.session import SessionBatchCreate, SessionDraft, SessionOut
from classweek.schemas.teacher import ScheduleBoard, TeacherWithCourses
from classweek.services.conflict_detector import detect_conflict

logger = logging.getLogger(__name__)


class ScheduleClient:
    def __init__(self, http: httpx.Client, *, token: str | None = None, api_prefix: str = "/api") -> None:
        self._http = http
        self._prefix = f"{api_prefix.rstrip('/')}/sessions"
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}

    @classmethod
    def connect(cls, base_url: str, *, token: str | None = None, timeout: float = 10.0) -> "ScheduleClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout), token=token)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self._prefix}{path}"
        try:
            response = self._http.request(method, url, headers=self._headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransientNetworkError(f"{method} {url} timed out") from exc
        except httpx.TransportError as exc:
            raise TransientNetworkError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if response.status_code == 409:
            try:
                conflict = ConflictResult.model_validate(body.get("details"))
            except ValidationError:
                conflict = None
            if conflict is not None and conflict.has_conflict:
                raise ConflictError(conflict, predicted=False)
        message = body.get("message") or body.get("detail") or response.reason_phrase
        raise RequestFailedError(str(message), status_code=response.status_code)

    def _get(self, path: str, **kwargs):
        response = self._request("GET", path, **kwargs)
        self._raise_for_status(response)
        return response.json()

    def list_course_sessions(self, course_id: str) -> list[SessionOut]:
        return [SessionOut.model_validate(item) for item in self._get(f"/course/{course_id}")]

    def list_my_sessions(self) -> list[SessionOut]:
        return [SessionOut.model_validate(item) for item in self._get("/mine")]

    def my_grid(self) -> WeeklyGrid:
        return WeeklyGrid.model_validate(self._get("/mine/grid"))

    def list_teachers_with_courses(self) -> list[TeacherWithCourses]:
        return [TeacherWithCourses.model_validate(item) for item in self._get("/teachers")]

    def board(self, search: str | None = None) -> ScheduleBoard:
        params = {"search": search} if search else None
        return ScheduleBoard.model_validate(self._get("/board", params=params))

    @staticmethod
    def precheck(
        draft: SessionDraft,
        snapshot: Sequence[SessionOut],
        *,
        teacher_id: str | None = None,
        replacing: str | None = None,
    ) -> ConflictResult:
        """Local, advisory conflict check against a snapshot the caller already holds.

        Without ``teacher_id`` the owner is taken from any snapshot session of
        the same course.
        """
        if teacher_id is None:
            teacher_id = next(
                (session.teacher_id for session in snapshot if session.course_id == draft.course_id and session.teacher_id),
                None,
            )
        return detect_conflict(draft.for_teacher(teacher_id, session_id=replacing), snapshot)

    def create_session(
        self,
        draft: SessionDraft,
        *,
        snapshot: Sequence[SessionOut] | None = None,
        teacher_id: str | None = None,
    ) -> SessionOut:
        if snapshot is not None:
            predicted = self.precheck(draft, snapshot, teacher_id=teacher_id)
            if predicted.has_conflict:
                raise ConflictError(predicted, predicted=True)
        response = self._request("POST", "/", json=draft.model_dump(mode="json", by_alias=True))
        self._raise_for_status(response)
        return SessionOut.model_validate(response.json())

    def create_sessions_batch(self, payload: SessionBatchCreate) -> SessionBatchResult:
        response = self._request("POST", "/batch", json=payload.model_dump(mode="json", by_alias=True))
        self._raise_for_status(response)
        return SessionBatchResult.model_validate(response.json())

    def delete_session(self, session_id: str) -> None:
        response = self._request("DELETE", f"/{session_id}")
        self._raise_for_status(response)

    def replace_session(
        self,
        session_id: str,
        draft: SessionDraft,
        *,
        snapshot: Sequence[SessionOut] | None = None,
        teacher_id: str | None = None,
    ) -> SessionOut:
        """Edit a session by deleting it and creating ``draft`` in its place.

        The local pre-check ignores the session being replaced. If the create
        is rejected after the delete went through, the old session is gone and
        the error propagates to the caller.
        """
        if snapshot is not None:
            predicted = self.precheck(draft, snapshot, teacher_id=teacher_id, replacing=session_id)
            if predicted.has_conflict:
                raise ConflictError(predicted, predicted=True)
        self.delete_session(session_id)
        return self.create_session(draft)
