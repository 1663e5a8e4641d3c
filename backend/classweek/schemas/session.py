from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from classweek.models.teaching_session import SessionType

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DAY_LABELS: dict[str, dict[int, str]] = {
    "es": {1: "Lunes", 2: "Martes", 3: "Miércoles", 4: "Jueves", 5: "Viernes", 6: "Sábado", 7: "Domingo"},
    "en": {1: "Monday", 2: "Tuesday", 3: "Wednesday", 4: "Thursday", 5: "Friday", 6: "Saturday", 7: "Sunday"},
}

SESSION_TYPE_ALIASES = {
    "theory": SessionType.theory,
    "teoria": SessionType.theory,
    "teoría": SessionType.theory,
    "practice": SessionType.practice,
    "practica": SessionType.practice,
    "práctica": SessionType.practice,
}


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"


def day_label(day_of_week: int, locale: str = "es") -> str:
    labels = DAY_LABELS.get(locale, DAY_LABELS["en"])
    return labels[day_of_week]


def normalize_room(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class TimeRangeMixin:
    """Minute offsets for models carrying ``start_time`` and ``end_time`` strings."""

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end_time)


class SessionSlot(TimeRangeMixin, BaseModel):
    """Day, time range, room and type of a session, without its course."""

    day_of_week: int = Field(alias="dayOfWeek", ge=1, le=7)
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    room: str | None = Field(default=None, max_length=50)
    session_type: SessionType = Field(alias="sessionType")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @field_validator("room", mode="before")
    @classmethod
    def normalize_room_label(cls, value: str | None) -> str | None:
        return normalize_room(value)

    @field_validator("session_type", mode="before")
    @classmethod
    def normalize_session_type(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            if key in SESSION_TYPE_ALIASES:
                return SESSION_TYPE_ALIASES[key]
        return value

    @model_validator(mode="after")
    def validate_time_order(self) -> "SessionSlot":
        if self.end_minutes <= self.start_minutes:
            raise ValueError("Start time must be before end time")
        return self


class SessionDraft(SessionSlot):
    course_id: str = Field(alias="courseId", min_length=1, max_length=36)

    def for_teacher(self, teacher_id: str | None, *, session_id: str | None = None) -> "SessionCandidate":
        return SessionCandidate(
            **self.model_dump(),
            teacher_id=teacher_id,
            id=session_id,
        )


class SessionCandidate(SessionDraft):
    """A draft whose owning teacher has been resolved from its course."""

    id: str | None = None
    teacher_id: str | None = Field(default=None, alias="teacherId")


class SessionOut(TimeRangeMixin, BaseModel):
    id: str
    course_id: str = Field(alias="courseId")
    course_code: str | None = Field(default=None, alias="courseCode")
    course_name: str = Field(alias="courseName")
    teacher_id: str | None = Field(default=None, alias="teacherId")
    teacher_name: str | None = Field(default=None, alias="teacherName")
    day_of_week: int = Field(alias="dayOfWeek", ge=1, le=7)
    day_label: str = Field(alias="dayLabel")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    room: str | None = None
    session_type: SessionType = Field(alias="sessionType")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)

    @field_validator("room", mode="before")
    @classmethod
    def normalize_room_label(cls, value: str | None) -> str | None:
        return normalize_room(value)


class SessionBatchCreate(BaseModel):
    course_id: str = Field(alias="courseId", min_length=1, max_length=36)
    sessions: list[SessionSlot] = Field(min_length=1, max_length=50)

    model_config = ConfigDict(populate_by_name=True)

    def drafts(self) -> list[SessionDraft]:
        return [SessionDraft(**slot.model_dump(), course_id=self.course_id) for slot in self.sessions]
