from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from classweek.schemas.session import SessionOut


class CompletionState(str, Enum):
    no_schedule = "no_schedule"
    in_progress = "in_progress"
    complete = "complete"


BOARD_TITLES = {
    CompletionState.no_schedule: "No schedule",
    CompletionState.in_progress: "In progress",
    CompletionState.complete: "Complete",
}


class CourseWithSessions(BaseModel):
    id: str
    code: str
    name: str
    credits: int = 0
    hours_per_week: int = Field(default=0, alias="hoursPerWeek")
    cycle: int = 1
    sessions: list[SessionOut] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class TeacherWithCourses(BaseModel):
    id: str
    name: str
    email: str | None = None
    department: str | None = None
    courses: list[CourseWithSessions] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @computed_field(alias="totalCourses")
    @property
    def total_courses(self) -> int:
        return len(self.courses)

    @computed_field(alias="totalAssignedSessions")
    @property
    def total_assigned_sessions(self) -> int:
        return sum(len(course.sessions) for course in self.courses)

    @computed_field(alias="coursesWithAtLeastOneSession")
    @property
    def courses_with_sessions(self) -> int:
        return sum(1 for course in self.courses if course.sessions)

    @computed_field(alias="progressPercent")
    @property
    def progress_percent(self) -> float:
        if not self.courses:
            return 0.0
        return round(self.courses_with_sessions / len(self.courses) * 100, 1)


class BoardColumn(BaseModel):
    state: CompletionState
    title: str
    teachers: list[TeacherWithCourses] = Field(default_factory=list)

    @computed_field
    @property
    def count(self) -> int:
        return len(self.teachers)


class ScheduleBoard(BaseModel):
    search: str | None = None
    total_teachers: int = Field(alias="totalTeachers")
    total_courses: int = Field(alias="totalCourses")
    total_sessions: int = Field(alias="totalSessions")
    columns: list[BoardColumn]

    model_config = ConfigDict(populate_by_name=True)

    def column(self, state: CompletionState) -> BoardColumn:
        return next(item for item in self.columns if item.state == state)
