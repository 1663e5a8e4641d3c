from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from classweek.schemas.session import SessionOut


class CourseColor(BaseModel):
    name: str
    background: str
    border: str
    text: str = "#ffffff"

    model_config = ConfigDict(frozen=True)


class GridBlock(BaseModel):
    session: SessionOut
    column: int = Field(ge=0)
    column_count: int = Field(alias="columnCount", ge=1)
    # Vertical placement in slot units from the top of the grid.
    top: float
    height: float
    # Horizontal placement in percent of the day column.
    left: float
    width: float
    color: CourseColor
    clipped: bool = False

    model_config = ConfigDict(populate_by_name=True)


class OverlapGroup(BaseModel):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    column_count: int = Field(alias="columnCount", ge=1)
    blocks: list[GridBlock]

    model_config = ConfigDict(populate_by_name=True)


class GridDay(BaseModel):
    day_of_week: int = Field(alias="dayOfWeek", ge=1, le=7)
    label: str
    groups: list[OverlapGroup] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def blocks(self) -> list[GridBlock]:
        return [block for group in self.groups for block in group.blocks]


class WeeklyGrid(BaseModel):
    start_hour: int = Field(alias="startHour")
    end_hour: int = Field(alias="endHour")
    slot_minutes: int = Field(alias="slotMinutes")
    row_count: int = Field(alias="rowCount")
    time_labels: list[str] = Field(alias="timeLabels")
    days: list[GridDay]

    model_config = ConfigDict(populate_by_name=True)

    def iter_blocks(self) -> Iterator[tuple[int, GridBlock]]:
        for day in self.days:
            for block in day.blocks:
                yield day.day_of_week, block

    def day(self, day_of_week: int) -> GridDay | None:
        return next((item for item in self.days if item.day_of_week == day_of_week), None)
