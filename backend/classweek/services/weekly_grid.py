from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from classweek.schemas.grid import GridBlock, GridDay, OverlapGroup, WeeklyGrid
from classweek.schemas.session import SessionOut, day_label, format_minutes
from classweek.services.palette import color_for_course

DEFAULT_DAY_RANGE = (7, 23)
DEFAULT_DAYS = (1, 2, 3, 4, 5, 6)
DEFAULT_SLOT_MINUTES = 30


def sort_day_sessions(sessions: Iterable[SessionOut]) -> list[SessionOut]:
    return sorted(sessions, key=lambda item: (item.start_minutes, item.end_minutes))


def pack_overlap_groups(ordered: Sequence[SessionOut]) -> list[list[SessionOut]]:
    """Split sessions already sorted by start time into chains of overlapping sessions.

    A session joins the current group while it starts before the latest end
    seen so far in that group.
    """
    groups: list[list[SessionOut]] = []
    current: list[SessionOut] = []
    group_end = 0
    for session in ordered:
        if current and session.start_minutes >= group_end:
            groups.append(current)
            current = []
        if not current:
            group_end = session.end_minutes
        current.append(session)
        group_end = max(group_end, session.end_minutes)
    if current:
        groups.append(current)
    return groups


def _place_block(
    session: SessionOut,
    column: int,
    column_count: int,
    range_start: int,
    range_end: int,
    slot_minutes: int,
) -> GridBlock:
    start, end = session.start_minutes, session.end_minutes
    clipped_start = min(max(start, range_start), range_end)
    clipped_end = max(min(end, range_end), clipped_start)
    width = 100.0 / column_count
    return GridBlock(
        session=session,
        column=column,
        column_count=column_count,
        top=(clipped_start - range_start) / slot_minutes,
        height=(clipped_end - clipped_start) / slot_minutes,
        left=column * width,
        width=width,
        color=color_for_course(session.course_id),
        clipped=start < range_start or end > range_end,
    )


def build_grid(
    sessions: Iterable[SessionOut],
    day_range: tuple[int, int] = DEFAULT_DAY_RANGE,
    *,
    days: Sequence[int] | None = None,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
    locale: str = "es",
) -> WeeklyGrid:
    """Lay out a flat session collection as a day x time grid.

    Every configured day is present even when empty. A session on a day
    outside ``days`` gets its own column appended in weekday order so that no
    input session is lost.
    """
    start_hour, end_hour = day_range
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(f"Invalid day range {day_range!r}")
    range_start, range_end = start_hour * 60, end_hour * 60
    if days is None:
        days = DEFAULT_DAYS

    by_day: dict[int, list[SessionOut]] = defaultdict(list)
    for session in sessions:
        by_day[session.day_of_week].append(session)

    grid_days: list[GridDay] = []
    for day_of_week in sorted(set(days) | set(by_day)):
        groups: list[OverlapGroup] = []
        for members in pack_overlap_groups(sort_day_sessions(by_day.get(day_of_week, []))):
            column_count = len(members)
            blocks = [
                _place_block(session, column, column_count, range_start, range_end, slot_minutes)
                for column, session in enumerate(members)
            ]
            groups.append(
                OverlapGroup(
                    start_time=members[0].start_time,
                    end_time=format_minutes(max(item.end_minutes for item in members)),
                    column_count=column_count,
                    blocks=blocks,
                )
            )
        grid_days.append(GridDay(day_of_week=day_of_week, label=day_label(day_of_week, locale), groups=groups))

    return WeeklyGrid(
        start_hour=start_hour,
        end_hour=end_hour,
        slot_minutes=slot_minutes,
        row_count=(range_end - range_start) // slot_minutes,
        time_labels=[f"{hour:02d}:00" for hour in range(start_hour, end_hour)],
        days=grid_days,
    )
