from __future__ import annotations

from classweek.core.exceptions import ScheduleValidationError
from classweek.schemas.session import SessionSlot, format_minutes


def ensure_within_grid_hours(slot: SessionSlot, start_hour: int, end_hour: int) -> None:
    """Reject sessions the weekly grid cannot show.

    Shape errors (time format, start before end, weekday, type) are already
    enforced when the draft is parsed; this gate adds the configured hour
    window, which only the server knows.
    """
    window_start, window_end = start_hour * 60, end_hour * 60
    if slot.start_minutes < window_start or slot.end_minutes > window_end:
        raise ScheduleValidationError(
            f"Sessions must fall between {format_minutes(window_start)} and {format_minutes(window_end)}",
            details={
                "startTime": slot.start_time,
                "endTime": slot.end_time,
                "windowStart": format_minutes(window_start),
                "windowEnd": format_minutes(window_end),
            },
        )
