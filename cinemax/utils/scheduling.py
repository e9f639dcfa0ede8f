from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_end_time(start_time: datetime, movie_duration_minutes: int, buffer_minutes: int) -> datetime:
    """A screening occupies its hall for the movie's runtime plus the cleaning buffer."""
    return start_time + timedelta(minutes=movie_duration_minutes + buffer_minutes)


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """
    Half-open overlap test on ``[start, end)`` intervals.

    Back-to-back screenings (``end_a == start_b``) do not overlap.
    """
    return start_a < end_b and start_b < end_a


def show_duration_minutes(start_time: datetime, end_time: datetime) -> int:
    return int((end_time - start_time).total_seconds() // 60)


def format_show_time(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_conflict_message(conflict_title: str, conflict_end_time: datetime, buffer_minutes: int) -> str:
    return (
        f'Conflict! "{conflict_title}" is showing in this hall until '
        f"{format_show_time(conflict_end_time)} (including {buffer_minutes}min cleaning)"
    )


def available_slots(
    day: date,
    hall_screenings: Iterable[Tuple[datetime, datetime]],
    open_hour: int = 9,
    close_hour: int = 23,
    tz=timezone.utc,
) -> List[dict]:
    """
    Free gaps in a hall between opening and closing time on ``day``.

    ``hall_screenings`` are ``(start_time, end_time)`` pairs; order does not matter.
    Each gap is returned as ``{"start_time", "end_time", "duration_minutes"}``.
    """
    day_start = datetime.combine(day, time(hour=open_hour), tzinfo=tz)
    day_end = datetime.combine(day, time(hour=close_hour), tzinfo=tz)

    slots = []
    current = day_start
    for start, end in sorted(hall_screenings, key=lambda s: s[0]):
        if start > current:
            gap_end = min(start, day_end)
            if gap_end > current:
                slots.append(_slot(current, gap_end))
        current = max(current, end)

    if current < day_end:
        slots.append(_slot(current, day_end))
    return slots


def _slot(start: datetime, end: datetime) -> dict:
    return {
        "start_time": start,
        "end_time": end,
        "duration_minutes": show_duration_minutes(start, end),
    }
