"""Expansion of weekly availability windows into bookable hourly slots."""

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Mapping

from tutagora.core import config

SLOT_MINUTES = 60
ALIGN_HOUR = 'hour'
ALIGN_STRICT = 'strict'


def _coerce_time(value: time | str) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value.strip())


def _field(window: Mapping[str, Any] | Any, name: str):
    if isinstance(window, Mapping):
        return window[name]
    return getattr(window, name)


def day_of_week(target_date: date) -> int:
    """Weekday with Sunday as 0, matching stored availability rows."""
    return (target_date.weekday() + 1) % 7


def _hour_slots(start: time, end: time) -> list[str]:
    return [f'{hour:02d}:00' for hour in range(start.hour, end.hour)]


def _strict_slots(start: time, end: time) -> list[str]:
    slots = []
    anchor = date.min
    current = datetime.combine(anchor, start)
    window_end = datetime.combine(anchor, end)
    step = timedelta(minutes=SLOT_MINUTES)
    while current + step <= window_end:
        slots.append(current.strftime('%H:%M'))
        current += step
    return slots


def expand_slots(
    windows: Iterable[Mapping[str, Any] | Any],
    target_date: date,
    alignment: str | None = None,
) -> list[str]:
    """Return slot start times ("HH:MM") for ``target_date``.

    Windows are expanded in the order given and the results concatenated;
    overlapping windows produce duplicate or out-of-order slots.

    With the default ``"hour"`` alignment every window is read at whole-hour
    granularity: slots run from the start hour up to, not including, the end
    hour, so "14:30-15:30" yields only "14:00". ``"strict"`` alignment starts
    at the exact window start and keeps only slots that end inside the window.
    """
    alignment = alignment or config.SLOT_ALIGNMENT
    if alignment not in (ALIGN_HOUR, ALIGN_STRICT):
        raise ValueError(f'Unknown slot alignment: {alignment!r}')

    weekday = day_of_week(target_date)
    expand = _hour_slots if alignment == ALIGN_HOUR else _strict_slots

    slots: list[str] = []
    for window in windows:
        if _field(window, 'day_of_week') != weekday:
            continue
        start = _coerce_time(_field(window, 'start_time'))
        end = _coerce_time(_field(window, 'end_time'))
        slots.extend(expand(start, end))
    return slots


def bookable_days(
    windows: Iterable[Mapping[str, Any] | Any],
    today: date | None = None,
    days: int | None = None,
    alignment: str | None = None,
) -> list[dict[str, Any]]:
    """Rolling calendar starting today; days without slots are disabled."""
    windows = list(windows)
    today = today or date.today()
    if days is None:
        days = config.BOOKING_WINDOW_DAYS

    calendar = []
    for offset in range(days):
        current = today + timedelta(days=offset)
        slots = expand_slots(windows, current, alignment)
        calendar.append({
            'date': current,
            'day_name': current.strftime('%A'),
            'slots': slots,
            'enabled': bool(slots),
        })
    return calendar


def is_bookable(
    windows: Iterable[Mapping[str, Any] | Any],
    lesson_date: date,
    start_time: time | str,
    today: date | None = None,
    days: int | None = None,
    alignment: str | None = None,
) -> bool:
    today = today or date.today()
    if days is None:
        days = config.BOOKING_WINDOW_DAYS
    if not today <= lesson_date < today + timedelta(days=days):
        return False
    return _coerce_time(start_time).strftime('%H:%M') in expand_slots(windows, lesson_date, alignment)
