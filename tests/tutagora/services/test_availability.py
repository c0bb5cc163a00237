from datetime import date, time, timedelta

import pytest

from tutagora.services.availability import bookable_days, day_of_week, expand_slots, is_bookable

MONDAY = date(2026, 1, 5)
SUNDAY = date(2026, 1, 4)


def _window(day: int, start: str, end: str) -> dict:
    return {'day_of_week': day, 'start_time': time.fromisoformat(start), 'end_time': time.fromisoformat(end)}


def test_day_of_week_counts_from_sunday() -> None:
    assert day_of_week(SUNDAY) == 0
    assert day_of_week(MONDAY) == 1
    assert day_of_week(date(2026, 1, 10)) == 6


def test_expand_slots_is_end_exclusive() -> None:
    slots = expand_slots([_window(1, '09:00', '12:00')], MONDAY, alignment='hour')

    assert slots == ['09:00', '10:00', '11:00']


def test_expand_slots_returns_empty_for_day_without_windows() -> None:
    slots = expand_slots([_window(1, '09:00', '12:00')], MONDAY + timedelta(days=1), alignment='hour')

    assert slots == []


def test_expand_slots_keeps_duplicates_from_overlapping_windows() -> None:
    windows = [_window(1, '09:00', '11:00'), _window(1, '10:00', '12:00')]

    assert expand_slots(windows, MONDAY, alignment='hour') == ['09:00', '10:00', '10:00', '11:00']


def test_expand_slots_preserves_window_order() -> None:
    windows = [_window(1, '15:00', '17:00'), _window(1, '08:00', '09:00')]

    assert expand_slots(windows, MONDAY, alignment='hour') == ['15:00', '16:00', '08:00']


def test_expand_slots_yields_nothing_when_start_and_end_hours_match() -> None:
    assert expand_slots([_window(1, '10:00', '10:45')], MONDAY, alignment='hour') == []


def test_hour_alignment_rounds_down_to_the_start_hour() -> None:
    assert expand_slots([_window(1, '14:30', '15:30')], MONDAY, alignment='hour') == ['14:00']


def test_strict_alignment_honours_minute_offsets() -> None:
    windows = [_window(1, '14:30', '17:00')]

    assert expand_slots(windows, MONDAY, alignment='strict') == ['14:30', '15:30']


def test_expand_slots_accepts_string_times_and_objects() -> None:
    class Window:
        day_of_week = 1
        start_time = '09:00:00'
        end_time = '11:00:00'

    assert expand_slots([Window()], MONDAY, alignment='hour') == ['09:00', '10:00']


def test_expand_slots_uses_configured_alignment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('tutagora.core.config.SLOT_ALIGNMENT', 'strict')

    assert expand_slots([_window(1, '14:30', '15:30')], MONDAY) == ['14:30']


def test_expand_slots_rejects_unknown_alignment() -> None:
    with pytest.raises(ValueError):
        expand_slots([], MONDAY, alignment='quarter')


def test_bookable_days_spans_seven_days_and_disables_empty_days() -> None:
    calendar = bookable_days([_window(1, '09:00', '11:00')], today=SUNDAY, days=7, alignment='hour')

    assert [day['date'] for day in calendar] == [SUNDAY + timedelta(days=offset) for offset in range(7)]
    assert [day['enabled'] for day in calendar] == [False, True, False, False, False, False, False]
    assert calendar[1]['day_name'] == 'Monday'
    assert calendar[1]['slots'] == ['09:00', '10:00']


def test_is_bookable_checks_slot_and_rolling_window() -> None:
    windows = [_window(1, '09:00', '11:00')]

    assert is_bookable(windows, MONDAY, time(10, 0), today=SUNDAY, days=7, alignment='hour')
    assert not is_bookable(windows, MONDAY, time(11, 0), today=SUNDAY, days=7, alignment='hour')
    assert not is_bookable(windows, MONDAY + timedelta(days=7), time(9, 0), today=SUNDAY, days=7, alignment='hour')
    assert not is_bookable(windows, MONDAY, time(9, 0), today=MONDAY + timedelta(days=1), days=7, alignment='hour')


def test_zero_day_window_is_not_replaced_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('tutagora.core.config.BOOKING_WINDOW_DAYS', 7)
    windows = [_window(1, '09:00', '11:00')]

    assert bookable_days(windows, today=MONDAY, days=0, alignment='hour') == []
    assert not is_bookable(windows, MONDAY, time(9, 0), today=MONDAY, days=0, alignment='hour')
    assert len(bookable_days(windows, today=MONDAY, alignment='hour')) == 7
