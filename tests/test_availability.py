from datetime import date, datetime, time

import pytest

from booking.scheduling.availability import (
    REASON_CLOSED,
    REASON_INVALID_SERVICE,
    REASON_OFF_DAY,
    compute_available_slots,
    day_of_week,
    format_display_time,
)
from booking.scheduling.exceptions import SlotConfigurationError
from booking.scheduling.types import (
    AvailabilitySnapshot,
    DayScheduleWindow,
    ExistingBooking,
    OffDay,
    ServiceParameters,
    ServiceScheduleOverride,
    SlotBlock,
    TimeRange,
    TimeSpan,
)

BUSINESS = 1
SERVICE = 10
DAY = date(2030, 1, 7)
WEEKDAY = day_of_week(DAY)
BEFORE = datetime(2029, 12, 1, 8, 0)


def rng(start, end):
    return TimeRange(start_time=time(*start), end_time=time(*end))


def span(start, end):
    return TimeSpan(start_time=time(*start), end_time=time(*end))


def window(open_=(9, 0), close=(12, 0), ranges=(), location_id=None, is_closed=False, weekday=WEEKDAY):
    return DayScheduleWindow(
        business_id=BUSINESS,
        day_of_week=weekday,
        location_id=location_id,
        is_closed=is_closed,
        open_time=time(*open_) if open_ else None,
        close_time=time(*close) if close else None,
        ranges=list(ranges),
    )


def snapshot(hours=None, overrides=(), off_days=(), blocks=(), bookings=()):
    return AvailabilitySnapshot(
        business_hours=[window()] if hours is None else list(hours),
        service_overrides=list(overrides),
        off_days=list(off_days),
        slot_blocks=list(blocks),
        bookings=list(bookings),
    )


def params(duration=60, buffer=0, capacity=1):
    return ServiceParameters(
        service_id=SERVICE,
        business_id=BUSINESS,
        duration_minutes=duration,
        buffer_minutes=buffer,
        slot_capacity=capacity,
    )


def run(snap=None, p=None, location_id=None, now=BEFORE, day=DAY):
    return compute_available_slots(
        day, BUSINESS, SERVICE, location_id, p or params(), snap or snapshot(), now=now
    )


def booking(hour, minute=0, status="confirmed", service_id=SERVICE):
    return ExistingBooking(service_id=service_id, start=datetime.combine(DAY, time(hour, minute)), status=status)


def test_day_of_week_starts_on_sunday():
    assert day_of_week(date(2030, 1, 6)) == 0  # domingo
    assert day_of_week(date(2030, 1, 7)) == 1
    assert day_of_week(date(2030, 1, 12)) == 6


@pytest.mark.parametrize(
    "value,expected",
    [(time(0, 0), "12:00 AM"), (time(9, 5), "9:05 AM"), (time(12, 30), "12:30 PM"), (time(15, 0), "3:00 PM")],
)
def test_format_display_time(value, expected):
    assert format_display_time(value) == expected


def test_single_range_stops_before_overrun():
    result = run()
    assert result.times == ["09:00", "10:00", "11:00"]
    assert result.labels == ["9:00 AM", "10:00 AM", "11:00 AM"]
    assert result.reason is None
    assert not result.is_loading


def test_buffer_widens_the_step():
    result = run(p=params(duration=60, buffer=30))
    assert result.times == ["09:00", "10:30"]


def test_slot_that_exactly_fills_the_range_is_offered():
    result = run(p=params(duration=180))
    assert result.times == ["09:00"]


def test_duration_longer_than_range_yields_nothing():
    result = run(p=params(duration=240))
    assert result.slots == []
    assert result.reason is None


def test_global_off_day_closes_everything():
    off = OffDay(business_id=BUSINESS, off_date=DAY)
    for location_id in (None, 5):
        result = run(snapshot(off_days=[off]), location_id=location_id)
        assert result.slots == []
        assert result.reason == REASON_OFF_DAY
        assert result.off_days == [DAY]


def test_location_off_day_only_applies_to_that_location():
    off = OffDay(business_id=BUSINESS, off_date=DAY, location_id=5)

    assert run(snapshot(off_days=[off]), location_id=5).reason == REASON_OFF_DAY
    assert run(snapshot(off_days=[off]), location_id=6).times == ["09:00", "10:00", "11:00"]
    assert run(snapshot(off_days=[off])).times == ["09:00", "10:00", "11:00"]


def test_off_days_are_returned_sorted_for_the_calendar():
    offs = [
        OffDay(business_id=BUSINESS, off_date=date(2030, 2, 1)),
        OffDay(business_id=BUSINESS, off_date=date(2030, 1, 20)),
        OffDay(business_id=BUSINESS, off_date=date(2030, 1, 25), location_id=9),
    ]
    result = run(snapshot(off_days=offs))
    assert result.off_days == [date(2030, 1, 20), date(2030, 2, 1)]


def test_missing_hours_row_is_closed():
    result = run(snapshot(hours=[window(weekday=(WEEKDAY + 1) % 7)]))
    assert result.slots == []
    assert result.reason == REASON_CLOSED


def test_closed_day_is_closed_even_with_service_override():
    override = ServiceScheduleOverride(service_id=SERVICE, day_of_week=WEEKDAY, ranges=[rng((14, 0), (16, 0))])
    result = run(snapshot(hours=[window(is_closed=True, open_=None, close=None)], overrides=[override]))
    assert result.slots == []
    assert result.reason == REASON_CLOSED


def test_block_removes_only_that_candidate():
    block = SlotBlock(business_id=BUSINESS, service_id=SERVICE, blocked_date=DAY, start_time=time(10, 0))
    result = run(snapshot(blocks=[block]))
    assert result.times == ["09:00", "11:00"]


def test_block_for_other_service_or_date_is_ignored():
    blocks = [
        SlotBlock(business_id=BUSINESS, service_id=SERVICE + 1, blocked_date=DAY, start_time=time(10, 0)),
        SlotBlock(business_id=BUSINESS, service_id=SERVICE, blocked_date=date(2030, 1, 8), start_time=time(10, 0)),
    ]
    assert run(snapshot(blocks=blocks)).times == ["09:00", "10:00", "11:00"]


def test_capacity_counts_active_bookings_only():
    hours = [window(open_=(14, 0), close=(16, 0))]
    p = params(capacity=2)

    one = run(snapshot(hours=hours, bookings=[booking(14)]), p=p)
    assert "14:00" in one.times

    two = run(snapshot(hours=hours, bookings=[booking(14), booking(14, status="pending")]), p=p)
    assert two.times == ["15:00"]

    with_cancelled = run(snapshot(hours=hours, bookings=[booking(14), booking(14, status="cancelled")]), p=p)
    assert with_cancelled.times == ["14:00", "15:00"]


def test_bookings_of_other_services_do_not_count():
    result = run(snapshot(bookings=[booking(9, service_id=SERVICE + 1)]))
    assert result.times == ["09:00", "10:00", "11:00"]


def test_default_capacity_is_one():
    p = ServiceParameters(service_id=SERVICE, business_id=BUSINESS, duration_minutes=60, slot_capacity=None)
    result = run(snapshot(bookings=[booking(10)]), p=p)
    assert result.times == ["09:00", "11:00"]


def test_service_override_replaces_business_hours():
    override = ServiceScheduleOverride(service_id=SERVICE, day_of_week=WEEKDAY, ranges=[rng((14, 0), (16, 0))])
    result = run(snapshot(hours=[window(close=(18, 0))], overrides=[override]))
    assert result.times == ["14:00", "15:00"]


def test_override_for_another_weekday_is_ignored():
    override = ServiceScheduleOverride(
        service_id=SERVICE, day_of_week=(WEEKDAY + 1) % 7, ranges=[rng((14, 0), (16, 0))]
    )
    assert run(snapshot(overrides=[override])).times == ["09:00", "10:00", "11:00"]


def test_split_ranges_replace_open_close():
    hours = [window(close=(18, 0), ranges=[rng((9, 0), (11, 0)), rng((14, 0), (16, 0))])]
    assert run(snapshot(hours=hours)).times == ["09:00", "10:00", "14:00", "15:00"]


def test_ranges_out_of_order_are_sorted():
    hours = [window(close=(18, 0), ranges=[rng((14, 0), (15, 0)), rng((9, 0), (10, 0))])]
    assert run(snapshot(hours=hours)).times == ["09:00", "14:00"]


def test_location_hours_take_precedence():
    hours = [
        window(open_=(9, 0), close=(18, 0)),
        window(open_=(10, 0), close=(12, 0), location_id=5),
    ]
    assert run(snapshot(hours=hours), location_id=5).times == ["10:00", "11:00"]
    assert run(snapshot(hours=hours)).times[0] == "09:00"
    # unidade sem linha própria usa o horário geral
    assert run(snapshot(hours=hours), location_id=6).times[0] == "09:00"


def test_closed_location_does_not_fall_back_to_general_hours():
    hours = [window(), window(is_closed=True, open_=None, close=None, location_id=5)]
    result = run(snapshot(hours=hours), location_id=5)
    assert result.slots == []
    assert result.reason == REASON_CLOSED


def test_same_day_skips_past_candidates():
    result = run(now=datetime.combine(DAY, time(10, 30)))
    assert result.times == ["11:00"]


def test_candidate_equal_to_now_is_still_offered():
    result = run(now=datetime.combine(DAY, time(10, 0)))
    assert result.times == ["10:00", "11:00"]


def test_past_day_has_no_slots():
    result = run(now=datetime(2030, 2, 1, 8, 0))
    assert result.slots == []


def test_zero_duration_returns_empty():
    result = run(p=params(duration=0))
    assert result.slots == []
    assert result.reason == REASON_INVALID_SERVICE


def test_non_positive_interval_is_rejected():
    with pytest.raises(SlotConfigurationError):
        run(p=params(duration=30, buffer=-30))


def test_invalid_capacity_is_rejected():
    with pytest.raises(SlotConfigurationError):
        run(p=params(capacity=0))


def test_overlapping_ranges_are_rejected():
    hours = [window(close=(18, 0), ranges=[rng((9, 0), (12, 0)), rng((11, 0), (13, 0))])]
    with pytest.raises(SlotConfigurationError):
        run(snapshot(hours=hours))


def test_open_day_without_times_is_rejected():
    with pytest.raises(SlotConfigurationError):
        run(snapshot(hours=[window(open_=None, close=None)]))


def test_malformed_range_fails_on_construction():
    with pytest.raises(ValueError):
        rng((12, 0), (9, 0))


def test_malformed_range_on_the_queried_day_is_rejected():
    hours = [window(close=(18, 0), ranges=[rng((9, 0), (12, 0)), span((14, 0), (10, 0))])]
    with pytest.raises(SlotConfigurationError):
        run(snapshot(hours=hours))

    override = ServiceScheduleOverride(service_id=SERVICE, day_of_week=WEEKDAY, ranges=[span((16, 0), (15, 0))])
    with pytest.raises(SlotConfigurationError):
        run(snapshot(overrides=[override]))


def test_malformed_range_on_another_weekday_is_ignored():
    other_day = (WEEKDAY + 1) % 7
    hours = [window(), window(ranges=[span((14, 0), (10, 0))], weekday=other_day)]
    override = ServiceScheduleOverride(service_id=SERVICE, day_of_week=other_day, ranges=[span((16, 0), (15, 0))])

    assert run(snapshot(hours=hours, overrides=[override])).times == ["09:00", "10:00", "11:00"]


def test_open_after_close_is_rejected():
    with pytest.raises(SlotConfigurationError):
        run(snapshot(hours=[window(open_=(12, 0), close=(9, 0))]))


def test_loading_snapshot_is_flagged():
    loading = AvailabilitySnapshot(business_hours=[window()], off_days=[], slot_blocks=[], bookings=None)
    result = run(loading)
    assert result.is_loading
    assert result.slots == []


def test_repeated_calls_give_the_same_result():
    snap = snapshot(bookings=[booking(9)])
    assert run(snap) == run(snap)
