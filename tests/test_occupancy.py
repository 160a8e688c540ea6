from occupancy import (
    WORK_SPAN,
    booking_minutes,
    calculate_occupancy,
    merged_occupied_minutes,
)


def booking(start, end, status="APPROVED"):
    return {"startTime": start, "endTime": end, "status": status}


def test_working_window_is_eight_hours():
    assert WORK_SPAN == 480


def test_back_to_back_bookings():
    occ = calculate_occupancy([booking("09:00", "10:00"), booking("10:00", "11:00")])
    assert occ.booking_count == 2
    assert occ.occupied_minutes == 120
    assert occ.percent_full == 25


def test_booking_is_clamped_to_the_window():
    occ = calculate_occupancy([booking("08:00", "18:00")])
    assert occ.occupied_minutes == 480
    assert occ.percent_full == 100


def test_booking_outside_the_window_counts_but_adds_no_minutes():
    occ = calculate_occupancy([booking("18:00", "20:00")])
    assert occ.booking_count == 1
    assert occ.occupied_minutes == 0
    assert occ.percent_full == 0


def test_only_approved_bookings_contribute():
    occ = calculate_occupancy([
        booking("09:00", "17:00", status="REJECTED"),
        booking("09:00", "17:00", status="PENDING"),
        booking("09:00", "10:00", status="approved"),
        {"startTime": "09:00", "endTime": "17:00"},
    ])
    assert occ.booking_count == 1
    assert occ.occupied_minutes == 60


def test_unparseable_or_inverted_times_are_skipped_but_counted():
    occ = calculate_occupancy([
        booking("garbage", "10:00"),
        booking("11:00", "10:00"),
        booking("10:00", None),
    ])
    assert occ.booking_count == 3
    assert occ.occupied_minutes == 0
    assert occ.percent_full == 0


def test_half_percent_rounds_up():
    # 60 / 480 = 12.5%
    assert calculate_occupancy([booking("09:00", "10:00")]).percent_full == 13


def test_overlaps_are_summed_and_capped_at_100():
    occ = calculate_occupancy([booking("09:00", "17:00"), booking("09:00", "13:00")])
    assert occ.occupied_minutes == 720
    assert occ.percent_full == 100


def test_merged_minutes_ignore_double_booking():
    day = [booking("09:00", "12:00"), booking("11:00", "13:00"), booking("15:00", "16:00")]
    assert calculate_occupancy(day).occupied_minutes == 360
    assert merged_occupied_minutes(day) == 300


def test_twelve_hour_times():
    assert booking_minutes(booking("1:00 PM", "2:30 PM")) == 90


def test_empty_day():
    occ = calculate_occupancy([])
    assert (occ.booking_count, occ.occupied_minutes, occ.percent_full) == (0, 0, 0)


def test_clock_relative_end_time_is_left_out():
    occ = calculate_occupancy([booking("09:00", "now"), booking("10:00", "11:00")])
    assert occ.booking_count == 2
    assert occ.occupied_minutes == 60
    assert occ.percent_full == 13
