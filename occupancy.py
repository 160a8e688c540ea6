"""
Venue Calendar - Occupancy Calculator
======================================

Measures one day's APPROVED bookings against the fixed 9:00-17:00 working
window. Each booking's clamped duration is summed on its own; overlapping
bookings are not merged, so ``percent_full`` saturates at 100 instead of
revealing double bookings. ``merged_occupied_minutes`` gives the true
occupied span for callers that want to flag that case.
"""

import math
from typing import Iterable, List, Optional, Tuple

from schemas import Booking, BookingStatus, Occupancy
from time_parser import parse_time_to_minutes

WORK_START = 9 * 60    # 540
WORK_END = 17 * 60     # 1020
WORK_SPAN = WORK_END - WORK_START


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_approved(booking) -> bool:
    """Case-insensitive APPROVED check for canonical or raw records."""
    if isinstance(booking, Booking):
        status = booking.status
    elif isinstance(booking, dict):
        status = booking.get("status")
    else:
        return False
    return str(status or "").strip().upper() == BookingStatus.APPROVED.value


def _times(booking) -> Tuple[Optional[str], Optional[str]]:
    if isinstance(booking, Booking):
        return booking.start_time, booking.end_time
    return booking.get("startTime"), booking.get("endTime")


def booking_interval(booking) -> Optional[Tuple[int, int]]:
    """The booking's interval clamped to the working window, or None."""
    start_raw, end_raw = _times(booking)
    start = parse_time_to_minutes(start_raw)
    end = parse_time_to_minutes(end_raw)
    if start is None or end is None or end <= start:
        return None
    return _clamp(start, WORK_START, WORK_END), _clamp(end, WORK_START, WORK_END)


def booking_minutes(booking) -> int:
    """Minutes one booking occupies inside the working window."""
    interval = booking_interval(booking)
    if interval is None:
        return 0
    return max(0, interval[1] - interval[0])


def calculate_occupancy(bookings: Iterable) -> Occupancy:
    """
    Occupancy of one day.

    Args:
        bookings: the day's bookings; non-APPROVED entries are ignored.

    Returns:
        Occupancy(booking_count, occupied_minutes, percent_full)
    """
    approved = [b for b in (bookings or []) if is_approved(b)]
    booking_count = len(approved)
    total = sum(booking_minutes(b) for b in approved)

    if booking_count == 0:
        percent = 0
    else:
        percent = _round_half_up(min(100.0, total / WORK_SPAN * 100))

    return Occupancy(
        booking_count=booking_count,
        occupied_minutes=total,
        percent_full=_clamp(percent, 0, 100),
    )


def merged_occupied_minutes(bookings: Iterable) -> int:
    """Occupied span of the APPROVED bookings with overlaps merged."""
    intervals: List[Tuple[int, int]] = sorted(
        iv for iv in (booking_interval(b) for b in (bookings or []) if is_approved(b))
        if iv is not None and iv[1] > iv[0]
    )
    total = 0
    current_start, current_end = None, None
    for start, end in intervals:
        if current_end is None or start > current_end:
            if current_end is not None:
                total += current_end - current_start
            current_start, current_end = start, end
        else:
            current_end = max(current_end, end)
    if current_end is not None:
        total += current_end - current_start
    return total
