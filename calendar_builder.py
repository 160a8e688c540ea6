"""
Venue Calendar - Month Grid Builder
====================================

Turns a raw booking list into the month grid rendered by the calendar and
re-derived by the print/export view:

    [None] * weekday(day 1, Sunday=0) + [DayBucket(day) for day in month]

Stateless: every call ingests and buckets the full list it receives.
"""

from calendar import monthrange
from collections import OrderedDict
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from ingestion import ingest_bookings
from logging_config import get_logger
from occupancy import calculate_occupancy
from schemas import Booking, DayBucket, InvalidParameters, MonthGrid

logger = get_logger(__name__)


def _coerce_int(value: Any) -> Optional[int]:
    """int or integer string -> int; anything else -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return None
    return None


def validate_period(year: Any, month: Any) -> Union[Tuple[int, int], InvalidParameters]:
    """Checks the (year, month) pair; returns it as ints or an error value."""
    y = _coerce_int(year)
    m = _coerce_int(month)
    if y is None or m is None:
        return InvalidParameters(error="year and month must be numbers", year=year, month=month)
    if not 1 <= m <= 12:
        return InvalidParameters(error="month must be between 1 and 12", year=year, month=month)
    if not 1 <= y <= 9999:
        return InvalidParameters(error="year must be between 1 and 9999", year=year, month=month)
    return y, m


def first_weekday_offset(year: int, month: int) -> int:
    """Weekday of day 1 with Sunday = 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def _normalize_filter(venue_filter: Any) -> Optional[str]:
    if venue_filter is None:
        return None
    text = str(venue_filter).strip()
    return text or None


def matches_venue(booking: Booking, venue_filter: Optional[str]) -> bool:
    if venue_filter is None:
        return True
    return venue_filter in booking.venue_refs


def bucket_by_date(bookings: Any, venue_filter: Any, year: int, month: int) -> Dict[str, List[Booking]]:
    """
    Groups the bookings of (year, month) that match the venue filter.

    Returns:
        {"YYYY-MM-DD": [Booking, ...]} in input order; days without
        bookings are absent.
    """
    venue = _normalize_filter(venue_filter)
    prefix = f"{year:04d}-{month:02d}-"
    buckets: Dict[str, List[Booking]] = OrderedDict()

    for booking in ingest_bookings(bookings).bookings:
        if booking.date is None or not booking.date.startswith(prefix):
            continue
        if not matches_venue(booking, venue):
            continue
        buckets.setdefault(booking.date, []).append(booking)

    return buckets


def build_month_grid(bookings: Any, venue_filter: Any, year: Any, month: Any) -> Union[MonthGrid, InvalidParameters]:
    """
    Builds the month grid for one venue (or all venues).

    Args:
        bookings: raw records or Booking objects
        venue_filter: venue name/id, or None/"" for every venue
        year: e.g. 2024 or "2024"
        month: 1-12 (int or numeric string)

    Returns:
        MonthGrid, or InvalidParameters when year/month are unusable.
    """
    period = validate_period(year, month)
    if isinstance(period, InvalidParameters):
        logger.info(f"build_month_grid: invalid parameters year={year!r} month={month!r}")
        return period
    y, m = period

    buckets = bucket_by_date(bookings, venue_filter, y, m)
    blanks = first_weekday_offset(y, m)

    cells: List[Optional[DayBucket]] = [None] * blanks
    for day in range(1, days_in_month(y, m) + 1):
        iso = date(y, m, day).isoformat()
        day_bookings = buckets.get(iso, [])
        occupancy = calculate_occupancy(day_bookings)
        cells.append(DayBucket(
            date=iso,
            booking_count=occupancy.booking_count,
            percent_full=occupancy.percent_full,
            occupied_minutes=occupancy.occupied_minutes,
            bookings=day_bookings,
        ))

    grid = MonthGrid(year=y, month=m, leading_blanks=blanks, cells=cells)
    busy_days = sum(1 for d in grid.days if d.booking_count > 0)
    logger.info(f"build_month_grid: {y}-{m:02d} venue={_normalize_filter(venue_filter)!r} with {busy_days} booked days")
    return grid
