"""
Venue Calendar - Day Detail
============================

Builds the list shown when a calendar day is opened (and printed on the
export sheet): APPROVED bookings only, input order kept, each with a stable
UI key and a display time range.
"""

from typing import Any, List

from ingestion import ingest_bookings
from schemas import Booking, DayDetailItem

DEFAULT_TITLE = "Untitled Seminar"
FULL_DAY = "Full day"


def format_time_range(booking: Booking) -> str:
    """
    "09:00 — 11:00", "2024-03-01 → 2024-03-03", the day itself, or
    "Full day", in that order of preference.
    """
    if booking.start_time and booking.end_time:
        return f"{booking.start_time} — {booking.end_time}"
    if booking.start_date and booking.end_date and booking.start_date != booking.end_date:
        return f"{booking.start_date} → {booking.end_date}"
    return booking.date or booking.start_date or FULL_DAY


def to_detail_item(booking: Booking) -> DayDetailItem:
    return DayDetailItem(
        key=booking.key,
        title=booking.title or DEFAULT_TITLE,
        time_range=format_time_range(booking),
        status=booking.status,
        venue=booking.venue,
        date=booking.date or booking.start_date,
        department=booking.department,
        email=booking.email,
        phone=booking.phone,
        remarks=booking.remarks,
        start_time=booking.start_time,
        end_time=booking.end_time,
    )


def assemble_day_detail(bookings: Any) -> List[DayDetailItem]:
    """
    Approved bookings of one day, ready for display.

    Records without an identifier are keyed ``idx-<position in input>``.
    Repeated entries are kept; the key only drives expand/collapse state.
    """
    result = ingest_bookings(bookings, require_date=False)
    return [to_detail_item(b) for b in result.bookings if b.is_approved]
