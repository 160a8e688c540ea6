"""
Venue Calendar - Print / Export View
=====================================

Second consumer of the month grid. Re-derives the grid from the same raw
bookings as the interactive calendar, so both show the same occupancy, and
lays it out for printing:

- each day shows its first ``visible_per_day`` approved bookings
- the rest go to an overflow table printed under the calendar
- rows can be exported as a pandas DataFrame / CSV
"""

import math
from typing import Any, List, Union

import pandas as pd

from calendar_builder import build_month_grid
from logging_config import get_logger
from occupancy import merged_occupied_minutes
from schemas import Booking, DayBucket, ExportDay, ExportRow, ExportSheet, InvalidParameters
from time_parser import format_minutes, parse_time_to_minutes

logger = get_logger(__name__)

VISIBLE_PER_DAY = 2
DEPT_LABEL_MAX = 20

EXPORT_COLUMNS = ["date", "time", "duration", "title", "booking_name", "department_label"]


def duration_label(start_time, end_time) -> str:
    """ "1.5h" for 09:00-10:30; "" when unparseable or not positive."""
    start = parse_time_to_minutes(start_time)
    end = parse_time_to_minutes(end_time)
    if start is None or end is None or end <= start:
        return ""
    hours = round((end - start) / 60, 1)
    return f"{hours:g}h"


def department_label(name) -> str:
    """Short department label: upper-cased, or an acronym when long."""
    if not name or not str(name).strip():
        return "GEN"
    name = str(name).strip()
    if len(name) <= DEPT_LABEL_MAX:
        return name.upper()
    words = [w for w in name.replace("-", " ").split() if w]
    return "".join(w[0] for w in words).upper()


def _start_sort_key(booking: Booking):
    start = parse_time_to_minutes(booking.start_time)
    return (start is None, start if start is not None else 0)


def _export_row(booking: Booking, day: str) -> ExportRow:
    start = parse_time_to_minutes(booking.start_time)
    end = parse_time_to_minutes(booking.end_time)
    time = f"{format_minutes(start)}-{format_minutes(end)}" if start is not None and end is not None else ""
    return ExportRow(
        date=day,
        key=booking.key,
        time=time,
        duration=duration_label(booking.start_time, booking.end_time),
        title=booking.title or "Event",
        booking_name=booking.booking_name or "",
        department_label=department_label(booking.department),
    )


def _export_day(bucket: DayBucket, visible_per_day: int, overflow: List[ExportRow]) -> ExportDay:
    approved = sorted((b for b in bucket.bookings if b.is_approved), key=_start_sort_key)
    rows = [_export_row(b, bucket.date) for b in approved]
    overflow.extend(rows[visible_per_day:])
    return ExportDay(
        date=bucket.date,
        percent_full=bucket.percent_full,
        booking_count=bucket.booking_count,
        double_booked=bucket.occupied_minutes > merged_occupied_minutes(approved),
        visible=rows[:visible_per_day],
        hidden_count=max(0, len(rows) - visible_per_day),
    )


def build_export_sheet(
    bookings: Any,
    venue: Any,
    year: Any,
    month: Any,
    visible_per_day: int = VISIBLE_PER_DAY,
) -> Union[ExportSheet, InvalidParameters]:
    """
    Builds the printable month sheet for one venue.

    Returns:
        ExportSheet, or the InvalidParameters from the grid builder.
    """
    grid = build_month_grid(bookings, venue, year, month)
    if isinstance(grid, InvalidParameters):
        return grid

    visible_per_day = max(0, int(visible_per_day))
    overflow: List[ExportRow] = []
    days = [_export_day(bucket, visible_per_day, overflow) for bucket in grid.days]

    sheet = ExportSheet(
        venue=str(venue).strip() if venue else None,
        year=grid.year,
        month=grid.month,
        leading_blanks=grid.leading_blanks,
        total_weeks=math.ceil(len(grid.cells) / 7),
        days=days,
        overflow=overflow,
    )
    logger.info(f"build_export_sheet: {grid.year}-{grid.month:02d} with {len(overflow)} overflow rows")
    return sheet


def export_rows_frame(sheet: ExportSheet) -> pd.DataFrame:
    """Every approved booking of the sheet, one row each, by date then start time."""
    rows = [row for day in sheet.days for row in day.visible]
    rows.extend(sheet.overflow)
    if not rows:
        return pd.DataFrame(columns=EXPORT_COLUMNS)

    df = pd.DataFrame([r.model_dump() for r in rows])
    df = df.sort_values("date", kind="stable").reset_index(drop=True)
    return df[EXPORT_COLUMNS]


def export_to_csv(sheet: ExportSheet) -> str:
    return export_rows_frame(sheet).to_csv(index=False)
