"""
Venue Calendar - Booking Ingestion
===================================

Maps loosely-structured booking records (as served by the booking API,
uploaded by clients or read from CSV) into the canonical ``Booking`` once,
so the calendar, the day modal and the export view never guess field
names again.

A record is rejected only when it cannot be mapped at all:
- it is not a mapping
- no date field is present (when a date is required)

A date that is present but unparseable is kept as ``date=None``; the month
grid simply leaves that booking out.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from logging_config import get_logger
from schemas import Booking

logger = get_logger(__name__)

# Candidate source fields, in priority order
ID_FIELDS = ("id", "_id", "_key")
RAW_ID_FIELDS = ("id", "_id")
DATE_FIELDS = ("date", "startDate", "appliedAt", "createdAt")
TITLE_FIELDS = ("slotTitle", "title", "name", "bookingName")
DEPARTMENT_FIELDS = ("department", "dept")
EMAIL_FIELDS = ("email", "bookingEmail")
PHONE_FIELDS = ("phone", "bookingPhone")

_DATE_SPLIT = re.compile(r"[T\s]")
_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class RecordRejected(Exception):
    """A source record that cannot be mapped into a Booking."""

    def __init__(self, position: int, reason: str):
        super().__init__(f"record {position} rejected: {reason}")
        self.position = position
        self.reason = reason


@dataclass
class IngestionResult:
    bookings: List[Booking] = field(default_factory=list)
    rejected: List[Tuple[int, str]] = field(default_factory=list)


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _first(record: Mapping, names: Iterable[str]) -> Optional[str]:
    for name in names:
        value = record.get(name)
        if _present(value) and not isinstance(value, Mapping):
            return str(value).strip()
    return None


def resolve_identifier(record: Mapping) -> Optional[str]:
    """``id`` / ``_id`` / ``_key``, then the same inside a nested ``raw``."""
    found = _first(record, ID_FIELDS)
    if found is not None:
        return found
    raw = record.get("raw")
    if isinstance(raw, Mapping):
        return _first(raw, RAW_ID_FIELDS)
    return None


def resolve_venue_refs(record: Mapping) -> List[str]:
    """Every venue reference the record carries, display name first."""
    refs = []

    def add(value):
        if _present(value) and not isinstance(value, Mapping):
            text = str(value).strip()
            if text not in refs:
                refs.append(text)

    add(record.get("hallName"))
    for obj_field in ("hall", "hallObj"):
        obj = record.get(obj_field)
        if isinstance(obj, Mapping):
            add(obj.get("name"))
            add(obj.get("title"))
    add(record.get("hall"))
    add(record.get("hall_id"))
    add(record.get("room"))
    add(record.get("venue"))
    return refs


def resolve_date(record: Mapping) -> Tuple[bool, Optional[str]]:
    """
    Picks the first present date candidate and keeps its date portion.

    Returns:
        (candidate_found, iso_date_or_None)
    """
    for name in DATE_FIELDS:
        value = record.get(name)
        if not _present(value):
            continue
        if isinstance(value, date):
            return True, value.isoformat()[:10]
        head = _DATE_SPLIT.split(str(value).strip(), maxsplit=1)[0]
        if not _ISO_DAY.match(head):
            return True, None
        try:
            return True, date.fromisoformat(head).isoformat()
        except ValueError:
            return True, None
    return False, None


def normalize_status(value: Any) -> str:
    if not _present(value):
        return ""
    return str(value).strip().upper()


def normalize_booking(raw: Any, position: int, require_date: bool = True) -> Booking:
    """
    Maps one source record into a Booking.

    Raises:
        RecordRejected: when the record is not a mapping or, with
            ``require_date``, has no date field at all.
    """
    if isinstance(raw, Booking):
        return raw
    if not isinstance(raw, Mapping):
        raise RecordRejected(position, f"not a mapping ({type(raw).__name__})")

    has_date, iso_date = resolve_date(raw)
    if require_date and not has_date:
        raise RecordRejected(position, "missing required field: date")

    identifier = resolve_identifier(raw)
    refs = resolve_venue_refs(raw)

    return Booking(
        key=identifier if identifier is not None else f"idx-{position}",
        id=identifier,
        venue=refs[0] if refs else None,
        venue_refs=refs,
        date=iso_date,
        start_date=_first(raw, ("startDate",)),
        end_date=_first(raw, ("endDate",)),
        start_time=_first(raw, ("startTime",)),
        end_time=_first(raw, ("endTime",)),
        status=normalize_status(raw.get("status")),
        title=_first(raw, TITLE_FIELDS),
        booking_name=_first(raw, ("bookingName",)),
        department=_first(raw, DEPARTMENT_FIELDS),
        email=_first(raw, EMAIL_FIELDS),
        phone=_first(raw, PHONE_FIELDS),
        remarks=_first(raw, ("remarks",)),
    )


def ingest_bookings(records: Any, require_date: bool = True) -> IngestionResult:
    """Normalizes a batch; rejected records are reported, never raised."""
    result = IngestionResult()
    if not isinstance(records, (list, tuple)):
        if records is not None:
            logger.debug(f"ingest_bookings: ignoring non-list input {type(records).__name__}")
        return result

    for position, raw in enumerate(records):
        try:
            result.bookings.append(normalize_booking(raw, position, require_date=require_date))
        except RecordRejected as e:
            logger.debug(str(e))
            result.rejected.append((e.position, e.reason))

    if result.rejected:
        logger.debug(f"ingest_bookings: {len(result.bookings)} accepted, {len(result.rejected)} rejected")
    return result
