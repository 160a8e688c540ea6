"""
Venue Calendar - Validation Schemas (Pydantic)
===============================================

Data Transfer Objects shared by the aggregation engine, the services and
the FastAPI layer, using Pydantic v2.

- Canonical Booking produced once at ingestion
- Month grid / day bucket / day detail outputs
- Create and update payloads for the venue and booking store

Every model serializes with camelCase aliases (``bookingCount``,
``percentFull``...) because that is what calendar clients consume; Python
code keeps using the snake_case attribute names.
"""

import re
from datetime import date as date_type
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ==========================================
# SHARED VALIDATORS
# ==========================================

TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_phone_format(phone: Optional[str]) -> str:
    """Normalizes a phone number (digits and + only)."""
    if not phone:
        return ""
    return re.sub(r'[^\d+]', '', phone)


def validate_iso_date(value: Optional[str]) -> Optional[str]:
    """Ensures an optional ``YYYY-MM-DD`` string names a real day."""
    if value is None or value == "":
        return None
    text = value.strip()
    try:
        if not ISO_DATE.match(text):
            raise ValueError(text)
        return date_type.fromisoformat(text).isoformat()
    except ValueError:
        raise ValueError(f"'{value}' is not a valid YYYY-MM-DD date")


def validate_hhmm(value: Optional[str]) -> Optional[str]:
    """Ensures an optional wall-clock time is a 24h ``HH:MM``."""
    if value is None or value == "":
        return None
    match = TIME_24H.match(value.strip())
    if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
        raise ValueError(f"'{value}' is not a valid HH:MM time")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==========================================
# BOOKING (canonical)
# ==========================================

class BookingStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCEL_REQUESTED = "CANCEL_REQUESTED"
    CANCELLED = "CANCELLED"


class Booking(CamelModel):
    """
    A booking record after ingestion.

    ``key`` is the stable UI key (identifier or ``idx-<position>``);
    ``venue_refs`` holds every venue candidate the source record carried so
    that filtering by name or by id both work.
    """
    key: str
    id: Optional[str] = None
    venue: Optional[str] = None
    venue_refs: List[str] = Field(default_factory=list)
    date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: str = ""

    # Opaque passthrough
    title: Optional[str] = None
    booking_name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    remarks: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == BookingStatus.APPROVED.value


# ==========================================
# AGGREGATES
# ==========================================

class Occupancy(CamelModel):
    """Occupancy of one day against the working window."""
    booking_count: int = 0
    occupied_minutes: int = 0
    percent_full: int = Field(default=0, ge=0, le=100)


class DayBucket(CamelModel):
    """One calendar day of a month grid."""
    date: str
    booking_count: int = 0
    percent_full: int = Field(default=0, ge=0, le=100)
    occupied_minutes: int = 0
    bookings: List[Booking] = Field(default_factory=list)

    @property
    def is_free(self) -> bool:
        return self.booking_count == 0


class MonthGrid(CamelModel):
    """Leading blanks (``None``) followed by one DayBucket per day."""
    year: int
    month: int = Field(..., ge=1, le=12)
    leading_blanks: int = Field(..., ge=0, le=6)
    cells: List[Optional[DayBucket]]

    @property
    def days(self) -> List[DayBucket]:
        return [c for c in self.cells if c is not None]

    def day(self, iso_date: str) -> Optional[DayBucket]:
        for cell in self.days:
            if cell.date == iso_date:
                return cell
        return None


class InvalidParameters(CamelModel):
    """Returned instead of a grid when year/month cannot be used."""
    error: str
    year: Any = None
    month: Any = None


class DayDetailItem(CamelModel):
    """Display-ready approved booking for the day modal / print view."""
    key: str
    title: str
    time_range: str
    status: str
    venue: Optional[str] = None
    date: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    remarks: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


# ==========================================
# EXPORT (print view)
# ==========================================

class ExportRow(CamelModel):
    date: str
    key: str
    time: str = ""
    duration: str = ""
    title: str = "Event"
    booking_name: str = ""
    department_label: str = "GEN"


class ExportDay(CamelModel):
    date: str
    percent_full: int = Field(default=0, ge=0, le=100)
    booking_count: int = 0
    double_booked: bool = False
    visible: List[ExportRow] = Field(default_factory=list)
    hidden_count: int = 0


class ExportSheet(CamelModel):
    venue: Optional[str] = None
    year: int
    month: int
    leading_blanks: int
    total_weeks: int
    days: List[ExportDay]
    overflow: List[ExportRow] = Field(default_factory=list)


# ==========================================
# VENUE STORE
# ==========================================

class VenueCreate(BaseModel):
    """Payload to register a venue (seminar hall)."""
    name: str = Field(..., min_length=1, description="Venue name")
    capacity: Optional[int] = Field(default=None, ge=0, description="Seats")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Venue name cannot be blank')
        return cleaned


class VenueDTO(CamelModel):
    id: int
    name: str
    capacity: Optional[int] = None


# ==========================================
# BOOKING STORE
# ==========================================

class BookingCreate(CamelModel):
    """
    Payload to store a booking.

    Validations:
    - hall_name and slot_title are required and non-blank
    - either a time-wise booking (date + start/end time) or a day-wise one
      (start_date..end_date)
    - times are 24h HH:MM, end after start
    """
    hall_name: str = Field(..., min_length=1, description="Venue name")
    slot_title: str = Field(..., min_length=1, description="Event name")
    booking_name: str = Field(default="", description="Coordinator")
    department: str = Field(default="")
    email: str = Field(default="")
    phone: str = Field(default="")
    remarks: str = Field(default="")
    status: BookingStatus = Field(default=BookingStatus.PENDING)

    date: Optional[str] = Field(default=None, description="YYYY-MM-DD (time-wise)")
    start_time: Optional[str] = Field(default=None, description="HH:MM")
    end_time: Optional[str] = Field(default=None, description="HH:MM")
    start_date: Optional[str] = Field(default=None, description="YYYY-MM-DD (day-wise)")
    end_date: Optional[str] = Field(default=None, description="YYYY-MM-DD (day-wise)")

    @field_validator('hall_name', 'slot_title')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Field cannot be blank')
        return cleaned

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_format(v)

    @field_validator('date', 'start_date', 'end_date')
    @classmethod
    def validate_dates(cls, v: Optional[str]) -> Optional[str]:
        return validate_iso_date(v)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, v: Optional[str]) -> Optional[str]:
        return validate_hhmm(v)

    @model_validator(mode='after')
    def validate_slot(self):
        """A booking needs a day (time-wise) or a day range (day-wise)."""
        if self.date:
            if bool(self.start_time) != bool(self.end_time):
                raise ValueError('start_time and end_time go together')
            if self.start_time and self.end_time <= self.start_time:
                raise ValueError('end_time must be after start_time')
        elif self.start_date:
            end = self.end_date or self.start_date
            if end < self.start_date:
                raise ValueError('end_date cannot be before start_date')
            self.end_date = end
        else:
            raise ValueError('Either date or start_date is required')
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    reason: str = Field(default="", description="Cancellation/rejection reason")


class BookingDTO(CamelModel):
    """Raw booking record as served by the listing endpoint."""
    id: str
    hall_name: str
    slot_title: Optional[str] = None
    booking_name: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    remarks: Optional[str] = None
    status: str
    date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    applied_at: Optional[str] = None
    cancellation_reason: Optional[str] = None
