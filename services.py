from functools import wraps
from datetime import date, datetime
from typing import List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import SessionLocal, Venue, BookingRecord

# Centralized logging
from logging_config import get_logger

# Aggregation engine
from calendar_builder import build_month_grid
from day_detail import assemble_day_detail
from export import build_export_sheet

from schemas import (
    VenueCreate,
    VenueDTO,
    BookingCreate,
    BookingDTO,
    BookingStatus,
    DayDetailItem,
    ExportSheet,
    InvalidParameters,
    ISO_DATE,
    MonthGrid,
)

logger = get_logger(__name__)

# ==========================================
# SESSION HANDLING
# ==========================================

def with_db(func):
    """
    Manages the session lifecycle around a service call.

    - If a ``Session`` is passed as first argument or as ``db=``: use it and
      leave its lifecycle to the caller (FastAPI ``Depends(get_db)``).
    - Otherwise: open a thread-scoped session, roll back on error and
      remove it from the registry afterwards (scripts, tests).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        db_provided = bool(args and isinstance(args[0], Session))
        if kwargs.get('db') is not None:
            db_provided = True

        if db_provided:
            return func(*args, **kwargs)

        db = SessionLocal()
        try:
            return func(db, *args, **kwargs)
        except Exception as e:
            db.rollback()
            logger.error(f"Error in {func.__name__}: {e}")
            raise
        finally:
            SessionLocal.remove()

    return wrapper


# ==========================================
# SERVICES
# ==========================================

class VenueService:
    """Venue listing (the calendar's venue filter options)."""

    @staticmethod
    @with_db
    def list_venues(db: Session) -> List[VenueDTO]:
        venues = db.query(Venue).order_by(Venue.name).all()
        return [VenueDTO(id=v.id, name=v.name, capacity=v.capacity) for v in venues]

    @staticmethod
    @with_db
    def get_venue(db: Session, venue_id: int) -> Optional[VenueDTO]:
        v = db.query(Venue).filter(Venue.id == venue_id).first()
        if not v:
            return None
        return VenueDTO(id=v.id, name=v.name, capacity=v.capacity)

    @staticmethod
    @with_db
    def create_venue(db: Session, data: VenueCreate) -> Optional[VenueDTO]:
        """Creates a venue; None if the name is already taken."""
        if db.query(Venue).filter(Venue.name == data.name).first():
            return None
        venue = Venue(name=data.name, capacity=data.capacity)
        db.add(venue)
        db.commit()
        db.refresh(venue)
        logger.info(f"create_venue: {venue.name} (id={venue.id})")
        return VenueDTO(id=venue.id, name=venue.name, capacity=venue.capacity)


class BookingService:
    """Booking store: serves raw records in the upstream camelCase shape."""

    @staticmethod
    @with_db
    def list_records(db: Session, day: Optional[str] = None, hall_name: Optional[str] = None) -> List[dict]:
        """
        Raw booking records, optionally filtered at the source.

        Args:
            day: YYYY-MM-DD, matched against date or startDate
            hall_name: exact venue name
        """
        query = db.query(BookingRecord)
        if day:
            query = query.filter(or_(BookingRecord.date == day, BookingRecord.start_date == day))
        if hall_name:
            query = query.filter(BookingRecord.hall_name == hall_name.strip())
        return [b.to_record() for b in query.order_by(BookingRecord.id).all()]

    @staticmethod
    @with_db
    def get_booking(db: Session, booking_id: str) -> Optional[BookingDTO]:
        b = db.query(BookingRecord).filter(BookingRecord.id == booking_id).first()
        if not b:
            return None
        return BookingDTO.model_validate(b.to_record())

    @staticmethod
    @with_db
    def create_booking(db: Session, data: BookingCreate) -> str:
        """Stores a booking and returns its id (sequential, zero padded)."""
        last = db.query(BookingRecord).order_by(BookingRecord.id.desc()).first()
        try:
            next_id = int(last.id) + 1 if last else 1
        except ValueError:
            next_id = db.query(BookingRecord).count() + 1
        booking_id = f"{next_id:07d}"

        db.add(BookingRecord(
            id=booking_id,
            applied_at=datetime.now(),
            hall_name=data.hall_name,
            slot_title=data.slot_title,
            booking_name=data.booking_name,
            department=data.department,
            email=data.email,
            phone=data.phone,
            remarks=data.remarks,
            status=data.status.value,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            start_date=data.start_date,
            end_date=data.end_date,
        ))
        db.commit()
        logger.info(f"create_booking: {booking_id} for {data.hall_name} ({data.status.value})")
        return booking_id

    @staticmethod
    @with_db
    def update_status(db: Session, booking_id: str, status: BookingStatus, reason: str = "") -> bool:
        b = db.query(BookingRecord).filter(BookingRecord.id == booking_id).first()
        if not b:
            return False
        before = b.status
        b.status = status.value
        if status in (BookingStatus.CANCELLED, BookingStatus.REJECTED, BookingStatus.CANCEL_REQUESTED):
            b.cancellation_reason = reason or b.cancellation_reason
        db.commit()
        logger.info(f"update_status: {booking_id} {before} -> {b.status}")
        return True


class CalendarService:
    """Month grid, day detail and export built from the booking store."""

    @staticmethod
    @with_db
    def get_month_grid(db: Session, year, month, venue: Optional[str] = None) -> Union[MonthGrid, InvalidParameters]:
        records = BookingService.list_records(db)
        return build_month_grid(records, venue, year, month)

    @staticmethod
    @with_db
    def get_day_detail(db: Session, day: str, venue: Optional[str] = None) -> Optional[List[DayDetailItem]]:
        """
        Approved bookings of one day.

        Reuses the day's bucket from the month grid; falls back to a
        day-scoped query when the bucket is empty.

        Returns:
            The detail list, or None if ``day`` is not a YYYY-MM-DD date.
        """
        if not isinstance(day, str) or not ISO_DATE.match(day):
            return None
        try:
            target = date.fromisoformat(day)
        except ValueError:
            return None

        grid = CalendarService.get_month_grid(db, target.year, target.month, venue)
        bucket = grid.day(target.isoformat()) if isinstance(grid, MonthGrid) else None
        if bucket and bucket.bookings:
            return assemble_day_detail(bucket.bookings)

        records = BookingService.list_records(db, day=target.isoformat(), hall_name=venue)
        return assemble_day_detail(records)

    @staticmethod
    @with_db
    def get_export_sheet(db: Session, year, month, venue: Optional[str] = None,
                         visible_per_day: int = 2) -> Union[ExportSheet, InvalidParameters]:
        records = BookingService.list_records(db)
        return build_export_sheet(records, venue, year, month, visible_per_day=visible_per_day)
