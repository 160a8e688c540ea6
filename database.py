import os
from datetime import datetime
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv
from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker, scoped_session

from logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

# Database
DB_URL = os.getenv("VENUE_CALENDAR_DB_URL", "sqlite:///venue_calendar.db")
SEED_DIR = os.getenv("VENUE_CALENDAR_SEED_DIR", "")

_connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, echo=False, connect_args=_connect_args)
Base = declarative_base()
SessionLocal = scoped_session(sessionmaker(bind=engine))

# ==========================================
# MODELS (Tables)
# ==========================================

class Venue(Base):
    __tablename__ = "venues"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    capacity = Column(Integer, nullable=True)


class BookingRecord(Base):
    __tablename__ = "bookings"
    id = Column(String, primary_key=True)  # "0000001"
    applied_at = Column(DateTime, default=datetime.now)

    hall_name = Column(String, index=True, nullable=False)
    slot_title = Column(String)     # Event name
    booking_name = Column(String)   # Coordinator
    department = Column(String)
    email = Column(String)
    phone = Column(String)
    remarks = Column(String, nullable=True)

    status = Column(String, default="PENDING")  # PENDING, APPROVED, REJECTED, CANCEL_REQUESTED, CANCELLED
    cancellation_reason = Column(String, nullable=True)

    # Time-wise booking (single day)
    date = Column(String, index=True, nullable=True)   # YYYY-MM-DD
    start_time = Column(String, nullable=True)          # HH:MM
    end_time = Column(String, nullable=True)            # HH:MM

    # Day-wise booking (range)
    start_date = Column(String, nullable=True)
    end_date = Column(String, nullable=True)

    def to_record(self) -> dict:
        """Raw record in the shape the booking API serves (camelCase)."""
        return {
            "id": self.id,
            "hallName": self.hall_name,
            "slotTitle": self.slot_title,
            "bookingName": self.booking_name,
            "department": self.department,
            "email": self.email,
            "phone": self.phone,
            "remarks": self.remarks,
            "status": self.status,
            "date": self.date,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "appliedAt": self.applied_at.isoformat() if self.applied_at else None,
            "cancellationReason": self.cancellation_reason,
        }

# ==========================================
# SEEDING
# ==========================================

def _clean(val):
    if val is None or pd.isna(val):
        return None
    text = str(val).strip()
    return text or None


def _seed_venues(session, path: Path) -> int:
    df = pd.read_csv(path, dtype=str)
    added = 0
    for _, row in df.iterrows():
        name = _clean(row.get("name"))
        if not name or session.query(Venue).filter(Venue.name == name).first():
            continue
        capacity = _clean(row.get("capacity"))
        session.add(Venue(name=name, capacity=int(float(capacity)) if capacity else None))
        added += 1
    session.commit()
    return added


def _seed_bookings(session, path: Path) -> int:
    df = pd.read_csv(path, dtype=str)
    added = 0
    for i, row in df.iterrows():
        hall = _clean(row.get("hallName"))
        if not hall:
            continue
        session.add(BookingRecord(
            id=_clean(row.get("id")) or f"{i + 1:07d}",
            hall_name=hall,
            slot_title=_clean(row.get("slotTitle")),
            booking_name=_clean(row.get("bookingName")),
            department=_clean(row.get("department")),
            email=_clean(row.get("email")),
            phone=_clean(row.get("phone")),
            remarks=_clean(row.get("remarks")),
            status=(_clean(row.get("status")) or "PENDING").upper(),
            date=_clean(row.get("date")),
            start_time=_clean(row.get("startTime")),
            end_time=_clean(row.get("endTime")),
            start_date=_clean(row.get("startDate")),
            end_date=_clean(row.get("endDate")),
        ))
        added += 1
    session.commit()
    return added


def init_db(seed_dir: str = SEED_DIR):
    """Creates the tables and loads venues.csv / bookings.csv from seed_dir once."""
    Base.metadata.create_all(engine)

    if not seed_dir:
        return

    session = SessionLocal()
    try:
        venues_csv = Path(seed_dir) / "venues.csv"
        if session.query(Venue).count() == 0 and venues_csv.exists():
            logger.info(f"Seeded {_seed_venues(session, venues_csv)} venues from {venues_csv}")

        bookings_csv = Path(seed_dir) / "bookings.csv"
        if session.query(BookingRecord).count() == 0 and bookings_csv.exists():
            logger.info(f"Seeded {_seed_bookings(session, bookings_csv)} bookings from {bookings_csv}")
    finally:
        SessionLocal.remove()


if __name__ == "__main__":
    init_db()
