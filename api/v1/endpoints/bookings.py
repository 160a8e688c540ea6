"""
Venue Calendar API - Booking Endpoints
=======================================

The booking-listing collaborator: serves raw records in the upstream
camelCase shape, optionally filtered by date and venue at the source.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from api.deps import get_db

from services import BookingService
from schemas import BookingCreate, BookingDTO, BookingStatusUpdate

router = APIRouter()


@router.get(
    "",
    response_model=List[BookingDTO],
    summary="List Bookings",
    description="Raw booking records. Filter with ?date=YYYY-MM-DD and/or ?hallName=."
)
def list_bookings(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    hall_name: Optional[str] = Query(default=None, alias="hallName", description="Venue name"),
    db: Session = Depends(get_db)
):
    return BookingService.list_records(db, day=date, hall_name=hall_name)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Booking"
)
def create_booking(data: BookingCreate, db: Session = Depends(get_db)):
    try:
        booking_id = BookingService.create_booking(db, data)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create booking: {str(e)}"
        )
    return {"message": "Booking created successfully", "id": booking_id}


@router.get(
    "/{booking_id}",
    response_model=BookingDTO,
    summary="Get Booking"
)
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    booking = BookingService.get_booking(db, booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found"
        )
    return booking


@router.put(
    "/{booking_id}/status",
    summary="Update Booking Status",
    description="Approve, reject or cancel a booking."
)
def update_booking_status(booking_id: str, data: BookingStatusUpdate, db: Session = Depends(get_db)):
    success = BookingService.update_status(db, booking_id, data.status, data.reason)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found"
        )
    return {"message": "Booking status updated", "id": booking_id, "status": data.status.value}
