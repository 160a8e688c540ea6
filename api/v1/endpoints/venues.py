"""
Venue Calendar API - Venue Endpoints
=====================================
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from api.deps import get_db

from services import VenueService
from schemas import VenueCreate, VenueDTO

router = APIRouter()


@router.get(
    "",
    response_model=List[VenueDTO],
    summary="List Venues",
    description="All bookable venues, ordered by name."
)
def list_venues(db: Session = Depends(get_db)):
    return VenueService.list_venues(db)


@router.post(
    "",
    response_model=VenueDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create Venue"
)
def create_venue(data: VenueCreate, db: Session = Depends(get_db)):
    venue = VenueService.create_venue(db, data)
    if venue is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Venue '{data.name}' already exists"
        )
    return venue


@router.get(
    "/{venue_id}",
    response_model=VenueDTO,
    summary="Get Venue"
)
def get_venue(venue_id: int, db: Session = Depends(get_db)):
    venue = VenueService.get_venue(db, venue_id)
    if not venue:
        raise HTTPException(status_code=404, detail=f"Venue {venue_id} not found")
    return venue
