"""
Venue Calendar API - Calendar Endpoints
========================================

Month grid, day detail and print/export sheet. All three are re-derived
from the raw booking records on every request.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Any, List, Optional

from api.deps import get_db

from calendar_builder import build_month_grid
from export import export_to_csv
from services import CalendarService
from schemas import DayDetailItem, ExportSheet, InvalidParameters, MonthGrid

router = APIRouter()


# ==========================================
# API-SPECIFIC SCHEMAS
# ==========================================

from pydantic import BaseModel, Field


class MonthGridRequest(BaseModel):
    """Raw records supplied by the caller instead of the store."""
    records: List[Any] = Field(default_factory=list, description="Raw booking records")
    venue: Optional[str] = Field(default=None, description="Venue name or id filter")
    year: Any = Field(..., description="Year")
    month: Any = Field(..., description="Month (1-12)")


def _or_400(result):
    if isinstance(result, InvalidParameters):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return result


# ==========================================
# ENDPOINTS
# ==========================================

@router.get(
    "/month",
    response_model=MonthGrid,
    summary="Get Month Grid",
    description="Leading blanks (null) then one cell per day with bookingCount and percentFull."
)
def get_month_grid(
    year: str = Query(..., description="Year"),
    month: str = Query(..., description="Month (1-12)"),
    venue: Optional[str] = Query(default=None, description="Venue name or id"),
    db: Session = Depends(get_db)
):
    return _or_400(CalendarService.get_month_grid(db, year, month, venue))


@router.post(
    "/month",
    response_model=MonthGrid,
    summary="Build Month Grid From Records",
    description="Same aggregation as GET /month over records sent in the request body."
)
def post_month_grid(data: MonthGridRequest):
    return _or_400(build_month_grid(data.records, data.venue, data.year, data.month))


@router.get(
    "/day/{day}",
    response_model=List[DayDetailItem],
    summary="Get Day Detail",
    description="Approved bookings of one day, ready for the day modal."
)
def get_day_detail(
    day: str,
    venue: Optional[str] = Query(default=None, description="Venue name or id"),
    db: Session = Depends(get_db)
):
    detail = CalendarService.get_day_detail(db, day, venue)
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"'{day}' is not a valid YYYY-MM-DD date"
        )
    return detail


@router.get(
    "/export",
    response_model=ExportSheet,
    summary="Get Export Sheet",
    description="Printable month sheet; ?format=csv returns the booking rows as CSV."
)
def get_export_sheet(
    year: str = Query(..., description="Year"),
    month: str = Query(..., description="Month (1-12)"),
    venue: Optional[str] = Query(default=None, description="Venue name or id"),
    format: str = Query(default="json", pattern="^(json|csv)$"),
    visible_per_day: int = Query(default=2, ge=0, le=10, alias="visiblePerDay"),
    db: Session = Depends(get_db)
):
    sheet = _or_400(CalendarService.get_export_sheet(db, year, month, venue, visible_per_day))
    if format == "csv":
        filename = f"calendar_{venue or 'all'}_{sheet.year}_{sheet.month:02d}.csv".replace(" ", "_")
        return Response(
            content=export_to_csv(sheet),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    return sheet
