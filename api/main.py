"""
Venue Calendar API - Main Application
======================================

HYBRID MONOLITH ARCHITECTURE:
- FastAPI layer in /api/ folder
- Business logic in root services.py (Single Source of Truth)
- Aggregation engine in root modules (ingestion, time_parser, occupancy,
  calendar_builder, day_detail, export), free of I/O

Run with: python -m uvicorn api.main:app --reload --port 8000
"""

import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database import DB_URL, init_db
from logging_config import get_logger

# Import routers
from api.v1.endpoints import bookings, calendar, venues

load_dotenv()

logger = get_logger(__name__)

# ==========================================
# APP CONFIGURATION
# ==========================================

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "VENUE_CALENDAR_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8000",
    ).split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Venue Calendar API started (db={DB_URL})")
    yield


app = FastAPI(
    title="Venue Calendar API",
    version="1.0.0",
    description="""
## Venue Calendar API

Per-day occupancy of seminar halls across a month, with booking details on
demand.

### Endpoints
- **Venues**: venue listing for the calendar filter
- **Bookings**: raw booking records (create, list, approve/reject)
- **Calendar**: month grid, day detail and print/export sheet
""",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ==========================================
# MIDDLEWARE
# ==========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==========================================
# ROUTERS
# ==========================================

app.include_router(venues.router, prefix="/api/v1/venues", tags=["Venues"])
app.include_router(bookings.router, prefix="/api/v1/bookings", tags=["Bookings"])
app.include_router(calendar.router, prefix="/api/v1/calendar", tags=["Calendar"])


# ==========================================
# HEALTH ENDPOINTS
# ==========================================

@app.get("/", tags=["Health"])
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "api": "Venue Calendar API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": DB_URL.split("://", 1)[0],
        "cors_origins": CORS_ORIGINS,
    }
