"""
Venue Calendar API - Dependency Injection
==========================================

Provides the database session dependency for FastAPI endpoints.
"""

from typing import Generator
from sqlalchemy.orm import Session

from database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    The @with_db decorator in services.py detects this injected session
    and uses it instead of creating its own.

    Usage:
        @router.get("/")
        def list_items(db: Session = Depends(get_db)):
            return SomeService.some_method(db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        SessionLocal.remove()
