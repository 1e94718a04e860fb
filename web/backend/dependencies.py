#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from typing import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from core.config_loader import get_config
from database.database import get_db as _get_db
from database.repositories import ProfileRepository
from database.uow import build_matching_service
from .services.discovery_service import DiscoveryService


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from _get_db()


def get_current_user_id(
    x_user_id: int = Header(..., alias="X-User-Id", ge=1, description="Requesting profile ID")
) -> int:
    """
    Identify the requesting profile.

    Session authentication lives outside this service; the gateway forwards
    the authenticated profile ID in this header.
    """
    return x_user_id


def get_discovery_service(db: Session = Depends(get_db)) -> DiscoveryService:
    config = get_config()
    profiles = ProfileRepository(db)

    def track_activity(user_id: int) -> None:
        profiles.touch_last_active(user_id)
        db.commit()

    return DiscoveryService(
        matching=build_matching_service(db, config.matching),
        retry_config=config.matching.retry,
        activity_tracker=track_activity
    )
