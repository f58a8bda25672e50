"""
FastAPI dependencies wiring repositories and collaborators into routes.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devevent.db.session import get_db
from devevent.infrastructure.asset_store import AssetStore, get_asset_store
from devevent.repositories.bookings import BookingRepository
from devevent.repositories.events import EventRepository


def get_event_repository(db: AsyncSession = Depends(get_db)) -> EventRepository:
    return EventRepository(db)


def get_booking_repository(db: AsyncSession = Depends(get_db)) -> BookingRepository:
    return BookingRepository(db)


def get_assets() -> AssetStore:
    return get_asset_store()
