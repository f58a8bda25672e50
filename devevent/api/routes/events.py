"""
Event endpoints: multipart creation, cached listing, lookup by slug.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from devevent.api.deps import get_assets, get_booking_repository, get_event_repository
from devevent.core.logging import get_logger
from devevent.domain.errors import NormalizationError
from devevent.infrastructure.asset_store import AssetStore
from devevent.repositories.bookings import BookingRepository
from devevent.repositories.events import EventRepository
from devevent.schemas.booking import BookingResponse
from devevent.schemas.event import EventMode, EventResponse
from devevent.services.cache_service import (
    get_cached_events,
    invalidate_event_cache,
    set_cached_events,
)
from devevent.services.event_service import create_event_from_form, list_events

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


def _serialize(event) -> dict:
    return EventResponse.model_validate(event).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    request: Request,
    repository: EventRepository = Depends(get_event_repository),
    asset_store: AssetStore = Depends(get_assets),
):
    """
    Create an event from a multipart form with an `image` file part.
    `tags` and `agenda` are JSON arrays of strings.
    """
    result = await create_event_from_form(request, repository, asset_store)

    if not result.success:
        error = result.error
        if error.status_code < 500:
            return JSONResponse({"message": error.message}, status_code=error.status_code)
        return JSONResponse(
            {"message": "Event Creation Failed", "error": error.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    await invalidate_event_cache()
    return JSONResponse(
        {"message": "Event Created Successfully", "event": _serialize(result.event)},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
async def list_events_endpoint(
    date: Optional[str] = Query(None, description="Any parseable date"),
    mode: Optional[EventMode] = Query(None),
    repository: EventRepository = Depends(get_event_repository),
):
    """
    List events, newest first.
    Cached in Redis per (date, mode) filter until the next event is created.
    """
    cached = await get_cached_events(date, mode)
    if cached is not None:
        return {"message": "Event fetched successfully", "events": cached}

    try:
        events = await list_events(repository, date=date, mode=mode)
    except NormalizationError as exc:
        return JSONResponse({"message": exc.message}, status_code=status.HTTP_400_BAD_REQUEST)
    except SQLAlchemyError as exc:
        logger.error("event_listing_failed", error=str(exc))
        return JSONResponse(
            {"message": "Event Fetching Failed", "error": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    serialized = [_serialize(e) for e in events]
    await set_cached_events(serialized, date, mode)
    return {"message": "Event fetched successfully", "events": serialized}


@router.get("/{slug}")
async def get_event_endpoint(
    slug: str,
    repository: EventRepository = Depends(get_event_repository),
):
    event = await repository.get_by_slug(slug)
    if event is None:
        return JSONResponse({"message": "Event not found"}, status_code=status.HTTP_404_NOT_FOUND)
    return {"message": "Event fetched successfully", "event": _serialize(event)}


@router.get("/{slug}/bookings")
async def list_event_bookings_endpoint(
    slug: str,
    events: EventRepository = Depends(get_event_repository),
    bookings: BookingRepository = Depends(get_booking_repository),
):
    """Bookings for one event, newest first."""
    event = await events.get_by_slug(slug)
    if event is None:
        return JSONResponse({"message": "Event not found"}, status_code=status.HTTP_404_NOT_FOUND)
    rows = await bookings.list_for_event(event.id)
    return {
        "message": "Bookings fetched successfully",
        "bookings": [BookingResponse.model_validate(b).model_dump(mode="json") for b in rows],
    }
