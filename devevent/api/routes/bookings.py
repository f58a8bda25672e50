"""
Booking endpoints.

Domain failures (bad email, unknown event, duplicate booking) are reported
in the body as {"success": false, "error": {...}} with a 200 status. That
includes a body that is not valid JSON.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from devevent.api.deps import get_booking_repository
from devevent.repositories.bookings import BookingRepository
from devevent.schemas.booking import BookingResponse
from devevent.services.booking_service import create_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("")
async def create_booking_endpoint(
    request: Request,
    repository: BookingRepository = Depends(get_booking_repository),
):
    """Book an email onto an event. Body: {event_id | eventId, email, slug?}."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    result = await create_booking(repository, payload)

    if not result.success:
        return JSONResponse(
            {"success": False, "error": result.error.to_dict()},
            status_code=status.HTTP_200_OK,
        )
    return JSONResponse(
        {
            "success": True,
            "booking": BookingResponse.model_validate(result.booking).model_dump(mode="json"),
        },
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
async def list_bookings_for_email(
    email: str = Query(..., min_length=3),
    repository: BookingRepository = Depends(get_booking_repository),
):
    bookings = await repository.list_for_email(email)
    return {
        "message": "Bookings fetched successfully",
        "bookings": [BookingResponse.model_validate(b).model_dump(mode="json") for b in bookings],
    }
