from fastapi import APIRouter, Depends, status

from rental_availability.api.dependencies import get_use_cases
from rental_availability.api.schemas.availability import BookingResponse, CreateBookingRequest

router = APIRouter()


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    booking = await use_cases["create_booking"].execute(
        listing_id=payload.listing_id,
        renter_id=payload.renter_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(booking_id: str, use_cases=Depends(get_use_cases)) -> BookingResponse:
    booking = await use_cases["confirm_booking"].execute(booking_id)
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: str, use_cases=Depends(get_use_cases)) -> BookingResponse:
    booking = await use_cases["cancel_booking"].execute(booking_id)
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(booking_id: str, use_cases=Depends(get_use_cases)) -> BookingResponse:
    booking = await use_cases["complete_booking"].execute(booking_id)
    return BookingResponse.model_validate(booking)
