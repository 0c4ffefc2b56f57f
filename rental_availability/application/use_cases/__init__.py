from rental_availability.application.use_cases.cancel_booking import CancelBookingUseCase
from rental_availability.application.use_cases.complete_booking import CompleteBookingUseCase
from rental_availability.application.use_cases.confirm_booking import ConfirmBookingUseCase
from rental_availability.application.use_cases.create_booking import CreateBookingUseCase

__all__ = [
    "CreateBookingUseCase",
    "ConfirmBookingUseCase",
    "CancelBookingUseCase",
    "CompleteBookingUseCase",
]
