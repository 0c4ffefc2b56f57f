from rental_availability.application.services.availability_engine import AvailabilityEngine

__all__ = ["AvailabilityEngine"]
