from datetime import date

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator
from pydantic.alias_generators import to_camel

from rental_availability.domain.entities.availability_rule import RuleKind
from rental_availability.domain.entities.booking import BookingStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CamelRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# === Availability ===


class CheckAvailabilityRequest(CamelRequest):
    start_date: date
    end_date: date


class AvailabilityConflictResponse(CamelModel):
    id: str
    start_date: date
    end_date: date
    reason: str
    kind: RuleKind | None = None


class CheckAvailabilityResponse(CamelModel):
    available: bool
    conflicts: list[AvailabilityConflictResponse] = Field(default_factory=list)


class CreateAvailabilityRuleRequest(CamelRequest):
    start_date: date
    end_date: date
    kind: RuleKind = RuleKind.BLOCKED
    reason: constr(strip_whitespace=True, max_length=255) | None = None

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, value: RuleKind) -> RuleKind:
        if value == RuleKind.BOOKED:
            raise ValueError("BOOKED rules are created by confirming a booking")
        return value


class UpdateAvailabilityRuleRequest(CamelRequest):
    start_date: date | None = None
    end_date: date | None = None
    kind: RuleKind | None = None
    reason: constr(strip_whitespace=True, max_length=255) | None = None


class AvailabilityRuleResponse(CamelModel):
    id: str
    listing_id: str
    start_date: date
    end_date: date
    kind: RuleKind
    booking_id: str | None = None
    reason: str | None = None


class AvailableDatesResponse(CamelModel):
    listing_id: str
    dates: list[date]


class BulkAvailabilityItem(CamelRequest):
    day: date = Field(alias="date")
    is_available: bool


class BulkAvailabilityRequest(CamelRequest):
    dates: list[BulkAvailabilityItem] = Field(min_length=1, max_length=366)


class BulkAvailabilityResponse(CamelModel):
    updated: int


# === Bookings ===


class CreateBookingRequest(CamelRequest):
    listing_id: constr(strip_whitespace=True, min_length=1, max_length=36)
    renter_id: constr(strip_whitespace=True, min_length=1, max_length=36)
    start_date: date
    end_date: date


class BookingResponse(CamelModel):
    id: str
    listing_id: str
    renter_id: str
    start_date: date
    end_date: date
    status: BookingStatus
