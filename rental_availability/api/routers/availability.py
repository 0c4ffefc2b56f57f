from fastapi import APIRouter, Depends, Query, Response, status

from rental_availability.api.dependencies import get_use_cases
from rental_availability.api.schemas.availability import (
    AvailabilityRuleResponse,
    AvailableDatesResponse,
    BulkAvailabilityRequest,
    BulkAvailabilityResponse,
    CheckAvailabilityRequest,
    CheckAvailabilityResponse,
    CreateAvailabilityRuleRequest,
    UpdateAvailabilityRuleRequest,
)
from rental_availability.domain.value_objects.date_range import DateRange

router = APIRouter()


@router.get(
    "/listings/{listing_id}/availability",
    response_model=list[AvailabilityRuleResponse],
    status_code=status.HTTP_200_OK,
)
async def get_listing_availability(
    listing_id: str,
    start_date: str = Query(alias="startDate"),
    end_date: str = Query(alias="endDate"),
    use_cases=Depends(get_use_cases),
) -> list[AvailabilityRuleResponse]:
    window = DateRange.parse(start_date, end_date)
    rules = await use_cases["availability_engine"].get_listing_availability(
        listing_id, window.start, window.end
    )
    return [AvailabilityRuleResponse.model_validate(rule) for rule in rules]


@router.get(
    "/listings/{listing_id}/available-dates",
    response_model=AvailableDatesResponse,
    status_code=status.HTTP_200_OK,
)
async def get_available_dates(
    listing_id: str,
    start_date: str = Query(alias="startDate"),
    end_date: str = Query(alias="endDate"),
    use_cases=Depends(get_use_cases),
) -> AvailableDatesResponse:
    window = DateRange.parse(start_date, end_date)
    dates = await use_cases["availability_engine"].get_available_dates(
        listing_id, window.start, window.end
    )
    return AvailableDatesResponse(listing_id=listing_id, dates=dates)


@router.post(
    "/listings/{listing_id}/availability",
    response_model=AvailabilityRuleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_availability_rule(
    listing_id: str,
    payload: CreateAvailabilityRuleRequest,
    use_cases=Depends(get_use_cases),
) -> AvailabilityRuleResponse:
    rule = await use_cases["availability_engine"].create_availability_rule(
        listing_id,
        payload.start_date,
        payload.end_date,
        kind=payload.kind,
        reason=payload.reason,
    )
    return AvailabilityRuleResponse.model_validate(rule)


@router.post(
    "/listings/{listing_id}/check-availability",
    response_model=CheckAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def check_availability(
    listing_id: str,
    payload: CheckAvailabilityRequest,
    use_cases=Depends(get_use_cases),
) -> CheckAvailabilityResponse:
    result = await use_cases["availability_engine"].check_availability(
        listing_id, payload.start_date, payload.end_date
    )
    return CheckAvailabilityResponse.model_validate(result)


@router.post(
    "/listings/{listing_id}/availability/bulk",
    response_model=BulkAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def bulk_update_availability(
    listing_id: str,
    payload: BulkAvailabilityRequest,
    use_cases=Depends(get_use_cases),
) -> BulkAvailabilityResponse:
    updated = await use_cases["availability_engine"].bulk_update_availability(
        listing_id, [(item.day, item.is_available) for item in payload.dates]
    )
    return BulkAvailabilityResponse(updated=updated)


@router.patch(
    "/availability-rules/{rule_id}",
    response_model=AvailabilityRuleResponse,
    status_code=status.HTTP_200_OK,
)
async def update_availability_rule(
    rule_id: str,
    payload: UpdateAvailabilityRuleRequest,
    use_cases=Depends(get_use_cases),
) -> AvailabilityRuleResponse:
    rule = await use_cases["availability_engine"].update_availability_rule(
        rule_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        kind=payload.kind,
        reason=payload.reason,
    )
    return AvailabilityRuleResponse.model_validate(rule)


@router.delete("/availability-rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability_rule(
    rule_id: str,
    use_cases=Depends(get_use_cases),
) -> Response:
    await use_cases["availability_engine"].delete_availability_rule(rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
