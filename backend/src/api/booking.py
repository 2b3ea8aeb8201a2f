"""
Public booking API endpoints.

This module provides the endpoints used by the public booking flow: CPF
validation, which locations are open on a day, bookable times and the price
quote with tiered discounts.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.dependencies import get_calendar_clock
from api.responses import (
    AvailabilityPeriodResponse,
    AvailabilityResponse,
    AvailableTimesResponse,
    CpfValidateRequest,
    CpfValidateResponse,
    DiscountRuleModel,
    QuoteRequest,
    QuoteResponse,
)
from core.constants import SELECTION_KIND_AREA
from core.database import get_db
from services.availability_service import (
    AvailabilityService,
    assign_location_colors,
    open_location_ids,
)
from services.calendar_clock import CalendarClock
from services.discount_service import DiscountService, apply_discount
from utils.cpf_validator import clean_cpf, format_cpf, is_valid_cpf, mask_cpf

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/cpf/validate", summary="Validate a CPF", response_model=CpfValidateResponse)
async def validate_cpf_endpoint(request: CpfValidateRequest) -> CpfValidateResponse:
    """
    Validate a CPF and return its display forms.

    Invalid input is reported through the valid flag, never as an error,
    so the booking form can show inline feedback.
    """
    return CpfValidateResponse(
        valid=is_valid_cpf(request.cpf),
        cleaned=clean_cpf(request.cpf),
        formatted=format_cpf(request.cpf),
        masked=mask_cpf(request.cpf),
    )


@router.get("/availability", summary="Locations open on a day", response_model=AvailabilityResponse)
async def get_availability(
    date: Optional[str] = Query(None, description="Calendar date (YYYY-MM-DD); defaults to today"),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_calendar_clock),
) -> AvailabilityResponse:
    """
    Get the availability periods covering a day and the open locations.

    When several locations are open, location_ids follows the stable
    location order and colors assigns each one its calendar color.
    """
    if date is None:
        date = await clock.today()
    AvailabilityService.validate_date(date)

    periods = AvailabilityService.get_open_periods(db, date)
    location_order = AvailabilityService.get_location_order(db)
    location_ids = open_location_ids(date, periods, location_order)
    colors = assign_location_colors(location_order, periods)

    return AvailabilityResponse(
        date=date,
        display_date=clock.to_display_date(date),
        periods=[AvailabilityPeriodResponse(**period.to_dict()) for period in periods],
        location_ids=location_ids,
        colors={location_id: colors[location_id] for location_id in location_ids if location_id in colors},
    )


@router.get("/times", summary="Bookable times", response_model=AvailableTimesResponse)
async def get_available_times(
    date: str = Query(..., description="Calendar date (YYYY-MM-DD)"),
    location_id: int = Query(...),
    procedure_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_calendar_clock),
) -> AvailableTimesResponse:
    """Get bookable start times of a location on a day."""
    times = await AvailabilityService.get_available_times(db, date, location_id, procedure_id, clock)
    return AvailableTimesResponse(date=date, location_id=location_id, times=times)


@router.post("/quote", summary="Price quote with discount", response_model=QuoteResponse)
async def quote(
    request: QuoteRequest,
    db: Session = Depends(get_db),
) -> QuoteResponse:
    """
    Compute subtotal, discount and final total of a booking.

    Discount tiers count only the selected body areas; specifications are
    added to the subtotal.
    """
    rules = DiscountService.get_rules_for_procedure(db, request.procedure_id)
    selections = [selection.to_selection() for selection in request.selections]
    result = apply_discount(selections, rules)

    return QuoteResponse(
        procedure_id=request.procedure_id,
        group_count=sum(1 for selection in selections if selection.kind == SELECTION_KIND_AREA),
        subtotal=result.subtotal,
        discount=result.discount,
        final_total=result.final_total,
        discount_percentage=result.discount_percentage,
        applied_rule=DiscountRuleModel.from_tier(result.applied_rule) if result.applied_rule else None,
    )
