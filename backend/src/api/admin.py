"""
Admin API endpoints for clinic management.

This module provides REST API endpoints for clinic administrators to manage
the time zone, discount tiers and message templates, and to inspect package
sessions and composed notifications of appointments.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from api.dependencies import get_calendar_clock
from api.responses import (
    DiscountRuleModel,
    DiscountRulesResponse,
    DiscountRulesUpdateRequest,
    NotificationResponse,
    PackageSummaryResponse,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
    TimezoneOption,
    TimezoneSettingsResponse,
    TimezoneUpdateRequest,
)
from core.database import get_db
from models import Location
from services.calendar_clock import CalendarClock
from services.discount_service import DiscountService
from services.message_template_service import MessageTemplateService
from services.notification_service import NotificationEvent, NotificationService
from services.package_service import PackageService
from utils.timezones import (
    BRAZILIAN_TIMEZONES,
    get_timezone_label,
    get_timezone_offset,
    is_supported_timezone,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def _timezone_settings(clock: CalendarClock) -> TimezoneSettingsResponse:
    config = await clock.get_config()
    return TimezoneSettingsResponse(
        time_zone_id=config.time_zone_id,
        time_zone_label=config.time_zone_label,
        offset=get_timezone_offset(config.time_zone_id),
        today=await clock.today(),
        options=[
            TimezoneOption(value=tz.value, label=tz.label, offset=tz.offset)
            for tz in BRAZILIAN_TIMEZONES
        ],
    )


@router.get("/settings/timezone", summary="Get time zone settings", response_model=TimezoneSettingsResponse)
async def get_timezone_settings(
    clock: CalendarClock = Depends(get_calendar_clock),
) -> TimezoneSettingsResponse:
    """Get the configured time zone and the selectable options."""
    return await _timezone_settings(clock)


@router.put("/settings/timezone", summary="Update time zone", response_model=TimezoneSettingsResponse)
async def update_timezone_settings(
    request: TimezoneUpdateRequest,
    clock: CalendarClock = Depends(get_calendar_clock),
) -> TimezoneSettingsResponse:
    """
    Change the clinic time zone.

    Only zones from the Brazilian catalog are accepted. A failed save is
    reported to the caller; the cached settings are only dropped after
    both values were written.
    """
    if not is_supported_timezone(request.time_zone_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Fuso horário não suportado: {request.time_zone_id}"
        )

    label = (request.time_zone_label or "").strip() or get_timezone_label(request.time_zone_id)
    try:
        await clock.update_time_zone(request.time_zone_id, label)
    except Exception as e:
        logger.exception(f"Failed to save time zone {request.time_zone_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao salvar o fuso horário"
        )

    return await _timezone_settings(clock)


@router.get(
    "/appointments/{appointment_id}/package",
    summary="Package session info",
    response_model=PackageSummaryResponse,
)
async def get_appointment_package(
    appointment_id: int,
    db: Session = Depends(get_db),
) -> PackageSummaryResponse:
    """Get session info, mirrored payment status and counted value of an appointment."""
    summary = PackageService.get_package_summary(db, appointment_id)
    info = summary["info"]
    return PackageSummaryResponse(
        appointment_id=summary["appointment_id"],
        is_package=info.is_package,
        is_first_session=info.is_first_session,
        session_number=info.session_number,
        total_sessions=info.total_sessions,
        display_name=info.display_name,
        should_count_value=info.should_count_value,
        payment_status=summary["payment_status"],
        value=summary["value"],
        counted_value=summary["counted_value"],
        progress=summary["progress"],
    )


@router.get(
    "/procedures/{procedure_id}/discount-rules",
    summary="List discount tiers",
    response_model=DiscountRulesResponse,
)
async def get_discount_rules(
    procedure_id: int,
    db: Session = Depends(get_db),
) -> DiscountRulesResponse:
    """Get the active discount tiers of a procedure in priority order."""
    rules = DiscountService.get_rules_for_procedure(db, procedure_id)
    return DiscountRulesResponse(
        procedure_id=procedure_id,
        rules=[DiscountRuleModel.from_tier(rule) for rule in rules],
    )


@router.put(
    "/procedures/{procedure_id}/discount-rules",
    summary="Replace discount tiers",
    response_model=DiscountRulesResponse,
)
async def replace_discount_rules(
    procedure_id: int,
    request: DiscountRulesUpdateRequest,
    db: Session = Depends(get_db),
) -> DiscountRulesResponse:
    """
    Replace every discount tier of a procedure.

    Tiers with invalid bounds or overlapping each other are rejected with
    400 and the list of problems.
    """
    try:
        rules = DiscountService.replace_rules(db, procedure_id, [rule.to_tier() for rule in request.rules])
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to replace discount rules of procedure {procedure_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao salvar as regras de desconto"
        )

    return DiscountRulesResponse(
        procedure_id=procedure_id,
        rules=[DiscountRuleModel.from_tier(rule) for rule in rules],
    )


@router.post("/templates/preview", summary="Preview a message template", response_model=TemplatePreviewResponse)
async def preview_template(
    request: TemplatePreviewRequest,
    db: Session = Depends(get_db),
) -> TemplatePreviewResponse:
    """
    Render a template with sample variables.

    Placeholders that have no value are listed so the admin can fix typos
    before saving.
    """
    location = None
    if request.location_id is not None:
        location = db.query(Location).filter(Location.id == request.location_id).first()
        if not location:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Local não encontrado"
            )

    preview = MessageTemplateService.preview(request.template, request.variables, location)
    return TemplatePreviewResponse(**preview)


@router.get(
    "/appointments/{appointment_id}/notification",
    summary="Compose an appointment notification",
    response_model=NotificationResponse,
)
async def get_appointment_notification(
    appointment_id: int,
    event: NotificationEvent = Query(..., description="confirmation, cancellation, reminder or new_booking"),
    db: Session = Depends(get_db),
    clock: CalendarClock = Depends(get_calendar_clock),
) -> NotificationResponse:
    """Compose the outbound WhatsApp message for an appointment event."""
    message = NotificationService.compose(db, appointment_id, event, clock)
    return NotificationResponse(
        phone=message.phone,
        message=message.message,
        template_type=message.template_type,
    )
