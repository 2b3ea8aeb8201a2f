"""
Shared request and response models for API endpoints.

This module contains Pydantic models that are shared across the booking
and admin routers to ensure consistency and reduce duplication.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from core.constants import SELECTION_KIND_AREA
from shared_types.booking import DiscountTier, PricedSelection


class CpfValidateRequest(BaseModel):
    """Request model for CPF validation."""
    cpf: str


class CpfValidateResponse(BaseModel):
    """Response model for CPF validation."""
    valid: bool
    cleaned: str
    formatted: str
    masked: str


class AvailabilityPeriodResponse(BaseModel):
    """Response model for one availability period."""
    location_id: int
    start_date: str  # YYYY-MM-DD
    end_date: Optional[str] = None  # None means single-day period
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    color: Optional[str] = None


class AvailabilityResponse(BaseModel):
    """Response model for the locations open on a day."""
    date: str
    display_date: str  # DD/MM/YYYY
    periods: List[AvailabilityPeriodResponse]
    location_ids: List[int]  # Stable location order
    colors: Dict[int, str]


class AvailableTimesResponse(BaseModel):
    """Response model for bookable times of a location on a day."""
    date: str
    location_id: int
    times: List[str]


class SelectionRequest(BaseModel):
    """A priced line item: a body area or an add-on specification."""
    kind: Literal["area", "spec"] = SELECTION_KIND_AREA
    id: str
    unit_price: float = Field(ge=0)

    def to_selection(self) -> PricedSelection:
        return PricedSelection(kind=self.kind, id=self.id, unit_price=self.unit_price)


class DiscountRuleModel(BaseModel):
    """Discount tier as exchanged with the admin screen."""
    id: Optional[int] = None
    min_groups: int
    max_groups: Optional[int] = None  # None means no upper bound
    discount_percentage: float

    @classmethod
    def from_tier(cls, tier: DiscountTier) -> "DiscountRuleModel":
        return cls(
            id=tier.id,
            min_groups=tier.min_groups,
            max_groups=tier.max_groups,
            discount_percentage=tier.discount_percentage,
        )

    def to_tier(self) -> DiscountTier:
        return DiscountTier(
            id=self.id,
            min_groups=self.min_groups,
            max_groups=self.max_groups,
            discount_percentage=self.discount_percentage,
        )


class QuoteRequest(BaseModel):
    """Request model for a booking price quote."""
    procedure_id: int
    selections: List[SelectionRequest] = Field(default_factory=list)


class QuoteResponse(BaseModel):
    """Response model for a booking price quote."""
    procedure_id: int
    group_count: int  # Number of "area" selections
    subtotal: float
    discount: float
    final_total: float
    discount_percentage: float
    applied_rule: Optional[DiscountRuleModel] = None


class TimezoneOption(BaseModel):
    """One selectable time zone."""
    value: str
    label: str
    offset: str


class TimezoneSettingsResponse(BaseModel):
    """Response model for the configured time zone."""
    time_zone_id: str
    time_zone_label: str
    offset: str
    today: str  # YYYY-MM-DD in the configured time zone
    options: List[TimezoneOption]


class TimezoneUpdateRequest(BaseModel):
    """Request model for changing the time zone."""
    time_zone_id: str
    time_zone_label: Optional[str] = None  # Defaults to the catalog label

    @field_validator("time_zone_id")
    @classmethod
    def strip_time_zone(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Fuso horário é obrigatório")
        return v


class PackageSummaryResponse(BaseModel):
    """Response model for package session information of an appointment."""
    appointment_id: int
    is_package: bool
    is_first_session: bool
    session_number: int
    total_sessions: int
    display_name: str
    should_count_value: bool
    payment_status: str  # Mirrors the anchor session for package returns
    value: float
    counted_value: float  # 0 for returns and non-anchor sessions
    progress: str  # e.g. "2/5 sessões", empty for single sessions


class DiscountRulesResponse(BaseModel):
    """Response model for the discount tiers of a procedure."""
    procedure_id: int
    rules: List[DiscountRuleModel]


class DiscountRulesUpdateRequest(BaseModel):
    """Request model for replacing the discount tiers of a procedure."""
    rules: List[DiscountRuleModel] = Field(default_factory=list)


class TemplatePreviewRequest(BaseModel):
    """Request model for rendering a message template preview."""
    template: str
    variables: Dict[str, Optional[str]] = Field(default_factory=dict)
    location_id: Optional[int] = None  # Location whose details fill the location block


class TemplatePreviewResponse(BaseModel):
    """Response model for a message template preview."""
    rendered: str
    used_placeholders: Dict[str, str]
    unresolved_placeholders: List[str]


class NotificationResponse(BaseModel):
    """Response model for a composed outbound message."""
    phone: str
    message: str
    template_type: str

