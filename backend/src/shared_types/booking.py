"""
Shared types for appointments, packages and discounts.

These are storage-agnostic snapshots: services compute on them and the
SQLAlchemy models convert to them, so the rules never depend on an ORM session.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AppointmentSnapshot:
    """
    Read-only view of an appointment as seen by the booking rules.

    session_number == 1 marks the anchor session of a package, the only one
    whose payment value and payment status are authoritative. Later sessions
    point at it through package_parent_id.
    """
    id: int
    date: str  # Canonical YYYY-MM-DD
    time: Optional[str] = None  # Format: "HH:MM"
    status: Optional[str] = None
    procedure_id: Optional[int] = None
    procedure_name: str = ""
    procedure_price: Optional[float] = None
    session_number: int = 1
    total_sessions: int = 1
    package_parent_id: Optional[int] = None
    payment_status: Optional[str] = None
    payment_value: Optional[float] = None
    return_of_appointment_id: Optional[int] = None
    client_name: str = ""
    client_phone: Optional[str] = None
    notes: Optional[str] = None
    location_id: Optional[int] = None
    created_at: Optional[str] = None  # ISO instant, only used for ordering ties


@dataclass(frozen=True)
class PackageSessionInfo:
    """Display metadata for one session of a (possibly multi-session) package."""
    is_package: bool
    is_first_session: bool
    session_number: int
    total_sessions: int
    display_name: str
    should_count_value: bool


@dataclass(frozen=True)
class PackageSessionUpdate:
    """New numbering for one appointment of a package."""
    appointment_id: int
    session_number: int
    total_sessions: int
    package_parent_id: Optional[int]


@dataclass(frozen=True)
class PricedSelection:
    """A line item of a booking: a body area or an add-on specification."""
    kind: str  # "area" or "spec"
    id: str
    unit_price: float


@dataclass(frozen=True)
class DiscountTier:
    """
    Tiered discount band applied by number of selected areas.

    max_groups None means the band has no upper bound.
    """
    min_groups: int
    max_groups: Optional[int]
    discount_percentage: float
    id: Optional[int] = None

    def matches(self, group_count: int) -> bool:
        """Check whether a number of area selections falls within this band."""
        if group_count < self.min_groups:
            return False
        return self.max_groups is None or group_count <= self.max_groups


@dataclass(frozen=True)
class DiscountResult:
    """Subtotal, discount and final total of a booking."""
    subtotal: float
    discount: float
    final_total: float
    applied_rule: Optional[DiscountTier] = None

    @property
    def discount_percentage(self) -> float:
        return self.applied_rule.discount_percentage if self.applied_rule else 0.0
