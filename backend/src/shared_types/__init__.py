"""
Shared type definitions for the clinic booking backend.

This module contains dataclasses and types that are used across multiple services.
"""

from shared_types.availability import AvailabilityPeriod, BookedSlot, ScheduleWindow
from shared_types.booking import (
    AppointmentSnapshot,
    DiscountResult,
    DiscountTier,
    PackageSessionInfo,
    PackageSessionUpdate,
    PricedSelection,
)

__all__ = [
    "AvailabilityPeriod",
    "BookedSlot",
    "ScheduleWindow",
    "AppointmentSnapshot",
    "DiscountResult",
    "DiscountTier",
    "PackageSessionInfo",
    "PackageSessionUpdate",
    "PricedSelection",
]
