"""
Services package for shared business logic.

This package contains service classes that encapsulate business logic
shared across the booking and admin API endpoints.
"""

from .availability_service import AvailabilityService
from .calendar_clock import CalendarClock, CalendarConfig
from .discount_service import DiscountService
from .message_template_service import MessageTemplateService
from .notification_service import NotificationService
from .package_service import PackageService
from .settings_service import SettingsService, SystemSettingsSource

__all__ = [
    "AvailabilityService",
    "CalendarClock",
    "CalendarConfig",
    "DiscountService",
    "MessageTemplateService",
    "NotificationService",
    "PackageService",
    "SettingsService",
    "SystemSettingsSource",
]
