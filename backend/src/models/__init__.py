# Package initialization
# Import all models to ensure relationships are properly established
from .system_setting import SystemSetting
from .location import Location, LocationAvailability
from .procedure import Procedure
from .discount_rule import DiscountRule
from .appointment import Appointment
from .whatsapp_template import WhatsAppTemplate

__all__ = [
    "SystemSetting",
    "Location",
    "LocationAvailability",
    "Procedure",
    "DiscountRule",
    "Appointment",
    "WhatsAppTemplate",
]
