"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # React dev server (Vite) - localhost
    FRONTEND_URL,  # Includes production URL if FRONTEND_URL is set accordingly
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Calendar settings (system_settings keys and their defaults)
SETTING_TIME_ZONE = "timezone"
SETTING_TIME_ZONE_LABEL = "timezone_name"
SETTING_DATE_FORMAT = "date_format"
SETTING_TIME_FORMAT = "time_format"
CALENDAR_SETTING_KEYS = [
    SETTING_TIME_ZONE,
    SETTING_TIME_ZONE_LABEL,
    SETTING_DATE_FORMAT,
    SETTING_TIME_FORMAT,
]

DEFAULT_DATE_FORMAT = "DD/MM/YYYY"
DEFAULT_TIME_FORMAT = "HH:mm"

# Schedule settings (system_settings keys)
SETTING_SCHEDULE_START_TIME = "schedule_start_time"
SETTING_SCHEDULE_END_TIME = "schedule_end_time"
SETTING_SCHEDULE_INTERVAL_MINUTES = "schedule_interval_minutes"
SCHEDULE_SETTING_KEYS = [
    SETTING_SCHEDULE_START_TIME,
    SETTING_SCHEDULE_END_TIME,
    SETTING_SCHEDULE_INTERVAL_MINUTES,
]

# Same-day bookings must start more than this many minutes after "now"
SAME_DAY_BOOKING_LEAD_MINUTES = 30
DEFAULT_PROCEDURE_DURATION_MINUTES = 60

# Payment / appointment statuses as stored by the booking flow
PAYMENT_STATUS_AWAITING = "aguardando"
PAYMENT_STATUS_PAID = "pago"
APPOINTMENT_STATUS_CANCELED = "cancelado"
APPOINTMENT_STATUS_CONFIRMED = "confirmado"

# Selection kinds for discount calculation
SELECTION_KIND_AREA = "area"
SELECTION_KIND_SPEC = "spec"

# Location colors, assigned by position in the stable location ordering
CITY_COLORS = [
    "bg-blue-500",
    "bg-green-500",
    "bg-purple-500",
    "bg-orange-500",
    "bg-pink-500",
    "bg-indigo-500",
    "bg-teal-500",
    "bg-red-500",
]

# Prefix of the first line of a location block in outbound messages
LOCATION_PIN_PREFIX = "📍 "

# Brazilian WhatsApp numbers: country code + area code + 8 or 9 digit number
WHATSAPP_COUNTRY_CODE = "55"
WHATSAPP_PHONE_MIN_DIGITS = 12
WHATSAPP_PHONE_MAX_DIGITS = 13
