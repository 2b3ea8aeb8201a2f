"""
Application configuration using python-dotenv.

This module loads environment variables from .env file into os.environ
for use throughout the application.
"""

import os
import pathlib
from dotenv import load_dotenv


# Determine if we're running in a test environment
# Don't load .env file during testing to ensure predictable test behavior
is_testing = os.getenv("PYTEST_VERSION") is not None or any("pytest" in str(frame) for frame in __import__('inspect').stack(0))

# Load .env file into os.environ (only outside of testing)
if not is_testing:
    # Try multiple possible locations for .env file
    possible_paths = [
        pathlib.Path(__file__).parent.parent.parent / ".env",  # backend/.env (when run from backend/src)
        pathlib.Path(__file__).parent.parent.parent.parent / ".env",  # .env at repository root
        pathlib.Path.cwd() / ".env",  # .env in current directory
    ]

    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


def get_database_url():
    """Get the database URL from environment."""
    return os.getenv(
        "DATABASE_URL",
        "sqlite:///./clinic_booking.db"
    )

DATABASE_URL = get_database_url()
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Calendar defaults used when system_settings cannot be read
DEFAULT_TIME_ZONE = os.getenv("DEFAULT_TIME_ZONE", "America/Sao_Paulo")
DEFAULT_TIME_ZONE_LABEL = os.getenv("DEFAULT_TIME_ZONE_LABEL", "Brasília (UTC-3)")

# Location block defaults for outbound messages
DEFAULT_CLINIC_NAME = os.getenv("DEFAULT_CLINIC_NAME", "Clínica Dra. Karoline Ferreira")
DEFAULT_CITY_NAME = os.getenv("DEFAULT_CITY_NAME", "")
