"""Environment variables configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = Path(__file__).parent.parent.parent / "data" / "booking_core.db"


def get_db_path() -> Path:
    """Returns the SQLite database path from environment variable."""
    value = os.getenv("BOOKING_DB_PATH")
    return Path(value) if value else DEFAULT_DB_PATH


def get_business_name() -> str:
    """Returns the business name used in client-facing messages."""
    return os.getenv("BUSINESS_NAME", "Muzza")


def get_phone_country_code() -> str:
    """Returns the country dialing prefix for local phone numbers."""
    return os.getenv("PHONE_COUNTRY_CODE", "51")
