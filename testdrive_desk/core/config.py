"""Runtime configuration loaded from the environment."""

import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env (for local development)
load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL: Final[str] = os.getenv("DATABASE_URL", "sqlite:///./testdrive.db")

# Upper bound on how long a request waits for the storage write lock.
DB_LOCK_TIMEOUT_SECONDS: Final[float] = float(os.getenv("DB_LOCK_TIMEOUT_SECONDS", "5"))

SLOT_MINUTES: Final[int] = int(os.getenv("SLOT_MINUTES", "60"))

# Fallback policy for weekdays with no working-hours row.
DEFAULT_OPEN_TIME: Final[str] = os.getenv("DEFAULT_OPEN_TIME", "09:00")
DEFAULT_CLOSE_TIME: Final[str] = os.getenv("DEFAULT_CLOSE_TIME", "18:00")
DEFAULT_CLOSED_DAYS: Final[frozenset[str]] = frozenset(
    day.strip().upper()
    for day in os.getenv("DEFAULT_CLOSED_DAYS", "SUNDAY").split(",")
    if day.strip()
)

STRICT_STATUS_TRANSITIONS: Final[bool] = _get_bool("STRICT_STATUS_TRANSITIONS", False)

DEFAULT_DEALERSHIP_NAME: Final[str] = os.getenv("DEFAULT_DEALERSHIP_NAME", "Vehiql Motors")

LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()
