# backend/kegtrack/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Load the demo kegs/customers/cider types into a fresh store
    SEED_DEMO_DATA = _env_flag("SEED_DEMO_DATA")

    # Deployed kegs older than this many days are overdue
    OVERDUE_DAYS_DEFAULT = int(os.environ.get("OVERDUE_DAYS_DEFAULT", "7"))

    # Default page size for GET /api/activities
    RECENT_ACTIVITY_LIMIT = int(os.environ.get("RECENT_ACTIVITY_LIMIT", "10"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
