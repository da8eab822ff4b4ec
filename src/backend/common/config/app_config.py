"""Application configuration loaded from the environment.

Values come from process env vars, with `.env` (and `.env.example` as a local
convenience) loaded first. Import the module-level `config` object.
"""

from __future__ import annotations

import logging
import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# Convenience: allow local runs with only `.env.example` filled.
if not os.environ.get("FEIERTAGE_API_URL"):
    load_dotenv(dotenv_path=os.path.abspath(".env.example"), override=False)

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


class AppConfig:
    """Typed view over the environment for the working-days service."""

    def __init__(self) -> None:
        self.FEIERTAGE_API_URL = os.environ.get(
            "FEIERTAGE_API_URL", "https://get.api-feiertage.de/"
        )
        self.HOLIDAY_CACHE_TTL_SECONDS = _env_float(
            "HOLIDAY_CACHE_TTL_SECONDS", 7 * 24 * 60 * 60
        )
        self.HOLIDAY_HTTP_TIMEOUT_SECONDS = _env_float("HOLIDAY_HTTP_TIMEOUT_SECONDS", 30)
        self.WORKING_DAYS_TIMEZONE = os.environ.get(
            "WORKING_DAYS_TIMEZONE", "Europe/Berlin"
        )
        self.WORKING_DAYS_LOGGING_LEVEL = os.environ.get(
            "WORKING_DAYS_LOGGING_LEVEL", "INFO"
        )
        self.FRONTEND_SITE_NAME = os.environ.get("FRONTEND_SITE_NAME", "*")

    def get_timezone(self) -> ZoneInfo:
        """Timezone applied to naive dates and to holiday dates."""

        return ZoneInfo(self.WORKING_DAYS_TIMEZONE)


config = AppConfig()
