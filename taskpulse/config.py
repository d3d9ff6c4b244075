"""Runtime settings for taskpulse, read from the environment (+ optional .env)."""

import logging
import os

from dotenv import load_dotenv

from taskpulse.models.constants import DEFAULT_SUMMARY_DAYS, DEFAULT_SUMMARY_WEEKS

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SUMMARY_DAYS = _env_int("DEFAULT_SUMMARY_DAYS", DEFAULT_SUMMARY_DAYS)
SUMMARY_WEEKS = _env_int("DEFAULT_SUMMARY_WEEKS", DEFAULT_SUMMARY_WEEKS)


def configure_logging(level: str = None) -> None:
    """Configure root logging once for the HTTP service."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
