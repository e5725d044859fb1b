"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SERPER_PLACES_URL = "https://google.serper.dev/places"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    serper_api_key: str
    database_url: str
    serper_api_url: str = SERPER_PLACES_URL
    worker_port: int = 9000
    max_workers: int = 4
    max_pages: int = 10
    page_size: int = 100
    page_delay: float = 0.05
    empty_page_limit: int = 2
    default_result_cap: int = 1000
    min_city_budget: int = 100
    progress_every: int = 10
    default_country: str = "BR"
    job_retention_days: int = 7
    api_url: str = "http://localhost:9000"
    poll_interval: float = 2.0
    session_file: str = ""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    serper_api_key = os.getenv("SERPER_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    default_country = os.getenv("DEFAULT_COUNTRY", "BR").strip().upper() or "BR"
    session_file = os.getenv("POLLER_SESSION_FILE") or str(Path.home() / ".places_search" / "session_id")

    if not database_url:
        logger.warning("DATABASE_URL is not set; jobs will be kept in process memory only.")
    if not serper_api_key:
        logger.warning("SERPER_API_KEY is not configured; Serper Places requests will fail.")

    return Settings(
        serper_api_key=serper_api_key,
        database_url=database_url,
        serper_api_url=os.getenv("SERPER_API_URL", SERPER_PLACES_URL),
        worker_port=int(os.getenv("WORKER_PORT", "9000")),
        max_workers=int(os.getenv("WORKER_MAX_WORKERS", "4")),
        max_pages=int(os.getenv("WORKER_MAX_PAGES", "10")),
        page_size=int(os.getenv("WORKER_PAGE_SIZE", "100")),
        page_delay=float(os.getenv("WORKER_PAGE_DELAY", "0.05")),
        empty_page_limit=int(os.getenv("WORKER_EMPTY_PAGE_LIMIT", "2")),
        default_result_cap=int(os.getenv("DEFAULT_RESULT_CAP", "1000")),
        min_city_budget=int(os.getenv("MIN_CITY_BUDGET", "100")),
        progress_every=int(os.getenv("PROGRESS_EVERY", "10")),
        default_country=default_country,
        job_retention_days=int(os.getenv("JOB_RETENTION_DAYS", "7")),
        api_url=os.getenv("PLACES_API_URL", "http://localhost:9000").rstrip("/"),
        poll_interval=float(os.getenv("POLL_INTERVAL_SECONDS", "2")),
        session_file=session_file,
    )


def require_api_key(settings: Settings) -> str:
    """Return the Serper key or raise ConfigError for entrypoints that need it."""
    if not settings.serper_api_key:
        raise ConfigError("SERPER_API_KEY must be set in the environment to run search jobs.")
    return settings.serper_api_key
