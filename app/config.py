"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files(root: Path | None = None) -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    base = root or PROJECT_ROOT
    for filename in (".env", ".env.local"):
        env_path = base / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoreSettings:
    """
    Location of the append-only HMIS CSV store.
    """

    csv_path: Path = Path("hmis_data.csv")


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for CSV uploads.
    """

    batch_size: int = 1000
    max_validation_errors: int = 500
    log_validation_errors: bool = True


@dataclass(frozen=True)
class DashboardRefreshSettings:
    """
    Periodic dashboard refresh settings.

    ``summary_url`` switches the refresher from the local store to a remote
    summary endpoint.
    """

    enabled: bool = True
    interval_seconds: int = 30
    summary_url: str | None = None


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for outbound connectors.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level settings bundle consumed by ``create_app``.
    """

    store: StoreSettings
    ingestion: CSVIngestionSettings
    refresh: DashboardRefreshSettings
    http: ExternalHTTPSettings
    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_store_settings() -> StoreSettings:
    """
    Return cached store settings from environment variables.
    """

    return StoreSettings(csv_path=Path(_get_str_env("HMIS_CSV_PATH", "hmis_data.csv")))


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV upload settings from environment variables.
    """

    return CSVIngestionSettings(
        batch_size=max(1, _get_int_env("CSV_INGEST_BATCH_SIZE", 1000)),
        max_validation_errors=max(1, _get_int_env("CSV_INGEST_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("CSV_INGEST_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_dashboard_refresh_settings() -> DashboardRefreshSettings:
    """
    Return cached dashboard refresh settings from environment variables.
    """

    return DashboardRefreshSettings(
        enabled=_get_bool_env("DASHBOARD_REFRESH_ENABLED", True),
        interval_seconds=max(1, _get_int_env("DASHBOARD_REFRESH_SECONDS", 30)),
        summary_url=_get_optional_str_env("HMIS_SUMMARY_URL"),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return the cached settings bundle.
    """

    origins = tuple(
        origin.strip()
        for origin in _get_str_env("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    )
    return AppSettings(
        store=get_store_settings(),
        ingestion=get_csv_ingestion_settings(),
        refresh=get_dashboard_refresh_settings(),
        http=get_external_http_settings(),
        cors_allow_origins=origins or ("*",),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def collect_settings_problems(settings: AppSettings) -> list[str]:
    """
    Return every configuration problem found; empty when settings are usable.

    Raw environment values are re-checked here because the typed getters
    fall back to defaults silently.
    """

    _load_env_once()
    problems: list[str] = []

    raw_interval = os.getenv("DASHBOARD_REFRESH_SECONDS")
    if raw_interval is not None:
        try:
            int(raw_interval)
        except ValueError:
            problems.append(
                f"DASHBOARD_REFRESH_SECONDS must be an integer, got '{raw_interval.strip()}'."
            )

    store_dir = settings.store.csv_path.expanduser().resolve().parent
    if not store_dir.is_dir():
        problems.append(f"HMIS_CSV_PATH directory does not exist: {store_dir}.")

    url = settings.refresh.summary_url
    if url is not None:
        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            problems.append(f"HMIS_SUMMARY_URL must be an http(s) URL, got '{url}'.")

    if settings.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        problems.append(f"LOG_LEVEL '{settings.log_level}' is not a valid logging level.")

    return problems


def clear_settings_cache() -> None:
    """
    Drop cached settings so the next getter call re-reads the environment.
    """

    for getter in (
        get_store_settings,
        get_csv_ingestion_settings,
        get_dashboard_refresh_settings,
        get_external_http_settings,
        get_app_settings,
    ):
        getter.cache_clear()
