"""
statement_fetcher/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
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
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


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


@dataclass(frozen=True)
class ServiceSettings:
    """
    Inbound HTTP service settings.
    """

    api_key: str | None = None
    port: int = 3003
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment in {"prod", "production"}


@dataclass(frozen=True)
class AdminAPISettings:
    """
    Admin API client settings.
    """

    base_url: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class BrowserSettings:
    """
    Remote browser session and AI model settings.
    """

    browserbase_api_key: str | None = None
    browserbase_project_id: str | None = None
    model_api_key: str | None = None
    model_name: str = "google/gemini-2.0-flash"
    env: str = "BROWSERBASE"
    verbose: int = 1


@dataclass(frozen=True)
class CloudinarySettings:
    """
    Durable statement storage settings.
    """

    cloud_name: str | None = None
    api_key: str | None = None
    api_secret: str | None = None
    folder: str = "supplier_statements"


@dataclass(frozen=True)
class StatementSettings:
    """
    Statement download and processing limits.
    """

    download_timeout_seconds: float = 60.0
    max_download_bytes: int = 50 * 1024 * 1024
    max_concurrency: int = 4
    capture_timeout_seconds: float = 10.0


@dataclass(frozen=True)
class JobSettings:
    """
    Per-job execution limits.
    """

    timeout_seconds: float = 900.0


@dataclass(frozen=True)
class ObservabilitySettings:
    """
    Error reporting settings.
    """

    sentry_dsn: str | None = None
    traces_sample_rate: float = 1.0


@lru_cache(maxsize=1)
def get_service_settings() -> ServiceSettings:
    """
    Return cached inbound service settings from environment variables.
    """

    return ServiceSettings(
        api_key=_get_optional_str_env("API_KEY"),
        port=max(1, _get_int_env("PORT", 3003)),
        environment=_get_str_env("ENVIRONMENT", "development").lower(),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_admin_api_settings() -> AdminAPISettings:
    """
    Return cached Admin API settings from environment variables.
    """

    base_url = _get_optional_str_env("ADMIN_API_BASE_URL")
    return AdminAPISettings(
        base_url=base_url.rstrip("/") if base_url else None,
        api_key=_get_optional_str_env("ADMIN_API_KEY"),
        timeout_seconds=max(1.0, _get_float_env("ADMIN_API_TIMEOUT_SECONDS", 30.0)),
        max_retries=max(0, _get_int_env("ADMIN_API_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("ADMIN_API_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("ADMIN_API_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_browser_settings() -> BrowserSettings:
    """
    Return cached browser session settings from environment variables.
    """

    return BrowserSettings(
        browserbase_api_key=_get_optional_str_env("BROWSERBASE_API_KEY"),
        browserbase_project_id=_get_optional_str_env("BROWSERBASE_PROJECT_ID"),
        model_api_key=_get_optional_str_env("GEMINI_API_KEY"),
        model_name=_get_str_env("BROWSER_MODEL_NAME", "google/gemini-2.0-flash"),
        env=_get_str_env("BROWSER_ENV", "BROWSERBASE").upper(),
        verbose=max(0, _get_int_env("BROWSER_VERBOSE", 1)),
    )


@lru_cache(maxsize=1)
def get_cloudinary_settings() -> CloudinarySettings:
    """
    Return cached Cloudinary settings from environment variables.
    """

    return CloudinarySettings(
        cloud_name=_get_optional_str_env("CLOUDINARY_CLOUD_NAME"),
        api_key=_get_optional_str_env("CLOUDINARY_API_KEY"),
        api_secret=_get_optional_str_env("CLOUDINARY_API_SECRET"),
        folder=_get_str_env("CLOUDINARY_FOLDER", "supplier_statements").strip("/"),
    )


@lru_cache(maxsize=1)
def get_statement_settings() -> StatementSettings:
    """
    Return cached statement processing settings from environment variables.
    """

    return StatementSettings(
        download_timeout_seconds=max(1.0, _get_float_env("STATEMENT_DOWNLOAD_TIMEOUT_SECONDS", 60.0)),
        max_download_bytes=max(1, _get_int_env("STATEMENT_MAX_DOWNLOAD_BYTES", 50 * 1024 * 1024)),
        max_concurrency=max(1, _get_int_env("STATEMENT_MAX_CONCURRENCY", 4)),
        capture_timeout_seconds=max(1.0, _get_float_env("STATEMENT_CAPTURE_TIMEOUT_SECONDS", 10.0)),
    )


@lru_cache(maxsize=1)
def get_job_settings() -> JobSettings:
    """
    Return cached job execution settings from environment variables.
    """

    return JobSettings(
        timeout_seconds=max(1.0, _get_float_env("JOB_TIMEOUT_SECONDS", 900.0)),
    )


@lru_cache(maxsize=1)
def get_observability_settings() -> ObservabilitySettings:
    """
    Return cached error reporting settings from environment variables.
    """

    return ObservabilitySettings(
        sentry_dsn=_get_optional_str_env("SENTRY_DSN"),
        traces_sample_rate=min(1.0, max(0.0, _get_float_env("SENTRY_TRACES_SAMPLE_RATE", 1.0))),
    )
