"""
Runtime settings for the technician client.

Every value can be overridden from the environment or a local .env file:
API endpoint and token, task page size, default working days, log level.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable

from dotenv import load_dotenv

from fieldops.logging_context import SessionIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_WORKING_DAYS = "monday,tuesday,wednesday,thursday,friday,saturday"


def _parse_env(env_var: str, default: str, cast: Callable[[str], Any], kind: str) -> Any:
    value = os.getenv(env_var, default)
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{env_var} must be {kind}, got {value!r}") from None


def _safe_int(env_var: str, default: str) -> int:
    return _parse_env(env_var, default, int, "an integer")


def _safe_float(env_var: str, default: str) -> float:
    return _parse_env(env_var, default, float, "a number")


def _csv_tuple(env_var: str, default: str) -> tuple[str, ...]:
    """Comma-separated env var as a lowercase tuple, blanks dropped."""
    return tuple(
        item.strip().lower()
        for item in os.getenv(env_var, default).split(",")
        if item.strip()
    )


@dataclass(frozen=True)
class ApiConfig:
    """Technician backend connection settings."""

    base_url: str = os.getenv("FIELDOPS_API_BASE_URL", "https://api.fieldops.example.com/api")
    timeout_sec: float = _safe_float("FIELDOPS_API_TIMEOUT", "30")
    auth_token: str = os.getenv("FIELDOPS_API_TOKEN", "")


@dataclass(frozen=True)
class TaskConfig:
    """Task list paging settings."""

    per_page: int = _safe_int("TASKS_PER_PAGE", "15")


@dataclass(frozen=True)
class ScheduleConfig:
    """Availability screen defaults."""

    default_working_days: tuple[str, ...] = _csv_tuple(
        "DEFAULT_WORKING_DAYS", _DEFAULT_WORKING_DAYS
    )


@dataclass(frozen=True)
class AppConfig:
    """Top-level settings object."""

    api: ApiConfig = field(default_factory=ApiConfig)
    tasks: TaskConfig = field(default_factory=TaskConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "fieldops-technician")


def _validate_config(config: AppConfig) -> None:
    """Fail fast on settings the client cannot work with."""
    if not config.api.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"FIELDOPS_API_BASE_URL must be an http(s) URL, got {config.api.base_url!r}"
        )
    if config.api.timeout_sec <= 0:
        raise ValueError(
            f"FIELDOPS_API_TIMEOUT must be > 0, got {config.api.timeout_sec}"
        )
    if not 1 <= config.tasks.per_page <= 100:
        raise ValueError(
            f"TASKS_PER_PAGE must be between 1 and 100, got {config.tasks.per_page}"
        )

    from fieldops.scheduling.day_codes import WEEK_DAYS

    unknown = [d for d in config.schedule.default_working_days if d not in WEEK_DAYS]
    if unknown:
        raise ValueError(f"DEFAULT_WORKING_DAYS has unknown days: {unknown}")


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Records from any logger need session_id for the format above.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())


def load_config() -> AppConfig:
    """Build settings from the environment, validate them and set up logging."""
    config = AppConfig()
    _validate_config(config)
    _configure_logging(config.log_level)
    logger.info("%s settings loaded (api=%s)", config.app_name, config.api.base_url)
    return config


settings = load_config()
