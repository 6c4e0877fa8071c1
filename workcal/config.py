"""Module-level configuration for workcal defaults."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from datetime import tzinfo

from dateutil import tz

from workcal.logging import get_logger

logger = get_logger(__name__)


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    return value if value else default


@dataclass
class WorkcalConfig:
    """Configuration for calendar evaluation defaults."""

    timezone: str | None = field(default_factory=lambda: _env("WORKCAL_TIMEZONE"))
    id_namespace: str = "custom"
    fallback_name: str = "unnamed"
    max_scan_days: int = 3660
    log_level: str = field(
        default_factory=lambda: _env("WORKCAL_LOG_LEVEL", "WARNING") or "WARNING"
    )


# Module-level singleton
_config: WorkcalConfig | None = None
_config_lock = threading.Lock()


def get_config() -> WorkcalConfig:
    """Get the global workcal configuration singleton."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = WorkcalConfig()
    return _config


def configure_workcal(
    timezone: str | None = None,
    id_namespace: str | None = None,
    fallback_name: str | None = None,
    max_scan_days: int | None = None,
) -> None:
    """Override workcal defaults for the running process.

    Args:
        timezone: IANA zone name used as the "local" zone for calendar days.
            Leave unset to follow the zone of the running process.
        id_namespace: Prefix of generated calendar ids.
        fallback_name: Name segment used when a calendar name sanitizes to
            nothing.
        max_scan_days: Upper bound on day-by-day forward scans.

    Example:
        from workcal.config import configure_workcal

        configure_workcal(timezone="Europe/Moscow")
    """
    config = get_config()
    with _config_lock:
        if timezone is not None:
            config.timezone = timezone
        if id_namespace is not None:
            config.id_namespace = id_namespace
        if fallback_name is not None:
            config.fallback_name = fallback_name
        if max_scan_days is not None:
            config.max_scan_days = max_scan_days


def get_local_zone() -> tzinfo:
    """Return the zone that defines a "local calendar day"."""
    name = get_config().timezone
    if name:
        zone = tz.gettz(name)
        if zone is not None:
            return zone
        logger.warning("unknown_timezone", timezone=name)
    return tz.tzlocal()


def reset_config() -> None:
    """Reset configuration to defaults. Useful for testing."""
    global _config
    with _config_lock:
        _config = WorkcalConfig()
