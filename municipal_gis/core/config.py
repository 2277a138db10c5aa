"""Viewer configuration loaded from environment variables.

All configuration values have sensible defaults for local development.
Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth in deployment.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range or a required string is empty.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from municipal_gis.core.constants import (
    DEFAULT_CACHE_MAX_AGE_S,
    DEFAULT_CACHE_MAX_BYTES,
    DEFAULT_CACHE_STALE_WHILE_REVALIDATE_S,
    DEFAULT_FETCH_TIMEOUT_S,
    DEFAULT_USER_AGENT,
    PROJECTED_MAGNITUDE_THRESHOLD,
    STATE_PLANE_CRS,
    WGS84_CRS,
)
from municipal_gis.core.exceptions import GisError


class ConfigValidationError(GisError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Immutable viewer configuration.

    Loaded once at function startup and threaded through the handlers.

    Attributes:
        data_root: Directory that registry ``file_path`` entries are relative to.
        fetch_timeout_s: Timeout in seconds for remote feature-service requests.
        fetch_user_agent: ``User-Agent`` header sent to remote services.
        cache_max_bytes: Payloads smaller than this are publicly cacheable.
        cache_max_age_s: ``s-maxage`` for cacheable responses, in seconds.
        cache_stale_while_revalidate_s: ``stale-while-revalidate`` window, in seconds.
        projected_magnitude_threshold: Coordinate magnitude above which
            data is treated as projected rather than degrees.
        source_crs: CRS assumed for detected projected data.
        target_crs: CRS served to the map.
    """

    data_root: str = "."
    fetch_timeout_s: float = DEFAULT_FETCH_TIMEOUT_S
    fetch_user_agent: str = DEFAULT_USER_AGENT
    cache_max_bytes: int = DEFAULT_CACHE_MAX_BYTES
    cache_max_age_s: int = DEFAULT_CACHE_MAX_AGE_S
    cache_stale_while_revalidate_s: int = DEFAULT_CACHE_STALE_WHILE_REVALIDATE_S
    projected_magnitude_threshold: float = PROJECTED_MAGNITUDE_THRESHOLD
    source_crs: str = STATE_PLANE_CRS
    target_crs: str = WGS84_CRS

    @classmethod
    def from_env(cls) -> ViewerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``FETCH_TIMEOUT_S=abc``).
        """
        config = cls(
            data_root=os.getenv("DATA_ROOT", "."),
            fetch_timeout_s=float(os.getenv("FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S))),
            fetch_user_agent=os.getenv("FETCH_USER_AGENT", DEFAULT_USER_AGENT),
            cache_max_bytes=int(os.getenv("CACHE_MAX_BYTES", str(DEFAULT_CACHE_MAX_BYTES))),
            cache_max_age_s=int(os.getenv("CACHE_MAX_AGE_S", str(DEFAULT_CACHE_MAX_AGE_S))),
            cache_stale_while_revalidate_s=int(
                os.getenv(
                    "CACHE_STALE_WHILE_REVALIDATE_S",
                    str(DEFAULT_CACHE_STALE_WHILE_REVALIDATE_S),
                )
            ),
            projected_magnitude_threshold=float(
                os.getenv("PROJECTED_MAGNITUDE_THRESHOLD", str(PROJECTED_MAGNITUDE_THRESHOLD))
            ),
            source_crs=os.getenv("SOURCE_CRS", STATE_PLANE_CRS),
            target_crs=os.getenv("TARGET_CRS", WGS84_CRS),
        )
        _validate(config)
        return config


def _validate(config: ViewerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.fetch_timeout_s <= 0:
        raise ConfigValidationError(
            "FETCH_TIMEOUT_S",
            config.fetch_timeout_s,
            "must be > 0 (seconds)",
        )

    if config.cache_max_bytes <= 0:
        raise ConfigValidationError(
            "CACHE_MAX_BYTES",
            config.cache_max_bytes,
            "must be > 0 (bytes)",
        )

    if config.cache_max_age_s < 0:
        raise ConfigValidationError(
            "CACHE_MAX_AGE_S",
            config.cache_max_age_s,
            "must be >= 0 (seconds)",
        )

    if config.cache_stale_while_revalidate_s < 0:
        raise ConfigValidationError(
            "CACHE_STALE_WHILE_REVALIDATE_S",
            config.cache_stale_while_revalidate_s,
            "must be >= 0 (seconds)",
        )

    if config.projected_magnitude_threshold <= 0:
        raise ConfigValidationError(
            "PROJECTED_MAGNITUDE_THRESHOLD",
            config.projected_magnitude_threshold,
            "must be > 0",
        )

    for key, value in (
        ("DATA_ROOT", config.data_root),
        ("FETCH_USER_AGENT", config.fetch_user_agent),
        ("SOURCE_CRS", config.source_crs),
        ("TARGET_CRS", config.target_crs),
    ):
        if not value:
            raise ConfigValidationError(key, value, "must not be empty")
