"""Shared constants — single source of truth.

Centralises CRS identifiers, projection definitions, and the numeric
limits used by coordinate detection and response caching.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Coordinate reference systems
# ---------------------------------------------------------------------------

STATE_PLANE_CRS: str = "EPSG:2926"
"""NAD83(HARN) / Washington North (US survey feet). Regional projected CRS."""

WGS84_CRS: str = "EPSG:4326"
"""Geographic longitude/latitude used by the web map."""

STATE_PLANE_EPSG_CODE: str = "2926"
"""Substring matched (case-insensitively) against a payload's CRS tag."""

STATE_PLANE_PROJ4: str = (
    "+proj=lcc +lat_1=47.5 +lat_2=48.73333333333333 +lat_0=47 "
    "+lon_0=-120.8333333333333 +x_0=500000.0001016001 +y_0=0 "
    "+ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +units=us-ft +no_defs"
)
"""Lambert Conformal Conic definition for ``EPSG:2926``."""

WGS84_PROJ4: str = "+proj=longlat +datum=WGS84 +no_defs"
"""Geographic definition for ``EPSG:4326``."""

# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

PROJECTED_MAGNITUDE_THRESHOLD: float = 100_000.0
"""Absolute x/y above which a position is treated as projected, not degrees."""

# ---------------------------------------------------------------------------
# HTTP response caching
# ---------------------------------------------------------------------------

DEFAULT_CACHE_MAX_BYTES: int = 2 * 1024 * 1024
"""Serialised payloads at or above this size are served with ``no-store``."""

DEFAULT_CACHE_MAX_AGE_S: int = 3600
DEFAULT_CACHE_STALE_WHILE_REVALIDATE_S: int = 86_400

# ---------------------------------------------------------------------------
# Remote fetch
# ---------------------------------------------------------------------------

DEFAULT_FETCH_TIMEOUT_S: float = 30.0
DEFAULT_USER_AGENT: str = "Seattle-GIS-App/1.0"

# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

DEFAULT_LAYER_OPACITY: float = 0.6
