"""Read-only projection context.

Holds the CRS definitions the viewer understands and lazily builds one
``pyproj.Transformer`` per (source, target) pair. A context is built once
at process start (``default_projection_context``) and passed explicitly
into the reprojection functions; there is no module-level registry that
callers mutate.

Transformers are created with ``always_xy=True`` so positions are always
``(x, y)`` / ``(lon, lat)`` regardless of the CRS axis order.
"""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from municipal_gis.core.constants import (
    STATE_PLANE_CRS,
    STATE_PLANE_PROJ4,
    WGS84_CRS,
    WGS84_PROJ4,
)
from municipal_gis.core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pyproj import Transformer

logger = logging.getLogger("municipal_gis.core.projection")


class UnsupportedCRSError(ValidationError):
    """Raised when a CRS identifier has no definition in the context."""

    default_stage = "reproject"
    default_code = "UNSUPPORTED_CRS"


@dataclass(frozen=True, slots=True)
class ProjectionContext:
    """Immutable set of CRS definitions with a transformer cache.

    Attributes:
        definitions: Mapping of CRS identifier (e.g. ``"EPSG:2926"``) to a
            PROJ definition string.
    """

    definitions: Mapping[str, str]
    _transformers: dict[tuple[str, str], Transformer] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions", MappingProxyType(dict(self.definitions)))

    def supports(self, crs: str) -> bool:
        """Whether *crs* has a definition in this context."""
        return crs in self.definitions

    def transformer(self, source_crs: str, target_crs: str) -> Transformer:
        """Return the cached transformer for ``source_crs`` → ``target_crs``.

        Raises:
            UnsupportedCRSError: If either identifier is not defined.
        """
        key = (source_crs, target_crs)
        with self._lock:
            cached = self._transformers.get(key)
            if cached is not None:
                return cached

            for crs in key:
                if not self.supports(crs):
                    available = ", ".join(sorted(self.definitions))
                    msg = f"Unsupported CRS {crs!r}. Available: {available}"
                    raise UnsupportedCRSError(msg)

            from pyproj import CRS, Transformer

            built = Transformer.from_crs(
                CRS.from_user_input(self.definitions[source_crs]),
                CRS.from_user_input(self.definitions[target_crs]),
                always_xy=True,
            )
            self._transformers[key] = built
            logger.debug("Built transformer | from=%s | to=%s", source_crs, target_crs)
            return built


@functools.lru_cache(maxsize=1)
def default_projection_context() -> ProjectionContext:
    """Return the process-wide context for the State Plane / WGS 84 pair."""
    return ProjectionContext(
        definitions={
            STATE_PLANE_CRS: STATE_PLANE_PROJ4,
            WGS84_CRS: WGS84_PROJ4,
        }
    )
