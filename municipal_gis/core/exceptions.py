"""Unified exception taxonomy.

Provides a shared base exception hierarchy for dataset loading,
coordinate normalisation, and the HTTP surface. Every domain exception
inherits from ``GisError`` and carries structured context fields that
enable consistent status mapping, logging, and operator diagnostics.

Taxonomy categories
-------------------
- ``ValidationError``   — bad request input (unknown dataset, missing id).
- ``TransientError``    — temporary failures (network, upstream outage).
- ``PermanentError``    — unrecoverable failures (missing file, bad registry entry).
- ``ContractError``     — payload shape violations (not a FeatureCollection).

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for API responses and logging.

Only ``ContractError`` subclasses are raised by the geometry core
itself; per-feature problems degrade to "skip" or "default" instead.
"""

from __future__ import annotations


class GisError(Exception):
    """Base exception for all viewer-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"reproject"``, ``"load_dataset"``).
        code: Machine-readable error code (e.g. ``"DATASET_NOT_FOUND"``).
        retryable: Whether the caller could reasonably retry.
        dataset_id: Registry id of the dataset involved, if any.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        dataset_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.dataset_id = dataset_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "dataset_id": self.dataset_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(GisError):
    """Request or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(GisError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(GisError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(GisError):
    """Payload shape does not match the expected GeoJSON contract."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
