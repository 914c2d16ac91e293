from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ApplicationError(Exception):
    """
    Domain-level error raised by the storefront services.

    None of the storefront errors are fatal: each one has a documented recovery
    at the layer that catches it. The payload produced by ``to_dict`` is what a
    presentation layer receives when it wants to show or log the failure.

    Args:
        code: Machine readable error code.
        message: Human readable explanation of the error.
        details: Optional structured details.
        hint: Optional hint for remediation.
    """

    default_code = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = (code or self.default_code).strip().upper()
        self.message = message
        self.details = details
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details is not None:
            payload["error"]["details"] = _normalize_details(self.details)
        if self.hint is not None:
            payload["error"]["hint"] = self.hint
        return payload


class CatalogLoadError(ApplicationError):
    """The catalog source could not be read or parsed."""

    default_code = "CATALOG_LOAD_FAILED"


class CatalogValidationError(ApplicationError):
    """The catalog payload does not have the expected top-level shape."""

    default_code = "CATALOG_INVALID"


class StorageError(ApplicationError):
    """Reading or writing the persisted cart failed."""

    default_code = "STORAGE_FAILED"


class InvariantViolation(ApplicationError):
    """Filter state broke one of its own invariants."""

    default_code = "INVARIANT_VIOLATION"


class InvalidQuantityError(ApplicationError, ValueError):
    """Cart quantities must be positive integers."""

    default_code = "INVALID_QUANTITY"


class InvalidSelectionError(ApplicationError, ValueError):
    """The requested size is not offered by the product."""

    default_code = "INVALID_SELECTION"


def _normalize_details(details: Any) -> Any:
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


__all__ = [
    "ApplicationError",
    "CatalogLoadError",
    "CatalogValidationError",
    "StorageError",
    "InvariantViolation",
    "InvalidQuantityError",
    "InvalidSelectionError",
]
