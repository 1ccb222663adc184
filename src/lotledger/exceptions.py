"""
Domain exceptions for the inventory ledger.

Every error raised by the engines derives from :class:`InventoryError` so the
HTTP layer and the CLI can render them uniformly.
"""

from __future__ import annotations

from typing import Any


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(InventoryError):
    """Missing or malformed input, rejected before any write."""

    status_code = 400

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": None if value is None else str(value)[:100],
            },
        )


class NotFoundError(InventoryError):
    """A referenced item, type, product or work order does not exist."""

    status_code = 404

    def __init__(self, entity: str, key: Any):
        super().__init__(
            f"{entity} not found: {key}",
            code="NOT_FOUND",
            details={"entity": entity, "key": str(key)},
        )


class UniquenessError(InventoryError):
    """A unique key already exists in the store."""

    status_code = 409

    def __init__(self, entity: str, key: Any):
        super().__init__(
            f"{entity} already exists: {key}",
            code="DUPLICATE",
            details={"entity": entity, "key": str(key)},
        )


class InvalidStateError(InventoryError):
    """The operation is not valid for the current state of the entity."""

    status_code = 409

    def __init__(self, message: str, **details: Any):
        super().__init__(message, code="INVALID_STATE", details=details)
