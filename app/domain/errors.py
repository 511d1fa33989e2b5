# app/domain/errors.py
"""
Wyjatki domenowe.

Kazdy dziedziczy po wbudowanym wyjatku, ktory serwisy rzucaly wczesniej
(ValueError, PermissionError, ...), wiec stare ``except ValueError`` dalej dziala.
"""
from typing import Any


class DomainError(Exception):
    status_code = 500
    reason = "Internal"

    def __init__(self, message: str, reason: str | None = None, **fields: Any):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason
        self.fields = fields

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "reason": self.reason, **self.fields}


class NotFoundError(DomainError, LookupError):
    status_code = 404
    reason = "NotFound"


class ForbiddenError(DomainError, PermissionError):
    status_code = 403
    reason = "Forbidden"


class ValidationFailure(DomainError, ValueError):
    status_code = 400
    reason = "ValidationFailure"


class ConflictError(DomainError, RuntimeError):
    status_code = 409
    reason = "Conflict"


# kody odrzucenia (reason) uzywane przez checkout
EMPTY_CART = "EmptyCart"
NO_MATCHING_ITEMS = "NoMatchingItems"
INSUFFICIENT_STOCK = "InsufficientStock"
INVALID_SELECTION = "InvalidSelection"
INVALID_QUANTITY = "InvalidQuantity"
INVALID_STATUS_TRANSITION = "InvalidStatusTransition"
