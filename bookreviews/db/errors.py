"""Errors raised by the persistence layer."""
from __future__ import annotations


class NotFoundError(LookupError):
    """Raised when a lookup by id or by association yields no record."""


class ConstraintViolationError(ValueError):
    """Raised when a write would break a uniqueness, range or foreign-key rule."""


class DuplicateAssociationError(ConstraintViolationError):
    """Raised by a strict attach when the pair is already linked."""


__all__ = [
    "NotFoundError",
    "ConstraintViolationError",
    "DuplicateAssociationError",
]
