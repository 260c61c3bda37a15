"""Exception hierarchy shared by the fill engine."""
from __future__ import annotations

from typing import Any, Dict, Optional


class FillwiseError(RuntimeError):
    """Base class for errors raised by fillwise."""

    def __init__(self, message: str, *, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.data = data or {}


class ContractViolationError(FillwiseError):
    """Raised when an internal invariant is broken.

    These never describe user input problems. The :class:`~fillwise.manager.AutofillManager`
    re-raises them when ``strict_contracts`` is enabled and degrades to a no-op otherwise.
    """


class IdentifierOverflowError(ContractViolationError):
    """Raised when more than 65535 distinct identifiers would need packing."""


class UnknownIdentifierError(ContractViolationError):
    """Raised when unpacking an integer that was never handed out by the codec."""


class SectionBoundsError(ContractViolationError):
    """Raised when the initiating field falls outside its computed section."""


__all__ = [
    "ContractViolationError",
    "FillwiseError",
    "IdentifierOverflowError",
    "SectionBoundsError",
    "UnknownIdentifierError",
]
