"""Exception taxonomy for claim resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ClaimStackError(Exception):
    """Base class for errors raised by claimstack."""


class DataAccessError(ClaimStackError):
    """Raised when a claim or override gateway cannot read from storage.

    Never retried internally; the caller owns retry policy.
    """

    def __init__(self, message: str, *, product_id: str | None = None) -> None:
        super().__init__(message)
        self.product_id = product_id


class ClaimValidationError(ClaimStackError, ValueError):
    """Raised for malformed product IDs, country codes or rows."""


class ConflictInvariantViolation(ClaimStackError):
    """Resolution produced both ``allowed`` and ``disallowed`` for one normalized text."""

    def __init__(self, normalized_texts: Iterable[str]) -> None:
        self.normalized_texts = tuple(sorted(set(normalized_texts)))
        super().__init__(
            "Conflicting claim types after tie-break for: " + ", ".join(self.normalized_texts)
        )


class CacheUnavailableError(ClaimStackError):
    """Raised by cache adapters when the backing store cannot be reached."""


class ResolutionCancelledError(ClaimStackError, TimeoutError):
    """Raised when a caller-supplied cancel scope expires or is cancelled."""
