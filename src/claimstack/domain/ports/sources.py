"""Ports for reading raw claim and override rows from upstream storage.

Adapters return every row for a product regardless of market and apply no
business rules. Any storage failure surfaces as ``DataAccessError``; adapters
never retry and never substitute a fallback value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from claimstack.domain.cancellation import CancelScope
    from claimstack.domain.model import ClaimsByLevel, Override, ProductId


@runtime_checkable
class ClaimSource(Protocol):
    """Reads ingredient-, product- and brand-level claim rows for a product."""

    def fetch_claims(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> ClaimsByLevel: ...


@runtime_checkable
class OverrideSource(Protocol):
    """Reads market override rows for a product."""

    def fetch_overrides(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> tuple[Override, ...]: ...


__all__ = ["ClaimSource", "OverrideSource"]
