"""Claim, override and effective-claim value objects.

Claim and Override rows are owned by upstream storage; this package only reads
them. EffectiveClaim is computed on demand and has no persisted identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from claimstack.domain.errors import ClaimValidationError
from claimstack.domain.model.enums import ClaimLevel, ClaimType, OverrideAction, OverrideScope
from claimstack.domain.model.markets import GLOBAL_COUNTRY_CODE, normalize_row_country_code

if TYPE_CHECKING:
    from datetime import datetime

    from claimstack.domain.model.markets import CountryCode


@dataclass(frozen=True, slots=True, kw_only=True)
class Claim:
    """One claim row as declared at the ingredient, product or brand level."""

    id: str
    text: str
    type: ClaimType
    level: ClaimLevel
    source_entity_id: str | None = None
    country_code: CountryCode = GLOBAL_COUNTRY_CODE
    priority: int = 0
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ClaimType(self.type))
        object.__setattr__(self, "level", ClaimLevel(self.level))
        object.__setattr__(self, "country_code", normalize_row_country_code(self.country_code))

    @property
    def is_global(self) -> bool:
        return self.country_code == GLOBAL_COUNTRY_CODE


@dataclass(frozen=True, slots=True, kw_only=True)
class Override:
    """Administrative block/allow rule for one claim text."""

    id: str
    claim_text: str
    scope: OverrideScope
    action: OverrideAction
    country_code: CountryCode | None = None
    created_at: datetime | None = None
    created_by: str | None = None

    def __post_init__(self) -> None:
        scope = OverrideScope(self.scope)
        object.__setattr__(self, "scope", scope)
        object.__setattr__(self, "action", OverrideAction(self.action))
        if scope is OverrideScope.COUNTRY:
            if not self.country_code:
                raise ClaimValidationError(f"Country-scoped override {self.id} has no country code")
            code = normalize_row_country_code(self.country_code)
            if code == GLOBAL_COUNTRY_CODE:
                raise ClaimValidationError(
                    f"Country-scoped override {self.id} cannot target {GLOBAL_COUNTRY_CODE}"
                )
            object.__setattr__(self, "country_code", code)
        elif self.country_code is not None and self.country_code != GLOBAL_COUNTRY_CODE:
            raise ClaimValidationError(f"Global override {self.id} must not carry a country code")
        else:
            object.__setattr__(self, "country_code", None)

    @property
    def effective_country_code(self) -> CountryCode:
        """Country code used for specificity ranking (GLOBAL sentinel for global scope)."""

        return self.country_code or GLOBAL_COUNTRY_CODE

    def applies_to(self, market: CountryCode) -> bool:
        return self.scope is OverrideScope.GLOBAL or self.country_code == market


@dataclass(frozen=True, slots=True, kw_only=True)
class EffectiveClaim:
    """Final resolved claim for one (product, market) pair."""

    text: str
    type: ClaimType
    level: ClaimLevel
    resolved_country_code: CountryCode
    provenance: tuple[str, ...] = field(default_factory=tuple)
    was_overridden: bool = False
    priority: int = 0
    description: str | None = None

    @property
    def is_allowed(self) -> bool:
        return self.type is ClaimType.ALLOWED


@dataclass(frozen=True, slots=True)
class ClaimsByLevel:
    """Raw claim rows for one product, split by the level they were declared at."""

    ingredient: tuple[Claim, ...] = ()
    product: tuple[Claim, ...] = ()
    brand: tuple[Claim, ...] = ()

    def stacked(self) -> tuple[Claim, ...]:
        """Concatenate all levels (ingredient, product, brand) into one working list."""

        return (*self.ingredient, *self.product, *self.brand)

    def __len__(self) -> int:
        return len(self.ingredient) + len(self.product) + len(self.brand)
