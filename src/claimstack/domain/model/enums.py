"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ClaimType(StrEnum):
    ALLOWED = "allowed"
    DISALLOWED = "disallowed"


class ClaimLevel(StrEnum):
    """Hierarchy level a claim was declared at."""

    INGREDIENT = "ingredient"
    PRODUCT = "product"
    BRAND = "brand"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class OverrideScope(StrEnum):
    GLOBAL = "global"
    COUNTRY = "country"


class OverrideAction(StrEnum):
    BLOCK = "block"
    ALLOW = "allow"


# Display/grouping order: most specific level first.
LEVEL_DISPLAY_ORDER: tuple[ClaimLevel, ...] = (
    ClaimLevel.PRODUCT,
    ClaimLevel.INGREDIENT,
    ClaimLevel.BRAND,
)
