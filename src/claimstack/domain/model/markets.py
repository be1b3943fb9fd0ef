"""Market (country code) primitives and validation.

Country codes are ISO-3166 alpha-2 values. Two reserved sentinels exist:

- ``GLOBAL_COUNTRY_CODE`` marks a claim or override that applies to every
  market unless a country-specific entry exists.
- ``ALL_COUNTRIES_CODE`` is a UI-only pseudo-code meaning "all countries at
  once". It is never a valid resolution target.
"""

from __future__ import annotations

import re
from typing import Final

from claimstack.domain.errors import ClaimValidationError

type CountryCode = str
type ProductId = str

GLOBAL_COUNTRY_CODE: Final[str] = "__GLOBAL__"
ALL_COUNTRIES_CODE: Final[str] = "__ALL_COUNTRIES__"

_COUNTRY_CODE_RE = re.compile(r"^[A-Z]{2}$")
_PRODUCT_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
_MAX_PRODUCT_ID_LENGTH = 128


def is_global(code: str | None) -> bool:
    return code is not None and code.strip().upper() == GLOBAL_COUNTRY_CODE


def normalize_row_country_code(code: str) -> CountryCode:
    """Normalize a country code carried by a stored claim or override row.

    Rows may carry the GLOBAL sentinel; the all-countries pseudo-code is rejected.
    """

    candidate = code.strip().upper()
    if candidate == GLOBAL_COUNTRY_CODE:
        return GLOBAL_COUNTRY_CODE
    if _COUNTRY_CODE_RE.match(candidate) is None:
        raise ClaimValidationError(f"Invalid country code on row: {code!r}")
    return candidate


def validate_market(code: object) -> CountryCode:
    """Return the normalized target market or raise ``ClaimValidationError``.

    Resolution always targets exactly one concrete market, so both sentinels are
    rejected here.
    """

    if not isinstance(code, str) or not code.strip():
        raise ClaimValidationError("Country code is required")
    candidate = code.strip().upper()
    if candidate == ALL_COUNTRIES_CODE:
        raise ClaimValidationError(
            f"{ALL_COUNTRIES_CODE} is a display-only code; resolve one market at a time"
        )
    if candidate == GLOBAL_COUNTRY_CODE:
        raise ClaimValidationError(
            f"{GLOBAL_COUNTRY_CODE} is not a market; pass a concrete country code"
        )
    if _COUNTRY_CODE_RE.match(candidate) is None:
        raise ClaimValidationError(f"Invalid country code: {code!r}")
    return candidate


def validate_product_id(product_id: object) -> ProductId:
    if not isinstance(product_id, str) or not product_id.strip():
        raise ClaimValidationError("Product ID is required")
    candidate = product_id.strip()
    if len(candidate) > _MAX_PRODUCT_ID_LENGTH:
        raise ClaimValidationError(
            f"Product ID exceeds {_MAX_PRODUCT_ID_LENGTH} characters: {candidate[:16]}..."
        )
    if _PRODUCT_ID_RE.match(candidate) is None:
        raise ClaimValidationError(f"Malformed product ID: {product_id!r}")
    return candidate
