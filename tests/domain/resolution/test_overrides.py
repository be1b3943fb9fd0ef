from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from claimstack.domain.model import (
    GLOBAL_COUNTRY_CODE,
    ClaimLevel,
    ClaimType,
    EffectiveClaim,
    Override,
    OverrideAction,
)
from claimstack.domain.resolution import apply_overrides
from tests.helpers.claims import make_override


def _effective(
    text: str,
    claim_type: ClaimType = ClaimType.ALLOWED,
    *,
    country_code: str = GLOBAL_COUNTRY_CODE,
) -> EffectiveClaim:
    return EffectiveClaim(
        text=text,
        type=claim_type,
        level=ClaimLevel.PRODUCT,
        resolved_country_code=country_code,
        provenance=("c-1",),
    )


def _clinically_proven_overrides(*, country_first: bool = False) -> list[Override]:
    global_block = make_override(
        "o-global",
        "Clinically proven",
        OverrideAction.BLOCK,
        created_at=datetime(2025, 6, 1, tzinfo=UTC),
    )
    country_allow = make_override(
        "o-fr",
        "clinically  proven",
        OverrideAction.ALLOW,
        country_code="FR",
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )
    return [country_allow, global_block] if country_first else [global_block, country_allow]


@pytest.mark.parametrize("country_first", [False, True], ids=["global-first", "country-first"])
@pytest.mark.parametrize("stacked_type", [ClaimType.ALLOWED, ClaimType.DISALLOWED])
def test_country_allow_beats_later_global_block(
    stacked_type: ClaimType,
    *,
    country_first: bool,
) -> None:
    claims = [_effective("Clinically proven", stacked_type)]
    overrides = _clinically_proven_overrides(country_first=country_first)

    (claim,) = apply_overrides(claims, overrides, "FR")

    assert claim.type is ClaimType.ALLOWED
    assert claim.was_overridden is (stacked_type is ClaimType.DISALLOWED)


def test_global_block_applies_without_country_exception() -> None:
    claims = [_effective("Clinically proven")]

    (claim,) = apply_overrides(claims, _clinically_proven_overrides(), "DE")

    assert claim.type is ClaimType.DISALLOWED
    assert claim.was_overridden is True
    assert claim.resolved_country_code == GLOBAL_COUNTRY_CODE
    assert claim.provenance == ("c-1", "o-global")


def test_country_allow_reverses_global_disallowed_claim() -> None:
    claims = [_effective("Clinically proven", ClaimType.DISALLOWED)]
    overrides = [
        make_override("o-fr", "Clinically proven", OverrideAction.ALLOW, country_code="FR"),
    ]

    (claim,) = apply_overrides(claims, overrides, "FR")

    assert claim.type is ClaimType.ALLOWED
    assert claim.resolved_country_code == "FR"
    assert claim.provenance == ("c-1", "o-fr")


def test_global_allow_cannot_reverse_country_disallowed_claim() -> None:
    claims = [_effective("Vegan", ClaimType.DISALLOWED, country_code="GB")]
    overrides = [make_override("o-1", "Vegan", OverrideAction.ALLOW)]

    (claim,) = apply_overrides(claims, overrides, "GB")

    assert claim.type is ClaimType.DISALLOWED
    assert claim.was_overridden is False


def test_block_beats_allow_at_equal_scope() -> None:
    claims = [_effective("Vegan")]
    overrides = [
        make_override("o-1", "Vegan", OverrideAction.ALLOW, country_code="GB"),
        make_override("o-2", "Vegan", OverrideAction.BLOCK, country_code="GB"),
    ]

    (claim,) = apply_overrides(claims, overrides, "GB")

    assert claim.type is ClaimType.DISALLOWED


def test_overrides_for_other_markets_are_ignored() -> None:
    claims = [_effective("Vegan")]
    overrides = [make_override("o-1", "Vegan", OverrideAction.BLOCK, country_code="FR")]

    assert apply_overrides(claims, overrides, "GB") == tuple(claims)


def test_orphan_override_is_a_logged_no_op(caplog: pytest.LogCaptureFixture) -> None:
    claims = [_effective("Vegan")]
    overrides = [make_override("o-9", "Sulfate free", OverrideAction.ALLOW)]

    with caplog.at_level(logging.WARNING):
        result = apply_overrides(claims, overrides, "GB")

    assert result == tuple(claims)
    assert "o-9" in caplog.text
