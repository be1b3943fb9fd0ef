from __future__ import annotations

from claimstack.domain.model import GLOBAL_COUNTRY_CODE, ClaimLevel, ClaimsByLevel, ClaimType
from claimstack.domain.resolution import stack_claims
from tests.helpers.claims import make_claim


def _inflammation_rows() -> ClaimsByLevel:
    return ClaimsByLevel(
        ingredient=(
            make_claim("c-ing", "Reduces inflammation", level=ClaimLevel.INGREDIENT),
        ),
        product=(
            make_claim(
                "c-prod",
                "Reduces inflammation",
                ClaimType.DISALLOWED,
                country_code="GB",
            ),
        ),
    )


def test_country_specific_disallowed_wins_in_its_market() -> None:
    (claim,) = stack_claims(_inflammation_rows(), "GB")

    assert claim.type is ClaimType.DISALLOWED
    assert claim.level is ClaimLevel.PRODUCT
    assert claim.resolved_country_code == "GB"
    assert claim.provenance == ("c-prod", "c-ing")


def test_global_row_applies_where_no_country_row_exists() -> None:
    (claim,) = stack_claims(_inflammation_rows(), "US")

    assert claim.type is ClaimType.ALLOWED
    assert claim.level is ClaimLevel.INGREDIENT
    assert claim.resolved_country_code == GLOBAL_COUNTRY_CODE
    assert claim.provenance == ("c-ing",)


def test_country_beats_global_regardless_of_input_order() -> None:
    global_row = make_claim("c-1", "Vegan", ClaimType.DISALLOWED)
    country_row = make_claim("c-2", "Vegan", country_code="DE")

    forward = stack_claims(ClaimsByLevel(product=(global_row, country_row)), "DE")
    backward = stack_claims(ClaimsByLevel(product=(country_row, global_row)), "DE")

    assert forward == backward
    assert forward[0].type is ClaimType.ALLOWED


def test_disallowed_wins_at_equal_specificity() -> None:
    rows = ClaimsByLevel(
        product=(make_claim("c-1", "Vegan", priority=50),),
        brand=(make_claim("c-2", "vegan", ClaimType.DISALLOWED, level=ClaimLevel.BRAND),),
    )

    (claim,) = stack_claims(rows, "GB")

    assert claim.type is ClaimType.DISALLOWED
    assert claim.level is ClaimLevel.BRAND


def test_variants_collapse_keeping_higher_priority_text() -> None:
    rows = ClaimsByLevel(
        product=(
            make_claim("c-1", "dermatologist tested", priority=1),
            make_claim("c-2", "Dermatologist tested ", priority=4),
        )
    )

    (claim,) = stack_claims(rows, "GB")

    assert claim.text == "Dermatologist tested "
    assert claim.priority == 4
    assert claim.provenance == ("c-2", "c-1")


def test_rows_for_other_markets_are_ignored() -> None:
    rows = ClaimsByLevel(
        product=(
            make_claim("c-1", "Vegan", country_code="FR"),
            make_claim("c-2", "Cruelty free", ClaimType.DISALLOWED, country_code="DE"),
        )
    )

    assert stack_claims(rows, "GB") == ()
    assert [claim.text for claim in stack_claims(rows, "FR")] == ["Vegan"]


def test_rows_are_tagged_with_the_level_they_were_fetched_at() -> None:
    mislabelled = make_claim("c-1", "Vegan", level=ClaimLevel.PRODUCT)

    (claim,) = stack_claims(ClaimsByLevel(brand=(mislabelled,)), "GB")

    assert claim.level is ClaimLevel.BRAND


def test_stacking_is_idempotent() -> None:
    rows = _inflammation_rows()

    assert stack_claims(rows, "GB") == stack_claims(rows, "GB")


def test_empty_input_yields_no_claims() -> None:
    assert stack_claims(ClaimsByLevel(), "GB") == ()
