"""Collapse duplicate claim text.

Usable outside the resolution pipeline (bulk import merges, formatter input)
as well as by the stacking stage, which relies on the shared grouping helper.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .normalize import normalize_claim_text

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .normalize import NormalizedText

log = logging.getLogger(__name__)


class Deduplicable(Protocol):
    """Anything with display text and a tie-break priority."""

    @property
    def text(self) -> str: ...

    @property
    def priority(self) -> int: ...


def group_by_normalized_text[TRow: Deduplicable](
    rows: Iterable[TRow],
) -> dict[NormalizedText, list[TRow]]:
    """Group rows by normalization key, preserving first-seen group and row order.

    Rows whose text normalizes to an empty string are dropped.
    """

    groups: dict[NormalizedText, list[TRow]] = {}
    for row in rows:
        key = normalize_claim_text(row.text)
        if not key:
            log.warning("Skipping claim row with blank text: %r", row)
            continue
        groups.setdefault(key, []).append(row)
    return groups


def deduplicate_claims[TRow: Deduplicable](rows: Iterable[TRow]) -> list[TRow]:
    """Keep the highest-priority row per normalized text; earlier rows win ties."""

    survivors: list[TRow] = []
    for group in group_by_normalized_text(rows).values():
        best = group[0]
        for row in group[1:]:
            if row.priority > best.priority:
                best = row
        survivors.append(best)
    return survivors
