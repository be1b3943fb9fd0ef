"""Deterministic grouping keys for claim text.

Two texts share a key when they differ only in surrounding whitespace, inner
whitespace runs, case, or Unicode compatibility forms. Punctuation is kept:
"Clinically proven" and "Clinically proven*" are different legal statements.
"""

from __future__ import annotations

import unicodedata

type NormalizedText = str


def normalize_claim_text(value: str) -> NormalizedText:
    text = unicodedata.normalize("NFKC", value)
    text = text.casefold()
    return " ".join(text.split())
