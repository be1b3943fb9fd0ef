"""Adapter for JSON claim exports (CLI input and bulk-import dry runs)."""

from __future__ import annotations

from .schema import ClaimsExport, ExportClaim, ExportOverride, ExportProduct
from .source import JsonFileClaimSource, JsonFileOverrideSource, load_export
from .translator import claims_for_product, overrides_for_product

__all__ = [
    "ClaimsExport",
    "ExportClaim",
    "ExportOverride",
    "ExportProduct",
    "JsonFileClaimSource",
    "JsonFileOverrideSource",
    "claims_for_product",
    "load_export",
    "overrides_for_product",
]
