"""Claim and override gateways reading a JSON export file.

The file is re-read on every call so edits show up after cache invalidation,
just like rows in the relational store.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from claimstack.domain.cancellation import check_scope
from claimstack.domain.errors import ClaimValidationError, DataAccessError

from .schema import ClaimsExport
from .translator import claims_for_product, overrides_for_product

if TYPE_CHECKING:
    from claimstack.domain.cancellation import CancelScope
    from claimstack.domain.model import ClaimsByLevel, Override, ProductId

log = logging.getLogger(__name__)


def load_export(path: Path) -> ClaimsExport:
    """Read and validate an export file, raising ``DataAccessError`` on failure."""

    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataAccessError(f"Cannot read claims export {path}: {exc}") from exc
    try:
        return ClaimsExport.model_validate_json(payload)
    except ValidationError as exc:
        raise DataAccessError(
            f"Invalid claims export {path}: {exc.error_count()} error(s)"
        ) from exc


class JsonFileClaimSource:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def fetch_claims(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> ClaimsByLevel:
        check_scope(scope, "claims export read")
        export = load_export(self.path)
        try:
            claims = claims_for_product(export, product_id)
        except ClaimValidationError as exc:
            raise DataAccessError(
                f"Malformed claim in {self.path}: {exc}", product_id=product_id
            ) from exc
        log.debug("Loaded %d claims for product=%s from %s", len(claims), product_id, self.path)
        return claims


class JsonFileOverrideSource:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def fetch_overrides(
        self,
        product_id: ProductId,
        *,
        scope: CancelScope | None = None,
    ) -> tuple[Override, ...]:
        check_scope(scope, "overrides export read")
        export = load_export(self.path)
        try:
            return overrides_for_product(export, product_id)
        except ClaimValidationError as exc:
            raise DataAccessError(
                f"Malformed override in {self.path}: {exc}", product_id=product_id
            ) from exc
