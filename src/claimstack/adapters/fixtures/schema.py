"""Schemas for JSON claim exports.

An export holds every claim and override for one or more products::

    {
      "products": [{"id": "p-1", "name": "Hydra Serum", "brand_name": "Acme"}],
      "claims": [{"id": "c-1", "product_id": "p-1", "claim_text": "...", ...}],
      "overrides": [{"id": "o-1", "target_product_id": "p-1", ...}]
    }
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from claimstack.domain.model import ClaimLevel, ClaimType, OverrideAction, OverrideScope

log = logging.getLogger(__name__)


class ExportBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Claims export %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ExportProduct(ExportBaseModel):
    id: str
    name: str
    brand_name: str | None = None
    master_brand_id: str | None = None
    ingredient_ids: list[str] = Field(default_factory=list)


class ExportClaim(ExportBaseModel):
    id: str
    claim_text: str = Field(min_length=1)
    claim_type: ClaimType
    level: ClaimLevel
    product_id: str | None = None
    ingredient_id: str | None = None
    master_brand_id: str | None = None
    country_code: str
    priority: int = 0
    description: str | None = None


class ExportOverride(ExportBaseModel):
    id: str
    target_product_id: str
    claim_text: str = Field(min_length=1)
    scope: OverrideScope
    action: OverrideAction
    country_code: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None


class ClaimsExport(ExportBaseModel):
    products: list[ExportProduct] = Field(default_factory=list)
    claims: list[ExportClaim] = Field(default_factory=list)
    overrides: list[ExportOverride] = Field(default_factory=list)

    def product(self, product_id: str) -> ExportProduct | None:
        return next((product for product in self.products if product.id == product_id), None)
