"""Cart line model and its identity fingerprint."""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator


def selections_fingerprint(
    selections: Mapping[str, list[str]] | None, notes: str | None = None
) -> str:
    """Return a stable digest of ``selections`` and ``notes``.

    Option ids and item ids are sorted and empty groups dropped, so the same
    customization always yields the same fingerprint regardless of the order
    the customer clicked in.
    """

    canonical = {
        str(oid): sorted(str(i) for i in ids)
        for oid, ids in (selections or {}).items()
        if ids
    }
    payload = json.dumps(
        {"s": canonical, "n": (notes or "").strip()},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()[:16]


class CartLine(BaseModel):
    """One distinct purchasable unit and its quantity."""

    item_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)
    selections: dict[str, list[str]] = Field(default_factory=dict)
    notes: str | None = None
    photo_url: str | None = None

    @field_validator("notes")
    @classmethod
    def _strip_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def fingerprint(self) -> str:
        return selections_fingerprint(self.selections, self.notes)

    @property
    def key(self) -> tuple[str, str]:
        return (self.item_id, self.fingerprint)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
