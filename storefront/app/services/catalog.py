"""Catalog loading and conversion to pricing objects.

Repository rows are cached per tenant as JSON-friendly dicts and converted to
the frozen value objects of :mod:`storefront.app.domain.catalog` on demand.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.catalog import (
    Discount,
    DiscountType,
    MenuItem,
    MenuOption,
    MenuOptionItem,
    SelectionType,
)
from ..pricing.engine import effective_unit_price
from ..repos_sqlalchemy.menu_repo_sql import MenuRepoSQL
from ..storage.cache import TTLCache


def _decimal(value: Any) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def discount_from_row(row: dict | None) -> Discount | None:
    if not row:
        return None
    return Discount(
        type=DiscountType.parse(row["type"]),
        value=Decimal(str(row["value"])),
        is_active=bool(row.get("is_active", True)),
        start_date=_dt(row.get("start_date")),
        end_date=_dt(row.get("end_date")),
    )


def item_from_row(row: dict) -> MenuItem:
    return MenuItem(
        id=str(row["id"]),
        name=row["name"],
        base_price=_decimal(row.get("base_price")),
        price=_decimal(row.get("price")),
        discount_id=row.get("discount_id"),
        photo_url=row.get("photo_url"),
        category_id=row.get("category_id"),
    )


def options_from_rows(rows: list[dict]) -> list[MenuOption]:
    options: list[MenuOption] = []
    for row in rows:
        items = tuple(
            MenuOptionItem(
                id=str(entry["id"]),
                option_id=str(row["id"]),
                name=entry["name"],
                additional_price=Decimal(str(entry.get("additional_price") or 0)),
                is_available=bool(entry.get("is_available", True)),
            )
            for entry in row.get("items", [])
        )
        options.append(
            MenuOption(
                id=str(row["id"]),
                label=row["label"],
                selection_type=SelectionType(row["selection_type"]),
                max_selections=int(row.get("max_selections") or 1),
                is_required=bool(row.get("is_required", False)),
                items=items,
            )
        )
    return options


def priced_item(row: dict, now: datetime | None = None) -> dict:
    """Return ``row`` with its current ``effective_price`` filled in."""

    item = item_from_row(row)
    price = effective_unit_price(item, discount_from_row(row.get("discount")), now)
    base = item.base_price if item.base_price is not None else item.price
    return {
        "id": item.id,
        "category_id": item.category_id,
        "name": item.name,
        "photo_url": item.photo_url,
        "base_price": str(base) if base is not None else None,
        "effective_price": str(price),
        "discounted": base is not None and price != base,
    }


class CatalogService:
    """Tenant catalog reads with a short-lived listing cache.

    Listings are cached per tenant for ``cache.ttl`` seconds. Single items and
    their options are always read fresh because they feed checkout prices.
    """

    def __init__(self, cache: TTLCache, repo: MenuRepoSQL | None = None) -> None:
        self.cache = cache
        self.repo = repo or MenuRepoSQL()

    async def menu(self, session: AsyncSession, tenant_id: str) -> dict:
        async def _load() -> dict:
            return {
                "categories": await self.repo.list_categories(session, tenant_id),
                "items": await self.repo.list_items(session, tenant_id),
            }

        return await self.cache.get_or_load(f"menu:{tenant_id}", _load)

    async def invalidate(self, tenant_id: str) -> None:
        await self.cache.invalidate(f"menu:{tenant_id}")

    async def item(
        self, session: AsyncSession, tenant_id: str, item_id: str
    ) -> tuple[MenuItem, Discount | None] | None:
        row = await self.repo.get_item(session, tenant_id, item_id)
        if row is None:
            return None
        return item_from_row(row), discount_from_row(row.get("discount"))

    async def options(
        self, session: AsyncSession, tenant_id: str, item_id: str
    ) -> list[MenuOption]:
        return options_from_rows(await self.repo.list_options(session, tenant_id, item_id))

    async def payment_methods(self, session: AsyncSession, tenant_id: str) -> list[str]:
        return await self.repo.list_payment_methods(session, tenant_id)
