"""SQLAlchemy implementation of menu repository using tenant models.

Rows are returned as plain JSON-friendly dicts so they can be cached; use
:mod:`storefront.app.services.catalog` to turn them into pricing objects.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models_tenant import (
    Category,
    MenuDiscount,
    MenuItem,
    MenuOption,
    MenuOptionItem,
    PaymentMethod,
)
from ..repos.menu_repo import MenuRepo
from . import TenantGuard


def _money(value) -> str | None:
    return str(value) if value is not None else None


def _discount_dict(discount: MenuDiscount | None) -> dict | None:
    if discount is None:
        return None
    return {
        "id": discount.id,
        "type": discount.discount_type,
        "value": str(discount.discount_value),
        "is_active": bool(discount.is_active),
        "start_date": discount.start_date.isoformat() if discount.start_date else None,
        "end_date": discount.end_date.isoformat() if discount.end_date else None,
    }


def _item_dict(item: MenuItem, discount: MenuDiscount | None) -> dict:
    return {
        "id": item.id,
        "category_id": item.category_id,
        "name": item.name,
        "base_price": _money(item.base_price),
        "price": _money(item.price),
        "discount_id": item.discount_id,
        "photo_url": item.photo_url,
        "discount": _discount_dict(discount),
    }


class MenuRepoSQL(MenuRepo):
    """Concrete MenuRepo using SQLAlchemy with an AsyncSession."""

    async def list_categories(self, session: AsyncSession, tenant_id: str) -> list[dict]:
        """Return active categories ordered by the sort field."""
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(Category)
            .where(Category.tenant_id == tenant_id, Category.is_active.is_(True))
            .order_by(Category.sort_order, Category.name)
        )
        return [
            {"id": c.id, "name": c.name, "sort_order": c.sort_order}
            for c in result.scalars().all()
        ]

    async def list_items(self, session: AsyncSession, tenant_id: str) -> list[dict]:
        """Return available menu items joined with their discount."""
        TenantGuard.assert_tenant(tenant_id)
        stmt = (
            select(MenuItem, MenuDiscount)
            .outerjoin(
                MenuDiscount,
                (MenuDiscount.id == MenuItem.discount_id)
                & (MenuDiscount.tenant_id == tenant_id),
            )
            .where(MenuItem.tenant_id == tenant_id, MenuItem.is_available.is_(True))
            .order_by(MenuItem.sort_order, MenuItem.name)
        )
        result = await session.execute(stmt)
        return [_item_dict(item, discount) for item, discount in result.all()]

    async def get_item(
        self, session: AsyncSession, tenant_id: str, item_id: str
    ) -> dict | None:
        TenantGuard.assert_tenant(tenant_id)
        stmt = (
            select(MenuItem, MenuDiscount)
            .outerjoin(
                MenuDiscount,
                (MenuDiscount.id == MenuItem.discount_id)
                & (MenuDiscount.tenant_id == tenant_id),
            )
            .where(MenuItem.tenant_id == tenant_id, MenuItem.id == item_id)
        )
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            return None
        return _item_dict(row[0], row[1])

    async def list_options(
        self, session: AsyncSession, tenant_id: str, item_id: str
    ) -> list[dict]:
        """Return option groups for ``item_id`` with all their items.

        Unavailable option items are included and flagged so that stored
        selections can still be resolved; selection logic refuses them.
        """
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(MenuOption)
            .where(MenuOption.tenant_id == tenant_id, MenuOption.menu_item_id == item_id)
            .order_by(MenuOption.sort_order, MenuOption.label)
        )
        options = result.scalars().all()
        if not options:
            return []
        option_ids = [opt.id for opt in options]
        result = await session.execute(
            select(MenuOptionItem)
            .where(
                MenuOptionItem.tenant_id == tenant_id,
                MenuOptionItem.menu_option_id.in_(option_ids),
            )
            .order_by(MenuOptionItem.sort_order, MenuOptionItem.name)
        )
        items_by_option: dict[str, list[dict]] = {oid: [] for oid in option_ids}
        for opt_item in result.scalars().all():
            items_by_option[opt_item.menu_option_id].append(
                {
                    "id": opt_item.id,
                    "option_id": opt_item.menu_option_id,
                    "name": opt_item.name,
                    "additional_price": _money(opt_item.additional_price) or "0",
                    "is_available": bool(opt_item.is_available),
                }
            )
        return [
            {
                "id": opt.id,
                "label": opt.label,
                "selection_type": opt.selection_type,
                "max_selections": opt.max_selections,
                "is_required": bool(opt.is_required),
                "items": items_by_option[opt.id],
            }
            for opt in options
        ]

    async def list_payment_methods(
        self, session: AsyncSession, tenant_id: str
    ) -> list[str]:
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(PaymentMethod.payment_type)
            .where(PaymentMethod.tenant_id == tenant_id, PaymentMethod.is_active.is_(True))
            .order_by(PaymentMethod.payment_type)
        )
        # several rows may share a payment type
        return list(dict.fromkeys(result.scalars().all()))
