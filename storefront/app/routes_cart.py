from __future__ import annotations

"""Guest cart routes.

Lines are priced on the server from the catalog; clients only send the item,
its selections, notes and quantity.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from .cart.models import CartLine
from .cart.store import CartStore
from .deps.cart import get_cart
from .deps.tenant import get_session, get_tenant
from .domain.errors import IncompleteOptionsError
from .menu.options import OptionSelection
from .pricing.engine import effective_unit_price
from .tenancy.resolver import TenantIdentity
from .utils.currency import format_currency
from .utils.responses import ok

logger = logging.getLogger("storefront.cart")

router = APIRouter(prefix="/t/{slug}/cart")


class AddLinePayload(BaseModel):
    item_id: str
    quantity: int = Field(default=1, ge=1)
    selections: dict[str, list[str]] = Field(default_factory=dict)
    notes: str | None = Field(default=None, max_length=500)


class QuantityPayload(BaseModel):
    quantity: int
    fingerprint: str | None = None


def cart_view(cart: CartStore, currency: str) -> dict:
    """Return the JSON representation of ``cart``."""
    totals = cart.totals()
    return {
        "lines": [
            {
                "item_id": line.item_id,
                "fingerprint": line.fingerprint,
                "name": line.name,
                "unit_price": int(line.unit_price),
                "quantity": line.quantity,
                "selections": line.selections,
                "notes": line.notes,
                "photo_url": line.photo_url,
                "line_total": int(line.line_total),
            }
            for line in cart.lines
        ],
        "total_items": totals.total_items,
        "total_amount": int(totals.total_amount),
        "total_display": format_currency(totals.total_amount, currency),
    }


@router.get("")
async def show_cart(request: Request, cart: CartStore = Depends(get_cart)) -> dict:
    return ok(cart_view(cart, request.app.state.settings.currency))


@router.post("/items")
async def add_line(
    payload: AddLinePayload,
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    cart: CartStore = Depends(get_cart),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Price the customization and merge it into the cart."""
    catalog = request.app.state.catalog
    found = await catalog.item(session, tenant.tenant_id, payload.item_id)
    if found is None:
        raise HTTPException(404, "Menu item not found")
    item, discount = found
    options = await catalog.options(session, tenant.tenant_id, item.id)
    selection = OptionSelection(options, payload.selections)
    missing = selection.missing_required()
    if missing:
        raise IncompleteOptionsError(
            [{"item_id": item.id, "name": item.name, "options": [m.as_dict() for m in missing]}]
        )
    line = CartLine(
        item_id=item.id,
        name=item.name,
        unit_price=selection.unit_price(effective_unit_price(item, discount)),
        quantity=payload.quantity,
        selections=selection.as_dict(),
        notes=payload.notes,
        photo_url=item.photo_url,
    )
    await cart.add_item(line)
    return ok(cart_view(cart, request.app.state.settings.currency))


@router.patch("/items/{item_id}")
async def update_line(
    item_id: str,
    payload: QuantityPayload,
    request: Request,
    cart: CartStore = Depends(get_cart),
) -> dict:
    """Set the quantity of ``item_id``; zero or less removes it.

    Without ``fingerprint`` every variant of the item is updated.
    """
    if not await cart.update_quantity(item_id, payload.quantity, payload.fingerprint):
        raise HTTPException(404, "Cart line not found")
    return ok(cart_view(cart, request.app.state.settings.currency))


@router.delete("/items/{item_id}")
async def remove_line(
    item_id: str,
    request: Request,
    fingerprint: str | None = None,
    cart: CartStore = Depends(get_cart),
) -> dict:
    """Remove ``item_id`` from the cart, or one variant with ``fingerprint``."""
    removed = await cart.remove_item(item_id, fingerprint)
    data = cart_view(cart, request.app.state.settings.currency)
    data["removed"] = removed
    return ok(data)


@router.delete("")
async def clear_cart(request: Request, cart: CartStore = Depends(get_cart)) -> dict:
    await cart.clear_cart()
    return ok(cart_view(cart, request.app.state.settings.currency))
