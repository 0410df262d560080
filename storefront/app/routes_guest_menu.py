# routes_guest_menu.py

"""Guest-facing menu routes: listing, option groups and price quotes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from .deps.tenant import get_session, get_tenant
from .menu.options import OptionSelection
from .pricing.engine import effective_unit_price, line_total
from .services.catalog import priced_item
from .tenancy.resolver import TenantIdentity
from .utils.currency import format_currency
from .utils.responses import ok

router = APIRouter(prefix="/t/{slug}")


class QuotePayload(BaseModel):
    """Selections being considered for one menu item."""

    selections: dict[str, list[str]] = Field(default_factory=dict)
    quantity: int = Field(default=1, ge=1)


@router.get("/menu")
async def fetch_menu(
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Return categories and available items with their current prices."""
    catalog = request.app.state.catalog
    data = await catalog.menu(session, tenant.tenant_id)
    currency = request.app.state.settings.currency
    items = []
    for row in data["items"]:
        item = priced_item(row)
        item["effective_price_display"] = format_currency(
            item["effective_price"], currency
        )
        items.append(item)
    return ok({"tenant": tenant.name, "categories": data["categories"], "items": items})


@router.get("/menu/{item_id}/options")
async def fetch_options(
    item_id: str,
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Return the option groups of ``item_id`` and the default selection."""
    catalog = request.app.state.catalog
    if await catalog.item(session, tenant.tenant_id, item_id) is None:
        raise HTTPException(404, "Menu item not found")
    options = await catalog.options(session, tenant.tenant_id, item_id)
    defaults = OptionSelection(options, with_defaults=True)
    groups = [
        {
            "id": opt.id,
            "label": opt.label,
            "selection_type": opt.selection_type.value,
            "max_selections": opt.max_selections,
            "is_required": opt.is_required,
            "items": [
                {
                    "id": opt_item.id,
                    "name": opt_item.name,
                    "additional_price": int(opt_item.additional_price),
                }
                for opt_item in opt.available_items
            ],
        }
        for opt in options
    ]
    return ok({"options": groups, "defaults": defaults.as_dict()})


@router.post("/menu/{item_id}/quote")
async def quote_item(
    item_id: str,
    payload: QuotePayload,
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Price ``item_id`` with the given selections.

    Prices are only returned once every required option has a selection.
    """
    catalog = request.app.state.catalog
    found = await catalog.item(session, tenant.tenant_id, item_id)
    if found is None:
        raise HTTPException(404, "Menu item not found")
    item, discount = found
    options = await catalog.options(session, tenant.tenant_id, item_id)
    selection = OptionSelection(options, payload.selections)
    missing = [m.as_dict() for m in selection.missing_required()]
    data: dict = {
        "item_id": item.id,
        "selections": selection.as_dict(),
        "missing": missing,
        "complete": not missing,
        "unit_price": None,
        "line_total": None,
    }
    if not missing:
        unit = selection.unit_price(effective_unit_price(item, discount))
        data["unit_price"] = int(unit)
        data["line_total"] = int(line_total(unit, payload.quantity))
        data["choices"] = selection.resolved()
    return ok(data)
