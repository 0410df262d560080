from __future__ import annotations

"""Guest checkout, order lookup and reconciliation routes."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from .cart.store import CartStore
from .deps.cart import get_cart
from .deps.tenant import get_session, get_tenant
from .domain.errors import ValidationError
from .repos_sqlalchemy.orders_repo_sql import OrderSummary, OrdersRepoSQL
from .services.checkout import CheckoutForm
from .tenancy.resolver import TenantIdentity
from .utils.currency import format_currency
from .utils.phone import format_phone, normalize_phone
from .utils.responses import ok

router = APIRouter(prefix="/t/{slug}")


class CheckoutPayload(BaseModel):
    """Customer fields collected on the checkout form."""

    customer_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    payment_method: str | None = Field(default=None, max_length=50)
    pickup_date: date | None = None
    notes: str | None = Field(default=None, max_length=500)


def summary_view(order: OrderSummary) -> dict:
    return {
        "id": order.id,
        "order_code": order.order_code,
        "status": order.status,
        "total": int(order.total),
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


@router.post("/checkout")
async def checkout(
    payload: CheckoutPayload,
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    cart: CartStore = Depends(get_cart),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Place the order held in the visitor's cart."""
    settings = request.app.state.settings
    result = await request.app.state.checkout.submit(
        session, tenant, cart, CheckoutForm(**payload.model_dump())
    )
    return ok(
        {
            "order_id": result.order_id,
            "order_code": result.order_code,
            "phone": format_phone(payload.phone, settings.phone_country_code),
            "total": int(result.total),
            "total_display": format_currency(result.total, settings.currency),
        }
    )


@router.get("/orders/orphaned")
async def orphaned_orders(
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """List order headers without items for reconciliation."""
    orders = await OrdersRepoSQL().list_orphaned(session, tenant.tenant_id)
    return ok([summary_view(o) for o in orders])


@router.get("/orders")
async def orders_by_phone(
    request: Request,
    phone: str = Query(..., max_length=32),
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """List the customer's orders, newest first, by phone number."""
    try:
        normalized = normalize_phone(phone, request.app.state.settings.phone_country_code)
    except ValueError as exc:
        raise ValidationError(
            "Phone number is not valid", details={"field": "phone"}
        ) from exc
    orders = await OrdersRepoSQL().list_by_phone(session, tenant.tenant_id, normalized)
    return ok([summary_view(o) for o in orders])


@router.get("/orders/{order_code}")
async def order_detail(
    order_code: str,
    request: Request,
    tenant: TenantIdentity = Depends(get_tenant),
    session: AsyncSession = Depends(get_session),
) -> dict:
    """Return an order and its snapshotted items for the invoice page."""
    settings = request.app.state.settings
    order = await OrdersRepoSQL().get_by_code(
        session, tenant.tenant_id, order_code.strip()
    )
    if order is None:
        raise HTTPException(404, "Order not found")
    data = summary_view(order)
    data.update(
        {
            "customer_name": order.customer_name,
            "phone": format_phone(order.phone, settings.phone_country_code),
            "pickup_date": order.pickup_date.isoformat() if order.pickup_date else None,
            "payment_method": order.payment_method,
            "subtotal": int(order.subtotal),
            "notes": order.notes,
            "total_display": format_currency(order.total, settings.currency),
            "items": [
                {
                    "menu_item_id": item["menu_item_id"],
                    "name": item["name"],
                    "price": int(item["price"]),
                    "qty": item["qty"],
                    "notes": item["notes"],
                    "options": item["options"],
                    "line_total": int(item["line_total"]),
                }
                for item in order.items
            ],
        }
    )
    return ok(data)
