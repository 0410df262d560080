"""SQLAlchemy-backed repository helpers for orders.

These helpers implement the order writes without any side effects beyond
database mutations. Header and items are committed separately; the
checkout service decides how to compensate when the second write fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Sequence

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain import OrderStatus, can_transition
from ..domain.errors import ValidationError
from ..models_tenant import Order, OrderItem
from ..repos.orders_repo import OrdersRepo
from . import TenantGuard


@dataclass
class OrderHeader:
    """Values for a new order header."""

    order_code: str
    customer_name: str
    phone: str
    payment_method: str
    subtotal: Decimal
    total: Decimal
    discount: Decimal = Decimal("0")
    service_fee: Decimal = Decimal("0")
    pickup_date: date | None = None
    notes: str | None = None
    status: str = OrderStatus.PENDING_PAYMENT.value


@dataclass
class OrderLine:
    """Snapshot of one cart line at checkout time."""

    menu_item_id: str
    name_snapshot: str
    price_snapshot: Decimal
    qty: int
    notes: str | None = None
    options_snapshot: list[dict] | None = None

    @property
    def line_total(self) -> Decimal:
        return self.price_snapshot * self.qty


@dataclass
class OrderSummary:
    """Lightweight representation of an order header."""

    id: str
    order_code: str
    status: str
    total: Decimal
    created_at: datetime | None


@dataclass
class OrderDetail(OrderSummary):
    """Header fields shown to the customer with the snapshotted items."""

    customer_name: str
    phone: str
    pickup_date: date | None
    payment_method: str
    subtotal: Decimal
    notes: str | None
    items: list[dict[str, Any]] = field(default_factory=list)


def _summary(order: Order) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        order_code=order.order_code,
        status=order.status,
        total=Decimal(order.total),
        created_at=order.created_at,
    )


class OrdersRepoSQL(OrdersRepo):
    """Concrete OrdersRepo using SQLAlchemy with an AsyncSession."""

    async def insert_order(
        self, session: AsyncSession, tenant_id: str, header: OrderHeader
    ) -> OrderSummary:
        """Insert ``header`` and return the created row."""
        TenantGuard.assert_tenant(tenant_id)
        order = Order(
            tenant_id=tenant_id,
            order_code=header.order_code,
            customer_name=header.customer_name,
            phone=header.phone,
            pickup_date=header.pickup_date,
            payment_method=header.payment_method,
            status=header.status,
            subtotal=header.subtotal,
            discount=header.discount,
            service_fee=header.service_fee,
            total=header.total,
            notes=header.notes,
        )
        session.add(order)
        try:
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        await session.refresh(order)
        return _summary(order)

    async def insert_items(
        self,
        session: AsyncSession,
        tenant_id: str,
        order_id: str,
        items: Sequence[OrderLine],
    ) -> int:
        """Insert all ``items`` for ``order_id`` in one commit."""
        TenantGuard.assert_tenant(tenant_id)
        session.add_all(
            [
                OrderItem(
                    tenant_id=tenant_id,
                    order_id=order_id,
                    menu_item_id=line.menu_item_id,
                    name_snapshot=line.name_snapshot,
                    price_snapshot=line.price_snapshot,
                    qty=line.qty,
                    notes=line.notes,
                    options_snapshot=line.options_snapshot or [],
                    line_total=line.line_total,
                )
                for line in items
            ]
        )
        try:
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        return len(items)

    async def delete_order(
        self, session: AsyncSession, tenant_id: str, order_id: str
    ) -> None:
        TenantGuard.assert_tenant(tenant_id)
        await session.execute(
            delete(OrderItem).where(
                OrderItem.tenant_id == tenant_id, OrderItem.order_id == order_id
            )
        )
        await session.execute(
            delete(Order).where(Order.tenant_id == tenant_id, Order.id == order_id)
        )
        await session.commit()

    async def list_orphaned(
        self, session: AsyncSession, tenant_id: str
    ) -> List[OrderSummary]:
        """Return headers of ``tenant_id`` that have no line items."""
        TenantGuard.assert_tenant(tenant_id)
        has_items = exists().where(OrderItem.order_id == Order.id)
        result = await session.execute(
            select(Order)
            .where(Order.tenant_id == tenant_id, ~has_items)
            .order_by(Order.created_at)
        )
        return [_summary(order) for order in result.scalars().all()]

    async def get_items(
        self, session: AsyncSession, tenant_id: str, order_id: str
    ) -> list[dict[str, Any]]:
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(OrderItem)
            .where(OrderItem.tenant_id == tenant_id, OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        )
        return [
            {
                "menu_item_id": row.menu_item_id,
                "name": row.name_snapshot,
                "price": Decimal(row.price_snapshot),
                "qty": row.qty,
                "notes": row.notes,
                "options": row.options_snapshot or [],
                "line_total": Decimal(row.line_total),
            }
            for row in result.scalars().all()
        ]

    async def get_by_code(
        self, session: AsyncSession, tenant_id: str, order_code: str
    ) -> OrderDetail | None:
        """Return the order ``order_code`` of ``tenant_id`` with its items."""
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(Order).where(
                Order.tenant_id == tenant_id, Order.order_code == order_code
            )
        )
        order = result.scalar_one_or_none()
        if order is None:
            return None
        return OrderDetail(
            id=order.id,
            order_code=order.order_code,
            status=order.status,
            total=Decimal(order.total),
            created_at=order.created_at,
            customer_name=order.customer_name,
            phone=order.phone,
            pickup_date=order.pickup_date,
            payment_method=order.payment_method,
            subtotal=Decimal(order.subtotal),
            notes=order.notes,
            items=await self.get_items(session, tenant_id, order.id),
        )

    async def list_by_phone(
        self, session: AsyncSession, tenant_id: str, phone: str, limit: int = 50
    ) -> List[OrderSummary]:
        """Return the newest orders placed with the normalized ``phone``."""
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(Order)
            .where(Order.tenant_id == tenant_id, Order.phone == phone)
            .order_by(Order.created_at.desc(), Order.order_code.desc())
            .limit(limit)
        )
        return [_summary(order) for order in result.scalars().all()]

    async def update_status(
        self, session: AsyncSession, tenant_id: str, order_id: str, status: OrderStatus
    ) -> bool:
        """Move an order to ``status``; return ``False`` if it does not exist."""
        TenantGuard.assert_tenant(tenant_id)
        result = await session.execute(
            select(Order.status).where(Order.tenant_id == tenant_id, Order.id == order_id)
        )
        current = result.scalar_one_or_none()
        if current is None:
            return False
        if not can_transition(OrderStatus(current), status):
            raise ValidationError(
                f"Cannot move order from {current} to {status.value}",
                details={"from": current, "to": status.value},
            )
        await session.execute(
            update(Order)
            .where(Order.tenant_id == tenant_id, Order.id == order_id)
            .values(status=status.value)
        )
        await session.commit()
        return True
