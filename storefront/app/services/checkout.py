"""Checkout: turn a cart into an order header plus snapshotted items.

Validation runs first and performs no writes. The header and its items are
then written in two commits; when the item write fails the header is deleted
again and :class:`PartialOrderError` is raised. The cart is only cleared
after both writes succeed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..cart.models import CartLine
from ..cart.store import CartStore
from ..domain.catalog import MenuOption
from ..domain.errors import (
    EmptyCartError,
    IncompleteOptionsError,
    MinimumOrderError,
    MissingFieldsError,
    NotificationError,
    OrderWriteError,
    PartialOrderError,
    PaymentMethodError,
    TenantNotResolvedError,
    ValidationError,
)
from ..menu.options import OptionSelection
from ..repos_sqlalchemy.orders_repo_sql import (
    OrderHeader,
    OrderLine,
    OrderSummary,
    OrdersRepoSQL,
)
from ..tenancy.resolver import TenantIdentity
from ..utils.order_code import generate_order_code
from ..utils.phone import normalize_phone
from .catalog import CatalogService
from .notifications import SheetsNotifier, order_summary

logger = logging.getLogger("storefront.checkout")

ORDER_CODE_ATTEMPTS = 3


@dataclass
class CheckoutForm:
    """Customer supplied checkout fields."""

    customer_name: str | None
    phone: str | None
    payment_method: str | None
    pickup_date: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    order_code: str
    subtotal: Decimal
    total: Decimal


class CheckoutSubmitter:
    """Validate a cart and persist it as an order for one tenant."""

    def __init__(
        self,
        catalog: CatalogService,
        orders: OrdersRepoSQL | None = None,
        notifier: SheetsNotifier | None = None,
        *,
        country_code: str = "62",
        order_code_prefix: str = "ORD",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.catalog = catalog
        self.orders = orders or OrdersRepoSQL()
        self.notifier = notifier or SheetsNotifier(None)
        self.country_code = country_code
        self.order_code_prefix = order_code_prefix
        self.today = today

    def _validate_form(self, form: CheckoutForm) -> tuple[str, str, str, date]:
        missing = [
            name
            for name in ("customer_name", "phone", "payment_method")
            if not (getattr(form, name) or "").strip()
        ]
        if missing:
            raise MissingFieldsError(missing)
        try:
            phone = normalize_phone(form.phone, self.country_code)
        except ValueError as exc:
            raise ValidationError(
                "Phone number is not valid", details={"field": "phone"}
            ) from exc
        today = self.today()
        pickup = form.pickup_date or today + timedelta(days=1)
        if pickup < today:
            raise ValidationError(
                "Pickup date is in the past",
                details={"field": "pickup_date", "pickup_date": pickup.isoformat()},
            )
        return form.customer_name.strip(), phone, form.payment_method.strip(), pickup

    async def _snapshot_lines(
        self, session: AsyncSession, tenant_id: str, lines: list[CartLine]
    ) -> list[OrderLine]:
        """Check required options per line and resolve their labels."""

        options_by_item: dict[str, list[MenuOption]] = {}
        unmet: list[dict] = []
        out: list[OrderLine] = []
        for line in lines:
            if line.item_id not in options_by_item:
                options_by_item[line.item_id] = await self.catalog.options(
                    session, tenant_id, line.item_id
                )
            selection = OptionSelection(options_by_item[line.item_id], line.selections)
            missing = selection.missing_required()
            if missing:
                unmet.append(
                    {
                        "item_id": line.item_id,
                        "name": line.name,
                        "fingerprint": line.fingerprint,
                        "options": [m.as_dict() for m in missing],
                    }
                )
                continue
            out.append(
                OrderLine(
                    menu_item_id=line.item_id,
                    name_snapshot=line.name,
                    price_snapshot=line.unit_price,
                    qty=line.quantity,
                    notes=line.notes,
                    options_snapshot=selection.resolved(),
                )
            )
        if unmet:
            raise IncompleteOptionsError(unmet)
        return out

    async def _insert_header(
        self, session: AsyncSession, tenant_id: str, header: OrderHeader
    ) -> OrderSummary:
        for attempt in range(1, ORDER_CODE_ATTEMPTS + 1):
            try:
                return await self.orders.insert_order(session, tenant_id, header)
            except IntegrityError:
                if attempt == ORDER_CODE_ATTEMPTS:
                    logger.error("order code collisions exhausted retries")
                    raise OrderWriteError()
                logger.warning("order code %s collided, regenerating", header.order_code)
                header.order_code = generate_order_code(self.order_code_prefix)
            except SQLAlchemyError as exc:
                logger.exception("order header insert failed")
                raise OrderWriteError() from exc
        raise OrderWriteError()

    async def submit(
        self,
        session: AsyncSession,
        tenant: TenantIdentity | None,
        cart: CartStore,
        form: CheckoutForm,
    ) -> CheckoutResult:
        """Place the order held in ``cart`` for ``tenant``.

        Raises
        ------
        ValidationError
            Input or cart problems; nothing was written.
        TenantNotResolvedError
            ``tenant`` is missing; nothing was written.
        OrderWriteError
            The header could not be written; nothing was persisted.
        PartialOrderError
            The header was written but its items were not.
        """

        name, phone, payment_method, pickup = self._validate_form(form)
        await cart.reload()
        lines = cart.lines
        if not lines:
            raise EmptyCartError()
        if tenant is None:
            raise TenantNotResolvedError()
        tenant_id = tenant.tenant_id

        order_lines = await self._snapshot_lines(session, tenant_id, lines)
        available = await self.catalog.payment_methods(session, tenant_id)
        if payment_method not in available:
            raise PaymentMethodError(payment_method, available)

        subtotal = cart.total_amount
        if subtotal < tenant.minimum_order_amount:
            raise MinimumOrderError(subtotal, tenant.minimum_order_amount)
        discount = Decimal("0")
        service_fee = Decimal("0")
        header = OrderHeader(
            order_code=generate_order_code(self.order_code_prefix),
            customer_name=name,
            phone=phone,
            payment_method=payment_method,
            subtotal=subtotal,
            discount=discount,
            service_fee=service_fee,
            total=subtotal - discount + service_fee,
            pickup_date=pickup,
            notes=(form.notes or "").strip() or None,
        )

        created = await self._insert_header(session, tenant_id, header)
        try:
            await self.orders.insert_items(session, tenant_id, created.id, order_lines)
        except SQLAlchemyError:
            logger.exception("order items insert failed for %s", created.order_code)
            compensated = True
            try:
                await self.orders.delete_order(session, tenant_id, created.id)
            except SQLAlchemyError:
                logger.exception("could not delete orphaned order %s", created.order_code)
                compensated = False
            logger.error(
                "partial order %s compensated=%s", created.order_code, compensated
            )
            raise PartialOrderError(created.id, created.order_code, compensated)

        await cart.clear_cart()
        logger.info(
            "order %s created items=%d total=%s",
            created.order_code,
            len(order_lines),
            header.total,
        )

        if self.notifier.enabled:
            try:
                await self.notifier.send(order_summary(header, order_lines))
            except NotificationError as exc:
                logger.warning("order %s notification failed: %s", created.order_code, exc)
            except Exception:
                # the order is committed; nothing here may turn it into an error
                logger.warning(
                    "order %s notification crashed", created.order_code, exc_info=True
                )

        return CheckoutResult(
            order_id=created.id,
            order_code=created.order_code,
            subtotal=subtotal,
            total=header.total,
        )


__all__ = ["CheckoutForm", "CheckoutResult", "CheckoutSubmitter"]
