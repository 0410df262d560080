"""Tenant-partitioned database models.

Every table carries ``tenant_id`` and all repository reads filter on it.
Money columns hold whole currency units."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base

from .domain import OrderStatus

Base = declarative_base()


def _uuid() -> str:
    return uuid.uuid4().hex


class Category(Base):
    """Categories for menu items."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    name = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class MenuDiscount(Base):
    __tablename__ = "menu_discounts"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    discount_type = Column(String(20), nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)


class MenuItem(Base):
    """Tenant-specific menu items."""

    __tablename__ = "menu_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    name = Column(String, nullable=False)
    base_price = Column(Numeric(12, 0), nullable=True)
    price = Column(Numeric(12, 0), nullable=True)
    discount_id = Column(String(36), ForeignKey("menu_discounts.id"), nullable=True)
    photo_url = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class MenuOption(Base):
    """Option groups such as size or topping."""

    __tablename__ = "menu_options"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    menu_item_id = Column(
        String(36), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False
    )
    label = Column(String(100), nullable=False)
    selection_type = Column(String(20), nullable=False)
    max_selections = Column(Integer, nullable=False, default=1)
    is_required = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)


class MenuOptionItem(Base):
    __tablename__ = "menu_option_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    menu_option_id = Column(
        String(36), ForeignKey("menu_options.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(100), nullable=False)
    additional_price = Column(Numeric(12, 0), nullable=False, default=0)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class PaymentMethod(Base):
    """Payment methods a tenant accepts. Stored as labels only."""

    __tablename__ = "payment_methods"

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    payment_type = Column(String(50), nullable=False)
    name = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class Order(Base):
    """Order header."""

    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("tenant_id", "order_code"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    tenant_id = Column(String(36), nullable=False, index=True)
    order_code = Column(String(32), nullable=False)
    customer_name = Column(String, nullable=False)
    phone = Column(String(20), nullable=False)
    pickup_date = Column(Date, nullable=True)
    payment_method = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING_PAYMENT.value)
    subtotal = Column(Numeric(12, 0), nullable=False)
    discount = Column(Numeric(12, 0), nullable=False, default=0)
    service_fee = Column(Numeric(12, 0), nullable=False, default=0)
    total = Column(Numeric(12, 0), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class OrderItem(Base):
    """Line items with name, price and option snapshots."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(36), nullable=False, index=True)
    order_id = Column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_item_id = Column(String(36), nullable=False)
    name_snapshot = Column(String, nullable=False)
    price_snapshot = Column(Numeric(12, 0), nullable=False)
    qty = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    options_snapshot = Column(JSON, nullable=False, default=list)
    line_total = Column(Numeric(12, 0), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
