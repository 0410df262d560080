# models_master.py

"""Database models for the master schema."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _uuid() -> str:
    return uuid.uuid4().hex


class Tenant(Base):
    """A store whose catalog and orders are partitioned by ``id``."""

    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(64), nullable=False, unique=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    minimum_order_amount = Column(Numeric(12, 0), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
