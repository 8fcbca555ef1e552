# backend/crm_api/models/material.py
"""Material tables.

A material lives in exactly one of four tables with an identical column set:
planning, purchased, and the archive mirror of each.
"""

from datetime import datetime
from sqlalchemy import BigInteger, DateTime, Float, Index, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from crm_api.core.database import Base
from crm_api.models.types import BigIntId, utcnow


class MaterialColumns:
    """Columns shared by all four material tables (everything except ``id``)."""

    warehouse_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    company_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    supplier_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    by_invoice: Mapped[str] = mapped_column(String(255), default="")
    article: Mapped[str] = mapped_column(String(255), default="")
    product_category: Mapped[list] = mapped_column(JSON, default=list)
    unit: Mapped[str] = mapped_column(String(50), default="")
    total_quantity: Mapped[int] = mapped_column(BigInteger, default=0)
    volume: Mapped[int] = mapped_column(BigInteger, default=0)
    price_without_vat: Mapped[float] = mapped_column(Float, default=0.0)
    total_without_vat: Mapped[float] = mapped_column(Float, default=0.0)
    location: Mapped[str] = mapped_column(String(255), default="")
    contract_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    file: Mapped[str] = mapped_column(String(500), default="")
    status: Mapped[str] = mapped_column(String(100), default="")
    comments: Mapped[str] = mapped_column(Text, default="")
    reserve: Mapped[str] = mapped_column(String(100), default="")
    received_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    min_stock_level: Mapped[int] = mapped_column(BigInteger, default=0)
    expiration_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responsible_person: Mapped[str] = mapped_column(String(255), default="")
    storage_cost: Mapped[float] = mapped_column(Float, default=0.0)
    warehouse_section: Mapped[str] = mapped_column(String(255), default="")
    incoming_delivery_number: Mapped[str] = mapped_column(String(255), default="")
    other_fields: Mapped[str] = mapped_column(Text, nullable=False, default="{}")  # JSON text
    internal_name: Mapped[str] = mapped_column(String(255), default="")
    units_per_package: Mapped[int] = mapped_column(BigInteger, default=0)
    supplier_name: Mapped[str] = mapped_column(String(255), default="")
    contract_number: Mapped[str] = mapped_column(String(255), default="")


class PlanningMaterial(MaterialColumns, Base):
    """Material not yet purchased. ``item_id`` stays 0."""
    __tablename__ = "planning_materials"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)


class PurchasedMaterial(MaterialColumns, Base):
    """Active inventory; ``item_id`` comes from ``purchased_item_ids``."""
    __tablename__ = "purchased_materials"
    __table_args__ = (
        Index("idx_purchased_materials_item_id", "item_id", unique=True),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)


class PlanningMaterialArchive(MaterialColumns, Base):
    """Copy of a planning record taken when it was purchased.

    Keeps the planning ``id``; ``item_id`` is the one the purchased row received.
    """
    __tablename__ = "planning_materials_archive"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=False)


class PurchasedMaterialArchive(MaterialColumns, Base):
    """Copy of a purchased record taken when it was retired."""
    __tablename__ = "purchased_materials_archive"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=False)


class PurchasedItemId(Base):
    """Identity sequence for ``item_id``; one row per id ever handed out."""
    __tablename__ = "purchased_item_ids"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
