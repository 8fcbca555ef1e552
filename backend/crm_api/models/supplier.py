# backend/crm_api/models/supplier.py
from datetime import datetime
from sqlalchemy import BigInteger, Boolean, DateTime, Float, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from crm_api.core.database import Base
from crm_api.models.types import BigIntId, utcnow


class Supplier(Base):
    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_address: Mapped[str] = mapped_column(String(255), default="")
    actual_address: Mapped[str] = mapped_column(String(255), default="")
    warehouse_address: Mapped[str] = mapped_column(String(255), default="")
    contact_person: Mapped[str] = mapped_column(String(255), default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    email: Mapped[str] = mapped_column(String(255), default="")
    website: Mapped[str] = mapped_column(String(255), default="")
    contract_number: Mapped[str] = mapped_column(String(100), default="")
    product_categories: Mapped[list] = mapped_column(JSON, default=list)
    purchase_amount: Mapped[float] = mapped_column(Float, default=0.0)
    balance: Mapped[float] = mapped_column(Float, default=0.0)
    product_types: Mapped[int] = mapped_column(BigInteger, default=0)
    comments: Mapped[str] = mapped_column(Text, default="")
    files: Mapped[str] = mapped_column(Text, default="")
    country: Mapped[str] = mapped_column(String(100), default="")
    region: Mapped[str] = mapped_column(String(100), default="")
    locality: Mapped[str] = mapped_column(String(100), default="")
    tax_id: Mapped[str] = mapped_column(String(50), default="")
    bank_details: Mapped[str] = mapped_column(Text, default="")
    registration_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    payment_terms: Mapped[list] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    other_fields: Mapped[str] = mapped_column(Text, nullable=False, default="{}")  # JSON text
    contract_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
