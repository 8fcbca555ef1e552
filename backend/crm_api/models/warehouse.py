# backend/crm_api/models/warehouse.py
from datetime import datetime
from sqlalchemy import BigInteger, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from crm_api.core.database import Base
from crm_api.models.types import BigIntId, utcnow


class Warehouse(Base):
    __tablename__ = "warehouses"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    company_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(140), nullable=False)
    address: Mapped[str] = mapped_column(String(140), default="")
    responsible_person: Mapped[int] = mapped_column(BigInteger, default=0)  # user id
    phone: Mapped[str] = mapped_column(String(50), default="")
    email: Mapped[str] = mapped_column(String(255), default="")
    max_capacity: Mapped[int] = mapped_column(BigInteger, default=0)
    current_occupancy: Mapped[int] = mapped_column(BigInteger, default=0)
    other_fields: Mapped[str] = mapped_column(Text, nullable=False, default="{}")  # JSON text
    country: Mapped[str] = mapped_column(String(100), default="")
    region: Mapped[str] = mapped_column(String(100), default="")
    locality: Mapped[str] = mapped_column(String(100), default="")
    comments: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
