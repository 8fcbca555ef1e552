# backend/crm_api/models/section.py
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from crm_api.core.database import Base
from crm_api.models.types import BigIntId


class Section(Base):
    """A named permission grant that users carry in their ``sections`` list."""
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
