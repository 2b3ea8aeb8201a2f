"""
Procedure model representing a treatment offered by the clinic.

A procedure may be sold as a package of several sessions; only the first
session of a package carries its price.
"""

from datetime import datetime
from typing import List
from sqlalchemy import String, TIMESTAMP, Integer, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from core.constants import MAX_STRING_LENGTH, DEFAULT_PROCEDURE_DURATION_MINUTES


class Procedure(Base):
    """Treatment entity with list price, duration and package size."""

    __tablename__ = "procedures"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    name: Mapped[str] = mapped_column(String(MAX_STRING_LENGTH))

    price: Mapped[float] = mapped_column(Float, default=0.0)
    """List price, used when an appointment has no recorded payment value."""

    duration_minutes: Mapped[int] = mapped_column(Integer, default=DEFAULT_PROCEDURE_DURATION_MINUTES)

    sessions: Mapped[int] = mapped_column(Integer, default=1)
    """Number of sessions in a package. 1 means the procedure is not a package."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

    discount_rules: Mapped[List["DiscountRule"]] = relationship(  # type: ignore[name-defined]
        back_populates="procedure", cascade="all, delete-orphan"
    )
