"""
Discount rule model: tiered percentage discounts per procedure.

A rule applies when the number of body areas selected in one booking falls
within [min_groups, max_groups]; max_groups NULL means no upper bound.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import ForeignKey, TIMESTAMP, Integer, Float, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.database import Base
from shared_types.booking import DiscountTier


class DiscountRule(Base):
    """Discount tier configured for a procedure."""

    __tablename__ = "discount_rules"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)

    procedure_id: Mapped[int] = mapped_column(ForeignKey("procedures.id"), index=True)

    min_groups: Mapped[int] = mapped_column(Integer)
    max_groups: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    discount_percentage: Mapped[float] = mapped_column(Float)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    """Inactive rules are kept for history but never applied."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

    procedure = relationship("Procedure", back_populates="discount_rules")

    def to_tier(self) -> DiscountTier:
        return DiscountTier(
            id=self.id,
            min_groups=self.min_groups,
            max_groups=self.max_groups,
            discount_percentage=self.discount_percentage,
        )
