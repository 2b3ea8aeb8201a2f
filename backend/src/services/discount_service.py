"""
Discount service for tiered multi-area discounts.

Tiers key off the number of body areas ("area" selections) in one booking.
Add-on specifications count toward the subtotal but never toward the tier.

Rule selection is order-sensitive: rules are scanned in the order given and
the last matching rule wins. Stored rules are read back ordered by min_groups
so that broader tiers come later, and tier validation rejects overlapping
bands, which keeps "last match" and "highest discount" in agreement.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import SELECTION_KIND_AREA
from models import DiscountRule, Procedure
from shared_types.booking import DiscountResult, DiscountTier, PricedSelection

logger = logging.getLogger(__name__)


def apply_discount(selections: Iterable[PricedSelection], rules: Iterable[DiscountTier]) -> DiscountResult:
    """
    Compute subtotal, discount and final total for a booking.

    No intermediate rounding is done; round at display time.

    Args:
        selections: Priced line items (areas and specifications)
        rules: Discount tiers in priority order (last match wins)

    Returns:
        DiscountResult; applied_rule is None when no tier matches
    """
    subtotal = 0.0
    group_count = 0
    for selection in selections:
        subtotal += selection.unit_price
        if selection.kind == SELECTION_KIND_AREA:
            group_count += 1

    applied: Optional[DiscountTier] = None
    for rule in rules:
        if rule.matches(group_count):
            applied = rule

    if applied is None:
        return DiscountResult(subtotal=subtotal, discount=0.0, final_total=subtotal)

    discount = subtotal * (applied.discount_percentage / 100)
    return DiscountResult(
        subtotal=subtotal,
        discount=discount,
        final_total=max(0.0, subtotal - discount),
        applied_rule=applied,
    )


def order_rules_by_priority(rules: Iterable[DiscountTier]) -> List[DiscountTier]:
    """Stable sort ascending by min_groups so broader tiers come last."""
    return sorted(rules, key=lambda rule: rule.min_groups)


def validate_rule_tiers(rules: Sequence[DiscountTier]) -> List[str]:
    """
    Validate discount tiers before they are stored.

    Args:
        rules: Candidate tiers for one procedure

    Returns:
        List of error messages. Empty list if the tiers are valid.
        Format: ["Faixa 1: ...", ...] numbered in priority order
    """
    errors: List[str] = []
    ordered = order_rules_by_priority(rules)

    for index, rule in enumerate(ordered, start=1):
        if rule.min_groups < 1:
            errors.append(f"Faixa {index}: o mínimo de áreas deve ser pelo menos 1")
        if rule.max_groups is not None and rule.max_groups < rule.min_groups:
            errors.append(f"Faixa {index}: o máximo de áreas não pode ser menor que o mínimo")
        if not 0 <= rule.discount_percentage <= 100:
            errors.append(f"Faixa {index}: o desconto deve estar entre 0 e 100%")

    for index in range(1, len(ordered)):
        previous, current = ordered[index - 1], ordered[index]
        if previous.max_groups is None or current.min_groups <= previous.max_groups:
            errors.append(f"Faixa {index + 1}: sobrepõe a faixa {index}")

    return errors


class DiscountService:
    """
    Service class for discount rule operations.

    Reads and replaces the discount tiers stored for a procedure.
    """

    @staticmethod
    def _get_procedure(db: Session, procedure_id: int) -> Procedure:
        procedure = db.query(Procedure).filter(Procedure.id == procedure_id).first()
        if not procedure:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Procedimento não encontrado"
            )
        return procedure

    @staticmethod
    def get_rules_for_procedure(db: Session, procedure_id: int) -> List[DiscountTier]:
        """
        Active tiers of a procedure in priority order.

        Raises:
            HTTPException: If the procedure does not exist
        """
        DiscountService._get_procedure(db, procedure_id)
        rows = (
            db.query(DiscountRule)
            .filter(DiscountRule.procedure_id == procedure_id, DiscountRule.is_active == True)  # noqa: E712
            .order_by(DiscountRule.min_groups, DiscountRule.id)
            .all()
        )
        return order_rules_by_priority(row.to_tier() for row in rows)

    @staticmethod
    def replace_rules(db: Session, procedure_id: int, rules: Sequence[DiscountTier]) -> List[DiscountTier]:
        """
        Replace every tier of a procedure.

        The caller owns the transaction (commit/rollback).

        Raises:
            HTTPException: 404 if the procedure does not exist, 400 with the
                validation messages if the tiers are invalid
        """
        procedure = DiscountService._get_procedure(db, procedure_id)

        errors = validate_rule_tiers(rules)
        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=errors
            )

        procedure.discount_rules.clear()
        db.flush()
        for rule in order_rules_by_priority(rules):
            procedure.discount_rules.append(DiscountRule(
                min_groups=rule.min_groups,
                max_groups=rule.max_groups,
                discount_percentage=rule.discount_percentage,
                is_active=True,
            ))
        db.flush()

        logger.info(f"Replaced discount rules for procedure {procedure_id}: {len(rules)} tiers")
        return DiscountService.get_rules_for_procedure(db, procedure_id)
