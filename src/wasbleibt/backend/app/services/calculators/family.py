"""Family allowance and child-related tax credits."""

from __future__ import annotations

from collections.abc import Sequence

from wasbleibt.backend.app.models import (
    ChildAllowance,
    FamilyAllowanceResult,
    FamilyBonusResult,
    MaritalStatus,
    SingleEarnerCreditResult,
)
from wasbleibt.backend.config.year_config import BenefitConfig


def calculate_family_allowance(
    child_ages: Sequence[int], benefits: BenefitConfig
) -> FamilyAllowanceResult:
    """Return monthly Familienbeihilfe, Kinderabsetzbetrag, and sibling bonus."""

    if not child_ages:
        return FamilyAllowanceResult()

    child_count = len(child_ages)
    per_child = tuple(
        ChildAllowance(
            age=age,
            base_amount=benefits.family_allowance.amount_for_age(age),
            child_tax_credit=benefits.child_tax_credit,
        )
        for age in child_ages
    )

    base_amount = sum(entry.base_amount for entry in per_child)
    child_tax_credit = benefits.child_tax_credit * child_count
    sibling_bonus = benefits.sibling_bonus_rate(child_count) * child_count

    return FamilyAllowanceResult(
        base_amount=base_amount,
        child_tax_credit=child_tax_credit,
        sibling_bonus=sibling_bonus,
        total=base_amount + child_tax_credit + sibling_bonus,
        per_child=per_child,
        child_count=child_count,
    )


def calculate_family_bonus(
    child_ages: Sequence[int], tax_liability: float, benefits: BenefitConfig
) -> FamilyBonusResult:
    """Apply Familienbonus Plus against ``tax_liability`` (annual).

    Bonus headroom the tax liability cannot absorb is partly paid out as the
    Kindermehrbetrag, capped per child.
    """

    liability = max(0.0, tax_liability)
    if not child_ages:
        return FamilyBonusResult(remaining_tax=liability)

    max_bonus = sum(benefits.family_bonus.ceiling_for_age(age) for age in child_ages)
    used_bonus = min(max_bonus, liability)
    unused_bonus = max_bonus - used_bonus
    supplementary_credit = min(
        unused_bonus, benefits.supplementary_credit_cap * len(child_ages)
    )

    return FamilyBonusResult(
        max_bonus=max_bonus,
        used_bonus=used_bonus,
        remaining_tax=max(0.0, liability - used_bonus),
        supplementary_credit=supplementary_credit,
        monthly_supplementary_credit=supplementary_credit / 12,
    )


def calculate_single_earner_credit(
    marital_status: MaritalStatus,
    child_count: int,
    partner_annual_income: float,
    benefits: BenefitConfig,
) -> SingleEarnerCreditResult:
    """Return the Alleinerzieher- or Alleinverdienerabsetzbetrag (annual)."""

    if child_count <= 0:
        return SingleEarnerCreditResult(reason="no_children")

    schedule = benefits.single_earner
    credit = schedule.credit_for_children(child_count)

    if marital_status == "single_parent":
        return SingleEarnerCreditResult(
            eligible=True,
            annual_credit=credit,
            monthly_credit=credit / 12,
            credit_type="single_parent",
        )

    if marital_status == "married":
        if partner_annual_income <= schedule.partner_income_limit:
            return SingleEarnerCreditResult(
                eligible=True,
                annual_credit=credit,
                monthly_credit=credit / 12,
                credit_type="single_earner",
            )
        return SingleEarnerCreditResult(reason="partner_income_above_limit")

    return SingleEarnerCreditResult(reason="not_single_parent_or_married")


__all__ = [
    "calculate_family_allowance",
    "calculate_family_bonus",
    "calculate_single_earner_credit",
]
