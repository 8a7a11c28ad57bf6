"""Tax, contribution, and benefit calculation helpers."""

from .family import (
    calculate_family_allowance,
    calculate_family_bonus,
    calculate_single_earner_credit,
)
from .housing import (
    HousingFormula,
    HousingHousehold,
    build_housing_formulas,
    calculate_housing_subsidy,
    select_housing_formula,
)
from .payroll import calculate_income_tax, calculate_monthly_net, calculate_social_security
from .support import calculate_childcare_costs, calculate_minimum_income
from .utils import calculate_progressive_tax, round_currency, round_rate, safe_ratio

__all__ = [
    "HousingFormula",
    "HousingHousehold",
    "build_housing_formulas",
    "calculate_childcare_costs",
    "calculate_family_allowance",
    "calculate_family_bonus",
    "calculate_housing_subsidy",
    "calculate_income_tax",
    "calculate_minimum_income",
    "calculate_monthly_net",
    "calculate_progressive_tax",
    "calculate_single_earner_credit",
    "calculate_social_security",
    "round_currency",
    "round_rate",
    "safe_ratio",
    "select_housing_formula",
]
