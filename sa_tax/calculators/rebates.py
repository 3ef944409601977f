"""Age-based rebates and medical scheme fees tax credits."""

from decimal import Decimal
from typing import NamedTuple

SECONDARY_REBATE_AGE = 65
TERTIARY_REBATE_AGE = 75


class RebateSchedule(NamedTuple):
    """Annual rebate amounts for a tax year."""

    primary: Decimal
    secondary: Decimal  # age 65 and older
    tertiary: Decimal  # age 75 and older


class TaxYearConstants(NamedTuple):
    """Rebates and credits that apply after gross tax for one tax year."""

    tax_year: str
    rebates: RebateSchedule
    medical_credit_monthly: Decimal  # main member only


def compute_rebates(age: int, constants: TaxYearConstants) -> Decimal:
    """Total rebate for a taxpayer of ``age`` at the end of the tax year.

    Tiers are cumulative: primary always, plus secondary from 65, plus
    tertiary from 75.
    """
    schedule = constants.rebates
    total = schedule.primary
    if age >= SECONDARY_REBATE_AGE:
        total += schedule.secondary
    if age >= TERTIARY_REBATE_AGE:
        total += schedule.tertiary
    return total


def compute_medical_credits(constants: TaxYearConstants) -> Decimal:
    """Annual medical credit for the main member (monthly credit x 12)."""
    return constants.medical_credit_monthly * 12
