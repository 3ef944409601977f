"""Itemised deductions: per-category caps and taxable income."""

from collections.abc import Mapping
from decimal import Decimal
from typing import NamedTuple

from sa_tax.calculators.errors import InvalidInputError

_ZERO = Decimal("0")


class DeductibleExpenseType(NamedTuple):
    """A category of deductible expense."""

    id: int
    key: str
    name: str
    description: str = ""
    max_percentage: Decimal | None = None  # fraction of gross income, None = uncapped


def expense_caps(expense_types: Mapping[str, DeductibleExpenseType]) -> dict[str, Decimal]:
    """Extract the cap fractions of the capped categories, keyed by category."""
    return {
        key: expense_type.max_percentage
        for key, expense_type in expense_types.items()
        if expense_type.max_percentage is not None
    }


def allowed_deductions(
    gross_income: Decimal,
    expenses: Mapping[str, Decimal],
    expense_type_caps: Mapping[str, Decimal] | None = None,
) -> dict[str, Decimal]:
    """Clamp each claimed amount to its category cap.

    Caps are fractions of gross income; taxable income is not known yet at
    this point. Categories without a cap are allowed in full.

    Raises:
        InvalidInputError: If any claimed amount is negative.
    """
    caps = expense_type_caps or {}
    allowed: dict[str, Decimal] = {}
    for category, claimed in expenses.items():
        if claimed < 0:
            raise InvalidInputError("expenses", f"Amount for {category!r} must be non-negative.")
        cap = caps.get(category)
        allowed[category] = min(claimed, cap * gross_income) if cap is not None else claimed
    return allowed


def compute_taxable_income(
    gross_income: Decimal,
    expenses: Mapping[str, Decimal],
    expense_type_caps: Mapping[str, Decimal] | None = None,
) -> Decimal:
    """Gross income less allowed deductions, floored at zero."""
    total = sum(allowed_deductions(gross_income, expenses, expense_type_caps).values(), _ZERO)
    return max(_ZERO, gross_income - total)
