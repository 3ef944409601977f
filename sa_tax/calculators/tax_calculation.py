"""Full tax calculation: deductions, bracket tax, rebates, credits, rates."""

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import NamedTuple

from sa_tax.calculators.brackets import BracketTable
from sa_tax.calculators.deductions import DeductibleExpenseType, allowed_deductions, expense_caps
from sa_tax.calculators.errors import InvalidInputError
from sa_tax.calculators.income_tax import marginal_rate, tax_before_rebates
from sa_tax.calculators.rebates import (
    TaxYearConstants,
    compute_medical_credits,
    compute_rebates,
)
from sa_tax.calculators.tax_data import DEDUCTIBLE_EXPENSE_TYPES, TAX_YEARS, TaxYearData
from sa_tax.calculators.tax_year import parse_tax_year

_ZERO = Decimal("0")


class TaxCalculationInput(NamedTuple):
    """Inputs for one annual calculation."""

    gross_income: Decimal
    age: int  # at the end of the tax year
    expenses: Mapping[str, Decimal]
    tax_year: str


class TaxCalculationResult(NamedTuple):
    """Outcome of :func:`calculate_tax`. Rates are fractions, not percentages."""

    tax_year: str
    gross_income: Decimal
    deductions: Mapping[str, Decimal]  # read-only view
    total_deductions: Decimal
    taxable_income: Decimal
    tax_before_rebates: Decimal
    rebates: Decimal
    medical_credits: Decimal
    final_tax: Decimal
    effective_tax_rate: Decimal
    marginal_rate: Decimal
    monthly_tax: Decimal
    monthly_tax_rate: Decimal
    tax_saving: Decimal  # final tax without deductions, less final tax


def _validate(
    tax_input: TaxCalculationInput,
    brackets: BracketTable,
    constants: TaxYearConstants,
) -> None:
    if tax_input.gross_income < 0:
        raise InvalidInputError("gross_income", "Gross income must be non-negative.")
    if isinstance(tax_input.age, bool) or not isinstance(tax_input.age, int) or tax_input.age < 0:
        raise InvalidInputError("age", "Age must be a non-negative integer.")

    parse_tax_year(tax_input.tax_year)
    if tax_input.tax_year != brackets.tax_year:
        raise InvalidInputError(
            "tax_year",
            f"No brackets for {tax_input.tax_year}; table is for {brackets.tax_year}.",
        )
    if tax_input.tax_year != constants.tax_year:
        raise InvalidInputError(
            "tax_year",
            f"No rebate constants for {tax_input.tax_year}; constants are for {constants.tax_year}.",
        )


def calculate_tax(
    tax_input: TaxCalculationInput,
    brackets: BracketTable,
    constants: TaxYearConstants,
    expense_type_caps: Mapping[str, Decimal] | None = None,
) -> TaxCalculationResult:
    """Calculate annual SA income tax.

    Steps: allowed deductions give taxable income; the bracket table gives
    tax before rebates; age rebates and the medical credit are subtracted;
    final tax is floored at zero.

    Args:
        tax_input: Income, age, claimed expenses and tax year.
        brackets: Bracket table for ``tax_input.tax_year``.
        constants: Rebates and medical credit for ``tax_input.tax_year``.
        expense_type_caps: Cap per expense category as a fraction of gross
            income. Categories not listed are uncapped.

    Returns:
        TaxCalculationResult.

    Raises:
        InvalidInputError: Naming the first invalid field.
    """
    _validate(tax_input, brackets, constants)

    gross_income = tax_input.gross_income
    deductions = allowed_deductions(gross_income, tax_input.expenses, expense_type_caps)
    total_deductions = sum(deductions.values(), _ZERO)
    taxable_income = max(_ZERO, gross_income - total_deductions)

    gross_tax = tax_before_rebates(taxable_income, brackets)
    rebates = compute_rebates(tax_input.age, constants)
    medical_credits = compute_medical_credits(constants)
    final_tax = max(_ZERO, gross_tax - rebates - medical_credits)
    undeducted_tax = max(
        _ZERO, tax_before_rebates(gross_income, brackets) - rebates - medical_credits
    )

    effective_rate = final_tax / taxable_income if taxable_income > 0 else _ZERO
    monthly_rate = final_tax / (gross_income * 12) if gross_income > 0 else _ZERO

    return TaxCalculationResult(
        tax_year=tax_input.tax_year,
        gross_income=gross_income,
        deductions=MappingProxyType(deductions),
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        tax_before_rebates=gross_tax,
        rebates=rebates,
        medical_credits=medical_credits,
        final_tax=final_tax,
        effective_tax_rate=effective_rate,
        marginal_rate=marginal_rate(taxable_income, brackets),
        monthly_tax=final_tax / 12,
        monthly_tax_rate=monthly_rate,
        tax_saving=undeducted_tax - final_tax,
    )


def calculate_tax_for_year(
    tax_input: TaxCalculationInput,
    tax_years: Mapping[str, TaxYearData] | None = None,
    expense_types: Mapping[str, DeductibleExpenseType] | None = None,
) -> TaxCalculationResult:
    """Calculate tax using the loaded tables for ``tax_input.tax_year``.

    Defaults to the bundled tax tables and deductible expense categories.
    Only expenses in a known category are accepted.

    Raises:
        InvalidInputError: If the tax year has no tables, an expense category
            is unknown, or any input is invalid.
    """
    years = TAX_YEARS if tax_years is None else tax_years
    types = DEDUCTIBLE_EXPENSE_TYPES if expense_types is None else expense_types

    if tax_input.tax_year not in years:
        available = ", ".join(sorted(years))
        raise InvalidInputError(
            "tax_year", f"Unknown tax year: {tax_input.tax_year}. Available: {available}"
        )
    for category in tax_input.expenses:
        if category not in types:
            known = ", ".join(sorted(types))
            raise InvalidInputError(
                "expenses", f"Unknown expense category {category!r}. Known: {known}"
            )

    data = years[tax_input.tax_year]
    return calculate_tax(tax_input, data.brackets, data.constants, expense_caps(types))
