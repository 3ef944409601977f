"""API routes for the SA tax calculator."""

import logging
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Query

from sa_tax.api.schemas import (
    DeductibleExpenseTypeOut,
    ProvisionalTaxResponse,
    TaxBracketOut,
    TaxCalculationRequest,
    TaxCalculationResponse,
    TaxYearsResponse,
)
from sa_tax.calculators.errors import InvalidInputError
from sa_tax.calculators.provisional import split_provisional
from sa_tax.calculators.tax_calculation import TaxCalculationInput, calculate_tax_for_year
from sa_tax.calculators.tax_data import (
    DEDUCTIBLE_EXPENSE_TYPES,
    DEFAULT_TAX_YEAR,
    TAX_YEARS,
    TaxYearData,
)
from sa_tax.calculators.tax_year import tax_year_for_date

logger = logging.getLogger(__name__)

router = APIRouter()


def _tax_year_data(tax_year: str) -> TaxYearData:
    if tax_year not in TAX_YEARS:
        available = ", ".join(sorted(TAX_YEARS))
        raise InvalidInputError("tax_year", f"Unknown tax year: {tax_year}. Available: {available}")
    return TAX_YEARS[tax_year]


@router.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint listing the loaded tax years."""
    return {"status": "ok", "tax_years": sorted(TAX_YEARS)}


@router.get("/tax-years", response_model=TaxYearsResponse)
async def tax_years() -> TaxYearsResponse:
    """List the tax years with loaded tables, newest first.

    ``current_tax_year`` is the year containing today and may not be loaded.
    """
    return TaxYearsResponse(
        tax_years=sorted(TAX_YEARS, reverse=True),
        default_tax_year=DEFAULT_TAX_YEAR,
        current_tax_year=tax_year_for_date(date.today()),
    )


@router.get("/tax-brackets", response_model=list[TaxBracketOut])
async def tax_brackets(tax_year: str = DEFAULT_TAX_YEAR) -> list[TaxBracketOut]:
    """Return the bracket table for a tax year."""
    data = _tax_year_data(tax_year)
    return [TaxBracketOut.from_bracket(bracket) for bracket in data.brackets]


@router.get("/deductible-expenses", response_model=list[DeductibleExpenseTypeOut])
async def deductible_expenses() -> list[DeductibleExpenseTypeOut]:
    """Return the deductible expense categories and their caps."""
    return [
        DeductibleExpenseTypeOut.from_expense_type(expense_type)
        for expense_type in sorted(DEDUCTIBLE_EXPENSE_TYPES.values(), key=lambda t: t.id)
    ]


@router.post("/tax-calculation", response_model=TaxCalculationResponse)
async def tax_calculation(body: TaxCalculationRequest) -> TaxCalculationResponse:
    """Calculate annual tax for the given income, age and expenses."""
    tax_input = TaxCalculationInput(
        gross_income=body.gross_income,
        age=body.age,
        expenses=body.expenses,
        tax_year=body.tax_year or DEFAULT_TAX_YEAR,
    )
    result = calculate_tax_for_year(tax_input)
    logger.info(
        "Calculated %s tax: taxable=%s final=%s",
        result.tax_year,
        result.taxable_income,
        result.final_tax,
    )
    return TaxCalculationResponse.from_result(result)


@router.get("/provisional-tax", response_model=ProvisionalTaxResponse)
async def provisional_tax(
    final_tax: Decimal = Query(...),
    tax_year: str = DEFAULT_TAX_YEAR,
    as_of: date | None = None,
) -> ProvisionalTaxResponse:
    """Split annual tax into the two provisional instalments.

    ``as_of`` defaults to today and decides which payments are overdue.
    """
    split = split_provisional(final_tax, tax_year, as_of or date.today())
    return ProvisionalTaxResponse.from_split(split)
