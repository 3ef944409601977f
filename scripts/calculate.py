"""Calculate SA income tax and provisional instalments from the command line.

Usage:
    python scripts/calculate.py --income 750000 --age 35 \
        --expense retirement=50000 --expense donations=7500 --tax-year 2024-2025
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from sa_tax.calculators.errors import TaxCalculationError
from sa_tax.calculators.income_tax import bracket_breakdown
from sa_tax.calculators.provisional import split_provisional
from sa_tax.calculators.tax_calculation import TaxCalculationInput, calculate_tax_for_year
from sa_tax.calculators.tax_data import TAX_YEARS
from sa_tax.calculators.tax_year import tax_year_bounds

logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def _expense(value: str) -> tuple[str, Decimal]:
    """Parse a ``category=amount`` pair."""
    key, sep, amount = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected category=amount, got {value!r}")
    try:
        return key.strip(), Decimal(amount)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Invalid amount in {value!r}") from exc


def _rand(value: Decimal) -> str:
    return f"R{value:,.2f}"


def main(argv: list[str] | None = None) -> int:
    """Print a tax calculation and its provisional split."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--income", type=Decimal, required=True, help="Annual gross income")
    parser.add_argument("--age", type=int, required=True, help="Age at end of the tax year")
    parser.add_argument("--tax-year", default=settings.default_tax_year)
    parser.add_argument(
        "--expense", type=_expense, action="append", default=[],
        help="Deductible expense as category=amount (repeatable)",
    )
    parser.add_argument(
        "--as-of", type=date.fromisoformat, default=None,
        help="Date for overdue checks (YYYY-MM-DD, default today)",
    )
    args = parser.parse_args(argv)

    tax_input = TaxCalculationInput(
        gross_income=args.income,
        age=args.age,
        expenses=dict(args.expense),
        tax_year=args.tax_year,
    )
    try:
        result = calculate_tax_for_year(tax_input)
        split = split_provisional(result.final_tax, result.tax_year, args.as_of or date.today())
    except TaxCalculationError as exc:
        logger.error("%s", exc)
        return 1

    first_day, last_day = tax_year_bounds(result.tax_year)
    print(f"Tax year:            {result.tax_year} ({first_day} to {last_day})")
    print(f"Gross income:        {_rand(result.gross_income)}")
    for category, amount in result.deductions.items():
        print(f"  less {category:<15}{_rand(amount)}")
    print(f"Taxable income:      {_rand(result.taxable_income)}")
    for band in bracket_breakdown(result.taxable_income, TAX_YEARS[result.tax_year].brackets):
        print(f"  {band['rate']:>5.0%} on {band['taxable_amount']:>14,.2f} = {band['tax']:>12,.2f}")
    print(f"Tax before rebates:  {_rand(result.tax_before_rebates)}")
    print(f"Rebates:             {_rand(result.rebates)}")
    print(f"Medical credits:     {_rand(result.medical_credits)}")
    print(f"Final tax:           {_rand(result.final_tax)}")
    print(f"Effective rate:      {result.effective_tax_rate:.2%}")
    print(f"Monthly tax:         {_rand(result.monthly_tax)}")
    print(f"Saved by deductions: {_rand(result.tax_saving)}")
    for label, payment in (("First", split.first), ("Second", split.second)):
        overdue = " (overdue)" if payment.is_overdue else ""
        print(f"{label} provisional:  {_rand(payment.amount)} due {payment.due_date}{overdue}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
