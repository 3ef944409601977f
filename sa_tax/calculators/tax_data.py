"""SA tax tables: brackets, rebates, medical credits, deductible expenses.

Loaded once from ``config/tax_tables.yaml``. Every bracket table is
validated on load, so a bad table fails at import rather than mid-calculation.
"""

from decimal import Decimal
from typing import Any, NamedTuple

from config import load_yaml_config
from config.settings import settings
from sa_tax.calculators.brackets import BracketTable, TaxBracket
from sa_tax.calculators.deductions import DeductibleExpenseType, expense_caps
from sa_tax.calculators.errors import InvalidBracketTableError
from sa_tax.calculators.rebates import RebateSchedule, TaxYearConstants
from sa_tax.calculators.tax_year import parse_tax_year


class TaxYearData(NamedTuple):
    """All tax parameters for a single SA tax year."""

    brackets: BracketTable
    constants: TaxYearConstants


def _decimal(value: Any) -> Decimal:
    # str() first so YAML floats do not carry binary noise into Decimal
    return Decimal(str(value))


def _parse_year(tax_year: str, raw: dict[str, Any]) -> TaxYearData:
    parse_tax_year(tax_year)
    try:
        brackets = BracketTable(
            TaxBracket(
                lower_limit=_decimal(row["lower_limit"]),
                upper_limit=_decimal(row["upper_limit"]) if row["upper_limit"] is not None else None,
                rate=_decimal(row["rate"]),
                base_amount=_decimal(row["base_amount"]),
                tax_year=tax_year,
            )
            for row in raw["brackets"]
        )
        rebates = raw["rebates"]
        constants = TaxYearConstants(
            tax_year=tax_year,
            rebates=RebateSchedule(
                primary=_decimal(rebates["primary"]),
                secondary=_decimal(rebates["secondary"]),
                tertiary=_decimal(rebates["tertiary"]),
            ),
            medical_credit_monthly=_decimal(raw["medical_credit_monthly"]),
        )
    except KeyError as exc:
        raise InvalidBracketTableError(f"{tax_year}: missing field {exc}") from exc
    return TaxYearData(brackets=brackets, constants=constants)


def load_tax_years(filename: str = settings.tax_tables_file) -> dict[str, TaxYearData]:
    """Load and validate every tax year in a tax tables file."""
    raw = load_yaml_config(filename)["tax_years"]
    return {tax_year: _parse_year(tax_year, data) for tax_year, data in raw.items()}


def load_expense_types(filename: str = settings.tax_tables_file) -> dict[str, DeductibleExpenseType]:
    """Load deductible expense categories keyed by category key."""
    raw = load_yaml_config(filename)["deductible_expenses"]
    return {
        row["key"]: DeductibleExpenseType(
            id=row["id"],
            key=row["key"],
            name=row["name"],
            description=row.get("description", ""),
            max_percentage=_decimal(row["max_percentage"]) if "max_percentage" in row else None,
        )
        for row in raw
    }


TAX_YEARS: dict[str, TaxYearData] = load_tax_years()

DEDUCTIBLE_EXPENSE_TYPES: dict[str, DeductibleExpenseType] = load_expense_types()

EXPENSE_CAPS: dict[str, Decimal] = expense_caps(DEDUCTIBLE_EXPENSE_TYPES)

DEFAULT_TAX_YEAR = settings.default_tax_year
