"""Shared test fixtures."""

from decimal import Decimal

import pytest

from sa_tax.calculators.brackets import BracketTable, TaxBracket
from sa_tax.calculators.rebates import RebateSchedule, TaxYearConstants

TAX_YEAR = "2024-2025"

# (lower, upper, rate, base) for the SA 2024-2025 individual rates
_SA_2025_ROWS: list[tuple[int, int | None, str, int]] = [
    (1, 237100, "0.18", 0),
    (237101, 370500, "0.26", 42678),
    (370501, 512800, "0.31", 77362),
    (512801, 673000, "0.36", 121475),
    (673001, 857900, "0.39", 179147),
    (857901, 1817000, "0.41", 251258),
    (1817001, None, "0.45", 644489),
]


def make_bracket(
    lower: int,
    upper: int | None,
    rate: str,
    base: int = 0,
    tax_year: str = TAX_YEAR,
) -> TaxBracket:
    """Build a TaxBracket from plain literals."""
    return TaxBracket(
        lower_limit=Decimal(lower),
        upper_limit=Decimal(upper) if upper is not None else None,
        rate=Decimal(rate),
        base_amount=Decimal(base),
        tax_year=tax_year,
    )


@pytest.fixture
def sa_brackets() -> BracketTable:
    """The 2024-2025 SA bracket table, built independently of the YAML file."""
    return BracketTable(make_bracket(*row) for row in _SA_2025_ROWS)


@pytest.fixture
def sa_constants() -> TaxYearConstants:
    """2024-2025 rebates and the R347/month medical credit."""
    return TaxYearConstants(
        tax_year=TAX_YEAR,
        rebates=RebateSchedule(
            primary=Decimal("17235"),
            secondary=Decimal("9444"),
            tertiary=Decimal("3145"),
        ),
        medical_credit_monthly=Decimal("347"),
    )


@pytest.fixture
def sa_caps() -> dict[str, Decimal]:
    """Retirement capped at 27.5% and donations at 10% of gross income."""
    return {"retirement": Decimal("0.275"), "donations": Decimal("0.10")}
