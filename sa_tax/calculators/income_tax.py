"""Progressive income tax: bracket lookup plus marginal rate."""

from decimal import Decimal
from typing import Any

from sa_tax.calculators.brackets import BracketTable, TaxBracket

_ZERO = Decimal("0")


def tax_before_rebates(taxable_income: Decimal, brackets: BracketTable) -> Decimal:
    """Gross tax on ``taxable_income`` before rebates and credits.

    The bracket's ``base_amount`` covers all income below its lower limit,
    so the rate applies only to ``taxable_income - lower_limit``. Income
    below the first lower limit is untaxed.

    Args:
        taxable_income: Taxable income (must be >= 0).
        brackets: Validated bracket table for the tax year.

    Returns:
        Tax owed, never negative.
    """
    if taxable_income <= 0 or taxable_income < brackets.lowest_limit:
        return _ZERO

    bracket = brackets.resolve(taxable_income)
    return bracket.base_amount + bracket.rate * (taxable_income - bracket.lower_limit)


def marginal_rate(taxable_income: Decimal, brackets: BracketTable) -> Decimal:
    """Rate applied to the next rand earned, 0 when no tax is due."""
    if taxable_income <= 0 or taxable_income < brackets.lowest_limit:
        return _ZERO
    return brackets.resolve(taxable_income).rate


def bracket_breakdown(taxable_income: Decimal, brackets: BracketTable) -> list[dict[str, Any]]:
    """Split taxable income across the bands it reaches.

    Each entry carries the slice of income taxed in that band and the tax
    on it. The slices of all bands below the resolved one are measured
    from their own lower limits, so the entries sum to the same figure as
    :func:`tax_before_rebates` only when the table's base amounts are exact.
    """
    breakdown: list[dict[str, Any]] = []
    if taxable_income <= 0 or taxable_income < brackets.lowest_limit:
        return breakdown

    top = brackets.resolve(taxable_income)
    for bracket in brackets:
        if bracket.lower_limit > top.lower_limit:
            break

        if bracket is top:
            taxable = taxable_income - bracket.lower_limit
        else:
            # Full band: upper_limit is set on every bracket below the top one
            taxable = bracket.upper_limit + 1 - bracket.lower_limit  # type: ignore[operator]

        breakdown.append({
            "lower_limit": float(bracket.lower_limit),
            "upper_limit": float(bracket.upper_limit) if bracket.upper_limit is not None else None,
            "rate": float(bracket.rate),
            "taxable_amount": float(taxable),
            "tax": float(taxable * bracket.rate),
        })

    return breakdown


def describe_bracket(bracket: TaxBracket) -> str:
    """Render a bracket the way SARS publishes it.

    >>> describe_bracket(TaxBracket(Decimal(237101), Decimal(370500), Decimal("0.26"),
    ...                             Decimal(42678), "2024-2025"))
    'R42,678 + 26% of taxable income above R237,100'
    """
    rate = f"{(bracket.rate * 100).normalize():f}%"
    if bracket.base_amount == 0:
        return f"{rate} of taxable income"
    return (
        f"R{bracket.base_amount:,.0f} + {rate} of taxable income above "
        f"R{bracket.lower_limit - 1:,.0f}"
    )
