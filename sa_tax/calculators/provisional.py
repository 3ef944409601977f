"""Provisional tax: two equal instalments with fixed due dates."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from sa_tax.calculators.errors import InvalidInputError
from sa_tax.calculators.tax_year import end_of_february, parse_tax_year

CENT = Decimal("0.01")


class ProvisionalPayment(NamedTuple):
    """One provisional tax instalment."""

    amount: Decimal
    due_date: date
    is_overdue: bool


class ProvisionalSplit(NamedTuple):
    """Both instalments for a tax year. ``first.amount + second.amount == total``."""

    tax_year: str
    total: Decimal
    first: ProvisionalPayment
    second: ProvisionalPayment


def provisional_due_dates(tax_year: str) -> tuple[date, date]:
    """31 August of the starting year and end of February of the ending year."""
    start, end = parse_tax_year(tax_year)
    return date(start, 8, 31), end_of_february(end)


def split_provisional(final_tax: Decimal, tax_year: str, as_of: date) -> ProvisionalSplit:
    """Split annual tax into two provisional instalments.

    The total is rounded to the cent first. The first instalment is half of
    it, rounded half-up; the second takes the remainder, so an odd cent
    lands on the first payment and the two always add back to the total.

    Args:
        final_tax: Annual tax after rebates and credits (must be >= 0).
        tax_year: Tax year label, e.g. "2024-2025".
        as_of: Date to judge overdue payments against.

    Raises:
        InvalidInputError: If ``final_tax`` is negative, not finite or too large
            to hold in cents, or if ``tax_year`` is malformed.
    """
    if not final_tax.is_finite() or final_tax < 0:
        raise InvalidInputError("final_tax", "Final tax must be a non-negative amount.")

    first_due, second_due = provisional_due_dates(tax_year)
    try:
        total = final_tax.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # More digits than the context precision once expressed in cents
        raise InvalidInputError("final_tax", f"Final tax {final_tax} is too large.") from exc
    first_amount = (total / 2).quantize(CENT, rounding=ROUND_HALF_UP)
    second_amount = total - first_amount

    return ProvisionalSplit(
        tax_year=tax_year,
        total=total,
        first=ProvisionalPayment(first_amount, first_due, first_due < as_of),
        second=ProvisionalPayment(second_amount, second_due, second_due < as_of),
    )
