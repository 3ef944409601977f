"""Tax bracket tables and bracket lookup."""

from bisect import bisect_right
from collections.abc import Iterable, Iterator
from decimal import Decimal
from typing import NamedTuple

from sa_tax.calculators.errors import InvalidBracketTableError, NoBracketMatchError


class TaxBracket(NamedTuple):
    """A single marginal-rate band.

    ``base_amount`` is the tax owed on all income below ``lower_limit``.
    """

    lower_limit: Decimal  # inclusive, >= 1
    upper_limit: Decimal | None  # inclusive, None = no cap
    rate: Decimal
    base_amount: Decimal
    tax_year: str


def _is_integral(value: Decimal) -> bool:
    return value == value.to_integral_value()


class BracketTable:
    """An ordered, validated set of brackets for one tax year.

    Brackets are sorted by lower limit on construction and then checked:
    every band is well formed, bands are contiguous, exactly one band is
    unbounded and it is the last, and all bands share a tax year.

    Raises:
        InvalidBracketTableError: If any of the above does not hold.
    """

    def __init__(self, brackets: Iterable[TaxBracket]) -> None:
        ordered = tuple(sorted(brackets, key=lambda b: b.lower_limit))
        _validate(ordered)
        self._brackets = ordered
        self._lower_limits = tuple(b.lower_limit for b in ordered)

    @property
    def tax_year(self) -> str:
        return self._brackets[0].tax_year

    @property
    def brackets(self) -> tuple[TaxBracket, ...]:
        return self._brackets

    @property
    def lowest_limit(self) -> Decimal:
        return self._lower_limits[0]

    def __iter__(self) -> Iterator[TaxBracket]:
        return iter(self._brackets)

    def __len__(self) -> int:
        return len(self._brackets)

    def __getitem__(self, index: int) -> TaxBracket:
        return self._brackets[index]

    def __repr__(self) -> str:
        return f"BracketTable(tax_year={self.tax_year!r}, brackets={len(self)})"

    def resolve(self, taxable_income: Decimal) -> TaxBracket:
        """Find the bracket covering ``taxable_income``.

        The bands are contiguous, so the match is the last bracket whose
        lower limit does not exceed the income. Fractional income between
        one band's upper limit and the next band's lower limit stays in
        the lower band.

        Raises:
            NoBracketMatchError: If the income is below the first lower limit.
        """
        index = bisect_right(self._lower_limits, taxable_income) - 1
        if index < 0:
            raise NoBracketMatchError(
                f"No {self.tax_year} bracket covers taxable income {taxable_income}."
            )
        return self._brackets[index]


def _validate(brackets: tuple[TaxBracket, ...]) -> None:
    if not brackets:
        raise InvalidBracketTableError("Bracket table is empty.")

    tax_year = brackets[0].tax_year
    for bracket in brackets:
        if bracket.tax_year != tax_year:
            raise InvalidBracketTableError(
                f"Mixed tax years in one table: {tax_year!r} and {bracket.tax_year!r}."
            )
        if bracket.lower_limit < 1 or not _is_integral(bracket.lower_limit):
            raise InvalidBracketTableError(
                f"Lower limit must be an integer >= 1, got {bracket.lower_limit}."
            )
        if bracket.upper_limit is not None and (
            bracket.upper_limit < bracket.lower_limit or not _is_integral(bracket.upper_limit)
        ):
            raise InvalidBracketTableError(
                f"Upper limit {bracket.upper_limit} is not an integer >= "
                f"lower limit {bracket.lower_limit}."
            )
        if not Decimal("0") < bracket.rate <= Decimal("1"):
            raise InvalidBracketTableError(f"Rate must be in (0, 1], got {bracket.rate}.")
        if bracket.base_amount < 0:
            raise InvalidBracketTableError(
                f"Base amount must be non-negative, got {bracket.base_amount}."
            )

    for lower, upper in zip(brackets, brackets[1:]):
        if lower.upper_limit is None:
            raise InvalidBracketTableError(
                f"Unbounded bracket from {lower.lower_limit} is not the last bracket."
            )
        if lower.upper_limit + 1 != upper.lower_limit:
            raise InvalidBracketTableError(
                f"Gap or overlap between {lower.upper_limit} and {upper.lower_limit}."
            )
        if upper.base_amount < lower.base_amount:
            raise InvalidBracketTableError(
                f"Base amount decreases at {upper.lower_limit}."
            )

    if brackets[-1].upper_limit is not None:
        raise InvalidBracketTableError("Top bracket must be unbounded.")


def resolve_bracket(taxable_income: Decimal, brackets: BracketTable) -> TaxBracket:
    """Return the single bracket that applies to ``taxable_income``."""
    return brackets.resolve(taxable_income)
