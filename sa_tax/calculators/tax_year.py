"""SA tax year labels.

A tax year runs from 1 March to the last day of February and is labelled
"YYYY-YYYY", e.g. "2024-2025" covers 1 Mar 2024 to 28 Feb 2025.
"""

import calendar
import re
from datetime import date

from sa_tax.calculators.errors import InvalidInputError

_TAX_YEAR_RE = re.compile(r"([0-9]{4})-([0-9]{4})")


def parse_tax_year(tax_year: str) -> tuple[int, int]:
    """Split a tax year label into its starting and ending calendar years.

    Raises:
        InvalidInputError: If the label is not "YYYY-YYYY" with consecutive years.
    """
    match = _TAX_YEAR_RE.fullmatch(tax_year) if isinstance(tax_year, str) else None
    if match is None:
        raise InvalidInputError("tax_year", f"Expected 'YYYY-YYYY', got {tax_year!r}.")

    start, end = int(match.group(1)), int(match.group(2))
    if end != start + 1:
        raise InvalidInputError("tax_year", f"Years in {tax_year!r} must be consecutive.")
    return start, end


def tax_year_for_date(day: date) -> str:
    """Return the label of the tax year containing ``day``."""
    start = day.year if day.month >= 3 else day.year - 1
    return f"{start}-{start + 1}"


def tax_year_bounds(tax_year: str) -> tuple[date, date]:
    """First and last day of a tax year (1 March to end of February)."""
    start, end = parse_tax_year(tax_year)
    return date(start, 3, 1), end_of_february(end)


def end_of_february(year: int) -> date:
    """Last day of February, the 29th in leap years."""
    return date(year, 2, calendar.monthrange(year, 2)[1])
