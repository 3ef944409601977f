"""Exceptions raised by the tax calculators."""


class TaxCalculationError(ValueError):
    """Base class for all calculator errors."""


class InvalidInputError(TaxCalculationError):
    """Caller input is malformed or out of range.

    Attributes:
        field: Name of the offending input field, e.g. "gross_income".
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidBracketTableError(TaxCalculationError):
    """A bracket table violates ordering, contiguity or coverage rules."""


class NoBracketMatchError(TaxCalculationError):
    """No bracket covers the given income. Indicates a data or logic bug."""
