"""Pydantic request and response bodies for the API."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from sa_tax.calculators.brackets import TaxBracket
from sa_tax.calculators.deductions import DeductibleExpenseType
from sa_tax.calculators.income_tax import describe_bracket
from sa_tax.calculators.provisional import ProvisionalPayment, ProvisionalSplit
from sa_tax.calculators.tax_calculation import TaxCalculationResult

# --- Request bodies ---


class TaxCalculationRequest(BaseModel):
    """Request body for POST /tax-calculation.

    Range checks are left to the calculator so errors name the field the
    same way for every caller.
    """

    gross_income: Decimal
    age: int
    expenses: dict[str, Decimal] = {}
    tax_year: str | None = None


# --- Response bodies ---


class TaxBracketOut(BaseModel):
    """A bracket as listed by GET /tax-brackets."""

    lower_limit: int
    upper_limit: int | None = None
    rate: float
    base_amount: float
    tax_year: str
    description: str

    @classmethod
    def from_bracket(cls, bracket: TaxBracket) -> "TaxBracketOut":
        return cls(
            lower_limit=int(bracket.lower_limit),
            upper_limit=int(bracket.upper_limit) if bracket.upper_limit is not None else None,
            rate=float(bracket.rate),
            base_amount=float(bracket.base_amount),
            tax_year=bracket.tax_year,
            description=describe_bracket(bracket),
        )


class DeductibleExpenseTypeOut(BaseModel):
    """A deductible expense category."""

    id: int
    key: str
    name: str
    description: str = ""
    max_percentage: float | None = None

    @classmethod
    def from_expense_type(cls, expense_type: DeductibleExpenseType) -> "DeductibleExpenseTypeOut":
        return cls(
            id=expense_type.id,
            key=expense_type.key,
            name=expense_type.name,
            description=expense_type.description,
            max_percentage=(
                float(expense_type.max_percentage) if expense_type.max_percentage is not None else None
            ),
        )


class TaxCalculationResponse(BaseModel):
    """Response from POST /tax-calculation. Rates are fractions."""

    tax_year: str
    gross_income: float
    deductions: dict[str, float] = Field(default_factory=dict)
    total_deductions: float
    taxable_income: float
    tax_before_rebates: float
    rebates: float
    medical_credits: float
    final_tax: float
    effective_tax_rate: float
    marginal_rate: float
    monthly_tax: float
    monthly_tax_rate: float
    tax_saving: float

    @classmethod
    def from_result(cls, result: TaxCalculationResult) -> "TaxCalculationResponse":
        return cls(
            tax_year=result.tax_year,
            gross_income=float(result.gross_income),
            deductions={key: float(value) for key, value in result.deductions.items()},
            total_deductions=float(result.total_deductions),
            taxable_income=float(result.taxable_income),
            tax_before_rebates=float(result.tax_before_rebates),
            rebates=float(result.rebates),
            medical_credits=float(result.medical_credits),
            final_tax=float(result.final_tax),
            effective_tax_rate=float(round(result.effective_tax_rate, 4)),
            marginal_rate=float(result.marginal_rate),
            monthly_tax=float(round(result.monthly_tax, 2)),
            monthly_tax_rate=float(round(result.monthly_tax_rate, 4)),
            tax_saving=float(result.tax_saving),
        )


class ProvisionalPaymentOut(BaseModel):
    """One provisional instalment."""

    amount: float
    due_date: date
    is_overdue: bool

    @classmethod
    def from_payment(cls, payment: ProvisionalPayment) -> "ProvisionalPaymentOut":
        return cls(amount=float(payment.amount), due_date=payment.due_date, is_overdue=payment.is_overdue)


class ProvisionalTaxResponse(BaseModel):
    """Response from GET /provisional-tax."""

    tax_year: str
    total_tax: float
    first_payment: ProvisionalPaymentOut
    second_payment: ProvisionalPaymentOut

    @classmethod
    def from_split(cls, split: ProvisionalSplit) -> "ProvisionalTaxResponse":
        return cls(
            tax_year=split.tax_year,
            total_tax=float(split.total),
            first_payment=ProvisionalPaymentOut.from_payment(split.first),
            second_payment=ProvisionalPaymentOut.from_payment(split.second),
        )


class TaxYearsResponse(BaseModel):
    """Response from GET /tax-years."""

    tax_years: list[str]
    default_tax_year: str
    current_tax_year: str
