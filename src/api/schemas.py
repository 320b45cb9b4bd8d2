"""Pydantic schemas for API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from src.models.chart_data import PrecomputedChartData
from src.models.loan import EMIResult, ExtraPayment, LoanTerms, PrepaymentImpact


# ---- Request schemas ----

class ExtraPaymentRequest(BaseModel):
    month: int = Field(..., ge=1, description="1-based month of the (first) prepayment")
    amount: Decimal = Field(..., gt=0)
    impact: PrepaymentImpact = PrepaymentImpact.REDUCE_TENURE
    is_recurring: bool = False
    every: int | None = Field(None, ge=1, description="Months between recurring prepayments")

    @model_validator(mode="after")
    def recurring_needs_interval(self):
        if self.is_recurring and self.every is None:
            raise ValueError("Enter a valid recurring interval (>=1) when 'is_recurring' is set.")
        return self

    def to_extra_payment(self) -> ExtraPayment:
        return ExtraPayment(
            month_index=self.month - 1,
            amount=self.amount,
            impact=self.impact,
            is_recurring=self.is_recurring,
            every=self.every,
        )


class EMICalculationRequest(BaseModel):
    principal: Decimal = Field(..., ge=1, description="Loan amount")
    annual_rate: Decimal = Field(..., description="Annual interest rate in percent, e.g. 6")
    tenure_months: int = Field(..., ge=1)
    extra_payments: list[ExtraPaymentRequest] = []

    def to_loan_terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.principal,
            annual_rate=self.annual_rate,
            tenure_months=self.tenure_months,
            extra_payments=tuple(ep.to_extra_payment() for ep in self.extra_payments),
        )


# ---- Response schemas ----

class ScheduleEntryResponse(BaseModel):
    month: int
    principal_component: Decimal
    interest_component: Decimal
    total_payment: Decimal
    balance: Decimal
    type: str
    tag: str | None = None


class EMIResultResponse(BaseModel):
    emi: Decimal
    total_interest: Decimal
    total_payment: Decimal
    emi_months: int
    schedule: list[ScheduleEntryResponse]

    @classmethod
    def from_result(cls, result: EMIResult) -> "EMIResultResponse":
        return cls(
            emi=result.emi,
            total_interest=result.total_interest,
            total_payment=result.total_payment,
            emi_months=result.emi_months,
            schedule=[
                ScheduleEntryResponse(
                    month=e.month,
                    principal_component=e.principal_component,
                    interest_component=e.interest_component,
                    total_payment=e.total_payment,
                    balance=e.balance,
                    type=e.type.value,
                    tag=e.tag.value if e.tag else None,
                )
                for e in result.schedule
            ],
        )


class CalculationResponse(BaseModel):
    with_extra: EMIResultResponse
    without_extra: EMIResultResponse
    interest_saved: Decimal
    months_saved: int
    is_comparison: bool


class ChartDataResponse(BaseModel):
    calculation: CalculationResponse
    chart_data: PrecomputedChartData


class DefaultsResponse(BaseModel):
    principal: Decimal
    annual_rate: Decimal
    tenure_months: int
