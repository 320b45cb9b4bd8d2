from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum


class PrepaymentImpact(Enum):
    REDUCE_EMI = "reduce_emi"  # Keep tenure, re-amortize to a smaller installment
    REDUCE_TENURE = "reduce_tenure"  # Keep installment, finish early


class EntryType(Enum):
    EMI = "emi"
    EXTRA = "extra"


class PaymentTag(Enum):
    RECURRING = "Recurring"
    ONE_TIME = "One-time"


@dataclass(frozen=True)
class ExtraPayment:
    """A prepayment rule.

    ``month_index`` is 0-based (0 = first month). A recurring rule repeats
    every ``every`` months starting at ``month_index``.
    """
    month_index: int
    amount: Decimal
    impact: PrepaymentImpact = PrepaymentImpact.REDUCE_TENURE
    is_recurring: bool = False
    every: int | None = None

    def fires_in(self, month: int) -> bool:
        """True if this rule pays something in 0-based ``month``."""
        if month == self.month_index:
            return True
        return (
            self.is_recurring
            and self.every is not None
            and self.every >= 1
            and month >= self.month_index
            and (month - self.month_index) % self.every == 0
        )

    @property
    def tag(self) -> PaymentTag:
        return PaymentTag.RECURRING if self.is_recurring else PaymentTag.ONE_TIME


@dataclass(frozen=True)
class LoanTerms:
    principal: Decimal
    annual_rate: Decimal  # Percent, e.g. 6 for 6%
    tenure_months: int
    extra_payments: tuple[ExtraPayment, ...] = ()

    @property
    def monthly_rate(self) -> Decimal:
        return self.annual_rate / 12 / 100

    def without_extra_payments(self) -> "LoanTerms":
        return replace(self, extra_payments=())


@dataclass(frozen=True)
class ScheduleEntry:
    month: int  # 1-based display month
    principal_component: Decimal
    interest_component: Decimal
    total_payment: Decimal
    balance: Decimal
    type: EntryType = EntryType.EMI
    tag: PaymentTag | None = None  # Only set on extra entries


@dataclass(frozen=True)
class EMIResult:
    emi: Decimal
    total_interest: Decimal  # Rounded to whole currency units
    total_payment: Decimal  # Principal + total interest, rounded
    schedule: list[ScheduleEntry] = field(default_factory=list)

    @property
    def emi_months(self) -> int:
        """Number of regular installments, i.e. the effective tenure."""
        return sum(1 for e in self.schedule if e.type is EntryType.EMI)

    @property
    def extra_paid(self) -> Decimal:
        return sum(
            (e.total_payment for e in self.schedule if e.type is EntryType.EXTRA),
            Decimal("0"),
        )

    @property
    def final_balance(self) -> Decimal:
        if not self.schedule:
            return Decimal("0")
        return self.schedule[-1].balance


@dataclass(frozen=True)
class Comparison:
    """Same loan simulated with and without the prepayment rules."""
    with_extra: EMIResult
    without_extra: EMIResult

    @property
    def interest_saved(self) -> Decimal:
        return self.without_extra.total_interest - self.with_extra.total_interest

    @property
    def months_saved(self) -> int:
        return self.without_extra.emi_months - self.with_extra.emi_months

    @property
    def has_extra_payments(self) -> bool:
        return any(e.type is EntryType.EXTRA for e in self.with_extra.schedule)
