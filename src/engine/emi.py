"""EMI amortization with prepayments.

Pure functions: Decimal in, dataclass out. No I/O.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from src.config import settings
from src.models.loan import (
    Comparison,
    EMIResult,
    EntryType,
    LoanTerms,
    PrepaymentImpact,
    ScheduleEntry,
)

logger = logging.getLogger(__name__)

WHOLE_UNITS = Decimal("1")


def compute_emi(principal: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Installment that amortizes ``principal`` over ``months`` payments."""
    if months <= 0:
        return Decimal("0")
    if monthly_rate == 0:
        return principal / months

    # EMI = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + monthly_rate) ** months
    return principal * monthly_rate * factor / (factor - 1)


def calculate_emi(
    terms: LoanTerms,
    *,
    max_iterations: int | None = None,
    tolerance: Decimal | None = None,
) -> EMIResult:
    """Simulate the loan month by month, applying prepayment rules.

    The loop stops once the balance is within ``tolerance`` or after
    ``max_iterations`` months. An installment too small to cover interest
    never converges; the schedule then simply stops at the cap with a
    residual balance.

    Prepayments are applied after the month's regular installment, in rule
    order. A ``reduce_emi`` prepayment re-amortizes the remaining balance
    over the original tenure minus the months already paid.
    """
    if max_iterations is None:
        max_iterations = settings.max_iterations
    if tolerance is None:
        tolerance = settings.balance_tolerance

    if terms.tenure_months <= 0:
        return EMIResult(emi=Decimal("0"), total_interest=Decimal("0"), total_payment=Decimal("0"))

    rate = terms.monthly_rate
    balance = terms.principal
    emi = compute_emi(balance, rate, terms.tenure_months)

    schedule: list[ScheduleEntry] = []
    total_interest = Decimal("0")
    month = 0

    while balance > tolerance and month < max_iterations:
        interest = balance * rate
        principal_paid = min(emi - interest, balance)
        balance -= principal_paid
        total_interest += interest

        schedule.append(ScheduleEntry(
            month=month + 1,
            principal_component=principal_paid,
            interest_component=interest,
            total_payment=principal_paid + interest,
            balance=max(balance, Decimal("0")),
            type=EntryType.EMI,
        ))

        for extra in terms.extra_payments:
            if not extra.fires_in(month) or balance <= 0:
                continue

            paid = min(balance, extra.amount)
            balance = max(Decimal("0"), balance - paid)

            schedule.append(ScheduleEntry(
                month=month + 1,
                principal_component=paid,
                interest_component=Decimal("0"),
                total_payment=paid,
                balance=balance,
                type=EntryType.EXTRA,
                tag=extra.tag,
            ))

            if extra.impact is PrepaymentImpact.REDUCE_EMI and balance > 0:
                emi = compute_emi(balance, rate, terms.tenure_months - (month + 1))

        month += 1

    if balance > tolerance:
        logger.warning(
            "Amortization stopped at %d months with balance %s outstanding",
            month, balance,
        )
    logger.debug("Computed %d schedule entries over %d months", len(schedule), month)

    return EMIResult(
        emi=emi,
        total_interest=total_interest.quantize(WHOLE_UNITS, ROUND_HALF_UP),
        total_payment=(terms.principal + total_interest).quantize(WHOLE_UNITS, ROUND_HALF_UP),
        schedule=schedule,
    )


def compare_with_and_without_extra_payments(
    terms: LoanTerms,
    *,
    max_iterations: int | None = None,
    tolerance: Decimal | None = None,
) -> Comparison:
    """Run the same loan twice: with its prepayment rules and with none."""
    return Comparison(
        with_extra=calculate_emi(terms, max_iterations=max_iterations, tolerance=tolerance),
        without_extra=calculate_emi(
            terms.without_extra_payments(),
            max_iterations=max_iterations,
            tolerance=tolerance,
        ),
    )
