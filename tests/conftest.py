"""Canonical test fixtures used across all tests.

Fixture: 6,000,000 home loan, 6% annual rate, 30 years (360 months).
"""

import pytest
from decimal import Decimal

from src.models.loan import ExtraPayment, LoanTerms, PrepaymentImpact


@pytest.fixture
def canonical_terms() -> LoanTerms:
    """6M loan, 6%, 360 months, no prepayments."""
    return LoanTerms(
        principal=Decimal("6000000"),
        annual_rate=Decimal("6"),
        tenure_months=360,
    )


@pytest.fixture
def one_time_prepayment_terms(canonical_terms) -> LoanTerms:
    """500K paid once in the 12th month, shortening the tenure."""
    return LoanTerms(
        principal=canonical_terms.principal,
        annual_rate=canonical_terms.annual_rate,
        tenure_months=canonical_terms.tenure_months,
        extra_payments=(
            ExtraPayment(
                month_index=11,
                amount=Decimal("500000"),
                impact=PrepaymentImpact.REDUCE_TENURE,
            ),
        ),
    )


@pytest.fixture
def recurring_reduce_emi_terms(canonical_terms) -> LoanTerms:
    """200K every 12 months from the 12th month, lowering the EMI."""
    return LoanTerms(
        principal=canonical_terms.principal,
        annual_rate=canonical_terms.annual_rate,
        tenure_months=canonical_terms.tenure_months,
        extra_payments=(
            ExtraPayment(
                month_index=11,
                amount=Decimal("200000"),
                impact=PrepaymentImpact.REDUCE_EMI,
                is_recurring=True,
                every=12,
            ),
        ),
    )


@pytest.fixture
def zero_rate_terms() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("100000"),
        annual_rate=Decimal("0"),
        tenure_months=10,
    )
