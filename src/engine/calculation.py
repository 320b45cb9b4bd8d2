"""Calculation entry point used by the API, dashboard and CLI."""

import logging
from dataclasses import dataclass

from src.engine.chart_data import compute_precomputed_chart_data
from src.engine.emi import compare_with_and_without_extra_payments
from src.models.chart_data import PrecomputedChartData
from src.models.loan import Comparison, LoanTerms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationOutcome:
    comparison: Comparison
    chart_data: PrecomputedChartData
    is_comparison: bool  # True when the caller supplied prepayment rules


def run_calculation(terms: LoanTerms) -> CalculationOutcome | None:
    """Compare both scenarios and precompute their chart data.

    Returns None if anything goes wrong; callers treat that as "no result".
    """
    try:
        comparison = compare_with_and_without_extra_payments(terms)
        chart_data = compute_precomputed_chart_data(comparison)
    except Exception:
        logger.exception("EMI calculation failed for %s", terms)
        return None

    return CalculationOutcome(
        comparison=comparison,
        chart_data=chart_data,
        is_comparison=bool(terms.extra_payments),
    )
