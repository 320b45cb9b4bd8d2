"""EMI calculation routes."""

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    CalculationResponse,
    ChartDataResponse,
    DefaultsResponse,
    EMICalculationRequest,
    EMIResultResponse,
)
from src.config import settings
from src.engine.calculation import CalculationOutcome, run_calculation

router = APIRouter(prefix="/api/v1/emi", tags=["emi"])


def _calculate(req: EMICalculationRequest) -> CalculationOutcome:
    outcome = run_calculation(req.to_loan_terms())
    if outcome is None:
        raise HTTPException(status_code=500, detail="EMI calculation failed")
    return outcome


def _outcome_to_response(outcome: CalculationOutcome) -> CalculationResponse:
    comparison = outcome.comparison
    return CalculationResponse(
        with_extra=EMIResultResponse.from_result(comparison.with_extra),
        without_extra=EMIResultResponse.from_result(comparison.without_extra),
        interest_saved=comparison.interest_saved,
        months_saved=comparison.months_saved,
        is_comparison=outcome.is_comparison,
    )


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(req: EMICalculationRequest):
    """Amortize the loan with and without the requested prepayments."""
    return _outcome_to_response(_calculate(req))


@router.post("/chart-data", response_model=ChartDataResponse)
async def chart_data(req: EMICalculationRequest):
    """Same as /calculate, plus every precomputed chart series."""
    outcome = _calculate(req)
    return ChartDataResponse(
        calculation=_outcome_to_response(outcome),
        chart_data=outcome.chart_data,
    )


@router.get("/defaults", response_model=DefaultsResponse)
async def defaults():
    return DefaultsResponse(
        principal=settings.default_principal,
        annual_rate=settings.default_annual_rate,
        tenure_months=settings.default_tenure_months,
    )
