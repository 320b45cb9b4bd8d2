"""Command-line EMI calculator.

Usage:
    python -m src.cli --principal 6000000 --rate 6 --tenure 360
    python -m src.cli --principal 6000000 --rate 6 --tenure 360 --extra 12:500000
    python -m src.cli ... --extra 12:100000:reduce_emi:12 --schedule

Extra payments are MONTH:AMOUNT[:IMPACT[:EVERY]] with a 1-based month.
Giving EVERY makes the prepayment recurring.
"""

import argparse
import logging
import sys
from decimal import Decimal

from pydantic import ValidationError

from src.api.schemas import EMICalculationRequest, ExtraPaymentRequest
from src.config import settings
from src.engine.calculation import run_calculation
from src.models.loan import EMIResult


def parse_extra(value: str) -> dict:
    parts = value.split(":")
    if len(parts) < 2 or len(parts) > 4:
        raise argparse.ArgumentTypeError(f"expected MONTH:AMOUNT[:IMPACT[:EVERY]], got {value!r}")
    extra = {"month": parts[0], "amount": parts[1]}
    if len(parts) >= 3 and parts[2]:
        extra["impact"] = parts[2]
    if len(parts) == 4:
        extra["is_recurring"] = True
        extra["every"] = parts[3]
    return extra


def print_summary(label: str, result: EMIResult) -> None:
    print(f"\n  {label}")
    print(f"  {'-' * 40}")
    print(f"  EMI:             {result.emi:>18,.2f}")
    print(f"  Total Interest:  {result.total_interest:>18,.0f}")
    print(f"  Total Payment:   {result.total_payment:>18,.0f}")
    print(f"  Tenure:          {result.emi_months:>11} months")
    if result.extra_paid:
        print(f"  Extra Paid:      {result.extra_paid:>18,.0f}")


def print_schedule(label: str, result: EMIResult) -> None:
    print(f"\n  {label}")
    print(f"  {'Month':>5}  {'Principal':>14}  {'Interest':>12}  {'Payment':>14}  {'Balance':>16}")
    for e in result.schedule:
        marker = f" {e.tag.value}" if e.tag else ""
        print(
            f"  {e.month:>5}  {e.principal_component:>14,.2f}  {e.interest_component:>12,.2f}"
            f"  {e.total_payment:>14,.2f}  {e.balance:>16,.2f}{marker}"
        )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="EMI calculator with prepayment comparison")
    parser.add_argument("--principal", type=Decimal, default=settings.default_principal, help="Loan amount")
    parser.add_argument("--rate", type=Decimal, default=settings.default_annual_rate, help="Annual interest rate in percent")
    parser.add_argument("--tenure", type=int, default=settings.default_tenure_months, help="Tenure in months")
    parser.add_argument("--extra", type=parse_extra, action="append", default=[], help="MONTH:AMOUNT[:IMPACT[:EVERY]]")
    parser.add_argument("--schedule", action="store_true", help="Print the full payment schedule")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level)

    try:
        req = EMICalculationRequest(
            principal=args.principal,
            annual_rate=args.rate,
            tenure_months=args.tenure,
            extra_payments=[ExtraPaymentRequest(**e) for e in args.extra],
        )
    except ValidationError as e:
        parser.error("; ".join(err["msg"] for err in e.errors()))

    outcome = run_calculation(req.to_loan_terms())
    if outcome is None:
        print("Calculation failed", file=sys.stderr)
        return 1

    comparison = outcome.comparison
    print(f"\n{'=' * 44}")
    print(f"  Loan: {req.principal:,.0f} @ {req.annual_rate}% for {req.tenure_months} months")
    print(f"{'=' * 44}")
    print_summary("Without Extra Payments", comparison.without_extra)
    if outcome.is_comparison:
        print_summary("With Extra Payments", comparison.with_extra)
        print(f"\n  Interest saved:  {comparison.interest_saved:>18,.0f}")
        print(f"  Months saved:    {comparison.months_saved:>11}")

    if args.schedule:
        print_schedule("Schedule (without extra)", comparison.without_extra)
        if outcome.is_comparison:
            print_schedule("Schedule (with extra)", comparison.with_extra)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
