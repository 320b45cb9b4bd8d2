"""Precompute chart series from a with/without prepayment comparison.

Every series is keyed by display month and emitted in ascending month
order. Entries sharing a month (the installment plus any prepayments) are
collapsed into one bucket.
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Iterable

from src.config import settings
from src.models.chart_data import (
    AxesLimits,
    BarPoint,
    CumulativePoint,
    DonutSlice,
    MergedBarPoint,
    MonthlyAggregate,
    OutflowComparisonPoint,
    OutflowPoint,
    PrecomputedChartData,
)
from src.models.loan import Comparison, EMIResult, ScheduleEntry


def month_label(month: int) -> str:
    return f"M{month}"


def monthly_aggregates(schedule: list[ScheduleEntry]) -> list[MonthlyAggregate]:
    """Per-month principal/interest sums with running cumulative totals.

    The month's balance is the balance after its last entry, i.e. after
    any prepayments.
    """
    buckets: dict[int, list[Decimal]] = {}
    for entry in schedule:
        bucket = buckets.setdefault(entry.month, [Decimal("0"), Decimal("0"), Decimal("0")])
        bucket[0] += entry.principal_component
        bucket[1] += entry.interest_component
        bucket[2] = entry.balance

    aggregates: list[MonthlyAggregate] = []
    cumulative_principal = Decimal("0")
    cumulative_interest = Decimal("0")
    for month in sorted(buckets):
        principal, interest, balance = buckets[month]
        cumulative_principal += principal
        cumulative_interest += interest
        aggregates.append(MonthlyAggregate(
            month=month,
            principal=principal,
            interest=interest,
            balance=balance,
            cumulative_principal=cumulative_principal,
            cumulative_interest=cumulative_interest,
        ))
    return aggregates


def _last_month(months: Iterable[int]) -> int:
    return max(months, default=0)


def cumulative_series(
    with_extra: list[MonthlyAggregate],
    without_extra: list[MonthlyAggregate],
) -> list[CumulativePoint]:
    """Align both scenarios on months 1..last; absent months are None."""
    we = {a.month: a for a in with_extra}
    wo = {a.month: a for a in without_extra}
    last = _last_month([*we, *wo])

    points: list[CumulativePoint] = []
    for month in range(1, last + 1):
        we_row = we.get(month)
        wo_row = wo.get(month)
        points.append(CumulativePoint(
            month=month_label(month),
            with_extra_cumulative_principal=we_row.cumulative_principal if we_row else None,
            with_extra_cumulative_interest=we_row.cumulative_interest if we_row else None,
            with_extra_balance=we_row.balance if we_row else None,
            without_extra_cumulative_principal=wo_row.cumulative_principal if wo_row else None,
            without_extra_cumulative_interest=wo_row.cumulative_interest if wo_row else None,
            without_extra_balance=wo_row.balance if wo_row else None,
        ))
    return points


def payment_bars(schedule: list[ScheduleEntry]) -> list[BarPoint]:
    """Per-month principal/interest split, no cumulation."""
    buckets: dict[int, tuple[Decimal, Decimal]] = {}
    for entry in schedule:
        principal, interest = buckets.get(entry.month, (Decimal("0"), Decimal("0")))
        buckets[entry.month] = (
            principal + entry.principal_component,
            interest + entry.interest_component,
        )

    return [
        BarPoint(
            month=month_label(month),
            numeric_month=month,
            principal=buckets[month][0],
            interest=buckets[month][1],
        )
        for month in sorted(buckets)
    ]


def merge_bar_months(
    without_extra: list[BarPoint],
    with_extra: list[BarPoint],
) -> list[MergedBarPoint]:
    """Put both bar series on a shared month axis; absent months are zero."""
    wo = {b.numeric_month: b for b in without_extra}
    we = {b.numeric_month: b for b in with_extra}
    last = _last_month([*wo, *we])

    merged: list[MergedBarPoint] = []
    for month in range(1, last + 1):
        wo_bar = wo.get(month)
        we_bar = we.get(month)
        merged.append(MergedBarPoint(
            month=month_label(month),
            without_principal=wo_bar.principal if wo_bar else Decimal("0"),
            without_interest=wo_bar.interest if wo_bar else Decimal("0"),
            with_principal=we_bar.principal if we_bar else Decimal("0"),
            with_interest=we_bar.interest if we_bar else Decimal("0"),
        ))
    return merged


def monthly_outflows(schedule: list[ScheduleEntry]) -> list[OutflowPoint]:
    """Total cash paid per month, installment plus prepayments."""
    totals: dict[int, Decimal] = {}
    for entry in schedule:
        totals[entry.month] = totals.get(entry.month, Decimal("0")) + entry.total_payment

    return [
        OutflowPoint(month=month_label(month), numeric_month=month, total=totals[month])
        for month in sorted(totals)
    ]


def outflow_comparison(
    with_extra: list[OutflowPoint],
    without_extra: list[OutflowPoint],
) -> list[OutflowComparisonPoint]:
    we = {o.numeric_month: o.total for o in with_extra}
    wo = {o.numeric_month: o.total for o in without_extra}
    last = _last_month([*we, *wo])
    return [
        OutflowComparisonPoint(
            month=month_label(month),
            with_extra=we.get(month),
            without_extra=wo.get(month),
        )
        for month in range(1, last + 1)
    ]


def donut_totals(with_extra: EMIResult, without_extra: EMIResult) -> list[DonutSlice]:
    return [
        DonutSlice(
            name="With Extra",
            principal=with_extra.total_payment - with_extra.total_interest,
            interest=with_extra.total_interest,
        ),
        DonutSlice(
            name="Without Extra",
            principal=without_extra.total_payment - without_extra.total_interest,
            interest=without_extra.total_interest,
        ),
    ]


def axis_max(values: Iterable[Decimal | None], headroom: Decimal | None = None) -> int:
    """floor(max * headroom), skipping None. An empty series gives 0."""
    if headroom is None:
        headroom = settings.axis_headroom
    peak = max((v for v in values if v is not None), default=Decimal("0"))
    return int((peak * headroom).to_integral_value(rounding=ROUND_FLOOR))


def axes_limits(
    cumulative: list[CumulativePoint],
    bar_data: list[BarPoint],
    extra_bar_data: list[BarPoint],
    with_extra_outflows: list[OutflowPoint],
    without_extra_outflows: list[OutflowPoint],
    headroom: Decimal | None = None,
) -> AxesLimits:
    return AxesLimits(
        principal_max=axis_max(
            [p.with_extra_cumulative_principal for p in cumulative]
            + [p.without_extra_cumulative_principal for p in cumulative],
            headroom,
        ),
        interest_max=axis_max(
            [p.with_extra_cumulative_interest for p in cumulative]
            + [p.without_extra_cumulative_interest for p in cumulative],
            headroom,
        ),
        balance_max=axis_max(
            [p.with_extra_balance for p in cumulative]
            + [p.without_extra_balance for p in cumulative],
            headroom,
        ),
        bar_max=axis_max([b.total for b in bar_data + extra_bar_data], headroom),
        outflow_max=axis_max(
            [o.total for o in with_extra_outflows + without_extra_outflows],
            headroom,
        ),
    )


def compute_precomputed_chart_data(comparison: Comparison) -> PrecomputedChartData:
    """Shape both scenarios into every series the charts consume."""
    with_extra = comparison.with_extra
    without_extra = comparison.without_extra

    cumulative = cumulative_series(
        monthly_aggregates(with_extra.schedule),
        monthly_aggregates(without_extra.schedule),
    )

    bar_data = payment_bars(without_extra.schedule)
    extra_bar_data = payment_bars(with_extra.schedule)

    with_extra_outflows = monthly_outflows(with_extra.schedule)
    without_extra_outflows = monthly_outflows(without_extra.schedule)

    return PrecomputedChartData(
        cumulative_data=cumulative,
        bar_data=bar_data,
        extra_bar_data=extra_bar_data,
        all_bar_months=merge_bar_months(bar_data, extra_bar_data),
        with_extra_outflows=with_extra_outflows,
        without_extra_outflows=without_extra_outflows,
        outflow_comparison=outflow_comparison(with_extra_outflows, without_extra_outflows),
        donut_data=donut_totals(with_extra, without_extra),
        axes_limits=axes_limits(
            cumulative,
            bar_data,
            extra_bar_data,
            with_extra_outflows,
            without_extra_outflows,
        ),
    )
