"""Chart-ready series derived from a with/without prepayment comparison.

Line series use ``None`` for months where a scenario has no data (the loan
is already closed); bar series use zero.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class MonthlyAggregate:
    month: int
    principal: Decimal
    interest: Decimal
    balance: Decimal  # Balance after the last payment of the month
    cumulative_principal: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class CumulativePoint:
    month: str
    with_extra_cumulative_principal: Decimal | None = None
    with_extra_cumulative_interest: Decimal | None = None
    with_extra_balance: Decimal | None = None
    without_extra_cumulative_principal: Decimal | None = None
    without_extra_cumulative_interest: Decimal | None = None
    without_extra_balance: Decimal | None = None


@dataclass(frozen=True)
class BarPoint:
    month: str
    numeric_month: int
    principal: Decimal
    interest: Decimal

    @property
    def total(self) -> Decimal:
        return self.principal + self.interest


@dataclass(frozen=True)
class MergedBarPoint:
    month: str
    without_principal: Decimal = Decimal("0")
    without_interest: Decimal = Decimal("0")
    with_principal: Decimal = Decimal("0")
    with_interest: Decimal = Decimal("0")


@dataclass(frozen=True)
class OutflowPoint:
    month: str
    numeric_month: int
    total: Decimal


@dataclass(frozen=True)
class OutflowComparisonPoint:
    month: str
    with_extra: Decimal | None = None
    without_extra: Decimal | None = None


@dataclass(frozen=True)
class DonutSlice:
    name: str
    principal: Decimal
    interest: Decimal


@dataclass(frozen=True)
class AxesLimits:
    principal_max: int = 0
    interest_max: int = 0
    balance_max: int = 0
    bar_max: int = 0
    outflow_max: int = 0


@dataclass(frozen=True)
class PrecomputedChartData:
    cumulative_data: list[CumulativePoint] = field(default_factory=list)
    bar_data: list[BarPoint] = field(default_factory=list)  # Without extra payments
    extra_bar_data: list[BarPoint] = field(default_factory=list)  # With extra payments
    all_bar_months: list[MergedBarPoint] = field(default_factory=list)
    with_extra_outflows: list[OutflowPoint] = field(default_factory=list)
    without_extra_outflows: list[OutflowPoint] = field(default_factory=list)
    outflow_comparison: list[OutflowComparisonPoint] = field(default_factory=list)
    donut_data: list[DonutSlice] = field(default_factory=list)
    axes_limits: AxesLimits = field(default_factory=AxesLimits)
