from decimal import Decimal

from src.engine.emi import calculate_emi, compare_with_and_without_extra_payments, compute_emi
from src.models.loan import EntryType, ExtraPayment, LoanTerms, PaymentTag, PrepaymentImpact


def _emi_entries(result):
    return [e for e in result.schedule if e.type is EntryType.EMI]


def _emi_payment_in(result, month):
    return next(e.total_payment for e in _emi_entries(result) if e.month == month)


class TestComputeEMI:
    def test_standard_home_loan(self):
        """6M at 6% (0.5%/month) over 360 months."""
        emi = compute_emi(Decimal("6000000"), Decimal("0.005"), 360)
        # ~599.55 per 100K borrowed
        assert Decimal("35972") < emi < Decimal("35974")

    def test_zero_rate_splits_evenly(self):
        assert compute_emi(Decimal("100000"), Decimal("0"), 10) == Decimal("10000")

    def test_no_months_left(self):
        assert compute_emi(Decimal("100000"), Decimal("0.005"), 0) == Decimal("0")
        assert compute_emi(Decimal("100000"), Decimal("0.005"), -3) == Decimal("0")


class TestExtraPaymentFiring:
    def test_one_time_fires_once(self):
        rule = ExtraPayment(month_index=11, amount=Decimal("1000"))
        assert rule.fires_in(11)
        assert not rule.fires_in(10)
        assert not rule.fires_in(23)

    def test_recurring_fires_on_interval(self):
        rule = ExtraPayment(month_index=11, amount=Decimal("1000"), is_recurring=True, every=12)
        assert [m for m in range(40) if rule.fires_in(m)] == [11, 23, 35]

    def test_recurring_without_interval_fires_only_at_start(self):
        rule = ExtraPayment(month_index=2, amount=Decimal("1000"), is_recurring=True)
        assert [m for m in range(12) if rule.fires_in(m)] == [2]

    def test_zero_interval_does_not_raise(self):
        rule = ExtraPayment(month_index=2, amount=Decimal("1000"), is_recurring=True, every=0)
        assert [m for m in range(12) if rule.fires_in(m)] == [2]

    def test_tags(self):
        assert ExtraPayment(0, Decimal("1")).tag is PaymentTag.ONE_TIME
        assert ExtraPayment(0, Decimal("1"), is_recurring=True, every=1).tag is PaymentTag.RECURRING


class TestCalculateEMI:
    def test_canonical_schedule_length(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        assert len(result.schedule) == 360
        assert result.emi_months == 360

    def test_canonical_final_balance_near_zero(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        assert result.final_balance <= Decimal("0.5")

    def test_principal_components_sum_to_principal(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        paid = sum(e.principal_component for e in result.schedule)
        assert abs(paid - canonical_terms.principal) < Decimal("1")

    def test_first_month_interest(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        # 6,000,000 * 0.5%
        assert result.schedule[0].interest_component == Decimal("30000")

    def test_totals_are_whole_units(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        assert result.total_interest == result.total_interest.to_integral_value()
        assert result.total_payment == canonical_terms.principal + result.total_interest
        assert Decimal("6950000") < result.total_interest < Decimal("6951000")

    def test_entries_not_rounded(self, canonical_terms):
        result = calculate_emi(canonical_terms)
        assert result.schedule[0].principal_component != result.schedule[0].principal_component.quantize(Decimal("0.01"))

    def test_balance_never_increases(self, canonical_terms, one_time_prepayment_terms):
        for terms in (canonical_terms, one_time_prepayment_terms):
            schedule = calculate_emi(terms).schedule
            for i in range(1, len(schedule)):
                assert schedule[i].balance <= schedule[i - 1].balance

    def test_zero_rate(self, zero_rate_terms):
        result = calculate_emi(zero_rate_terms)
        assert len(result.schedule) == 10
        for entry in result.schedule:
            assert entry.interest_component == 0
            assert entry.principal_component == Decimal("10000")
        assert result.total_interest == 0
        assert result.total_payment == Decimal("100000")
        assert result.final_balance == 0

    def test_idempotent(self, recurring_reduce_emi_terms):
        assert calculate_emi(recurring_reduce_emi_terms) == calculate_emi(recurring_reduce_emi_terms)


class TestDegenerateInputs:
    def test_zero_tenure_gives_empty_result(self):
        result = calculate_emi(LoanTerms(Decimal("100000"), Decimal("6"), 0))
        assert result.schedule == []
        assert result.emi == 0
        assert result.total_interest == 0
        assert result.total_payment == 0

    def test_zero_principal_gives_empty_schedule(self):
        result = calculate_emi(LoanTerms(Decimal("0"), Decimal("6"), 12))
        assert result.schedule == []
        assert result.total_interest == 0

    def test_negative_principal_gives_empty_schedule(self):
        result = calculate_emi(LoanTerms(Decimal("-500"), Decimal("6"), 12))
        assert result.schedule == []

    def test_iteration_cap(self):
        """A 100-year loan is cut off at 1000 months with a residual balance."""
        result = calculate_emi(LoanTerms(Decimal("1000000"), Decimal("12"), 1200))
        assert len(result.schedule) == 1000
        assert result.final_balance > Decimal("0.5")

    def test_iteration_cap_override(self, canonical_terms):
        result = calculate_emi(canonical_terms, max_iterations=12)
        assert len(result.schedule) == 12

    def test_tolerance_override(self, zero_rate_terms):
        # Stops as soon as the balance is within 20,000
        result = calculate_emi(zero_rate_terms, tolerance=Decimal("20000"))
        assert len(result.schedule) == 8


class TestPrepayments:
    def test_one_time_reduce_tenure_finishes_early(self, canonical_terms, one_time_prepayment_terms):
        base = calculate_emi(canonical_terms)
        result = calculate_emi(one_time_prepayment_terms)
        assert result.emi_months < 360
        assert result.total_interest < base.total_interest

    def test_one_time_entry(self, one_time_prepayment_terms):
        result = calculate_emi(one_time_prepayment_terms)
        extras = [e for e in result.schedule if e.type is EntryType.EXTRA]
        assert len(extras) == 1
        extra = extras[0]
        assert extra.month == 12
        assert extra.principal_component == Decimal("500000")
        assert extra.interest_component == 0
        assert extra.total_payment == Decimal("500000")
        assert extra.tag is PaymentTag.ONE_TIME

    def test_extra_follows_emi_in_same_month(self, one_time_prepayment_terms):
        schedule = calculate_emi(one_time_prepayment_terms).schedule
        idx = next(i for i, e in enumerate(schedule) if e.type is EntryType.EXTRA)
        emi_entry = schedule[idx - 1]
        assert emi_entry.type is EntryType.EMI
        assert emi_entry.month == 12
        assert schedule[idx].balance == emi_entry.balance - Decimal("500000")

    def test_reduce_tenure_keeps_installment(self, canonical_terms, one_time_prepayment_terms):
        base = calculate_emi(canonical_terms)
        result = calculate_emi(one_time_prepayment_terms)
        assert result.emi == base.emi
        assert abs(_emi_payment_in(result, 13) - _emi_payment_in(result, 12)) < Decimal("0.000001")

    def test_recurring_reduce_emi_lowers_installment_each_time(self, canonical_terms, recurring_reduce_emi_terms):
        result = calculate_emi(recurring_reduce_emi_terms)
        first = _emi_payment_in(result, 12)
        after_one = _emi_payment_in(result, 13)
        after_two = _emi_payment_in(result, 25)
        assert first > after_one > after_two
        assert abs(_emi_payment_in(result, 24) - after_one) < Decimal("0.000001")
        assert result.emi < calculate_emi(canonical_terms).emi

    def test_recurring_entries_tagged(self, recurring_reduce_emi_terms):
        result = calculate_emi(recurring_reduce_emi_terms)
        extras = [e for e in result.schedule if e.type is EntryType.EXTRA]
        assert extras[0].month == 12
        assert extras[1].month == 24
        assert all(e.tag is PaymentTag.RECURRING for e in extras)

    def test_prepayment_capped_at_balance(self):
        terms = LoanTerms(
            principal=Decimal("10000"),
            annual_rate=Decimal("12"),
            tenure_months=12,
            extra_payments=(ExtraPayment(month_index=0, amount=Decimal("1000000")),),
        )
        result = calculate_emi(terms)
        assert len(result.schedule) == 2
        emi_entry, extra = result.schedule
        assert extra.principal_component == emi_entry.balance
        assert extra.balance == 0

    def test_overlapping_rules_apply_in_order(self, canonical_terms):
        terms = LoanTerms(
            principal=canonical_terms.principal,
            annual_rate=canonical_terms.annual_rate,
            tenure_months=canonical_terms.tenure_months,
            extra_payments=(
                ExtraPayment(month_index=5, amount=Decimal("1000")),
                ExtraPayment(month_index=5, amount=Decimal("2000"), is_recurring=True, every=6),
            ),
        )
        schedule = calculate_emi(terms).schedule
        month_six = [e for e in schedule if e.month == 6]
        assert [e.type for e in month_six] == [EntryType.EMI, EntryType.EXTRA, EntryType.EXTRA]
        assert month_six[1].total_payment == Decimal("1000")
        assert month_six[2].total_payment == Decimal("2000")
        assert month_six[1].tag is PaymentTag.ONE_TIME
        assert month_six[2].tag is PaymentTag.RECURRING

    def test_rule_after_payoff_never_fires(self, zero_rate_terms):
        terms = LoanTerms(
            principal=zero_rate_terms.principal,
            annual_rate=zero_rate_terms.annual_rate,
            tenure_months=zero_rate_terms.tenure_months,
            extra_payments=(ExtraPayment(month_index=50, amount=Decimal("5000")),),
        )
        result = calculate_emi(terms)
        assert all(e.type is EntryType.EMI for e in result.schedule)

    def test_prepayment_never_increases_interest(self, canonical_terms):
        base = calculate_emi(canonical_terms)
        for impact in PrepaymentImpact:
            for month_index in (0, 59, 200, 359):
                terms = LoanTerms(
                    principal=canonical_terms.principal,
                    annual_rate=canonical_terms.annual_rate,
                    tenure_months=canonical_terms.tenure_months,
                    extra_payments=(ExtraPayment(month_index, Decimal("100000"), impact),),
                )
                assert calculate_emi(terms).total_interest <= base.total_interest


class TestCompare:
    def test_without_extra_has_no_prepayments(self, one_time_prepayment_terms):
        comparison = compare_with_and_without_extra_payments(one_time_prepayment_terms)
        assert all(e.type is EntryType.EMI for e in comparison.without_extra.schedule)
        assert comparison.has_extra_payments

    def test_without_extra_matches_plain_run(self, canonical_terms, one_time_prepayment_terms):
        comparison = compare_with_and_without_extra_payments(one_time_prepayment_terms)
        assert comparison.without_extra == calculate_emi(canonical_terms)

    def test_savings(self, one_time_prepayment_terms):
        comparison = compare_with_and_without_extra_payments(one_time_prepayment_terms)
        assert comparison.interest_saved > 0
        assert comparison.months_saved > 0

    def test_no_rules_no_savings(self, canonical_terms):
        comparison = compare_with_and_without_extra_payments(canonical_terms)
        assert comparison.with_extra == comparison.without_extra
        assert comparison.interest_saved == 0
        assert comparison.months_saved == 0
        assert not comparison.has_extra_payments
