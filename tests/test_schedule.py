import pytest

from emi_calc.engine import MAX_TERM_MONTHS, build_schedule, compute_emi, monthly_rate_from_annual

CASES = [
    (1_000_000, 8.5, 120),
    (250_000, 12.0, 36),
    (5_000_000, 6.75, 360),
    (75_000, 0.5, 240),
    (10_000, 36.0, 7),
]


def _schedule_for(principal, rate, term):
    result = compute_emi(principal, rate, term)
    return result, build_schedule(principal, monthly_rate_from_annual(rate), term, result.monthly_emi)


@pytest.mark.parametrize("principal, rate, term", CASES)
def test_schedule_length_and_months(principal, rate, term):
    _, schedule = _schedule_for(principal, rate, term)
    assert len(schedule) == term
    assert [e.month for e in schedule] == list(range(1, term + 1))


@pytest.mark.parametrize("principal, rate, term", CASES)
def test_principal_parts_repay_the_loan(principal, rate, term):
    _, schedule = _schedule_for(principal, rate, term)
    assert sum(e.principal for e in schedule) == pytest.approx(principal, rel=1e-9)
    assert 0.0 <= schedule[-1].remaining_balance <= 1e-6 * principal


@pytest.mark.parametrize("principal, rate, term", CASES)
def test_balance_never_increases_and_never_negative(principal, rate, term):
    _, schedule = _schedule_for(principal, rate, term)
    balances = [e.remaining_balance for e in schedule]
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
    assert min(balances) >= 0.0


@pytest.mark.parametrize("principal, rate, term", CASES)
def test_every_payment_is_the_emi(principal, rate, term):
    result, schedule = _schedule_for(principal, rate, term)
    for entry in schedule:
        assert entry.total_payment == result.monthly_emi
        assert entry.principal + entry.interest == pytest.approx(entry.total_payment, rel=1e-12)


def test_first_month_split():
    result, schedule = _schedule_for(1_000_000, 12.0, 12)
    first = schedule[0]
    assert first.interest == pytest.approx(10_000)
    assert first.principal == pytest.approx(result.monthly_emi - 10_000)
    assert first.remaining_balance == pytest.approx(1_000_000 - first.principal)


def test_interest_part_shrinks_over_time():
    _, schedule = _schedule_for(1_000_000, 8.5, 120)
    assert schedule[0].interest > schedule[60].interest > schedule[-1].interest


def test_single_month_schedule():
    result, schedule = _schedule_for(100_000, 12.0, 1)
    assert len(schedule) == 1
    assert schedule[0].remaining_balance == pytest.approx(0.0, abs=1e-6)
    assert schedule[0].principal == pytest.approx(100_000)
    assert schedule[0].interest == pytest.approx(1_000)
    assert schedule[0].total_payment == result.monthly_emi


def test_overshoot_is_clamped_to_zero():
    # an installment larger than the EMI pays the loan off early; rows keep coming
    schedule = build_schedule(1_000, 0.01, 6, 600.0)
    assert len(schedule) == 6
    assert [e.remaining_balance for e in schedule[2:]] == [0.0, 0.0, 0.0, 0.0]


@pytest.mark.parametrize("term", [0, -1, MAX_TERM_MONTHS + 1])
def test_out_of_range_term_is_rejected(term):
    with pytest.raises(ValueError):
        build_schedule(1_000, 0.01, term, 100.0)
