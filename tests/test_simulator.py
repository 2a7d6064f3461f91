import numpy as np
import pytest

from core.config import SimulationConfig
from core.errors import InvalidInputError, NumericOverflowError
from core.schema import ProjectionInputs
from distributions.normal import next_standard_normal
from engine.projector import project
from engine.simulator import (
    block_sizes,
    percentile_bands,
    run_monte_carlo,
    simulate,
    simulate_paths,
)


def _retiree(**overrides) -> ProjectionInputs:
    base = dict(
        current_cash=0.0,
        current_investments=1_000_000.0,
        expected_annual_return=0.05,
        volatility=0.0,
        inflation_rate=0.02,
        projection_years=10,
        current_age=65,
        retirement_age=65,
        safe_withdrawal_rate=0.04,
    )
    base.update(overrides)
    return ProjectionInputs(**base)


def test_zero_volatility_drawdown_matches_hand_computation():
    inputs = _retiree(current_cash=10_000.0)
    assert inputs.retirement_year_offset == 0

    pct, paths = run_monte_carlo(inputs, n_paths=50, rng=1)

    # withdrawal on the start-of-year balance, growth on investments
    expected_inv = 1_000_000.0 * 1.05 - (1_000_000.0 + 10_000.0) * 0.04
    np.testing.assert_allclose(paths.investments[:, 1], expected_inv)
    assert pct.p50[1] == pytest.approx(expected_inv + 10_000.0)
    assert pct.p10[1] == pytest.approx(pct.p90[1])


def test_drawdown_adds_no_contributions_or_savings():
    inputs = _retiree(
        current_cash=5_000.0,
        expected_annual_return=0.0,
        safe_withdrawal_rate=0.0,
        monthly_investment_contribution=1_000.0,
        monthly_net_income=4_000.0,
    )
    pct = simulate(inputs, n_paths=10, rng=2)
    np.testing.assert_allclose(pct.p50, 1_005_000.0)


def test_zero_volatility_accumulation_matches_projector(household):
    inputs = ProjectionInputs(**{**household.to_dict(), "volatility": 0.0, "retirement_age": 100})
    pct = simulate(inputs, n_paths=20, rng=4)
    np.testing.assert_allclose(pct.p50, project(inputs).net_worth_nominal, rtol=1e-12)


def test_phase_switches_after_retirement_offset():
    inputs = _retiree(
        current_age=60,
        retirement_age=62,
        expected_annual_return=0.0,
        monthly_investment_contribution=1_000.0,
        safe_withdrawal_rate=0.10,
        projection_years=4,
    )
    _, paths = run_monte_carlo(inputs, n_paths=5, rng=0)
    inv = paths.investments[0]
    assert inv[1] == pytest.approx(1_012_000.0)
    assert inv[2] == pytest.approx(1_024_000.0)
    assert inv[3] == pytest.approx(1_024_000.0 * 0.9)
    assert inv[4] == pytest.approx(1_024_000.0 * 0.81)


def test_net_worth_floored_at_zero():
    inputs = ProjectionInputs(
        current_investments=50_000.0,
        current_debt=200_000.0,
        monthly_debt_payment=100.0,
        expected_annual_return=0.02,
        volatility=0.60,
        projection_years=25,
        current_age=60,
        retirement_age=62,
        safe_withdrawal_rate=0.5,
    )
    _, paths = run_monte_carlo(inputs, n_paths=300, rng=8)
    assert (paths.net_worth >= 0).all()
    assert (paths.net_worth == 0).any()


def test_same_seed_is_bit_identical(household):
    a = simulate(household, n_paths=300, rng=42)
    b = simulate(household, n_paths=300, rng=42)
    assert np.array_equal(a.values, b.values)


def test_different_seed_differs(household):
    a = simulate(household, n_paths=300, rng=42)
    b = simulate(household, n_paths=300, rng=43)
    assert not np.array_equal(a.values, b.values)


def test_default_seed_comes_from_config(household):
    cfg = SimulationConfig(n_paths=120, seed=9)
    a = simulate(household, config=cfg)
    b = simulate(household, rng=9, n_paths=120)
    assert np.array_equal(a.values, b.values)


def test_worker_count_does_not_change_result(household):
    serial = SimulationConfig(n_paths=240, seed=3, block_size=50, n_workers=1)
    parallel = SimulationConfig(n_paths=240, seed=3, block_size=50, n_workers=2)
    a, _ = run_monte_carlo(household, config=serial)
    b, _ = run_monte_carlo(household, config=parallel)
    assert np.array_equal(a.values, b.values)


def test_single_stream_matches_scalar_box_muller():
    inputs = ProjectionInputs(
        current_investments=100_000.0,
        monthly_investment_contribution=500.0,
        expected_annual_return=0.06,
        volatility=0.2,
        projection_years=5,
        current_age=30,
        retirement_age=33,
        safe_withdrawal_rate=0.04,
    )
    paths = simulate_paths(inputs, n_paths=3, rng=np.random.default_rng(17))

    rng = np.random.default_rng(17)
    for p in range(3):
        inv = 100_000.0
        for y in range(1, 6):
            r = 0.06 + 0.2 * next_standard_normal(rng)
            if y <= 3:
                inv = inv * (1 + r) + 6_000.0
            else:
                inv = inv * (1 + r) - inv * 0.04
            assert paths.investments[p, y] == pytest.approx(inv, rel=1e-12)


def test_percentile_index_rule():
    values = np.arange(10, dtype=float)[::-1].reshape(10, 1)
    pct = percentile_bands(values, (0.10, 0.25, 0.50, 0.75, 0.90))
    # sorted 0..9, indices floor(10 * q) = 1, 2, 5, 7, 9
    assert pct.values[0].tolist() == [1.0, 2.0, 5.0, 7.0, 9.0]
    assert pct.labels == ["p10", "p25", "p50", "p75", "p90"]


def test_single_path_percentiles():
    pct = percentile_bands(np.array([[3.0, 4.0]]), (0.10, 0.90))
    assert pct.p10.tolist() == [3.0, 4.0]
    assert pct.p90.tolist() == [3.0, 4.0]


def test_bands_are_ordered_and_sized(household):
    pct = simulate(household, n_paths=500, rng=5)
    assert pct.values.shape == (household.projection_years + 1, 5)
    assert pct.n_paths == 500
    assert (np.diff(pct.values, axis=1) >= 0).all()
    df = pct.to_dataframe()
    assert list(df.columns) == ["year", "p10", "p25", "p50", "p75", "p90"]
    assert pct.band(0)["p50"] == pytest.approx(household.starting_net_worth)


def test_block_sizes():
    assert block_sizes(250, 100) == [100, 100, 50]
    assert block_sizes(200, 100) == [100, 100]
    assert block_sizes(7, 100) == [7]


def test_paths_dataframe_is_long_format():
    inputs = _retiree(projection_years=3)
    _, paths = run_monte_carlo(inputs, n_paths=4, rng=0)
    df = paths.to_dataframe()
    assert len(df) == 4 * 4
    assert set(df.columns) == {"path_id", "year", "net_worth", "investments"}


def test_invalid_path_count_rejected(household):
    with pytest.raises(InvalidInputError):
        simulate(household, n_paths=0)
    with pytest.raises(InvalidInputError):
        SimulationConfig(n_paths=0)


def test_negative_volatility_rejected(household):
    bad = ProjectionInputs(**{**household.to_dict(), "volatility": -0.2})
    with pytest.raises(InvalidInputError, match="volatility"):
        simulate(bad, n_paths=10)


def test_overflow_is_reported():
    inputs = ProjectionInputs(
        current_investments=1e300,
        expected_annual_return=1e10,
        volatility=0.0,
        projection_years=3,
        current_age=30,
        retirement_age=65,
    )
    with pytest.raises(NumericOverflowError):
        simulate(inputs, n_paths=5, rng=0)


def test_debt_keeps_amortizing_in_drawdown():
    inputs = _retiree(
        current_investments=100_000.0,
        current_debt=30_000.0,
        monthly_debt_payment=1_000.0,
        current_age=70,
        projection_years=4,
    )
    assert inputs.retirement_year_offset == 0

    _, paths = run_monte_carlo(inputs, n_paths=3, rng=5)

    inv, debt = 100_000.0, 30_000.0
    expected = [inv - debt]
    for _ in range(4):
        inv = inv * 1.05 - inv * 0.04
        debt = max(0.0, debt - 12_000.0)
        expected.append(inv - debt)

    np.testing.assert_allclose(paths.net_worth[0], expected)
    assert expected[1] == pytest.approx(101_000.0 - 18_000.0)
    assert expected[3] == pytest.approx(paths.investments[0, 3])


def test_whole_number_float_horizon_rejected(household):
    bad = ProjectionInputs(**{**household.to_dict(), "projection_years": 5.0})
    with pytest.raises(InvalidInputError, match="projection_years"):
        run_monte_carlo(bad, n_paths=10, rng=0)
