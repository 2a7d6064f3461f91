import logging

import numpy as np
import pytest

from core.errors import InvalidInputError
from core.schema import ProjectionInputs
from engine.projector import project
from engine.simulator import run_monte_carlo
from report.aggregator import summarize_simulation, summary_table
from report.assembler import build_report
from report.insights import summarize_projection


def test_deterministic_report_skips_simulation(household):
    report = build_report(household)
    assert not report.has_simulation
    assert report.percentiles is None
    assert report.simulation_summary is None
    assert len(report.trajectory) == household.projection_years + 1
    assert len(report.milestones) == 6

    df = report.to_dataframe()
    assert len(df) == household.projection_years + 1
    assert "p50" not in df.columns


def test_stochastic_report(household):
    report = build_report(household, include_simulation=True, n_paths=200, rng=1)
    assert report.has_simulation
    assert report.percentiles.n_paths == 200

    df = report.to_dataframe()
    assert {"net_worth_nominal", "net_worth_real", "p10", "p50", "p90"} <= set(df.columns)
    assert df.loc[0, "p50"] == pytest.approx(df.loc[0, "net_worth_nominal"])

    summary = report.simulation_summary
    assert summary.n_paths == 200
    assert summary.terminal_p10 == pytest.approx(report.percentiles.p10[-1])
    assert summary.terminal_p90 == pytest.approx(report.percentiles.p90[-1])


def test_report_is_reproducible(household):
    a = build_report(household, include_simulation=True, n_paths=100, rng=7)
    b = build_report(household, include_simulation=True, n_paths=100, rng=7)
    assert a.trajectory == b.trajectory
    assert np.array_equal(a.percentiles.values, b.percentiles.values)


def test_custom_targets(household):
    report = build_report(household, targets=[200_000.0])
    assert len(report.milestones) == 1
    assert report.milestones[0].year_reached is not None
    assert list(report.milestones_dataframe().columns) == ["target", "year_reached", "age_reached"]


def test_invalid_request_fails_before_work(household):
    with pytest.raises(InvalidInputError):
        build_report(household, include_simulation=True, n_paths=0)
    bad = ProjectionInputs(**{**household.to_dict(), "monthly_expenses": -1.0})
    with pytest.raises(InvalidInputError):
        build_report(bad)


def test_report_carries_warnings(household):
    odd = ProjectionInputs(**{**household.to_dict(), "volatility": 15.0})
    report = build_report(odd)
    assert report.warnings


def test_insights_numbers():
    inputs = ProjectionInputs(
        current_investments=100_000.0,
        monthly_investment_contribution=1_000.0,
        expected_annual_return=0.07,
        inflation_rate=0.025,
        projection_years=1,
    )
    ins = summarize_projection(project(inputs))
    assert ins.final_net_worth_nominal == pytest.approx(119_000.0)
    assert ins.inflation_impact == pytest.approx(119_000.0 - 119_000.0 / 1.025)
    assert ins.purchasing_power_erosion == pytest.approx(1 - 1 / 1.025)
    assert ins.growth_to_contribution_ratio == pytest.approx(7_000.0 / 12_000.0)
    assert ins.first_negative_year is None
    assert ins.flags == []


def test_insight_flags():
    inputs = ProjectionInputs(
        current_investments=500_000.0,
        current_debt=1_000_000.0,
        monthly_debt_payment=100.0,
        monthly_investment_contribution=100.0,
        expected_annual_return=0.08,
        projection_years=10,
    )
    ins = summarize_projection(project(inputs))
    labels = [f.split(":")[0] for f in ins.flags]
    assert labels == ["NEGATIVE_NET_WORTH", "GROWTH_EXCEEDS_CONTRIBUTIONS", "DEBT_OUTSTANDING"]
    assert ins.first_negative_year == 0
    assert "FLAGS" in ins.to_dataframe()["Metric"].values


def test_insights_without_contributions(flat):
    ins = summarize_projection(project(flat))
    assert ins.growth_to_contribution_ratio is None
    assert ins.purchasing_power_erosion == pytest.approx(0.0)


def test_simulation_summary_depletion_probability():
    inputs = ProjectionInputs(
        current_investments=10_000.0,
        current_debt=50_000.0,
        expected_annual_return=0.0,
        volatility=0.0,
        projection_years=3,
    )
    _, paths = run_monte_carlo(inputs, n_paths=20, rng=0)
    summary = summarize_simulation(paths)
    assert summary.prob_positive_terminal == 0.0
    assert summary.terminal_spread == 0.0
    assert len(summary_table(summary)) == 7


def test_warnings_logged_once_per_report(household, caplog):
    odd = ProjectionInputs(**{**household.to_dict(), "volatility": 15.0})
    with caplog.at_level(logging.WARNING, logger="data_prep.validators"):
        report = build_report(odd, include_simulation=True, n_paths=20, rng=3)
    logged = [r for r in caplog.records if "Degenerate assumption" in r.getMessage()]
    assert len(logged) == len(report.warnings) == 1


def test_float_horizon_rejected_before_work(household):
    bad = ProjectionInputs(**{**household.to_dict(), "projection_years": 5.0})
    with pytest.raises(InvalidInputError, match="projection_years"):
        build_report(bad, include_simulation=True, n_paths=10)
