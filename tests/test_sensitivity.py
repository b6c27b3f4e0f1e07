import numpy as np
import pytest

from riskseir.errors import InvalidConfiguration, InvalidScenario
from riskseir.sensitivity import SUMMARY_NAMES, check_problem, morris_screening, scenario_morris, trajectory_summary
from riskseir.simulate import simulate


def test_morris_ranks_influential_input_first():
    problem = {"num_vars": 2, "names": ["a", "b"], "bounds": [(0.0, 1.0), (0.0, 1.0)]}
    results = morris_screening(
        problem,
        simulator_fn=lambda pars: pars,
        summary_fn=lambda out: np.array([3.0 * out["a"] + 0.01 * out["b"]]),
        N=10, levels=4,
    )
    assert len(results) == 1
    mu_star = results[0]["mu_star"]
    assert mu_star[0] > mu_star[1]
    assert mu_star[1] >= 0


def test_trajectory_summary(config):
    df = simulate(1, 30, config)
    peak, deaths = trajectory_summary(df)
    assert peak == pytest.approx((df["Infected_H"] + df["Infected_L"]).max())
    assert deaths == pytest.approx(df["Deceased_H"].iloc[-1] + df["Deceased_L"].iloc[-1])


def test_scenario_morris(config):
    problem = {"num_vars": 2, "names": ["beta", "interacting_fraction"], "bounds": [(0.1, 0.3), (0.5, 1.0)]}
    df = scenario_morris(1, problem, total_time=60, config=config, N=2, levels=4)
    assert list(df.columns) == ["output", "name", "mu", "mu_star", "sigma", "mu_star_conf"]
    assert len(df) == len(SUMMARY_NAMES) * 2
    assert set(df["output"]) == set(SUMMARY_NAMES)
    assert np.all(np.isfinite(df["mu_star"]))
    assert np.all(df["mu_star"] >= 0)


@pytest.mark.parametrize("name", ["hri_reduced", "not_a_field", "validate", "to_dict"])
def test_scenario_morris_rejects_unusable_fields(config, name):
    problem = {"num_vars": 1, "names": [name], "bounds": [(0.0, 1.0)]}
    with pytest.raises(InvalidConfiguration):
        scenario_morris(1, problem, total_time=10, config=config, N=2)


@pytest.mark.parametrize(
    "name, bounds",
    [
        ("interacting_fraction", (0.5, 1.5)),
        ("beta", (-0.1, 0.2)),
        ("N", (0.0, 1e6)),
        ("beta", (0.3, 0.1)),
    ],
)
def test_out_of_range_bounds_are_rejected(config, name, bounds):
    problem = {"num_vars": 1, "names": [name], "bounds": [bounds]}
    with pytest.raises(InvalidConfiguration):
        check_problem(problem, config)
    with pytest.raises(InvalidConfiguration):
        scenario_morris(1, problem, total_time=10, config=config, N=2)


def test_valid_bounds_are_accepted(config):
    problem = {"num_vars": 2, "names": ["beta", "mu_h"], "bounds": [(0.1, 0.2), (0.0, 0.01)]}
    check_problem(problem, config)


def test_scenario_morris_rejects_unknown_scenario(config):
    problem = {"num_vars": 1, "names": ["beta"], "bounds": [(0.1, 0.2)]}
    with pytest.raises(InvalidScenario):
        scenario_morris(7, problem, total_time=10, config=config, N=2)
