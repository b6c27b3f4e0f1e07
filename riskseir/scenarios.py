"""
Scenario-specific interaction scaling.

Each scenario decides which groups cut their contacts down to the
interacting fraction ``f``:

1. nobody (baseline)
2. high-risk individuals, susceptible and infected
3. low-risk individuals, susceptible and infected
4. everyone

Independently of the scenario, infected hosts of a risk group can be
made uniformly less interactive (``hri_reduced`` / ``lri_reduced``); when
set, that fraction replaces the scenario value for the group's
infected-side coefficient.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict

from .config import ModelConfig
from .errors import InvalidScenario

SCENARIOS = (1, 2, 3, 4)

SCENARIO_LABELS = {
    1: "No behavioural change",
    2: "High-risk reduce interaction",
    3: "Low-risk reduce interaction",
    4: "Everyone reduces interaction",
}

# Scenarios in which each risk group cuts its contacts
_HIGH_RISK_REDUCES = (2, 4)
_LOW_RISK_REDUCES = (3, 4)


@dataclass(frozen=True)
class ScenarioParameters:
    """Coefficients of one scenario run. Thetas lie in [0, 1]."""
    beta: float
    theta_s_h: float
    theta_s_l: float
    theta_i_h: float
    theta_i_l: float
    sigma_h: float
    sigma_l: float
    gamma_h: float
    gamma_l: float
    mu_h: float
    mu_l: float

    def as_dict(self) -> dict:
        return asdict(self)


def check_scenario(scenario) -> int:
    """Returns `scenario` as an int, or raises `InvalidScenario`."""
    if isinstance(scenario, bool) or scenario not in SCENARIOS:
        raise InvalidScenario(f"scenario must be one of {SCENARIOS}, got {scenario!r}")
    return int(scenario)


def scenario_parameters(scenario: int, config: ModelConfig) -> ScenarioParameters:
    """
    Maps a scenario and the behavioural flags of `config` to the
    coefficient set used by the derivative model.

    Parameters
    ----------
    scenario : int
        One of 1, 2, 3, 4.
    config : ModelConfig
        Supplies the interacting fraction ``f``, the infected-host
        reduction flags and fractions, and the fixed rates.

    Returns
    -------
    ScenarioParameters

    Raises
    ------
    InvalidScenario
        If `scenario` is not one of 1, 2, 3, 4.
    """
    scenario = check_scenario(scenario)
    f = float(config.interacting_fraction)

    high_reduces = scenario in _HIGH_RISK_REDUCES
    low_reduces = scenario in _LOW_RISK_REDUCES

    theta_s_h = f if high_reduces else 1.0
    theta_s_l = f if low_reduces else 1.0

    if config.hri_reduced:
        theta_i_h = float(config.hri_fraction)
    else:
        theta_i_h = f if high_reduces else 1.0

    if config.lri_reduced:
        theta_i_l = float(config.lri_fraction)
    else:
        theta_i_l = f if low_reduces else 1.0

    return ScenarioParameters(
        beta=float(config.beta),
        theta_s_h=theta_s_h,
        theta_s_l=theta_s_l,
        theta_i_h=theta_i_h,
        theta_i_l=theta_i_l,
        sigma_h=float(config.sigma_h),
        sigma_l=float(config.sigma_l),
        gamma_h=float(config.gamma_h),
        gamma_l=float(config.gamma_l),
        mu_h=float(config.mu_h),
        mu_l=float(config.mu_l),
    )
