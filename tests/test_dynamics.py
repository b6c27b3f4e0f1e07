import numpy as np
import pytest

from riskseir.config import ModelConfig
from riskseir.dynamics import (
    basic_reproduction_number,
    disease_free_state,
    early_growth_rate,
    next_generation_matrix,
    numerical_jacobian,
)
from riskseir.scenarios import scenario_parameters


def expected_r0(pars, config):
    p = config.fraction_high_risk
    return pars.beta * (
        pars.theta_s_h * pars.theta_i_h * p / (pars.gamma_h + pars.mu_h)
        + pars.theta_s_l * pars.theta_i_l * (1 - p) / (pars.gamma_l + pars.mu_l)
    )


@pytest.mark.parametrize("scenario", [1, 2, 3, 4])
def test_r0_matches_closed_form(config, scenario):
    pars = scenario_parameters(scenario, config)
    assert basic_reproduction_number(pars, config) == pytest.approx(expected_r0(pars, config), rel=1e-10)


def test_default_baseline_r0(config):
    assert basic_reproduction_number(scenario_parameters(1, config), config) == pytest.approx(1.647, abs=1e-3)


def test_uniform_reduction_scales_r0_by_f_squared(config):
    r0_1 = basic_reproduction_number(scenario_parameters(1, config), config)
    r0_4 = basic_reproduction_number(scenario_parameters(4, config), config)
    assert r0_4 == pytest.approx(config.interacting_fraction ** 2 * r0_1)


def test_next_generation_matrix_shape(config):
    K = next_generation_matrix(scenario_parameters(2, config), config)
    assert K.shape == (4, 4)
    # only the exposed rows receive new infections
    np.testing.assert_array_equal(K[2:], np.zeros((2, 4)))


@pytest.mark.parametrize("beta", [0.05, 0.134, 0.3])
def test_growth_rate_sign_follows_r0(beta):
    cfg = ModelConfig(beta=beta)
    pars = scenario_parameters(1, cfg)
    r0 = basic_reproduction_number(pars, cfg)
    r = early_growth_rate(pars, cfg)
    assert (r > 0) == (r0 > 1)


def test_growth_rate_homogeneous_closed_form():
    # identical groups: r solves (r + sigma)(r + gamma + mu) = sigma * beta
    cfg = ModelConfig(sigma_h=0.2, sigma_l=0.2, gamma_h=0.1, gamma_l=0.1, mu_h=0.01, mu_l=0.01, beta=0.3)
    pars = scenario_parameters(1, cfg)
    a = 0.2 + 0.11
    b = 0.2 * 0.11 - 0.2 * 0.3
    r_exact = (-a + np.sqrt(a * a - 4 * b)) / 2
    assert early_growth_rate(pars, cfg) == pytest.approx(r_exact, rel=1e-4)


def test_disease_free_state(config):
    y = disease_free_state(config)
    assert y.sum() == pytest.approx(config.N)
    assert y[0] == pytest.approx(config.N * config.fraction_high_risk)
    assert np.all(y[2:] == 0.0)


def test_numerical_jacobian_of_linear_system():
    A = np.array([[-1.0, 2.0], [0.5, -3.0]])
    J = numerical_jacobian(lambda t, y, pars: A @ y, np.array([1.0, 2.0]), None)
    np.testing.assert_allclose(J, A, atol=1e-6)
