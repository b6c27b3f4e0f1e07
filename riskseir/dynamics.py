from __future__ import annotations
import numpy as np

from .model import seird_hl_rhs
from .state import COMPARTMENTS, S_H, S_L, INFECTED


def numerical_jacobian(fun, y_star, pars, eps=1e-6):
    """
    Forward-difference Jacobian of ``fun(t, y, pars)`` with respect to the
    state, at `y_star`. Used at the disease-free state, where the
    infected block gives the early growth of an outbreak.
    Column j is (fun(y_star + eps * e_j) - fun(y_star)) / eps.
    """
    y_star = np.asarray(y_star, float)
    n = y_star.size
    f_star = np.asarray(fun(0.0, y_star, pars), float)
    J = np.empty((f_star.size, n))
    for j in range(n):
        shifted = y_star.copy()
        shifted[j] += eps
        J[:, j] = (fun(0.0, shifted, pars) - f_star) / eps
    return J

def disease_free_state(config):
    """Whole population susceptible, split by the high-risk fraction."""
    config.validate()
    y = np.zeros(len(COMPARTMENTS))
    y[S_H] = config.N * config.fraction_high_risk
    y[S_L] = config.N * (1.0 - config.fraction_high_risk)
    return y

def next_generation_matrix(pars, config):
    """
    K = F V^-1 on the infected subsystem (E_H, E_L, I_H, I_L),
    linearised at the disease-free state.
    """
    p = config.fraction_high_risk
    s = np.array([p, 1.0 - p])
    theta_s = np.array([pars.theta_s_h, pars.theta_s_l])
    theta_i = np.array([pars.theta_i_h, pars.theta_i_l])

    # new infections land in E_i, caused by I_j
    F = np.zeros((4, 4))
    F[0:2, 2:4] = pars.beta * np.outer(theta_s * s, theta_i)

    V = np.array([
        [pars.sigma_h, 0.0, 0.0, 0.0],
        [0.0, pars.sigma_l, 0.0, 0.0],
        [-pars.sigma_h, 0.0, pars.gamma_h + pars.mu_h, 0.0],
        [0.0, -pars.sigma_l, 0.0, pars.gamma_l + pars.mu_l],
    ])
    return F @ np.linalg.inv(V)

def basic_reproduction_number(pars, config) -> float:
    """Spectral radius of the next-generation matrix."""
    K = next_generation_matrix(pars, config)
    return float(np.max(np.abs(np.linalg.eigvals(K))))

def early_growth_rate(pars, config, eps=1e-6) -> float:
    """
    Largest real part among the eigenvalues of the infected-subsystem
    Jacobian at the disease-free state; > 0 iff R0 > 1.
    """
    J = numerical_jacobian(seird_hl_rhs, disease_free_state(config), pars, eps=eps)
    J_inf = J[np.ix_(INFECTED, INFECTED)]
    return float(np.max(np.linalg.eigvals(J_inf).real))
