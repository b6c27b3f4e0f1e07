"""
Defines the two-risk-group SEIRD model dynamics.

This module contains the ODE right-hand side of the SEIRD
(Susceptible, Exposed, Infected, Recovered, Deceased) compartment
model with every compartment split into a high-risk (H) and a
low-risk (L) group, giving the 10-state vector

    [S_H, S_L, E_H, E_L, I_H, I_L, R_H, R_L, D_H, D_L].

Behavioural interventions enter through the interaction-scaling
coefficients (thetas) of `ScenarioParameters`: infected hosts shed
infection in proportion to ``theta_i_*`` and susceptibles pick it up in
proportion to ``theta_s_*``.

"""
from __future__ import annotations
import numpy as np

from .state import S_H, S_L, E_H, E_L, I_H, I_L, LIVING


def force_of_infection(y, pars) -> float:
    """
    Interaction-weighted force of infection
    ``beta * (theta_i_h * I_H + theta_i_l * I_L) / P``.

    P is the living population (the deceased do not mix). Returns 0 when
    nobody is left alive, so the mixing denominator never reaches zero.
    """
    P = float(np.sum(y[LIVING]))
    if P <= 0.0:
        return 0.0
    weighted_infected = pars.theta_i_h * y[I_H] + pars.theta_i_l * y[I_L]
    return pars.beta * weighted_infected / P


def seird_hl_rhs(t, y, pars):
    """
    Defines the two-risk-group SEIRD ODE system. Calculates the
    derivatives of the 10 state variables from the current state `y`
    and the scenario coefficients in `pars`.

    Parameters
    ----------
    t : float
        The current time (ignored, as the system is autonomous). Kept so
        the function can be handed to any ``fun(t, y)`` integrator,
        which may probe non-grid times.
    y : np.ndarray
        The 10-state vector [S_H, S_L, E_H, E_L, I_H, I_L, R_H, R_L, D_H, D_L].
    pars : ScenarioParameters
        Transmission, interaction-scaling, incubation, recovery and
        mortality coefficients.

    Returns
    -------
    np.ndarray
        A new 1D float array of the 10 derivatives, in state order.

    Notes
    --------
    The derivatives sum to zero, so the total population (deceased
    included) is conserved.
    """
    y = np.asarray(y, dtype=float)
    foi = force_of_infection(y, pars)

    new_exposed_h = foi * pars.theta_s_h * y[S_H]
    new_exposed_l = foi * pars.theta_s_l * y[S_L]
    onset_h = pars.sigma_h * y[E_H]
    onset_l = pars.sigma_l * y[E_L]
    recovered_h = pars.gamma_h * y[I_H]
    recovered_l = pars.gamma_l * y[I_L]
    deaths_h = pars.mu_h * y[I_H]
    deaths_l = pars.mu_l * y[I_L]

    dS_H = -new_exposed_h
    dS_L = -new_exposed_l
    dE_H = new_exposed_h - onset_h
    dE_L = new_exposed_l - onset_l
    dI_H = onset_h - recovered_h - deaths_h
    dI_L = onset_l - recovered_l - deaths_l
    dR_H = recovered_h
    dR_L = recovered_l
    dD_H = deaths_h
    dD_L = deaths_l

    return np.array([dS_H, dS_L, dE_H, dE_L, dI_H, dI_L,
                     dR_H, dR_L, dD_H, dD_L], dtype=float)
