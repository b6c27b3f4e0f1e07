"""
The 10-compartment state vector and its initial condition.
"""
from __future__ import annotations
import numpy as np

from .config import ModelConfig

COMPARTMENTS = (
    "Susceptible_H", "Susceptible_L",
    "Exposed_H", "Exposed_L",
    "Infected_H", "Infected_L",
    "Recovered_H", "Recovered_L",
    "Deceased_H", "Deceased_L",
)

# Index of each compartment in the state vector
S_H, S_L, E_H, E_L, I_H, I_L, R_H, R_L, D_H, D_L = range(len(COMPARTMENTS))

LIVING = slice(S_H, D_H)   # everything but the deceased
INFECTED = [E_H, E_L, I_H, I_L]


def initial_state(config: ModelConfig) -> np.ndarray:
    """
    Builds the t=0 state from the population configuration.

    Initial exposed and infected counts are split between the risk
    groups in proportion to the high-risk fraction; everyone else is
    susceptible. Returns a new array on every call.

    Raises
    ------
    InvalidConfiguration
        If `config` fails validation.
    """
    config.validate()
    N = float(config.N)
    p = float(config.fraction_high_risk)
    E0 = float(config.initial_exposed)
    I0 = float(config.initial_infected)

    y0 = np.zeros(len(COMPARTMENTS), dtype=float)
    y0[E_H], y0[E_L] = E0 * p, E0 * (1.0 - p)
    y0[I_H], y0[I_L] = I0 * p, I0 * (1.0 - p)
    y0[S_H] = N * p - y0[E_H] - y0[I_H]
    y0[S_L] = N * (1.0 - p) - y0[E_L] - y0[I_L]
    return y0


def state_as_dict(y) -> dict:
    """Label a state vector with compartment names."""
    y = np.asarray(y, dtype=float)
    if y.shape != (len(COMPARTMENTS),):
        raise ValueError(f"state must have {len(COMPARTMENTS)} entries, got shape {y.shape}")
    return {name: float(v) for name, v in zip(COMPARTMENTS, y)}
