from __future__ import annotations
import numpy as np
import pandas as pd

from .state import COMPARTMENTS


def total_infected(df) -> pd.Series:
    return df["Infected_H"] + df["Infected_L"]

def active_cases(df) -> pd.Series:
    """Exposed plus infected, both risk groups."""
    return df["Exposed_H"] + df["Exposed_L"] + total_infected(df)

def peak_infected(df):
    """
    Day and size of the I_H + I_L peak.
    Returns (day, value); the first day wins on ties.
    """
    infected = total_infected(df).to_numpy(float)
    idx = int(np.argmax(infected))
    return float(df["time"].iloc[idx]), float(infected[idx])

def conservation_error(df, N) -> float:
    """Largest |sum of compartments - N| / N over the trajectory."""
    totals = df[list(COMPARTMENTS)].to_numpy(float).sum(axis=1)
    return float(np.max(np.abs(totals - N)) / N)

def summarize_trajectory(df, N) -> dict:
    peak_day, peak_value = peak_infected(df)
    last = df.iloc[-1]
    removed = last["Recovered_H"] + last["Recovered_L"] + last["Deceased_H"] + last["Deceased_L"]
    return dict(
        peak_day=peak_day,
        peak_infected=peak_value,
        deaths_H=float(last["Deceased_H"]),
        deaths_L=float(last["Deceased_L"]),
        total_deaths=float(last["Deceased_H"] + last["Deceased_L"]),
        attack_rate=float(removed / N),
        min_compartment=float(df[list(COMPARTMENTS)].to_numpy(float).min()),
        conservation_error=conservation_error(df, N),
    )

def summarize_scenarios(results, N) -> pd.DataFrame:
    """One summary row per scenario, indexed by scenario."""
    rows = {scenario: summarize_trajectory(df, N) for scenario, df in results.items()}
    out = pd.DataFrame.from_dict(rows, orient="index")
    out.index.name = "scenario"
    return out
