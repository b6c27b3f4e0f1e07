"""
Runs scenarios end to end.

`simulate` builds the scenario coefficients, a fresh initial state and
integrates the model over ``[0, total_time]`` with daily reporting,
returning a labelled trajectory table. `run_scenarios` does this for
several scenarios at once on a thread pool; runs share nothing mutable,
so one failing scenario leaves the others untouched.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
import numbers

import numpy as np
import pandas as pd

from .config import ModelConfig, DEFAULT_CONFIG
from .errors import InvalidConfiguration, SimulationError
from .integrate import integrate
from .model import seird_hl_rhs
from .scenarios import SCENARIOS, check_scenario, scenario_parameters
from .state import COMPARTMENTS, initial_state


def daily_grid(total_time) -> np.ndarray:
    """Integer days 0..total_time inclusive."""
    if isinstance(total_time, bool) or not isinstance(total_time, numbers.Integral):
        raise InvalidConfiguration(f"total_time must be an integer number of days, got {total_time!r}")
    if total_time < 0:
        raise InvalidConfiguration(f"total_time must be non-negative, got {total_time}")
    return np.arange(int(total_time) + 1, dtype=float)


def trajectory_frame(t, Y, scenario=None) -> pd.DataFrame:
    """Label an integrator output as a trajectory table."""
    df = pd.DataFrame(np.asarray(Y, dtype=float), columns=list(COMPARTMENTS))
    df.insert(0, "time", np.asarray(t, dtype=float))
    if scenario is not None:
        df.attrs["scenario"] = int(scenario)
    return df


def simulate(scenario: int, total_time: int, config: ModelConfig = DEFAULT_CONFIG,
             **solver_options) -> pd.DataFrame:
    """
    Simulates one scenario from day 0 to `total_time`.

    Parameters
    ----------
    scenario : int
        One of 1, 2, 3, 4.
    total_time : int
        Last reported day (inclusive).
    config : ModelConfig, optional
        Population, behaviour and rate configuration.
    **solver_options
        Forwarded to `integrate` (``method``, ``rtol``, ``atol``,
        ``step_size``, ``max_nfev`` ...).

    Returns
    -------
    pd.DataFrame
        Columns ``time`` and the 10 compartments, one row per day.

    Raises
    ------
    InvalidScenario, InvalidConfiguration
        Before any integration starts.
    NumericalInstability, IntegrationNonConvergence
        If the integration fails.
    """
    pars = scenario_parameters(scenario, config)
    t_eval = daily_grid(total_time)
    y0 = initial_state(config)

    Y = integrate(lambda t, y: seird_hl_rhs(t, y, pars), y0, t_eval, **solver_options)
    return trajectory_frame(t_eval, Y, scenario=check_scenario(scenario))


def run_scenarios(scenarios=SCENARIOS, total_time: int = 1000,
                  config: ModelConfig = DEFAULT_CONFIG, max_workers=None,
                  verbose=False, **solver_options):
    """
    Runs several scenarios concurrently.

    Returns
    -------
    tuple (results, failures)
        results : dict, scenario -> trajectory DataFrame, in the order
            of `scenarios`.
        failures : dict, scenario -> the `SimulationError` it raised.
    """
    scenarios = list(scenarios)
    if not scenarios:
        return {}, {}

    done, failures = {}, {}
    with ThreadPoolExecutor(max_workers=max_workers or len(scenarios)) as pool:
        futures = {
            pool.submit(simulate, scenario, total_time, config, **solver_options): scenario
            for scenario in scenarios
        }
        for future in as_completed(futures):
            scenario = futures[future]
            try:
                done[scenario] = future.result()
            except SimulationError as e:
                failures[scenario] = e
                if verbose:
                    print(f"  Scenario {scenario} FAILED: {type(e).__name__}: {e}")
                continue
            if verbose:
                print(f"  Scenario {scenario} complete ({len(done[scenario])} days).")

    results = {s: done[s] for s in scenarios if s in done}
    return results, failures
