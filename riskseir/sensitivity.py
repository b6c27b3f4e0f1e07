from __future__ import annotations
from dataclasses import fields, replace

import numpy as np
import pandas as pd
from SALib.sample import morris as morris_sample
from SALib.analyze import morris as morris_analyze

from .config import DEFAULT_CONFIG
from .errors import InvalidConfiguration
from .metrics import peak_infected
from .scenarios import check_scenario
from .simulate import simulate

SUMMARY_NAMES = ["peak_infected", "total_deaths"]


def morris_screening(problem, simulator_fn, summary_fn, N=512, levels=6, seed=123):
    """
    problem = {
      "num_vars": ...,
      "names": ["beta","interacting_fraction",...],
      "bounds": [(min,max), ...]
    }
    simulator_fn(pars)-> trajectory
    summary_fn(sim_out)-> np.array of summary outputs (e.g., [peak, deaths])
    """
    X = morris_sample.sample(problem, N, num_levels=levels, seed=seed)
    Y = []
    for row in X:
        pars = {n: v for n, v in zip(problem["names"], row)}
        sim_out = simulator_fn(pars)
        Y.append(summary_fn(sim_out))
    Y = np.asarray(Y, dtype=float)
    # analyze each output dimension separately
    results = []
    for j in range(Y.shape[1]):
        res = morris_analyze.analyze(problem, X, Y[:, j], num_levels=levels,
                                     print_to_console=False, seed=seed)
        results.append(res)  # contains mu, mu_star, sigma
    return results

def trajectory_summary(df):
    _, peak = peak_infected(df)
    last = df.iloc[-1]
    return np.array([peak, last["Deceased_H"] + last["Deceased_L"]], dtype=float)

def check_problem(problem, config=DEFAULT_CONFIG):
    """
    Raise `InvalidConfiguration` unless every name in `problem` is a numeric
    ModelConfig field and both of its bounds give a valid configuration.
    """
    numeric = {f.name for f in fields(config)} - {"hri_reduced", "lri_reduced"}
    bad = [n for n in problem["names"] if n not in numeric]
    if bad:
        raise InvalidConfiguration(f"cannot screen non-numeric or unknown fields: {bad}")
    for name, (lo, hi) in zip(problem["names"], problem["bounds"]):
        if not lo < hi:
            raise InvalidConfiguration(f"bounds of {name} must satisfy low < high, got {(lo, hi)}")
        for value in (lo, hi):
            try:
                replace(config, **{name: float(value)}).validate()
            except InvalidConfiguration as e:
                raise InvalidConfiguration(f"bound {value} of {name} is out of range: {e}") from None

def scenario_morris(scenario, problem, total_time=365, config=DEFAULT_CONFIG,
                    N=64, levels=4, seed=123, **solver_options):
    """
    Morris screening of ModelConfig fields named in `problem` for one
    scenario. Returns a tidy DataFrame (output, name, mu, mu_star, sigma,
    mu_star_conf).
    """
    scenario = check_scenario(scenario)
    check_problem(problem, config)

    def simulator_fn(pars):
        cfg = replace(config, **{k: float(v) for k, v in pars.items()}).validate()
        return simulate(scenario, total_time, cfg, **solver_options)

    results = morris_screening(problem, simulator_fn, trajectory_summary, N=N, levels=levels, seed=seed)

    rows = []
    for output, res in zip(SUMMARY_NAMES, results):
        for i, name in enumerate(problem["names"]):
            rows.append(dict(
                output=output,
                name=name,
                mu=float(res["mu"][i]),
                mu_star=float(res["mu_star"][i]),
                sigma=float(res["sigma"][i]),
                mu_star_conf=float(res["mu_star_conf"][i]),
            ))
    return pd.DataFrame(rows)
