"""
Main script for running the behavioural intervention scenarios.

It loads the model configuration from ``params.yaml``, runs every
requested scenario concurrently and writes a new, timestamped directory
in ``reports/`` containing:

- ``scenario_<k>.csv``: the daily trajectory of scenario k,
- ``scenario_<k>_error.txt``: the error of a scenario that failed,
- ``summary.csv``: peak, deaths and attack rate per scenario,
- ``parameters.csv``: the coefficients used by each scenario,
- ``r0.csv``: basic reproduction number and early growth rate,
- ``manifest.json``: configuration and solver settings of the run.

Usage:
  python run.py
  python run.py --config params.yaml --days 365 --scenarios 1 4 --method RK4

"""
from __future__ import annotations
import argparse, json, sys, time
from pathlib import Path

import pandas as pd

from riskseir.config import load_config
from riskseir.dynamics import basic_reproduction_number, early_growth_rate
from riskseir.errors import InvalidConfiguration, InvalidScenario
from riskseir.metrics import summarize_scenarios
from riskseir.scenarios import SCENARIO_LABELS, SCENARIOS, check_scenario, scenario_parameters
from riskseir.simulate import run_scenarios

SOLVER_KEYS = ("method", "rtol", "atol", "step_size", "max_step", "max_nfev")

# -----------------------------------
# HELPERS
# -----------------------------------

def solver_options_from(settings: dict, args) -> dict:
    """Solver options from params.yaml, overridden by the CLI."""
    opts = {k: settings[k] for k in SOLVER_KEYS if k in settings}
    if args.method:
        opts["method"] = args.method
    if args.step_size:
        opts["step_size"] = args.step_size
    return opts

def scenario_tables(config, scenarios):
    """Coefficients, R0 and growth rate for each scenario."""
    param_rows, r0_rows = {}, {}
    for s in scenarios:
        pars = scenario_parameters(s, config)
        param_rows[s] = pars.as_dict()
        r0_rows[s] = {
            "label": SCENARIO_LABELS[s],
            "R0": basic_reproduction_number(pars, config),
            "growth_rate": early_growth_rate(pars, config),
        }
    params_df = pd.DataFrame.from_dict(param_rows, orient="index")
    r0_df = pd.DataFrame.from_dict(r0_rows, orient="index")
    params_df.index.name = r0_df.index.name = "scenario"
    return params_df, r0_df

# -----------------------------------
# END OF HELPERS
# -----------------------------------

def main(argv=None):
    ap = argparse.ArgumentParser(description="Run the risk-group SEIRD intervention scenarios.")
    ap.add_argument("--config", type=str, default="params.yaml", help="Path to the YAML configuration.")
    ap.add_argument("--days", type=int, default=None, help="Simulation horizon in days (overrides params.yaml).")
    ap.add_argument("--scenarios", type=int, nargs="+", default=None, help="Scenarios to run (1-4).")
    ap.add_argument("--method", type=str, default=None, help="solve_ivp method name or RK4.")
    ap.add_argument("--step-size", type=float, default=None, help="Internal step for RK4.")
    ap.add_argument("--workers", type=int, default=None, help="Number of worker threads.")
    ap.add_argument("--outdir", type=str, default="reports", help="Root folder for report directories.")
    args = ap.parse_args(argv)

    ###### 1. Load configuration ######
    try:
        config, settings = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: {args.config} not found.")
        return 2
    except InvalidConfiguration as e:
        print(f"Error: invalid configuration in {args.config}: {e}")
        return 2

    sim = settings["simulation"]
    total_time = args.days if args.days is not None else int(sim.get("total_time", 1000))
    try:
        scenarios = [check_scenario(s) for s in (args.scenarios or sim.get("scenarios", SCENARIOS))]
    except InvalidScenario as e:
        print(f"Error: {e}")
        return 2
    solver_opts = solver_options_from(sim, args)
    max_workers = args.workers or sim.get("max_workers")

    ###### 2. Setup output ######
    ts = time.strftime("%Y-%m-%d_%H%M%S")
    base_outdir = Path(args.outdir) / ts
    base_outdir.mkdir(parents=True, exist_ok=True)
    print(f"Starting run. Results will be in {base_outdir}")
    print(f"  Scenarios: {scenarios} | horizon: {total_time} days | solver: {solver_opts or 'defaults'}")

    ###### 3. Run scenarios ######
    t0 = time.time()
    results, failures = run_scenarios(
        scenarios, total_time, config,
        max_workers=max_workers, verbose=True, **solver_opts
    )
    print(f"  Integration finished in {time.time() - t0:.1f} s")

    ###### 4. Write outputs ######
    for s, df in results.items():
        df.to_csv(base_outdir / f"scenario_{s}.csv", index=False)
    for s, err in failures.items():
        (base_outdir / f"scenario_{s}_error.txt").write_text(f"{type(err).__name__}: {err}\n")

    if results:
        summary = summarize_scenarios(results, config.N)
        summary.insert(0, "label", [SCENARIO_LABELS[s] for s in summary.index])
        summary.to_csv(base_outdir / "summary.csv")
        print("\n=== SUMMARY ===")
        print(summary[["label", "peak_day", "peak_infected", "total_deaths", "attack_rate"]].to_string())

    params_df, r0_df = scenario_tables(config, scenarios)
    params_df.to_csv(base_outdir / "parameters.csv")
    r0_df.to_csv(base_outdir / "r0.csv")

    manifest = {
        "timestamp": ts,
        "config_file": str(args.config),
        "config": config.to_dict(),
        "total_time": total_time,
        "scenarios": scenarios,
        "solver": solver_opts,
        "completed": sorted(results),
        "failed": {str(s): f"{type(e).__name__}: {e}" for s, e in failures.items()},
    }
    (base_outdir / "manifest.json").write_text(json.dumps(manifest, indent=2))

    if failures:
        print(f"\nDone with {len(failures)} failed scenario(s): {sorted(failures)}. See {base_outdir}")
        return 1
    print(f"\nDone. All scenario results are in {base_outdir}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
