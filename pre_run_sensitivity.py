"""
Pre-analysis: Morris Global Sensitivity Analysis (GSA).

Screens the configuration inputs listed in the ``sensitivity`` block of
``params.yaml`` with the Morris method (via `SALib`), for one scenario.
Every sample is a full deterministic run; the summary statistics are the
peak of I_H + I_L and the total number of deaths.

Outputs go to ``reports/<timestamp>_morris/``:
- ``morris_output.csv``: mu, mu_star, sigma per (output, parameter),
- ``morris_<output>.png``: tornado plot of mu_star.

"""
from __future__ import annotations
import argparse, sys, time
from pathlib import Path

import matplotlib.pyplot as plt

from riskseir.config import load_config
from riskseir.errors import InvalidConfiguration, SimulationError
from riskseir.scenarios import check_scenario
from riskseir.sensitivity import check_problem, scenario_morris

# -----------------------------------
# HELPERS
# -----------------------------------

def problem_from_settings(sens: dict) -> dict:
    """Build the SALib `problem` from the params.yaml sensitivity block."""
    names = list(sens.get("names", []))
    bounds = [tuple(float(x) for x in b) for b in sens.get("bounds", [])]
    if not names or len(names) != len(bounds):
        raise InvalidConfiguration("sensitivity block needs matching 'names' and 'bounds' lists")
    return {"num_vars": len(names), "names": names, "bounds": bounds}

def plot_tornado(df, stat_name, out_file):
    """
    Generates and saves a tornado plot for the Morris results.
    Plots mu_star (mean absolute elementary effect)
    """
    s = df[df["output"] == stat_name].sort_values("mu_star")
    plt.figure(figsize=(10, max(3, len(s) * 0.5)))
    plt.barh(s["name"], s["mu_star"], align='center', color='skyblue')
    plt.xlabel("μ* (Mean Absolute Elementary Effect)")
    plt.title(f"Morris Sensitivity for: {stat_name}")
    plt.ylabel("Parameter")
    plt.tight_layout()
    plt.savefig(out_file)
    print(f"  Saved plot to {out_file}")
    plt.close()

# -----------------------------------
# END OF HELPERS
# -----------------------------------

def main(argv=None):
    ap = argparse.ArgumentParser(description="Morris screening of the SEIRD configuration inputs.")
    ap.add_argument("--config", type=str, default="params.yaml")
    ap.add_argument("--outdir", type=str, default="reports")
    args = ap.parse_args(argv)

    try:
        config, settings = load_config(args.config)
        sens = settings["sensitivity"]
        problem = problem_from_settings(sens)
        check_problem(problem, config)
        scenario = check_scenario(sens.get("scenario", 1))
    except FileNotFoundError:
        print(f"Error: {args.config} not found.")
        return 2
    except SimulationError as e:
        print(f"Error: {e}")
        return 2

    total_time = int(sens.get("total_time", 365))
    N = int(sens.get("N", 32))
    levels = int(sens.get("levels", 4))
    n_runs = N * (problem["num_vars"] + 1)

    out_dir = Path(args.outdir) / (time.strftime("%Y-%m-%d_%H%M%S") + "_morris")
    out_dir.mkdir(parents=True, exist_ok=True)
    print(f"Starting Morris screening of {problem['names']} for scenario {scenario}")
    print(f"  {n_runs} simulations of {total_time} days. Results will be in {out_dir}")

    t0 = time.time()
    try:
        df = scenario_morris(scenario, problem, total_time=total_time, config=config,
                             N=N, levels=levels, seed=int(sens.get("seed", 123)))
    except SimulationError as e:
        print(f"Error: Morris screening failed: {type(e).__name__}: {e}")
        return 2
    print(f"  Finished in {time.time() - t0:.1f} s")

    df.to_csv(out_dir / "morris_output.csv", index=False)
    for stat_name in df["output"].unique():
        plot_tornado(df, stat_name, out_dir / f"morris_{stat_name}.png")

    print("\n=== MORRIS mu_star ===")
    print(df.pivot(index="name", columns="output", values="mu_star").round(3).to_string())
    print(f"\nSensitivity pre-run finished. See {out_dir}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
