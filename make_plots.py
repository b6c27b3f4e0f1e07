# make_plots.py
"""
Renders the figures of a `run.py` report directory into ``figs/``:

- ``scenario_<k>.png``: the 10 compartments of scenario k, H and L side by side,
- ``compare_infected.png``: I_H + I_L of every scenario on one axis,
- ``compare_deaths.png``: cumulative deaths of every scenario,
- ``morris_mu_star.png``: Morris μ* bars, if a ``morris_output*.csv`` is present.

Usage:
  python make_plots.py
  python make_plots.py --report reports/2026-01-01_120000
"""
from __future__ import annotations
import argparse
from pathlib import Path
import pandas as pd
import matplotlib.pyplot as plt

from riskseir.scenarios import SCENARIO_LABELS

# Display colour of each scenario
SCENARIO_COLORS = {
    1: "#D62728",
    2: "#FF7F0E",
    3: "#1F77B4",
    4: "#2CA02C",
}

# Colour of each health state
STATE_COLORS = {
    "Susceptible": "blue",
    "Exposed": "orange",
    "Infected": "red",
    "Recovered": "green",
    "Deceased": "black",
}

# ---------- helpers ----------

def _latest_report_dir(base="reports"):
    """Return the most recent *directory* inside `reports/`"""
    paths = []
    for p in Path(base).glob("*"):
        if p.is_dir():
            paths.append(p)
    if not paths:
        return None
    return sorted(paths, key=lambda p: p.stat().st_mtime)[-1]


def _ensure_figs_dir(report_dir: Path) -> Path:
    figs = report_dir / "figs"
    figs.mkdir(parents=True, exist_ok=True)
    return figs

def _load_scenarios(report_dir: Path) -> dict:
    """scenario -> trajectory DataFrame, for every scenario_<k>.csv present."""
    out = {}
    for p in sorted(report_dir.glob("scenario_*.csv")):
        try:
            k = int(p.stem.split("_")[1])
        except (IndexError, ValueError):
            continue
        out[k] = pd.read_csv(p)
    return out

# ---------- plotting primitives ----------

def plot_scenario(df: pd.DataFrame, scenario: int, figs: Path):
    fig, axes = plt.subplots(1, 2, figsize=(13, 4.5), sharey=True)
    for ax, group, name in zip(axes, ["H", "L"], ["High-risk", "Low-risk"]):
        for state, color in STATE_COLORS.items():
            ax.plot(df["time"], df[f"{state}_{group}"], color=color, lw=2, label=state)
        ax.set_title(name)
        ax.set_xlabel("Day")
        ax.grid(True, alpha=0.3)
    axes[0].set_ylabel("Individuals")
    axes[1].legend(loc="best", frameon=False)
    fig.suptitle(f"Scenario {scenario}: {SCENARIO_LABELS.get(scenario, '')}", fontweight="bold")
    fig.tight_layout()
    fig.savefig(figs / f"scenario_{scenario}.png", dpi=300)
    plt.close(fig)

def plot_comparison(trajectories: dict, figs: Path):
    fig, ax = plt.subplots(figsize=(9, 4))
    for k, df in sorted(trajectories.items()):
        ax.plot(df["time"], df["Infected_H"] + df["Infected_L"], lw=2,
                color=SCENARIO_COLORS.get(k), label=f"{k}: {SCENARIO_LABELS.get(k, '')}")
    ax.set_xlabel("Day"); ax.set_ylabel("Infected (H + L)")
    ax.grid(True, alpha=0.3); ax.legend(frameon=False)
    fig.tight_layout()
    fig.savefig(figs / "compare_infected.png", dpi=300)
    plt.close(fig)

    fig, ax = plt.subplots(figsize=(9, 4))
    for k, df in sorted(trajectories.items()):
        color = SCENARIO_COLORS.get(k)
        ax.plot(df["time"], df["Deceased_H"], lw=2, color=color, label=f"{k}: high-risk")
        ax.plot(df["time"], df["Deceased_L"], lw=2, ls="--", color=color, label=f"{k}: low-risk")
    ax.set_xlabel("Day"); ax.set_ylabel("Cumulative deaths")
    ax.grid(True, alpha=0.3); ax.legend(frameon=False, ncol=2)
    fig.tight_layout()
    fig.savefig(figs / "compare_deaths.png", dpi=300)
    plt.close(fig)

def plot_morris(report_dir: Path):
    figs = _ensure_figs_dir(report_dir)
    candidates = list(report_dir.glob("morris_output*.csv"))
    if not candidates:
        print("[skip] no morris_output*.csv found")
        return
    sens = pd.read_csv(candidates[0])
    if not {"output", "name", "mu_star"}.issubset(sens.columns):
        print("[skip] morris_output.csv missing required columns")
        return
    outputs = list(sens["output"].unique())
    fig, axes = plt.subplots(1, len(outputs), figsize=(6 * len(outputs), max(3, 0.5 * sens["name"].nunique())))
    if len(outputs) == 1:
        axes = [axes]
    for ax, output in zip(axes, outputs):
        s = sens[sens["output"] == output].sort_values("mu_star", ascending=True)
        ax.barh(s["name"], s["mu_star"])
        ax.set_title(output)
        ax.set_xlabel("Morris μ* (elementary effect)")
    fig.tight_layout()
    fig.savefig(figs / "morris_mu_star.png", dpi=300)
    plt.close(fig)

# ---------- main ----------

def main():
    ap = argparse.ArgumentParser(description="Generate figures from a scenario report run.")
    ap.add_argument("--report", type=str, default=None, help="Path to reports/<timestamp> (default = latest).")
    args = ap.parse_args()

    report_dir = Path(args.report) if args.report else _latest_report_dir()
    if report_dir is None or not report_dir.exists():
        raise SystemExit("No report directory found. Run `python run.py` first, or pass --report <path>.")

    print(f"[info] using report: {report_dir}")
    trajectories = _load_scenarios(report_dir)
    if trajectories:
        figs = _ensure_figs_dir(report_dir)
        for k, df in sorted(trajectories.items()):
            plot_scenario(df, k, figs)
        plot_comparison(trajectories, figs)
    else:
        print("[skip] no scenario_*.csv found")
    plot_morris(report_dir)
    print(f"[done] figures saved in {report_dir / 'figs'}")

if __name__ == "__main__":
    main()
