"""
validity_tests.py: lean, runnable validity checks using reports/<timestamp> outputs.

Checks the scenario trajectories written by run.py for:
  1. population conservation,
  2. non-negative compartments,
  3. peak ordering across scenarios (4 <= 2, 3 <= 1),
  4. no low-risk deaths when mu_L = 0,
  5. epidemic burnt out by the end of the horizon (informational).

Usage:
  python validity_tests.py
  python validity_tests.py --report-dir reports/2026-01-01_120000
"""

from __future__ import annotations
import argparse, sys, os, json, glob
from pathlib import Path

import numpy as np
import pandas as pd

from riskseir.state import COMPARTMENTS


# ---------------------------
# Helpers
# ---------------------------

def find_latest_report_dir(root="reports"):
    paths = [Path(p) for p in glob.glob(os.path.join(root, "*")) if os.path.isdir(p)]
    paths = [p for p in paths if (p / "manifest.json").exists()]
    if not paths:
        return None
    return max(paths, key=lambda p: p.stat().st_mtime)

def load_report(report_dir: Path):
    manifest_path = report_dir / "manifest.json"
    if not manifest_path.exists():
        raise FileNotFoundError(f"Missing manifest.json in {report_dir}")
    manifest = json.loads(manifest_path.read_text())
    trajectories = {}
    for s in manifest.get("completed", []):
        p = report_dir / f"scenario_{s}.csv"
        if not p.exists():
            raise FileNotFoundError(f"Missing {p.name} in {report_dir}")
        trajectories[int(s)] = pd.read_csv(p)
    return manifest, trajectories

def test_result(name, passed, detail):
    return {"name": name, "passed": bool(passed), "detail": detail}

def fmt_bool(b): return "PASS" if b else "FAIL"

def peak(df):
    return float((df["Infected_H"] + df["Infected_L"]).max())


# ---------------------------
# Main checks
# ---------------------------

def run_checks(manifest, trajectories, rtol=1e-6, neg_tol=1e-6):
    results = []
    config = manifest["config"]
    N = float(config["N"])

    if not trajectories:
        return [test_result("Trajectories present", False, "no completed scenarios in report")]

    # 1) Conservation
    worst = 0.0
    for df in trajectories.values():
        totals = df[list(COMPARTMENTS)].to_numpy(float).sum(axis=1)
        worst = max(worst, float(np.max(np.abs(totals - N)) / N))
    results.append(test_result("Population conservation", worst <= rtol,
                               f"max relative drift={worst:.2e} (tol {rtol:.0e})"))

    # 2) Non-negativity
    lowest = min(float(df[list(COMPARTMENTS)].to_numpy(float).min()) for df in trajectories.values())
    results.append(test_result("Non-negative compartments", lowest >= -neg_tol * N,
                               f"min compartment value={lowest:.3e}"))

    # 3) Peak ordering, only when every theta comes from the scenario
    peaks = {s: peak(df) for s, df in trajectories.items()}
    if config.get("hri_reduced") or config.get("lri_reduced"):
        results.append(test_result("Scenario peak ordering", True,
                                   "infected-host reduction active; skipping (informational)"))
    elif not {1, 2, 3, 4}.issubset(peaks):
        results.append(test_result("Scenario peak ordering", True,
                                   f"needs all four scenarios, have {sorted(peaks)}; skipping"))
    else:
        eps = 1e-9 * N
        passed = (peaks[4] <= peaks[2] + eps and peaks[4] <= peaks[3] + eps
                  and peaks[2] <= peaks[1] + eps and peaks[3] <= peaks[1] + eps)
        detail = ", ".join(f"S{s}={v:.0f}" for s, v in sorted(peaks.items()))
        results.append(test_result("Scenario peak ordering (4 <= 2,3 <= 1)", passed, detail))

    # 4) No low-risk deaths without low-risk mortality
    if float(config.get("mu_l", 0.0)) == 0.0:
        max_dl = max(float(df["Deceased_L"].abs().max()) for df in trajectories.values())
        results.append(test_result("Deceased_L stays 0 when mu_L = 0", max_dl == 0.0,
                                   f"max |Deceased_L|={max_dl:.3e}"))

    # 5) Burn-out (informational)
    ratios = []
    for s, df in sorted(trajectories.items()):
        active = df["Exposed_H"] + df["Exposed_L"] + df["Infected_H"] + df["Infected_L"]
        ratios.append(f"S{s}={float(active.iloc[-1]) / max(float(active.max()), 1e-12):.1e}")
    results.append(test_result("Active cases at horizon / peak (informational)", True, ", ".join(ratios)))

    return results


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--report-dir", type=str, default=None, help="Path to a specific reports/<timestamp> folder.")
    ap.add_argument("--rtol", type=float, default=1e-6, help="Relative tolerance of the conservation check.")
    args = ap.parse_args()

    report_dir = Path(args.report_dir) if args.report_dir else find_latest_report_dir("reports")
    if report_dir is None:
        print("ERROR: No reports/ folders found.", file=sys.stderr)
        sys.exit(2)

    print(f"Using report dir: {report_dir}")

    manifest, trajectories = load_report(report_dir)
    results = run_checks(manifest, trajectories, rtol=args.rtol)

    print("\n=== VALIDITY TESTS SUMMARY ===")
    failures = 0
    for r in results:
        print(f"[{fmt_bool(r['passed'])}] {r['name']}: {r['detail']}")
        if not r["passed"]:
            failures += 1

    if failures:
        print(f"\nRESULT: FAIL, {failures} test(s) failed.")
        sys.exit(1)
    else:
        print("\nRESULT: PASS, all required tests passed.")
        sys.exit(0)


if __name__ == "__main__":
    main()
