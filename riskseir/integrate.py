"""
Numerical integration of the model over a reporting grid.

Two families of solvers are available behind one `integrate` call:

- any `scipy.integrate.solve_ivp` method (``"DOP853"`` by default;
  ``"RK45"``, ``"LSODA"`` etc. also work), which controls the local
  error adaptively between reporting times;
- ``"RK4"``, a classical fixed-step Runge-Kutta scheme that splits every
  reporting interval into equal sub-steps no longer than `step_size`.

Only the states at the requested reporting times are returned. Runs
that blow up (non-finite state, population drift) or that exhaust the
right-hand-side evaluation budget are reported as errors instead of
being returned as partial trajectories.
"""
from __future__ import annotations
import math
import numpy as np
from scipy.integrate import solve_ivp

from .errors import InvalidConfiguration, IntegrationNonConvergence, NumericalInstability

FIXED_STEP_METHODS = ("RK4",)
SOLVE_IVP_METHODS = ("RK45", "RK23", "DOP853", "Radau", "BDF", "LSODA")

DEFAULT_METHOD = "DOP853"
DEFAULT_MAX_NFEV = 5_000_000


class _BudgetedRhs:
    """Wraps fun(t, y), counting calls and rejecting non-finite states."""

    def __init__(self, fun, max_nfev):
        self.fun = fun
        self.max_nfev = int(max_nfev)
        self.nfev = 0

    def __call__(self, t, y):
        self.nfev += 1
        if self.nfev > self.max_nfev:
            raise IntegrationNonConvergence(
                f"evaluation budget of {self.max_nfev} exhausted at t={t:.6g}"
            )
        if not np.all(np.isfinite(y)):
            raise NumericalInstability(f"non-finite state at t={t:.6g}")
        return self.fun(t, y)


# -----------------------------------
# HELPERS

def _check_time_grid(t_eval) -> np.ndarray:
    t_eval = np.asarray(t_eval, dtype=float)
    if t_eval.ndim != 1 or t_eval.size == 0:
        raise InvalidConfiguration("t_eval must be a non-empty 1D array")
    if not np.all(np.isfinite(t_eval)):
        raise InvalidConfiguration("t_eval must be finite")
    if t_eval.size > 1 and np.any(np.diff(t_eval) <= 0):
        raise InvalidConfiguration("t_eval must be strictly increasing")
    return t_eval


def _check_trajectory(Y, t_eval, total, conservation_rtol):
    """Raise NumericalInstability on non-finite rows or population drift."""
    finite_rows = np.all(np.isfinite(Y), axis=1)
    if not np.all(finite_rows):
        t_bad = t_eval[np.argmin(finite_rows)]
        raise NumericalInstability(f"non-finite state at t={t_bad:.6g}")

    drift = np.abs(Y.sum(axis=1) - total)
    limit = conservation_rtol * max(abs(total), 1.0)
    if np.any(drift > limit):
        i = int(np.argmax(drift))
        raise NumericalInstability(
            f"population drifted by {drift[i]:.3e} (limit {limit:.3e}) at t={t_eval[i]:.6g}"
        )


def _rk4_substeps(t_eval, step_size):
    """Number of equal sub-steps for each reporting interval."""
    dts = np.diff(t_eval)
    return [max(1, int(math.ceil(dt / step_size - 1e-9))) for dt in dts]

# END OF HELPERS
# -----------------------------------


def solve_rk4(fun, y0, t_eval, step_size=0.1):
    """
    Classical 4th-order Runge-Kutta with a fixed internal step.

    Each interval [t_eval[i], t_eval[i+1]] is split into
    ``ceil(dt / step_size)`` equal sub-steps, so the reporting times are
    hit exactly. The state is checked for finiteness after every step.

    Returns
    -------
    np.ndarray
        A (T, n) array of states at `t_eval`.
    """
    t_eval = _check_time_grid(t_eval)
    y = np.array(y0, dtype=float)
    Y = np.empty((t_eval.size, y.size), dtype=float)
    Y[0] = y

    for i, n_sub in enumerate(_rk4_substeps(t_eval, step_size)):
        t0 = t_eval[i]
        h = (t_eval[i + 1] - t0) / n_sub
        for k in range(n_sub):
            t = t0 + k * h
            k1 = fun(t, y)
            k2 = fun(t + h / 2, y + h / 2 * k1)
            k3 = fun(t + h / 2, y + h / 2 * k2)
            k4 = fun(t + h, y + h * k3)
            y = y + (h / 6) * (k1 + 2 * k2 + 2 * k3 + k4)
            if not np.all(np.isfinite(y)):
                raise NumericalInstability(f"non-finite state at t={t + h:.6g}")
        Y[i + 1] = y
    return Y


def integrate(
    fun,
    y0,
    t_eval,
    method=DEFAULT_METHOD,
    rtol=1e-9,
    atol=1e-6,
    step_size=0.1,
    max_step=1.0,
    max_nfev=DEFAULT_MAX_NFEV,
    conservation_rtol=1e-6,
):
    """
    Advances `y0` over `t_eval` and returns the states at those times.

    Parameters
    ----------
    fun : callable
        Right-hand side ``fun(t, y) -> dy/dt``.
    y0 : array_like
        Initial state at ``t_eval[0]``. Not modified.
    t_eval : array_like
        Strictly increasing reporting times.
    method : str, optional
        ``"RK4"`` or any `solve_ivp` method name.
    rtol, atol : float, optional
        Tolerances of the adaptive `solve_ivp` methods.
    step_size : float, optional
        Maximal internal step of ``"RK4"``.
    max_step : float, optional
        Maximal internal step of the `solve_ivp` methods.
    max_nfev : int, optional
        Budget of right-hand-side evaluations for the whole run.
    conservation_rtol : float, optional
        Allowed drift of the state total, relative to its initial value.

    Returns
    -------
    np.ndarray
        A (T, n) array of the state at each time in `t_eval`.

    Raises
    ------
    InvalidConfiguration
        On an unknown method or invalid solver settings.
    NumericalInstability
        If the state becomes non-finite or its total drifts.
    IntegrationNonConvergence
        If the solver fails or `max_nfev` is exhausted.
    """
    t_eval = _check_time_grid(t_eval)
    y0 = np.array(y0, dtype=float)
    if not np.all(np.isfinite(y0)):
        raise NumericalInstability(f"non-finite initial state {y0}")
    if max_nfev <= 0:
        raise InvalidConfiguration(f"max_nfev must be positive, got {max_nfev}")

    total = float(y0.sum())
    if t_eval.size == 1:
        return y0[np.newaxis, :].copy()

    rhs = _BudgetedRhs(fun, max_nfev)

    if method in FIXED_STEP_METHODS:
        if not step_size > 0:
            raise InvalidConfiguration(f"step_size must be positive, got {step_size}")
        needed = 4 * sum(_rk4_substeps(t_eval, step_size))
        if needed > max_nfev:
            raise IntegrationNonConvergence(
                f"RK4 with step {step_size} needs {needed} evaluations, budget is {max_nfev}"
            )
        Y = solve_rk4(rhs, y0, t_eval, step_size=step_size)

    elif method in SOLVE_IVP_METHODS:
        sol = solve_ivp(
            fun=rhs,
            t_span=(t_eval[0], t_eval[-1]),
            y0=y0,
            t_eval=t_eval,
            method=method,
            rtol=rtol,
            atol=atol,
            max_step=max_step,
        )
        if not sol.success:
            raise IntegrationNonConvergence(f"ODE failed: {sol.message}")
        Y = sol.y.T  # shape (T, n)

    else:
        raise InvalidConfiguration(
            f"unknown method {method!r}; choose from {FIXED_STEP_METHODS + SOLVE_IVP_METHODS}"
        )

    _check_trajectory(Y, t_eval, total, conservation_rtol)
    return Y
