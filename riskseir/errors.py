"""
Error types raised by the simulation core.

Each error subclasses the builtin the rest of the code would otherwise
raise (`ValueError` for bad inputs, `RuntimeError` for ODE failures), so
callers can catch either the specific type or the builtin.
"""
from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error that terminates a scenario run."""


class InvalidScenario(SimulationError, ValueError):
    """Scenario identifier outside {1, 2, 3, 4}."""


class InvalidConfiguration(SimulationError, ValueError):
    """Population, fractions, initial counts or rates are out of range."""


class NumericalInstability(SimulationError, RuntimeError):
    """State became non-finite or the population total drifted."""


class IntegrationNonConvergence(SimulationError, RuntimeError):
    """The solver failed or ran out of its evaluation budget."""
