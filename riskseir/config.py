"""
Model configuration.

All inputs of a run (population split, initial seeding, behavioural
flags and the fixed epidemiological rates) live in one frozen
`ModelConfig`. It is built once, validated, and passed explicitly to
state and parameter construction; nothing in the model reads globals.

`load_config` turns a ``params.yaml`` file into a `ModelConfig` plus the
script settings blocks. It is meant for the entry-point scripts.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, asdict, fields
from pathlib import Path

import yaml

from .errors import InvalidConfiguration

# Sections of params.yaml that hold ModelConfig fields
CONFIG_SECTIONS = ("population", "behaviour", "rates")
# Sections read by the entry-point scripts only
SETTINGS_SECTIONS = ("simulation", "sensitivity")


@dataclass(frozen=True)
class ModelConfig:
    """Explicit configuration for the two-risk-group SEIRD model."""

    # Population
    N: float = 1_000_000.0
    fraction_high_risk: float = 0.33
    initial_exposed: float = 100.0
    initial_infected: float = 10.0

    # Behaviour
    interacting_fraction: float = 0.85  # f, share of normal contacts kept
    hri_reduced: bool = False           # infected high-risk uniformly less interactive
    hri_fraction: float = 0.5
    lri_reduced: bool = False           # infected low-risk uniformly less interactive
    lri_fraction: float = 0.5

    # Rates (per day)
    beta: float = 0.134
    sigma_h: float = 0.192
    sigma_l: float = 0.192
    gamma_h: float = 0.08071
    gamma_l: float = 0.08071
    mu_h: float = 0.002
    mu_l: float = 0.0

    def validate(self) -> "ModelConfig":
        """Raise `InvalidConfiguration` if any input is out of range."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool):
                continue
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidConfiguration(f"{f.name} must be a finite number, got {value!r}")

        if self.N <= 0:
            raise InvalidConfiguration(f"population N must be positive, got {self.N}")

        for name in ("fraction_high_risk", "interacting_fraction", "hri_fraction", "lri_fraction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} must lie in [0, 1], got {value}")

        if self.initial_exposed < 0 or self.initial_infected < 0:
            raise InvalidConfiguration("initial exposed/infected counts must be non-negative")
        if self.initial_exposed + self.initial_infected > self.N:
            raise InvalidConfiguration(
                f"initial exposed + infected ({self.initial_exposed + self.initial_infected}) "
                f"exceeds population N={self.N}"
            )

        for name in ("beta", "sigma_h", "sigma_l", "gamma_h", "gamma_l", "mu_h", "mu_l"):
            if getattr(self, name) < 0:
                raise InvalidConfiguration(f"rate {name} must be non-negative, got {getattr(self, name)}")
        return self

    @classmethod
    def from_dict(cls, d: dict) -> "ModelConfig":
        """Build from a flat mapping or from the nested params.yaml sections.

        Keys missing from `d` keep their defaults; unknown keys are rejected.
        """
        flat = {}
        for key, value in d.items():
            if key in CONFIG_SECTIONS and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value

        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(flat) - set(known))
        if unknown:
            raise InvalidConfiguration(f"unknown configuration keys: {unknown}")

        kwargs = {}
        for key, value in flat.items():
            if known[key].type in ("bool", bool):
                if not isinstance(value, bool):
                    raise InvalidConfiguration(f"{key} must be true or false, got {value!r}")
                kwargs[key] = value
            else:
                try:
                    kwargs[key] = float(value)
                except (TypeError, ValueError):
                    raise InvalidConfiguration(f"{key} must be numeric, got {value!r}") from None
        return cls(**kwargs).validate()

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_CONFIG = ModelConfig()


def load_config(path):
    """Reads a params.yaml file.

    Parameters
    ----------
    path : str or Path
        YAML file with optional ``population``, ``behaviour`` and
        ``rates`` sections for the model, plus script settings
        sections (``simulation``, ``sensitivity``).

    Returns
    -------
    tuple (ModelConfig, dict)
        The validated configuration and a dict of the settings
        sections, keyed by section name (empty dicts when absent).

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    InvalidConfiguration
        If the file content is not a mapping or holds bad values.
    """
    path = Path(path)
    with open(path, "r") as f:
        params = yaml.safe_load(f) or {}
    if not isinstance(params, dict):
        raise InvalidConfiguration(f"{path} must contain a mapping at top level")

    params = dict(params)
    settings = {name: dict(params.pop(name, None) or {}) for name in SETTINGS_SECTIONS}
    return ModelConfig.from_dict(params), settings
