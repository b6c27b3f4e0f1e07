import matplotlib

matplotlib.use("Agg")

import pytest

from riskseir.config import ModelConfig


@pytest.fixture
def config() -> ModelConfig:
    """Default configuration (N=1e6, 33% high-risk, E0=100, I0=10, f=0.85)."""
    return ModelConfig()


@pytest.fixture
def params_yaml(tmp_path):
    """A small params.yaml for the entry-point scripts."""
    path = tmp_path / "params.yaml"
    path.write_text(
        """
population:
  N: 100000
  fraction_high_risk: 0.4
  initial_exposed: 50
  initial_infected: 5
behaviour:
  interacting_fraction: 0.8
rates:
  beta: 0.2
simulation:
  total_time: 60
  scenarios: [1, 2, 3, 4]
  method: DOP853
sensitivity:
  scenario: 1
  total_time: 60
  N: 2
  levels: 4
  names: [beta, interacting_fraction]
  bounds:
    - [0.1, 0.3]
    - [0.5, 1.0]
"""
    )
    return path
