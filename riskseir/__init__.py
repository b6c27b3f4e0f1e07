"""Two-risk-group SEIRD model under behavioural intervention scenarios"""

from .config import ModelConfig, DEFAULT_CONFIG, load_config
from .errors import (
    SimulationError,
    InvalidScenario,
    InvalidConfiguration,
    NumericalInstability,
    IntegrationNonConvergence,
)
from .scenarios import ScenarioParameters, SCENARIOS, SCENARIO_LABELS, scenario_parameters
from .state import COMPARTMENTS, initial_state
from .model import seird_hl_rhs
from .integrate import integrate
from .simulate import simulate, run_scenarios

__all__ = [
    'ModelConfig',
    'DEFAULT_CONFIG',
    'load_config',
    'SimulationError',
    'InvalidScenario',
    'InvalidConfiguration',
    'NumericalInstability',
    'IntegrationNonConvergence',
    'ScenarioParameters',
    'SCENARIOS',
    'SCENARIO_LABELS',
    'scenario_parameters',
    'COMPARTMENTS',
    'initial_state',
    'seird_hl_rhs',
    'integrate',
    'simulate',
    'run_scenarios',
]
