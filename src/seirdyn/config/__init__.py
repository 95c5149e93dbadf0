"""seirdyn configuration module."""

from .params import InitialState, ModelParams, SolverParams, StepperName
from .simulation_config import SimulationConfig

__all__ = [
    "SimulationConfig",
    "InitialState",
    "ModelParams",
    "SolverParams",
    "StepperName",
]
