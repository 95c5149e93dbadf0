import json

import pytest
from pydantic import ValidationError

from seirdyn.config import (
    InitialState,
    ModelParams,
    SimulationConfig,
    SolverParams,
)


def test_simulation_config_defaults():
    config = SimulationConfig()
    assert config.duration_days == 100
    assert config.initial_state == InitialState()
    assert config.parameters == ModelParams()
    assert config.solver_params == SolverParams()


def test_simulation_config_from_partial_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "duration_days": 200,
                "parameters": {"beta": 0.4, "vaccination_rate": 0.001},
                "solver_params": {"method": "RK4"},
            }
        )
    )
    config = SimulationConfig.from_json(path)
    assert config.duration_days == 200
    assert config.parameters.beta == 0.4
    assert config.parameters.vaccination_rate == 0.001
    # unspecified values keep their defaults
    assert config.parameters.sigma == 0.2
    assert config.solver_params.method == "RK4"
    assert config.initial_state == InitialState()


def test_simulation_config_json_round_trip(tmp_path):
    config = SimulationConfig(
        duration_days=42,
        initial_state=InitialState(S=999.0, E=0.0, I=1.0),
        parameters=ModelParams(mu=0.02, waning_immunity_rate=0.01),
        solver_params=SolverParams(method="Euler", initial_step_size=0.5),
    )
    path = tmp_path / "config.json"
    config.to_json(path)
    assert SimulationConfig.from_json(path) == config


@pytest.mark.parametrize(
    "data",
    [
        {"duration_days": 0},
        {"parameters": {"gamma": -0.1}},
        {"initial_state": {"S": -5.0}},
        {"solver_params": {"method": "implicit"}},
        {"unknown": 1},
    ],
)
def test_simulation_config_invalid(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data))
    with pytest.raises(ValidationError):
        SimulationConfig.from_json(path)
