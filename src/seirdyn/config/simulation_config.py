"""Top level classes for seirdyn configs."""

import json
import os

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from .params import InitialState, ModelParams, SolverParams


class SimulationConfig(BaseModel):
    """A single SEIRD run: initial state, rates, stepper and duration."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    duration_days: PositiveInt = Field(
        default=100, description="""Number of days to simulate."""
    )
    initial_state: InitialState = Field(
        default_factory=InitialState,
        description="""Compartment sizes at day 0.""",
    )
    parameters: ModelParams = Field(
        default_factory=ModelParams,
        description="""Epidemiological rates of the model.""",
    )
    solver_params: SolverParams = Field(
        default_factory=SolverParams,
        description="""Stepper choice, step size and tolerances.""",
    )

    @classmethod
    def from_json(cls, path: str | os.PathLike) -> "SimulationConfig":
        """Read a SimulationConfig from a JSON file.

        Parameters
        ----------
        path : str | os.PathLike
            path to a JSON object whose keys match the fields of this class,
            every key is optional.

        Returns
        -------
        SimulationConfig
            validated configuration.

        Raises
        ------
        pydantic.ValidationError
            if any value fails validation.
        """
        with open(path, "r") as f:
            return cls.model_validate(json.load(f))

    def to_json(self, path: str | os.PathLike) -> None:
        """Write this config to `path` as JSON."""
        with open(path, "w") as f:
            f.write(self.model_dump_json(indent=2))
