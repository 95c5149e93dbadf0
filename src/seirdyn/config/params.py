"""Module containing Parameter classes for storing seirdyn parameters."""

from typing import Literal

import jax.numpy as jnp
from jax import Array
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveFloat,
    PositiveInt,
)

from ..typing import UnitIntervalFloat

StepperName = Literal["Euler", "RK4", "RK45"]


class ModelParams(BaseModel):
    """Epidemiological rates and population size of a SEIRD model.

    All rates are per day. Fields are immutable once the model is built, a
    new ModelParams must be created to change a run's parameters.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
    beta: NonNegativeFloat = Field(
        default=0.5,
        description="""Transmission rate, contacts per person per day that
        lead to infection when an infectious and a susceptible person meet.""",
    )
    sigma: NonNegativeFloat = Field(
        default=0.2,
        description="""Incubation rate, 1 / average incubation period.""",
    )
    gamma: NonNegativeFloat = Field(
        default=0.1,
        description="""Recovery rate, 1 / average infectious period.""",
    )
    mu: NonNegativeFloat = Field(
        default=0.01, description="""Disease induced mortality rate."""
    )
    N: PositiveFloat = Field(
        default=1000.0,
        description="""Total population size, used for reporting. The
        mixing denominator of the ODEs is the live S+E+I+R.""",
    )
    vaccination_rate: NonNegativeFloat = Field(
        default=0.0,
        description="""Fraction of susceptibles vaccinated per day, moved
        directly from S to R.""",
    )
    contact_rate: NonNegativeFloat = Field(
        default=1.0,
        description="""Multiplier on beta, average number of contacts per
        person per day.""",
    )
    waning_immunity_rate: NonNegativeFloat = Field(
        default=0.0,
        description="""Rate at which recovered individuals return to S.""",
    )
    asymptomatic_fraction: UnitIntervalFloat = Field(
        default=0.0,
        description="""Fraction of infections that are asymptomatic. Carried
        for reporting, does not enter the ODEs.""",
    )
    hospitalization_rate: NonNegativeFloat = Field(
        default=0.0,
        description="""Hospitalization rate among infectious individuals.""",
    )
    mortality_rate_severe: NonNegativeFloat = Field(
        default=0.0,
        description="""Mortality rate among severe (hospitalized) cases,
        added on top of mu for the hospitalized share of I.""",
    )


class SolverParams(BaseModel):
    """Parameters used by the ODE stepper and the daily driver."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    method: StepperName = Field(
        default="RK45",
        description="""Which stepper to advance the state with. `Euler` and
        `RK4` take constant steps of `initial_step_size`, `RK45` is the
        adaptive Dormand-Prince 4(5) pair.""",
    )
    initial_step_size: PositiveFloat = Field(
        default=1.0,
        description="""Step size in days. Constant for fixed-step methods,
        starting value for the adaptive method.""",
    )
    abstol: PositiveFloat = Field(
        default=1e-8,
        description="""Absolute tolerance of the adaptive step sizer.""",
    )
    reltol: PositiveFloat = Field(
        default=1e-6,
        description="""Relative tolerance of the adaptive step sizer,
        scaled by the largest compartment of the state.""",
    )
    max_steps: PositiveInt = Field(
        default=int(1e6),
        description="""The maximum number of stepper calls, rejected ones
        included, before the driver raises an error.""",
    )


class InitialState(BaseModel):
    """Compartment sizes at t=0."""

    model_config = ConfigDict(frozen=True, extra="forbid")
    S: NonNegativeFloat = 990.0
    E: NonNegativeFloat = 10.0
    I: NonNegativeFloat = 0.0  # noqa: E741
    R: NonNegativeFloat = 0.0
    D: NonNegativeFloat = 0.0

    def to_array(self) -> Array:
        """Get the state vector ordered S, E, I, R, D."""
        return jnp.array(
            [self.S, self.E, self.I, self.R, self.D], dtype=jnp.float64
        )
