"""Module for declaring types to be used within seirdyn."""

from enum import IntEnum
from typing import Callable

import jax
from annotated_types import Ge, Le
from jaxtyping import PyTree
from typing_extensions import Annotated

# a single population, shape (5,) ordered S, E, I, R, D
SEIRDState = jax.Array
SEIRDGradients = jax.Array
# many independent populations, shape (5, num_populations), one per column
BatchState = jax.Array
BatchGradients = jax.Array

NUM_COMPARTMENTS = 5

UnitIntervalFloat = Annotated[float, Ge(0.0), Le(1.0)]

RHS_Eqns = Callable[[SEIRDState, PyTree], SEIRDGradients]


class Compartment(IntEnum):
    """Index of each compartment within a state vector."""

    S = 0
    E = 1
    I = 2  # noqa: E741
    R = 3
    D = 4

    @property
    def label(self) -> str:
        """Human readable compartment name."""
        return _LABELS[self]


_LABELS = {
    Compartment.S: "Susceptible",
    Compartment.E: "Exposed",
    Compartment.I: "Infectious",
    Compartment.R: "Recovered",
    Compartment.D: "Deceased",
}


class SEIRDError(Exception):
    """Base class for every error raised by seirdyn."""

    pass


class InvalidDimensionError(SEIRDError, ValueError):
    """A state, derivative or batch does not have the expected shape."""

    pass


class InvalidStepSizeError(SEIRDError, ValueError):
    """A step size or tolerance given to a stepper is not positive."""

    pass


class StepLimitExceededError(SEIRDError, RuntimeError):
    """The daily driver ran out of stepper calls before finishing a run."""

    pass
