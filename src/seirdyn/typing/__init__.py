"""A module for typing utilities in seirdyn."""

from .typing import (
    NUM_COMPARTMENTS,
    BatchGradients,
    BatchState,
    Compartment,
    InvalidDimensionError,
    InvalidStepSizeError,
    RHS_Eqns,
    SEIRDError,
    SEIRDGradients,
    SEIRDState,
    StepLimitExceededError,
    UnitIntervalFloat,
)

__all__ = [
    "SEIRDState",
    "SEIRDGradients",
    "BatchState",
    "BatchGradients",
    "Compartment",
    "NUM_COMPARTMENTS",
    "RHS_Eqns",
    "UnitIntervalFloat",
    "SEIRDError",
    "InvalidDimensionError",
    "InvalidStepSizeError",
    "StepLimitExceededError",
]
