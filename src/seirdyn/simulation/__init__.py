"""Module to hold the SEIRD flows, steppers and daily driver."""

from .odes import Trajectory, run_simulation, simulate
from .seird_ode import (
    EPSILON,
    SEIRDParams,
    get_odeparams,
    seird_ode,
    seird_ode_batch,
    seird_rhs,
    seird_rhs_batch,
    validate_batch,
    validate_state,
)
from .steppers import (
    MAX_FACTOR,
    MIN_FACTOR,
    MIN_STEP_SIZE,
    SAFETY_FACTOR,
    STEPPERS,
    IntegrationStats,
    dormand_prince_pair,
    euler_step,
    euler_step_batch,
    rk4_step,
    rk4_step_batch,
    rk45_step,
)

__all__ = [
    "simulate",
    "run_simulation",
    "Trajectory",
    "SEIRDParams",
    "get_odeparams",
    "seird_ode",
    "seird_ode_batch",
    "seird_rhs",
    "seird_rhs_batch",
    "validate_state",
    "validate_batch",
    "EPSILON",
    "IntegrationStats",
    "euler_step",
    "rk4_step",
    "rk45_step",
    "euler_step_batch",
    "rk4_step_batch",
    "dormand_prince_pair",
    "STEPPERS",
    "SAFETY_FACTOR",
    "MIN_FACTOR",
    "MAX_FACTOR",
    "MIN_STEP_SIZE",
]
