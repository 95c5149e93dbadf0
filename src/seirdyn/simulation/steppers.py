"""Explicit one-step integrators for the SEIRD ODEs.

Available steppers
------------------
- `euler_step`: first order explicit Euler, one RHS evaluation.
- `rk4_step`: classical fourth order Runge-Kutta, four RHS evaluations.
- `rk45_step`: adaptive Dormand-Prince 4(5), seven RHS evaluations, updates
  the step size and an `IntegrationStats` record.

Every stepper validates its inputs in python and then runs a jitted kernel,
kernels themselves never raise. States are immutable jax arrays, so each
stepper returns the advanced state instead of modifying its argument.
"""

import logging
from functools import partial
from typing import Tuple

import chex
import jax
import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from ..typing import (
    BatchState,
    InvalidStepSizeError,
    RHS_Eqns,
    SEIRDState,
)
from .seird_ode import (
    SEIRDParams,
    seird_ode,
    seird_ode_batch,
    validate_batch,
    validate_state,
)

logger = logging.getLogger("seirdyn")

# step size control of the adaptive stepper
SAFETY_FACTOR = 0.9
MIN_FACTOR = 0.1
MAX_FACTOR = 5.0
ERROR_EXPONENT = 0.2  # 1 / (embedded order + 1)
MIN_STEP_SIZE = 1e-8

# Dormand-Prince 5(4) Butcher tableau, row k builds the input of stage k+1
DORMAND_PRINCE_A = (
    (),
    (1 / 5,),
    (3 / 40, 9 / 40),
    (44 / 45, -56 / 15, 32 / 9),
    (19372 / 6561, -25360 / 2187, 64448 / 6561, -212 / 729),
    (9017 / 3168, -355 / 33, 46732 / 5247, 49 / 176, -5103 / 18656),
    (35 / 384, 0.0, 500 / 1113, 125 / 192, -2187 / 6784, 11 / 84),
)
DORMAND_PRINCE_B5 = (
    35 / 384,
    0.0,
    500 / 1113,
    125 / 192,
    -2187 / 6784,
    11 / 84,
    0.0,
)
DORMAND_PRINCE_B4 = (
    5179 / 57600,
    0.0,
    7571 / 16695,
    393 / 640,
    -92097 / 339200,
    187 / 2100,
    1 / 40,
)


@chex.dataclass
class IntegrationStats:
    """Running statistics of the adaptive stepper.

    One instance belongs to one run (or one population), it is only ever
    written to by `rk45_step`.
    """

    steps_taken: int = 0
    rejected_steps: int = 0
    max_error: float = 0.0


def _validate_step_size(dt: float) -> float:
    dt = float(dt)
    if not np.isfinite(dt) or dt <= 0.0:
        raise InvalidStepSizeError(
            f"step size must be a finite positive number, got {dt}"
        )
    return dt


def _validate_tolerances(abstol: float, reltol: float) -> Tuple[float, float]:
    abstol, reltol = float(abstol), float(reltol)
    for name, tol in (("abstol", abstol), ("reltol", reltol)):
        if not np.isfinite(tol) or tol <= 0.0:
            raise InvalidStepSizeError(
                f"{name} must be a finite positive number, got {tol}"
            )
    return abstol, reltol


def _linear_combination(coefficients, stages) -> Array:
    # zero coefficients are skipped at trace time
    return sum(
        (c * k for c, k in zip(coefficients, stages) if c != 0.0),
        jnp.zeros_like(stages[0]),
    )


@partial(jax.jit, static_argnums=0)
def _euler_update(rhs: RHS_Eqns, y: Array, dt: float, p: SEIRDParams):
    return y + dt * rhs(y, p)


@partial(jax.jit, static_argnums=0)
def _rk4_update(rhs: RHS_Eqns, y: Array, dt: float, p: SEIRDParams):
    k1 = rhs(y, p)
    k2 = rhs(y + 0.5 * dt * k1, p)
    k3 = rhs(y + 0.5 * dt * k2, p)
    k4 = rhs(y + dt * k3, p)
    return y + dt * (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0


def _dormand_prince(y: Array, dt: float, p: SEIRDParams):
    stages = [seird_ode(y, p)]
    for row in DORMAND_PRINCE_A[1:]:
        stages.append(seird_ode(y + dt * _linear_combination(row, stages), p))
    y5 = y + dt * _linear_combination(DORMAND_PRINCE_B5, stages)
    y4 = y + dt * _linear_combination(DORMAND_PRINCE_B4, stages)
    return y5, y4


_dormand_prince_jit = jax.jit(_dormand_prince)


@jax.jit
def _step_control(
    y: Array, y5: Array, y4: Array, dt: float, abstol: float, reltol: float
):
    error = jnp.max(jnp.abs(y5 - y4))
    tolerance = jnp.maximum(abstol, reltol * jnp.max(jnp.abs(y)))
    accepted = error <= tolerance

    # error == 0 would divide by zero, grow the step as much as allowed
    degenerate = error == 0.0
    safe_error = jnp.where(degenerate, 1.0, error)
    factor = (
        SAFETY_FACTOR
        * (jnp.maximum(abstol, safe_error) / safe_error) ** ERROR_EXPONENT
    )
    factor = jnp.where(
        accepted,
        jnp.clip(factor, MIN_FACTOR, MAX_FACTOR),
        jnp.maximum(factor, MIN_FACTOR),
    )
    factor = jnp.where(degenerate, MAX_FACTOR, factor)
    # a nan or inf error estimate means the step blew up, shrink hard
    factor = jnp.where(jnp.isfinite(error), factor, MIN_FACTOR)

    new_dt = jnp.maximum(dt * factor, MIN_STEP_SIZE)
    new_y = jnp.where(accepted, y5, y)
    return new_y, new_dt, error, accepted


def euler_step(state: ArrayLike, dt: float, p: SEIRDParams) -> SEIRDState:
    """Perform a single explicit Euler step, `y + dt * f(y)`.

    First order accurate, there is no error estimate and no rejection.
    Large `dt` or fast rates may make the solution diverge.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes.
    dt : float
        step size in days, strictly positive.
    p : SEIRDParams
        rates of the model.

    Returns
    -------
    SEIRDState
        the state advanced by `dt`.

    Raises
    ------
    InvalidDimensionError
        if `state` does not hold exactly 5 values.
    InvalidStepSizeError
        if `dt` is not a finite positive number.
    """
    state = validate_state(state)
    dt = _validate_step_size(dt)
    return _euler_update(seird_ode_batch, state[:, None], dt, p)[:, 0]


def rk4_step(state: ArrayLike, dt: float, p: SEIRDParams) -> SEIRDState:
    """Perform a single classical fourth order Runge-Kutta step.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes.
    dt : float
        step size in days, strictly positive.
    p : SEIRDParams
        rates of the model.

    Returns
    -------
    SEIRDState
        the state advanced by `dt`.

    Raises
    ------
    InvalidDimensionError
        if `state` does not hold exactly 5 values.
    InvalidStepSizeError
        if `dt` is not a finite positive number.
    """
    state = validate_state(state)
    dt = _validate_step_size(dt)
    return _rk4_update(seird_ode_batch, state[:, None], dt, p)[:, 0]


def euler_step_batch(
    states: ArrayLike, dt: float, p: SEIRDParams
) -> BatchState:
    """Explicit Euler step of a (5, num_populations) batch of states."""
    states = validate_batch(states)
    dt = _validate_step_size(dt)
    if states.shape[1] == 0:
        return states
    return _euler_update(seird_ode_batch, states, dt, p)


def rk4_step_batch(
    states: ArrayLike, dt: float, p: SEIRDParams
) -> BatchState:
    """Classical RK4 step of a (5, num_populations) batch of states.

    Each population is advanced independently, column `k` of the result
    matches `rk4_step` applied to column `k` of `states`.
    """
    states = validate_batch(states)
    dt = _validate_step_size(dt)
    if states.shape[1] == 0:
        return states
    return _rk4_update(seird_ode_batch, states, dt, p)


def dormand_prince_pair(
    state: ArrayLike, dt: float, p: SEIRDParams
) -> Tuple[SEIRDState, SEIRDState]:
    """Get the embedded fifth and fourth order estimates of one step.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes.
    dt : float
        step size in days, strictly positive.
    p : SEIRDParams
        rates of the model.

    Returns
    -------
    tuple[SEIRDState, SEIRDState]
        `(y5, y4)`, the fifth order solution and the fourth order solution
        sharing the same seven stage evaluations.
    """
    state = validate_state(state)
    dt = _validate_step_size(dt)
    return _dormand_prince_jit(state, dt, p)


def rk45_step(
    state: ArrayLike,
    dt: float,
    p: SEIRDParams,
    abstol: float,
    reltol: float,
    stats: IntegrationStats,
) -> Tuple[SEIRDState, float, bool]:
    """Perform one adaptive Dormand-Prince 4(5) step.

    The local error is the infinity norm of the difference between the
    fifth and fourth order estimates. The step is accepted when that error
    is at most `max(abstol, reltol * max|y|)`, in which case the fifth order
    estimate is returned, otherwise `state` is returned unchanged.

    The next step size is `dt * 0.9 * (max(abstol, err) / err) ** 0.2`,
    with the factor clamped to [0.1, 5] after an accepted step and bounded
    below by 0.1 after a rejected one, and never below 1e-8. A zero error
    grows the step by the maximal factor.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes.
    dt : float
        step size to attempt, strictly positive.
    p : SEIRDParams
        rates of the model.
    abstol : float
        absolute tolerance, strictly positive.
    reltol : float
        relative tolerance, strictly positive.
    stats : IntegrationStats
        updated in place: `steps_taken` on every call, `rejected_steps` on
        rejection, `max_error` with the running maximum of the error.

    Returns
    -------
    tuple[SEIRDState, float, bool]
        the new state, the step size to attempt next, and whether the step
        was accepted. A rejected step does not advance time.

    Raises
    ------
    InvalidDimensionError
        if `state` does not hold exactly 5 values.
    InvalidStepSizeError
        if `dt`, `abstol` or `reltol` is not a finite positive number.
    """
    state = validate_state(state)
    dt = _validate_step_size(dt)
    abstol, reltol = _validate_tolerances(abstol, reltol)

    # the pair comes from the same kernel as dormand_prince_pair
    y5, y4 = _dormand_prince_jit(state, dt, p)
    new_state, new_dt, error, accepted = _step_control(
        state, y5, y4, dt, abstol, reltol
    )
    error = float(error)
    accepted = bool(accepted)
    new_dt = float(new_dt)

    stats.steps_taken += 1
    stats.max_error = max(stats.max_error, error)
    if error == 0.0:
        logger.debug(
            f"zero local error at dt={dt}, growing step to {new_dt}"
        )
    if not accepted:
        stats.rejected_steps += 1
        logger.debug(
            f"rejected step dt={dt} with error {error}, retrying with "
            f"dt={new_dt}"
        )
    return new_state, new_dt, accepted


STEPPERS = {
    "Euler": euler_step,
    "RK4": rk4_step,
    "RK45": rk45_step,
}
