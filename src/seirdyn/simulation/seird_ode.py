"""SEIRD right hand side, for one population and for a batch of them."""

from typing import Optional

import chex
import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ..config import ModelParams
from ..typing import (
    NUM_COMPARTMENTS,
    BatchGradients,
    InvalidDimensionError,
    SEIRDGradients,
    SEIRDState,
)

# floor of the mixing denominator S+E+I+R
EPSILON = 1e-12


@chex.dataclass(frozen=True)
class SEIRDParams:
    """The internal representation of the parameters passed to the ODEs.

    A jax pytree, so it may be passed through `jax.jit` and `jax.vmap`.
    Build one from a validated `ModelParams` with `get_odeparams`.
    """

    beta: float = 0.5
    sigma: float = 0.2
    gamma: float = 0.1
    mu: float = 0.01
    N: float = 1000.0
    vaccination_rate: float = 0.0
    contact_rate: float = 1.0
    waning_immunity_rate: float = 0.0
    asymptomatic_fraction: float = 0.0
    hospitalization_rate: float = 0.0
    mortality_rate_severe: float = 0.0


def get_odeparams(model_params: ModelParams) -> SEIRDParams:
    """Transform validated model parameters into ODE parameters."""
    return SEIRDParams(**model_params.model_dump())


def seird_ode(state: SEIRDState, p: SEIRDParams) -> SEIRDGradients:
    """Set of flows defining the SEIRD model with vaccination and waning.

    Parameters
    ----------
    state : SEIRDState
        array of shape (5,) holding the S, E, I, R and D compartments.
    p : SEIRDParams
        rates of the model.

    Returns
    -------
    SEIRDGradients
        array of shape (5,), the rate of change of each compartment.

    Note
    ----
    No validation is done here, this is the function traced inside every
    stepper. Use `seird_rhs` for a checked entry point.

    The equations are::

        dS/dt = -beta*c*S*I/N - v*S + w*R
        dE/dt =  beta*c*S*I/N - sigma*E
        dI/dt =  sigma*E - (gamma + mu)*I
        dR/dt =  gamma*I + v*S - w*R
        dD/dt =  mu*I + m_severe*h*I

    where N = max(S+E+I+R, EPSILON).
    """
    s, e, i, r, _ = state
    n = jnp.maximum(s + e + i + r, EPSILON)

    infection = p.beta * p.contact_rate * s * i / n
    vaccinated = p.vaccination_rate * s
    waned = p.waning_immunity_rate * r

    ds = -infection - vaccinated + waned
    de = infection - p.sigma * e
    di = p.sigma * e - (p.gamma + p.mu) * i
    dr = p.gamma * i + vaccinated - waned
    dd = p.mu * i + p.mortality_rate_severe * p.hospitalization_rate * i
    return jnp.stack([ds, de, di, dr, dd])


# columns are populations, every column sees the same parameters. Single
# populations also go through it, as a batch of one.
seird_ode_batch = jax.vmap(seird_ode, in_axes=(1, None), out_axes=1)

_seird_ode_batch_jit = jax.jit(seird_ode_batch)


def validate_state(state: ArrayLike) -> Array:
    """Convert `state` to a float64 array of shape (5,).

    Raises
    ------
    InvalidDimensionError
        if `state` does not hold exactly 5 values in a flat vector.
    """
    state = jnp.asarray(state, dtype=jnp.float64)
    if state.shape != (NUM_COMPARTMENTS,):
        raise InvalidDimensionError(
            f"a SEIRD state must have shape ({NUM_COMPARTMENTS},), "
            f"got {state.shape}"
        )
    return state


def validate_batch(
    states: ArrayLike, num_populations: Optional[int] = None
) -> Array:
    """Convert `states` to a float64 array of shape (5, num_populations).

    Raises
    ------
    InvalidDimensionError
        if `states` is not two dimensional with 5 rows, or if
        `num_populations` is given and does not match the column count.
    """
    states = jnp.asarray(states, dtype=jnp.float64)
    if states.ndim != 2 or states.shape[0] != NUM_COMPARTMENTS:
        raise InvalidDimensionError(
            f"a batch of SEIRD states must have shape "
            f"({NUM_COMPARTMENTS}, num_populations), got {states.shape}"
        )
    if num_populations is not None and states.shape[1] != num_populations:
        raise InvalidDimensionError(
            f"expected {num_populations} populations, "
            f"got {states.shape[1]}"
        )
    return states


def seird_rhs(state: ArrayLike, p: SEIRDParams) -> SEIRDGradients:
    """Evaluate the SEIRD derivative of a single population.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes, exactly 5 values.
    p : SEIRDParams
        rates of the model.

    Returns
    -------
    SEIRDGradients
        array of shape (5,), bit for bit equal to the matching column of
        `seird_rhs_batch`. `state` is not modified.

    Raises
    ------
    InvalidDimensionError
        if `state` does not hold exactly 5 values.
    """
    state = validate_state(state)
    return _seird_ode_batch_jit(state[:, None], p)[:, 0]


def seird_rhs_batch(
    states: ArrayLike,
    p: SEIRDParams,
    num_populations: Optional[int] = None,
) -> BatchGradients:
    """Evaluate the SEIRD derivative of many independent populations.

    Column `k` of the result only depends on column `k` of `states` and on
    `p`, so the evaluation is vectorized over populations with `jax.vmap`
    and carries no state between columns.

    Parameters
    ----------
    states : ArrayLike
        array of shape (5, num_populations), one state per column.
    p : SEIRDParams
        rates shared by every population.
    num_populations : int, optional
        expected number of columns, checked when given.

    Returns
    -------
    BatchGradients
        array of shape (5, num_populations).

    Raises
    ------
    InvalidDimensionError
        if `states` is not a (5, num_populations) array.
    """
    states = validate_batch(states, num_populations)
    if states.shape[1] == 0:
        return jnp.zeros_like(states)
    return _seird_ode_batch_jit(states, p)
