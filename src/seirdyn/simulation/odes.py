"""Daily driver advancing a SEIRD state with one of the steppers."""

import logging
from typing import Optional

import chex
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ..config import SimulationConfig, SolverParams
from ..typing import StepLimitExceededError
from ..utils.log_decorator import log_decorator
from .seird_ode import SEIRDParams, get_odeparams, validate_state
from .steppers import STEPPERS, IntegrationStats, rk45_step

logger = logging.getLogger("seirdyn")

# remaining time within a day below which the day counts as finished
_DAY_ROUNDING = 1e-12


@chex.dataclass
class Trajectory:
    """States of a run sampled at the end of every simulated day.

    `days` has shape (duration_days + 1,) starting at day 0, `states` has
    shape (duration_days + 1, 5) with the initial state in row 0.
    """

    days: Array
    states: Array
    stats: IntegrationStats
    method: str


def _advance_day(
    state: Array,
    dt: float,
    p: SEIRDParams,
    solver_parameters: SolverParams,
    stats: IntegrationStats,
    calls: int,
):
    """Integrate `state` over one day, returning (state, dt, calls)."""
    method = solver_parameters.method
    t = 0.0
    while 1.0 - t > _DAY_ROUNDING:
        if calls >= solver_parameters.max_steps:
            raise StepLimitExceededError(
                f"reached max_steps={solver_parameters.max_steps} stepper "
                f"calls, increase max_steps or loosen the tolerances"
            )
        h = min(dt, 1.0 - t)
        calls += 1
        if method == "RK45":
            state, next_dt, accepted = rk45_step(
                state,
                h,
                p,
                solver_parameters.abstol,
                solver_parameters.reltol,
                stats,
            )
            if accepted:
                t += h
                # a step shortened to land on the day boundary says nothing
                # against the longer step, do not let it shrink dt
                dt = max(dt, next_dt) if h < dt else next_dt
            else:
                dt = next_dt
        else:
            state = STEPPERS[method](state, h, p)
            t += h
    return state, dt, calls


@log_decorator()
def simulate(
    initial_state: ArrayLike,
    ode_parameters: SEIRDParams,
    solver_parameters: Optional[SolverParams] = None,
    duration_days: int = 100,
) -> Trajectory:
    """Simulate the SEIRD model for `duration_days` days.

    Each day integrates the interval [d, d + 1]. Steps are shortened to land
    exactly on the day boundary. With the adaptive `RK45` method a rejected
    step does not advance time: the stepper is called again with the reduced
    step size until the day is complete, and the adapted step size carries
    over into the next day. Fixed-step methods use
    `solver_parameters.initial_step_size` as their constant step.

    Parameters
    ----------
    initial_state : ArrayLike
        S, E, I, R, D compartment sizes at day 0.
    ode_parameters : SEIRDParams
        rates of the model.
    solver_parameters : SolverParams, optional
        stepper choice, step size, tolerances and step budget, by default
        `SolverParams()`.
    duration_days : int, optional
        number of days to simulate, by default 100.

    Returns
    -------
    Trajectory
        the state at the end of every day and the integration statistics.

    Raises
    ------
    TypeError
        if `ode_parameters` is not a `SEIRDParams`.
    InvalidDimensionError
        if `initial_state` does not hold exactly 5 values.
    StepLimitExceededError
        if the run needs more than `solver_parameters.max_steps` calls.
    """
    if not isinstance(ode_parameters, SEIRDParams):
        raise TypeError(
            f"passed {type(ode_parameters)} ode parameters, expected "
            f"SEIRDParams, see get_odeparams()"
        )
    assert (
        isinstance(duration_days, int) and duration_days >= 0
    ), "duration_days must be a non-negative int"
    if solver_parameters is None:
        solver_parameters = SolverParams()

    state = validate_state(initial_state)
    stats = IntegrationStats()
    dt = solver_parameters.initial_step_size
    calls = 0
    states = [state]
    logger.info(
        f"simulating {duration_days} days with {solver_parameters.method}"
    )
    for day in range(1, duration_days + 1):
        state, dt, calls = _advance_day(
            state, dt, ode_parameters, solver_parameters, stats, calls
        )
        states.append(state)
        logger.debug(f"day {day}: {state}")

    if solver_parameters.method == "RK45":
        logger.info(
            f"{stats.steps_taken} steps taken, {stats.rejected_steps} "
            f"rejected, max local error {stats.max_error:.3e}"
        )
    return Trajectory(
        days=jnp.arange(duration_days + 1),
        states=jnp.stack(states),
        stats=stats,
        method=solver_parameters.method,
    )


def run_simulation(config: SimulationConfig) -> Trajectory:
    """Simulate the run described by a `SimulationConfig`."""
    return simulate(
        config.initial_state.to_array(),
        get_odeparams(config.parameters),
        solver_parameters=config.solver_params,
        duration_days=config.duration_days,
    )
