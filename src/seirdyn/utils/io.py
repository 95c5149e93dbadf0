"""Reading and writing of states and trajectories."""

import os
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from jax.typing import ArrayLike

from ..typing import Compartment, InvalidDimensionError

if TYPE_CHECKING:
    from ..simulation import SEIRDParams, Trajectory

CSV_COLUMNS = [
    "Day",
    *[c.label for c in Compartment],
    "Vaccination",
    "Active",
    "InfectedRatio",
    "ContactRate",
    "WaningImmunity",
]


def save_output(filename: str | os.PathLike, values: ArrayLike) -> None:
    """Write a flat array of numbers to `filename`, one value per line.

    Any existing file is replaced.
    """
    np.savetxt(filename, np.ravel(np.asarray(values, dtype=np.float64)))


def load_input(filename: str | os.PathLike, size: int) -> np.ndarray:
    """Read the first `size` numbers written by `save_output`.

    Parameters
    ----------
    filename : str | os.PathLike
        text file holding one number per line.
    size : int
        how many values to read.

    Returns
    -------
    np.ndarray
        float64 array of shape (size,).

    Raises
    ------
    InvalidDimensionError
        if the file holds fewer than `size` values.
    """
    values = np.atleast_1d(np.loadtxt(filename, dtype=np.float64))
    if values.size < size:
        raise InvalidDimensionError(
            f"{filename} holds {values.size} values, expected at least {size}"
        )
    return values[:size]


def derived_statistics(
    states: ArrayLike, params: "SEIRDParams"
) -> pd.DataFrame:
    """Get the per-day indicators reported alongside the compartments.

    Parameters
    ----------
    states : ArrayLike
        array of shape (num_days, 5).
    params : SEIRDParams
        rates the states were simulated with.

    Returns
    -------
    pd.DataFrame
        columns Vaccination (S * vaccination_rate), Active
        (max(0, S+E+I+R)), InfectedRatio (percent of Active that is
        infectious, 0 when Active is 0), ContactRate and WaningImmunity.
    """
    states = np.asarray(states, dtype=np.float64)
    active = np.maximum(0.0, states[:, :4].sum(axis=1))
    safe_active = np.where(active > 0.0, active, 1.0)
    infected_ratio = np.where(
        active > 0.0, states[:, Compartment.I] / safe_active * 100.0, 0.0
    )
    return pd.DataFrame(
        {
            "Vaccination": states[:, Compartment.S]
            * float(params.vaccination_rate),
            "Active": active,
            "InfectedRatio": infected_ratio,
            "ContactRate": float(params.contact_rate),
            "WaningImmunity": float(params.waning_immunity_rate),
        }
    )


def trajectory_to_dataframe(
    trajectory: "Trajectory", params: "SEIRDParams"
) -> pd.DataFrame:
    """Flatten a trajectory into one row per simulated day.

    Day 0, the initial state, is not included.
    """
    days = np.asarray(trajectory.days)[1:].astype(int)
    states = np.asarray(trajectory.states)[1:]
    compartments = pd.DataFrame(
        states, columns=[c.label for c in Compartment]
    )
    df = pd.concat(
        [
            pd.DataFrame({"Day": days}),
            compartments,
            derived_statistics(states, params),
        ],
        axis=1,
    )
    return df[CSV_COLUMNS]


def export_csv(
    trajectory: "Trajectory",
    params: "SEIRDParams",
    filename: str | os.PathLike,
) -> pd.DataFrame:
    """Write the per-day trajectory and derived statistics to a CSV file.

    Parent directories are created if needed.

    Returns
    -------
    pd.DataFrame
        the frame that was written.
    """
    parent = os.path.dirname(os.fspath(filename))
    if parent:
        os.makedirs(parent, exist_ok=True)
    df = trajectory_to_dataframe(trajectory, params)
    df.to_csv(filename, index=False, float_format="%.2f")
    return df
