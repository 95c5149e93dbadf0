"""Text and seaborn views of SEIRD states and trajectories."""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from jax.typing import ArrayLike
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .simulation import EPSILON, SEIRDParams, Trajectory
from .typing import Compartment

MAX_BAR_LENGTH = 50


def _bar_row(label: str, value: float, total: float) -> str:
    pct = value / total * 100.0
    bar_len = max(0, min(int(pct / 100.0 * MAX_BAR_LENGTH), MAX_BAR_LENGTH))
    return f"{label:>20}{value:12.2f}{pct:12.2f} {'|' * bar_len}"


def render_ascii(state: ArrayLike, day: int, params: SEIRDParams) -> str:
    """Render a SEIRD state as a table of proportional ASCII bars.

    Compartments are clamped at zero for display. Each bar is the share of
    the compartment in the whole population, at most 50 characters long.
    A row for the daily vaccinations and a summary of the active population
    (S+E+I+R, capped at N), the infected share of the active population and
    the contact and waning rates follow.

    Parameters
    ----------
    state : ArrayLike
        S, E, I, R, D compartment sizes.
    day : int
        simulation day shown in the header.
    params : SEIRDParams
        rates of the model.

    Returns
    -------
    str
        the rendered table, ending in a blank line.
    """
    values = np.maximum(0.0, np.asarray(state, dtype=np.float64))
    total = max(EPSILON, float(values.sum()))
    active = max(EPSILON, min(float(values[:4].sum()), float(params.N)))
    infected_ratio = (
        values[Compartment.I] / active * 100.0 if active > EPSILON else 0.0
    )
    vaccinated_est = values[Compartment.S] * float(params.vaccination_rate)

    lines = [
        f"SEIRD State - Day {day}",
        f"{'Component':>20}{'Value':>12}{'Percent(%)':>12} Visual",
    ]
    for compartment in Compartment:
        lines.append(
            _bar_row(compartment.label, values[compartment], total)
        )
    lines.append(_bar_row("Vaccination/day", vaccinated_est, total))
    lines += [
        f"{'Active population (S+E+I+R):':>30}{active:10.2f} people",
        f"{'Infected/Active ratio:':>30}{infected_ratio:10.2f} %",
        f"{'Contact rate:':>30}{float(params.contact_rate):10.2f} "
        "contacts/day",
        f"{'Immunity waning rate:':>30}"
        f"{float(params.waning_immunity_rate):10.2f} 1/day",
        "",
    ]
    return "\n".join(lines)


def plot_trajectory(
    trajectory: Trajectory,
    ax: Optional[Axes] = None,
    title: str = "SEIRD Model",
    matplotlib_style: list[str] | str = [
        "seaborn-v0_8-colorblind",
    ],
) -> Figure:
    """Plot every compartment of a trajectory against simulation day.

    Parameters
    ----------
    trajectory : Trajectory
        output of `simulate`.
    ax : Axes, optional
        axes to draw on, a new figure is created if None.
    title : str, optional
        axes title, the stepper name is appended to it.
    matplotlib_style : list[str] | str, optional
        matplotlib style(s) to plot with, by default
        ["seaborn-v0_8-colorblind"].

    Returns
    -------
    Figure
        the figure holding the plot.
    """
    labels = [c.label for c in Compartment]
    timeseries_df = pd.DataFrame(
        np.asarray(trajectory.states), columns=labels
    )
    timeseries_df["day"] = np.asarray(trajectory.days)
    # one row per (day, compartment) pair for seaborn's hue
    timeseries_melt = pd.melt(
        timeseries_df,
        id_vars=["day"],
        value_vars=labels,
        var_name="compartment",
        value_name="population",
    )
    with plt.style.context(matplotlib_style):
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.get_figure()
        sns.lineplot(
            timeseries_melt,
            x="day",
            y="population",
            hue="compartment",
            hue_order=labels,
            estimator=None,
            ax=ax,
        )
        ax.set_xlabel("Days")
        ax.set_ylabel("Population")
        ax.set_title(f"{title} ({trajectory.method})")
    return fig
