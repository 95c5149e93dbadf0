#!/usr/bin/env python
"""Run a SEIRD simulation from the command line.

All positional arguments are optional and read in order, missing ones keep
their default (or the value from --config):

    days method S E I R D beta sigma gamma mu N vaccination_rate
    contact_rate waning_immunity_rate asymptomatic_fraction
    hospitalization_rate mortality_rate_severe

Example:
    python -m seirdyn 200 RK45 999 1 0 0 0 0.4 0.25 0.1 0.02 1000 0.001 1.0
"""

import argparse
import sys
from typing import Optional, Sequence

from seirdyn.config import SimulationConfig
from seirdyn.simulation import get_odeparams, run_simulation
from seirdyn.typing import SEIRDError
from seirdyn.utils import export_csv, log
from seirdyn.vis_utils import render_ascii

STATE_FIELDS = ["S", "E", "I", "R", "D"]
PARAMETER_FIELDS = [
    "beta",
    "sigma",
    "gamma",
    "mu",
    "N",
    "vaccination_rate",
    "contact_rate",
    "waning_immunity_rate",
    "asymptomatic_fraction",
    "hospitalization_rate",
    "mortality_rate_severe",
]
PARAMETER_LABELS = {
    "beta": ("Transmission rate (β, 1/day):", "10.4f"),
    "sigma": ("Incubation rate  (σ, 1/day):", "10.4f"),
    "gamma": ("Recovery rate    (γ, 1/day):", "10.4f"),
    "mu": ("Mortality rate   (μ, 1/day):", "10.4f"),
    "N": ("Population size  (N):", "10.2f"),
    "vaccination_rate": ("Vaccination rate (per person/day):", "10.4f"),
    "contact_rate": ("Contact rate     (contacts/day):", "10.4f"),
    "waning_immunity_rate": ("Waning immunity  (1/day):", "10.4f"),
    "asymptomatic_fraction": ("Asymptomatic fraction:", "10.4f"),
    "hospitalization_rate": ("Hospitalization rate:", "10.4f"),
    "mortality_rate_severe": ("Severe-case mortality rate:", "10.4f"),
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser of the seirdyn command."""
    parser = argparse.ArgumentParser(
        prog="seirdyn",
        description="Simulate a SEIRD epidemic model.",
    )
    parser.add_argument(
        "days", nargs="?", type=int, help="number of days to simulate"
    )
    parser.add_argument(
        "method",
        nargs="?",
        choices=["Euler", "RK4", "RK45"],
        help="integration method",
    )
    for name in STATE_FIELDS:
        parser.add_argument(
            name, nargs="?", type=float, help=f"initial {name} compartment"
        )
    for name in PARAMETER_FIELDS:
        parser.add_argument(name, nargs="?", type=float, help=name)
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="JSON SimulationConfig, positional arguments override it",
    )
    parser.add_argument(
        "--csv",
        default="data/seird_output.csv",
        help="path of the per-day CSV export",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=10,
        help="print an ASCII report every N days, 0 disables them",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default="warn",
        choices=["none", "debug", "info", "warn", "error", "critical"],
        help="set the logging level, the default is warn",
    )
    parser.add_argument(
        "-o",
        "--log-output",
        default="console",
        choices=["file", "console", "both"],
        help="print logs to console, file, or both, the default is console",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Merge the --config file and the positional arguments into a config."""
    if args.config is not None:
        base = SimulationConfig.from_json(args.config)
    else:
        base = SimulationConfig()
    data = base.model_dump()
    if args.days is not None:
        data["duration_days"] = args.days
    if args.method is not None:
        data["solver_params"]["method"] = args.method
    for name in STATE_FIELDS:
        if getattr(args, name) is not None:
            data["initial_state"][name] = getattr(args, name)
    for name in PARAMETER_FIELDS:
        if getattr(args, name) is not None:
            data["parameters"][name] = getattr(args, name)
    return SimulationConfig.model_validate(data)


def print_header(config: SimulationConfig) -> None:
    """Print the method, duration, initial state and parameters of a run."""
    print("=== SEIRD Model Simulation ===")
    print(f" Method: {config.solver_params.method}")
    print(f" Duration: {config.duration_days} days")
    print("")
    print(" Initial conditions:")
    state = config.initial_state
    for label, value in zip(
        ["Susceptible", "Exposed", "Infected", "Recovered", "Deceased"],
        [state.S, state.E, state.I, state.R, state.D],
    ):
        print(f"{'   ' + label + ':':<20}{value:10.2f}")
    print("")
    print(" Model parameters:")
    for name in PARAMETER_FIELDS:
        label, fmt = PARAMETER_LABELS[name]
        value = getattr(config.parameters, name)
        print(f"{'   ' + label:>40}{value:{fmt}}")
    print("")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point of the seirdyn command, returns the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    log.use_logging(level=args.log_level, output=args.log_output)
    try:
        config = config_from_args(args)
    except (OSError, ValueError) as e:
        # pydantic.ValidationError and json.JSONDecodeError are ValueErrors
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 2

    print_header(config)
    try:
        trajectory = run_simulation(config)
    except SEIRDError as e:
        print(f"simulation failed: {e}", file=sys.stderr)
        return 1

    params = get_odeparams(config.parameters)
    days = config.duration_days
    if args.report_every > 0:
        for day in range(args.report_every, days, args.report_every):
            print(render_ascii(trajectory.states[day], day, params))
    print(render_ascii(trajectory.states[days], days, params))
    stats = trajectory.stats
    print(f"Total steps:    {stats.steps_taken}")
    print(f"Rejected steps: {stats.rejected_steps}")
    print(f"Max error:      {stats.max_error}")

    export_csv(trajectory, params, args.csv)
    print(f"Results exported to: {args.csv}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
