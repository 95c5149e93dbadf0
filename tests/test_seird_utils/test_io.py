import jax.numpy as jnp
import numpy as np
import pandas as pd
import pytest

from seirdyn.config import SolverParams
from seirdyn.simulation import SEIRDParams, simulate
from seirdyn.typing import InvalidDimensionError
from seirdyn.utils import (
    derived_statistics,
    export_csv,
    load_input,
    save_output,
    trajectory_to_dataframe,
)
from seirdyn.utils.io import CSV_COLUMNS


@pytest.fixture
def ode_params():
    return SEIRDParams(vaccination_rate=0.01, waning_immunity_rate=0.02)


@pytest.fixture
def trajectory(ode_params):
    return simulate(
        jnp.array([990.0, 10.0, 0.0, 0.0, 0.0]),
        ode_params,
        SolverParams(method="RK4"),
        duration_days=15,
    )


def test_save_and_load_flat_values(tmp_path):
    path = tmp_path / "state.txt"
    values = np.array([990.0, 10.5, 1e-9, 0.0, 3.25])
    save_output(path, values)
    assert len(path.read_text().splitlines()) == 5
    np.testing.assert_array_equal(load_input(path, 5), values)
    np.testing.assert_array_equal(load_input(path, 3), values[:3])


def test_load_single_value(tmp_path):
    path = tmp_path / "one.txt"
    save_output(path, [42.0])
    np.testing.assert_array_equal(load_input(path, 1), [42.0])


def test_load_too_few_values(tmp_path):
    path = tmp_path / "short.txt"
    save_output(path, [1.0, 2.0])
    with pytest.raises(InvalidDimensionError):
        load_input(path, 5)


def test_derived_statistics(ode_params):
    states = np.array(
        [
            [600.0, 100.0, 200.0, 100.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 1000.0],
            [-5.0, 0.0, 0.0, 0.0, 1005.0],
        ]
    )
    stats = derived_statistics(states, ode_params)
    assert stats["Active"].tolist() == [1000.0, 0.0, 0.0]
    assert stats["InfectedRatio"].tolist() == pytest.approx(
        [20.0, 0.0, 0.0]
    )
    assert stats["Vaccination"].tolist() == pytest.approx([6.0, 0.0, -0.05])
    assert stats["ContactRate"].tolist() == [1.0, 1.0, 1.0]
    assert stats["WaningImmunity"].tolist() == [0.02, 0.02, 0.02]


def test_trajectory_to_dataframe(trajectory, ode_params):
    df = trajectory_to_dataframe(trajectory, ode_params)
    assert list(df.columns) == CSV_COLUMNS
    assert df["Day"].tolist() == list(range(1, 16))
    np.testing.assert_allclose(
        df[["Susceptible", "Exposed", "Infectious", "Recovered", "Deceased"]],
        np.array(trajectory.states)[1:],
    )


def test_export_csv(tmp_path, trajectory, ode_params):
    path = tmp_path / "data" / "seird_output.csv"
    written = export_csv(trajectory, ode_params, path)
    assert path.exists()
    df = pd.read_csv(path)
    assert list(df.columns) == CSV_COLUMNS
    assert len(df) == 15
    np.testing.assert_allclose(
        df["Active"], written["Active"], atol=0.005
    )
