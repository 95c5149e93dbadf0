import json
import logging

import pandas as pd
import pytest

from seirdyn.__main__ import build_parser, config_from_args, main


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("seirdyn")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_positional_arguments_override_defaults():
    args = build_parser().parse_args(
        ["200", "RK4", "999", "1", "0", "0", "0", "0.4", "0.25"]
    )
    config = config_from_args(args)
    assert config.duration_days == 200
    assert config.solver_params.method == "RK4"
    assert config.initial_state.S == 999.0
    assert config.initial_state.E == 1.0
    assert config.parameters.beta == 0.4
    assert config.parameters.sigma == 0.25
    # everything after the last given argument keeps its default
    assert config.parameters.gamma == 0.1
    assert config.parameters.contact_rate == 1.0


def test_all_eighteen_positional_arguments():
    argv = [
        "30", "Euler", "900", "50", "50", "0", "0",
        "0.4", "0.25", "0.1", "0.02", "1000", "0.001",
        "1.5", "0.01", "0.3", "0.2", "0.05",
    ]  # fmt: skip
    config = config_from_args(build_parser().parse_args(argv))
    params = config.parameters
    assert params.mu == 0.02
    assert params.vaccination_rate == 0.001
    assert params.contact_rate == 1.5
    assert params.waning_immunity_rate == 0.01
    assert params.asymptomatic_fraction == 0.3
    assert params.hospitalization_rate == 0.2
    assert params.mortality_rate_severe == 0.05


def test_config_file_with_positional_override(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"duration_days": 12, "parameters": {"beta": 0.9}})
    )
    args = build_parser().parse_args(["20", "--config", str(path)])
    config = config_from_args(args)
    assert config.duration_days == 20
    assert config.parameters.beta == 0.9


def test_invalid_method_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["10", "Midpoint"])


def test_main_runs_and_exports(tmp_path, capsys):
    csv = tmp_path / "out" / "seird.csv"
    status = main(["25", "RK45", "--csv", str(csv), "--log-level", "none"])
    assert status == 0
    out = capsys.readouterr().out
    assert "=== SEIRD Model Simulation ===" in out
    assert " Method: RK45" in out
    assert "SEIRD State - Day 10" in out
    assert "SEIRD State - Day 20" in out
    assert "SEIRD State - Day 25" in out
    assert "Total steps:" in out
    assert "Rejected steps:" in out
    assert f"Results exported to: {csv}" in out
    df = pd.read_csv(csv)
    assert len(df) == 25
    assert df["Day"].iloc[-1] == 25


def test_main_invalid_configuration(tmp_path, capsys):
    status = main(
        ["10", "RK4", "-5", "--csv", str(tmp_path / "x.csv"),
         "--log-level", "none"]
    )  # fmt: skip
    assert status == 2
    assert "invalid configuration" in capsys.readouterr().err


def test_main_missing_config_file(tmp_path, capsys):
    status = main(
        ["--config", str(tmp_path / "absent.json"),
         "--csv", str(tmp_path / "x.csv"), "--log-level", "none"]
    )  # fmt: skip
    assert status == 2
    assert "invalid configuration" in capsys.readouterr().err
    assert not (tmp_path / "x.csv").exists()


def test_main_malformed_config_file(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text("{duration_days: 12,")
    status = main(
        ["--config", str(path), "--csv", str(tmp_path / "x.csv"),
         "--log-level", "none"]
    )  # fmt: skip
    assert status == 2
    assert "invalid configuration" in capsys.readouterr().err
