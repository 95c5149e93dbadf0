import logging

import jax.numpy as jnp
import pytest

from seirdyn.config import SolverParams
from seirdyn.simulation import SEIRDParams, simulate
from seirdyn.utils import CustomLogFormatter, log, log_decorator


@pytest.fixture(autouse=True)
def reset_logger():
    logger = logging.getLogger("seirdyn")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)


def test_use_logging_console():
    logger = log.use_logging(level="debug", output="console")
    assert logger is logging.getLogger("seirdyn")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert isinstance(logger.handlers[0].formatter, CustomLogFormatter)


def test_use_logging_file_and_both(tmp_path):
    logger = log.use_logging(level="info", output="file", log_path=tmp_path)
    assert [type(h) for h in logger.handlers] == [logging.FileHandler]
    logger = log.use_logging(level="warn", output="both", log_path=tmp_path)
    assert len(logger.handlers) == 2
    assert logger.level == logging.WARN
    assert list(tmp_path.glob("*.log"))


def test_use_logging_none_silences_everything():
    logger = log.use_logging(level="none", output="console")
    assert logger.level == logging.CRITICAL + 1


def test_use_logging_unknown_level_falls_back_to_info():
    logger = log.use_logging(level="loud", output="console")
    assert logger.level == logging.INFO


def test_formatter_uses_overrides():
    formatter = CustomLogFormatter("%(filename)s:%(funcName)s %(message)s")
    record = logging.LogRecord(
        "seirdyn", logging.INFO, "x.py", 1, "hello", None, None, "f"
    )
    record.func_name_override = "decorated"
    record.file_name_override = "caller.py"
    assert formatter.format(record) == "caller.py:decorated hello"


def test_log_decorator_logs_and_returns(caplog):
    logging.getLogger("seirdyn").setLevel(logging.INFO)

    @log_decorator()
    def add(a, b=1):
        return a + b

    with caplog.at_level(logging.INFO, logger="seirdyn"):
        assert add(2, b=3) == 5
    messages = [r.getMessage() for r in caplog.records]
    assert any("Arguments: 2, b=3 - Begin function" in m for m in messages)
    assert any("Execution Time" in m for m in messages)
    assert all(r.func_name_override == "add" for r in caplog.records)


def test_log_decorator_logs_and_raises(caplog):
    logging.getLogger("seirdyn").setLevel(logging.INFO)

    @log_decorator
    def fail():
        raise ValueError("bad input")

    with caplog.at_level(logging.INFO, logger="seirdyn"):
        with pytest.raises(ValueError):
            fail()
    assert any(
        r.levelno == logging.ERROR and "bad input" in r.getMessage()
        for r in caplog.records
    )


def test_rejected_steps_logged_at_debug(caplog):
    logging.getLogger("seirdyn").setLevel(logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="seirdyn"):
        simulate(
            jnp.array([990.0, 10.0, 0.0, 0.0, 0.0]),
            SEIRDParams(),
            SolverParams(abstol=1e-12, reltol=1e-12),
            duration_days=2,
        )
    messages = [r.getMessage() for r in caplog.records]
    assert any("rejected step" in m for m in messages)
    assert any("simulating 2 days with RK45" in m for m in messages)
