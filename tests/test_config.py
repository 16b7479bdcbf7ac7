"""Config loading: YAML file, env overrides, validation errors."""
import logging

import pytest

from perflog.clock import get_clock, monotonic_ms, perf_counter_ms
from perflog.config import PerfLogConfig, configure_logging, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PERFLOG_CONFIG", "PERFLOG_CLOCK", "PERFLOG_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, text):
    path = tmp_path / "perflog.yaml"
    path.write_text(text)
    return str(path)


def test_defaults_without_file():
    assert load_config() == PerfLogConfig()


def test_nested_section(tmp_path):
    path = _write(tmp_path, "perflog:\n  clock: monotonic\n  debug: true\n  log_level: debug\n")
    config = load_config(path)
    assert config == PerfLogConfig(clock="monotonic", debug=True, log_level="DEBUG")


def test_flat_file_from_env_path(tmp_path, monkeypatch):
    monkeypatch.setenv("PERFLOG_CONFIG", _write(tmp_path, "clock: wall\n"))
    assert load_config().clock == "wall"


def test_empty_file_yields_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")) == PerfLogConfig()


def test_env_overrides_file(tmp_path, monkeypatch):
    path = _write(tmp_path, "clock: wall\ndebug: false\n")
    monkeypatch.setenv("PERFLOG_CLOCK", "monotonic")
    monkeypatch.setenv("PERFLOG_DEBUG", "yes")
    config = load_config(path)
    assert config.clock == "monotonic"
    assert config.debug is True


@pytest.mark.parametrize(
    "text, message",
    [
        ("clock: sundial\n", "perflog.clock"),
        ("debug: maybe\n", "perflog.debug"),
        ("log_level: loud\n", "perflog.log_level"),
        ("colour: red\n", "unknown perflog config keys"),
        ("- clock\n", "must be a mapping"),
    ],
)
def test_invalid_config(tmp_path, text, message):
    with pytest.raises(ValueError, match=message):
        load_config(_write(tmp_path, text))


def test_get_clock():
    assert get_clock() is perf_counter_ms
    assert get_clock("monotonic") is monotonic_ms
    with pytest.raises(ValueError, match="unknown clock"):
        get_clock("sundial")


def test_configure_logging_sets_level():
    logger = configure_logging(PerfLogConfig(log_level="INFO"))
    try:
        assert logger.name == "perflog"
        assert logger.level == logging.INFO
    finally:
        logger.setLevel(logging.NOTSET)
