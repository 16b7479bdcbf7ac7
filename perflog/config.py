import logging
import os
from dataclasses import dataclass

import yaml

from perflog.clock import CLOCKS, DEFAULT_CLOCK

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class PerfLogConfig:
    """Settings shared by every logger a registry creates."""
    # Name of a time source in perflog.clock.CLOCKS
    clock: str = DEFAULT_CLOCK
    # Log ignored writes (duplicates, closed log) at DEBUG
    debug: bool = False
    log_level: str = "WARNING"


def _parse_bool(value, field):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"perflog.{field} must be a boolean, got {value!r}")


def _normalize_config(payload):
    if not isinstance(payload, dict):
        raise ValueError("perflog config must be a mapping")
    section = payload.get("perflog", payload)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError("perflog config must be a mapping")
    config = dict(section)
    config.setdefault("clock", DEFAULT_CLOCK)
    config.setdefault("debug", False)
    config.setdefault("log_level", "WARNING")
    env_clock = os.environ.get("PERFLOG_CLOCK")
    if env_clock:
        config["clock"] = env_clock.strip()
    env_debug = os.environ.get("PERFLOG_DEBUG")
    if env_debug is not None:
        config["debug"] = env_debug
    return config


def _validate_config(config):
    unknown = set(config) - {"clock", "debug", "log_level"}
    if unknown:
        raise ValueError(f"unknown perflog config keys: {', '.join(sorted(unknown))}")
    if config["clock"] not in CLOCKS:
        raise ValueError(f"perflog.clock must be one of: {', '.join(sorted(CLOCKS))}")
    config["debug"] = _parse_bool(config["debug"], "debug")
    level = str(config["log_level"]).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"perflog.log_level must be one of: {', '.join(_LOG_LEVELS)}")
    config["log_level"] = level
    return config


def load_config(path: str | None = None) -> PerfLogConfig:
    """
    Load settings from YAML (optionally nested under a 'perflog' key).
    Path defaults to $PERFLOG_CONFIG; without a file the defaults apply.
    PERFLOG_CLOCK and PERFLOG_DEBUG override the file.
    """
    path = path or os.environ.get("PERFLOG_CONFIG")
    payload = {}
    if path:
        with open(path, "r") as f:
            payload = yaml.safe_load(f) or {}
    config = _validate_config(_normalize_config(payload))
    return PerfLogConfig(**config)


def configure_logging(config: PerfLogConfig) -> logging.Logger:
    logger = logging.getLogger("perflog")
    logger.setLevel(config.log_level)
    return logger
