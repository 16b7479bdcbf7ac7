"""
Logger registry: fresh scoped loggers on demand, plus one process-wide
logger that every caller reaches through the same accessor.
"""
import logging
import threading

import yaml

from perflog.clock import get_clock
from perflog.config import PerfLogConfig, load_config
from perflog.event_log import EventLog

logger = logging.getLogger(__name__)


class LoggerRegistry:
    """
    Creates EventLog instances. The global logger is built on first access
    and keeps its identity for the life of the registry; clear() on it
    resets content only.
    """
    def __init__(self, config: PerfLogConfig | None = None):
        self._config = config
        self._global: EventLog | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> PerfLogConfig:
        if self._config is None:
            try:
                self._config = load_config()
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.warning("perflog config ignored, using defaults: %s", exc)
                self._config = PerfLogConfig()
        return self._config

    def create_logger(self) -> EventLog:
        """Return a new, empty logger independent of every other instance."""
        config = self.config
        return EventLog(clock=get_clock(config.clock), debug=config.debug)

    @property
    def global_logger(self) -> EventLog:
        if self._global is not None:
            return self._global
        with self._lock:
            if self._global is None:
                self._global = self.create_logger()
            return self._global


default_registry = LoggerRegistry()


def create_performance_logger() -> EventLog:
    return default_registry.create_logger()


def get_global_logger() -> EventLog:
    return default_registry.global_logger
