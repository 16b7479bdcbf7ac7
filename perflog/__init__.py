"""
In-process performance event recorder: points, timespans and extras per
logger, with one shared process-wide logger and any number of scoped ones.
"""
from perflog.clock import Clock, get_clock
from perflog.config import PerfLogConfig, configure_logging, load_config
from perflog.event_log import EventLog, Timespan
from perflog.registry import LoggerRegistry, create_performance_logger, default_registry, get_global_logger
from perflog.snapshot import PerformanceSnapshot

__version__ = "0.1.0"

__all__ = [
    "Clock",
    "get_clock",
    "PerfLogConfig",
    "configure_logging",
    "load_config",
    "EventLog",
    "Timespan",
    "LoggerRegistry",
    "create_performance_logger",
    "default_registry",
    "get_global_logger",
    "PerformanceSnapshot",
]
