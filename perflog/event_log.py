"""
Performance event log: points, timespans and extras for one logical session.
Every key is write-once; a closed log ignores all writes. Recording calls
never raise, so instrumentation cannot change the control flow it observes.
"""
import logging
import threading
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping

from perflog.clock import Clock, get_clock

logger = logging.getLogger(__name__)

Annotation = Mapping[str, Any]


def _freeze_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze_value(item) for item in value)
    return value


def _freeze(annotation: Annotation | None) -> Annotation | None:
    """Read-only copy; nested mappings become read-only, sequences tuples."""
    if annotation is None:
        return None
    return _freeze_value(annotation)


def thaw(value: Any) -> Any:
    """Plain dict/list copy of a frozen annotation."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    if isinstance(value, frozenset):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class Timespan:
    """
    One named interval. end_time and total_time are set together, when the
    span is stopped (or when it is added with both bounds).
    """
    start_time: float
    end_time: float | None = None
    total_time: float | None = None
    start_extras: Annotation | None = None
    end_extras: Annotation | None = None

    @property
    def is_stopped(self) -> bool:
        return self.end_time is not None

    def stopped_at(self, end_time: float, end_extras: Annotation | None = None) -> "Timespan":
        return replace(
            self,
            end_time=end_time,
            total_time=end_time - self.start_time,
            end_extras=_freeze(end_extras),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"startTime": self.start_time}
        if self.end_time is not None:
            out["endTime"] = self.end_time
            out["totalTime"] = self.total_time
        if self.start_extras is not None:
            out["startExtras"] = thaw(self.start_extras)
        if self.end_extras is not None:
            out["endExtras"] = thaw(self.end_extras)
        return out


class EventLog:
    """
    Points, timespans, extras and point extras for one session.

    Getters return fresh dicts; the Timespan records and annotations inside
    them are immutable, so callers cannot bypass the write-once rules.
    """
    def __init__(self, clock: Clock | None = None, debug: bool = False):
        self._clock = clock or get_clock()
        self._debug = debug
        self._lock = threading.RLock()
        self._points: dict[str, float | None] = {}
        self._point_extras: dict[str, Annotation] = {}
        self._timespans: dict[str, Timespan] = {}
        self._extras: dict[str, Any] = {}
        self._closed = False

    def _ignored(self, op: str, key: str, reason: str) -> None:
        if self._debug:
            logger.debug("perflog %s(%r) ignored: %s", op, key, reason)

    def current_timestamp(self) -> float:
        return self._clock()

    # --- points -----------------------------------------------------------

    def mark_point(
        self,
        name: str,
        timestamp: float | None = None,
        annotation: Annotation | None = None,
    ) -> None:
        """Record a point. The first mark wins; a None timestamp reads the clock."""
        with self._lock:
            if self._closed:
                self._ignored("mark_point", name, "closed")
                return
            if name in self._points:
                self._ignored("mark_point", name, "already marked")
                return
            self._points[name] = self._clock() if timestamp is None else timestamp
            if annotation is not None:
                self._point_extras[name] = _freeze(annotation)

    # --- timespans --------------------------------------------------------

    def start_timespan(
        self,
        name: str,
        annotation: Annotation | None = None,
        *,
        timestamp: float | None = None,
    ) -> None:
        with self._lock:
            if self._closed:
                self._ignored("start_timespan", name, "closed")
                return
            if name in self._timespans:
                self._ignored("start_timespan", name, "already started")
                return
            start = self._clock() if timestamp is None else timestamp
            self._timespans[name] = Timespan(start_time=start, start_extras=_freeze(annotation))

    def stop_timespan(
        self,
        name: str,
        annotation: Annotation | None = None,
        *,
        timestamp: float | None = None,
    ) -> None:
        with self._lock:
            if self._closed:
                self._ignored("stop_timespan", name, "closed")
                return
            span = self._timespans.get(name)
            if span is None:
                self._ignored("stop_timespan", name, "not started")
                return
            if span.is_stopped:
                self._ignored("stop_timespan", name, "already stopped")
                return
            end = self._clock() if timestamp is None else timestamp
            self._timespans[name] = span.stopped_at(end, annotation)

    def add_timespan(
        self,
        name: str,
        start_time: float,
        end_time: float,
        start_extras: Annotation | None = None,
        end_extras: Annotation | None = None,
    ) -> None:
        """Insert a complete timespan unless the name is already taken."""
        with self._lock:
            if self._closed:
                self._ignored("add_timespan", name, "closed")
                return
            if name in self._timespans:
                self._ignored("add_timespan", name, "already exists")
                return
            self._timespans[name] = Timespan(
                start_time=start_time,
                end_time=end_time,
                total_time=end_time - start_time,
                start_extras=_freeze(start_extras),
                end_extras=_freeze(end_extras),
            )

    def has_timespan(self, name: str) -> bool:
        return name in self._timespans

    def clear_completed(self) -> None:
        """Drop stopped timespans; open ones are kept."""
        with self._lock:
            if self._closed:
                self._ignored("clear_completed", "*", "closed")
                return
            self._timespans = {name: span for name, span in self._timespans.items() if not span.is_stopped}

    # --- extras -----------------------------------------------------------

    def set_extra(self, key: str, value: Any) -> None:
        with self._lock:
            if self._closed:
                self._ignored("set_extra", key, "closed")
                return
            if key in self._extras:
                self._ignored("set_extra", key, "already set")
                return
            self._extras[key] = value

    def remove_extra(self, key: str) -> Any:
        """Remove an extra and return its value (None if it was not set)."""
        with self._lock:
            if self._closed:
                self._ignored("remove_extra", key, "closed")
                return None
            return self._extras.pop(key, None)

    # --- reads ------------------------------------------------------------

    def get_points(self) -> dict[str, float | None]:
        return dict(self._points)

    def get_point_extras(self) -> dict[str, Annotation]:
        return dict(self._point_extras)

    def get_timespans(self) -> dict[str, Timespan]:
        return dict(self._timespans)

    def get_extras(self) -> dict[str, Any]:
        return dict(self._extras)

    def snapshot(self):
        from perflog.snapshot import PerformanceSnapshot

        with self._lock:
            return PerformanceSnapshot(
                points=self.get_points(),
                point_extras=self.get_point_extras(),
                timespans=self.get_timespans(),
                extras=self.get_extras(),
                closed=self._closed,
            )

    # --- lifecycle --------------------------------------------------------

    def append(self, other: "EventLog") -> None:
        """Merge another log's entries into this one; existing keys win."""
        if other is self:
            return
        incoming = other.snapshot()
        with self._lock:
            if self._closed:
                self._ignored("append", "*", "closed")
                return
            for name, span in incoming.timespans.items():
                self._timespans.setdefault(name, span)
            for key, value in incoming.extras.items():
                self._extras.setdefault(key, value)
            for name, ts in incoming.points.items():
                if name in self._points:
                    continue
                self._points[name] = ts
                if name in incoming.point_extras:
                    self._point_extras[name] = incoming.point_extras[name]

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def is_closed(self) -> bool:
        return self._closed

    def clear(self) -> None:
        """Empty every mapping and reopen the log."""
        with self._lock:
            self._points = {}
            self._point_extras = {}
            self._timespans = {}
            self._extras = {}
            self._closed = False

    def log_everything(self) -> None:
        for name, span in self.get_timespans().items():
            if span.is_stopped:
                logger.info("%s: %.3fms", name, span.total_time)
            else:
                logger.info("%s: (open since %.3f)", name, span.start_time)
        for key, value in self.get_extras().items():
            logger.info("%s: %r", key, value)
        for name, ts in self.get_points().items():
            logger.info("%s: %s", name, ts)
