"""
Point-in-time copy of a performance log for export/reporting collaborators.
"""
from dataclasses import dataclass
from typing import Any, Mapping

from perflog.event_log import Timespan, thaw


def _plain(annotation: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return None if annotation is None else thaw(annotation)


@dataclass(frozen=True)
class PerformanceSnapshot:
    points: dict[str, float | None]
    point_extras: dict[str, Mapping[str, Any]]
    timespans: dict[str, Timespan]
    extras: dict[str, Any]
    closed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Plain dicts only; timespan fields that are absent are omitted."""
        return {
            "points": dict(self.points),
            "pointExtras": {name: _plain(extra) for name, extra in self.point_extras.items()},
            "timespans": {name: span.to_dict() for name, span in self.timespans.items()},
            "extras": dict(self.extras),
            "closed": self.closed,
        }
