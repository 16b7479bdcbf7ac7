"""
Time sources for performance logs.
Every source returns milliseconds as a float; only differences between
readings from the same source are meaningful.
"""
import time
from typing import Callable

Clock = Callable[[], float]

DEFAULT_CLOCK = "perf_counter"


def perf_counter_ms() -> float:
    return time.perf_counter() * 1000.0


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def wall_ms() -> float:
    """Milliseconds since the epoch. Subject to system clock adjustments."""
    return time.time() * 1000.0


CLOCKS: dict[str, Clock] = {
    "perf_counter": perf_counter_ms,
    "monotonic": monotonic_ms,
    "wall": wall_ms,
}


def get_clock(name: str | None = None) -> Clock:
    """Return the named time source (default: perf_counter)."""
    name = name or DEFAULT_CLOCK
    try:
        return CLOCKS[name]
    except KeyError:
        raise ValueError(f"unknown clock {name!r}; expected one of: {', '.join(sorted(CLOCKS))}") from None
