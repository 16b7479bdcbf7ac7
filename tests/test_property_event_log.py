"""
Property-based tests for write-once recording: first write wins for every key.
Requires: pip install hypothesis (or skip).
"""
import pytest

from perflog.event_log import EventLog

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
    HAS_HYPOTHESIS = True
except ImportError:
    HAS_HYPOTHESIS = False


if HAS_HYPOTHESIS:
    _keys = st.text(min_size=1, max_size=12)
    _values = st.one_of(st.none(), st.integers(), st.text(max_size=8), st.booleans())
    _times = st.floats(allow_nan=False, allow_infinity=False, min_value=-1e9, max_value=1e9)

    @given(key=_keys, values=st.lists(_values, min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_set_extra_first_write_wins(key, values):
        log = EventLog(clock=lambda: 0.0)
        for value in values:
            log.set_extra(key, value)
        assert log.get_extras() == {key: values[0]}

    @given(name=_keys, stamps=st.lists(_times, min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_mark_point_first_write_wins(name, stamps):
        log = EventLog(clock=lambda: -1.0)
        for ts in stamps:
            log.mark_point(name, ts, {"ts": ts})
        assert log.get_points() == {name: stamps[0]}
        assert log.get_point_extras()[name] == {"ts": stamps[0]}

    @given(name=_keys, bounds=st.lists(st.tuples(_times, _times), min_size=1, max_size=5))
    @settings(max_examples=100)
    def test_add_timespan_first_write_wins(name, bounds):
        log = EventLog(clock=lambda: 0.0)
        for start, end in bounds:
            log.add_timespan(name, start, end)
        span = log.get_timespans()[name]
        start, end = bounds[0]
        assert (span.start_time, span.end_time) == (start, end)
        assert span.total_time == end - start

    @given(names=st.lists(_keys, min_size=1, max_size=5, unique=True), value=_values)
    @settings(max_examples=50)
    def test_closed_log_is_frozen(names, value):
        log = EventLog(clock=lambda: 1.0)
        log.mark_point(names[0], 1)
        before = log.snapshot()
        log.close()
        for name in names:
            log.mark_point(name, 2)
            log.start_timespan(name)
            log.add_timespan(name, 0, 1)
            log.set_extra(name, value)
        assert log.get_points() == before.points
        assert log.get_timespans() == before.timespans
        assert log.get_extras() == before.extras
else:
    @pytest.mark.skip(reason="hypothesis not installed")
    def test_property_skipped():
        pass
