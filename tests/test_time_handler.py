from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from norkyst_reader.coordinates.time_handler import normalize_time_value, resolve_temporal_window
from norkyst_reader.core.exceptions import ParameterError, TimeRangeError

HOURS = np.array([0, 1, 2, 3, 4, 5], dtype=float)


def test_window_brackets_request_with_numeric_axis():
    window = resolve_temporal_window(HOURS, 1.5, 3.5)
    assert (window.start_index, window.end_index) == (1, 4)
    assert window.length == 4


def test_window_with_datetime_axis():
    axis = np.arange("2020-01-01T00", "2020-01-01T06", dtype="datetime64[h]").astype("datetime64[ns]")
    start = normalize_time_value("2020-01-01T01:30")
    end = normalize_time_value("2020-01-01T03:30")
    window = resolve_temporal_window(axis, start, end)
    assert (window.start_index, window.end_index) == (1, 4)
    selected = axis[window.as_slice()]
    assert selected.size == window.length
    assert selected[0] <= start and selected[-1] >= end


def test_exact_sample_times_are_not_widened():
    window = resolve_temporal_window(HOURS, 1.0, 3.0)
    assert (window.start_index, window.end_index) == (1, 3)


def test_duplicate_timestamps_resolve_to_last_and_first_occurrence():
    axis = np.array([0, 1, 1, 2, 2, 3], dtype=float)
    window = resolve_temporal_window(axis, 1.0, 2.0)
    assert window.start_index == 2
    assert window.end_index == 3


def test_full_axis_request():
    window = resolve_temporal_window(HOURS, 0.0, 5.0)
    assert (window.start_index, window.end_index) == (0, 5)


def test_request_before_first_sample_fails():
    with pytest.raises(TimeRangeError) as excinfo:
        resolve_temporal_window(HOURS, -2.0, -1.0)
    assert "start time" in str(excinfo.value)


def test_request_after_last_sample_fails():
    with pytest.raises(TimeRangeError) as excinfo:
        resolve_temporal_window(HOURS, 4.5, 6.0)
    assert "end time" in str(excinfo.value)
    assert excinfo.value.requested == "6.0"


def test_normalize_accepts_common_formats():
    expected = np.datetime64("2020-01-01T12:00:00", "ns")
    assert normalize_time_value("2020-01-01T12:00") == expected
    assert normalize_time_value(datetime(2020, 1, 1, 12)) == expected
    assert normalize_time_value(np.datetime64("2020-01-01T12", "h")) == expected


def test_normalize_converts_aware_datetimes_to_utc():
    aware = datetime(2020, 1, 1, 13, tzinfo=timezone(timedelta(hours=1)))
    assert normalize_time_value(aware) == np.datetime64("2020-01-01T12:00:00", "ns")


def test_normalize_rejects_garbage():
    with pytest.raises(ParameterError):
        normalize_time_value("not a time")
    with pytest.raises(ParameterError):
        normalize_time_value(np.datetime64("NaT"))
