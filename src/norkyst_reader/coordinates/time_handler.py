"""
NorKyst Reader Time Coordinate Processing

This module handles time value normalization and resolution of a requested
time interval into an index window on the dataset's time axis.
"""

import logging
from datetime import datetime, timezone
import numpy as np

from ..core.config import DATETIME_PRECISION
from ..core.core_types import TemporalWindow, TimeValue
from ..core.exceptions import ParameterError, TimeRangeError

logger = logging.getLogger('norkyst_reader.coordinates.time_handler')

# ============================================================================
# Time Value Normalization
# ============================================================================

def normalize_time_value(time_value: TimeValue) -> np.datetime64:
    """
    Normalize various time formats to numpy.datetime64.

    Timezone-aware datetimes are converted to UTC and made naive, matching the
    UTC time axis of the model output.

    Args:
        time_value: Time value (str, datetime, or np.datetime64)

    Returns:
        np.datetime64: Normalized time value

    Raises:
        ParameterError: If time format is invalid
    """
    try:
        if isinstance(time_value, np.datetime64):
            if np.isnat(time_value):
                raise ValueError("NaT is not a valid time")
            return time_value.astype(f'datetime64[{DATETIME_PRECISION}]')

        if isinstance(time_value, datetime):
            if time_value.tzinfo is not None:
                time_value = time_value.astimezone(timezone.utc).replace(tzinfo=None)
            return np.datetime64(time_value, DATETIME_PRECISION)

        if isinstance(time_value, str):
            return normalize_time_value(datetime.fromisoformat(time_value.strip()))

        return np.datetime64(time_value, DATETIME_PRECISION)

    except ParameterError:
        raise
    except Exception as e:
        raise ParameterError("time_value", str(time_value), f"Cannot parse time value: {e}")

# ============================================================================
# Temporal Window Resolution
# ============================================================================

def resolve_temporal_window(time_axis, start_time, end_time) -> TemporalWindow:
    """
    Map a requested [start_time, end_time] onto an inclusive index window.

    ``start_index`` is the last sample at or before ``start_time`` and
    ``end_index`` the first sample at or after ``end_time``, so the window
    brackets the request by up to one sample on each side. Duplicate
    timestamps resolve to the last (start) and first (end) occurrence.

    Works with any mutually comparable axis and bounds (datetime64 or numbers).

    Args:
        time_axis: Ascending 1-D time axis
        start_time: Requested start
        end_time: Requested end

    Returns:
        TemporalWindow: Resolved index window

    Raises:
        TimeRangeError: If the dataset has no sample at/before start_time or
            no sample at/after end_time
    """
    time_axis = np.asarray(time_axis)

    at_or_before = np.flatnonzero(time_axis <= start_time)
    if at_or_before.size == 0:
        raise TimeRangeError(
            str(start_time), f"first sample {time_axis[0]}" if time_axis.size else "empty time axis",
            "No data for start time"
        )

    at_or_after = np.flatnonzero(time_axis >= end_time)
    if at_or_after.size == 0:
        raise TimeRangeError(
            str(end_time), f"last sample {time_axis[-1]}",
            "No data for end time"
        )

    window = TemporalWindow(int(at_or_before[-1]), int(at_or_after[0]))
    logger.debug(
        "Time window %s..%s -> indices %d..%d (%d samples)",
        start_time, end_time, window.start_index, window.end_index, window.length
    )
    return window
