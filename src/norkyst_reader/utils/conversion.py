"""
NorKyst Reader Time Conversion Utilities

Conversions between numpy datetime64, seconds since 1970-01-01 (the time
encoding of the model output) and MATLAB datenum (days since year 0, the
convention of the legacy extraction scripts).
"""

from typing import Union
import numpy as np

from ..core.config import DATENUM_EPOCH, DATETIME_PRECISION, EPOCH, SECONDS_PER_DAY

ArrayOrScalar = Union[float, np.ndarray]

_EPOCH64 = np.datetime64(EPOCH, DATETIME_PRECISION)
_ONE_SECOND = np.timedelta64(1, 's')


def epoch_seconds_to_datetime64(seconds: ArrayOrScalar) -> np.ndarray:
    """
    Convert seconds since 1970-01-01 to datetime64[ns].

    Fractional seconds are kept to nanosecond resolution.
    """
    seconds = np.asarray(seconds, dtype=np.float64)
    nanoseconds = np.round(seconds * 1e9).astype(np.int64)
    return _EPOCH64 + nanoseconds.astype(f'timedelta64[{DATETIME_PRECISION}]')


def datetime64_to_epoch_seconds(times) -> np.ndarray:
    """Convert datetime64 values to float seconds since 1970-01-01."""
    times = np.asarray(times).astype(f'datetime64[{DATETIME_PRECISION}]')
    return (times - _EPOCH64) / _ONE_SECOND


def datenum_to_datetime64(datenum: ArrayOrScalar) -> np.ndarray:
    """
    Convert MATLAB datenum to datetime64[ns].

    Examples:
        >>> datenum_to_datetime64(719529.0)
        numpy.datetime64('1970-01-01T00:00:00.000000000')
    """
    days = np.asarray(datenum, dtype=np.float64) - DATENUM_EPOCH
    result = epoch_seconds_to_datetime64(days * SECONDS_PER_DAY)
    return result[()] if result.ndim == 0 else result


def datetime64_to_datenum(times) -> ArrayOrScalar:
    """Convert datetime64 values to MATLAB datenum."""
    days = datetime64_to_epoch_seconds(times) / SECONDS_PER_DAY
    result = days + DATENUM_EPOCH
    return float(result) if np.ndim(result) == 0 else result
