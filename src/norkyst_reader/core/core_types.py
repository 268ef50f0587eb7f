"""
NorKyst Reader Type Definitions and Data Classes

This module defines all data structures and type aliases used throughout the codebase
for better type safety and code clarity.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union, Dict, Any
from datetime import datetime
import numpy as np
import xarray as xr

from .config import (
    DEFAULT_MAIN_URL, DEFAULT_ANGLE_URL, DEFAULT_TIMEOUT, DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAYS, DEFAULT_ENGINE, DEFAULT_CHUNKS, DEFAULT_MAX_DISTANCE_DEG,
    ANGLE_INDEX_OFFSET, SURFACE_MODE, INTERPOLATED_MODE,
    TIME_DIM, DEPTH_DIM, Y_DIM, X_DIM, U_VAR, V_VAR,
)
from .exceptions import ParameterError, InvalidFormatError

# ============================================================================
# Type Aliases
# ============================================================================

TimeValue = Union[str, datetime, np.datetime64]
AxisSelection = Dict[str, Tuple[int, int]]
ChunkSetting = Optional[Union[str, Dict[str, int]]]

# ============================================================================
# Request
# ============================================================================

@dataclass(frozen=True)
class ExtractionRequest:
    """
    A single-point velocity extraction request.

    Times are normalized to ``numpy.datetime64[ns]`` on construction.

    Attributes:
        start_time: Start of the requested window
        end_time: End of the requested window (must be after start_time)
        latitude: Latitude of the position in decimal degrees
        longitude: Longitude of the position in decimal degrees
        depth: Depth below surface in meters (positive down)
    """
    start_time: TimeValue
    end_time: TimeValue
    latitude: float
    longitude: float
    depth: float = 0.0

    def __post_init__(self):
        """Normalize times and validate the request."""
        from ..coordinates.time_handler import normalize_time_value

        start = normalize_time_value(self.start_time)
        end = normalize_time_value(self.end_time)
        if not start < end:
            raise ParameterError(
                "time_range", f"({start}, {end})", "start_time must be before end_time"
            )
        object.__setattr__(self, "start_time", start)
        object.__setattr__(self, "end_time", end)

        for name in ("latitude", "longitude", "depth"):
            value = getattr(self, name)
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ParameterError(name, str(value), "Must be a number")
            if not np.isfinite(value):
                raise ParameterError(name, str(value), "Must be finite")
            object.__setattr__(self, name, value)

        if not -90.0 <= self.latitude <= 90.0:
            raise ParameterError("latitude", str(self.latitude), "Must be within [-90, 90]")
        if self.depth < 0:
            raise ParameterError("depth", str(self.depth), "Depth is positive down and must be >= 0")

    @classmethod
    def from_datenum(cls, start: float, end: float, latitude: float,
                     longitude: float, depth: float = 0.0) -> "ExtractionRequest":
        """Build a request from MATLAB datenum start/end times."""
        from ..utils.conversion import datenum_to_datetime64

        return cls(datenum_to_datetime64(start), datenum_to_datetime64(end),
                   latitude, longitude, depth)

# ============================================================================
# Dataset Metadata
# ============================================================================

def _readonly(values: Any, dtype=None) -> np.ndarray:
    array = np.array(values, dtype=dtype, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class DatasetMetadata:
    """
    Static description of the main dataset needed to resolve indices.

    Attributes:
        time: Ascending time axis (datetime64)
        depth_levels: Ascending fixed depth levels in meters
        lat: 2-D latitude grid indexed by (i, j)
        lon: 2-D longitude grid indexed by (i, j), same shape as lat
    """
    time: np.ndarray
    depth_levels: np.ndarray
    lat: np.ndarray
    lon: np.ndarray

    def __post_init__(self):
        """Validate shapes and ordering; store read-only copies."""
        time = _readonly(self.time)
        depth_levels = _readonly(self.depth_levels, dtype=np.float64)
        lat = _readonly(self.lat, dtype=np.float64)
        lon = _readonly(self.lon, dtype=np.float64)

        if time.ndim != 1 or time.size == 0:
            raise InvalidFormatError("time", "non-empty 1-D array", f"shape {time.shape}")
        if time.size > 1 and np.any(time[1:] < time[:-1]):
            raise InvalidFormatError("time", "ascending sequence", "values decrease")

        if depth_levels.ndim != 1 or depth_levels.size < 2:
            raise InvalidFormatError("depth", "1-D array with at least 2 levels", f"shape {depth_levels.shape}")
        if np.any(np.diff(depth_levels) <= 0):
            raise InvalidFormatError("depth", "strictly ascending levels", str(depth_levels.tolist()))

        if lat.ndim != 2 or lat.shape != lon.shape:
            raise InvalidFormatError(
                "lat/lon", "2-D arrays of identical shape", f"{lat.shape} and {lon.shape}"
            )

        object.__setattr__(self, "time", time)
        object.__setattr__(self, "depth_levels", depth_levels)
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lon", lon)

    @property
    def grid_shape(self) -> Tuple[int, int]:
        return self.lat.shape

    @property
    def max_depth(self) -> float:
        return float(self.depth_levels[-1])

    @property
    def time_span(self) -> Tuple[np.datetime64, np.datetime64]:
        return self.time[0], self.time[-1]

# ============================================================================
# Resolved Positions
# ============================================================================

@dataclass(frozen=True)
class TemporalWindow:
    """Inclusive index range into the dataset's time axis."""
    start_index: int
    end_index: int

    def __post_init__(self):
        if self.start_index < 0 or self.start_index > self.end_index:
            raise ValueError(
                f"Invalid temporal window: start_index={self.start_index}, end_index={self.end_index}"
            )

    @property
    def length(self) -> int:
        return self.end_index - self.start_index + 1

    def as_slice(self) -> slice:
        return slice(self.start_index, self.end_index + 1)


@dataclass(frozen=True)
class GridCell:
    """
    Nearest grid cell to a requested position.

    Attributes:
        i: Index along the first grid axis (Y)
        j: Index along the second grid axis (X)
        lat: Latitude of the cell center
        lon: Longitude of the cell center
        distance: Planar degree-space distance to the query point
    """
    i: int
    j: int
    lat: float = float("nan")
    lon: float = float("nan")
    distance: float = 0.0


@dataclass(frozen=True)
class VerticalPosition:
    """
    Vertical placement of a requested depth among the fixed levels.

    ``surface`` mode reads one level with no blending (depth 0, or a depth
    that matches a level exactly). ``interpolated`` mode reads
    ``lower_index`` and ``lower_index + 1`` and blends them with
    ``fraction`` in (0, 1).
    """
    mode: str
    lower_index: int
    fraction: float = 0.0

    def __post_init__(self):
        if self.mode not in (SURFACE_MODE, INTERPOLATED_MODE):
            raise ValueError(f"Unknown vertical mode: {self.mode}")
        if self.lower_index < 0:
            raise ValueError("lower_index must be non-negative")
        if self.mode == SURFACE_MODE and self.fraction != 0.0:
            raise ValueError("surface mode has no blend fraction")
        if self.mode == INTERPOLATED_MODE and not 0.0 < self.fraction < 1.0:
            raise ValueError(f"fraction must be in (0, 1), got {self.fraction}")

    @property
    def is_surface(self) -> bool:
        return self.mode == SURFACE_MODE

    @property
    def level_index(self) -> int:
        return self.lower_index

    @property
    def level_count(self) -> int:
        return 1 if self.is_surface else 2

# ============================================================================
# Slice Contract
# ============================================================================

@dataclass(frozen=True)
class VelocitySlice:
    """
    The exact sub-array requested from the main dataset for u and v.

    Data comes back grid-relative, shaped [level_count, time_count] once the
    singleton horizontal axes are dropped.
    """
    i: int
    j: int
    level_start: int
    level_count: int
    time_start: int
    time_count: int

    def __post_init__(self):
        if self.level_count not in (1, 2):
            raise ValueError(f"level_count must be 1 or 2, got {self.level_count}")
        if self.time_count < 1:
            raise ValueError("time_count must be positive")

    @property
    def shape(self) -> Tuple[int, int]:
        return self.level_count, self.time_count

    def to_selection(
        self,
        y_dim: str = Y_DIM,
        x_dim: str = X_DIM,
        depth_dim: str = DEPTH_DIM,
        time_dim: str = TIME_DIM,
    ) -> AxisSelection:
        """Render per-dimension (start, count) pairs for a data source read."""
        return {
            y_dim: (self.i, 1),
            x_dim: (self.j, 1),
            depth_dim: (self.level_start, self.level_count),
            time_dim: (self.time_start, self.time_count),
        }

# ============================================================================
# Output
# ============================================================================

@dataclass(frozen=True)
class VelocitySeries:
    """
    Extracted point time series in geographic orientation.

    Attributes:
        time: Timestamps of the resolved window
        u: Eastward velocity in m/s
        v: Northward velocity in m/s
        cell: Grid cell the series was taken from
        vertical: Vertical placement used for the series
        window: Temporal window the series covers
        angle: Grid rotation angle (radians) applied
    """
    time: np.ndarray
    u: np.ndarray
    v: np.ndarray
    cell: Optional[GridCell] = None
    vertical: Optional[VerticalPosition] = None
    window: Optional[TemporalWindow] = None
    angle: float = 0.0

    def __post_init__(self):
        time = _readonly(self.time)
        u = _readonly(self.u, dtype=np.float64)
        v = _readonly(self.v, dtype=np.float64)
        if not (time.ndim == u.ndim == v.ndim == 1) or not (time.size == u.size == v.size):
            raise ValueError(
                f"time, u and v must be 1-D with equal length, got {time.shape}, {u.shape}, {v.shape}"
            )
        if self.window is not None and self.window.length != time.size:
            raise ValueError(
                f"Series length {time.size} does not match window length {self.window.length}"
            )
        object.__setattr__(self, "time", time)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", v)

    def __len__(self) -> int:
        return int(self.time.size)

    @property
    def speed(self) -> np.ndarray:
        """Current speed in m/s."""
        return np.hypot(self.u, self.v)

    @property
    def direction(self) -> np.ndarray:
        """Direction the current flows toward, degrees clockwise from north."""
        return np.mod(np.degrees(np.arctan2(self.u, self.v)), 360.0)

    def to_dataset(self) -> xr.Dataset:
        """Return the series as an xarray Dataset with CF-style attributes."""
        attrs: Dict[str, Any] = {"angle": self.angle}
        if self.cell is not None:
            attrs.update({
                "grid_i": self.cell.i,
                "grid_j": self.cell.j,
                "grid_lat": self.cell.lat,
                "grid_lon": self.cell.lon,
            })
        if self.vertical is not None:
            attrs.update({
                "vertical_mode": self.vertical.mode,
                "level_index": self.vertical.lower_index,
                "level_fraction": self.vertical.fraction,
            })

        return xr.Dataset(
            {
                U_VAR: (TIME_DIM, self.u, {
                    "standard_name": "eastward_sea_water_velocity", "units": "m s-1"
                }),
                V_VAR: (TIME_DIM, self.v, {
                    "standard_name": "northward_sea_water_velocity", "units": "m s-1"
                }),
            },
            coords={TIME_DIM: self.time},
            attrs=attrs,
        )

# ============================================================================
# Source Configuration
# ============================================================================

@dataclass(frozen=True)
class SourceConfig:
    """
    Endpoints and access policy for the main and angle datasets.

    Attributes:
        main_dataset: URL or path of the velocity dataset
        angle_dataset: URL or path of the grid rotation angle dataset
        timeout: Seconds allowed per remote read (None disables)
        max_retries: Attempts per read for transient failures
        retry_delays: Sleep (seconds) before each retry; last value repeats
        engine: xarray backend engine
        chunks: Dask chunking passed to xarray.open_dataset
        max_distance_deg: Domain threshold for nearest-cell search (None disables)
        angle_index_offset: Offset from main (i, j) to angle (i, j)
    """
    main_dataset: str = DEFAULT_MAIN_URL
    angle_dataset: str = DEFAULT_ANGLE_URL
    timeout: Optional[float] = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delays: Tuple[float, ...] = DEFAULT_RETRY_DELAYS
    engine: Optional[str] = DEFAULT_ENGINE
    chunks: ChunkSetting = DEFAULT_CHUNKS
    max_distance_deg: Optional[float] = DEFAULT_MAX_DISTANCE_DEG
    angle_index_offset: int = ANGLE_INDEX_OFFSET

    def __post_init__(self):
        """Validate access policy."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive or None")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if any(delay < 0 for delay in self.retry_delays):
            raise ValueError("retry_delays must be non-negative")
        if self.max_distance_deg is not None and self.max_distance_deg <= 0:
            raise ValueError("max_distance_deg must be positive or None")
        if isinstance(self.chunks, dict):
            for key, value in self.chunks.items():
                if not isinstance(key, str):
                    raise ValueError("Chunk keys must be strings")
                if not isinstance(value, int) or value <= 0:
                    raise ValueError("Chunk values must be positive integers")
        object.__setattr__(self, "retry_delays", tuple(float(d) for d in self.retry_delays))

    def with_overrides(self, **kwargs) -> "SourceConfig":
        return replace(self, **kwargs)
