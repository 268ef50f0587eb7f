"""
NorKyst Reader - Point velocity time series from the NorKyst-800m ocean model.

This package extracts a single-point horizontal velocity time series from the
NorKyst-800m curvilinear-grid ocean model output served over OPeNDAP, and
rotates the model's grid-relative components to true east/north.

Key Features:
- Time window resolution that brackets the requested interval
- Nearest grid cell search on the curvilinear grid with a domain check
- Linear interpolation between the fixed output depth levels
- Rotation of grid-relative velocity to eastward/northward velocity
- Fetches only the needed sub-array, with timeout and retries

Quick Start:
    >>> import norkyst_reader as nk
    >>> series = nk.extract_point_velocity(
    ...     "2017-06-01T00:00", "2017-06-03T00:00",
    ...     latitude=60.39, longitude=5.32, depth=5
    ... )
    >>> ds = series.to_dataset()
"""

__version__ = "1.0.0"
__author__ = "NorKyst Reader Development Team"

# Import main interface functions
from .main import (
    extract_timeseries,
    extract_point_velocity,
)

# Import data classes
from .core.core_types import (
    ExtractionRequest,
    DatasetMetadata,
    TemporalWindow,
    GridCell,
    VerticalPosition,
    VelocitySlice,
    VelocitySeries,
    SourceConfig,
)

# Import configuration for advanced users
from .core.config import (
    NORKYST_DEPTH_LEVELS,
    ANGLE_INDEX_OFFSET,
    DEFAULT_MAIN_URL,
    DEFAULT_ANGLE_URL,
)

# Import exceptions for error handling
from .core.exceptions import (
    NorKystReaderError,
    TimeRangeError,
    DepthRangeError,
    SpatialDomainError,
    DataSourceError,
    DataSourceTimeoutError,
    ParameterError,
)

# Import pipeline components
from .coordinates import resolve_temporal_window, find_nearest_grid_cell
from .processing import resolve_vertical_position, blend_levels, rotate_to_geographic
from .io import DataSource, XarrayDataSource, PointExtractor
from .utils import get_dataset_info, datenum_to_datetime64, datetime64_to_datenum

# Import logging configuration
from .core.logging_config import setup_logging, set_log_level

__all__ = [
    '__version__',

    # Main interface functions
    'extract_timeseries',
    'extract_point_velocity',

    # Data classes
    'ExtractionRequest',
    'DatasetMetadata',
    'TemporalWindow',
    'GridCell',
    'VerticalPosition',
    'VelocitySlice',
    'VelocitySeries',
    'SourceConfig',

    # Configuration constants
    'NORKYST_DEPTH_LEVELS',
    'ANGLE_INDEX_OFFSET',
    'DEFAULT_MAIN_URL',
    'DEFAULT_ANGLE_URL',

    # Exception classes
    'NorKystReaderError',
    'TimeRangeError',
    'DepthRangeError',
    'SpatialDomainError',
    'DataSourceError',
    'DataSourceTimeoutError',
    'ParameterError',

    # Pipeline components
    'resolve_temporal_window',
    'find_nearest_grid_cell',
    'resolve_vertical_position',
    'blend_levels',
    'rotate_to_geographic',
    'DataSource',
    'XarrayDataSource',
    'PointExtractor',

    # Utilities
    'get_dataset_info',
    'datenum_to_datetime64',
    'datetime64_to_datenum',

    # Logging configuration
    'setup_logging',
    'set_log_level',
]
