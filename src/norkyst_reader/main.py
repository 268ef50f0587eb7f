"""
NorKyst Reader Main Interface

This module provides the main API functions for extracting point velocity
time series.
"""

import logging
from typing import Optional

from .core.core_types import ExtractionRequest, SourceConfig, TimeValue, VelocitySeries
from .io.data_source import DataSource
from .io.extractor import PointExtractor

# Get logger for this module
logger = logging.getLogger('norkyst_reader.main')


# ============================================================================
# Main API Function
# ============================================================================

def extract_timeseries(
    request: ExtractionRequest,
    *,
    config: Optional[SourceConfig] = None,
    main_source: Optional[DataSource] = None,
    angle_source: Optional[DataSource] = None,
) -> VelocitySeries:
    """
    Extract an east/north velocity time series at one position and depth.

    The output covers the stored samples bracketing the requested interval
    (up to one extra sample on each side), taken from the grid cell nearest
    to the position and linearly interpolated between the fixed depth levels.

    Args:
        request: Time interval, position and depth
        config: Endpoints and access policy (defaults to the public THREDDS server)
        main_source: Override for the velocity dataset
        angle_source: Override for the grid rotation angle dataset

    Returns:
        VelocitySeries: Timestamps with eastward (u) and northward (v) velocity in m/s

    Raises:
        TimeRangeError: If the interval is not covered by the dataset
        DepthRangeError: If the depth is below the deepest level
        SpatialDomainError: If the position is outside the model grid
        DataSourceError: If the data cannot be fetched

    Examples:
        >>> request = ExtractionRequest(
        ...     "2017-06-01T00:00", "2017-06-03T00:00",
        ...     latitude=60.39, longitude=5.32, depth=5
        ... )
        >>> series = extract_timeseries(request)
        >>> series.to_dataset()
    """
    with PointExtractor(config, main_source=main_source, angle_source=angle_source) as extractor:
        return extractor.extract(request)


# ============================================================================
# Convenience Functions
# ============================================================================

def extract_point_velocity(
    start_time: TimeValue,
    end_time: TimeValue,
    latitude: float,
    longitude: float,
    depth: float = 0.0,
    **kwargs
) -> VelocitySeries:
    """
    Build a request from plain arguments and extract it.

    Args:
        start_time: Start of the series
        end_time: End of the series
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        depth: Depth in meters, positive down
        **kwargs: Passed to extract_timeseries

    Examples:
        >>> series = extract_point_velocity(
        ...     "2017-06-01", "2017-06-02", 60.39, 5.32, depth=10
        ... )
        >>> series.u, series.v
    """
    request = ExtractionRequest(start_time, end_time, latitude, longitude, depth)
    logger.info(
        "Extracting velocity at (%s, %s), %s m, %s to %s",
        request.latitude, request.longitude, request.depth, request.start_time, request.end_time
    )
    return extract_timeseries(request, **kwargs)
