"""
NorKyst Reader Information Utilities

This module provides functions for querying what a dataset covers: time
span, depth levels and grid extent.
"""

from typing import Dict, Optional, Union
import numpy as np

from ..core.config import NOMINAL_GRID_SPACING_M
from ..core.core_types import DatasetMetadata, GridCell, SourceConfig


def get_dataset_info(source: Optional[Union[SourceConfig, "PointExtractor"]] = None) -> Dict:
    """
    Summarize the main dataset.

    Args:
        source: A SourceConfig, an existing PointExtractor, or None for the
            default endpoints

    Returns:
        Dict: Time span, depth levels and grid extent

    An extractor passed in is left open; one built here is closed.
    """
    from ..io.extractor import PointExtractor

    if isinstance(source, PointExtractor):
        return summarize_metadata(source.load_metadata())

    with PointExtractor(source) as extractor:
        return summarize_metadata(extractor.load_metadata())


def summarize_metadata(metadata: DatasetMetadata) -> Dict:
    """Summarize already-loaded dataset metadata."""
    start, end = metadata.time_span
    return {
        'time_start': start,
        'time_end': end,
        'time_steps': int(metadata.time.size),
        'depth_levels': metadata.depth_levels.tolist(),
        'max_depth': metadata.max_depth,
        'grid_shape': metadata.grid_shape,
        'lat_range': (float(np.nanmin(metadata.lat)), float(np.nanmax(metadata.lat))),
        'lon_range': (float(np.nanmin(metadata.lon)), float(np.nanmax(metadata.lon))),
    }


def describe_grid_cell(metadata: DatasetMetadata, cell: GridCell) -> Dict:
    """Describe a resolved grid cell and whether it sits on the grid edge."""
    lat0 = metadata.lat[cell.i, cell.j]
    lon0 = metadata.lon[cell.i, cell.j]
    return {
        'i': cell.i,
        'j': cell.j,
        'lat': float(lat0),
        'lon': float(lon0),
        'distance_deg': cell.distance,
        'nominal_spacing_m': NOMINAL_GRID_SPACING_M,
        'on_boundary': (cell.i in (0, metadata.grid_shape[0] - 1)
                        or cell.j in (0, metadata.grid_shape[1] - 1)),
    }
