"""
NorKyst Reader Coordinate Handling

This package resolves a request's position and time interval into grid
and time-axis indices.
"""

# Spatial coordinate functions
from .spatial import (
    find_nearest_grid_cell,
    planar_distance,
)

# Time coordinate functions
from .time_handler import (
    normalize_time_value,
    resolve_temporal_window,
)

__all__ = [
    # Spatial
    "find_nearest_grid_cell",
    "planar_distance",
    # Time
    "normalize_time_value",
    "resolve_temporal_window",
]
