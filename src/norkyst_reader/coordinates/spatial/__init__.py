"""
NorKyst Reader Spatial Coordinate Handling

This package provides nearest-cell search on the curvilinear model grid.
"""

from .nearest import (
    find_nearest_grid_cell,
    planar_distance,
)

__all__ = [
    "find_nearest_grid_cell",
    "planar_distance",
]
