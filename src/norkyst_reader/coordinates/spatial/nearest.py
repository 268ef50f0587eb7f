"""
NorKyst Reader Nearest Grid Cell Search

This module locates the curvilinear grid cell closest to a geographic
position. Distance is measured in plain degree space,
``(lat - lat0)**2 + (lon - lon0)**2``, not along the sphere. On the 800 m
grid this places the point within about half a grid spacing (~400-500 m) of
the true nearest cell center, which is accepted as the accuracy bound.
"""

import logging
from typing import Optional
import numpy as np

from ...core.config import DEFAULT_MAX_DISTANCE_DEG
from ...core.core_types import GridCell
from ...core.exceptions import InvalidFormatError, SpatialDomainError

logger = logging.getLogger('norkyst_reader.coordinates.spatial.nearest')


def planar_distance(lat_grid: np.ndarray, lon_grid: np.ndarray,
                    latitude: float, longitude: float) -> np.ndarray:
    """Degree-space Euclidean distance from every grid point to (latitude, longitude)."""
    return np.sqrt((lat_grid - latitude) ** 2 + (lon_grid - longitude) ** 2)


def find_nearest_grid_cell(
    lat_grid: np.ndarray,
    lon_grid: np.ndarray,
    latitude: float,
    longitude: float,
    max_distance: Optional[float] = DEFAULT_MAX_DISTANCE_DEG,
) -> GridCell:
    """
    Find the grid cell nearest to a position.

    Cells are scanned in row-major order (``i`` outer, ``j`` inner) and the
    first cell at the minimum distance wins, so ties resolve to the smallest
    ``i`` and then the smallest ``j``. NaN grid points never match.

    Args:
        lat_grid: 2-D latitude grid indexed by (i, j)
        lon_grid: 2-D longitude grid, same shape as lat_grid
        latitude: Query latitude in degrees
        longitude: Query longitude in degrees
        max_distance: Largest accepted distance in degrees. ``None`` keeps the
            permissive behaviour and only logs a warning for distant matches.

    Returns:
        GridCell: Nearest cell with its coordinates and distance

    Raises:
        InvalidFormatError: If the grids are not 2-D with matching shapes
        SpatialDomainError: If the nearest cell is farther than max_distance
    """
    lat_grid = np.asarray(lat_grid, dtype=np.float64)
    lon_grid = np.asarray(lon_grid, dtype=np.float64)
    if lat_grid.ndim != 2 or lat_grid.shape != lon_grid.shape:
        raise InvalidFormatError(
            "lat/lon", "2-D arrays of identical shape", f"{lat_grid.shape} and {lon_grid.shape}"
        )

    distances = planar_distance(lat_grid, lon_grid, latitude, longitude)
    distances = np.where(np.isnan(distances), np.inf, distances)
    if not np.isfinite(distances).any():
        raise InvalidFormatError("lat/lon", "at least one finite grid point", "all NaN")

    # argmin returns the first minimum of the C-order flattened array
    flat_index = int(np.argmin(distances))
    i, j = np.unravel_index(flat_index, distances.shape)
    i, j = int(i), int(j)
    distance = float(distances[i, j])

    cell = GridCell(i=i, j=j, lat=float(lat_grid[i, j]), lon=float(lon_grid[i, j]),
                    distance=distance)

    if max_distance is not None:
        if distance > max_distance:
            raise SpatialDomainError(latitude, longitude, distance, max_distance)
    elif distance > DEFAULT_MAX_DISTANCE_DEG:
        logger.warning(
            "Nearest grid cell (%d, %d) is %.4f deg from (%s, %s); position is likely outside the domain",
            i, j, distance, latitude, longitude
        )

    logger.debug("Nearest cell to (%s, %s): (%d, %d) at %.5f deg", latitude, longitude, i, j, distance)
    return cell
