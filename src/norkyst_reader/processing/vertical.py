"""
NorKyst Reader Vertical Level Processing

This module places a requested depth among the fixed output levels and
blends two adjacent levels into one series.
"""

import logging
import math
import numpy as np

from ..core.config import SURFACE_MODE, INTERPOLATED_MODE
from ..core.core_types import VerticalPosition
from ..core.exceptions import DepthRangeError, InvalidFormatError, DataSourceError

logger = logging.getLogger('norkyst_reader.processing.vertical')

# ============================================================================
# Vertical Position Resolution
# ============================================================================

def resolve_vertical_position(depth_levels, depth: float) -> VerticalPosition:
    """
    Resolve a depth into a single level or a pair of levels to blend.

    A continuous level index is obtained by inverting the piecewise-linear
    mapping from level index to depth. Its integer part is the lower level and
    its remainder the blend fraction. Depths that coincide with a level
    (including 0 m and the deepest level) read that single level.

    Args:
        depth_levels: Ascending fixed depths in meters
        depth: Requested depth in meters (positive down)

    Returns:
        VerticalPosition: Surface (single-level) or interpolated placement

    Raises:
        DepthRangeError: If depth is negative or below the deepest level

    Examples:
        >>> levels = [0, 3, 10, 15, 25, 50, 75, 100, 150, 200, 250, 300]
        >>> resolve_vertical_position(levels, 5)
        VerticalPosition(mode='interpolated', lower_index=1, fraction=0.2857...)
    """
    levels = np.asarray(depth_levels, dtype=np.float64)
    if levels.ndim != 1 or levels.size < 2 or np.any(np.diff(levels) <= 0):
        raise InvalidFormatError("depth", "strictly ascending 1-D levels", str(levels.tolist()))

    max_depth = float(levels[-1])
    if depth < 0 or depth > max_depth:
        raise DepthRangeError(depth, max_depth)

    if depth == 0:
        return VerticalPosition(SURFACE_MODE, 0)

    exact = np.flatnonzero(levels == depth)
    if exact.size:
        logger.debug("Depth %s m matches level %d exactly", depth, exact[0])
        return VerticalPosition(SURFACE_MODE, int(exact[0]))

    continuous = float(np.interp(depth, levels, np.arange(levels.size, dtype=np.float64)))
    lower_index = int(math.floor(continuous))
    fraction = continuous - lower_index

    if fraction == 0.0:
        return VerticalPosition(SURFACE_MODE, lower_index)

    logger.debug(
        "Depth %s m between levels %d (%s m) and %d (%s m), fraction %.4f",
        depth, lower_index, levels[lower_index], lower_index + 1, levels[lower_index + 1], fraction
    )
    return VerticalPosition(INTERPOLATED_MODE, lower_index, fraction)

# ============================================================================
# Level Blending
# ============================================================================

def blend_levels(values, position: VerticalPosition) -> np.ndarray:
    """
    Collapse a [level_count, time] block into one series.

    Interpolated positions combine the two rows as
    ``(1 - fraction) * lower + fraction * upper``; surface positions pass
    their single row through unchanged.

    Args:
        values: Array shaped [position.level_count, time_count]
        position: Vertical placement the block was fetched for

    Returns:
        np.ndarray: 1-D series of length time_count

    Raises:
        DataSourceError: If the block does not have the expected level count
    """
    block = np.asarray(values, dtype=np.float64)
    if block.ndim != 2 or block.shape[0] != position.level_count:
        raise DataSourceError(
            "velocity block", "blend vertical levels",
            f"Expected {position.level_count} level(s) x time, got shape {block.shape}"
        )

    if position.is_surface:
        return block[0].copy()

    return (1.0 - position.fraction) * block[0] + position.fraction * block[1]
