"""
NorKyst Reader Grid Rotation

Model velocities are stored along the local grid axes. Rotating by the
grid angle at the cell gives eastward/northward components.
"""

from typing import Tuple
import numpy as np


def rotate_to_geographic(u, v, angle: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Rotate grid-relative (u, v) into (east, north) components.

    ``u_east = u cos(a) - v sin(a)`` and ``v_north = v cos(a) + u sin(a)``.
    The angle is a static grid property, so one value covers the whole series.

    Args:
        u: Velocity along the grid x-axis
        v: Velocity along the grid y-axis
        angle: Angle between the grid x-axis and true east, radians

    Returns:
        Tuple[np.ndarray, np.ndarray]: Eastward and northward velocity
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return u * cos_a - v * sin_a, v * cos_a + u * sin_a


def rotate_to_grid(u_east, v_north, angle: float) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of rotate_to_geographic."""
    return rotate_to_geographic(u_east, v_north, -angle)
