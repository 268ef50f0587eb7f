"""
NorKyst Reader Data Processing

This package provides vertical level resolution and blending, and rotation
of grid-relative velocities to geographic components.
"""

# Vertical level processing functions
from .vertical import (
    resolve_vertical_position,
    blend_levels,
)

# Grid rotation functions
from .rotation import (
    rotate_to_geographic,
    rotate_to_grid,
)

__all__ = [
    # Vertical level processing
    "resolve_vertical_position",
    "blend_levels",
    # Grid rotation
    "rotate_to_geographic",
    "rotate_to_grid",
]
