"""
NorKyst Reader Utilities

This package provides time conversion helpers and dataset information
queries.
"""

from .conversion import (
    epoch_seconds_to_datetime64,
    datetime64_to_epoch_seconds,
    datenum_to_datetime64,
    datetime64_to_datenum,
)

from .info import (
    get_dataset_info,
    summarize_metadata,
    describe_grid_cell,
)

__all__ = [
    # Conversion
    'epoch_seconds_to_datetime64',
    'datetime64_to_epoch_seconds',
    'datenum_to_datetime64',
    'datetime64_to_datenum',
    # Info
    'get_dataset_info',
    'summarize_metadata',
    'describe_grid_cell',
]
