"""
NorKyst Reader Data Access

This package provides the data source interface, the remote call policy and
the point extraction orchestrator.
"""

from .data_source import DataSource, XarrayDataSource
from .remote import call_with_retries
from .extractor import PointExtractor, build_velocity_slice, arrange_velocity_block

__all__ = [
    "DataSource",
    "XarrayDataSource",
    "call_with_retries",
    "PointExtractor",
    "build_velocity_slice",
    "arrange_velocity_block",
]
