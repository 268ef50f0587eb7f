"""
NorKyst Reader Custom Exception Classes

This module defines all custom exception classes for better error handling
and more informative error messages.
"""

from typing import Optional, Sequence

# ============================================================================
# Base Exception
# ============================================================================

class NorKystReaderError(Exception):
    """Base exception class for all NorKyst Reader related errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        full_message = f"{message}\nDetails: {details}" if details else message
        super().__init__(full_message)

# ============================================================================
# Request Range Errors
# ============================================================================

class TimeRangeError(NorKystReaderError):
    """Requested time falls outside the dataset's time axis."""

    def __init__(self, requested: str, bound: str, reason: str):
        super().__init__(
            f"Requested time {requested} is not covered by the dataset",
            f"{reason} (dataset bound: {bound})"
        )
        self.requested = requested
        self.bound = bound

class DepthRangeError(NorKystReaderError):
    """Requested depth outside the fixed vertical levels."""

    def __init__(self, depth: float, max_depth: float):
        super().__init__(
            f"Requested depth {depth} m is not supported",
            f"Depth must be within [0, {max_depth}] m"
        )
        self.depth = depth
        self.max_depth = max_depth

class SpatialDomainError(NorKystReaderError):
    """Requested position lies outside the model grid."""

    def __init__(self, latitude: float, longitude: float, distance: float, limit: float):
        super().__init__(
            f"Position ({latitude}, {longitude}) is outside the model domain",
            f"Nearest grid cell is {distance:.4f} deg away (limit: {limit} deg)"
        )
        self.latitude = latitude
        self.longitude = longitude
        self.distance = distance
        self.limit = limit

# ============================================================================
# Data Source Errors
# ============================================================================

class DataSourceError(NorKystReaderError):
    """Remote or local data source failures."""

    def __init__(self, resource: str, operation: str, reason: str):
        super().__init__(f"Failed to {operation} from {resource}", reason)
        self.resource = resource
        self.operation = operation

class DataSourceTimeoutError(DataSourceError):
    """Data source did not answer within the configured timeout."""

    def __init__(self, resource: str, operation: str, timeout: float, attempts: int):
        super().__init__(
            resource, operation,
            f"Timed out after {timeout} s ({attempts} attempt(s))"
        )
        self.timeout = timeout
        self.attempts = attempts

class VariableNotFoundError(NorKystReaderError):
    """Variables not found."""

    def __init__(self, missing_variables: Sequence[str], available_variables: Optional[Sequence[str]] = None):
        vars_str = ", ".join(missing_variables)
        super().__init__(
            f"Variables not found: {vars_str}",
            f"Available variables: {', '.join(sorted(available_variables))}" if available_variables else None
        )
        self.missing_variables = list(missing_variables)
        self.available_variables = list(available_variables) if available_variables else None

# ============================================================================
# Parameter and Format Errors
# ============================================================================

class InvalidFormatError(NorKystReaderError):
    """Invalid data format errors."""

    def __init__(self, item: str, expected_format: str, actual: str):
        super().__init__(
            f"Invalid format for {item}: {actual}",
            f"Expected format: {expected_format}"
        )
        self.item = item
        self.expected_format = expected_format
        self.actual = actual

class ParameterError(NorKystReaderError):
    """Parameter validation errors."""

    def __init__(self, parameter: str, value: str, reason: str):
        super().__init__(f"Invalid parameter '{parameter}': {value}", reason)
        self.parameter = parameter
        self.value = value

# ============================================================================
# Utility Functions
# ============================================================================

def check_variables_availability(requested: Sequence[str], available: Sequence[str]) -> None:
    """Check if all requested variables are available."""
    missing = [v for v in requested if v not in available]
    if missing:
        raise VariableNotFoundError(missing, available)
