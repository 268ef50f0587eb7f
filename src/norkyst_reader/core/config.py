"""
NorKyst Reader Configuration and Constants

This module centralizes all configuration parameters, constants, and default values
for better maintainability and consistency across the codebase.
"""

import os

# ============================================================================
# Remote Endpoints
# ============================================================================

# Users can override via NORKYST_READER_MAIN_URL / NORKYST_READER_ANGLE_URL
DEFAULT_MAIN_URL = os.environ.get(
    "NORKYST_READER_MAIN_URL",
    "https://thredds.met.no/thredds/dodsC/sea/norkyst800m/1h/aggregate_be",
)
DEFAULT_ANGLE_URL = os.environ.get(
    "NORKYST_READER_ANGLE_URL",
    "https://thredds.met.no/thredds/dodsC/fou-hi/norkyst800m-anglematrix/angle_norkyst-800m_grd.nc",
)

# ============================================================================
# Dimension and Variable Names
# ============================================================================

TIME_DIM = 'time'
DEPTH_DIM = 'depth'
Y_DIM = 'Y'
X_DIM = 'X'

LAT_VAR = 'lat'
LON_VAR = 'lon'
U_VAR = 'u'
V_VAR = 'v'

ANGLE_VAR = 'angle'

# ============================================================================
# Vertical Levels
# ============================================================================

# Fixed depths (m) of the 1-hourly aggregate
NORKYST_DEPTH_LEVELS = (0.0, 3.0, 10.0, 15.0, 25.0, 50.0, 75.0, 100.0, 150.0, 200.0, 250.0, 300.0)

SURFACE_MODE = "surface"
INTERPOLATED_MODE = "interpolated"

# ============================================================================
# Grid Geometry
# ============================================================================

# angle index = main index + offset, applied to both horizontal axes
ANGLE_INDEX_OFFSET = -1

# Nominal horizontal resolution of the model grid in meters
NOMINAL_GRID_SPACING_M = 800.0

# Nearest cells farther than this (degrees, planar) are outside the domain
DEFAULT_MAX_DISTANCE_DEG = 0.1

# ============================================================================
# Remote Access Policy
# ============================================================================

DEFAULT_TIMEOUT = 120.0            # seconds per read
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAYS = (2.0, 5.0, 15.0)  # seconds
DEFAULT_ENGINE = "netcdf4"
DEFAULT_CHUNKS = None

# ============================================================================
# Time Processing
# ============================================================================

DATETIME_PRECISION = "ns"
EPOCH = "1970-01-01T00:00:00"

# MATLAB datenum of 1970-01-01
DATENUM_EPOCH = 719529.0
SECONDS_PER_DAY = 86400.0
