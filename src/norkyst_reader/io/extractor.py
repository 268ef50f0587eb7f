"""
NorKyst Reader Point Extractor

This module contains the orchestration that turns an extraction request into
a geographic velocity series: metadata fetch, index resolution, the velocity
fetch, vertical blending and rotation.
"""

import logging
from typing import Optional, Tuple
import numpy as np
import xarray as xr

from ..core.config import (
    TIME_DIM, DEPTH_DIM, LAT_VAR, LON_VAR, U_VAR, V_VAR, ANGLE_VAR,
)
from ..core.core_types import (
    DatasetMetadata, ExtractionRequest, GridCell, SourceConfig, TemporalWindow,
    VelocitySeries, VelocitySlice, VerticalPosition,
)
from ..core.exceptions import DataSourceError, InvalidFormatError
from ..coordinates.time_handler import resolve_temporal_window
from ..coordinates.spatial import find_nearest_grid_cell
from ..processing.vertical import resolve_vertical_position, blend_levels
from ..processing.rotation import rotate_to_geographic
from ..utils.conversion import epoch_seconds_to_datetime64
from .data_source import DataSource, XarrayDataSource

# Get logger for this module
logger = logging.getLogger('norkyst_reader.io.extractor')

# ============================================================================
# Slice Contract
# ============================================================================

def build_velocity_slice(
    cell: GridCell,
    vertical: VerticalPosition,
    window: TemporalWindow
) -> VelocitySlice:
    """Sub-array of u/v needed for one cell, one or two levels and the window."""
    return VelocitySlice(
        i=cell.i,
        j=cell.j,
        level_start=vertical.lower_index,
        level_count=vertical.level_count,
        time_start=window.start_index,
        time_count=window.length,
    )


def arrange_velocity_block(data: xr.DataArray, velocity_slice: VelocitySlice) -> np.ndarray:
    """
    Bring a fetched u/v block into [level, time] order.

    Raises:
        DataSourceError: If the block does not match the requested shape
    """
    missing = [d for d in (DEPTH_DIM, TIME_DIM) if d not in data.dims]
    if missing:
        raise DataSourceError(
            "velocity block", f"arrange '{data.name}'",
            f"Missing dimension(s) {missing} in {data.dims}"
        )

    extra = [d for d in data.dims if d not in (DEPTH_DIM, TIME_DIM)]
    if any(data.sizes[d] != 1 for d in extra):
        raise DataSourceError(
            "velocity block", f"arrange '{data.name}'",
            f"Expected a single grid cell, got sizes {dict(data.sizes)}"
        )

    block = data.squeeze(extra, drop=True).transpose(DEPTH_DIM, TIME_DIM).values
    if block.shape != velocity_slice.shape:
        raise DataSourceError(
            "velocity block", f"arrange '{data.name}'",
            f"Expected shape {velocity_slice.shape}, got {block.shape}"
        )
    return np.asarray(block, dtype=np.float64)

# ============================================================================
# Point Extractor
# ============================================================================

class PointExtractor:
    """
    Single-point velocity extractor.

    This class orchestrates an extraction:
    - Dataset metadata loading (cached per extractor, it never changes)
    - Time window, grid cell and vertical placement resolution
    - Velocity fetch restricted to the needed sub-array
    - Vertical blending and rotation to east/north

    Args:
        config: Endpoints and access policy
        main_source: Velocity dataset source; built from config when omitted
        angle_source: Rotation angle source; built from config when omitted
    """

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        main_source: Optional[DataSource] = None,
        angle_source: Optional[DataSource] = None,
    ):
        self.config = config or SourceConfig()
        self._main_source = main_source
        self._angle_source = angle_source
        # Only sources built here are closed here
        self._owned = set()
        self._metadata: Optional[DatasetMetadata] = None
        self._grid_dims: Optional[Tuple[str, str]] = None

    @property
    def main_source(self) -> DataSource:
        if self._main_source is None:
            self._main_source = XarrayDataSource.from_config(self.config.main_dataset, self.config)
            self._owned.add("main")
        return self._main_source

    @property
    def angle_source(self) -> DataSource:
        if self._angle_source is None:
            self._angle_source = XarrayDataSource.from_config(self.config.angle_dataset, self.config)
            self._owned.add("angle")
        return self._angle_source

    def close(self) -> None:
        """Close the sources this extractor opened itself."""
        if "main" in self._owned:
            self._main_source.close()
        if "angle" in self._owned:
            self._angle_source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def load_metadata(self) -> DatasetMetadata:
        """Fetch time, depth and lat/lon grids of the main dataset once."""
        if self._metadata is not None:
            return self._metadata

        source = self.main_source

        logger.info("Fetching time variable...")
        time = source.read(TIME_DIM).values
        if np.issubdtype(time.dtype, np.number):
            time = epoch_seconds_to_datetime64(time)

        logger.info("Fetching depth variable...")
        depth = source.read(DEPTH_DIM).values

        logger.info("Fetching lat/lon variables...")
        lat = source.read(LAT_VAR)
        lon = source.read(LON_VAR)
        try:
            if lat.ndim != 2 or lat.dims != lon.dims:
                raise InvalidFormatError(
                    "lat/lon", "2-D variables on the same dimensions", f"{lat.dims} and {lon.dims}"
                )
            metadata = DatasetMetadata(
                time=time, depth_levels=depth, lat=lat.values, lon=lon.values
            )
        except InvalidFormatError as e:
            raise DataSourceError(source.name, "load metadata", str(e)) from e

        self._grid_dims = (lat.dims[0], lat.dims[1])
        self._metadata = metadata
        logger.debug(
            "Metadata: %d times (%s to %s), %d levels, grid %s on %s",
            self._metadata.time.size, *self._metadata.time_span,
            self._metadata.depth_levels.size, self._metadata.grid_shape, self._grid_dims
        )
        return self._metadata

    @property
    def grid_dims(self) -> Tuple[str, str]:
        self.load_metadata()
        return self._grid_dims

    # ------------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------------

    def read_velocity(self, variable: str, velocity_slice: VelocitySlice) -> np.ndarray:
        """Fetch one velocity component as a [level, time] block."""
        y_dim, x_dim = self.grid_dims
        selection = velocity_slice.to_selection(y_dim=y_dim, x_dim=x_dim)
        data = self.main_source.read(variable, selection)
        return arrange_velocity_block(data, velocity_slice)

    def read_rotation_angle(self, cell: GridCell) -> float:
        """
        Fetch the grid rotation angle at a cell.

        The angle file's (i, j) origin is offset from the main dataset's by
        ``config.angle_index_offset`` on both axes.
        """
        offset = self.config.angle_index_offset
        ai, aj = cell.i + offset, cell.j + offset
        if ai < 0 or aj < 0:
            raise DataSourceError(
                self.angle_source.name, f"read '{ANGLE_VAR}'",
                f"Cell ({cell.i}, {cell.j}) has no rotation angle (angle index ({ai}, {aj}))"
            )

        dims = self.angle_source.dims(ANGLE_VAR)
        if len(dims) != 2:
            raise DataSourceError(
                self.angle_source.name, f"read '{ANGLE_VAR}'",
                f"Expected a 2-D variable, got dimensions {dims}"
            )

        data = self.angle_source.read(ANGLE_VAR, {dims[0]: (ai, 1), dims[1]: (aj, 1)})
        values = np.asarray(data.values, dtype=np.float64).ravel()
        if values.size != 1 or not np.isfinite(values[0]):
            raise DataSourceError(
                self.angle_source.name, f"read '{ANGLE_VAR}'",
                f"Expected one finite angle at ({ai}, {aj}), got {values}"
            )
        return float(values[0])

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def extract(self, request: ExtractionRequest) -> VelocitySeries:
        """
        Run the full extraction for one request.

        Returns:
            VelocitySeries: Eastward/northward velocity over the resolved window

        Raises:
            TimeRangeError, DepthRangeError, SpatialDomainError, DataSourceError
        """
        metadata = self.load_metadata()

        logger.info("Calculating subset indices...")
        window = resolve_temporal_window(metadata.time, request.start_time, request.end_time)
        cell = find_nearest_grid_cell(
            metadata.lat, metadata.lon, request.latitude, request.longitude,
            max_distance=self.config.max_distance_deg,
        )
        vertical = resolve_vertical_position(metadata.depth_levels, request.depth)
        velocity_slice = build_velocity_slice(cell, vertical, window)
        logger.debug("Velocity slice: %s", velocity_slice)

        logger.info("Fetching velocity data...")
        u_grid = blend_levels(self.read_velocity(U_VAR, velocity_slice), vertical)
        v_grid = blend_levels(self.read_velocity(V_VAR, velocity_slice), vertical)

        logger.info("Rotating vectors to true east/north...")
        angle = self.read_rotation_angle(cell)
        u_east, v_north = rotate_to_geographic(u_grid, v_grid, angle)

        logger.info("Done.")
        return VelocitySeries(
            time=metadata.time[window.as_slice()],
            u=u_east,
            v=v_north,
            cell=cell,
            vertical=vertical,
            window=window,
            angle=angle,
        )
