"""
NorKyst Reader Data Sources

A data source answers one question: give me variable X restricted to these
(start, count) ranges per dimension. The extraction pipeline only talks to
this interface, so OPeNDAP endpoints, local NetCDF files and in-memory test
datasets are interchangeable.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union
import xarray as xr

from ..core.core_types import AxisSelection, ChunkSetting, SourceConfig
from ..core.exceptions import (
    DataSourceError, VariableNotFoundError, check_variables_availability,
)
from .remote import call_with_retries

logger = logging.getLogger('norkyst_reader.io.data_source')

# Raised by xarray/netCDF4 for content the backend cannot decode or index
MALFORMED_DATA_ERRORS = (ValueError, KeyError, TypeError, IndexError)

# ============================================================================
# Interface
# ============================================================================

class DataSource(ABC):
    """Read access to named variables by per-dimension offset and count."""

    name: str = "data source"

    @abstractmethod
    def variables(self) -> Sequence[str]:
        """Names of the variables this source exposes."""

    @abstractmethod
    def dims(self, variable: str) -> Tuple[str, ...]:
        """Dimension names of a variable, in storage order."""

    @abstractmethod
    def read(self, variable: str, selection: Optional[AxisSelection] = None) -> xr.DataArray:
        """
        Read a sub-array of a variable.

        Args:
            variable: Variable name
            selection: Mapping of dimension name to (start, count). Dimensions
                not listed are read whole.

        Returns:
            xr.DataArray: Loaded values with dimensions in storage order
        """

    def close(self) -> None:
        """Release any underlying resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

# ============================================================================
# xarray-backed Source
# ============================================================================

def _build_indexers(
    name: str,
    variable: str,
    sizes: Dict[str, int],
    selection: AxisSelection,
) -> Dict[str, slice]:
    indexers = {}
    for dim, (start, count) in selection.items():
        if dim not in sizes:
            raise DataSourceError(
                name, f"read '{variable}'",
                f"Dimension '{dim}' not in variable dimensions {tuple(sizes)}"
            )
        start, count = int(start), int(count)
        if start < 0 or count < 1 or start + count > sizes[dim]:
            raise DataSourceError(
                name, f"read '{variable}'",
                f"Selection {dim}=[{start}, {start + count}) outside [0, {sizes[dim]})"
            )
        indexers[dim] = slice(start, start + count)
    return indexers


class XarrayDataSource(DataSource):
    """
    Data source backed by ``xarray.open_dataset``.

    Accepts an OPeNDAP URL or file path (opened lazily on first use) or an
    already-open ``xarray.Dataset``. Every read that touches the backend runs
    under the timeout/retry policy.

    Args:
        source: URL, path or open dataset
        engine: xarray backend engine (e.g. 'netcdf4')
        chunks: Dask chunking for lazy opening; None reads through the backend
        timeout: Seconds allowed per read
        max_retries: Attempts per read for transient failures
        retry_delays: Delay schedule between attempts
        decode_times: Passed to xarray.open_dataset
    """

    def __init__(
        self,
        source: Union[str, Path, xr.Dataset],
        *,
        engine: Optional[str] = None,
        chunks: ChunkSetting = None,
        timeout: Optional[float] = None,
        max_retries: int = 1,
        retry_delays: Iterable[float] = (),
        decode_times: bool = True,
    ):
        if isinstance(source, xr.Dataset):
            self._dataset: Optional[xr.Dataset] = source
            self.name = source.attrs.get("title", "in-memory dataset")
            self._location = None
        else:
            self._dataset = None
            self._location = str(source)
            self.name = self._location
        self.engine = engine
        self.chunks = chunks
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delays = tuple(retry_delays)
        self.decode_times = decode_times

    @classmethod
    def from_config(cls, location: Union[str, Path, xr.Dataset], config: SourceConfig,
                    **kwargs) -> "XarrayDataSource":
        """Create a source using the access policy of a SourceConfig."""
        return cls(
            location,
            engine=config.engine,
            chunks=config.chunks,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_delays=config.retry_delays,
            **kwargs,
        )

    def _call(self, func, operation: str):
        try:
            return call_with_retries(
                func,
                resource=self.name,
                operation=operation,
                timeout=self.timeout,
                max_retries=self.max_retries,
                retry_delays=self.retry_delays,
            )
        except MALFORMED_DATA_ERRORS as e:
            raise DataSourceError(self.name, operation, f"{type(e).__name__}: {e}") from e

    def _require(self, variable: str, operation: str) -> None:
        try:
            check_variables_availability([variable], self.variables())
        except VariableNotFoundError as e:
            raise DataSourceError(self.name, operation, e.message) from e

    @property
    def dataset(self) -> xr.Dataset:
        """The underlying dataset, opened on first access."""
        if self._dataset is None:
            logger.info("Opening dataset %s", self._location)

            def _open():
                return xr.open_dataset(
                    self._location,
                    engine=self.engine,
                    chunks=self.chunks,
                    decode_times=self.decode_times,
                )

            self._dataset = self._call(_open, "open dataset")
        return self._dataset

    def variables(self) -> Sequence[str]:
        return list(self.dataset.variables)

    def dims(self, variable: str) -> Tuple[str, ...]:
        self._require(variable, f"inspect '{variable}'")
        return tuple(self.dataset[variable].dims)

    def read(self, variable: str, selection: Optional[AxisSelection] = None) -> xr.DataArray:
        self._require(variable, f"read '{variable}'")
        data = self.dataset[variable]
        indexers = _build_indexers(self.name, variable, dict(data.sizes), selection or {})
        subset = data.isel(indexers) if indexers else data

        logger.debug("Reading %s%s from %s", variable, indexers or "", self.name)
        return self._call(subset.load, f"read '{variable}'")

    def close(self) -> None:
        if self._dataset is not None and self._location is not None:
            self._dataset.close()
            self._dataset = None
