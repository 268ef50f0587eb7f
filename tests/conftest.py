import numpy as np
import pytest
import xarray as xr

from norkyst_reader.core.config import NORKYST_DEPTH_LEVELS
from norkyst_reader.io.data_source import XarrayDataSource

NY, NX = 5, 4
TIMES = np.arange("2020-01-01T00", "2020-01-01T06", dtype="datetime64[h]").astype("datetime64[ns]")


def grid_lat_lon():
    i, j = np.meshgrid(np.arange(NY), np.arange(NX), indexing="ij")
    lat = 60.0 + 0.01 * i + 0.002 * j
    lon = 5.0 + 0.02 * j - 0.003 * i
    return lat, lon


def grid_u(t, k, i, j):
    """Velocity field that encodes cell, level and time in its value."""
    return 1000.0 * i + 100.0 * j + k + 0.01 * t


def grid_v(t, k, i, j):
    return -(1000.0 * i + 100.0 * j + k) - 0.02 * t


def make_main_dataset(times=TIMES, levels=NORKYST_DEPTH_LEVELS):
    lat, lon = grid_lat_lon()
    t, k, i, j = np.meshgrid(
        np.arange(len(times)), np.arange(len(levels)), np.arange(NY), np.arange(NX),
        indexing="ij",
    )
    return xr.Dataset(
        {
            "u": (("time", "depth", "Y", "X"), grid_u(t, k, i, j)),
            "v": (("time", "depth", "Y", "X"), grid_v(t, k, i, j)),
            "lat": (("Y", "X"), lat),
            "lon": (("Y", "X"), lon),
        },
        coords={"time": np.asarray(times), "depth": np.asarray(levels, dtype=float)},
        attrs={"title": "synthetic norkyst"},
    )


def make_angle_dataset(value=None):
    # angle grid is indexed one cell behind the main grid
    a, b = np.meshgrid(np.arange(NY), np.arange(NX), indexing="ij")
    angle = 0.1 * a + 0.01 * b if value is None else np.full((NY, NX), value)
    return xr.Dataset(
        {"angle": (("eta_rho", "xi_rho"), angle)},
        attrs={"title": "synthetic angle"},
    )


@pytest.fixture
def main_dataset():
    return make_main_dataset()


@pytest.fixture
def angle_dataset():
    return make_angle_dataset()


@pytest.fixture
def main_source(main_dataset):
    return XarrayDataSource(main_dataset)


@pytest.fixture
def angle_source(angle_dataset):
    return XarrayDataSource(angle_dataset)


@pytest.fixture
def zero_angle_source():
    return XarrayDataSource(make_angle_dataset(value=0.0))
