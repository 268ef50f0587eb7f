import logging

import numpy as np
import pytest

from norkyst_reader.coordinates.spatial import find_nearest_grid_cell, planar_distance
from norkyst_reader.core.exceptions import InvalidFormatError, SpatialDomainError

from conftest import grid_lat_lon


def test_exact_grid_point_is_found():
    lat, lon = grid_lat_lon()
    cell = find_nearest_grid_cell(lat, lon, lat[3, 2], lon[3, 2])
    assert (cell.i, cell.j) == (3, 2)
    assert cell.distance == pytest.approx(0.0)
    assert cell.lat == pytest.approx(lat[3, 2])


def test_point_between_cells_picks_closest():
    lat, lon = grid_lat_lon()
    # a quarter of the way from (1, 1) toward (1, 2)
    qlat = lat[1, 1] + 0.25 * (lat[1, 2] - lat[1, 1])
    qlon = lon[1, 1] + 0.25 * (lon[1, 2] - lon[1, 1])
    cell = find_nearest_grid_cell(lat, lon, qlat, qlon)
    assert (cell.i, cell.j) == (1, 1)


def test_ties_resolve_to_first_cell_in_row_major_order():
    lat = np.array([[0.0, 0.0], [1.0, 1.0]])
    lon = np.array([[0.0, 1.0], [0.0, 1.0]])
    # equidistant from all four cells
    cell = find_nearest_grid_cell(lat, lon, 0.5, 0.5, max_distance=None)
    assert (cell.i, cell.j) == (0, 0)

    # equidistant from (0, 1) and (1, 0) only
    lat = np.array([[5.0, 0.0], [1.0, 5.0]])
    lon = np.array([[5.0, 1.0], [0.0, 5.0]])
    cell = find_nearest_grid_cell(lat, lon, 0.5, 0.5, max_distance=None)
    assert (cell.i, cell.j) == (0, 1)


def test_ties_on_a_fine_grid_within_the_domain_threshold():
    # binary fractions keep the equal distances exactly equal
    lat = np.array([[60.0, 60.0, 60.0], [60.0625, 60.0625, 60.0625]])
    lon = np.array([[5.0, 5.0625, 5.125], [5.0, 5.0625, 5.125]])
    cell = find_nearest_grid_cell(lat, lon, 60.03125, 5.09375)
    assert (cell.i, cell.j) == (0, 1)
    assert cell.distance < 0.1


def test_nan_grid_points_are_skipped():
    lat, lon = grid_lat_lon()
    lat = lat.copy()
    lat[2, 2] = np.nan
    cell = find_nearest_grid_cell(lat, lon, 60.02 + 0.004, 5.04 - 0.006)
    assert (cell.i, cell.j) != (2, 2)


def test_distance_is_planar_in_degrees():
    lat = np.array([[0.0]])
    lon = np.array([[0.0]])
    assert planar_distance(lat, lon, 0.03, 0.04)[0, 0] == pytest.approx(0.05)
    cell = find_nearest_grid_cell(lat, lon, 0.03, 0.04)
    assert cell.distance == pytest.approx(0.05)


def test_position_outside_domain_raises():
    lat, lon = grid_lat_lon()
    with pytest.raises(SpatialDomainError) as excinfo:
        find_nearest_grid_cell(lat, lon, 70.0, 20.0)
    assert excinfo.value.limit == pytest.approx(0.1)
    assert excinfo.value.distance > 1.0


def test_permissive_mode_returns_distant_cell_with_warning(caplog):
    # Far-away queries still map to an edge cell when the check is disabled;
    # the result is not a meaningful match for the query.
    lat, lon = grid_lat_lon()
    with caplog.at_level(logging.WARNING, logger="norkyst_reader"):
        cell = find_nearest_grid_cell(lat, lon, 70.0, 20.0, max_distance=None)
    assert (cell.i, cell.j) == (4, 3)
    assert "outside the domain" in caplog.text


def test_custom_threshold():
    lat, lon = grid_lat_lon()
    with pytest.raises(SpatialDomainError):
        find_nearest_grid_cell(lat, lon, lat[0, 0] + 0.004, lon[0, 0], max_distance=0.001)


def test_mismatched_grids_rejected():
    with pytest.raises(InvalidFormatError):
        find_nearest_grid_cell(np.zeros((2, 2)), np.zeros((2, 3)), 0.0, 0.0)
