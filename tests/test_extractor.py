import numpy as np
import pytest
import xarray as xr

from norkyst_reader import (
    DataSourceError, DepthRangeError, ExtractionRequest, PointExtractor, SourceConfig,
    SpatialDomainError, TimeRangeError, extract_point_velocity, extract_timeseries,
)
from norkyst_reader.io.data_source import XarrayDataSource
from norkyst_reader.io.extractor import arrange_velocity_block
from norkyst_reader.core.core_types import VelocitySlice
from norkyst_reader.processing.rotation import rotate_to_geographic
from norkyst_reader.utils.conversion import datetime64_to_epoch_seconds

from conftest import TIMES, grid_lat_lon, make_main_dataset


class CountingSource(XarrayDataSource):
    def __init__(self, dataset):
        super().__init__(dataset)
        self.reads = []

    def read(self, variable, selection=None):
        self.reads.append((variable, selection))
        return super().read(variable, selection)


def request_at(i, j, depth, start="2020-01-01T01:30", end="2020-01-01T03:30"):
    lat, lon = grid_lat_lon()
    return ExtractionRequest(start, end, lat[i, j], lon[i, j], depth)


def test_interpolated_extraction(main_source, angle_source):
    series = extract_timeseries(
        request_at(2, 1, 5), main_source=main_source, angle_source=angle_source
    )

    assert len(series) == 4
    np.testing.assert_array_equal(series.time, TIMES[1:5])
    assert (series.cell.i, series.cell.j) == (2, 1)
    assert series.vertical.mode == "interpolated"
    assert series.vertical.fraction == pytest.approx(2 / 7)

    t = np.arange(1, 5)
    u_grid = 2100 + 1 + 2 / 7 + 0.01 * t
    v_grid = -(2100 + 1 + 2 / 7) - 0.02 * t
    # angle grid is one cell behind: (2, 1) -> (1, 0)
    assert series.angle == pytest.approx(0.1)
    u_east, v_north = rotate_to_geographic(u_grid, v_grid, 0.1)
    np.testing.assert_allclose(series.u, u_east)
    np.testing.assert_allclose(series.v, v_north)


def test_surface_extraction_is_unblended(main_source, zero_angle_source):
    series = extract_timeseries(
        request_at(3, 2, 0), main_source=main_source, angle_source=zero_angle_source
    )
    t = np.arange(1, 5)
    assert series.vertical.is_surface
    np.testing.assert_allclose(series.u, 3200 + 0.01 * t)
    np.testing.assert_allclose(series.v, -3200 - 0.02 * t)


def test_exact_level_uses_only_that_level(zero_angle_source):
    source = CountingSource(make_main_dataset())
    series = extract_timeseries(
        request_at(1, 1, 50), main_source=source, angle_source=zero_angle_source
    )
    t = np.arange(1, 5)
    np.testing.assert_allclose(series.u, 1100 + 5 + 0.01 * t)

    u_reads = [selection for variable, selection in source.reads if variable == "u"]
    assert u_reads == [{"Y": (1, 1), "X": (1, 1), "depth": (5, 1), "time": (1, 4)}]


def test_only_the_needed_sub_array_is_fetched(angle_source):
    source = CountingSource(make_main_dataset())
    extract_timeseries(request_at(2, 3, 12), main_source=source, angle_source=angle_source)

    velocity_reads = {variable: selection for variable, selection in source.reads if variable in ("u", "v")}
    # 12 m lies between 10 m (level 2) and 15 m (level 3)
    expected = {"Y": (2, 1), "X": (3, 1), "depth": (2, 2), "time": (1, 4)}
    assert velocity_reads == {"u": expected, "v": expected}


def test_depth_below_deepest_level_fails_before_fetching(angle_source):
    source = CountingSource(make_main_dataset())
    with pytest.raises(DepthRangeError):
        extract_timeseries(request_at(2, 1, 301), main_source=source, angle_source=angle_source)
    assert not any(variable in ("u", "v") for variable, _ in source.reads)


def test_time_outside_dataset_fails(main_source, angle_source):
    with pytest.raises(TimeRangeError):
        extract_timeseries(
            request_at(2, 1, 5, start="2019-12-31T00:00", end="2019-12-31T06:00"),
            main_source=main_source, angle_source=angle_source,
        )
    with pytest.raises(TimeRangeError):
        extract_timeseries(
            request_at(2, 1, 5, start="2020-01-01T03:00", end="2020-01-01T09:00"),
            main_source=main_source, angle_source=angle_source,
        )


def test_position_outside_domain_fails(main_source, angle_source):
    request = ExtractionRequest("2020-01-01T01:00", "2020-01-01T02:00", 65.0, 12.0, 0)
    with pytest.raises(SpatialDomainError):
        extract_timeseries(request, main_source=main_source, angle_source=angle_source)


def test_permissive_domain_check_returns_edge_cell(main_source, zero_angle_source):
    request = ExtractionRequest("2020-01-01T01:00", "2020-01-01T02:00", 65.0, 12.0, 0)
    series = extract_timeseries(
        request,
        config=SourceConfig(max_distance_deg=None),
        main_source=main_source,
        angle_source=zero_angle_source,
    )
    assert (series.cell.i, series.cell.j) == (4, 3)


def test_cell_without_rotation_angle_fails(main_source, angle_source):
    with pytest.raises(DataSourceError) as excinfo:
        extract_timeseries(request_at(0, 2, 0), main_source=main_source, angle_source=angle_source)
    assert "no rotation angle" in str(excinfo.value)


def test_angle_dataset_without_angle_variable_fails(main_source, angle_dataset):
    source = XarrayDataSource(angle_dataset.rename({"angle": "h"}))
    with pytest.raises(DataSourceError) as excinfo:
        extract_timeseries(request_at(2, 1, 5), main_source=main_source, angle_source=source)
    assert "angle" in str(excinfo.value)


def test_angle_variable_must_be_two_dimensional(main_source):
    source = XarrayDataSource(xr.Dataset({"angle": (("xi_rho",), np.zeros(4))}))
    with pytest.raises(DataSourceError):
        extract_timeseries(request_at(2, 1, 5), main_source=main_source, angle_source=source)


def test_decreasing_time_axis_fails(angle_source):
    source = XarrayDataSource(make_main_dataset(times=TIMES[::-1]))
    with pytest.raises(DataSourceError) as excinfo:
        extract_timeseries(request_at(2, 1, 5), main_source=source, angle_source=angle_source)
    assert excinfo.value.operation == "load metadata"
    assert "values decrease" in str(excinfo.value)


def test_one_dimensional_lat_lon_fails(angle_source):
    dataset = make_main_dataset().isel(X=0)
    with pytest.raises(DataSourceError):
        extract_timeseries(
            request_at(2, 0, 5), main_source=XarrayDataSource(dataset), angle_source=angle_source
        )


def test_angle_offset_is_configurable(main_source, angle_source):
    extractor = PointExtractor(
        SourceConfig(angle_index_offset=0), main_source=main_source, angle_source=angle_source
    )
    series = extractor.extract(request_at(0, 2, 0))
    assert series.angle == pytest.approx(0.02)


def test_metadata_is_fetched_once(angle_source):
    source = CountingSource(make_main_dataset())
    extractor = PointExtractor(main_source=source, angle_source=angle_source)
    extractor.extract(request_at(2, 1, 5))
    extractor.extract(request_at(3, 3, 0))
    metadata_reads = [variable for variable, _ in source.reads if variable in ("time", "depth", "lat", "lon")]
    assert metadata_reads == ["time", "depth", "lat", "lon"]


def test_numeric_epoch_time_axis_is_decoded(angle_source):
    dataset = make_main_dataset()
    dataset = dataset.assign_coords(time=datetime64_to_epoch_seconds(TIMES))
    series = extract_timeseries(
        request_at(2, 1, 5), main_source=XarrayDataSource(dataset), angle_source=angle_source
    )
    np.testing.assert_array_equal(series.time, TIMES[1:5])


def test_default_sources_are_built_from_config(monkeypatch, main_dataset, angle_dataset):
    datasets = {"main.nc": main_dataset, "angle.nc": angle_dataset}
    monkeypatch.setattr(
        "norkyst_reader.io.data_source.xr.open_dataset",
        lambda location, **kwargs: datasets[location],
    )
    config = SourceConfig(main_dataset="main.nc", angle_dataset="angle.nc")
    lat, lon = grid_lat_lon()
    series = extract_point_velocity(
        "2020-01-01T00:00", "2020-01-01T05:00", lat[2, 2], lon[2, 2], 0, config=config
    )
    assert len(series) == 6


def test_output_dataset(main_source, angle_source):
    series = extract_timeseries(
        request_at(2, 1, 5), main_source=main_source, angle_source=angle_source
    )
    ds = series.to_dataset()
    assert ds["u"].attrs["standard_name"] == "eastward_sea_water_velocity"
    assert ds["v"].attrs["units"] == "m s-1"
    assert ds.attrs["grid_i"] == 2
    assert ds.attrs["vertical_mode"] == "interpolated"
    assert ds.sizes["time"] == 4


def test_arrange_rejects_wrong_shape(main_source):
    velocity_slice = VelocitySlice(i=0, j=0, level_start=0, level_count=2, time_start=0, time_count=3)
    data = main_source.read("u", {"Y": (0, 1), "X": (0, 1), "depth": (0, 1), "time": (0, 3)})
    with pytest.raises(DataSourceError):
        arrange_velocity_block(data, velocity_slice)

    data = main_source.read("u", {"Y": (0, 2), "X": (0, 1), "depth": (0, 2), "time": (0, 3)})
    with pytest.raises(DataSourceError):
        arrange_velocity_block(data, velocity_slice)
