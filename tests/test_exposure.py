"""Tests for county exposure tables and the table builder."""

import warnings

import pandas as pd
import pytest

from hurrexpo.connectors.hazard_source import HazardDataSource
from hurrexpo.errors import EmptyResultWarning, InvalidLocationError, InvalidWindowError, MalformedStormIdError
from hurrexpo.exposure import (
    build_table,
    county_distance,
    county_metric,
    county_rain,
    county_wind,
    exposure_table,
    partition_by_loc,
)
from hurrexpo.metrics import MetricKind


class TestCountyWind:
    def test_alberto_exposed(self, source):
        out = county_wind(source, ["22071", "51700"], 1988, 2005, 20.0)
        assert list(out.columns) == ["storm_id", "loc", "max_sust", "max_gust"]
        assert out.iloc[0].to_dict() == {"storm_id": "Alberto-1988", "loc": "22071",
                                         "max_sust": 25.1, "max_gust": 30.0}

    def test_threshold_boundary_and_order(self, source):
        out = county_wind(source, ["22071", "51700"], 1988, 2005, 20.0)
        assert out["storm_id"].tolist() == ["Alberto-1988", "Andrew-1992", "Katrina-2005"]

    def test_gust_variable(self, source):
        out = county_wind(source, ["22071", "51700"], 1988, 1988, 30.0, wind_var="max_gust")
        assert out["loc"].tolist() == ["22071"]

    def test_bad_wind_var(self, source):
        with pytest.raises(ValueError):
            county_wind(source, ["22071"], 1988, 2005, 20.0, wind_var="mean")

    def test_year_filter(self, source):
        out = county_wind(source, ["22071"], 1988, 1988, 0.0)
        assert "Katrina-2005" not in out["storm_id"].tolist()

    def test_idempotent(self, source):
        a = county_wind(source, ["22071", "51700"], 1988, 2005, 10.0)
        b = county_wind(source, ["22071", "51700"], 1988, 2005, 10.0)
        pd.testing.assert_frame_equal(a, b)
        assert a.to_csv(index=False) == b.to_csv(index=False)


class TestCountyRain:
    def test_window_sum_and_columns(self, source):
        out = county_rain(source, ["22071"], 1988, 2005, 50.0, days_included=[-1, 0, 1])
        assert list(out.columns) == ["storm_id", "loc", "closest_date", "precip_mm"]
        assert out.to_dict("records") == [
            {"storm_id": "Katrina-2005", "loc": "22071", "closest_date": "2005-08-29", "precip_mm": 100.0}
        ]

    def test_rain_limit_boundary_included(self, source):
        """Katrina-2005 totals exactly 100 mm over -1..1 and the limit is inclusive."""
        out = county_rain(source, ["22071"], 2005, 2005, 100.0, days_included=[-1, 0, 1])
        assert out["storm_id"].tolist() == ["Katrina-2005"]
        assert out["precip_mm"].tolist() == [100.0]

    def test_distance_limit_adds_column(self, source):
        out = county_rain(source, ["22071"], 1988, 2005, 50.0, dist_limit=20.0, days_included=[-1, 0, 1])
        assert list(out.columns) == ["storm_id", "loc", "closest_date", "precip_mm", "dist_km"]
        assert out["dist_km"].tolist() == [18.4]

    def test_distance_limit_excludes(self, source):
        with pytest.warns(EmptyResultWarning):
            out = county_rain(source, ["22071"], 1988, 2005, 50.0, dist_limit=10.0, days_included=[-1, 0, 1])
        assert out.empty

    def test_invalid_window_before_any_query(self, wind_df):
        """A wind-only source would fail on a rain query; the window check comes first."""
        wind_only = HazardDataSource.from_frames(wind=wind_df)
        with pytest.raises(InvalidWindowError):
            county_rain(wind_only, ["22071"], 1988, 2005, 50.0, days_included=[-4, 0])


class TestCountyDistance:
    def test_within_limit(self, source):
        out = county_distance(source, ["22071"], 1988, 2005, 50.0)
        assert list(out.columns) == ["storm_id", "loc", "dist_km"]
        assert out["storm_id"].tolist() == ["Andrew-1992", "Katrina-2005"]


class TestCountyMetric:
    def test_empty_result_warns(self, source):
        with pytest.warns(EmptyResultWarning):
            out = county_metric(source, ["22999"], 1988, 2005, 20.0, "wind")
        assert out.empty
        assert list(out.columns) == ["storm_id", "loc", "max_sust", "max_gust"]

    def test_communities_rejected(self, source, ny_communities):
        with pytest.raises(InvalidLocationError):
            county_metric(source, ny_communities, 1988, 2005, 20.0, "wind")

    def test_malformed_source_storm_id(self, wind_df):
        bad = wind_df.copy()
        bad.loc[0, "storm_id"] = "Alberto"
        src = HazardDataSource.from_frames(wind=bad)
        with pytest.raises(MalformedStormIdError):
            county_metric(src, ["22071"], 1988, 2005, 20.0, MetricKind.WIND)

    def test_dispatch_by_location_shape(self, source, ny_communities):
        counties = exposure_table(source, ["36005"], 1988, 2012, 0.0, "wind")
        communities = exposure_table(source, ny_communities, 1988, 2012, 0.0, "wind")
        assert "max_sust" in counties.columns
        assert "max_value" in communities.columns


class TestBuildTable:
    def test_duplicates_dropped(self, wind_df):
        rows = pd.concat([wind_df, wind_df.iloc[[0]]], ignore_index=True)
        out = build_table(rows, "wind")
        assert not out.duplicated(subset=["loc", "storm_id"]).any()
        assert len(out) == len(wind_df)

    def test_non_empty_does_not_warn(self, wind_df):
        with warnings.catch_warnings():
            warnings.simplefilter("error", EmptyResultWarning)
            build_table(wind_df, "wind")


class TestPartition:
    def test_one_frame_per_location(self, source):
        table = county_wind(source, ["22071", "36005", "36047"], 1988, 2012, 0.0)
        parts = partition_by_loc(table)
        assert list(parts) == ["22071", "36005", "36047"]
        assert "loc" not in parts["36005"].columns
        assert parts["36005"]["storm_id"].tolist() == ["Floyd-1999", "Sandy-2012"]
        assert sum(len(p) for p in parts.values()) == len(table)
