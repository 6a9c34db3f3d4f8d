"""Shared hazard fixtures.

Wind, rain and distance tables for a handful of Louisiana, Virginia and New
York City counties, small enough to check every expected value by hand.
"""

import pandas as pd
import pytest

from hurrexpo.connectors.hazard_source import HazardDataSource


def daily_rain(storm_id: str, fips: str, closest: str, by_offset: dict) -> list:
    """Daily rain rows for one storm/county, keyed by day offset from closest approach."""
    cad = pd.Timestamp(closest)
    return [
        {"storm_id": storm_id, "fips": fips, "date": cad + pd.Timedelta(days=off),
         "precipitation_mm": mm, "closest_approach_date": cad}
        for off, mm in by_offset.items()
    ]


@pytest.fixture
def wind_df() -> pd.DataFrame:
    return pd.DataFrame(
        [
            ("Alberto-1988", "22071", 25.1, 30.0),
            ("Alberto-1988", "51700", 12.4, 18.5),
            ("Andrew-1992", "22071", 20.0, 35.0),
            ("Katrina-2005", "22071", 38.6, 57.5),
            ("Floyd-1999", "36005", 18.0, 28.0),
            ("Floyd-1999", "36047", 24.0, 31.0),
            ("Sandy-2012", "36005", 10.0, 15.0),
            ("Sandy-2012", "36047", 14.0, 21.0),
        ],
        columns=["storm_id", "fips", "max_sustained", "max_gust"],
    )


@pytest.fixture
def rain_df() -> pd.DataFrame:
    rows = (
        daily_rain("Floyd-1999", "36005", "1999-09-17", {-1: 4.0, 0: 10.0})
        + daily_rain("Floyd-1999", "36047", "1999-09-17", {0: 60.0, 2: 8.0})
        # no row for offset -1
        + daily_rain("Alberto-1988", "22071", "1988-08-07", {-3: 100.0, 0: 5.0, 1: 2.5})
        + daily_rain("Katrina-2005", "22071", "2005-08-29", {-1: 20.0, 0: 50.0, 1: 30.0})
    )
    return pd.DataFrame(rows)


@pytest.fixture
def distance_df() -> pd.DataFrame:
    return pd.DataFrame(
        [
            ("Alberto-1988", "22071", 310.0),
            ("Andrew-1992", "22071", 50.0),
            ("Katrina-2005", "22071", 18.4),
            ("Floyd-1999", "36005", 40.0),
            ("Floyd-1999", "36047", 100.0),
        ],
        columns=["storm_id", "fips", "distance_km"],
    )


@pytest.fixture
def source(wind_df, rain_df, distance_df) -> HazardDataSource:
    return HazardDataSource.from_frames(wind=wind_df, rain=rain_df, distance=distance_df)


@pytest.fixture
def ny_communities() -> pd.DataFrame:
    return pd.DataFrame({"commun": ["ny", "ny", "no"], "fips": ["36005", "36047", "22071"]})
