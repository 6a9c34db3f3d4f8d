"""
County and community hurricane exposure tables.

Each entry point runs the same steps: resolve locations, pull the hazard
records for them, filter by storm year, window the rain (rain only), roll up
to communities (communities only), apply the exposure threshold, and build a
table keyed by a uniform ``loc`` column.
"""

from __future__ import annotations

import logging
import warnings
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from .community import aggregate_community
from .config import DEFAULT_DAYS_INCLUDED, OUTPUT_RENAMES
from .connectors.hazard_source import HazardDataSource
from .errors import EmptyResultWarning, InvalidLocationError
from .filters import filter_records
from .locations import CommunityMap, LocationInput, LocationSet, resolve
from .metrics import MetricKind, Reduction, wind_value_column
from .rain import aggregate_rain, validate_days

logger = logging.getLogger(__name__)


def _county_rows(source: HazardDataSource, fips: Sequence[str], year_range: Tuple[int, int],
                 metric: MetricKind, threshold: Optional[float], wind_var: str,
                 days_included: Sequence[int], dist_limit: Optional[float]) -> Tuple[pd.DataFrame, str]:
    """County-level rows for ``metric`` plus the column exposure is judged on."""
    if metric is MetricKind.WIND:
        col = wind_value_column(wind_var)
        rows = filter_records(source.query(fips, metric.spec.hazard), fips, year_range, metric, threshold, col)
        return rows, col
    if metric is MetricKind.DISTANCE:
        rows = filter_records(source.query(fips, metric.spec.hazard), fips, year_range, metric, threshold)
        return rows, metric.spec.value_column

    col = metric.spec.value_column
    daily = filter_records(source.query(fips, metric.spec.hazard), fips, year_range, metric)
    rows = aggregate_rain(daily, days_included)
    if threshold is not None:
        rows = rows[metric.passes(rows[col], threshold)]
    if dist_limit is not None:
        dist = filter_records(source.query(fips, "distance"), fips, year_range,
                              MetricKind.DISTANCE, dist_limit)
        rows = rows.merge(dist[["storm_id", "fips", "distance_km"]], on=["storm_id", "fips"], how="inner")
    return rows.reset_index(drop=True), col


def build_table(rows: pd.DataFrame, metric) -> pd.DataFrame:
    """
    Final exposure table with a uniform ``loc`` column (county FIPS or community
    name). County rows keep the metric's columns; community rows keep the mean
    and the exposure-deciding max_value (min_value under a MIN reduction).
    One row per (loc, storm_id).
    """
    metric = MetricKind.parse(metric)
    if "commun" in rows.columns:
        value_cols = [c for c in rows.columns if c in ("mean_value", "max_value", "min_value")]
        table = rows.rename(columns={"commun": "loc"})[["storm_id", "loc"] + value_cols]
    else:
        table = rows.rename(columns={"fips": "loc", **OUTPUT_RENAMES})
        cols = [c for c in metric.spec.output_columns if c in table.columns]
        if metric is MetricKind.RAIN and "dist_km" in table.columns:
            cols.append("dist_km")
        table = table[["storm_id", "loc"] + cols].copy()
        if "closest_date" in table.columns:
            table["closest_date"] = pd.to_datetime(table["closest_date"]).dt.strftime("%Y-%m-%d")
    dupes = table.duplicated(subset=["loc", "storm_id"])
    if dupes.any():
        logger.warning("Dropping %d duplicate loc/storm rows", int(dupes.sum()))
        table = table[~dupes]
    if table.empty:
        warnings.warn(f"No storms met the {metric.value} exposure rule for the requested locations",
                      EmptyResultWarning, stacklevel=2)
    return table.reset_index(drop=True)


def county_metric(source: HazardDataSource, locations: LocationInput, start_year: int, end_year: int,
                  threshold: Optional[float], metric, wind_var: str = "max_sust",
                  days_included: Sequence[int] = DEFAULT_DAYS_INCLUDED,
                  dist_limit: Optional[float] = None) -> pd.DataFrame:
    """Exposure table for individual counties, one row per exposed county/storm."""
    metric = MetricKind.parse(metric)
    locs = locations if isinstance(locations, LocationSet) else resolve(locations)
    if isinstance(locs, CommunityMap):
        raise InvalidLocationError("county_metric takes counties; use community_metric for communities")
    if metric is MetricKind.RAIN:
        days_included = validate_days(days_included)
    rows, _ = _county_rows(source, locs.fips, (start_year, end_year), metric, threshold,
                           wind_var, days_included, dist_limit)
    logger.debug("county_metric %s: %d rows for %d counties", metric.value, len(rows), len(locs))
    return build_table(rows, metric)


def community_metric(source: HazardDataSource, communities, start_year: int, end_year: int,
                     threshold: Optional[float], metric, wind_var: str = "max_sust",
                     days_included: Sequence[int] = DEFAULT_DAYS_INCLUDED,
                     dist_limit: Optional[float] = None,
                     reduction: Optional[Reduction] = None) -> pd.DataFrame:
    """Exposure table for multi-county communities, judged on the maximum member value."""
    metric = MetricKind.parse(metric)
    cmap = communities if isinstance(communities, CommunityMap) else resolve(communities)
    if not isinstance(cmap, CommunityMap):
        raise InvalidLocationError("community_metric needs a commun/fips table or a name -> FIPS mapping")
    if metric is MetricKind.RAIN:
        days_included = validate_days(days_included)
    rows, col = _county_rows(source, cmap.fips, (start_year, end_year), metric, None,
                             wind_var, days_included, dist_limit)
    grouped = aggregate_community(rows, cmap, metric, threshold, value_column=col, reduction=reduction)
    return build_table(grouped, metric)


def exposure_table(source: HazardDataSource, locations: LocationInput, start_year: int, end_year: int,
                   threshold: Optional[float], metric, **kwargs) -> pd.DataFrame:
    """County or community table, picked by the shape of ``locations``."""
    locs = resolve(locations) if not isinstance(locations, (LocationSet, CommunityMap)) else locations
    if isinstance(locs, CommunityMap):
        return community_metric(source, locs, start_year, end_year, threshold, metric, **kwargs)
    kwargs.pop("reduction", None)
    return county_metric(source, locs, start_year, end_year, threshold, metric, **kwargs)


def partition_by_loc(table: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """Split a table into one frame per ``loc`` (without the loc column)."""
    parts = {}
    for loc in pd.unique(table["loc"]):
        parts[str(loc)] = table[table["loc"] == loc].drop(columns="loc").reset_index(drop=True)
    return parts


def county_wind(source, counties, start_year, end_year, wind_limit, wind_var="max_sust"):
    return county_metric(source, counties, start_year, end_year, wind_limit, MetricKind.WIND, wind_var=wind_var)


def county_rain(source, counties, start_year, end_year, rain_limit, dist_limit=None,
                days_included=DEFAULT_DAYS_INCLUDED):
    return county_metric(source, counties, start_year, end_year, rain_limit, MetricKind.RAIN,
                         days_included=days_included, dist_limit=dist_limit)


def county_distance(source, counties, start_year, end_year, dist_limit):
    return county_metric(source, counties, start_year, end_year, dist_limit, MetricKind.DISTANCE)


def multi_county_wind(source, communities, start_year, end_year, wind_limit, wind_var="max_sust"):
    return community_metric(source, communities, start_year, end_year, wind_limit, MetricKind.WIND,
                            wind_var=wind_var)


def multi_county_rain(source, communities, start_year, end_year, rain_limit, dist_limit=None,
                      days_included=DEFAULT_DAYS_INCLUDED):
    return community_metric(source, communities, start_year, end_year, rain_limit, MetricKind.RAIN,
                            days_included=days_included, dist_limit=dist_limit)


def multi_county_distance(source, communities, start_year, end_year, dist_limit):
    return community_metric(source, communities, start_year, end_year, dist_limit, MetricKind.DISTANCE)
