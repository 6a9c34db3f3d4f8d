import logging
from typing import Iterable, Optional, Sequence

import pandas as pd

from .errors import MalformedStormIdError
from .metrics import MetricKind

logger = logging.getLogger(__name__)


def storm_year(storm_id: str) -> int:
    """Year suffix of a storm id, e.g. 2005 for "Katrina-2005"."""
    if not isinstance(storm_id, str) or "-" not in storm_id:
        raise MalformedStormIdError(f"storm_id {storm_id!r} has no '-<year>' suffix")
    year = storm_id.rsplit("-", 1)[1]
    if not year.isdigit():
        raise MalformedStormIdError(f"storm_id {storm_id!r} does not end in a numeric year")
    return int(year)


def storm_years(storm_ids: pd.Series) -> pd.Series:
    if storm_ids.empty:
        return pd.Series([], index=storm_ids.index, dtype="int64")
    ids = storm_ids.astype(str)
    bad = ~ids.str.contains("-", regex=False) | ~ids.str.rpartition("-")[2].str.isdigit()
    if bad.any():
        first = storm_ids[bad].iloc[0]
        raise MalformedStormIdError(f"storm_id {first!r} has no '-<year>' suffix ({int(bad.sum())} bad ids)")
    return ids.str.rpartition("-")[2].astype("int64")


def filter_records(records: pd.DataFrame, locations: Iterable[str], year_range: Sequence[int],
                   metric, threshold: Optional[float] = None,
                   value_column: Optional[str] = None) -> pd.DataFrame:
    """
    Restrict hazard records to the given counties and inclusive year range.

    For metrics judged per record (wind, distance) the threshold is applied to
    ``value_column`` (the metric's default column when omitted) in the metric's
    direction. Windowed rain is thresholded after aggregation, so ``threshold``
    is ignored for it here. Source order is kept.
    """
    metric = MetricKind.parse(metric)
    start, end = int(year_range[0]), int(year_range[1])
    fips = set(locations)
    d = records[records["fips"].isin(fips)]
    years = storm_years(d["storm_id"])
    d = d[(years >= start) & (years <= end)]
    if threshold is not None and not metric.spec.windowed:
        col = value_column or metric.spec.value_column
        d = d[metric.passes(d[col], threshold)]
    logger.debug("%s filter kept %d of %d rows (years %d-%d, threshold %s)",
                 metric.value, len(d), len(records), start, end, threshold)
    return d.copy()
