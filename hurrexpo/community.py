import logging
from typing import Optional

import pandas as pd

from .locations import CommunityMap
from .metrics import MetricKind, Reduction

logger = logging.getLogger(__name__)


def aggregate_community(per_county_rows: pd.DataFrame, community_map: CommunityMap, metric,
                        threshold: Optional[float] = None, value_column: Optional[str] = None,
                        reduction: Optional[Reduction] = None) -> pd.DataFrame:
    """
    Roll county-level metric rows up to (commun, storm_id).

    Each community is judged on the maximum member value (``max_value``), with
    the threshold applied in the metric's direction; pass
    ``reduction=Reduction.MIN`` to judge on the minimum instead. ``mean_value``
    is reported alongside it but never used to decide exposure. A county listed
    in several communities counts toward each of them.
    """
    metric = MetricKind.parse(metric)
    reduction = reduction or Reduction.MAX
    col = value_column or metric.spec.value_column
    members = community_map.to_frame()
    joined = per_county_rows.merge(members, on="fips", how="inner")
    if joined.empty:
        return pd.DataFrame(columns=["commun", "storm_id", "mean_value", reduction.column])
    joined[col] = pd.to_numeric(joined[col])
    grouped = (
        joined.groupby(["commun", "storm_id"], sort=True)[col]
        .agg(mean_value="mean", reduced=reduction.value)
        .reset_index()
        .rename(columns={"reduced": reduction.column})
    )
    if threshold is not None:
        grouped = grouped[metric.passes(grouped[reduction.column], threshold)]
    logger.debug("Community roll-up: %d county rows -> %d community/storm rows", len(joined), len(grouped))
    return grouped[["commun", "storm_id", "mean_value", reduction.column]].reset_index(drop=True)
