import logging
from numbers import Integral
from typing import Iterable, Tuple

import numpy as np
import pandas as pd

from .config import DAY_OFFSET_RANGE
from .errors import InvalidWindowError

logger = logging.getLogger(__name__)

RAIN_KEYS = ["storm_id", "fips"]


def validate_days(days_included: Iterable[int]) -> Tuple[int, ...]:
    """Check rain window offsets (days relative to closest approach) up front."""
    if isinstance(days_included, Integral):
        days_included = [days_included]
    days = []
    lo, hi = DAY_OFFSET_RANGE
    for day in days_included:
        if isinstance(day, bool) or not isinstance(day, (Integral, np.integer)):
            raise InvalidWindowError(f"Day offsets must be integers, got {day!r}")
        if not lo <= int(day) <= hi:
            raise InvalidWindowError(f"Day offset {day} is outside the supported range {lo}..{hi}")
        days.append(int(day))
    if not days:
        raise InvalidWindowError("At least one day offset is required for a rain window")
    return tuple(sorted(set(days)))


def day_offsets(daily: pd.DataFrame) -> pd.Series:
    date = pd.to_datetime(daily["date"])
    closest = pd.to_datetime(daily["closest_approach_date"])
    return (date.dt.normalize() - closest.dt.normalize()).dt.days


def aggregate_rain(daily_records: pd.DataFrame, days_included: Iterable[int]) -> pd.DataFrame:
    """
    Sum daily rainfall for each (storm_id, fips) over a day window around the
    storm's closest approach to that county.

    Every pair in the input gets exactly one row, even when none of its days
    fall in the window (their total is 0). Days missing from the source simply
    add nothing. Returns columns storm_id, fips, closest_approach_date,
    precipitation_mm in first-seen order.
    """
    days = validate_days(days_included)
    if daily_records.empty:
        return pd.DataFrame({"storm_id": pd.Series(dtype=object), "fips": pd.Series(dtype=object),
                             "closest_approach_date": pd.Series(dtype="datetime64[ns]"),
                             "precipitation_mm": pd.Series(dtype=float)})
    d = daily_records.copy()
    in_window = day_offsets(d).isin(days)
    d["precipitation_mm"] = np.where(in_window, pd.to_numeric(d["precipitation_mm"]).fillna(0.0), 0.0)
    d["closest_approach_date"] = pd.to_datetime(d["closest_approach_date"])
    out = (
        d.groupby(RAIN_KEYS, sort=False)
        .agg(closest_approach_date=("closest_approach_date", "first"),
             precipitation_mm=("precipitation_mm", "sum"))
        .reset_index()
    )
    logger.debug("Rain window %s summed %d daily rows into %d storm/county totals", days, len(d), len(out))
    return out
