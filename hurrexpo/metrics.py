"""
Metric kinds and the direction each one's exposure threshold is applied in.

Wind and rain count a location as exposed when the hazard value reaches the
threshold; distance counts it as exposed when the storm passes within the
threshold. Communities are rolled up on the maximum member value, which the
threshold is then applied to in the metric's direction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import pandas as pd


class Direction(Enum):
    AT_LEAST = ">="
    AT_MOST = "<="

    def passes(self, values: pd.Series, threshold: float) -> pd.Series:
        if self is Direction.AT_LEAST:
            return values >= threshold
        return values <= threshold


class Reduction(Enum):
    MAX = "max"
    MIN = "min"

    @property
    def column(self) -> str:
        return f"{self.value}_value"


@dataclass(frozen=True)
class MetricSpec:
    hazard: str
    value_column: str
    direction: Direction
    output_columns: Tuple[str, ...]
    windowed: bool = False


class MetricKind(Enum):
    WIND = "wind"
    RAIN = "rain"
    DISTANCE = "distance"

    @classmethod
    def parse(cls, metric) -> "MetricKind":
        if isinstance(metric, cls):
            return metric
        try:
            return cls(str(metric).lower())
        except ValueError:
            raise ValueError(f"Unknown metric {metric!r}; expected one of {[m.value for m in cls]}") from None

    @property
    def spec(self) -> MetricSpec:
        return _SPECS[self]

    @property
    def direction(self) -> Direction:
        return self.spec.direction

    def passes(self, values: pd.Series, threshold: float) -> pd.Series:
        return self.direction.passes(pd.to_numeric(values), threshold)


_SPECS = {
    MetricKind.WIND: MetricSpec(
        hazard="wind",
        value_column="max_sustained",
        direction=Direction.AT_LEAST,
        output_columns=("max_sust", "max_gust"),
    ),
    MetricKind.RAIN: MetricSpec(
        hazard="rain",
        value_column="precipitation_mm",
        direction=Direction.AT_LEAST,
        output_columns=("closest_date", "precip_mm"),
        windowed=True,
    ),
    MetricKind.DISTANCE: MetricSpec(
        hazard="distance",
        value_column="distance_km",
        direction=Direction.AT_MOST,
        output_columns=("closest_date", "dist_km"),
    ),
}


def wind_value_column(wind_var: str) -> str:
    """Source column judged for wind exposure ("max_sust" or "max_gust")."""
    if wind_var == "max_sust":
        return "max_sustained"
    if wind_var == "max_gust":
        return "max_gust"
    raise ValueError(f"wind_var must be 'max_sust' or 'max_gust', got {wind_var!r}")

