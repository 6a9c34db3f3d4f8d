import logging
from pathlib import Path
from typing import List

import pandas as pd

from .config import DEFAULT_DAYS_INCLUDED, EXPORT_TYPES
from .errors import InvalidLocationError
from .exposure import exposure_table, partition_by_loc
from .metrics import MetricKind

logger = logging.getLogger(__name__)


def export(table: pd.DataFrame, out_dir, out_type: str = "csv") -> List[Path]:
    """
    Write one file per location, named ``<loc>.csv`` (UTF-8, header row, no
    index) or ``<loc>.pkl`` (pickled DataFrame) for the "serialized" format.
    Creates ``out_dir`` if needed and returns the paths written. Location names
    holding a path separator are rejected before anything is written.
    """
    if out_type not in EXPORT_TYPES:
        raise ValueError(f"out_type must be one of {sorted(EXPORT_TYPES)}, got {out_type!r}")
    parts = partition_by_loc(table)
    for loc in parts:
        if "/" in loc or "\\" in loc or loc in ("", ".", ".."):
            raise InvalidLocationError(f"Location {loc!r} cannot be used as a file name")
    out = Path(out_dir).expanduser()
    out.mkdir(parents=True, exist_ok=True)
    written = []
    for loc, part in parts.items():
        path = out / f"{loc}.{EXPORT_TYPES[out_type]}"
        if out_type == "csv":
            part.to_csv(path, index=False, encoding="utf-8")
        else:
            part.to_pickle(path)
        written.append(path)
    logger.info("Wrote %d %s exposure files to %s", len(written), out_type, out)
    return written


def read_exports(out_dir, out_type: str = "csv") -> pd.DataFrame:
    """Re-assemble exported files into one table, restoring ``loc`` from file names."""
    ext = EXPORT_TYPES[out_type]
    frames = []
    for path in sorted(Path(out_dir).expanduser().glob(f"*.{ext}")):
        part = pd.read_csv(path, dtype={"storm_id": str}) if out_type == "csv" else pd.read_pickle(path)
        part.insert(1 if "storm_id" in part.columns else 0, "loc", path.stem)
        frames.append(part)
    if not frames:
        return pd.DataFrame(columns=["storm_id", "loc"])
    return pd.concat(frames, ignore_index=True)


def wind_exposure(source, locations, start_year, end_year, wind_limit, out_dir, out_type="csv",
                  wind_var="max_sust"):
    table = exposure_table(source, locations, start_year, end_year, wind_limit, MetricKind.WIND,
                           wind_var=wind_var)
    return export(table, out_dir, out_type)


def rain_exposure(source, locations, start_year, end_year, rain_limit, out_dir, out_type="csv",
                  dist_limit=None, days_included=DEFAULT_DAYS_INCLUDED):
    table = exposure_table(source, locations, start_year, end_year, rain_limit, MetricKind.RAIN,
                           dist_limit=dist_limit, days_included=days_included)
    return export(table, out_dir, out_type)


def distance_exposure(source, locations, start_year, end_year, dist_limit, out_dir, out_type="csv"):
    table = exposure_table(source, locations, start_year, end_year, dist_limit, MetricKind.DISTANCE)
    return export(table, out_dir, out_type)
