import io, logging
from pathlib import Path
from typing import Dict, Iterable, Optional

import pandas as pd, requests

from hurrexpo.config import HAZARD_KINDS, SOURCE_COLUMNS, SOURCE_DATE_COLUMNS, SOURCE_FILES
from hurrexpo.errors import HazardSourceError

logger = logging.getLogger(__name__)


def prepare_hazard_table(df: pd.DataFrame, hazard_kind: str) -> pd.DataFrame:
    missing = [c for c in SOURCE_COLUMNS[hazard_kind] if c not in df.columns]
    if missing:
        raise HazardSourceError(f"{hazard_kind} table is missing required columns: {missing}")
    d = df.copy()
    d["storm_id"] = d["storm_id"].astype(str)
    d["fips"] = d["fips"].astype(str).str.zfill(5)
    for col in SOURCE_DATE_COLUMNS.get(hazard_kind, []):
        if col in d.columns:
            d[col] = pd.to_datetime(d[col])
    return d.reset_index(drop=True)


class HazardDataSource:
    """
    Read-only per-storm hazard tables (wind, rain, distance) keyed by storm_id and fips.

    Load once, then query repeatedly; queries hand back copies so callers
    never touch the loaded tables.
    """

    def __init__(self, tables: Dict[str, pd.DataFrame]):
        unknown = set(tables) - set(HAZARD_KINDS)
        if unknown:
            raise HazardSourceError(f"Unknown hazard kinds: {sorted(unknown)}")
        self._tables = {k: prepare_hazard_table(v, k) for k, v in tables.items()}

    @classmethod
    def from_frames(cls, wind: Optional[pd.DataFrame] = None, rain: Optional[pd.DataFrame] = None,
                    distance: Optional[pd.DataFrame] = None) -> "HazardDataSource":
        frames = {"wind": wind, "rain": rain, "distance": distance}
        return cls({k: v for k, v in frames.items() if v is not None})

    @classmethod
    def from_directory(cls, path) -> "HazardDataSource":
        root = Path(path)
        tables = {}
        for kind, name in SOURCE_FILES.items():
            f = root / name
            if f.exists():
                tables[kind] = pd.read_csv(f, dtype={"fips": str, "storm_id": str})
        if not tables:
            raise HazardSourceError(f"No hazard tables ({', '.join(SOURCE_FILES.values())}) found in {root}")
        logger.info("Loaded hazard tables %s from %s", sorted(tables), root)
        return cls(tables)

    @classmethod
    def from_url(cls, base_url: str, timeout: int = 60) -> "HazardDataSource":
        tables = {}
        for kind, name in SOURCE_FILES.items():
            url = base_url.rstrip("/") + "/" + name
            try:
                r = requests.get(url, timeout=timeout)
                if r.status_code == 404:
                    logger.info("No %s table at %s", kind, url)
                    continue
                r.raise_for_status()
            except requests.RequestException as exc:
                raise HazardSourceError(f"Hazard table download failed for {url}: {exc}") from exc
            tables[kind] = pd.read_csv(io.StringIO(r.text), dtype={"fips": str, "storm_id": str})
        if not tables:
            raise HazardSourceError(f"No hazard tables found under {base_url}")
        logger.info("Fetched hazard tables %s from %s", sorted(tables), base_url)
        return cls(tables)

    @property
    def kinds(self):
        return tuple(k for k in HAZARD_KINDS if k in self._tables)

    def query(self, location_ids: Iterable[str], hazard_kind: str) -> pd.DataFrame:
        if hazard_kind not in HAZARD_KINDS:
            raise ValueError(f"hazard_kind must be one of {HAZARD_KINDS}, got {hazard_kind!r}")
        if hazard_kind not in self._tables:
            raise HazardSourceError(f"This source has no {hazard_kind} table")
        table = self._tables[hazard_kind]
        return table[table["fips"].isin(set(location_ids))].copy()
