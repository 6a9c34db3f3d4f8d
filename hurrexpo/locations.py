from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple, Union

import pandas as pd

from .config import COMMUNITY_COLUMNS, SUPPORTED_STATE_FIPS
from .errors import InvalidLocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationSet:
    fips: Tuple[str, ...]

    def __iter__(self):
        return iter(self.fips)

    def __len__(self) -> int:
        return len(self.fips)


@dataclass(frozen=True)
class CommunityMap:
    groups: Tuple[Tuple[str, FrozenSet[str]], ...]

    @classmethod
    def from_members(cls, members: Mapping[str, Iterable[str]]) -> "CommunityMap":
        return cls(tuple((name, frozenset(fips)) for name, fips in members.items()))

    @property
    def members(self) -> Dict[str, FrozenSet[str]]:
        return dict(self.groups)

    @property
    def fips(self) -> Tuple[str, ...]:
        seen = dict.fromkeys(f for name in self.members for f in sorted(self.members[name]))
        return tuple(seen)

    def to_frame(self) -> pd.DataFrame:
        """Tall (commun, fips) rows, one per membership."""
        rows = [(name, f) for name, fips in self.members.items() for f in sorted(fips)]
        return pd.DataFrame(rows, columns=COMMUNITY_COLUMNS)


LocationInput = Union[str, Iterable[str], Mapping[str, Iterable[str]], pd.DataFrame]


def check_fips(value) -> str:
    if not isinstance(value, str):
        raise InvalidLocationError(f"FIPS codes must be strings, got {type(value).__name__}: {value!r}")
    code = value.strip()
    if len(code) != 5 or not code.isdigit():
        raise InvalidLocationError(f"{value!r} is not a 5-digit county FIPS code")
    if code[:2] not in SUPPORTED_STATE_FIPS:
        raise InvalidLocationError(f"{code} is in state {code[:2]}, outside the eastern states with storm data")
    return code


def _community_rows(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in COMMUNITY_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidLocationError(f"Community table is missing columns: {missing}")
    d = df[COMMUNITY_COLUMNS].copy()
    d["commun"] = d["commun"].astype(str)
    d["fips"] = d["fips"].astype(str)
    return d


def resolve(locations: LocationInput) -> Union[LocationSet, CommunityMap]:
    """
    Normalise caller locations.

    A DataFrame with ``commun`` and ``fips`` columns, or a mapping of community
    name to member FIPS, becomes a :class:`CommunityMap`. A single FIPS string
    or any other iterable of FIPS strings becomes a :class:`LocationSet`.
    Codes are only checked for shape and state; unknown counties are left for
    the hazard source to return nothing for.
    """
    if isinstance(locations, pd.DataFrame):
        if "commun" not in locations.columns:
            if "fips" not in locations.columns:
                raise InvalidLocationError("Location table needs a 'fips' column")
            return resolve(locations["fips"].astype(str).tolist())
        rows = _community_rows(locations)
        members: Dict[str, set] = {}
        for name, code in zip(rows["commun"], rows["fips"]):
            members.setdefault(name, set()).add(check_fips(code))
        logger.debug("Resolved %d communities over %d rows", len(members), len(rows))
        return CommunityMap.from_members(members)
    if isinstance(locations, Mapping):
        members = {}
        for name, codes in locations.items():
            if isinstance(codes, str):
                codes = [codes]
            members[str(name)] = frozenset(check_fips(c) for c in codes)
        return CommunityMap.from_members(members)
    if isinstance(locations, str):
        locations = [locations]
    codes = tuple(dict.fromkeys(check_fips(c) for c in locations))
    return LocationSet(codes)
