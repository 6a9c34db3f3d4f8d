"""Tests for location resolution."""

import pandas as pd
import pytest

from hurrexpo.errors import InvalidLocationError
from hurrexpo.locations import CommunityMap, LocationSet, check_fips, resolve


class TestCounties:
    def test_list_becomes_location_set(self):
        locs = resolve(["22071", "51700", "22071"])
        assert isinstance(locs, LocationSet)
        assert locs.fips == ("22071", "51700")

    def test_single_string(self):
        assert resolve("22071").fips == ("22071",)

    def test_whitespace_is_stripped(self):
        assert check_fips(" 22071 ") == "22071"

    def test_unknown_county_is_accepted(self):
        """Well-formed codes are not checked against a county list."""
        assert resolve(["22999"]).fips == ("22999",)

    @pytest.mark.parametrize("bad", ["2207", "220711", "2207a", "", "ny"])
    def test_malformed_codes_rejected(self, bad):
        with pytest.raises(InvalidLocationError):
            resolve([bad])

    def test_non_string_rejected(self):
        with pytest.raises(InvalidLocationError):
            resolve([22071])

    def test_western_state_rejected(self):
        """California (06) is outside the storm data's coverage."""
        with pytest.raises(InvalidLocationError):
            resolve(["06037"])

    def test_fips_only_table(self):
        locs = resolve(pd.DataFrame({"fips": ["22071", "51700"]}))
        assert isinstance(locs, LocationSet)
        assert len(locs) == 2


class TestCommunities:
    def test_table_becomes_community_map(self, ny_communities):
        cmap = resolve(ny_communities)
        assert isinstance(cmap, CommunityMap)
        assert cmap.members == {"ny": frozenset({"36005", "36047"}), "no": frozenset({"22071"})}

    def test_numeric_fips_column_is_cast(self):
        cmap = resolve(pd.DataFrame({"commun": ["ny", "ny"], "fips": [36005, 36047]}))
        assert cmap.members["ny"] == frozenset({"36005", "36047"})

    def test_mapping_input(self):
        cmap = resolve({"ny": ["36005", "36047"], "no": "22071"})
        assert cmap.members["no"] == frozenset({"22071"})

    def test_malformed_member_rejected(self):
        with pytest.raises(InvalidLocationError):
            resolve(pd.DataFrame({"commun": ["ny"], "fips": ["3600"]}))

    def test_county_in_two_communities_kept_in_both(self):
        cmap = resolve({"a": ["36005", "36047"], "b": ["36047"]})
        frame = cmap.to_frame()
        assert sorted(frame.loc[frame["fips"] == "36047", "commun"]) == ["a", "b"]
        assert cmap.fips == ("36005", "36047")

    def test_community_map_is_hashable(self, ny_communities):
        a = resolve(ny_communities)
        b = resolve({"ny": ["36047", "36005"], "no": ["22071"]})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_missing_commun_column(self):
        with pytest.raises(InvalidLocationError):
            resolve(pd.DataFrame({"name": ["ny"]}))
