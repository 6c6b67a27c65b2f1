"""
Tests for Asset Filters

Tests covering:
1. Empty criteria return the input unchanged
2. Case-insensitive name substring search
3. Membership within a dimension (union), AND across dimensions
4. Query-string parsing
"""

import pytest

from core.filters import AssetFilter, filter_assets
from core.models import Asset, FilterCriteria


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def make_asset():
    """Factory fixture for creating assets."""
    def _make(asset_id, name="Asset", region="R1", asset_type="Valve", status="Active"):
        return Asset(
            id=asset_id,
            name=name,
            region=region,
            type=asset_type,
            status=status,
            latitude=1.0,
            longitude=2.0,
        )
    return _make


@pytest.fixture
def assets(make_asset):
    return [
        make_asset("A-1", name="North Pump", region="R1", asset_type="Pump", status="Active"),
        make_asset("A-2", name="South Valve", region="R2", asset_type="Valve", status="Inactive"),
        make_asset("A-3", name="Pumphouse East", region="R3", asset_type="Pump", status="Planned"),
        make_asset("A-4", name="West Hydrant", region="r1", asset_type="Hydrant", status="active"),
    ]


def ids(result):
    return [a.id for a in result]


# =============================================================================
# Empty Criteria
# =============================================================================


class TestUnrestricted:
    """Empty criteria match everything."""

    def test_empty_criteria_returns_all_in_order(self, assets):
        assert filter_assets(assets, FilterCriteria()) == assets

    def test_result_is_a_new_list(self, assets):
        result = filter_assets(assets, FilterCriteria())
        result.pop()
        assert len(assets) == 4

    def test_empty_input(self):
        assert filter_assets([], FilterCriteria(search="pump")) == []


# =============================================================================
# Name Search
# =============================================================================


class TestSearch:
    """Search is a case-insensitive substring of the name."""

    def test_substring_match(self, assets):
        assert ids(filter_assets(assets, FilterCriteria(search="pump"))) == ["A-1", "A-3"]

    def test_case_insensitive(self, assets):
        assert ids(filter_assets(assets, FilterCriteria(search="SOUTH"))) == ["A-2"]

    def test_not_anchored(self, assets):
        assert ids(filter_assets(assets, FilterCriteria(search="house e"))) == ["A-3"]

    def test_no_match_is_empty(self, assets):
        assert filter_assets(assets, FilterCriteria(search="reservoir")) == []

    def test_search_only_checks_name(self, assets):
        assert filter_assets(assets, FilterCriteria(search="R2")) == []


# =============================================================================
# Dimension Membership
# =============================================================================


class TestDimensions:
    """Set membership per dimension, AND across dimensions."""

    def test_multiple_regions_is_union(self, assets):
        result = filter_assets(assets, FilterCriteria(regions={"R1", "R2"}))
        assert ids(result) == ["A-1", "A-2", "A-4"]

    def test_membership_is_case_insensitive(self, assets):
        result = filter_assets(assets, FilterCriteria(statuses={"ACTIVE"}))
        assert ids(result) == ["A-1", "A-4"]

    def test_exact_value_not_partial(self, assets):
        assert filter_assets(assets, FilterCriteria(types={"Pum"})) == []

    def test_and_across_dimensions(self, assets):
        criteria = FilterCriteria(regions={"r1", "r2"}, types={"pump"})
        assert ids(filter_assets(assets, criteria)) == ["A-1"]

    def test_search_and_dimension_combined(self, assets):
        criteria = FilterCriteria(search="pump", statuses={"planned"})
        assert ids(filter_assets(assets, criteria)) == ["A-3"]

    def test_bare_string_is_one_value(self, assets):
        criteria = FilterCriteria(regions="R1")
        assert criteria.regions == frozenset({"r1"})
        assert ids(filter_assets(assets, criteria)) == ["A-1", "A-4"]

    def test_single_asset_match(self, make_asset):
        asset = make_asset("A-9", region="North")
        assert AssetFilter(FilterCriteria(regions={"north"})).matches(asset)
        assert not AssetFilter(FilterCriteria(regions={"south"})).matches(asset)


# =============================================================================
# Query Parsing
# =============================================================================


class TestFromQuery:
    """Criteria built from comma-separated query parameters."""

    def test_absent_parameters_are_unrestricted(self):
        criteria = FilterCriteria.from_query()
        assert criteria.is_unrestricted

    def test_comma_separated_values(self):
        criteria = FilterCriteria.from_query(region="North,South", status="Active")
        assert criteria.regions == frozenset({"north", "south"})
        assert criteria.statuses == frozenset({"active"})

    def test_empty_segments_dropped(self):
        criteria = FilterCriteria.from_query(type=",Pump,,")
        assert criteria.types == frozenset({"pump"})

    def test_values_are_not_trimmed(self):
        criteria = FilterCriteria.from_query(region="North ,East")
        assert criteria.regions == frozenset({"north ", "east"})

    def test_whitespace_in_stored_value_matches_exactly(self, make_asset):
        padded = make_asset("A-9", region="North ")
        plain = make_asset("A-10", region="North")

        padded_query = FilterCriteria.from_query(region="NORTH ")
        assert ids(filter_assets([padded, plain], padded_query)) == ["A-9"]

        plain_query = FilterCriteria.from_query(region="north")
        assert ids(filter_assets([padded, plain], plain_query)) == ["A-10"]

    def test_blank_parameter_is_unrestricted(self):
        criteria = FilterCriteria.from_query(search="", region="")
        assert criteria.is_unrestricted

    def test_parsed_criteria_filter(self, assets):
        criteria = FilterCriteria.from_query(search="pump", type="PUMP", region="R1,R3")
        assert ids(filter_assets(assets, criteria)) == ["A-1", "A-3"]
