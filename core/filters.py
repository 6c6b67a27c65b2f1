"""
Asset Filters

Reduces an asset list to the records matching caller criteria:
- Name search (case-insensitive substring)
- Region (membership, case-insensitive)
- Type (membership, case-insensitive)
- Status (membership, case-insensitive)

A record must pass ALL dimensions. Within a dimension any listed value
matches. An empty dimension places no restriction.
"""

from typing import Iterable, List

from .models import Asset, FilterCriteria


class AssetFilter:
    """
    Applies filter criteria to asset snapshots.

    Never mutates its input and preserves input order.
    """

    def __init__(self, criteria: FilterCriteria):
        """
        Initialize filter with criteria.

        Args:
            criteria: Search text and per-dimension value sets
        """
        self._criteria = criteria

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def apply(self, assets: Iterable[Asset]) -> List[Asset]:
        """Return the matching assets in input order."""
        if self._criteria.is_unrestricted:
            return list(assets)
        return [asset for asset in assets if self.matches(asset)]

    def matches(self, asset: Asset) -> bool:
        """Check a single asset against every dimension."""
        return (
            self._matches_search(asset)
            and self._matches_member(asset.region, self._criteria.regions)
            and self._matches_member(asset.type, self._criteria.types)
            and self._matches_member(asset.status, self._criteria.statuses)
        )

    def _matches_search(self, asset: Asset) -> bool:
        search = self._criteria.search
        if not search:
            return True
        return search in (asset.name or "").lower()

    @staticmethod
    def _matches_member(value: str, accepted: frozenset) -> bool:
        if not accepted:
            return True
        return (value or "").lower() in accepted


def filter_assets(assets: Iterable[Asset], criteria: FilterCriteria) -> List[Asset]:
    """
    Filter assets by criteria.

    Args:
        assets: Snapshot of the collection
        criteria: Filter criteria

    Returns:
        Matching assets, order preserved. May be empty.
    """
    return AssetFilter(criteria).apply(assets)
