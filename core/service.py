"""
Asset Service - Mutation Boundary and Query Pipeline

Wraps an AssetRepository with the register's operations:
- create / update / delete / reset (timestamps assigned here)
- filtered listing, QA inspection and exports over snapshots

Create holds the repository write lock across id allocation and insert,
and retries allocation if a conditional insert still conflicts.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Final, Optional

from core.errors import AssetExistsError, AssetNotFoundError, IdentifierSpaceExhaustedError
from core.export import assets_to_csv, render_geojson
from core.filters import filter_assets
from core.identifiers import (
    DEFAULT_MAX_ATTEMPTS,
    AllocationExhausted,
    allocate_asset_id,
)
from core.models import Asset, FilterCriteria, QaIssue
from core.quality import count_by_code, inspect_assets
from core.repository import AssetRepository
from core.seed import seed_assets
from utils.formatting import utc_timestamp


logger = logging.getLogger(__name__)

# Fields a caller may set on create/update
EDITABLE_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "region",
    "type",
    "status",
    "latitude",
    "longitude",
)

# Conditional-insert retries after a conflicting id
MAX_INSERT_ATTEMPTS: Final[int] = 3


class AssetService:
    """Register operations over an injected repository."""

    def __init__(
        self,
        repository: AssetRepository,
        max_id_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], str] = utc_timestamp,
        seed: Callable[[], list[Asset]] = seed_assets,
    ):
        self._repository = repository
        self._max_id_attempts = max_id_attempts
        self._clock = clock
        self._seed = seed

    @property
    def repository(self) -> AssetRepository:
        return self._repository

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, asset_id: str) -> Asset:
        """
        Get one asset.

        Raises:
            AssetNotFoundError: If the id does not exist
        """
        asset = self._repository.get(asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return asset

    def list_assets(self, criteria: Optional[FilterCriteria] = None) -> list[Asset]:
        """Filtered snapshot of the collection."""
        return filter_assets(self._repository.list_all(), criteria or FilterCriteria())

    def run_qa(self) -> list[QaIssue]:
        """Inspect the full, unfiltered collection."""
        assets = self._repository.list_all()
        issues = inspect_assets(assets)
        logger.info("QA checked %d assets: %s", len(assets), count_by_code(issues))
        return issues

    def export_csv(self, criteria: Optional[FilterCriteria] = None) -> str:
        return assets_to_csv(self.list_assets(criteria))

    def export_geojson(self, criteria: Optional[FilterCriteria] = None) -> str:
        return render_geojson(self.list_assets(criteria))

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, fields: dict[str, Any]) -> Asset:
        """
        Create an asset with a freshly allocated id.

        Args:
            fields: Values for the editable fields; others are ignored

        Returns:
            The stored Asset

        Raises:
            IdentifierSpaceExhaustedError: If no unused id could be allocated
        """
        now = self._clock()
        values = _editable(fields)

        with self._repository.write_lock:
            for _ in range(MAX_INSERT_ATTEMPTS):
                result = allocate_asset_id(
                    self._repository.ids(),
                    max_attempts=self._max_id_attempts,
                )
                if isinstance(result, AllocationExhausted):
                    logger.error("Asset id allocation exhausted after %d attempts", result.attempts)
                    raise IdentifierSpaceExhaustedError(result.attempts)

                asset = Asset(
                    id=result.asset_id,
                    name=values.get("name") or "",
                    region=values.get("region") or "",
                    type=values.get("type") or "",
                    status=values.get("status") or "",
                    latitude=values.get("latitude"),
                    longitude=values.get("longitude"),
                    created_at=now,
                    updated_at=now,
                )
                try:
                    self._repository.insert(asset)
                except AssetExistsError:
                    logger.warning("Asset id %s taken before insert, retrying", asset.id)
                    continue

                logger.info("Created asset %s", asset.id)
                return asset

        raise IdentifierSpaceExhaustedError(MAX_INSERT_ATTEMPTS)

    def update(self, asset_id: str, changes: dict[str, Any]) -> Asset:
        """
        Merge changes into an existing asset.

        The id and creation timestamp are preserved; ``updated_at`` is
        refreshed.

        Raises:
            AssetNotFoundError: If the id does not exist
        """
        with self._repository.write_lock:
            current = self.get(asset_id)
            merged = current.with_changes(
                **_editable(changes),
                updated_at=self._clock(),
            )
            self._repository.replace(merged)

        logger.info("Updated asset %s", asset_id)
        return merged

    def delete(self, asset_id: str) -> None:
        """
        Delete an asset.

        Raises:
            AssetNotFoundError: If the id does not exist
        """
        self._repository.delete(asset_id)
        logger.info("Deleted asset %s", asset_id)

    def reset(self) -> int:
        """Restore the working collection from the seed dataset."""
        assets = self._seed()
        self._repository.reset(assets)
        logger.info("Reset working asset dataset to %d seed records", len(assets))
        return len(assets)


def _editable(fields: dict[str, Any]) -> dict[str, Any]:
    values = {key: fields[key] for key in EDITABLE_FIELDS if key in fields}
    for key in ("name", "region", "type", "status"):
        if key in values and values[key] is None:
            values[key] = ""
    return values
