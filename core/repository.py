"""
Asset Repository - Storage for the Working Asset Collection

Defines the repository interface the register depends on and an in-memory
implementation with optional JSON-file persistence. Production deployments
can provide a document-store implementation of the same interface.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Optional

from core.errors import AssetExistsError, AssetNotFoundError
from core.models import Asset
from core.seed import seed_assets


logger = logging.getLogger(__name__)


# =============================================================================
# Interface
# =============================================================================


class AssetRepository(ABC):
    """
    Abstract store of asset records keyed by id.

    ``write_lock`` serializes compound mutations such as
    allocate-then-insert. Implementations must make ``insert``
    conditional on the id being unused.
    """

    @property
    @abstractmethod
    def write_lock(self) -> threading.RLock:
        """Lock held by single-writer operations."""
        pass

    @abstractmethod
    def list_all(self) -> list[Asset]:
        """Return a point-in-time snapshot of every asset."""
        pass

    @abstractmethod
    def get(self, asset_id: str) -> Optional[Asset]:
        """Return the asset with this id, or None."""
        pass

    @abstractmethod
    def insert(self, asset: Asset) -> Asset:
        """
        Insert a new asset at the front of the collection.

        Raises:
            AssetExistsError: If the id is already present
        """
        pass

    @abstractmethod
    def replace(self, asset: Asset) -> Asset:
        """
        Replace the stored asset with the same id.

        Raises:
            AssetNotFoundError: If the id is not present
        """
        pass

    @abstractmethod
    def delete(self, asset_id: str) -> None:
        """
        Delete an asset.

        Raises:
            AssetNotFoundError: If the id is not present
        """
        pass

    @abstractmethod
    def reset(self, assets: Iterable[Asset]) -> None:
        """Replace the whole collection."""
        pass

    def exists(self, asset_id: str) -> bool:
        """Check whether an id is in use."""
        return self.get(asset_id) is not None

    def ids(self) -> set[str]:
        """Ids currently in use."""
        return {asset.id for asset in self.list_all()}

    def count(self) -> int:
        """Number of stored assets."""
        return len(self.list_all())


# =============================================================================
# In-Memory Implementation
# =============================================================================


class InMemoryAssetRepository(AssetRepository):
    """
    Ordered in-memory asset collection.

    Every mutation runs under one re-entrant lock. With ``persist_path``
    set, the collection is written to JSON after each mutation and
    reloaded at start-up.
    """

    def __init__(
        self,
        persist_path: Optional[str] = None,
        seed: Callable[[], list[Asset]] = seed_assets,
    ):
        """
        Initialise repository.

        Args:
            persist_path: Optional path to persist data to JSON file
            seed: Factory for the initial collection when nothing is persisted
        """
        self._lock = threading.RLock()
        self._assets: list[Asset] = []
        self._persist_path = Path(persist_path) if persist_path else None

        if not self._load_from_file():
            self._assets = list(seed())

    @property
    def write_lock(self) -> threading.RLock:
        return self._lock

    def _save_to_file(self) -> None:
        """Persist data to file."""
        if not self._persist_path:
            return

        data = {
            "assets": [asset.to_dict() for asset in self._assets],
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }

        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._persist_path.with_suffix(self._persist_path.suffix + ".tmp")
        temp_path.write_text(json.dumps(data, indent=2))
        temp_path.replace(self._persist_path)

    def _commit(self, assets: list[Asset]) -> None:
        """Swap in a new collection, restoring the old one if saving fails."""
        previous = self._assets
        self._assets = assets
        try:
            self._save_to_file()
        except OSError:
            self._assets = previous
            logger.error("Could not save asset data to %s", self._persist_path)
            raise

    def _load_from_file(self) -> bool:
        """Load data from file. Returns True if a collection was loaded."""
        if not self._persist_path or not self._persist_path.exists():
            return False

        try:
            data = json.loads(self._persist_path.read_text())
            assets = [Asset.from_dict(item) for item in data["assets"]]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Could not load asset data from %s: %s", self._persist_path, e)
            return False

        self._assets = assets
        logger.info("Loaded %d assets from %s", len(assets), self._persist_path)
        return True

    def _index_of(self, asset_id: str) -> int:
        for index, asset in enumerate(self._assets):
            if asset.id == asset_id:
                return index
        return -1

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def list_all(self) -> list[Asset]:
        with self._lock:
            return list(self._assets)

    def get(self, asset_id: str) -> Optional[Asset]:
        with self._lock:
            index = self._index_of(asset_id)
            return self._assets[index] if index >= 0 else None

    def insert(self, asset: Asset) -> Asset:
        with self._lock:
            if self._index_of(asset.id) >= 0:
                raise AssetExistsError(asset.id)
            self._commit([asset] + self._assets)
            return asset

    def replace(self, asset: Asset) -> Asset:
        with self._lock:
            index = self._index_of(asset.id)
            if index < 0:
                raise AssetNotFoundError(asset.id)
            assets = list(self._assets)
            assets[index] = asset
            self._commit(assets)
            return asset

    def delete(self, asset_id: str) -> None:
        with self._lock:
            index = self._index_of(asset_id)
            if index < 0:
                raise AssetNotFoundError(asset_id)
            self._commit(self._assets[:index] + self._assets[index + 1:])

    def reset(self, assets: Iterable[Asset]) -> None:
        with self._lock:
            self._commit(list(assets))

    def ids(self) -> set[str]:
        with self._lock:
            return {asset.id for asset in self._assets}

    def count(self) -> int:
        with self._lock:
            return len(self._assets)
