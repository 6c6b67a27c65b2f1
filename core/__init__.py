"""
Spatial Asset Register - Core Logic

This module provides the register pipeline:
1. Repository (abstract store, in-memory implementation)
2. Filtering (search text + per-dimension membership)
3. Quality inspection (missing coordinates / fields, duplicate points)
4. Identifier allocation (bounded, result-typed)
5. Export (CSV, GeoJSON)
"""

from .models import (
    Asset,
    AssetStatus,
    FilterCriteria,
    QaCode,
    QaIssue,
    REQUIRED_ASSET_FIELDS,
)
from .errors import (
    AssetRegisterError,
    AssetNotFoundError,
    AssetExistsError,
    IdentifierSpaceExhaustedError,
)
from .filters import AssetFilter, filter_assets
from .quality import QualityInspector, inspect_assets, count_by_code
from .identifiers import (
    AllocationSuccess,
    AllocationExhausted,
    AllocationResult,
    allocate_asset_id,
)
from .export import (
    assets_to_csv,
    assets_to_geojson,
    render_geojson,
    build_export_filename,
    CSV_MEDIA_TYPE,
    GEOJSON_MEDIA_TYPE,
)
from .repository import AssetRepository, InMemoryAssetRepository
from .service import AssetService
from .seed import seed_assets

__all__ = [
    # Models
    "Asset",
    "AssetStatus",
    "FilterCriteria",
    "QaCode",
    "QaIssue",
    "REQUIRED_ASSET_FIELDS",
    # Errors
    "AssetRegisterError",
    "AssetNotFoundError",
    "AssetExistsError",
    "IdentifierSpaceExhaustedError",
    # Filtering
    "AssetFilter",
    "filter_assets",
    # Quality
    "QualityInspector",
    "inspect_assets",
    "count_by_code",
    # Identifiers
    "AllocationSuccess",
    "AllocationExhausted",
    "AllocationResult",
    "allocate_asset_id",
    # Export
    "assets_to_csv",
    "assets_to_geojson",
    "render_geojson",
    "build_export_filename",
    "CSV_MEDIA_TYPE",
    "GEOJSON_MEDIA_TYPE",
    # Storage
    "AssetRepository",
    "InMemoryAssetRepository",
    "AssetService",
    "seed_assets",
]
