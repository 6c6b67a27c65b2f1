"""
Asset Export Formats

Serializes a (filtered) asset list into exchange formats:
- CSV: fixed column order, every data field quoted
- GeoJSON: FeatureCollection of Points, assets without coordinates skipped

Serialization is deterministic: the same input always yields the same text.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Final, Iterable, Optional

from core.models import Asset
from utils.formatting import format_coordinate


# =============================================================================
# Constants
# =============================================================================

CSV_COLUMNS: Final[tuple[str, ...]] = (
    "id",
    "name",
    "region",
    "type",
    "status",
    "latitude",
    "longitude",
    "createdAt",
    "updatedAt",
)

GEOJSON_PROPERTIES: Final[tuple[str, ...]] = (
    "id",
    "name",
    "region",
    "type",
    "status",
    "createdAt",
    "updatedAt",
)

CSV_MEDIA_TYPE: Final[str] = "text/csv"
GEOJSON_MEDIA_TYPE: Final[str] = "application/geo+json"

EXPORT_FILENAME_PREFIX: Final[str] = "spatial-assets"


# =============================================================================
# CSV
# =============================================================================


def quote_csv_field(value: Any) -> str:
    """Wrap a value in double quotes, doubling embedded quotes."""
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def _csv_row(asset: Asset) -> str:
    values = (
        asset.id,
        asset.name,
        asset.region,
        asset.type,
        asset.status,
        format_coordinate(asset.latitude),
        format_coordinate(asset.longitude),
        asset.created_at,
        asset.updated_at,
    )
    return ",".join(quote_csv_field(v) for v in values)


def assets_to_csv(assets: Iterable[Asset]) -> str:
    """
    Render assets as CSV text.

    The header row comes first, then one row per asset. Rows are joined
    with newlines and there is no trailing newline.

    Args:
        assets: Assets to export, in output order

    Returns:
        CSV document as a string
    """
    rows = [",".join(CSV_COLUMNS)]
    rows.extend(_csv_row(asset) for asset in assets)
    return "\n".join(rows)


# =============================================================================
# GeoJSON
# =============================================================================


def asset_to_feature(asset: Asset) -> dict[str, Any]:
    """
    Convert one located asset to a GeoJSON Point feature.

    GeoJSON positions are [longitude, latitude].
    """
    wire = asset.to_dict()
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [asset.longitude, asset.latitude],
        },
        "properties": {key: wire[key] for key in GEOJSON_PROPERTIES},
    }


def assets_to_geojson(assets: Iterable[Asset]) -> dict[str, Any]:
    """
    Build a FeatureCollection from assets.

    Assets missing either coordinate are left out without error.
    """
    return {
        "type": "FeatureCollection",
        "features": [asset_to_feature(a) for a in assets if a.has_coordinates],
    }


def render_geojson(assets: Iterable[Asset]) -> str:
    """Serialize assets as pretty-printed GeoJSON text."""
    return json.dumps(assets_to_geojson(assets), indent=2, ensure_ascii=False)


# =============================================================================
# Download Naming
# =============================================================================


def build_export_filename(extension: str, now: Optional[datetime] = None) -> str:
    """
    Build a timestamped download filename.

    Args:
        extension: File extension without the dot ("csv" or "geojson")
        now: Timestamp to embed (default: current local time)

    Returns:
        Filename such as ``spatial-assets-2024-05-01_09-30-00.csv``
    """
    now = now or datetime.now()
    return f"{EXPORT_FILENAME_PREFIX}-{now.strftime('%Y-%m-%d_%H-%M-%S')}.{extension}"
