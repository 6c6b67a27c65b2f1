"""
Data models for the spatial asset register.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Optional


class AssetStatus(Enum):
    """Lifecycle status of an asset."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    PLANNED = "Planned"


class QaCode(Enum):
    """Data-quality rule identifiers."""

    MISSING_COORDINATES = "MISSING_COORDINATES"
    DUPLICATE_POINT = "DUPLICATE_POINT"
    MISSING_FIELDS = "MISSING_FIELDS"


# Fields that must be non-empty for a record to pass QA
REQUIRED_ASSET_FIELDS = ("name", "region", "type", "status")


@dataclass(frozen=True)
class Asset:
    """
    A single geolocated record in the register.

    Coordinates are independently optional. Timestamps are opaque
    ISO-8601 strings assigned by the mutation boundary.
    """

    id: str
    name: str
    region: str
    type: str
    status: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def has_coordinates(self) -> bool:
        """Both latitude and longitude are present."""
        return self.latitude is not None and self.longitude is not None

    def with_changes(self, **changes: Any) -> "Asset":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "name": self.name,
            "region": self.region,
            "type": self.type,
            "status": self.status,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Asset":
        """Create from the wire representation."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            region=data.get("region") or "",
            type=data.get("type") or "",
            status=data.get("status") or "",
            latitude=_optional_float(data.get("latitude")),
            longitude=_optional_float(data.get("longitude")),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Coordinate must be a finite number, got {value!r}")
    return number


def _fold(values: Iterable[str]) -> frozenset[str]:
    if isinstance(values, str):
        values = (values,)
    return frozenset(v.lower() for v in values if v)


def _split_csv_param(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part for part in value.split(",") if part]


@dataclass(frozen=True)
class FilterCriteria:
    """
    Caller-supplied query.

    An empty search string or an empty set means "no restriction"
    for that dimension. Set values are stored case-folded.
    """

    search: str = ""
    regions: frozenset[str] = field(default_factory=frozenset)
    types: frozenset[str] = field(default_factory=frozenset)
    statuses: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Normalise whatever iterable was passed in
        object.__setattr__(self, "search", (self.search or "").lower())
        object.__setattr__(self, "regions", _fold(self.regions or ()))
        object.__setattr__(self, "types", _fold(self.types or ()))
        object.__setattr__(self, "statuses", _fold(self.statuses or ()))

    @property
    def is_unrestricted(self) -> bool:
        """True when every dimension matches all assets."""
        return not (self.search or self.regions or self.types or self.statuses)

    @classmethod
    def from_query(
        cls,
        search: Optional[str] = None,
        region: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> "FilterCriteria":
        """
        Build criteria from query-string parameters.

        Args:
            search: Plain substring to match against the asset name
            region: Comma-separated region values
            type: Comma-separated type values
            status: Comma-separated status values

        Returns:
            FilterCriteria with empty dimensions for absent parameters
        """
        return cls(
            search=search or "",
            regions=_split_csv_param(region),
            types=_split_csv_param(type),
            statuses=_split_csv_param(status),
        )


@dataclass(frozen=True)
class QaIssue:
    """A detected rule violation. Computed fresh, never persisted."""

    code: QaCode
    asset_id: str
    message: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the wire representation."""
        return {
            "code": self.code.value,
            "assetId": self.asset_id,
            "message": self.message,
        }
