"""
Seed dataset for the working asset collection.

Includes a shared point (A-1004 / A-1005), a record without coordinates
(A-1007) and a record with an empty type (A-1008) so QA has findings
on a fresh start.
"""

from core.models import Asset

SEED_TIMESTAMP = "2024-01-15T09:00:00.000Z"


def _seed(asset_id, name, region, asset_type, status, latitude, longitude):
    return Asset(
        id=asset_id,
        name=name,
        region=region,
        type=asset_type,
        status=status,
        latitude=latitude,
        longitude=longitude,
        created_at=SEED_TIMESTAMP,
        updated_at=SEED_TIMESTAMP,
    )


SEED_ASSETS = (
    _seed("A-1001", "Harbour Pump Station", "North", "Pump Station", "Active", -36.8406, 174.7633),
    _seed("A-1002", "Ridge Reservoir", "North", "Reservoir", "Active", -36.8712, 174.7458),
    _seed("A-1003", "Valley Substation", "South", "Substation", "Inactive", -37.7870, 175.2793),
    _seed("A-1004", "Mill Road Valve", "South", "Valve", "Active", -37.6878, 176.1651),
    _seed("A-1005", "Mill Road Hydrant", "South", "Hydrant", "Planned", -37.6878, 176.1651),
    _seed("A-1006", "Coastal Outfall", "East", "Outfall", "Active", -38.6623, 178.0176),
    _seed("A-1007", "Airport Booster", "East", "Pump Station", "Planned", None, None),
    _seed("A-1008", "Western Bore", "West", "", "Active", -39.0556, 174.0752),
)


def seed_assets() -> list[Asset]:
    """Return a fresh copy of the seed dataset."""
    return list(SEED_ASSETS)
