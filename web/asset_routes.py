"""
Asset Routes - Web API for the Spatial Asset Register

Read routes are public. Mutating routes require an admin bearer token.

Routes:
- GET    /api/assets                 - Filtered asset list
- GET    /api/assets/qa              - QA issues over the full collection
- GET    /api/assets/qa/summary      - QA issue counts per code
- GET    /api/assets/export/csv      - Filtered CSV download
- GET    /api/assets/export/geojson  - Filtered GeoJSON download
- POST   /api/assets/reset           - Restore the seed dataset (admin)
- POST   /api/assets                 - Create asset (admin)
- GET    /api/assets/{id}            - Single asset
- PUT    /api/assets/{id}            - Update asset (admin)
- DELETE /api/assets/{id}            - Delete asset (admin)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, Field, FiniteFloat

from core import (
    AssetService,
    AssetStatus,
    FilterCriteria,
    CSV_MEDIA_TYPE,
    GEOJSON_MEDIA_TYPE,
    build_export_filename,
    count_by_code,
)
from web.auth import require_admin


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/api/assets", tags=["assets"])


# =============================================================================
# Request Models
# =============================================================================


# Known lifecycle values, documented but not enforced
STATUS_DESCRIPTION = "One of: " + ", ".join(status.value for status in AssetStatus)


class AssetCreateRequest(BaseModel):
    """Body for asset creation. Required fields are not enforced here."""

    name: str = ""
    region: str = ""
    type: str = ""
    status: str = Field("", description=STATUS_DESCRIPTION)
    latitude: Optional[FiniteFloat] = None
    longitude: Optional[FiniteFloat] = None


class AssetUpdateRequest(BaseModel):
    """Partial update body. Only fields present in the request are applied."""

    name: Optional[str] = None
    region: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = Field(None, description=STATUS_DESCRIPTION)
    latitude: Optional[FiniteFloat] = None
    longitude: Optional[FiniteFloat] = None


# =============================================================================
# Dependencies
# =============================================================================


def get_service(request: Request) -> AssetService:
    """Resolve the service bound to the running app."""
    return request.app.state.service


def get_criteria(
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    region: Optional[str] = Query(None, description="Comma-separated regions"),
    asset_type: Optional[str] = Query(None, alias="type", description="Comma-separated types"),
    status: Optional[str] = Query(None, description="Comma-separated statuses"),
) -> FilterCriteria:
    """Build filter criteria from query parameters."""
    return FilterCriteria.from_query(
        search=search,
        region=region,
        type=asset_type,
        status=status,
    )


def _attachment(content: str, media_type: str, extension: str) -> Response:
    filename = build_export_filename(extension)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Read Routes
# =============================================================================


@router.get("")
def list_assets(
    criteria: FilterCriteria = Depends(get_criteria),
    service: AssetService = Depends(get_service),
):
    """Return assets matching the query filters."""
    return [asset.to_dict() for asset in service.list_assets(criteria)]


@router.get("/qa")
def qa_issues(service: AssetService = Depends(get_service)):
    """Run QA rules over the full, unfiltered collection."""
    return [issue.to_dict() for issue in service.run_qa()]


@router.get("/qa/summary")
def qa_summary(service: AssetService = Depends(get_service)):
    """Count QA issues per rule."""
    issues = service.run_qa()
    return {"total": len(issues), "byCode": count_by_code(issues)}


@router.get("/export/csv")
def export_csv(
    criteria: FilterCriteria = Depends(get_criteria),
    service: AssetService = Depends(get_service),
):
    """Download the filtered assets as CSV."""
    return _attachment(service.export_csv(criteria), CSV_MEDIA_TYPE, "csv")


@router.get("/export/geojson")
def export_geojson(
    criteria: FilterCriteria = Depends(get_criteria),
    service: AssetService = Depends(get_service),
):
    """Download the filtered, located assets as GeoJSON."""
    return _attachment(service.export_geojson(criteria), GEOJSON_MEDIA_TYPE, "geojson")


# =============================================================================
# Mutation Routes
# =============================================================================


@router.post("/reset", dependencies=[Depends(require_admin)])
def reset_assets(service: AssetService = Depends(get_service)):
    """Restore the working dataset from the seed copy."""
    count = service.reset()
    return {"message": "Working asset dataset reset to seed copy.", "count": count}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_asset(
    payload: AssetCreateRequest,
    service: AssetService = Depends(get_service),
):
    """Create an asset with a newly allocated id."""
    return service.create(payload.model_dump()).to_dict()


@router.get("/{asset_id}")
def get_asset(asset_id: str, service: AssetService = Depends(get_service)):
    """Return a single asset."""
    return service.get(asset_id).to_dict()


@router.put("/{asset_id}", dependencies=[Depends(require_admin)])
def update_asset(
    asset_id: str,
    payload: AssetUpdateRequest,
    service: AssetService = Depends(get_service),
):
    """Merge the supplied fields into an existing asset."""
    return service.update(asset_id, payload.model_dump(exclude_unset=True)).to_dict()


@router.delete("/{asset_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_asset(asset_id: str, service: AssetService = Depends(get_service)):
    """Delete an asset."""
    service.delete(asset_id)
    return Response(status_code=204)
