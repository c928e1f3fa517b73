"""
Read-only catalog endpoints.

Catalog entries are served merged with their entry from app-meta.json, so
clients see download counts and last-updated dates without those volatile
fields living in apps.json.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from app.core.dependencies import get_catalog_manager
from app.domain.models import GENERATED_AT_KEY, AppListing
from app.storage.db_manager import CatalogManager

logger = logging.getLogger(__name__)
router = APIRouter()


def _load_listings(db: CatalogManager) -> List[Dict[str, Any]]:
    try:
        apps = db.load_catalog()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load catalog: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog unavailable",
        )

    meta = db.load_metadata()
    listings: List[Dict[str, Any]] = []
    for record in apps:
        entry = meta.get(str(record.get("id")))
        merged = {**record, **entry} if isinstance(entry, dict) else dict(record)
        try:
            listing = AppListing.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Skipping invalid catalog entry {record.get('id')!r}: {e}")
            continue
        listings.append(listing.model_dump(mode="json", by_alias=True, exclude_none=True))
    return listings


@router.get("/apps")
async def list_apps(db: CatalogManager = Depends(get_catalog_manager)) -> dict:
    """
    All catalog entries in catalog order, with metadata merged in.
    """
    return {
        "apps": _load_listings(db),
        "generatedAt": db.load_metadata().get(GENERATED_AT_KEY),
    }


@router.get("/apps/{app_id}")
async def get_app(app_id: str, db: CatalogManager = Depends(get_catalog_manager)) -> dict:
    for listing in _load_listings(db):
        if listing["id"] == app_id:
            return listing
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"App {app_id} not found")
