"""
One-time migration: move downloads/lastUpdated out of apps.json into app-meta.json.

Usage:
    python -m app.services.metadata_extract [data_dir]
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from app.core.dependencies import load_settings
from app.domain.models import GENERATED_AT_KEY
from app.services.metadata_refresh import LOG_FORMAT, generated_at
from app.storage.db_manager import CatalogManager
from app.storage.json_db_manager import JsonCatalogManager

logger = logging.getLogger(__name__)


def extract_legacy_metadata(
    apps: List[Dict[str, Any]],
    stamp: Optional[str] = None,
) -> Tuple[Dict[str, Any], int]:
    """
    Strip legacy fields from `apps` in place and collect them into a metadata mapping.

    Returns the mapping (with the generation timestamp first) and the number
    of apps whose download count was moved.
    """
    meta: Dict[str, Any] = {GENERATED_AT_KEY: stamp or generated_at()}
    stripped = 0

    for app in apps:
        entry: Dict[str, Any] = {}
        if "downloads" in app:
            entry["downloads"] = app.pop("downloads")
            stripped += 1
        if "lastUpdated" in app:
            entry["lastUpdated"] = app.pop("lastUpdated")
        if entry:
            meta[str(app.get("id"))] = entry

    return meta, stripped


def run_extract(catalog: CatalogManager) -> Tuple[Dict[str, Any], int]:
    apps = catalog.load_catalog()
    meta, stripped = extract_legacy_metadata(apps)
    catalog.save_catalog(apps)
    catalog.save_metadata(meta)

    logger.info(f"Extracted metadata for {len(meta) - 1} apps")
    logger.info(f"Stripped downloads/lastUpdated from {stripped} apps in the catalog")
    return meta, stripped


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    args = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings(Path(args[0]) if args else None)
        run_extract(JsonCatalogManager(settings.catalog_path, settings.metadata_path))
        logger.info(f"Wrote {settings.metadata_path}")
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
