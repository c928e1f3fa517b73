import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from app.storage.db_manager import CatalogManager

logger = logging.getLogger(__name__)


def write_json(path: Path, payload: Any) -> None:
    """Pretty-print JSON with a trailing newline, the format the data files are kept in."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


class JsonCatalogManager(CatalogManager):
    def __init__(self, catalog_path: Path, metadata_path: Path):
        self._catalog_path = catalog_path
        self._metadata_path = metadata_path

    @property
    def catalog_path(self) -> Path:
        return self._catalog_path

    @property
    def metadata_path(self) -> Path:
        return self._metadata_path

    def load_catalog(self) -> List[Dict[str, Any]]:
        raw = json.loads(self._catalog_path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"{self._catalog_path} must contain a JSON array of apps")
        for entry in raw:
            if not isinstance(entry, dict):
                raise ValueError(f"{self._catalog_path} contains a non-object entry: {entry!r}")
        return raw

    def save_catalog(self, apps: List[Dict[str, Any]]) -> None:
        write_json(self._catalog_path, apps)

    def load_metadata(self) -> Dict[str, Any]:
        if not self._metadata_path.exists():
            return {}
        try:
            raw = json.loads(self._metadata_path.read_text(encoding="utf-8"))
        except ValueError as e:
            # Derived data: a broken file is regenerated on the next refresh.
            logger.warning(f"Ignoring unreadable metadata file {self._metadata_path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring metadata file {self._metadata_path}: not a JSON object")
            return {}
        return raw

    def save_metadata(self, meta: Dict[str, Any]) -> None:
        write_json(self._metadata_path, meta)
