import json
from pathlib import Path

import pytest

from app.storage.json_db_manager import JsonCatalogManager


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_catalog(data_dir: Path):
    def _write(apps) -> Path:
        path = data_dir / "apps.json"
        path.write_text(json.dumps(apps, indent=2) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog_manager(data_dir: Path) -> JsonCatalogManager:
    return JsonCatalogManager(data_dir / "apps.json", data_dir / "app-meta.json")
