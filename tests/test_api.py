import json

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_catalog_manager
from app.main import app


@pytest.fixture
def client(catalog_manager):
    app.dependency_overrides[get_catalog_manager] = lambda: catalog_manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_apps_are_merged_with_metadata(client, write_catalog, catalog_manager):
    write_catalog(
        [
            {"id": "a", "name": "A", "githubUrl": "https://github.com/o/a", "tags": ["cli"]},
            {"id": "b", "name": "B"},
        ]
    )
    catalog_manager.metadata_path.write_text(
        json.dumps({"_generatedAt": "2026-10-19T06:00:00.000Z", "a": {"downloads": 42, "lastUpdated": "2026-09-01"}}),
        encoding="utf-8",
    )

    body = client.get("/api/apps").json()

    assert body["generatedAt"] == "2026-10-19T06:00:00.000Z"
    assert body["apps"] == [
        {
            "id": "a",
            "name": "A",
            "githubUrl": "https://github.com/o/a",
            "tags": ["cli"],
            "downloads": 42,
            "lastUpdated": "2026-09-01",
        },
        {"id": "b", "name": "B"},
    ]


def test_metadata_file_is_optional(client, write_catalog):
    write_catalog([{"id": "a", "name": "A"}])

    body = client.get("/api/apps").json()

    assert body == {"apps": [{"id": "a", "name": "A"}], "generatedAt": None}


def test_get_single_app(client, write_catalog):
    write_catalog([{"id": "a", "name": "A"}])

    assert client.get("/api/apps/a").json() == {"id": "a", "name": "A"}
    assert client.get("/api/apps/missing").status_code == 404


def test_unreadable_catalog_is_unavailable(client, data_dir):
    (data_dir / "apps.json").write_text("oops", encoding="utf-8")
    assert client.get("/api/apps").status_code == 503
