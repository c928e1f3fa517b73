from datetime import datetime

from app.data import metadata_updater
from app.domain.models import DirectorySettings


def test_seconds_until_later_today():
    now = datetime(2026, 10, 19, 5, 30, 0)
    assert metadata_updater._seconds_until(6, 0, now=now) == 30 * 60


def test_seconds_until_rolls_over_to_tomorrow():
    now = datetime(2026, 10, 19, 6, 0, 0)
    assert metadata_updater._seconds_until(6, 0, now=now) == 24 * 3600


async def test_scheduled_run_survives_a_broken_catalog(data_dir, monkeypatch):
    (data_dir / "apps.json").write_text("not json", encoding="utf-8")
    monkeypatch.setattr(metadata_updater, "get_settings", lambda: DirectorySettings(data_dir=data_dir))

    assert await metadata_updater.refresh_metadata() is None


async def test_scheduled_run_writes_metadata(data_dir, write_catalog, monkeypatch):
    write_catalog([{"id": "a", "name": "A"}])
    monkeypatch.setattr(metadata_updater, "get_settings", lambda: DirectorySettings(data_dir=data_dir))

    report = await metadata_updater.refresh_metadata()

    assert report.results[0].status == "skipped"
    assert (data_dir / "app-meta.json").exists()
