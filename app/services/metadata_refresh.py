"""
Metadata refresh job.

Reads the app catalog, walks the GitHub releases of every app that links a
repository, and writes aggregated download counts and last-release dates to
app-meta.json. The catalog itself is kept free of these volatile fields.

Usage:
    python -m app.services.metadata_refresh [data_dir]
"""
from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from app.core.dependencies import load_settings
from app.domain.models import GENERATED_AT_KEY, VOLATILE_FIELDS, AppMetadata, DirectorySettings
from app.domain.repo_utils import extract_repo
from app.services.aggregation import build_metadata_entry
from app.services.github_releases import GitHubReleasesClient
from app.storage.db_manager import CatalogManager
from app.storage.json_db_manager import JsonCatalogManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

STATUS_SKIPPED = "skipped"
STATUS_UPDATED = "updated"
STATUS_NO_DATA = "no_data"
STATUS_FAILED = "failed"


def sanitize_catalog(apps: List[Dict[str, Any]]) -> bool:
    """
    Remove legacy downloads/lastUpdated fields from catalog entries in place.

    Returns True if at least one field was removed, i.e. the catalog needs
    to be written back.
    """
    modified = False
    for app in apps:
        for field in VOLATILE_FIELDS:
            if field in app:
                del app[field]
                modified = True
    return modified


def generated_at(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AppRefreshResult:
    """Outcome of refreshing a single catalog entry."""

    def __init__(
        self,
        app_id: str,
        status: str,
        repo: Optional[str] = None,
        entry: Optional[AppMetadata] = None,
        error: Optional[str] = None,
    ):
        self.app_id = app_id
        self.status = status
        self.repo = repo
        self.entry = entry
        self.error = error


class RefreshReport:
    def __init__(self, generated_at: str, results: List[AppRefreshResult], catalog_sanitized: bool):
        self.generated_at = generated_at
        self.results = results
        self.catalog_sanitized = catalog_sanitized

    @property
    def updated(self) -> List[AppRefreshResult]:
        return [r for r in self.results if r.status == STATUS_UPDATED]

    @property
    def failed(self) -> List[AppRefreshResult]:
        return [r for r in self.results if r.error is not None]

    def to_metadata(self) -> Dict[str, Any]:
        meta: Dict[str, Any] = {GENERATED_AT_KEY: self.generated_at}
        for result in self.updated:
            meta[result.app_id] = result.entry.to_json()
        return meta


class MetadataRefreshJob:
    """
    Sequential fold over the catalog: one app at a time, in catalog order.
    A failure for one app is recorded on its result and never aborts the run.
    """

    def __init__(
        self,
        catalog: CatalogManager,
        releases: GitHubReleasesClient,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.catalog = catalog
        self.releases = releases
        self.clock = clock

    async def refresh_app(self, app: Dict[str, Any]) -> AppRefreshResult:
        app_id = str(app.get("id"))
        name = app.get("name") or app_id

        repo = extract_repo(app.get("githubUrl"))
        if not repo:
            logger.info(f"{name} - no valid GitHub URL, skipping")
            return AppRefreshResult(app_id, STATUS_SKIPPED)

        logger.info(f"{name} ({repo})")
        fetched = await self.releases.fetch_releases(repo)
        entry = build_metadata_entry(fetched.releases)

        if entry is None:
            logger.warning(f"  No release data found for {name}")
            return AppRefreshResult(app_id, STATUS_NO_DATA, repo=repo, error=fetched.error)

        logger.info(
            f"  downloads: {entry.downloads or 'N/A'}, "
            f"lastUpdated: {entry.last_updated.isoformat() if entry.last_updated else 'N/A'}"
        )
        return AppRefreshResult(app_id, STATUS_UPDATED, repo=repo, entry=entry, error=fetched.error)

    async def run(self) -> RefreshReport:
        # Catalog read/parse errors propagate: they are fatal for the whole run.
        apps = self.catalog.load_catalog()
        stamp = generated_at(self.clock())

        sanitized = sanitize_catalog(apps)
        if sanitized:
            self.catalog.save_catalog(apps)
            logger.info("Stripped downloads/lastUpdated from the catalog")

        logger.info(f"Processing {len(apps)} apps...")

        results: List[AppRefreshResult] = []
        for app in apps:
            try:
                results.append(await self.refresh_app(app))
            except Exception as e:
                # Log error but continue with other apps
                app_id = str(app.get("id"))
                logger.error(f"Failed to refresh {app_id}: {e}", exc_info=True)
                results.append(
                    AppRefreshResult(
                        app_id,
                        STATUS_FAILED,
                        repo=extract_repo(app.get("githubUrl")),
                        error=f"{type(e).__name__}: {e}",
                    )
                )

        report = RefreshReport(stamp, results, sanitized)
        self.catalog.save_metadata(report.to_metadata())

        logger.info(f"{len(report.updated)} apps with metadata")
        if report.failed:
            logger.warning(
                f"{len(report.failed)} repositories could not be fully refreshed: "
                + ", ".join(r.repo or r.app_id for r in report.failed)
            )
        return report


async def run_refresh(settings: DirectorySettings, client: Optional[GitHubReleasesClient] = None) -> RefreshReport:
    """Run the job against the files described by `settings`."""
    catalog = JsonCatalogManager(settings.catalog_path, settings.metadata_path)
    owns_client = client is None
    if client is None:
        client = GitHubReleasesClient.create(settings.github_api_url, settings.github_token)

    try:
        report = await MetadataRefreshJob(catalog, client).run()
    finally:
        if owns_client:
            await client.aclose()

    logger.info(f"Wrote {settings.metadata_path}")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    args = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings(Path(args[0]) if args else None)
        if not settings.github_token:
            logger.warning("GITHUB_TOKEN not set - API rate limits will be lower")
        asyncio.run(run_refresh(settings))
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
