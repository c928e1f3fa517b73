from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from app.domain.models import AppMetadata, Release


def calculate_downloads(releases: Iterable[Release]) -> int:
    """
    Total asset downloads over all non-draft releases.

    Prereleases are counted here even though they are ignored for the
    last-updated date.
    """
    return sum(
        asset.download_count
        for release in releases
        if not release.draft
        for asset in release.assets
    )


def latest_release_date(releases: Iterable[Release]) -> Optional[date]:
    """
    Calendar date of the most recently published stable (non-draft,
    non-prerelease) release, or None when there is none.
    """
    stable = [
        r.published_at
        for r in releases
        if not r.draft and not r.prerelease and r.published_at is not None
    ]
    if not stable:
        return None
    return max(stable).date()


def build_metadata_entry(releases: Iterable[Release]) -> Optional[AppMetadata]:
    """
    Aggregate releases into a metadata entry, or None when there is nothing
    worth recording (no downloads and no stable release date).
    """
    releases = list(releases)
    downloads = calculate_downloads(releases)
    last_updated = latest_release_date(releases)

    entry = AppMetadata(
        downloads=downloads if downloads > 0 else None,
        last_updated=last_updated,
    )
    if entry.is_empty():
        return None
    return entry
