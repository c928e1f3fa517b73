"""
Pydantic models for the app directory.

This module defines the data models used throughout the application, including:
- Runtime settings resolved from the environment
- Catalog records and the derived per-app metadata
- GitHub release payloads consumed by the refresh job
- Vote state shared by the vote API client, the local cache and the widget

All models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Reserved key in the metadata file holding the generation timestamp.
GENERATED_AT_KEY = "_generatedAt"

# Catalog fields that belong in the metadata file, not in apps.json.
VOLATILE_FIELDS = ("downloads", "lastUpdated")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class DirectorySettings(BaseModel):
    """
    Runtime configuration for the directory, resolved from environment variables
    by app.core.dependencies.get_settings().
    """

    data_dir: Path = Field(
        description="Directory holding apps.json, app-meta.json and the local vote state.",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API.",
    )
    github_token: Optional[str] = Field(
        default=None,
        description="Optional token sent as a bearer credential to raise rate limits.",
    )
    vote_api_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the service exposing /api/vote.",
    )
    refresh_hour: int = Field(
        default=6,
        ge=0,
        le=23,
        description="Local hour at which the daily metadata refresh runs.",
    )
    refresh_minute: int = Field(
        default=0,
        ge=0,
        le=59,
        description="Local minute at which the daily metadata refresh runs.",
    )

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / "apps.json"

    @property
    def metadata_path(self) -> Path:
        return self.data_dir / "app-meta.json"


# ---------------------------------------------------------------------------
# Catalog Models
# ---------------------------------------------------------------------------


class AppRecord(BaseModel):
    """
    A single catalog entry as exposed by the read API.

    Only the fields the directory itself relies on are declared; every other
    catalog field is carried through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str
    github_url: Optional[str] = Field(default=None, alias="githubUrl")


class AppMetadata(BaseModel):
    """
    Volatile per-app statistics derived from GitHub releases.

    Persisted in app-meta.json keyed by app id, using camelCase keys.
    """

    model_config = ConfigDict(populate_by_name=True)

    downloads: Optional[int] = Field(default=None, ge=0)
    last_updated: Optional[date] = Field(default=None, alias="lastUpdated")

    def is_empty(self) -> bool:
        return not self.downloads and self.last_updated is None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AppListing(AppRecord):
    """Catalog entry merged with its metadata entry, if any."""

    downloads: Optional[int] = None
    last_updated: Optional[date] = Field(default=None, alias="lastUpdated")


# ---------------------------------------------------------------------------
# GitHub Release Models
# ---------------------------------------------------------------------------


class ReleaseAsset(BaseModel):
    name: Optional[str] = None
    download_count: int = 0


class Release(BaseModel):
    """
    The subset of a GitHub release object used for aggregation.
    Unknown fields from the API payload are ignored.
    """

    tag_name: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    published_at: Optional[datetime] = None
    assets: List[ReleaseAsset] = Field(default_factory=list)

    @field_validator("published_at")
    @classmethod
    def _published_at_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps without an offset are taken as UTC so all values compare.
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Vote Models
# ---------------------------------------------------------------------------


class VoteState(BaseModel):
    """Vote count for an item plus whether the current user loves it."""

    count: int = 0
    loved: bool = False
