"""
Paginated reader for the GitHub Releases API.

Pagination is best effort: the first failed page (HTTP error, transport error
or an unexpected body) ends the walk for that repository and whatever was
collected so far is returned. There is no retry.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.domain.models import Release

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class ReleaseFetchResult:
    """Releases collected for one repository, plus the error that stopped pagination, if any."""

    def __init__(self, repo: str, releases: List[Release], pages: int, error: Optional[str] = None):
        self.repo = repo
        self.releases = releases
        self.pages = pages
        self.error = error

    @property
    def complete(self) -> bool:
        return self.error is None


def github_headers(token: Optional[str] = None) -> dict:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GitHubReleasesClient:
    def __init__(self, http: httpx.AsyncClient, page_size: int = PAGE_SIZE):
        self.http = http
        self.page_size = page_size

    @classmethod
    def create(
        cls,
        base_url: str = GITHUB_API_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GitHubReleasesClient":
        http = httpx.AsyncClient(
            base_url=base_url,
            headers=github_headers(token),
            follow_redirects=True,
            transport=transport,
        )
        return cls(http)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def fetch_releases(self, repo: str) -> ReleaseFetchResult:
        """
        Fetch every release of `repo` ("owner/name"), one page at a time.
        """
        releases: List[Release] = []
        page = 1
        pages_read = 0
        error: Optional[str] = None

        while True:
            logger.info(f"  Fetching releases for {repo} (page {page})...")
            try:
                response = await self.http.get(
                    f"/repos/{repo}/releases",
                    params={"per_page": self.page_size, "page": page},
                )
            except httpx.HTTPError as e:
                error = f"{type(e).__name__}: {e}"
                logger.error(f"  Error fetching {repo}: {error}")
                break

            if not response.is_success:
                error = f"{response.status_code} {response.reason_phrase}"
                logger.error(f"  Failed to fetch {repo}: {error}")
                break

            try:
                payload = response.json()
            except ValueError as e:
                error = f"invalid JSON body: {e}"
                logger.error(f"  Failed to fetch {repo}: {error}")
                break

            if not isinstance(payload, list):
                error = f"expected a JSON array, got {type(payload).__name__}"
                logger.error(f"  Failed to fetch {repo}: {error}")
                break

            pages_read += 1
            if not payload:
                break

            for item in payload:
                try:
                    releases.append(Release.model_validate(item))
                except ValidationError as e:
                    logger.debug(f"  Skipping malformed release in {repo}: {e}")

            if len(payload) < self.page_size:
                break
            page += 1

        return ReleaseFetchResult(repo=repo, releases=releases, pages=pages_read, error=error)
