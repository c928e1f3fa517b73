from typing import Any, Optional
from urllib.parse import urlsplit


def extract_repo(url: Any) -> Optional[str]:
    """
    Derive an "owner/repo" identifier from a source repository URL.

    The first two non-empty path segments are returned verbatim. Anything that
    does not parse as an absolute URL, or has a shorter path, yields None.
    """
    if not url or not isinstance(url, str):
        return None

    try:
        parts = urlsplit(url.strip())
        # Accessing the port validates the netloc (raises on garbage like "host:abc").
        _ = parts.port
    except ValueError:
        return None

    if not parts.scheme or not parts.netloc:
        return None

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2:
        return None
    return f"{segments[0]}/{segments[1]}"
