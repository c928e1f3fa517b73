from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Optional

from app.storage.json_db_manager import write_json
from app.storage.vote_cache import VoteCache

logger = logging.getLogger(__name__)

ANONYMOUS_ID_FILE = "anonymous-id.json"
VOTE_CACHE_FILE = "vote-cache.json"


class AnonymousIdStore:
    """
    Stable per-installation user identifier for anonymous votes.

    Created on first use and persisted; never rotated.
    """

    def __init__(self, path: Path):
        self.path = path
        self._user_id: Optional[str] = None

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            return None
        user_id = raw.get("user_id") if isinstance(raw, dict) else None
        return user_id if isinstance(user_id, str) and user_id else None

    def get_or_create(self) -> str:
        if self._user_id:
            return self._user_id

        user_id = self._read()
        if user_id is None:
            user_id = str(uuid.uuid4())
            write_json(self.path, {"user_id": user_id})
            logger.info(f"Created anonymous user id at {self.path}")

        self._user_id = user_id
        return user_id


class VoteSession:
    """
    Per-session context injected into every vote widget.

    Holds the anonymous user id (None when it could not be established, in
    which case widgets stay offline) and the local vote cache.
    """

    def __init__(self, user_id: Optional[str], cache: VoteCache):
        self.user_id = user_id
        self.cache = cache


def open_vote_session(data_dir: Path) -> VoteSession:
    """Create the session context: resolve the anonymous id and load the cache."""
    cache = VoteCache(data_dir / VOTE_CACHE_FILE)
    try:
        user_id: Optional[str] = AnonymousIdStore(data_dir / ANONYMOUS_ID_FILE).get_or_create()
    except OSError as e:
        logger.warning(f"Anonymous user id unavailable, voting disabled: {e}")
        user_id = None
    return VoteSession(user_id=user_id, cache=cache)
