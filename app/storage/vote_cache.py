"""
Local, persisted mirror of vote state.

Stored in <DATA_DIR>/vote-cache.json as {item_id: {"count": int, "loved": bool}}.
Reads and writes are synchronous so a widget can render cached values
before any network round trip.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from app.domain.models import VoteState
from app.storage.json_db_manager import write_json

logger = logging.getLogger(__name__)


class VoteCache:
    """Get-by-item and upsert-by-item over cached vote state."""

    def __init__(self, path: Path):
        self.path = path
        self._items: Dict[str, VoteState] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.warning(f"Discarding unreadable vote cache {self.path}: {e}")
            return

        if not isinstance(raw, dict):
            return

        for item_id, value in raw.items():
            try:
                self._items[item_id] = VoteState.model_validate(value)
            except ValidationError:
                # Skip malformed entries
                continue

    def _save(self) -> None:
        write_json(
            self.path,
            {item_id: state.model_dump() for item_id, state in self._items.items()},
        )

    def get_item(self, item_id: str) -> Optional[VoteState]:
        state = self._items.get(item_id)
        return state.model_copy() if state is not None else None

    def update_item(
        self,
        item_id: str,
        count: Optional[int] = None,
        loved: Optional[bool] = None,
    ) -> VoteState:
        """Merge the given fields into the cached entry, creating it if needed."""
        state = self._items.get(item_id) or VoteState()
        if count is not None:
            state.count = count
        if loved is not None:
            state.loved = loved
        self._items[item_id] = state
        self._save()
        return state.model_copy()
