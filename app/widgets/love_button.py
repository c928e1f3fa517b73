"""
"Love" voting control bound to a single catalog item.

State is seeded from (in order of precedence) a caller-supplied preload, the
local vote cache, or the initial count. A remote read then reconciles it
unless fetching is disabled. Toggling updates the displayed state
optimistically, mirrors it into the cache, and rolls back if the vote API
call fails.

The toggle lifecycle is an explicit phase so that concurrent toggles are
suppressed only while a request is actually in flight:

    idle -> in_flight -> reconciled | rolled_back -> in_flight -> ...
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.domain.models import VoteState
from app.services.vote_client import VoteApiClient
from app.services.vote_session import VoteSession

logger = logging.getLogger(__name__)


class TogglePhase(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


class HydrationSource(str, Enum):
    NONE = "none"
    PRELOAD = "preload"
    CACHE = "cache"
    REMOTE = "remote"


class LoveButtonView(BaseModel):
    """Render output of the control."""

    item_id: str
    count: int
    loved: bool
    pending: bool
    hydrated: bool
    title: str


class LoveButton:
    def __init__(
        self,
        item_id: str,
        session: VoteSession,
        client: Optional[VoteApiClient],
        initial_count: int = 0,
        preloaded_state: Optional[VoteState] = None,
        allow_fetch: bool = True,
    ):
        self.item_id = item_id
        self.session = session
        self.client = client
        self.preloaded_state = preloaded_state
        self.allow_fetch = allow_fetch
        self.phase = TogglePhase.IDLE

        cached = None if preloaded_state is not None else session.cache.get_item(item_id)

        if preloaded_state is not None:
            self.count = preloaded_state.count
            self.loved = preloaded_state.loved
            self.hydrated_from = HydrationSource.PRELOAD
        elif cached is not None:
            self.count = cached.count
            self.loved = cached.loved
            self.hydrated_from = HydrationSource.CACHE
        else:
            self.count = initial_count
            self.loved = False
            self.hydrated_from = HydrationSource.NONE

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id

    @property
    def hydrated(self) -> bool:
        return self.hydrated_from is not HydrationSource.NONE

    @property
    def in_flight(self) -> bool:
        return self.phase is TogglePhase.IN_FLIGHT

    def _can_reach_api(self) -> bool:
        return bool(self.user_id) and self.client is not None

    def set_preloaded_state(self, state: VoteState) -> None:
        """Adopt a preload supplied after construction; remote reads stop for this widget."""
        self.preloaded_state = state
        self.count = state.count
        self.loved = state.loved
        self.hydrated_from = HydrationSource.PRELOAD

    async def mount(self) -> None:
        """
        Reconcile with the vote API. Skipped when a preload was supplied,
        fetching is disabled, or there is no user id.
        """
        if not self._can_reach_api() or self.preloaded_state is not None or not self.allow_fetch:
            return

        try:
            state = await self.client.get_vote(self.item_id, self.user_id)
        except Exception as e:
            logger.error(f"Failed to load votes for {self.item_id}: {e}")
            return

        self.count = state.count
        self.loved = state.loved
        self.hydrated_from = HydrationSource.REMOTE
        self.session.cache.update_item(self.item_id, count=state.count, loved=state.loved)

    async def toggle(self) -> bool:
        """
        Flip the vote. Returns False when the toggle was ignored (no user id,
        or a previous toggle is still in flight).
        """
        if not self._can_reach_api() or self.in_flight:
            return False

        previous_count, previous_loved = self.count, self.loved
        new_loved = not previous_loved

        self.loved = new_loved
        self.count = previous_count + (1 if new_loved else -1)
        self.session.cache.update_item(self.item_id, count=self.count, loved=new_loved)

        self.phase = TogglePhase.IN_FLIGHT
        try:
            result = await self.client.toggle_vote(self.item_id, self.user_id)
        except Exception as e:
            # The cache keeps the optimistic value; the next remote read corrects it.
            self.loved = previous_loved
            self.count = previous_count
            self.phase = TogglePhase.ROLLED_BACK
            logger.error(f"Failed to vote for {self.item_id}: {e}")
            return True

        if result.loved != new_loved:
            # Only the flag is taken from the server; the count stays optimistic.
            self.loved = result.loved
        self.phase = TogglePhase.RECONCILED
        return True

    def render(self) -> LoveButtonView:
        return LoveButtonView(
            item_id=self.item_id,
            count=self.count,
            loved=self.loved,
            pending=self.in_flight,
            hydrated=self.hydrated,
            title="Unlove this" if self.loved else "Love this",
        )
