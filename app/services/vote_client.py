"""
HTTP client for the vote-count service.

The service itself lives outside this repository; it exposes:
    GET  /api/vote?itemId=&userId=  -> {"count": int, "loved": bool}
    POST /api/vote?itemId=&userId=  -> {"count": int, "loved": bool}  (toggles)
"""
from __future__ import annotations

from typing import Optional

import httpx

from app.domain.models import VoteState

VOTE_PATH = "/api/vote"


class VoteApiClient:
    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    @classmethod
    def for_base_url(
        cls,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "VoteApiClient":
        return cls(httpx.AsyncClient(base_url=base_url, transport=transport))

    async def get_vote(self, item_id: str, user_id: str) -> VoteState:
        response = await self.http.get(VOTE_PATH, params={"itemId": item_id, "userId": user_id})
        response.raise_for_status()
        return VoteState.model_validate(response.json())

    async def toggle_vote(self, item_id: str, user_id: str) -> VoteState:
        response = await self.http.post(VOTE_PATH, params={"itemId": item_id, "userId": user_id})
        response.raise_for_status()
        return VoteState.model_validate(response.json())

    async def aclose(self) -> None:
        await self.http.aclose()
