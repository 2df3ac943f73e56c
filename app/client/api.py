import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.core.errors import RequestFailed
from app.schemas.board import BoardData, BoardRead
from app.schemas.commands import MutationResult

logger = logging.getLogger(__name__)


class BoardClient:
    """Thin async HTTP client for the boards API, acting as one user."""

    def __init__(self, client: httpx.AsyncClient, user_id: str):
        self._client = client
        self._headers = {"X-User-Id": user_id}

    async def list_boards(self) -> List[BoardRead]:
        res = await self._client.get("/api/boards/", headers=self._headers)
        res.raise_for_status()
        return [BoardRead.model_validate(b) for b in res.json()]

    async def save_board(self, name: str, color: Optional[str] = None, board_id: Optional[int] = None) -> BoardRead:
        payload = {"id": board_id, "name": name, "color": color}
        res = await self._client.post(
            "/api/boards/",
            json={k: v for k, v in payload.items() if v is not None},
            headers=self._headers,
        )
        res.raise_for_status()
        return BoardRead.model_validate(res.json())

    async def fetch_board(self, board_id: int) -> BoardData:
        res = await self._client.get(f"/api/boards/{board_id}", headers=self._headers)
        res.raise_for_status()
        return BoardData.model_validate(res.json())

    async def send(self, board_id: int, command) -> MutationResult:
        """POST one command. Error answers come back as results; transport errors raise."""
        res = await self._client.post(
            f"/api/boards/{board_id}/actions/",
            json=command.to_payload(),
            headers=self._headers,
        )
        try:
            return MutationResult.model_validate(res.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unreadable answer to {command.intent} (HTTP {res.status_code}): {e}")
            return MutationResult.failure(
                RequestFailed(f"Unexpected response (HTTP {res.status_code})"), command.intent
            )
