"""
Client-side mutation coordinator.

Commands are keyed by the entity they touch (``card:<id>``, ``column:<id>``,
``board:<id>``). For each key only the most recently submitted command is
"current":

- submitting applies the command to the view state right away;
- a newer submission for the same key supersedes the older one. A
  superseded command that has not been sent yet is dropped; one already on
  the wire is allowed to finish first, so the server applies them in
  submission order, and its answer no longer drives the view;
- a rename of a column whose create is still unconfirmed is folded into
  that create, so dropping the older command never loses the column;
- card commands aimed at a column that is still being created wait for
  that column's requests to settle before they are sent;
- a failed current command (error result, transport failure or any other
  error raised by the sender) is reverted and recorded in ``failures``.
  It is not retried.

Commands for different keys otherwise run fully in parallel.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

import httpx

from app.core.errors import RequestFailed
from app.client.state import BoardViewState
from app.schemas.commands import (
    CreateColumn,
    CreateItem,
    DeleteBoard,
    DeleteCard,
    DeleteColumn,
    MoveItem,
    MutationResult,
    UpdateBoardName,
    UpdateColumn,
)

logger = logging.getLogger(__name__)

Sender = Callable[[object], Awaitable[MutationResult]]


def card_key(item_id: str) -> str:
    return f"card:{item_id}"


def column_key(column_id: str) -> str:
    return f"column:{column_id}"


def board_key(board_id) -> str:
    return f"board:{board_id}"


def entity_key_for(command) -> str:
    """Coalescing key of the entity a command mutates."""
    if isinstance(command, (CreateItem, MoveItem)):
        return card_key(command.id)
    if isinstance(command, DeleteCard):
        return card_key(command.item_id)
    if isinstance(command, CreateColumn):
        return column_key(command.id)
    if isinstance(command, (UpdateColumn, DeleteColumn)):
        return column_key(command.column_id)
    if isinstance(command, (UpdateBoardName, DeleteBoard)):
        return board_key(command.board_id)
    raise TypeError(f"Not a board command: {command!r}")


def coalesce(older, newer):
    """Merge ``newer`` into an unconfirmed create it supersedes; otherwise ``newer`` wins."""
    if isinstance(older, CreateColumn) and isinstance(newer, UpdateColumn):
        return older.model_copy(update={"name": newer.name})
    return newer


@dataclass
class MutationFailure:
    key: str
    command: object
    result: MutationResult


class MutationCoordinator:
    def __init__(
        self,
        state: BoardViewState,
        send: Sender,
        reload: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.state = state
        self._send = send
        self._reload = reload
        self._generations: Dict[str, int] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self.failures: Dict[str, MutationFailure] = {}

    def generation(self, key: str) -> int:
        return self._generations.get(key, 0)

    def is_pending(self, key: str) -> bool:
        return key in self._inflight

    def submit(self, entity_key: str, command) -> asyncio.Task:
        """Apply ``command`` optimistically and send it, superseding any older one for the key.

        Returns the task carrying the request; it resolves to the
        MutationResult, or None if the command was superseded.
        """
        generation = self.generation(entity_key) + 1
        self._generations[entity_key] = generation
        self.failures.pop(entity_key, None)
        pending = self.state.pending(entity_key)
        if pending is not None:
            command = coalesce(pending[1], command)
        self.state.apply_optimistic(entity_key, generation, command)

        previous = self._inflight.get(entity_key)
        task = asyncio.get_running_loop().create_task(
            self._run(entity_key, generation, command, previous, self._column_being_created(command))
        )
        self._inflight[entity_key] = task
        task.add_done_callback(lambda t, key=entity_key: self._forget(key, t))
        return task

    def submit_command(self, command) -> asyncio.Task:
        return self.submit(entity_key_for(command), command)

    async def drain(self) -> None:
        """Wait until no request is in flight."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight.values()), return_exceptions=True)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def _is_current(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    def _column_being_created(self, command) -> Optional[str]:
        """Key of the unconfirmed column a card command has to wait for, if any."""
        if not isinstance(command, (CreateItem, MoveItem)):
            return None
        key = column_key(command.column_id)
        pending = self.state.pending(key)
        if pending is not None and isinstance(pending[1], CreateColumn):
            return key
        return None

    async def _settled(self, key: str) -> None:
        task = self._inflight.get(key)
        while task is not None and not task.done():
            await asyncio.wait([task])
            task = self._inflight.get(key)

    def _for_wire(self, command):
        # a folded create whose original create has landed in the meantime
        if isinstance(command, CreateColumn) and command.id in self.state.confirmed.columns:
            return UpdateColumn(column_id=command.id, name=command.name)
        return command

    async def _run(
        self,
        key: str,
        generation: int,
        command,
        previous: Optional[asyncio.Task],
        after: Optional[str] = None,
    ):
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        if after is not None:
            await self._settled(after)

        if not self._is_current(key, generation):
            logger.debug(f"Dropping superseded {command.intent} for {key} before sending")
            return None

        try:
            result = await self._send(self._for_wire(command))
        except httpx.HTTPError as e:
            logger.warning(f"{command.intent} for {key} failed in transport: {e!r}")
            result = MutationResult.failure(RequestFailed(str(e) or type(e).__name__), command.intent)
        except Exception as e:
            logger.exception(f"Sending {command.intent} for {key} raised")
            result = MutationResult.failure(RequestFailed(str(e) or type(e).__name__), command.intent)

        if not self._is_current(key, generation):
            if result.ok:
                self.state.confirm_superseded(command, result.entity)
            logger.debug(f"Ignoring answer to superseded {command.intent} for {key}")
            return result

        if result.ok:
            self.state.confirm(key, generation, result.entity)
            return result

        self.state.revert(key, generation)
        self.failures[key] = MutationFailure(key=key, command=command, result=result)
        logger.warning(f"{command.intent} for {key} failed: {result.error.kind}: {result.error.message}")
        if self._reload is not None:
            try:
                await self._reload()
            except httpx.HTTPError as e:
                logger.error(f"Could not reload board after failed {command.intent}: {e!r}")
        return result
