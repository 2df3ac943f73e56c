"""
Mutation dispatcher.

Takes one command (or a raw intent payload), applies it against the store on
behalf of the acting user and reports the outcome as a MutationResult. It
keeps no state between calls; ordering of commands for the same entity is
the client's job.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import MutationError
from app.db import queries
from app.schemas.column import ColumnRead
from app.schemas.board import BoardRead
from app.schemas.item import ItemRead
from app.schemas.commands import (
    CreateColumn,
    CreateItem,
    DeleteBoard,
    DeleteCard,
    DeleteColumn,
    Intent,
    MoveItem,
    MutationResult,
    UpdateBoardName,
    UpdateColumn,
    parse_command,
)

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Any]
Handler = Callable[[AsyncSession, Any, str], Awaitable[Snapshot]]


def _snapshot(schema, entity) -> Snapshot:
    return schema.model_validate(entity).model_dump(by_alias=True)


def _deleted(entity_id, existed: bool = True) -> Snapshot:
    return {"id": entity_id, "deleted": True, "existed": existed}


async def _upsert_item(db: AsyncSession, command: Union[CreateItem, MoveItem], user_id: str) -> Snapshot:
    item = await queries.upsert_item(
        db, command.id, command.column_id, command.order, command.title, user_id
    )
    return _snapshot(ItemRead, item)


async def _delete_card(db: AsyncSession, command: DeleteCard, user_id: str) -> Snapshot:
    existed = await queries.delete_item(db, command.item_id, user_id)
    return _deleted(command.item_id, existed)


async def _update_board_name(db: AsyncSession, command: UpdateBoardName, user_id: str) -> Snapshot:
    board = await queries.update_board_name(db, command.board_id, command.name, user_id)
    return _snapshot(BoardRead, board)


async def _create_column(db: AsyncSession, command: CreateColumn, user_id: str) -> Snapshot:
    column = await queries.create_column(db, command.board_id, command.name, command.id, user_id)
    return _snapshot(ColumnRead, column)


async def _update_column(db: AsyncSession, command: UpdateColumn, user_id: str) -> Snapshot:
    column = await queries.update_column_name(db, command.column_id, command.name, user_id)
    return _snapshot(ColumnRead, column)


async def _delete_column(db: AsyncSession, command: DeleteColumn, user_id: str) -> Snapshot:
    existed = await queries.delete_column(db, command.column_id, user_id)
    return _deleted(command.column_id, existed)


async def _delete_board(db: AsyncSession, command: DeleteBoard, user_id: str) -> Snapshot:
    await queries.delete_board(db, command.board_id, user_id)
    return _deleted(command.board_id)


HANDLERS: Dict[Intent, Handler] = {
    Intent.CREATE_ITEM: _upsert_item,
    Intent.MOVE_ITEM: _upsert_item,
    Intent.DELETE_CARD: _delete_card,
    Intent.UPDATE_BOARD_NAME: _update_board_name,
    Intent.CREATE_COLUMN: _create_column,
    Intent.UPDATE_COLUMN: _update_column,
    Intent.DELETE_COLUMN: _delete_column,
    Intent.DELETE_BOARD: _delete_board,
}

_unhandled = set(Intent) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for intents: {sorted(i.value for i in _unhandled)}")


async def dispatch(
    db: AsyncSession,
    command: Union[BaseModel, Mapping[str, Any]],
    acting_user_id: str,
    board_id: Optional[int] = None,
) -> MutationResult:
    """Apply one command for ``acting_user_id``.

    ``command`` may be an already parsed command model or a raw payload; raw
    payloads are validated before the store is touched. ``board_id`` is the
    board the request came in on. Failures come back as a result with
    ``ok=False``; nothing is raised.
    """
    intent = None
    try:
        if not isinstance(command, BaseModel):
            intent = command.get("intent")
            command = parse_command(command, board_id=board_id)
        intent = command.intent
        handler = HANDLERS[Intent(intent)]
        entity = await handler(db, command, acting_user_id)
    except MutationError as e:
        await db.rollback()
        logger.info(f"Rejected {intent or 'command'} for user {acting_user_id}: {e.kind}: {e.message}")
        return MutationResult.failure(e, intent=intent if isinstance(intent, str) else None)

    logger.info(f"Applied {intent} for user {acting_user_id}")
    return MutationResult.success(intent, entity)
