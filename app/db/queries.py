"""
Owner-scoped store operations.

Every lookup joins up to the owning board and filters on the acting user, so
an entity that belongs to someone else is indistinguishable from one that
does not exist. Each write commits once: a delete and its cascade land
together or not at all.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotFound, ValidationFailed
from app.db.models import Board, BoardColumn, Item

logger = logging.getLogger(__name__)


# --- Scoped lookups --- #


async def get_owned_board(db: AsyncSession, board_id: int, user_id: str) -> Optional[Board]:
    result = await db.execute(
        select(Board).where(Board.id == board_id, Board.owner_user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_owned_column(db: AsyncSession, column_id: str, user_id: str) -> Optional[BoardColumn]:
    result = await db.execute(
        select(BoardColumn)
        .join(Board, BoardColumn.board_id == Board.id)
        .where(BoardColumn.id == column_id, Board.owner_user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_owned_item(db: AsyncSession, item_id: str, user_id: str) -> Optional[Item]:
    result = await db.execute(
        select(Item)
        .join(BoardColumn, Item.column_id == BoardColumn.id)
        .join(Board, BoardColumn.board_id == Board.id)
        .where(Item.id == item_id, Board.owner_user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_boards(db: AsyncSession, user_id: str) -> List[Board]:
    result = await db.execute(
        select(Board)
        .where(Board.owner_user_id == user_id)
        .order_by(Board.created_at.asc(), Board.id.asc())
    )
    return list(result.scalars().all())


async def get_board_data(db: AsyncSession, board_id: int, user_id: str) -> Optional[Board]:
    """Board with its columns and their items, each in display order."""
    result = await db.execute(
        select(Board)
        .where(Board.id == board_id, Board.owner_user_id == user_id)
        .options(selectinload(Board.columns).selectinload(BoardColumn.items))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# --- Boards --- #


async def upsert_board(
    db: AsyncSession,
    user_id: str,
    name: str,
    color: str,
    board_id: Optional[int] = None,
) -> Board:
    if board_id is None:
        board = Board(owner_user_id=user_id, name=name, color=color)
        db.add(board)
    else:
        board = await get_owned_board(db, board_id, user_id)
        if not board:
            raise NotFound("Board not found", {"id": ["Board not found"]})
        board.name = name
        board.color = color

    await db.commit()
    await db.refresh(board)
    return board


async def update_board_name(db: AsyncSession, board_id: int, name: str, user_id: str) -> Board:
    board = await get_owned_board(db, board_id, user_id)
    if not board:
        raise NotFound("Board not found")

    board.name = name
    await db.commit()
    await db.refresh(board)
    return board


async def delete_board(db: AsyncSession, board_id: int, user_id: str) -> None:
    board = await get_owned_board(db, board_id, user_id)
    if not board:
        raise NotFound("Board not found")

    column_ids = select(BoardColumn.id).where(BoardColumn.board_id == board_id)
    await db.execute(delete(Item).where(Item.column_id.in_(column_ids)))
    await db.execute(delete(BoardColumn).where(BoardColumn.board_id == board_id))
    await db.execute(delete(Board).where(Board.id == board_id))
    await db.commit()
    logger.info(f"Deleted board {board_id} with its columns and items")


# --- Columns --- #


async def create_column(
    db: AsyncSession, board_id: int, name: str, column_id: str, user_id: str
) -> BoardColumn:
    board = await get_owned_board(db, board_id, user_id)
    if not board:
        raise NotFound("Board not found")

    existing = await db.get(BoardColumn, column_id)
    if existing is not None:
        owned = await get_owned_column(db, column_id, user_id)
        if owned is None:
            raise NotFound("Column not found")
        # A retried create for a column we already stored.
        if owned.board_id == board_id:
            return owned
        raise ValidationFailed("Column id already in use", {"id": ["Column id already in use"]})

    column_count = await db.scalar(
        select(func.count()).select_from(BoardColumn).where(BoardColumn.board_id == board_id)
    )
    column = BoardColumn(id=column_id, board_id=board_id, name=name, order=column_count + 1)
    db.add(column)
    await db.commit()
    await db.refresh(column)
    return column


async def update_column_name(db: AsyncSession, column_id: str, name: str, user_id: str) -> BoardColumn:
    column = await get_owned_column(db, column_id, user_id)
    if not column:
        raise NotFound("Column not found")

    column.name = name
    await db.commit()
    await db.refresh(column)
    return column


async def delete_column(db: AsyncSession, column_id: str, user_id: str) -> bool:
    """Delete a column and every item in it. Returns False if there was nothing to delete."""
    column = await get_owned_column(db, column_id, user_id)
    if not column:
        return False

    result = await db.execute(delete(Item).where(Item.column_id == column_id))
    await db.execute(delete(BoardColumn).where(BoardColumn.id == column_id))
    await db.commit()
    logger.info(f"Deleted column {column_id} and {result.rowcount} items")
    return True


# --- Items --- #


async def upsert_item(
    db: AsyncSession,
    item_id: str,
    column_id: str,
    order: float,
    title: str,
    user_id: str,
) -> Item:
    """Create the item or move it; repeating the same call changes nothing."""
    column = await get_owned_column(db, column_id, user_id)
    if not column:
        raise NotFound("Column not found")

    item = await db.get(Item, item_id)
    if item is None:
        item = Item(id=item_id, column_id=column_id, order=order, title=title)
        db.add(item)
    else:
        if not await get_owned_item(db, item_id, user_id):
            raise NotFound("Item not found")
        item.column_id = column_id
        item.order = order
        item.title = title

    await db.commit()
    await db.refresh(item)
    return item


async def delete_item(db: AsyncSession, item_id: str, user_id: str) -> bool:
    """Returns False if the item was already gone (or never visible to this user)."""
    item = await get_owned_item(db, item_id, user_id)
    if not item:
        return False

    await db.delete(item)
    await db.commit()
    return True


async def count_entities(db: AsyncSession) -> dict:
    boards = await db.scalar(select(func.count()).select_from(Board))
    columns = await db.scalar(select(func.count()).select_from(BoardColumn))
    items = await db.scalar(select(func.count()).select_from(Item))
    return {"boards": boards, "columns": columns, "items": items}
