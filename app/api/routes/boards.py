import logging

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user_id
from app.core.errors import NotFound, ValidationFailed
from app.db import queries
from app.db.session import get_db
from app.schemas.board import BoardData, BoardEditor, BoardRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


@router.get("/", response_model=list[BoardRead])
async def list_boards(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List the user's boards, oldest first."""
    return await queries.list_boards(db, user_id)


@router.post("/", response_model=BoardRead)
async def save_board(
    data: dict,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Board editor: create a board, or update name and color when an id is given."""
    try:
        editor = BoardEditor.model_validate({k: v for k, v in data.items() if v not in (None, "")})
    except ValidationError as e:
        fields = {}
        for error in e.errors():
            fields.setdefault(".".join(str(p) for p in error["loc"]), []).append(error["msg"])
        raise ValidationFailed("Invalid board", fields)

    board = await queries.upsert_board(db, user_id, editor.name, editor.color, board_id=editor.id)
    logger.info(f"Board {board.id} {'updated' if editor.id else 'created'} for user {user_id}")
    return board


@router.get("/{board_id}", response_model=BoardData)
async def get_board(
    board_id: int,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Fetch a board with its columns and items in display order."""
    board = await queries.get_board_data(db, board_id, user_id)
    if not board:
        raise NotFound("Board not found")
    return board
