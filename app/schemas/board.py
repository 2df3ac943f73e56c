from typing import List, Optional
from pydantic import BaseModel, Field

from app.db.models.board import DEFAULT_BOARD_COLOR
from app.schemas.column import ColumnData

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 100
COLOR_MIN_LENGTH = 1
COLOR_MAX_LENGTH = 10

class BoardEditor(BaseModel):
    """Create-or-update payload of the board editor form."""
    id: Optional[int] = None
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    color: str = Field(
        default=DEFAULT_BOARD_COLOR,
        min_length=COLOR_MIN_LENGTH,
        max_length=COLOR_MAX_LENGTH,
    )

class BoardRead(BaseModel):
    id: int
    name: str
    color: str

    class Config:
        from_attributes = True

class BoardData(BoardRead):
    columns: List[ColumnData] = []
