from typing import List
from pydantic import BaseModel, Field

from app.schemas.item import ItemRead

class ColumnRead(BaseModel):
    id: str
    board_id: int = Field(alias="boardId")
    name: str
    order: int

    class Config:
        from_attributes = True
        populate_by_name = True

class ColumnData(ColumnRead):
    items: List[ItemRead] = []
