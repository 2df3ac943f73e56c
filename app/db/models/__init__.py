from app.db.models.board import Board
from app.db.models.column import BoardColumn
from app.db.models.item import Item

__all__ = ["Board", "BoardColumn", "Item"]
