"""
Per-board view state for the client.

The state holds two things: the last snapshot the server confirmed, and the
commands still waiting on the server, at most one per entity key. What the
user sees is the confirmed snapshot with the pending commands replayed on
top, in the order they were submitted. The only ways to change it are the
transitions below: apply_optimistic, confirm, confirm_superseded, revert
and replace.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from app.schemas.board import BoardData
from app.schemas.commands import (
    CreateColumn,
    CreateItem,
    DeleteBoard,
    DeleteCard,
    DeleteColumn,
    MoveItem,
    UpdateBoardName,
    UpdateColumn,
)

logger = logging.getLogger(__name__)


@dataclass
class ItemView:
    id: str
    column_id: str
    order: float
    title: str
    content: Optional[str] = None


@dataclass
class ColumnView:
    id: str
    board_id: int
    name: str
    order: int


@dataclass
class BoardSnapshot:
    id: int
    name: str
    color: str
    columns: Dict[str, ColumnView] = field(default_factory=dict)
    items: Dict[str, ItemView] = field(default_factory=dict)
    deleted: bool = False

    @classmethod
    def from_board(cls, data: Union[BoardData, Mapping[str, Any]]) -> "BoardSnapshot":
        if not isinstance(data, BoardData):
            data = BoardData.model_validate(data)
        snapshot = cls(id=data.id, name=data.name, color=data.color)
        for column in data.columns:
            snapshot.columns[column.id] = ColumnView(
                id=column.id, board_id=column.board_id, name=column.name, order=column.order
            )
            for item in column.items:
                snapshot.items[item.id] = ItemView(
                    id=item.id,
                    column_id=item.column_id,
                    order=item.order,
                    title=item.title,
                    content=item.content,
                )
        return snapshot


@dataclass
class RenderedColumn:
    id: str
    name: str
    order: int
    items: List[ItemView]


@dataclass
class BoardView:
    id: int
    name: str
    color: str
    columns: List[RenderedColumn]
    deleted: bool = False

    def column(self, column_id: str) -> Optional[RenderedColumn]:
        return next((c for c in self.columns if c.id == column_id), None)

    def column_named(self, name: str) -> Optional[RenderedColumn]:
        return next((c for c in self.columns if c.name == name), None)


def apply_command(snapshot: BoardSnapshot, command, entity: Optional[Mapping[str, Any]] = None) -> None:
    """Replay one command onto a snapshot in place.

    ``entity`` is what the server answered with, if anything; its values win
    over the command's (the server decides a new column's order, for one).
    """
    entity = entity or {}

    if isinstance(command, (CreateItem, MoveItem)):
        existing = snapshot.items.get(command.id)
        snapshot.items[command.id] = ItemView(
            id=command.id,
            column_id=entity.get("columnId", command.column_id),
            order=entity.get("order", command.order),
            title=entity.get("title", command.title),
            content=entity.get("content", existing.content if existing else None),
        )
    elif isinstance(command, DeleteCard):
        snapshot.items.pop(command.item_id, None)
    elif isinstance(command, UpdateBoardName):
        snapshot.name = entity.get("name", command.name)
    elif isinstance(command, CreateColumn):
        existing = snapshot.columns.get(command.id)
        snapshot.columns[command.id] = ColumnView(
            id=command.id,
            board_id=command.board_id,
            name=entity.get("name", command.name),
            order=entity.get(
                "order", existing.order if existing else len(snapshot.columns) + 1
            ),
        )
    elif isinstance(command, UpdateColumn):
        column = snapshot.columns.get(command.column_id)
        if column is not None:
            column.name = entity.get("name", command.name)
    elif isinstance(command, DeleteColumn):
        snapshot.columns.pop(command.column_id, None)
        for item_id in [i.id for i in snapshot.items.values() if i.column_id == command.column_id]:
            del snapshot.items[item_id]
    elif isinstance(command, DeleteBoard):
        snapshot.deleted = True
    else:
        raise TypeError(f"Not a board command: {command!r}")


class BoardViewState:
    """Confirmed snapshot plus pending commands for one board view."""

    def __init__(self, snapshot: BoardSnapshot):
        self._confirmed = snapshot
        self._pending: Dict[str, Tuple[int, Any]] = {}

    @classmethod
    def from_board(cls, data: Union[BoardData, Mapping[str, Any]]) -> "BoardViewState":
        return cls(BoardSnapshot.from_board(data))

    @property
    def board_id(self) -> int:
        return self._confirmed.id

    @property
    def confirmed(self) -> BoardSnapshot:
        return self._confirmed

    def pending(self, key: str) -> Optional[Tuple[int, Any]]:
        return self._pending.get(key)

    @property
    def pending_keys(self) -> List[str]:
        return list(self._pending)

    # --- Transitions --- #

    def apply_optimistic(self, key: str, generation: int, command) -> None:
        # re-inserting moves the key to the end so replay follows submission order
        self._pending.pop(key, None)
        self._pending[key] = (generation, command)

    def confirm(self, key: str, generation: int, entity: Optional[Mapping[str, Any]] = None) -> bool:
        pending = self._pending.get(key)
        if pending is None or pending[0] != generation:
            return False
        del self._pending[key]
        apply_command(self._confirmed, pending[1], entity)
        return True

    def confirm_superseded(self, command, entity: Optional[Mapping[str, Any]] = None) -> None:
        """Record a success the server reported for a command that has since been replaced."""
        apply_command(self._confirmed, command, entity)

    def revert(self, key: str, generation: int) -> bool:
        pending = self._pending.get(key)
        if pending is None or pending[0] != generation:
            return False
        del self._pending[key]
        logger.info(f"Reverted optimistic {pending[1].intent} for {key}")
        return True

    def replace(self, data: Union[BoardData, Mapping[str, Any]]) -> None:
        """Swap in a freshly fetched snapshot; pending commands stay on top."""
        self._confirmed = BoardSnapshot.from_board(data)

    # --- Rendering --- #

    def snapshot(self) -> BoardSnapshot:
        current = copy.deepcopy(self._confirmed)
        for _, command in self._pending.values():
            apply_command(current, command)
        return current

    def view(self) -> BoardView:
        current = self.snapshot()
        by_column: Dict[str, List[ItemView]] = {column_id: [] for column_id in current.columns}
        for item in current.items.values():
            if item.column_id in by_column:
                by_column[item.column_id].append(item)

        columns = [
            RenderedColumn(
                id=column.id,
                name=column.name,
                order=column.order,
                items=sorted(by_column[column.id], key=lambda i: (i.order, i.id)),
            )
            for column in sorted(current.columns.values(), key=lambda c: (c.order, c.id))
        ]
        return BoardView(
            id=current.id,
            name=current.name,
            color=current.color,
            columns=columns,
            deleted=current.deleted,
        )
