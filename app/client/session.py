"""
One open board on the client.

BoardSession ties the HTTP client, the view state and the coordinator
together and exposes the gestures a board UI performs. Every gesture updates
``view()`` before its request completes.
"""
import asyncio
import uuid
from typing import Callable, Optional

from app.client.api import BoardClient
from app.client.coordinator import MutationCoordinator, board_key, card_key, column_key
from app.client.state import BoardView, BoardViewState
from app.core.ordering import DropZone, compute_insert_order, drop_order, end_order, resolve_drop_zone
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


def new_id() -> str:
    return str(uuid.uuid4())


class BoardSession:
    def __init__(self, client: BoardClient, state: BoardViewState, id_factory: Callable[[], str] = new_id):
        self.client = client
        self.state = state
        self._new_id = id_factory
        self.coordinator = MutationCoordinator(
            state,
            send=lambda command: client.send(state.board_id, command),
            reload=self.refresh,
        )

    @classmethod
    async def open(cls, client: BoardClient, board_id: int, **kwargs) -> "BoardSession":
        data = await client.fetch_board(board_id)
        return cls(client, BoardViewState.from_board(data), **kwargs)

    @property
    def board_id(self) -> int:
        return self.state.board_id

    def view(self) -> BoardView:
        return self.state.view()

    async def refresh(self) -> None:
        """Re-fetch the authoritative board; pending commands stay applied."""
        self.state.replace(await self.client.fetch_board(self.board_id))

    async def settle(self) -> None:
        await self.coordinator.drain()

    def _column_orders(self, column_id: str, exclude: Optional[str] = None):
        column = self.view().column(column_id)
        if column is None:
            raise KeyError(f"Unknown column {column_id}")
        return [i.order for i in column.items if i.id != exclude]

    # --- Cards --- #

    def add_card(self, column_id: str, title: str) -> asyncio.Task:
        """Append a new card; its id is made here so later moves coalesce with the create."""
        item_id = self._new_id()
        command = CreateItem(
            id=item_id,
            column_id=column_id,
            order=end_order(self._column_orders(column_id)),
            title=title,
        )
        return self.coordinator.submit(card_key(item_id), command)

    def move_card(self, item_id: str, column_id: str, order: float) -> asyncio.Task:
        item = self.state.snapshot().items.get(item_id)
        if item is None:
            raise KeyError(f"Unknown card {item_id}")
        command = MoveItem(id=item_id, column_id=column_id, order=order, title=item.title)
        return self.coordinator.submit(card_key(item_id), command)

    def drop_card_at(self, item_id: str, target_item_id: str, zone: DropZone) -> asyncio.Task:
        """Drop a dragged card into the top or bottom half of another card."""
        target = self.state.snapshot().items.get(target_item_id)
        if target is None:
            raise KeyError(f"Unknown card {target_item_id}")
        items = self.view().column(target.column_id).items
        index = [i.id for i in items].index(target_item_id)
        order = drop_order([i.order for i in items], index, zone)
        return self.move_card(item_id, target.column_id, order)

    def drop_card(
        self,
        item_id: str,
        target_item_id: str,
        pointer_y: float,
        rect_top: float,
        rect_bottom: float,
    ) -> asyncio.Task:
        zone = resolve_drop_zone(pointer_y, rect_top, rect_bottom)
        return self.drop_card_at(item_id, target_item_id, zone)

    def drop_card_on_empty_column(self, item_id: str, column_id: str) -> asyncio.Task:
        if self._column_orders(column_id, exclude=item_id):
            raise ValueError(f"Column {column_id} is not empty")
        return self.move_card(item_id, column_id, compute_insert_order(None, None))

    def delete_card(self, item_id: str) -> asyncio.Task:
        return self.coordinator.submit(card_key(item_id), DeleteCard(item_id=item_id))

    # --- Columns --- #

    def add_column(self, name: str) -> asyncio.Task:
        column_id = self._new_id()
        command = CreateColumn(id=column_id, board_id=self.board_id, name=name)
        return self.coordinator.submit(column_key(column_id), command)

    def rename_column(self, column_id: str, name: str) -> asyncio.Task:
        return self.coordinator.submit(column_key(column_id), UpdateColumn(column_id=column_id, name=name))

    def delete_column(self, column_id: str) -> asyncio.Task:
        return self.coordinator.submit(column_key(column_id), DeleteColumn(column_id=column_id))

    # --- Board --- #

    def rename_board(self, name: str) -> asyncio.Task:
        command = UpdateBoardName(board_id=self.board_id, name=name)
        return self.coordinator.submit(board_key(self.board_id), command)

    def delete_board(self) -> asyncio.Task:
        return self.coordinator.submit(board_key(self.board_id), DeleteBoard(board_id=self.board_id))
