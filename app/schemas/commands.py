"""
Board mutation commands.

Every change to a board arrives as a record tagged with an ``intent``. The
payload is validated exactly once, here, into one of the command models
below; anything that does not match a known intent is rejected.
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from app.core.errors import (
    MalformedRequest,
    MutationError,
    UnknownIntent,
    ValidationFailed,
    error_from_dict,
)
from app.schemas.board import NAME_MAX_LENGTH, NAME_MIN_LENGTH


class Intent(str, Enum):
    CREATE_ITEM = "createItem"
    MOVE_ITEM = "moveItem"
    DELETE_CARD = "deleteCard"
    UPDATE_BOARD_NAME = "updateBoardName"
    CREATE_COLUMN = "createColumn"
    UPDATE_COLUMN = "updateColumn"
    DELETE_COLUMN = "deleteColumn"
    DELETE_BOARD = "deleteBoard"


class _Command(BaseModel):
    class Config:
        populate_by_name = True
        frozen = True

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class _ItemMutation(_Command):
    id: str
    column_id: str = Field(alias="columnId")
    order: float = Field(allow_inf_nan=False)
    title: str


class CreateItem(_ItemMutation):
    intent: Literal["createItem"] = "createItem"


class MoveItem(_ItemMutation):
    intent: Literal["moveItem"] = "moveItem"


class DeleteCard(_Command):
    intent: Literal["deleteCard"] = "deleteCard"
    item_id: str = Field(alias="itemId")


class UpdateBoardName(_Command):
    intent: Literal["updateBoardName"] = "updateBoardName"
    board_id: int = Field(alias="boardId")
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)


class CreateColumn(_Command):
    intent: Literal["createColumn"] = "createColumn"
    id: str
    board_id: int = Field(alias="boardId")
    name: str


class UpdateColumn(_Command):
    intent: Literal["updateColumn"] = "updateColumn"
    column_id: str = Field(alias="columnId")
    name: str


class DeleteColumn(_Command):
    intent: Literal["deleteColumn"] = "deleteColumn"
    column_id: str = Field(alias="columnId")


class DeleteBoard(_Command):
    intent: Literal["deleteBoard"] = "deleteBoard"
    board_id: int = Field(alias="boardId")


Command = Annotated[
    Union[
        CreateItem,
        MoveItem,
        DeleteCard,
        UpdateBoardName,
        CreateColumn,
        UpdateColumn,
        DeleteColumn,
        DeleteBoard,
    ],
    Field(discriminator="intent"),
]

_command_adapter = TypeAdapter(Command)

# Constraint violations the UI can show next to a form field. Every other
# pydantic error means the request itself is unusable.
_FIELD_CONSTRAINT_ERRORS = {"string_too_short", "string_too_long"}


def _field_name(loc) -> str:
    # loc is (intent, field, ...) for a discriminated union
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts)


def _raise_for(exc: ValidationError):
    malformed: Dict[str, List[str]] = {}
    invalid: Dict[str, List[str]] = {}
    for error in exc.errors():
        bucket = invalid if error["type"] in _FIELD_CONSTRAINT_ERRORS else malformed
        bucket.setdefault(_field_name(error["loc"]), []).append(error["msg"])

    if malformed:
        raise MalformedRequest(f"Missing or malformed: {', '.join(sorted(malformed))}", malformed)
    raise ValidationFailed("Invalid field values", invalid)


def parse_command(payload: Mapping[str, Any], board_id: Optional[int] = None):
    """Validate a raw intent payload into a command model.

    Blank values count as absent. ``board_id`` is the board the request was
    made against; ``updateBoardName`` uses it when the payload names none,
    and a payload naming a different board is rejected.
    """
    data = {k: v for k, v in payload.items() if v is not None and v != ""}

    intent = data.get("intent")
    if not intent:
        raise MalformedRequest("Missing intent", {"intent": ["Field required"]})
    if not isinstance(intent, str) or intent not in {i.value for i in Intent}:
        raise UnknownIntent(f"Unknown intent: {intent}")

    if intent == Intent.UPDATE_BOARD_NAME.value and "boardId" not in data and board_id is not None:
        data["boardId"] = board_id

    try:
        command = _command_adapter.validate_python(data)
    except ValidationError as e:
        _raise_for(e)

    if board_id is not None and getattr(command, "board_id", board_id) != board_id:
        raise MalformedRequest(
            "boardId does not match the board addressed",
            {"boardId": [f"Expected {board_id}"]},
        )
    return command


class ErrorBody(BaseModel):
    kind: str
    message: str
    fields: Dict[str, List[str]] = {}


class MutationResult(BaseModel):
    """Outcome of one dispatched command, as sent back to the caller."""
    ok: bool
    intent: Optional[str] = None
    entity: Optional[Dict[str, Any]] = None
    error: Optional[ErrorBody] = None

    @classmethod
    def success(cls, intent: str, entity: Optional[Dict[str, Any]] = None) -> "MutationResult":
        return cls(ok=True, intent=intent, entity=entity)

    @classmethod
    def failure(cls, error: MutationError, intent: Optional[str] = None) -> "MutationResult":
        return cls(ok=False, intent=intent, error=ErrorBody(**error.to_dict()))

    @property
    def status_code(self) -> int:
        if self.ok or self.error is None:
            return 200
        return error_from_dict(self.error.model_dump()).status_code
