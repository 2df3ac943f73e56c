"""
Tests for parsing intent payloads into commands.
"""
import pytest

from app.core.errors import MalformedRequest, UnknownIntent, ValidationFailed
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
    parse_command,
)


@pytest.mark.parametrize("payload,expected", [
    ({"intent": "createItem", "id": "i1", "columnId": "c1", "order": "1", "title": "T"}, CreateItem),
    ({"intent": "moveItem", "id": "i1", "columnId": "c1", "order": 2.5, "title": "T"}, MoveItem),
    ({"intent": "deleteCard", "itemId": "i1"}, DeleteCard),
    ({"intent": "updateBoardName", "name": "Renamed", "boardId": 3}, UpdateBoardName),
    ({"intent": "createColumn", "id": "c1", "name": "Todo", "boardId": "3"}, CreateColumn),
    ({"intent": "updateColumn", "columnId": "c1", "name": "Doing"}, UpdateColumn),
    ({"intent": "deleteColumn", "columnId": "c1"}, DeleteColumn),
    ({"intent": "deleteBoard", "boardId": 3}, DeleteBoard),
])
def test_every_intent_parses(payload, expected):
    assert isinstance(parse_command(payload), expected)


def test_form_values_are_coerced():
    command = parse_command(
        {"intent": "createItem", "id": "i1", "columnId": "c1", "order": "1.5", "title": "T"}
    )
    assert command.order == 1.5
    assert command.column_id == "c1"


def test_missing_intent():
    with pytest.raises(MalformedRequest) as exc:
        parse_command({"itemId": "i1"})
    assert "intent" in exc.value.fields


def test_unknown_intent():
    with pytest.raises(UnknownIntent):
        parse_command({"intent": "archiveBoard", "boardId": 1})


def test_missing_field_is_malformed():
    with pytest.raises(MalformedRequest) as exc:
        parse_command({"intent": "updateColumn", "columnId": "c1"})
    assert list(exc.value.fields) == ["name"]


def test_blank_field_counts_as_missing():
    with pytest.raises(MalformedRequest) as exc:
        parse_command({"intent": "deleteCard", "itemId": ""})
    assert "itemId" in exc.value.fields


def test_wrong_type_is_malformed():
    with pytest.raises(MalformedRequest) as exc:
        parse_command({"intent": "moveItem", "id": "i1", "columnId": "c1", "order": "top", "title": "T"})
    assert "order" in exc.value.fields


def test_board_name_too_long_is_validation_failure():
    with pytest.raises(ValidationFailed) as exc:
        parse_command({"intent": "updateBoardName", "name": "x" * 101, "boardId": 1})
    assert exc.value.fields["name"]
    assert exc.value.status_code == 422


def test_update_board_name_uses_route_board():
    command = parse_command({"intent": "updateBoardName", "name": "Renamed"}, board_id=7)
    assert command.board_id == 7


def test_update_board_name_without_board_is_malformed():
    with pytest.raises(MalformedRequest):
        parse_command({"intent": "updateBoardName", "name": "Renamed"})


def test_payload_uses_wire_names():
    command = MoveItem(id="i1", column_id="c1", order=1.5, title="T")
    assert command.to_payload() == {
        "intent": "moveItem",
        "id": "i1",
        "columnId": "c1",
        "order": 1.5,
        "title": "T",
    }
    assert parse_command(command.to_payload()) == command


def test_failure_result_status_code():
    result = MutationResult.failure(UnknownIntent("Unknown intent: nope"))
    assert not result.ok
    assert result.error.kind == "UnknownIntent"
    assert result.status_code == 400


@pytest.mark.parametrize("order", [float("nan"), float("inf"), "-Infinity"])
def test_non_finite_order_is_malformed(order):
    with pytest.raises(MalformedRequest) as exc:
        parse_command({"intent": "moveItem", "id": "i1", "columnId": "c1", "order": order, "title": "T"})
    assert "order" in exc.value.fields


@pytest.mark.parametrize("payload", [
    {"intent": "createColumn", "id": "c1", "name": "Todo", "boardId": 8},
    {"intent": "deleteBoard", "boardId": 8},
    {"intent": "updateBoardName", "name": "Renamed", "boardId": 8},
])
def test_board_id_must_match_route_board(payload):
    with pytest.raises(MalformedRequest) as exc:
        parse_command(payload, board_id=7)
    assert "boardId" in exc.value.fields


def test_matching_board_id_is_accepted():
    command = parse_command({"intent": "deleteBoard", "boardId": "7"}, board_id=7)
    assert command.board_id == 7
