"""
Tests for the HTTP surface: board editor, board data and the actions endpoint.
"""

ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


async def test_requires_acting_user(http):
    res = await http.get("/api/boards/")
    assert res.status_code == 401


async def test_create_and_list_boards(http):
    res = await http.post("/api/boards/", json={"name": "Sprint 1"}, headers=ALICE)
    assert res.status_code == 200
    created = res.json()
    assert created["name"] == "Sprint 1"
    assert created["color"] == "#cbd5e1"

    await http.post("/api/boards/", json={"name": "Sprint 2", "color": "#f00"}, headers=ALICE)
    await http.post("/api/boards/", json={"name": "Bob's"}, headers=BOB)

    res = await http.get("/api/boards/", headers=ALICE)
    assert [b["name"] for b in res.json()] == ["Sprint 1", "Sprint 2"]


async def test_board_editor_updates_owned_board(http, board):
    res = await http.post("/api/boards/", json={"id": board, "name": "Renamed", "color": "#abc"}, headers=ALICE)
    assert res.status_code == 200
    assert res.json() == {"id": board, "name": "Renamed", "color": "#abc"}


async def test_board_editor_hides_foreign_board(http, board):
    res = await http.post("/api/boards/", json={"id": board, "name": "Mine"}, headers=BOB)
    assert res.status_code == 404
    assert res.json()["error"]["kind"] == "NotFound"


async def test_board_editor_validates_lengths(http):
    res = await http.post("/api/boards/", json={"name": "x" * 101, "color": "#0123456789"}, headers=ALICE)
    assert res.status_code == 422
    error = res.json()["error"]
    assert error["kind"] == "ValidationFailed"
    assert set(error["fields"]) == {"name", "color"}


async def test_get_board_data(http, board):
    res = await http.get(f"/api/boards/{board}", headers=ALICE)
    assert res.status_code == 200
    data = res.json()
    assert data["name"] == "Sprint 1"
    assert [c["name"] for c in data["columns"]] == ["Todo", "Doing"]
    assert [i["title"] for i in data["columns"][0]["items"]] == ["Card A", "Card B"]
    assert data["columns"][0]["items"][0]["columnId"] == "todo"


async def test_get_foreign_board_is_404(http, board):
    res = await http.get(f"/api/boards/{board}", headers=BOB)
    assert res.status_code == 404


async def test_action_success(http, board):
    res = await http.post(
        f"/api/boards/{board}/actions/",
        json={"intent": "moveItem", "id": "a", "columnId": "doing", "order": 1, "title": "Card A"},
        headers=ALICE,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["intent"] == "moveItem"
    assert body["entity"]["columnId"] == "doing"


async def test_action_missing_intent(http, board):
    res = await http.post(f"/api/boards/{board}/actions/", json={"itemId": "a"}, headers=ALICE)
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "MalformedRequest"


async def test_action_unknown_intent(http, board):
    res = await http.post(f"/api/boards/{board}/actions/", json={"intent": "shuffle"}, headers=ALICE)
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "UnknownIntent"


async def test_action_on_foreign_entity(http, board):
    res = await http.post(
        f"/api/boards/{board}/actions/",
        json={"intent": "updateColumn", "columnId": "todo", "name": "Mine"},
        headers=BOB,
    )
    assert res.status_code == 404
    assert res.json() == {"ok": False, "intent": "updateColumn", "error": {
        "kind": "NotFound", "message": "Column not found", "fields": {},
    }}


async def test_rename_board_from_board_route(http, board):
    res = await http.post(
        f"/api/boards/{board}/actions/",
        json={"intent": "updateBoardName", "name": "Sprint 9"},
        headers=ALICE,
    )
    assert res.status_code == 200
    res = await http.get(f"/api/boards/{board}", headers=ALICE)
    assert res.json()["name"] == "Sprint 9"


async def test_system_stats(http, board):
    res = await http.get("/api/system/stats")
    assert res.json() == {"boards": 1, "columns": 2, "items": 2}


async def test_action_with_nan_order_is_malformed(http, board):
    res = await http.post(
        f"/api/boards/{board}/actions/",
        content=b'{"intent":"moveItem","id":"a","columnId":"todo","order":NaN,"title":"Card A"}',
        headers={**ALICE, "Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "MalformedRequest"

    res = await http.get(f"/api/boards/{board}", headers=ALICE)
    assert [i["order"] for i in res.json()["columns"][0]["items"]] == [1, 2]


async def test_action_cannot_target_another_board(http, board):
    res = await http.post("/api/boards/", json={"name": "Other"}, headers=ALICE)
    other = res.json()["id"]

    res = await http.post(
        f"/api/boards/{board}/actions/",
        json={"intent": "deleteBoard", "boardId": other},
        headers=ALICE,
    )
    assert res.status_code == 400
    assert res.json()["error"]["fields"] == {"boardId": [f"Expected {board}"]}
    res = await http.get(f"/api/boards/{other}", headers=ALICE)
    assert res.status_code == 200
