import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from app.activities.services import ActivityFeedService
from app.extensions import db as mongo


def add_expense(client, headers, group_id, **overrides):
    payload = {
        "group_id": group_id,
        "description": "Dinner",
        "amount": 100.00,
    }
    payload.update(overrides)
    return client.post("/api/v1/expenses/", json=payload, headers=headers)


def test_requires_token(client, users):
    rv = client.get("/api/v1/groups/")
    assert rv.status_code == 401


def test_me(client, users, auth):
    rv = client.get("/api/v1/users/me", headers=auth(users["bob"]))
    assert rv.status_code == 200
    assert rv.get_json()["username"] == "bob"


def test_create_group_includes_creator(client, users, auth, group):
    member_ids = [m["id"] for m in group["members"]]
    assert member_ids == [users["alice"], users["bob"], users["carol"]]
    assert group["members"][1]["username"] == "bob"

    rv = client.get("/api/v1/groups/", headers=auth(users["carol"]))
    assert [g["id"] for g in rv.get_json()["groups"]] == [group["id"]]


def test_create_group_requires_name(client, users, auth):
    rv = client.post("/api/v1/groups/", json={"name": "  "}, headers=auth(users["alice"]))
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "Group name is required"


def test_create_group_rejects_unknown_member(client, users, auth):
    rv = client.post(
        "/api/v1/groups/",
        json={"name": "Trip", "members": [str(ObjectId())]},
        headers=auth(users["alice"]),
    )
    assert rv.status_code == 404


def test_group_detail_is_members_only(client, users, auth):
    rv = client.post("/api/v1/groups/", json={"name": "Solo"}, headers=auth(users["alice"]))
    group_id = rv.get_json()["group"]["id"]

    assert client.get(f"/api/v1/groups/{group_id}", headers=auth(users["bob"])).status_code == 403
    assert client.get("/api/v1/groups/not-an-id", headers=auth(users["bob"])).status_code == 404


def test_add_member_is_idempotent(client, users, auth):
    rv = client.post("/api/v1/groups/", json={"name": "Flat"}, headers=auth(users["alice"]))
    group_id = rv.get_json()["group"]["id"]
    headers = auth(users["alice"])

    rv = client.post(f"/api/v1/groups/{group_id}/members", json={"user_id": users["bob"]}, headers=headers)
    assert rv.get_json()["status"] == "added"
    rv = client.post(f"/api/v1/groups/{group_id}/members", json={"user_id": users["bob"]}, headers=headers)
    assert rv.get_json()["status"] == "already_member"
    assert rv.get_json()["members"] == [users["alice"], users["bob"]]


def test_create_expense_equal_split(client, users, auth, group):
    rv = add_expense(
        client, auth(users["bob"]), group["id"],
        paid_by=users["alice"],
        participant_ids=[users["alice"], users["bob"], users["carol"]],
    )
    assert rv.status_code == 201

    expense = rv.get_json()["expense"]
    assert expense["created_by"] == users["bob"]
    assert [s["amount"] for s in expense["splits"]] == [33.34, 33.33, 33.33]
    assert [s["user_id"] for s in expense["splits"]] == [users["alice"], users["bob"], users["carol"]]


def test_create_expense_custom_split_views(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    rv = add_expense(
        client, auth(a), group["id"],
        amount=50, paid_by=a, participant_ids=[a, b, c],
        custom_splits=[{"user_id": a, "amount": 0}, {"user_id": b, "amount": 25}, {"user_id": c, "amount": 25}],
    )
    assert rv.status_code == 201

    view_a = client.get(f"/api/v1/groups/{group['id']}/expenses", headers=auth(a)).get_json()["expenses"][0]
    assert view_a["status"] == "lent"
    assert view_a["amount_in_view"] == 50.0
    assert view_a["paid_by"]["username"] == "alice"
    assert [p["amount"] for p in view_a["participants"]] == [0.0, 25.0, 25.0]

    view_b = client.get(f"/api/v1/groups/{group['id']}/expenses", headers=auth(b)).get_json()["expenses"][0]
    assert view_b["status"] == "owe"
    assert view_b["amount_in_view"] == 25.0


def test_create_expense_validation_errors(client, users, auth, group):
    a, b = users["alice"], users["bob"]
    headers = auth(a)

    rv = add_expense(client, headers, group["id"], paid_by=a, participant_ids=[])
    assert rv.status_code == 400

    rv = add_expense(client, headers, group["id"], amount=-3, paid_by=a, participant_ids=[a])
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "amount must be positive"

    rv = add_expense(
        client, headers, group["id"], paid_by=a, participant_ids=[a, b],
        custom_splits=[{"user_id": a, "amount": 10}, {"user_id": b, "amount": 10}],
    )
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "split total mismatch"

    outsider = str(ObjectId())
    rv = add_expense(client, headers, group["id"], paid_by=a, participant_ids=[a, outsider])
    assert rv.status_code == 400
    assert "not in the group" in rv.get_json()["error"]

    rv = add_expense(client, headers, group["id"], amount="1e27", paid_by=a, participant_ids=[a, b])
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "amount is too large"

    assert mongo.expenses.count_documents({}) == 0


def test_non_member_cannot_add_expense(client, users, auth):
    rv = client.post("/api/v1/groups/", json={"name": "Solo"}, headers=auth(users["alice"]))
    group_id = rv.get_json()["group"]["id"]

    rv = add_expense(client, auth(users["bob"]), group_id, paid_by=users["bob"], participant_ids=[users["bob"]])
    assert rv.status_code == 403


def test_group_balances(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    add_expense(client, auth(a), group["id"], amount=90, paid_by=a, participant_ids=[a, b, c])
    add_expense(client, auth(b), group["id"], amount=20, paid_by=b, participant_ids=[a, b])

    data = client.get(f"/api/v1/groups/{group['id']}/balances", headers=auth(a)).get_json()
    by_id = {e["counterparty_id"]: e for e in data["balances"]}

    assert by_id[b]["lent"] == 30.0
    assert by_id[b]["owe"] == 10.0
    assert by_id[b]["net_balance"] == 20.0
    assert by_id[b]["status"] == "lent"
    assert by_id[b]["username"] == "bob"
    assert by_id[c]["status"] == "lent"
    assert data["total_lent"] == 60.0
    assert data["total_owed"] == 10.0
    assert data["net_balance"] == -50.0
    assert data["status"] == "net_lender"

    data = client.get(f"/api/v1/groups/{group['id']}/balances", headers=auth(c)).get_json()
    by_id = {e["counterparty_id"]: e for e in data["balances"]}
    assert by_id[a] == dict(by_id[a], owe=30.0, status="owe")
    assert by_id[b]["status"] == "settled"


def test_update_expense_regenerates_splits(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    created = add_expense(client, auth(a), group["id"], paid_by=a, participant_ids=[a, b, c]).get_json()["expense"]

    rv = client.put(
        f"/api/v1/expenses/{created['id']}",
        json={"description": "Lunch", "amount": 10, "paid_by": b, "participant_ids": [c, b, a]},
        headers=auth(a),
    )
    assert rv.status_code == 200

    updated = rv.get_json()["expense"]
    assert updated["description"] == "Lunch"
    assert updated["paid_by"] == b
    assert updated["created_by"] == a
    assert [(s["user_id"], s["amount"]) for s in updated["splits"]] == [(c, 3.34), (b, 3.33), (a, 3.33)]

    stored = client.get(f"/api/v1/expenses/{created['id']}", headers=auth(c)).get_json()["expense"]
    assert stored["amount"] == 10.0
    assert stored["splits"] == updated["splits"]


def test_update_expense_rebuilds_activities(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    created = add_expense(
        client, auth(a), group["id"], description="Groceries", amount=90, paid_by=a, participant_ids=[a, b, c]
    ).get_json()["expense"]

    feed = client.get("/api/v1/activities/recent", headers=auth(c)).get_json()["activities"]
    assert [f["amount"] for f in feed] == [30.0]

    rv = client.put(
        f"/api/v1/expenses/{created['id']}",
        json={"description": "Groceries", "amount": 10, "paid_by": a, "participant_ids": [a, b]},
        headers=auth(a),
    )
    assert rv.status_code == 200

    feed = client.get("/api/v1/activities/recent", headers=auth(c)).get_json()["activities"]
    assert feed == []

    feed = client.get("/api/v1/activities/recent", headers=auth(b)).get_json()["activities"]
    assert [(f["amount_type"], f["amount"]) for f in feed] == [("owed", 5.0)]

    feed = client.get("/api/v1/activities/recent", headers=auth(a)).get_json()["activities"]
    assert sorted((f["type"], f["amount"]) for f in feed) == [
        ("expense_created", 10.0), ("expense_involved", 5.0),
    ]


def test_expense_removed_when_activity_write_fails(client, users, auth, group, monkeypatch):
    def fail(activities):
        raise PyMongoError("write failed")

    monkeypatch.setattr(ActivityFeedService, "record", staticmethod(fail))
    a, b = users["alice"], users["bob"]

    with pytest.raises(PyMongoError):
        add_expense(client, auth(a), group["id"], paid_by=a, participant_ids=[a, b])

    assert mongo.expenses.count_documents({}) == 0


def test_only_creator_or_payer_can_edit(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    created = add_expense(client, auth(a), group["id"], paid_by=a, participant_ids=[a, b]).get_json()["expense"]

    rv = client.put(
        f"/api/v1/expenses/{created['id']}",
        json={"description": "Mine now", "amount": 5, "paid_by": c, "participant_ids": [c]},
        headers=auth(c),
    )
    assert rv.status_code == 403

    rv = client.delete(f"/api/v1/expenses/{created['id']}", headers=auth(c))
    assert rv.status_code == 403


def test_delete_expense_removes_activities(client, users, auth, group):
    a, b = users["alice"], users["bob"]
    created = add_expense(client, auth(a), group["id"], paid_by=a, participant_ids=[a, b]).get_json()["expense"]
    assert mongo.activities.count_documents({}) > 0

    rv = client.delete(f"/api/v1/expenses/{created['id']}", headers=auth(a))
    assert rv.status_code == 200
    assert mongo.expenses.count_documents({}) == 0
    assert mongo.activities.count_documents({}) == 0
    assert client.get(f"/api/v1/expenses/{created['id']}", headers=auth(a)).status_code == 404


def test_recent_activities(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    add_expense(client, auth(c), group["id"], description="Taxi", amount=30, paid_by=a, participant_ids=[a, b])

    feed = client.get("/api/v1/activities/recent", headers=auth(b)).get_json()["activities"]
    assert len(feed) == 1
    assert feed[0]["type"] == "expense_involved"
    assert feed[0]["amount_type"] == "owed"
    assert feed[0]["amount"] == 15.0
    assert feed[0]["group_name"] == "Trip"
    assert feed[0]["description"] == 'You owe for "Taxi"'

    feed = client.get("/api/v1/activities/recent", headers=auth(a)).get_json()["activities"]
    assert len(feed) == 1
    assert feed[0]["description"] == 'bob owes you for "Taxi"'

    feed = client.get("/api/v1/activities/recent", headers=auth(c)).get_json()["activities"]
    assert [f["type"] for f in feed] == ["expense_created"]
    assert feed[0]["description"] == 'You added expense "Taxi"'

    rv = client.get("/api/v1/activities/recent?limit=abc", headers=auth(a))
    assert rv.status_code == 400


def test_account_summary_sums_groups(client, users, auth, group):
    a, b, c = users["alice"], users["bob"], users["carol"]
    add_expense(client, auth(a), group["id"], amount=30, paid_by=a, participant_ids=[a, b, c])

    rv = client.post("/api/v1/groups/", json={"name": "Flat", "members": [b]}, headers=auth(b))
    flat_id = rv.get_json()["group"]["id"]
    client.post(f"/api/v1/groups/{flat_id}/members", json={"user_id": a}, headers=auth(b))
    add_expense(client, auth(b), flat_id, amount=50, paid_by=b, participant_ids=[a, b])

    data = client.get("/api/v1/balances/summary", headers=auth(a)).get_json()

    assert data["total_groups"] == 2
    assert data["total_lent"] == 20.0
    assert data["total_owed"] == 25.0
    assert data["net_balance"] == 5.0
    assert data["status"] == "net_borrower"
    assert {g["group_name"] for g in data["groups"]} == {"Trip", "Flat"}
