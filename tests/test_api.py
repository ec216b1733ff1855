import pytest

from santadraw.extensions import db
from santadraw.models import User
from santadraw.views import auth as auth_views


def register(client, name, passphrase="correct horse battery"):
    return client.post("/auth/register", json={"name": name, "passphrase": passphrase})


def login(client, name, passphrase="correct horse battery"):
    return client.post("/auth/login", json={"name": name, "passphrase": passphrase})


@pytest.fixture()
def party(client):
    """ana runs a group with bia and caio; returns (group_id, user ids by name)."""
    ids = {}
    for name in ("ana", "bia", "caio"):
        resp = register(client, name)
        assert resp.status_code == 201
        ids[name] = resp.get_json()["id"]

    assert login(client, "ana").status_code == 200
    resp = client.post("/api/groups", json={"name": "Office", "draw_date": "2026-12-20"})
    assert resp.status_code == 201
    group_id = resp.get_json()["id"]

    for name in ("bia", "caio"):
        assert client.post(f"/api/groups/{group_id}/members", json={"user_id": ids[name]}).status_code == 201
    return group_id, ids


def test_register_rejects_duplicates(client):
    assert register(client, "ana").status_code == 201
    resp = register(client, "ana")
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "That name is already registered."


def test_login_with_wrong_passphrase(client):
    register(client, "ana")
    assert login(client, "ana", "nope").status_code == 400
    assert client.get("/auth/me").status_code == 401


def test_login_and_logout(client):
    register(client, "ana")
    login(client, "ana")
    assert client.get("/auth/me").get_json()["name"] == "ana"
    assert client.post("/auth/logout").status_code == 204
    assert client.get("/auth/me").status_code == 401


def test_api_requires_login(client):
    resp = client.get("/api/groups")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Unauthorized"


def test_group_listing(client, party):
    group_id, _ = party
    body = client.get(f"/api/groups/{group_id}").get_json()
    assert body["members"] == ["ana", "bia", "caio"]
    assert body["draw_date"] == "2026-12-20"
    assert body["drawn"] is False
    assert [g["id"] for g in client.get("/api/groups").get_json()] == [group_id]


def test_full_draw_flow(client, party):
    group_id, ids = party
    resp = client.post(f"/api/groups/{group_id}/blocks", json={"user_id": ids["bia"]})
    assert resp.status_code == 201
    assert resp.get_json() == {"dont_gift_to": [ids["bia"]], "blocked_by": []}

    resp = client.post(f"/api/groups/{group_id}/draw")
    assert resp.status_code == 201
    pairs = {(r["giver"], r["receiver"]) for r in resp.get_json()}
    assert pairs == {("ana", "caio"), ("caio", "bia"), ("bia", "ana")}

    assert client.get(f"/api/groups/{group_id}/my-draw").get_json()["receiver"] == "caio"
    assert len(client.get(f"/api/groups/{group_id}/draw/all").get_json()) == 3

    resp = client.post(f"/api/groups/{group_id}/draw")
    assert resp.status_code == 409

    assert client.delete(f"/api/groups/{group_id}/draw").status_code == 204
    assert client.get(f"/api/groups/{group_id}/my-draw").status_code == 404


def test_member_sees_only_own_draw(client, party):
    group_id, _ = party
    client.post(f"/api/groups/{group_id}/draw")
    client.post("/auth/logout")

    login(client, "bia")
    body = client.get(f"/api/groups/{group_id}/my-draw").get_json()
    assert body["giver"] == "bia"
    assert body["receiver"] in {"ana", "caio"}
    assert client.get(f"/api/groups/{group_id}/draw/all").status_code == 403
    assert client.post(f"/api/groups/{group_id}/draw").status_code == 403


def test_non_admin_cannot_draw(client, party):
    group_id, _ = party
    client.post("/auth/logout")
    login(client, "bia")
    resp = client.post(f"/api/groups/{group_id}/draw")
    assert resp.status_code == 403
    assert resp.get_json()["path"] == f"/api/groups/{group_id}/draw"


def test_too_few_members(client):
    register(client, "ana")
    login(client, "ana")
    group_id = client.post("/api/groups", json={"name": "Solo"}).get_json()["id"]
    resp = client.post(f"/api/groups/{group_id}/draw")
    assert resp.status_code == 400
    assert "At least 3 participants" in resp.get_json()["message"]


def test_infeasible_draw(client, party):
    group_id, ids = party
    resp = client.put(f"/api/groups/{group_id}/blocks", json={"dont_gift_to": [ids["bia"], ids["caio"]]})
    assert resp.status_code == 200
    resp = client.post(f"/api/groups/{group_id}/draw")
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "Unprocessable Entity"


def test_unknown_group(client, party):
    assert client.get("/api/groups/999").status_code == 404


def test_remove_member_and_unblock(client, party):
    group_id, ids = party
    client.post(f"/api/groups/{group_id}/blocks", json={"user_id": ids["caio"]})
    assert client.delete(f"/api/groups/{group_id}/blocks/{ids['caio']}").status_code == 204
    assert client.delete(f"/api/groups/{group_id}/members/{ids['caio']}").status_code == 204
    assert client.get(f"/api/groups/{group_id}").get_json()["members"] == ["ana", "bia"]


def test_bad_payloads(client, party):
    group_id, _ = party
    assert client.post("/api/groups", json={}).status_code == 400
    assert client.post("/api/groups", json={"name": "x", "draw_date": "soon"}).status_code == 400
    assert client.post(f"/api/groups/{group_id}/members", json={}).status_code == 400
    assert client.put(f"/api/groups/{group_id}/blocks", json={"dont_gift_to": ["x"]}).status_code == 400


def test_register_race_on_the_unique_name(client, monkeypatch):
    real_hash = auth_views.hash_passphrase

    def hash_while_someone_else_registers(passphrase):
        db.session.add(User(name="ana", passkey_hash=real_hash("other")))
        db.session.commit()
        return real_hash(passphrase)

    monkeypatch.setattr(auth_views, "hash_passphrase", hash_while_someone_else_registers)
    resp = register(client, "ana")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "Conflict"


def test_adding_member_after_draw_is_409(client, party):
    group_id, _ = party
    dora = register(client, "dora").get_json()["id"]
    client.post(f"/api/groups/{group_id}/draw")
    resp = client.post(f"/api/groups/{group_id}/members", json={"user_id": dora})
    assert resp.status_code == 409
    assert client.get(f"/api/groups/{group_id}").get_json()["members"] == ["ana", "bia", "caio"]


def test_message_endpoints(client, party):
    group_id, _ = party
    resp = client.post("/api/messages", json={"group_id": group_id, "content": "Wishlists by Friday", "anonymous": False})
    assert resp.status_code == 201
    message_id = resp.get_json()["id"]

    listing = client.get(f"/api/messages/group/{group_id}").get_json()
    assert [m["sender"] for m in listing] == ["ana"]
    assert client.get(f"/api/messages/{message_id}").get_json()["content"] == "Wishlists by Friday"
    assert client.post("/api/messages", json={"content": "no group"}).status_code == 400
    assert client.post("/api/messages", json={"group_id": group_id, "content": ""}).status_code == 400
    assert client.delete(f"/api/messages/{message_id}").status_code == 204
    assert client.get(f"/api/messages/{message_id}").status_code == 404


def test_user_endpoints(app, client, party):
    _, ids = party
    assert client.get(f"/api/users/{ids['bia']}").get_json()["name"] == "bia"
    assert client.get("/api/users/999").status_code == 404
    assert client.get("/api/users").status_code == 403

    app.config["SITE_ADMIN_NAME"] = "ana"
    assert [u["name"] for u in client.get("/api/users").get_json()] == ["ana", "bia", "caio"]
    assert client.delete(f"/api/users/{ids['caio']}").status_code == 204
    assert client.get(f"/api/users/{ids['caio']}").status_code == 404
