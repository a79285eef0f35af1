# tests/test_store_api.py
from fastapi.testclient import TestClient
from store.main import app
from store.config import settings
from store.security import hash_password, verify_password

client = TestClient(app)

def reset():
    client.post("/reset")

def signup(email="alice@example.com", password="secret123"):
    r = client.post("/auth/v1/signup", json={"email": email, "password": password})
    assert r.status_code == 201
    body = r.json()
    return body["user"]["id"], {"Authorization": f"Bearer {body['access_token']}"}

def product(owner, **overrides):
    row = {"user_id": owner, "name": "Widget", "price": 100, "quantity": 5, "category": "Electronics"}
    row.update(overrides)
    return row

def test_signup_signin_and_current_user():
    reset()
    uid, headers = signup()
    me = client.get("/auth/v1/user", headers=headers).json()
    assert me["id"] == uid
    assert me["email"] == "alice@example.com"

    r = client.post("/auth/v1/token", json={"email": "alice@example.com", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == uid

    bad = client.post("/auth/v1/token", json={"email": "alice@example.com", "password": "nope-nope"})
    assert bad.status_code == 400
    assert bad.json()["detail"] == "Invalid login credentials"

def test_duplicate_signup_and_short_password():
    reset()
    signup()
    r = client.post("/auth/v1/signup", json={"email": "alice@example.com", "password": "secret123"})
    assert r.status_code == 409
    r2 = client.post("/auth/v1/signup", json={"email": "bob@example.com", "password": "123"})
    assert r2.status_code == 400

def test_passwords_hashed_with_pbkdf2_sha256():
    h = hash_password("secret123")
    assert h != "secret123"
    assert h.startswith("$pbkdf2-sha256$")
    assert verify_password("secret123", h)
    assert not verify_password("secret124", h)
    # salted, so the same password hashes differently
    assert hash_password("secret123") != h

def test_signin_checks_hashed_password():
    reset()
    signup()
    ok = client.post("/auth/v1/token", json={"email": "alice@example.com", "password": "secret123"})
    assert ok.status_code == 200
    bad = client.post("/auth/v1/token", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert bad.status_code == 400

def test_expired_token_is_rejected(monkeypatch):
    reset()
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRES_SECONDS", -10)
    _, headers = signup()
    r = client.get("/rest/v1/products", headers=headers)
    assert r.status_code == 401

def test_logout_revokes_token():
    reset()
    _, headers = signup()
    assert client.post("/auth/v1/logout", headers=headers).status_code == 204
    assert client.get("/auth/v1/user", headers=headers).status_code == 401
    assert client.get("/rest/v1/products", headers=headers).status_code == 401

def test_requires_auth():
    reset()
    r = client.get("/rest/v1/products")
    assert r.status_code == 401

def test_insert_assigns_id_and_timestamps():
    reset()
    uid, headers = signup()
    r = client.post("/rest/v1/products", json=[product(uid, description="blue")], headers=headers)
    assert r.status_code == 201
    row = r.json()[0]
    assert row["id"]
    assert row["created_at"] == row["updated_at"]
    assert row["description"] == "blue"
    assert row["image_url"] is None

def test_rows_only_visible_to_owner():
    reset()
    alice, alice_h = signup("alice@example.com")
    bob, bob_h = signup("bob@example.com")
    client.post("/rest/v1/products", json=product(alice), headers=alice_h)
    assert len(client.get("/rest/v1/products", headers=alice_h).json()) == 1
    assert client.get("/rest/v1/products", headers=bob_h).json() == []

    pid = client.get("/rest/v1/products", headers=alice_h).json()[0]["id"]
    # bob can neither update nor delete alice's row
    assert client.patch("/rest/v1/products", params={"id": f"eq.{pid}"}, json={"name": "x"}, headers=bob_h).json() == []
    assert client.delete("/rest/v1/products", params={"id": f"eq.{pid}"}, headers=bob_h).json() == []
    assert len(client.get("/rest/v1/products", headers=alice_h).json()) == 1

def test_insert_for_another_owner_is_rejected():
    reset()
    _, alice_h = signup("alice@example.com")
    bob, _ = signup("bob@example.com")
    r = client.post("/rest/v1/products", json=product(bob), headers=alice_h)
    assert r.status_code == 403
    assert "row-level security" in r.json()["detail"]

def test_order_by_created_at_desc():
    reset()
    uid, headers = signup()
    for name in ("first", "second", "third"):
        client.post("/rest/v1/products", json=product(uid, name=name), headers=headers)
    rows = client.get("/rest/v1/products", params={"order": "created_at.desc"}, headers=headers).json()
    assert [r["name"] for r in rows] == ["third", "second", "first"]

def test_check_constraints():
    reset()
    uid, headers = signup()
    for bad, constraint in [
        ({"price": -1}, "products_price_check"),
        ({"quantity": -3}, "products_quantity_check"),
        ({"category": "Weapons"}, "products_category_check"),
        ({"name": "   "}, "products_name_check"),
    ]:
        r = client.post("/rest/v1/products", json=product(uid, **bad), headers=headers)
        assert r.status_code == 400
        assert constraint in r.json()["detail"]
    assert client.get("/rest/v1/products", headers=headers).json() == []

def test_update_replaces_fields_and_bumps_updated_at():
    reset()
    uid, headers = signup()
    row = client.post("/rest/v1/products", json=product(uid), headers=headers).json()[0]
    r = client.patch(
        "/rest/v1/products",
        params={"id": f"eq.{row['id']}"},
        json={"name": "Gadget", "price": 12.5, "quantity": 0, "category": "Clothing",
              "description": "", "image_url": ""},
        headers=headers,
    )
    assert r.status_code == 200
    updated = r.json()[0]
    assert updated["name"] == "Gadget"
    assert updated["quantity"] == 0
    assert updated["created_at"] == row["created_at"]
    assert updated["updated_at"] > row["updated_at"]

def test_update_violating_constraint_leaves_row():
    reset()
    uid, headers = signup()
    row = client.post("/rest/v1/products", json=product(uid), headers=headers).json()[0]
    r = client.patch("/rest/v1/products", params={"id": f"eq.{row['id']}"}, json={"price": -5}, headers=headers)
    assert r.status_code == 400
    assert client.get("/rest/v1/products", headers=headers).json()[0]["price"] == 100

def test_delete_is_idempotent():
    reset()
    uid, headers = signup()
    row = client.post("/rest/v1/products", json=product(uid), headers=headers).json()[0]
    first = client.delete("/rest/v1/products", params={"id": f"eq.{row['id']}"}, headers=headers)
    second = client.delete("/rest/v1/products", params={"id": f"eq.{row['id']}"}, headers=headers)
    assert len(first.json()) == 1
    assert second.status_code == 200
    assert second.json() == []

def test_unknown_table_and_column():
    reset()
    _, headers = signup()
    assert client.get("/rest/v1/orders", headers=headers).status_code == 404
    assert client.get("/rest/v1/products", params={"colour": "eq.red"}, headers=headers).status_code == 400
