from store_rating_api.app.core.security import hash_password
from store_rating_api.app.services import user_service

from .conftest import lock_is_free


NEW_OWNER = {
    "name": "Second Store Owner Person",
    "email": "owner2@store.com",
    "address": "1 Market Street",
    "password": "Owner123!",
    "role": "store_owner",
}


def test_users_are_admin_only(client, customer_headers, owner_headers):
    assert client.get("/api/v1/users/").status_code == 401
    assert client.get("/api/v1/users/", headers=customer_headers).status_code == 403
    assert client.get("/api/v1/users/", headers=owner_headers).status_code == 403


def test_list_users_default_sort_by_name(client, admin_headers):
    response = client.get("/api/v1/users/", headers=admin_headers)
    assert response.status_code == 200
    names = [u["name"] for u in response.json()]
    assert names == ["John Smith Regular User", "Store Owner Mike Johnson", "System Administrator"]
    assert all("password" not in u for u in response.json())


def test_list_users_search_role_and_order(client, admin_headers):
    response = client.get("/api/v1/users/", headers=admin_headers, params={"search": "STORE"})
    assert [u["id"] for u in response.json()] == ["3"]
    response = client.get("/api/v1/users/", headers=admin_headers, params={"role": "admin"})
    assert [u["id"] for u in response.json()] == ["1"]
    response = client.get(
        "/api/v1/users/", headers=admin_headers, params={"sort_by": "email", "order": "desc"}
    )
    assert [u["email"] for u in response.json()] == [
        "mike@store.com",
        "john@example.com",
        "admin@platform.com",
    ]
    response = client.get("/api/v1/users/", headers=admin_headers, params={"order": "none"})
    assert [u["id"] for u in response.json()] == ["1", "2", "3"]


def test_owner_row_carries_store_rating(client, admin_headers, customer_headers):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 5})
    response = client.get("/api/v1/users/", headers=admin_headers, params={"role": "store_owner"})
    assert response.json()[0]["store_rating"] == 5.0


def test_create_user(client, admin_headers, data_store):
    response = client.post("/api/v1/users/", headers=admin_headers, json=NEW_OWNER)
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "store_owner"
    assert "password" not in body
    assert data_store.users.find_by_id(body["id"]).password != NEW_OWNER["password"]


def test_create_user_uses_strict_rules(client, admin_headers, data_store):
    response = client.post(
        "/api/v1/users/",
        headers=admin_headers,
        json={**NEW_OWNER, "name": "Too Short", "password": "owner123"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {
        "name": "Name must be between 20 and 60 characters",
        "password": "Password must contain at least one uppercase letter",
    }
    assert data_store.users.count() == 3


def test_create_user_duplicate_email(client, admin_headers):
    response = client.post(
        "/api/v1/users/", headers=admin_headers, json={**NEW_OWNER, "email": "john@example.com"}
    )
    assert response.status_code == 409


def test_user_details(client, admin_headers):
    response = client.get("/api/v1/users/3", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["store"] == {
        "id": "1",
        "name": "Mike's Electronics Store",
        "average_rating": 0.0,
        "rating_count": 0,
    }
    john = client.get("/api/v1/users/2", headers=admin_headers).json()
    assert john["store"] is None
    assert [(r["store_name"], r["rating"]) for r in john["ratings"]] == [("Best Buy Electronics", 4)]
    assert client.get("/api/v1/users/missing", headers=admin_headers).status_code == 404


def test_update_user(client, admin_headers):
    response = client.put(
        "/api/v1/users/2", headers=admin_headers, json={"address": "New address 99", "name": None}
    )
    assert response.status_code == 200
    assert response.json()["address"] == "New address 99"
    assert response.json()["name"] == "John Smith Regular User"


def test_update_user_validation_and_duplicates(client, admin_headers):
    response = client.put("/api/v1/users/2", headers=admin_headers, json={"email": "broken"})
    assert response.status_code == 422
    response = client.put("/api/v1/users/2", headers=admin_headers, json={"email": "mike@store.com"})
    assert response.status_code == 409
    # Keeping one's own e-mail is not a duplicate.
    response = client.put("/api/v1/users/2", headers=admin_headers, json={"email": "john@example.com"})
    assert response.status_code == 200
    assert client.put("/api/v1/users/missing", headers=admin_headers, json={}).status_code == 404


def test_demoting_owner_clears_store_reference(client, admin_headers, data_store):
    response = client.put("/api/v1/users/3", headers=admin_headers, json={"role": "user"})
    assert response.status_code == 200
    assert response.json()["store_id"] is None
    assert data_store.users.find_by_id("3").store_id is None


def test_delete_user_keeps_ratings(client, admin_headers, data_store):
    response = client.delete("/api/v1/users/2", headers=admin_headers)
    assert response.status_code == 204
    assert data_store.users.find_by_id("2") is None
    assert data_store.ratings.count() == 1
    details = client.get("/api/v1/stores/2", headers=admin_headers).json()
    assert details["ratings"][0]["user_name"] == "Unknown User"
    assert details["ratings"][0]["user_email"] == "Unknown Email"
    assert client.delete("/api/v1/users/2", headers=admin_headers).status_code == 404


def test_admin_cannot_delete_self(client, admin_headers, data_store):
    response = client.delete("/api/v1/users/1", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete your own account"
    assert data_store.users.find_by_id("1") is not None


def test_create_user_hashes_outside_the_store_lock(client, admin_headers, data_store, monkeypatch):
    lock_states = []

    def recording_hash(password):
        lock_states.append(lock_is_free(data_store))
        return hash_password(password)

    monkeypatch.setattr(user_service, "hash_password", recording_hash)
    assert client.post("/api/v1/users/", headers=admin_headers, json=NEW_OWNER).status_code == 201
    assert client.put("/api/v1/users/2", headers=admin_headers, json={"password": "Other123!"}).status_code == 200
    assert lock_states == [True, True]
