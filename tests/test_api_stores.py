NEW_STORE = {
    "name": "Corner Books",
    "email": "hello@cornerbooks.com",
    "address": "5 Library Lane",
    "owner_id": "3",
}


def create_owner(client, admin_headers, email="second@store.com"):
    response = client.post(
        "/api/v1/users/",
        headers=admin_headers,
        json={
            "name": "Second Store Owner Person",
            "email": email,
            "address": "1 Market Street",
            "password": "Owner123!",
            "role": "store_owner",
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_list_stores_requires_login(client):
    assert client.get("/api/v1/stores/").status_code == 401


def test_list_stores_with_owner_names(client, admin_headers):
    response = client.get("/api/v1/stores/", headers=admin_headers)
    assert response.status_code == 200
    rows = {s["id"]: s for s in response.json()}
    assert rows["1"]["owner_name"] == "Store Owner Mike Johnson"
    assert rows["2"]["owner_name"] == "Unknown owner"
    assert rows["2"]["average_rating"] == 4.0
    assert rows["2"]["rating_count"] == 1
    assert [s["name"] for s in response.json()] == ["Best Buy Electronics", "Mike's Electronics Store"]


def test_sort_by_average_rating(client, admin_headers):
    response = client.get(
        "/api/v1/stores/", headers=admin_headers, params={"sort_by": "average_rating", "order": "desc"}
    )
    assert [s["id"] for s in response.json()] == ["2", "1"]


def test_customer_sees_own_rating(client, customer_headers):
    rows = {s["id"]: s for s in client.get("/api/v1/stores/", headers=customer_headers).json()}
    assert rows["2"]["my_rating"] == 4
    assert rows["1"]["my_rating"] is None


def test_customer_search_ignores_email(client, customer_headers, admin_headers):
    params = {"search": "bestbuy.com"}
    assert client.get("/api/v1/stores/", headers=customer_headers, params=params).json() == []
    admin_rows = client.get("/api/v1/stores/", headers=admin_headers, params=params).json()
    assert [s["id"] for s in admin_rows] == ["2"]
    rows = client.get("/api/v1/stores/", headers=customer_headers, params={"search": "boulevard"}).json()
    assert [s["id"] for s in rows] == ["1"]


def test_create_store_links_owner(client, admin_headers, data_store):
    owner_id = create_owner(client, admin_headers)
    response = client.post("/api/v1/stores/", headers=admin_headers, json={**NEW_STORE, "owner_id": owner_id})
    assert response.status_code == 201
    body = response.json()
    assert body["average_rating"] == 0.0
    assert body["rating_count"] == 0
    assert data_store.users.find_by_id(owner_id).store_id == body["id"]


def test_create_store_validation(client, admin_headers, data_store):
    response = client.post(
        "/api/v1/stores/",
        headers=admin_headers,
        json={**NEW_STORE, "name": "ab", "owner_id": "2"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {
        "name": "Store name must be at least 3 characters",
        "owner_id": "Selected owner must be an existing store owner",
    }
    response = client.post("/api/v1/stores/", headers=admin_headers, json={**NEW_STORE, "owner_id": ""})
    assert response.json()["detail"]["errors"] == {"owner_id": "Please select a store owner"}
    assert data_store.stores.count() == 2


def test_create_store_admin_only(client, customer_headers):
    assert client.post("/api/v1/stores/", headers=customer_headers, json=NEW_STORE).status_code == 403


def test_store_details(client, customer_headers):
    response = client.get("/api/v1/stores/2", headers=customer_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["ratings"][0]["user_name"] == "John Smith Regular User"
    assert body["ratings"][0]["user_email"] == "john@example.com"
    assert body["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 0}
    assert client.get("/api/v1/stores/missing", headers=customer_headers).status_code == 404


def test_update_store_moves_owner_reference(client, admin_headers, data_store):
    owner_id = create_owner(client, admin_headers)
    response = client.put("/api/v1/stores/1", headers=admin_headers, json={"owner_id": owner_id, "name": "Mike's Gadgets"})
    assert response.status_code == 200
    assert response.json()["owner_id"] == owner_id
    assert response.json()["name"] == "Mike's Gadgets"
    assert data_store.users.find_by_id("3").store_id is None
    assert data_store.users.find_by_id(owner_id).store_id == "1"


def test_update_store_rejects_bad_fields(client, admin_headers):
    response = client.put("/api/v1/stores/1", headers=admin_headers, json={"email": "nope"})
    assert response.status_code == 422
    assert client.put("/api/v1/stores/missing", headers=admin_headers, json={}).status_code == 404


def test_delete_store_keeps_ratings_and_clears_owner(client, admin_headers, customer_headers, data_store):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 3})
    response = client.delete("/api/v1/stores/1", headers=admin_headers)
    assert response.status_code == 204
    assert data_store.stores.find_by_id("1") is None
    assert data_store.users.find_by_id("3").store_id is None
    assert data_store.ratings.count(lambda r: r.store_id == "1") == 1
    assert client.delete("/api/v1/stores/1", headers=admin_headers).status_code == 404


def test_rate_then_rerate(client, customer_headers, data_store):
    first = client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 4})
    assert first.status_code == 200
    assert first.json()["created"] is True
    assert first.json()["store_average"] == 4.0
    second = client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 2})
    assert second.json()["created"] is False
    assert second.json()["message"] == "Rating updated! You rated Mike's Electronics Store 2 stars"
    store = client.get("/api/v1/stores/1", headers=customer_headers).json()
    assert store["average_rating"] == 2.0
    assert store["rating_count"] == 1
    assert data_store.ratings.count(lambda r: r.store_id == "1" and r.user_id == "2") == 1


def test_rate_invalid_values(client, customer_headers, data_store):
    response = client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 0})
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Please select a rating between 1 and 5 stars"
    response = client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": "many"})
    assert response.status_code == 422
    assert data_store.ratings.count() == 1


def test_only_customers_rate(client, admin_headers, owner_headers):
    for headers in (admin_headers, owner_headers):
        response = client.post("/api/v1/stores/2/ratings", headers=headers, json={"rating": 5})
        assert response.status_code == 403


def test_rate_missing_store(client, customer_headers):
    response = client.post("/api/v1/stores/missing/ratings", headers=customer_headers, json={"rating": 5})
    assert response.status_code == 404


def test_my_rating(client, customer_headers):
    assert client.get("/api/v1/stores/2/ratings/me", headers=customer_headers).json()["rating"] == 4
    response = client.get("/api/v1/stores/1/ratings/me", headers=customer_headers)
    assert response.status_code == 200
    assert response.json() is None
    assert client.get("/api/v1/stores/missing/ratings/me", headers=customer_headers).status_code == 404


def test_owner_holds_at_most_one_store(client, admin_headers, data_store):
    response = client.post("/api/v1/stores/", headers=admin_headers, json=NEW_STORE)
    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {"owner_id": "Selected owner already has a store"}
    assert data_store.stores.count() == 2
    assert data_store.users.find_by_id("3").store_id == "1"

    owner_id = create_owner(client, admin_headers)
    store_id = client.post(
        "/api/v1/stores/", headers=admin_headers, json={**NEW_STORE, "owner_id": owner_id}
    ).json()["id"]
    response = client.put(f"/api/v1/stores/{store_id}", headers=admin_headers, json={"owner_id": "3"})
    assert response.status_code == 422
    assert data_store.stores.find_by_id(store_id).owner_id == owner_id
    # Re-submitting the current owner is not a conflict.
    response = client.put("/api/v1/stores/1", headers=admin_headers, json={"owner_id": "3"})
    assert response.status_code == 200
