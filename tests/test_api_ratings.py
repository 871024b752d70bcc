def test_customer_lists_only_own_ratings(client, customer_headers, owner_headers):
    response = client.get("/api/v1/ratings/", headers=customer_headers, params={"user_id": "3"})
    assert [r["user_id"] for r in response.json()] == ["2"]
    assert client.get("/api/v1/ratings/", headers=owner_headers).json() == []


def test_admin_filters_ratings(client, admin_headers, customer_headers):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 5})
    assert len(client.get("/api/v1/ratings/", headers=admin_headers).json()) == 2
    rows = client.get("/api/v1/ratings/", headers=admin_headers, params={"store_id": "1"}).json()
    assert [(r["store_id"], r["rating"]) for r in rows] == [("1", 5)]


def test_rating_summary(client, customer_headers):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 1})
    response = client.get("/api/v1/ratings/summary", headers=customer_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["average"] == 2.5
    assert [r["store_name"] for r in body["recent"]] == ["Best Buy Electronics", "Mike's Electronics Store"]


def test_summary_without_ratings(client, owner_headers):
    body = client.get("/api/v1/ratings/summary", headers=owner_headers).json()
    assert body == {"count": 0, "average": None, "recent": []}


def test_get_rating_permissions(client, customer_headers, owner_headers, admin_headers):
    assert client.get("/api/v1/ratings/1", headers=customer_headers).json()["rating"] == 4
    assert client.get("/api/v1/ratings/1", headers=admin_headers).status_code == 200
    assert client.get("/api/v1/ratings/1", headers=owner_headers).status_code == 403
    assert client.get("/api/v1/ratings/missing", headers=admin_headers).status_code == 404


def test_delete_rating(client, admin_headers, customer_headers, data_store):
    assert client.delete("/api/v1/ratings/1", headers=customer_headers).status_code == 403
    assert client.delete("/api/v1/ratings/1", headers=admin_headers).status_code == 204
    assert data_store.stores.find_by_id("2").average_rating == 0.0
    assert client.delete("/api/v1/ratings/1", headers=admin_headers).status_code == 404
