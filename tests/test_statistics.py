def test_overview_is_admin_only(client, customer_headers):
    assert client.get("/api/v1/statistics/overview", headers=customer_headers).status_code == 403


def test_overview_excludes_admins(client, admin_headers):
    response = client.get("/api/v1/statistics/overview", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total_users"] == 2
    assert body["total_stores"] == 2
    assert body["total_ratings"] == 1
    assert [u["id"] for u in body["recent_users"]] == ["2", "3"]
    assert [s["id"] for s in body["featured_stores"]] == ["1", "2"]


def test_overview_follows_changes(client, admin_headers, customer_headers):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 3})
    client.delete("/api/v1/users/3", headers=admin_headers)
    body = client.get("/api/v1/statistics/overview", headers=admin_headers).json()
    assert body["total_users"] == 1
    assert body["total_ratings"] == 2


def test_owner_dashboard(client, owner_headers, customer_headers):
    client.post("/api/v1/stores/1/ratings", headers=customer_headers, json={"rating": 4})
    response = client.get("/api/v1/statistics/owner", headers=owner_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["store"]["id"] == "1"
    assert body["average_rating"] == 4.0
    assert [(r["user_name"], r["rating"]) for r in body["ratings"]] == [("John Smith Regular User", 4)]
    assert body["message"] is None


def test_owner_without_store(client, admin_headers, owner_headers):
    client.delete("/api/v1/stores/1", headers=admin_headers)
    body = client.get("/api/v1/statistics/owner", headers=owner_headers).json()
    assert body["store"] is None
    assert body["ratings"] == []
    assert body["message"] == "No store assigned to your account"


def test_owner_dashboard_role(client, customer_headers):
    assert client.get("/api/v1/statistics/owner", headers=customer_headers).status_code == 403


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_overview_lists_three_users_but_counts_all(client, admin_headers):
    for n in range(3):
        response = client.post(
            "/api/v1/auth/signup",
            json={
                "name": f"Dashboard Customer Number {n}",
                "email": f"customer{n}@example.com",
                "address": "12 Example Road, City",
                "password": "Secret12!",
            },
        )
        assert response.status_code == 201
    body = client.get("/api/v1/statistics/overview", headers=admin_headers).json()
    assert body["total_users"] == 5
    assert [u["email"] for u in body["recent_users"]] == [
        "john@example.com",
        "mike@store.com",
        "customer0@example.com",
    ]
