import threading

import pytest
from fastapi.testclient import TestClient

from store_rating_api.app.core import security
from store_rating_api.app.core.db import reset_db
from store_rating_api.app.main import app


ADMIN = ("admin@platform.com", "Admin123!")
CUSTOMER = ("john@example.com", "User123!")
OWNER = ("mike@store.com", "Store123!")


@pytest.fixture(autouse=True)
def data_store(monkeypatch):
    """Fresh demo data for every test.

    Password hashing is made cheap so seeding does not dominate the run.
    """
    monkeypatch.setattr(security, "PBKDF2_ITERATIONS", 1000)
    return reset_db()


@pytest.fixture
def client():
    return TestClient(app)


def login(client, email, password):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, *ADMIN)


@pytest.fixture
def customer_headers(client):
    return login(client, *CUSTOMER)


@pytest.fixture
def owner_headers(client):
    return login(client, *OWNER)


def lock_is_free(store):
    """Return ``True`` if another thread could take the store lock right now."""
    acquired = []

    def attempt():
        got = store._lock.acquire(blocking=False)
        if got:
            store._lock.release()
        acquired.append(got)

    thread = threading.Thread(target=attempt)
    thread.start()
    thread.join()
    return acquired[0]
