import pytest
from fastapi.testclient import TestClient

from inventory.database import Store
from inventory.main import app, get_store


@pytest.fixture
def store(tmp_path):
    return Store(str(tmp_path / "products.json"))


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(client):
    """Widget(3), Gadget(1), Sprocket(2) in that order."""
    ids = []
    for name, category, qty in [("Widget", "hardware", 3), ("Gadget", "electronics", 1), ("Sprocket", "Widgets", 2)]:
        r = client.post("/products", json={"name": name, "category": category, "quantity": qty})
        assert r.status_code == 201
        ids.append(r.json()["id"])
    return ids
