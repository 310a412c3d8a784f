# tests/test_products.py
import json

from fastapi.testclient import TestClient

from inventory.main import app, get_store


def test_list_starts_empty_and_bootstraps_file(client, store):
    assert not store.path.exists()
    r = client.get("/products")
    assert r.status_code == 200
    assert r.json() == []
    assert json.loads(store.path.read_text(encoding="utf-8")) == []


def test_create_returns_full_record(client):
    r = client.post("/products", json={"name": "Widget", "category": "hardware", "quantity": 4,
                                       "location": "A1", "supplier": "Acme"})
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Widget"
    assert body["category"] == "hardware"
    assert body["quantity"] == 4
    assert body["location"] == "A1"
    assert body["supplier"] == "Acme"
    assert body["id"]
    assert body["updatedDate"].endswith("Z")


def test_create_defaults(client):
    body = client.post("/products", json={"name": "Bare"}).json()
    assert body["quantity"] == 0
    assert body["location"] == ""
    assert body["supplier"] == ""
    assert body["category"] is None


def test_created_ids_are_unique_and_listed(client):
    ids = [client.post("/products", json={"name": f"P{i}"}).json()["id"] for i in range(5)]
    assert len(set(ids)) == 5
    listed = [p["id"] for p in client.get("/products").json()]
    assert listed == ids


def test_get_after_create_is_equal(client):
    created = client.post("/products", json={"name": "Widget", "quantity": 2}).json()
    r = client.get(f"/products/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_is_404(client):
    r = client.get("/products/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


def test_create_requires_name(client):
    for body in ({}, {"name": ""}, {"name": "   "}, {"name": None, "quantity": 1}):
        r = client.post("/products", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": "name required"}


def test_create_rejects_negative_quantity_without_side_effects(client):
    client.post("/products", json={"name": "Keep"})
    r = client.post("/products", json={"name": "X", "quantity": -1})
    assert r.status_code == 400
    assert r.json() == {"error": "quantity negative"}
    assert len(client.get("/products").json()) == 1


def test_create_rejects_non_numeric_quantity(client):
    r = client.post("/products", json={"name": "X", "quantity": "lots"})
    assert r.status_code == 400
    assert "quantity" in r.json()["error"]


def test_update_changes_only_given_fields(client, store):
    created = client.post("/products", json={"name": "Widget", "category": "hardware", "quantity": 3,
                                             "location": "A1", "supplier": "Acme"}).json()
    old_date = "2000-01-01T00:00:00.000Z"
    store.path.write_text(json.dumps([{**created, "updatedDate": old_date}], indent=2), encoding="utf-8")

    r = client.put(f"/products/{created['id']}", json={"quantity": 5})
    assert r.status_code == 200
    updated = r.json()
    assert updated["quantity"] == 5
    for field in ("id", "name", "category", "location", "supplier"):
        assert updated[field] == created[field]
    assert updated["updatedDate"] != old_date
    assert updated["updatedDate"] > old_date
    assert client.get(f"/products/{created['id']}").json() == updated


def test_update_never_changes_id(client):
    created = client.post("/products", json={"name": "Widget"}).json()
    updated = client.put(f"/products/{created['id']}", json={"id": "hijack", "name": "Renamed"}).json()
    assert updated["id"] == created["id"]
    assert updated["name"] == "Renamed"
    assert client.get("/products/hijack").status_code == 404


def test_update_keeps_position(client, seeded):
    client.put(f"/products/{seeded[1]}", json={"name": "Gizmo"})
    names = [p["name"] for p in client.get("/products").json()]
    assert names == ["Widget", "Gizmo", "Sprocket"]


def test_update_is_permissive(client):
    created = client.post("/products", json={"name": "Widget", "quantity": 1}).json()
    r = client.put(f"/products/{created['id']}", json={"quantity": -4})
    assert r.status_code == 200
    assert r.json()["quantity"] == -4


def test_update_missing_is_404(client):
    r = client.put("/products/nope", json={"quantity": 1})
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}


def test_delete(client, seeded):
    r = client.delete(f"/products/{seeded[0]}")
    assert r.status_code == 200
    assert r.json() == {"success": True}
    assert client.get(f"/products/{seeded[0]}").status_code == 404
    remaining = [p["id"] for p in client.get("/products").json()]
    assert remaining == seeded[1:]


def test_delete_missing_is_404_and_keeps_collection(client, seeded):
    r = client.delete("/products/nope")
    assert r.status_code == 404
    assert len(client.get("/products").json()) == 3


def test_search_is_case_insensitive_on_name(client):
    client.post("/products", json={"name": "Widget"})
    client.post("/products", json={"name": "Gadget"})
    names = [p["name"] for p in client.get("/products", params={"q": "wid"}).json()]
    assert names == ["Widget"]


def test_search_matches_category(client, seeded):
    names = [p["name"] for p in client.get("/products", params={"q": "ELECTRO"}).json()]
    assert names == ["Gadget"]
    # "widget" hits Widget by name and Sprocket by category
    names = [p["name"] for p in client.get("/products", params={"q": "widget"}).json()]
    assert names == ["Widget", "Sprocket"]


def test_sort_by_quantity(client, seeded):
    def quantities(**params):
        return [p["quantity"] for p in client.get("/products", params=params).json()]

    assert quantities(sort="quantity_desc") == [3, 2, 1]
    assert quantities(sort="quantity_asc") == [1, 2, 3]
    assert quantities(sort="name") == [3, 1, 2]
    assert quantities() == [3, 1, 2]


def test_search_then_sort(client, seeded):
    names = [p["name"] for p in client.get("/products", params={"q": "widget", "sort": "quantity_asc"}).json()]
    assert names == ["Sprocket", "Widget"]


def test_file_is_pretty_printed_json_array(client, store):
    client.post("/products", json={"name": "Café", "quantity": 1})
    raw = store.path.read_text(encoding="utf-8")
    assert raw.startswith("[\n  {")
    assert "Café" in raw
    assert json.loads(raw)[0]["name"] == "Café"


def test_corrupt_file_is_500(client, store):
    store.path.write_text("{not json", encoding="utf-8")
    r = client.get("/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to read products"}
    r = client.post("/products", json={"name": "X"})
    assert r.status_code == 500
    # nothing was written over the broken file
    assert store.path.read_text(encoding="utf-8") == "{not json"


def test_unknown_route_uses_error_body(client):
    r = client.get("/nowhere")
    assert r.status_code == 404
    assert "error" in r.json()


def test_non_object_entries_in_file_are_500(client, store):
    store.path.write_text(json.dumps([1, {"id": "a", "name": "Widget", "quantity": 1}]), encoding="utf-8")
    r = client.get("/products/a")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to read products"}


def test_unexpected_errors_still_answer_json(store):
    # A stored quantity that cannot be compared breaks the sort.
    store.path.write_text(json.dumps([{"id": "a", "name": "A", "quantity": "many"},
                                      {"id": "b", "name": "B", "quantity": 1}]), encoding="utf-8")
    app.dependency_overrides[get_store] = lambda: store
    try:
        client = TestClient(app, raise_server_exceptions=False)
        r = client.get("/products", params={"sort": "quantity_asc"})
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == {"error": "Server error"}
