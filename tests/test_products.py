from database import create_document

PRODUCT = {
    "sku": "QCS-001",
    "title": "Quantum Computing Starter Kit",
    "price": 299.99,
    "description": "Starter kit with tools",
    "initiative_id": "quantum",
    "images": ["kit.jpg"],
    "inventory_count": 50,
    "metadata": {"difficulty": "beginner"},
    "featured": True,
}


def add(db, sku, **overrides):
    doc = {
        "sku": sku,
        "title": sku,
        "price": 1000,
        "currency": "USD",
        "description": f"{sku} description",
        "initiative_id": "quantum",
        "images": [],
        "inventory_count": 1,
        "metadata": {},
        "featured": False,
        "is_active": True,
    }
    doc.update(overrides)
    return create_document(db, "product", doc)


def test_create_stores_price_in_cents(client, admin_headers, initiative, db):
    res = client.post("/products", json=PRODUCT, headers=admin_headers)
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["price"] == 29999
    assert data["currency"] == "USD"
    assert data["initiative"]["slug"] == "quantum"
    assert db["product"].find_one({"sku": "QCS-001"})["price"] == 29999


def test_create_duplicate_sku(client, admin_headers, initiative):
    client.post("/products", json=PRODUCT, headers=admin_headers)
    res = client.post("/products", json=PRODUCT, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "SKU already exists"


def test_create_unknown_initiative(client, admin_headers):
    res = client.post("/products", json=PRODUCT, headers=admin_headers)
    assert res.status_code == 400


def test_create_requires_admin(client, customer_headers, initiative):
    assert client.post("/products", json=PRODUCT, headers=customer_headers).status_code == 403


def test_create_rejects_negative_price(client, admin_headers, initiative):
    res = client.post("/products", json={**PRODUCT, "price": -1}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "price"


def test_list_filters_and_embeds_initiative(client, db, initiative):
    add(db, "A-1", title="Alpha", initiative_id="quantum")
    add(db, "B-1", title="Beta", initiative_id="other")
    add(db, "C-1", title="Gamma", is_active=False)

    body = client.get("/products").json()
    assert [p["sku"] for p in body["data"]] == ["A-1", "B-1"]
    assert body["pagination"]["total"] == 2
    assert body["data"][0]["initiative"]["slug"] == "quantum"
    assert body["data"][1]["initiative"] is None

    by_category = client.get("/products", params={"category": "quantum"}).json()["data"]
    assert [p["sku"] for p in by_category] == ["A-1"]


def test_list_search_is_case_insensitive_and_literal(client, db):
    add(db, "A-1", title="Neural Kit", description="plain")
    add(db, "B-1", title="Other", description="includes NEURAL stuff")
    add(db, "C-1", title="a.b", description="dots")
    add(db, "D-1", title="axb", description="no dots")

    found = client.get("/products", params={"search": "neural"}).json()["data"]
    assert {p["sku"] for p in found} == {"A-1", "B-1"}

    literal = client.get("/products", params={"search": "a.b"}).json()["data"]
    assert [p["sku"] for p in literal] == ["C-1"]


def test_list_sort_by_price_desc(client, db):
    add(db, "CHEAP", price=100)
    add(db, "PRICEY", price=900)
    add(db, "MID", price=500)
    data = client.get("/products", params={"sort_by": "price", "sort_order": "desc"}).json()["data"]
    assert [p["sku"] for p in data] == ["PRICEY", "MID", "CHEAP"]


def test_list_rejects_unknown_sort_order(client):
    res = client.get("/products", params={"sort_by": "price", "sort_order": "sideways"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid sort order 'sideways'"
    assert client.get("/products", params={"sort_order": "DESC"}).status_code == 200


def test_equal_prices_paginate_without_overlap(client, db):
    for n in range(5):
        add(db, f"SAME-{n}", price=500)
    seen = []
    for page in (1, 2, 3):
        body = client.get("/products", params={"sort_by": "price", "page": page, "limit": 2}).json()
        seen.extend(p["sku"] for p in body["data"])
    assert sorted(seen) == [f"SAME-{n}" for n in range(5)]


def test_list_limit_bounds(client):
    assert client.get("/products", params={"limit": 0}).status_code == 400
    assert client.get("/products", params={"limit": 101}).status_code == 400
    assert client.get("/products", params={"page": 0}).status_code == 400


def test_featured_list(client, db):
    for n in range(7):
        add(db, f"F-{n}", featured=True)
    add(db, "PLAIN")
    add(db, "OFF", featured=True, is_active=False)
    data = client.get("/products/featured/list").json()["data"]
    assert len(data) == 6
    assert all(p["featured"] for p in data)


def test_get_by_sku(client, db, initiative):
    add(db, "A-1")
    res = client.get("/products/A-1")
    assert res.status_code == 200
    assert res.json()["data"]["initiative"]["title"] == "Quantum Computing Interface"

    res = client.get("/products/NOPE")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Product not found"}


def test_update_converts_price(client, db, admin_headers):
    add(db, "A-1", title="Old")
    res = client.put("/products/A-1", json={"price": 12.5, "title": "New"}, headers=admin_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["price"] == 1250
    assert data["title"] == "New"
    assert data["description"] == "A-1 description"


def test_update_rejects_null_fields(client, db, admin_headers):
    add(db, "A-1", title="Keep")
    res = client.put("/products/A-1", json={"title": None, "price": None}, headers=admin_headers)
    assert res.status_code == 400
    assert {e["field"] for e in res.json()["errors"]} == {"title", "price"}
    stored = db["product"].find_one({"sku": "A-1"})
    assert stored["title"] == "Keep"
    assert stored["price"] == 1000


def test_update_unknown_initiative(client, db, admin_headers):
    add(db, "A-1")
    res = client.put("/products/A-1", json={"initiative_id": "ghost"}, headers=admin_headers)
    assert res.status_code == 400


def test_delete_is_soft(client, db, admin_headers):
    add(db, "A-1")
    res = client.delete("/products/A-1", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Product deleted successfully"
    assert db["product"].find_one({"sku": "A-1"})["is_active"] is False
    assert client.get("/products").json()["data"] == []
    assert client.delete("/products/NOPE", headers=admin_headers).status_code == 404
