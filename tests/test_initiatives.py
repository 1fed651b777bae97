from database import create_document


def add(db, slug, **overrides):
    doc = {
        "title": slug.title(),
        "slug": slug,
        "summary": f"{slug} summary",
        "gallery": [],
        "featured": False,
        "order": 0,
        "status": "active",
    }
    doc.update(overrides)
    return create_document(db, "initiative", doc)


def test_list_only_active_sorted_by_order(client, db):
    add(db, "second", order=2)
    add(db, "first", order=1)
    add(db, "hidden", order=0, status="inactive")

    res = client.get("/initiatives")
    assert res.status_code == 200
    body = res.json()
    assert [i["slug"] for i in body["data"]] == ["first", "second"]
    assert body["pagination"] == {"page": 1, "limit": 12, "total": 2, "pages": 1}


def test_list_featured_and_search(client, db):
    add(db, "ai", featured=True, summary="Neural networks")
    add(db, "chain", summary="Blockchain tools")

    featured = client.get("/initiatives", params={"featured": "true"}).json()["data"]
    assert [i["slug"] for i in featured] == ["ai"]

    found = client.get("/initiatives", params={"search": "BLOCK"}).json()["data"]
    assert [i["slug"] for i in found] == ["chain"]


def test_list_rejects_unknown_sort_field(client):
    res = client.get("/initiatives", params={"sort_by": "password"})
    assert res.status_code == 400


def test_list_rejects_unknown_sort_order(client):
    assert client.get("/initiatives", params={"sort_order": "up"}).status_code == 400


def test_pagination(client, db):
    for n in range(5):
        add(db, f"i{n}", order=n)
    body = client.get("/initiatives", params={"page": 2, "limit": 2}).json()
    assert [i["slug"] for i in body["data"]] == ["i2", "i3"]
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}


def test_featured_list_caps_at_six(client, db):
    for n in range(8):
        add(db, f"f{n}", featured=True, order=8 - n)
    data = client.get("/initiatives/featured/list").json()["data"]
    assert len(data) == 6
    assert data[0]["slug"] == "f7"


def test_get_by_slug(client, initiative):
    res = client.get("/initiatives/quantum")
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Quantum Computing Interface"
    assert client.get("/initiatives/missing").status_code == 404


def test_create_requires_admin(client, customer_headers):
    body = {"title": "X", "slug": "x", "summary": "s"}
    assert client.post("/initiatives", json=body).status_code == 401
    assert client.post("/initiatives", json=body, headers=customer_headers).status_code == 403


def test_create_update_delete(client, admin_headers, db):
    body = {"title": "Robotics", "slug": "robotics", "summary": "Robots", "gallery": ["a.jpg"], "order": 4}
    res = client.post("/initiatives", json=body, headers=admin_headers)
    assert res.status_code == 201
    assert res.json()["data"]["status"] == "active"

    dup = client.post("/initiatives", json=body, headers=admin_headers)
    assert dup.status_code == 400

    res = client.put("/initiatives/robotics", json={"featured": True}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["data"]["featured"] is True
    assert res.json()["data"]["title"] == "Robotics"

    assert client.delete("/initiatives/robotics", headers=admin_headers).status_code == 200
    assert db["initiative"].find_one({"slug": "robotics"})["status"] == "inactive"
    assert client.get("/initiatives").json()["data"] == []


def test_create_validation_error_lists_fields(client, admin_headers):
    res = client.post("/initiatives", json={"title": "No slug"}, headers=admin_headers)
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert {e["field"] for e in body["errors"]} == {"slug", "summary"}


def test_update_missing(client, admin_headers):
    assert client.put("/initiatives/nope", json={"title": "x"}, headers=admin_headers).status_code == 404
    assert client.delete("/initiatives/nope", headers=admin_headers).status_code == 404


def test_update_rejects_null_status(client, admin_headers, db):
    add(db, "robotics", hero_image="hero.jpg")
    res = client.put("/initiatives/robotics", json={"status": None}, headers=admin_headers)
    assert res.status_code == 400
    assert [i["slug"] for i in client.get("/initiatives").json()["data"]] == ["robotics"]

    res = client.put("/initiatives/robotics", json={"hero_image": None}, headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["data"]["hero_image"] is None
