from coursehub.models.category import Category


def test_create_category_requires_admin(client, user_headers, admin_headers):
    payload = {"name": "Finance", "description": "Accounting and finance"}

    assert client.post("/api/categories/", json=payload).status_code == 401
    assert client.post("/api/categories/", json=payload, headers=user_headers).status_code == 403

    resp = client.post("/api/categories/", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["name"] == "Finance"
    assert resp.json()["id"]


def test_duplicate_category_name_rejected(client, category, admin_headers):
    resp = client.post("/api/categories/", json={"name": category.name}, headers=admin_headers)
    assert resp.status_code == 400


def test_list_and_get_are_public(client, category):
    listed = client.get("/api/categories/")
    assert listed.status_code == 200
    assert [c["name"] for c in listed.json()] == [category.name]

    resp = client.get(f"/api/categories/{category.id}")
    assert resp.status_code == 200
    assert resp.json()["description"] == category.description

    assert client.get("/api/categories/9999").status_code == 404


def test_update_category(client, category, admin_headers):
    resp = client.put(
        f"/api/categories/{category.id}",
        json={"description": "Updated"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Category updated successfully"
    assert body["category"]["description"] == "Updated"
    assert body["category"]["name"] == category.name

    missing = client.put("/api/categories/9999", json={"name": "x"}, headers=admin_headers)
    assert missing.status_code == 404


def test_update_category_name_must_not_be_empty(client, db, category, admin_headers):
    for name in (None, "   "):
        resp = client.put(
            f"/api/categories/{category.id}", json={"name": name}, headers=admin_headers
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [
            {"field": "name", "message": "Category name is required"}
        ]

    assert client.get(f"/api/categories/{category.id}").json()["name"] == "Leadership"


def test_update_category_to_taken_name(client, db, category, admin_headers):
    other = Category(name="Finance")
    db.add(other)
    db.commit()

    resp = client.put(
        f"/api/categories/{other.id}", json={"name": category.name}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category with this name already exists"

    # keeping its own name is not a clash
    same = client.put(
        f"/api/categories/{category.id}",
        json={"name": f"  {category.name} "},
        headers=admin_headers,
    )
    assert same.status_code == 200
    assert same.json()["category"]["name"] == category.name


def test_delete_category_in_use_is_refused(client, db, training, admin_headers):
    category_id = training.category_id
    resp = client.delete(f"/api/categories/{category_id}", headers=admin_headers)
    assert resp.status_code == 409
    assert db.get(Category, category_id) is not None


def test_delete_unused_category(client, db, category, admin_headers):
    resp = client.delete(f"/api/categories/{category.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Category deleted successfully"
    assert client.get(f"/api/categories/{category.id}").status_code == 404
