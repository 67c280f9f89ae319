from decimal import Decimal

import pytest

from coursehub.models.enrollment import Enrollment
from coursehub.models.review import Review
from coursehub.models.training import Training
from coursehub.models.training_schedule import TrainingSchedule
from coursehub.schemas.training import parse_learning_points
from coursehub.services.training_service import compute_pricing, serialize_learning_points


@pytest.mark.parametrize(
    "fee, discount, expected",
    [
        (Decimal("100"), Decimal("20"), (Decimal("80.00"), Decimal("100"), Decimal("20"))),
        (Decimal("99.99"), Decimal("15"), (Decimal("84.99"), Decimal("99.99"), Decimal("15"))),
        (Decimal("250"), None, (Decimal("250"), Decimal("250"), None)),
        (None, Decimal("10"), (None, None, Decimal("10"))),
    ],
)
def test_compute_pricing(fee, discount, expected):
    assert compute_pricing(fee, discount) == expected


def test_learning_points_storage():
    assert serialize_learning_points(None) == "[]"
    assert serialize_learning_points("Negotiation") == '["Negotiation"]'
    assert parse_learning_points('["a", "b"]') == ["a", "b"]
    assert parse_learning_points("plain text, not json") == ["plain text, not json"]
    assert parse_learning_points(None) == []


def _payload(category_id, **overrides):
    payload = {
        "title": "Data Analysis with Excel",
        "description": "Pivot tables and dashboards",
        "duration": 3,
        "instructor": "Jane Doe",
        "fee": "$1,200",
        "discount_percentage": 25,
        "level": "Intermediate",
        "is_certified": True,
        "what_you_will_learn": "Pivot tables",
        "category_id": category_id,
        "schedules": [
            {"start_date": "2026-12-01T09:00:00Z", "end_date": "2026-12-03T17:00:00Z"},
            {"start_date": "2027-01-10T09:00:00Z", "end_date": "2027-01-12T17:00:00Z"},
        ],
    }
    payload.update(overrides)
    return payload


def test_create_training_with_discount_and_schedules(client, category, admin_headers):
    resp = client.post("/api/training/", json=_payload(category.id), headers=admin_headers)
    assert resp.status_code == 201
    training = resp.json()["training"]
    assert Decimal(training["fee"]) == Decimal("900.00")
    assert Decimal(training["original_fee"]) == Decimal("1200")
    assert Decimal(training["discount_percentage"]) == Decimal("25")
    assert training["what_you_will_learn"] == ["Pivot tables"]
    assert training["category"]["name"] == category.name
    assert len(training["schedules"]) == 2


def test_create_training_without_category(client, admin_headers):
    payload = _payload(None)
    resp = client.post("/api/training/", json=payload, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Category ID is required"


def test_create_training_unknown_category(client, admin_headers):
    resp = client.post("/api/training/", json=_payload(4242), headers=admin_headers)
    assert resp.status_code == 404


def test_create_training_requires_admin(client, category, user_headers):
    resp = client.post("/api/training/", json=_payload(category.id), headers=user_headers)
    assert resp.status_code == 403


def test_catalogue_filters(client, db, training, category):
    other = Training(title="Advanced Negotiation", level="Advanced", category=category)
    db.add(other)
    db.commit()

    assert len(client.get("/api/training/").json()) == 2

    found = client.get("/api/training/", params={"search": "project"}).json()
    assert [t["id"] for t in found] == [training.id]

    advanced = client.get("/api/training/", params={"level": "advanced"}).json()
    assert [t["title"] for t in advanced] == ["Advanced Negotiation"]

    by_category = client.get(f"/api/training/category/{category.id}").json()
    assert len(by_category) == 2
    assert client.get("/api/training/category/9999").json() == []


def test_get_training_parses_learning_points(client, training, schedule):
    resp = client.get(f"/api/training/{training.id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["what_you_will_learn"] == ["Scope", "Risk"]
    assert [s["id"] for s in body["schedules"]] == [schedule.id]

    assert client.get("/api/training/9999").status_code == 404


def test_get_training_with_legacy_learning_text(client, db, training):
    training.what_you_will_learn = "Not JSON at all"
    db.commit()
    resp = client.get(f"/api/training/{training.id}")
    assert resp.json()["what_you_will_learn"] == ["Not JSON at all"]


def test_update_training_recomputes_pricing(client, training, admin_headers):
    resp = client.put(
        f"/api/training/{training.id}",
        json={"discount_percentage": 50, "title": "PM Essentials"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Training updated successfully"
    training_out = body["training"]
    assert training_out["title"] == "PM Essentials"
    assert Decimal(training_out["original_fee"]) == Decimal("1000")
    assert Decimal(training_out["fee"]) == Decimal("500.00")


def test_update_training_replaces_schedules(client, db, training, schedule, admin_headers):
    resp = client.put(
        f"/api/training/{training.id}",
        json={
            "schedules": [
                {"start_date": "2027-03-01T09:00:00Z", "end_date": "2027-03-05T17:00:00Z"}
            ]
        },
        headers=admin_headers,
    )
    assert resp.status_code == 200
    schedules = resp.json()["training"]["schedules"]
    assert len(schedules) == 1
    assert schedules[0]["start_date"].startswith("2027-03-01")
    assert db.query(TrainingSchedule).filter_by(training_id=training.id).count() == 1


def test_update_training_moves_category(client, db, training, admin_headers):
    from coursehub.models.category import Category

    target = Category(name="Technology")
    db.add(target)
    db.commit()

    resp = client.put(
        f"/api/training/{training.id}", json={"category_id": target.id}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["training"]["category"]["name"] == "Technology"


def test_update_training_rejects_null_required_fields(client, db, training, admin_headers):
    for title in (None, "   "):
        resp = client.put(
            f"/api/training/{training.id}", json={"title": title}, headers=admin_headers
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [{"field": "title", "message": "Title is required"}]

    flag = client.put(
        f"/api/training/{training.id}", json={"is_certified": None}, headers=admin_headers
    )
    assert flag.status_code == 400
    assert flag.json()["errors"][0]["field"] == "is_certified"

    assert client.get(f"/api/training/{training.id}").json()["title"] == training.title


def test_update_training_allows_clearing_optional_fields(client, training, admin_headers):
    resp = client.put(
        f"/api/training/{training.id}",
        json={"instructor": None, "description": None},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["training"]["instructor"] is None


def test_training_schedules_must_end_after_start(client, category, training, admin_headers):
    reversed_schedule = [
        {"start_date": "2027-03-05T09:00:00Z", "end_date": "2027-03-01T17:00:00Z"}
    ]

    created = client.post(
        "/api/training/",
        json=_payload(category.id, schedules=reversed_schedule),
        headers=admin_headers,
    )
    assert created.status_code == 400
    assert created.json()["errors"] == [
        {"field": "schedules.0", "message": "End date must not be before start date"}
    ]

    updated = client.put(
        f"/api/training/{training.id}",
        json={"schedules": reversed_schedule},
        headers=admin_headers,
    )
    assert updated.status_code == 400


def test_refused_training_update_changes_nothing(client, db, training, schedule, admin_headers):
    unknown = client.put(
        f"/api/training/{training.id}",
        json={"title": "Renamed", "category_id": 4242},
        headers=admin_headers,
    )
    assert unknown.status_code == 404

    db.add(Enrollment(fullname="Ann", email="ann@example.com", training_schedule_id=schedule.id))
    db.commit()
    blocked = client.put(
        f"/api/training/{training.id}",
        json={
            "title": "Renamed",
            "schedules": [
                {"start_date": "2027-03-01T09:00:00Z", "end_date": "2027-03-05T17:00:00Z"}
            ],
        },
        headers=admin_headers,
    )
    assert blocked.status_code == 409

    db.refresh(training)
    assert training.title == "Project Management Essentials"


def test_update_missing_training(client, admin_headers):
    resp = client.put("/api/training/9999", json={"title": "x"}, headers=admin_headers)
    assert resp.status_code == 404


def test_delete_training_removes_schedules_and_reviews(
    client, db, training, schedule, admin_headers
):
    db.add(Review(training_id=training.id, user_email="a@example.com", user_phone="1", stars=4))
    db.commit()
    training_id = training.id

    resp = client.delete(f"/api/training/{training_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Training deleted successfully"

    db.expire_all()
    assert db.get(Training, training_id) is None
    assert db.query(TrainingSchedule).filter_by(training_id=training_id).count() == 0
    assert db.query(Review).filter_by(training_id=training_id).count() == 0


def test_delete_training_with_enrollments_is_refused(
    client, db, training, schedule, admin_headers
):
    db.add(Enrollment(fullname="Sam", email="sam@example.com", training_schedule_id=schedule.id))
    db.commit()

    resp = client.delete(f"/api/training/{training.id}", headers=admin_headers)
    assert resp.status_code == 409
    assert db.get(Training, training.id) is not None
