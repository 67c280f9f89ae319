import pytest
from sqlalchemy.exc import IntegrityError

from coursehub.core.exceptions import ValidationFailed
from coursehub.models.review import Review
from coursehub.services import review_service
from coursehub.services.review_service import validate_review


def _review(training_id, **overrides):
    payload = {
        "training_id": training_id,
        "user_email": "reviewer@example.com",
        "user_phone": "+250788111222",
        "stars": 5,
        "description": "Very practical",
    }
    payload.update(overrides)
    return payload


def test_validate_review_reports_every_missing_field():
    errors = validate_review({})
    assert {e["message"] for e in errors} == {
        "Training ID is required",
        "User email is required",
        "User phone is required",
        "Stars must be between 1 and 5",
    }


def test_validate_review_partial_checks_given_fields_only():
    assert validate_review({"description": "ok"}, partial=True) == []
    assert validate_review({"stars": 0}, partial=True) == [
        {"field": "stars", "message": "Stars must be between 1 and 5"}
    ]


def test_create_review(client, training):
    resp = client.post("/api/reviews/", json=_review(training.id))
    assert resp.status_code == 201
    assert resp.json()["message"] == "Review created successfully"
    assert resp.json()["review_id"]


@pytest.mark.parametrize("stars", [0, 6, -1])
def test_create_review_rejects_out_of_range_stars(client, db, training, stars):
    resp = client.post("/api/reviews/", json=_review(training.id, stars=stars))
    assert resp.status_code == 400
    assert resp.json()["errors"] == [
        {"field": "stars", "message": "Stars must be between 1 and 5"}
    ]
    assert db.query(Review).count() == 0


def test_create_review_missing_fields(client, training):
    resp = client.post("/api/reviews/", json={"training_id": training.id, "stars": 3})
    assert resp.status_code == 400
    messages = [e["message"] for e in resp.json()["errors"]]
    assert messages == ["User email is required", "User phone is required"]


def test_create_review_unknown_training(client):
    resp = client.post("/api/reviews/", json=_review(9999))
    assert resp.status_code == 404


def test_stars_check_constraint(db, training):
    db.add(Review(training_id=training.id, user_email="x@example.com", user_phone="1", stars=9))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_commit_reports_stars_constraint_as_validation(db, monkeypatch):
    def failing_commit():
        raise IntegrityError(
            "UPDATE reviews", {}, Exception("CHECK constraint failed: ck_reviews_stars_range")
        )

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(ValidationFailed) as exc:
        review_service._commit(db)
    assert exc.value.errors == [{"field": "stars", "message": "Stars must be between 1 and 5"}]


def test_commit_propagates_other_integrity_errors(db, monkeypatch):
    def failing_commit():
        raise IntegrityError(
            "INSERT INTO reviews", {}, Exception("NOT NULL constraint failed: reviews.user_email")
        )

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(IntegrityError):
        review_service._commit(db)


def test_reviews_by_training_and_rating(client, training):
    assert client.get(f"/api/reviews/training/{training.id}/rating").json() == {
        "average_rating": 0,
        "review_count": 0,
    }

    for stars in (5, 4, 4):
        client.post("/api/reviews/", json=_review(training.id, stars=stars))

    listed = client.get(f"/api/reviews/training/{training.id}").json()
    assert len(listed) == 3
    assert listed[0]["id"] > listed[-1]["id"]

    rating = client.get(f"/api/reviews/training/{training.id}/rating").json()
    assert rating == {"average_rating": 4.33, "review_count": 3}

    assert len(client.get("/api/reviews/").json()) == 3


def test_get_review(client, training):
    review_id = client.post("/api/reviews/", json=_review(training.id)).json()["review_id"]
    resp = client.get(f"/api/reviews/{review_id}")
    assert resp.status_code == 200
    assert resp.json()["stars"] == 5
    assert client.get("/api/reviews/9999").status_code == 404


def test_update_review(client, training, admin_headers, user_headers):
    review_id = client.post("/api/reviews/", json=_review(training.id)).json()["review_id"]

    assert (
        client.put(f"/api/reviews/{review_id}", json={"stars": 3}, headers=user_headers).status_code
        == 403
    )

    resp = client.put(f"/api/reviews/{review_id}", json={"stars": 3}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Review updated successfully"
    assert body["review"]["stars"] == 3
    assert body["review"]["user_email"] == "reviewer@example.com"

    invalid = client.put(f"/api/reviews/{review_id}", json={"stars": 7}, headers=admin_headers)
    assert invalid.status_code == 400
    assert client.get(f"/api/reviews/{review_id}").json()["stars"] == 3


def test_delete_review(client, training, admin_headers):
    review_id = client.post("/api/reviews/", json=_review(training.id)).json()["review_id"]
    resp = client.delete(f"/api/reviews/{review_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert client.get(f"/api/reviews/{review_id}").status_code == 404
    assert client.delete(f"/api/reviews/{review_id}", headers=admin_headers).status_code == 404
