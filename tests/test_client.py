import json

import pytest

from coursehub.client.api import ApiClient, ApiError
from coursehub.client.storage import STORAGE_KEY, AuthStorage
from coursehub.client.store import AuthStore
from tests.conftest import ADMIN_PASSWORD, USER_PASSWORD


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "auth.json"


@pytest.fixture
def api(client, storage_path):
    return ApiClient("/api", storage=AuthStorage(str(storage_path)), http=client)


@pytest.fixture
def store(api):
    return AuthStore(api)


def test_login_persists_session(store, user, storage_path):
    result = store.login(user.email, USER_PASSWORD)
    assert result["success"] is True
    assert result["user"]["email"] == user.email
    assert store.is_authenticated

    saved = json.loads(storage_path.read_text())[STORAGE_KEY]["state"]
    assert saved["token"] == store.token
    assert saved["is_authenticated"] is True
    assert set(saved) == {"user", "token", "is_authenticated"}


def test_failed_login_returns_server_message(store, user):
    result = store.login(user.email, "wrong-password")
    assert result == {"success": False, "error": "Invalid credentials"}
    assert store.error == "Invalid credentials"
    assert not store.is_authenticated

    store.clear_error()
    assert store.error is None


def test_register_and_profile_update(store, api):
    result = store.register("newbie", "newbie@example.com", "secret123")
    assert result["success"] is True

    updated = store.update_profile(username="newbie2")
    assert updated["success"] is True
    assert store.user["username"] == "newbie2"
    assert api.auth.get_profile()["username"] == "newbie2"


def test_session_survives_restart(store, api, client, user, storage_path):
    store.login(user.email, USER_PASSWORD)

    fresh = AuthStore(ApiClient("/api", storage=AuthStorage(str(storage_path)), http=client))
    assert fresh.is_authenticated
    assert fresh.initialize()["success"] is True
    assert fresh.user["id"] == user.id


def test_unauthorized_response_clears_storage(api, store, storage_path):
    api.storage.save(user={"id": 1}, token="stale-token", is_authenticated=True)

    with pytest.raises(ApiError) as exc:
        api.auth.get_profile()
    assert exc.value.status_code == 401
    assert api.storage.token is None
    assert not storage_path.exists()


def test_initialize_with_bad_token_logs_out(api, storage_path):
    api.storage.save(user={"id": 1}, token="stale-token", is_authenticated=True)
    store = AuthStore(api)
    result = store.initialize()
    assert result["success"] is False
    assert not store.is_authenticated
    assert store.token is None


def test_password_actions(store, user, outbox, db):
    store.login(user.email, USER_PASSWORD)
    changed = store.change_password(USER_PASSWORD, "changed123")
    assert changed == {"success": True, "message": "Password changed successfully"}

    forgot = store.forgot_password(user.email)
    assert forgot["success"] is True
    db.refresh(user)

    reset = store.reset_password(user.reset_token, "afterreset1")
    assert reset["message"] == "Password reset successful"

    store.logout()
    assert store.login(user.email, "afterreset1")["success"] is True


def test_resource_groups(api, admin, training, schedule, outbox):
    api.storage.save(token=None)
    assert api.trainings.get(training.id)["title"] == training.title
    assert len(api.trainings.list(search="project")) == 1
    assert api.training_schedules.by_training(training.id)[0]["id"] == schedule.id

    created = api.enrollments.create(
        {
            "fullname": "Eve",
            "email": "eve@example.com",
            "training_schedule_id": schedule.id,
        }
    )
    assert created["enrollment"]["id"]

    review = api.reviews.create(
        {"training_id": training.id, "user_email": "eve@example.com", "user_phone": "1", "stars": 4}
    )
    assert api.reviews.rating(training.id)["review_count"] == 1
    assert api.reviews.get(review["review_id"])["stars"] == 4

    with pytest.raises(ApiError) as exc:
        api.reports.summary()
    assert exc.value.status_code == 401

    login = api.auth.login(admin.email, ADMIN_PASSWORD)
    api.storage.save(token=login["token"])
    assert api.reports.summary()["total_enrollments"] == 1
    assert len(api.enrollments.list()) == 1
    assert api.categories.list()[0]["id"] == training.category_id
