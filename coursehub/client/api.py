"""
HTTP client for the REST API, shared by scripts and the admin/user tooling.

``ApiClient`` adds the stored bearer token to every request and drops the
stored session when the server answers 401. Resource groups hang off the
client (``client.trainings.list()``, ``client.auth.login(...)``) and return
the decoded JSON body.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from coursehub.client.storage import AuthStorage

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5005/api"
DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        storage: Optional[AuthStorage] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage or AuthStorage()
        self.http = http or httpx.Client(timeout=timeout)

        self.auth = AuthApi(self)
        self.categories = CategoryApi(self)
        self.trainings = TrainingApi(self)
        self.training_schedules = TrainingScheduleApi(self)
        self.enrollments = EnrollmentApi(self)
        self.reviews = ReviewApi(self)
        self.reports = ReportApi(self)

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Content-Type": "application/json", **kwargs.pop("headers", {})}
        token = self.storage.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        response = self.http.request(method, f"{self.base_url}{path}", headers=headers, **kwargs)

        if response.status_code == 401:
            logger.info("Session rejected by the server, clearing stored credentials")
            self.storage.clear()

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or response.reason_phrase, body)
        return body

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, json=data or {})

    def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PUT", path, json=data or {})

    def patch(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PATCH", path, json=data or {})

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self.http.close()


class _Resource:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthApi(_Resource):
    def register(self, username: str, email: str, password: str) -> Any:
        return self.client.post(
            "/auth/register", {"username": username, "email": email, "password": password}
        )

    def login(self, email: str, password: str) -> Any:
        return self.client.post("/auth/login", {"email": email, "password": password})

    def get_profile(self) -> Any:
        return self.client.get("/auth/profile")

    def update_profile(self, **fields: Any) -> Any:
        return self.client.patch("/auth/profile", fields)

    def change_password(self, current_password: str, new_password: str) -> Any:
        return self.client.patch(
            "/auth/change-password",
            {"current_password": current_password, "new_password": new_password},
        )

    def forgot_password(self, email: str) -> Any:
        return self.client.post("/auth/forgot-password", {"email": email})

    def reset_password(self, token: str, new_password: str) -> Any:
        return self.client.post(
            "/auth/reset-password", {"token": token, "new_password": new_password}
        )

    def list_users(self) -> Any:
        return self.client.get("/auth/users")


class CategoryApi(_Resource):
    def list(self) -> Any:
        return self.client.get("/categories/")

    def get(self, category_id: int) -> Any:
        return self.client.get(f"/categories/{category_id}")

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post("/categories/", data)

    def update(self, category_id: int, data: Dict[str, Any]) -> Any:
        return self.client.put(f"/categories/{category_id}", data)

    def delete(self, category_id: int) -> Any:
        return self.client.delete(f"/categories/{category_id}")


class TrainingApi(_Resource):
    def list(
        self,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        level: Optional[str] = None,
    ) -> Any:
        return self.client.get(
            "/training/", {"search": search, "category_id": category_id, "level": level}
        )

    def get(self, training_id: int) -> Any:
        return self.client.get(f"/training/{training_id}")

    def by_category(self, category_id: int) -> Any:
        return self.client.get(f"/training/category/{category_id}")

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post("/training/", data)

    def update(self, training_id: int, data: Dict[str, Any]) -> Any:
        return self.client.put(f"/training/{training_id}", data)

    def delete(self, training_id: int) -> Any:
        return self.client.delete(f"/training/{training_id}")


class TrainingScheduleApi(_Resource):
    def list(self) -> Any:
        return self.client.get("/training-schedules/")

    def get(self, schedule_id: int) -> Any:
        return self.client.get(f"/training-schedules/{schedule_id}")

    def by_training(self, training_id: int) -> Any:
        return self.client.get(f"/training-schedules/training/{training_id}")

    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post("/training-schedules/", data)

    def update(self, schedule_id: int, data: Dict[str, Any]) -> Any:
        return self.client.put(f"/training-schedules/{schedule_id}", data)

    def delete(self, schedule_id: int) -> Any:
        return self.client.delete(f"/training-schedules/{schedule_id}")


class EnrollmentApi(_Resource):
    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post("/enrollments/", data)

    def list(self, search: Optional[str] = None, status: Optional[str] = None) -> Any:
        return self.client.get("/enrollments/", {"search": search, "status": status})

    def get(self, enrollment_id: int) -> Any:
        return self.client.get(f"/enrollments/{enrollment_id}")

    def by_schedule(self, schedule_id: int) -> Any:
        return self.client.get(f"/enrollments/schedule/{schedule_id}")

    def update_status(self, enrollment_id: int, status: str) -> Any:
        return self.client.patch(f"/enrollments/{enrollment_id}/status", {"status": status})

    def delete(self, enrollment_id: int) -> Any:
        return self.client.delete(f"/enrollments/{enrollment_id}")


class ReviewApi(_Resource):
    def create(self, data: Dict[str, Any]) -> Any:
        return self.client.post("/reviews/", data)

    def list(self) -> Any:
        return self.client.get("/reviews/")

    def get(self, review_id: int) -> Any:
        return self.client.get(f"/reviews/{review_id}")

    def by_training(self, training_id: int) -> Any:
        return self.client.get(f"/reviews/training/{training_id}")

    def rating(self, training_id: int) -> Any:
        return self.client.get(f"/reviews/training/{training_id}/rating")

    def update(self, review_id: int, data: Dict[str, Any]) -> Any:
        return self.client.put(f"/reviews/{review_id}", data)

    def delete(self, review_id: int) -> Any:
        return self.client.delete(f"/reviews/{review_id}")


class ReportApi(_Resource):
    def summary(self) -> Any:
        return self.client.get("/reports/summary")
