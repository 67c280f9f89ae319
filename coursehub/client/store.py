# coursehub/client/store.py
import logging
from typing import Any, Dict, Optional

from coursehub.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)


class AuthStore:
    """
    Login state for a user session.

    ``user``, ``token`` and ``is_authenticated`` are persisted through the
    client's storage; ``is_loading`` and ``error`` are transient. Every action
    returns ``{"success": True, ...}`` or ``{"success": False, "error": msg}``.
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.storage = client.storage
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None
        self.is_authenticated = False
        self.is_loading = False
        self.error: Optional[str] = None
        self._restore()

    def _restore(self) -> None:
        state = self.storage.state
        self.user = state.get("user")
        self.token = state.get("token")
        self.is_authenticated = bool(state.get("is_authenticated") and self.token)

    def _set_session(self, user: Dict[str, Any], token: str) -> None:
        self.user = user
        self.token = token
        self.is_authenticated = True
        self.storage.save(user=user, token=token, is_authenticated=True)

    def _run(self, action, *args, **kwargs) -> Dict[str, Any]:
        self.is_loading = True
        self.error = None
        try:
            return {"success": True, **(action(*args, **kwargs) or {})}
        except ApiError as e:
            self.error = e.message
            if e.status_code == 401:
                # the client already dropped the stored session
                self._restore()
            return {"success": False, "error": e.message}
        finally:
            self.is_loading = False

    def login(self, email: str, password: str) -> Dict[str, Any]:
        def action():
            data = self.client.auth.login(email, password)
            self._set_session(data["user"], data["token"])
            return {"user": data["user"]}

        return self._run(action)

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        def action():
            data = self.client.auth.register(username, email, password)
            self._set_session(data["user"], data["token"])
            return {"user": data["user"]}

        return self._run(action)

    def logout(self) -> None:
        self.user = None
        self.token = None
        self.is_authenticated = False
        self.error = None
        self.storage.clear()

    def update_profile(self, **fields: Any) -> Dict[str, Any]:
        def action():
            user = self.client.auth.update_profile(**fields)
            self.user = user
            self.storage.save(user=user)
            return {"user": user}

        return self._run(action)

    def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        def action():
            data = self.client.auth.change_password(current_password, new_password)
            return {"message": data.get("message")}

        return self._run(action)

    def forgot_password(self, email: str) -> Dict[str, Any]:
        def action():
            data = self.client.auth.forgot_password(email)
            return {"message": data.get("message")}

        return self._run(action)

    def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        def action():
            data = self.client.auth.reset_password(token, new_password)
            return {"message": data.get("message")}

        return self._run(action)

    def initialize(self) -> Dict[str, Any]:
        """Re-validate a persisted token by fetching the profile."""
        if not self.token:
            return {"success": False, "error": "Not authenticated"}

        def action():
            user = self.client.auth.get_profile()
            self._set_session(user, self.token)
            return {"user": user}

        result = self._run(action)
        if not result["success"]:
            self.logout()
        return result

    def clear_error(self) -> None:
        self.error = None
