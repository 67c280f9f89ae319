# coursehub/client/storage.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

STORAGE_KEY = "auth-storage"

# only these survive a restart
PERSISTED_FIELDS = ("user", "token", "is_authenticated")


class AuthStorage:
    """
    Session persisted as JSON under the ``auth-storage`` key.

    Without a path the state lives in memory only.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._state: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.path or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable auth storage {self.path}: {e}")
            return
        self._state = data.get(STORAGE_KEY, {}).get("state", {})

    def _flush(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {STORAGE_KEY: {"state": self._state}}
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    @property
    def state(self) -> Dict[str, Any]:
        return dict(self._state)

    @property
    def token(self) -> Optional[str]:
        return self._state.get("token")

    def save(self, **values: Any) -> None:
        for key, value in values.items():
            if key in PERSISTED_FIELDS:
                self._state[key] = value
        self._flush()

    def clear(self) -> None:
        self._state = {}
        if self.path and self.path.exists():
            self.path.unlink()
