"""JSON file session store.

Persists the uid and device fingerprint in a small JSON document so they
survive restarts. There is no expiry or rotation.
"""

from pathlib import Path

from pydantic import ValidationError

from ..config import DEFAULT_SESSION_PATH, DebugCallback
from .base import SessionStore
from .models import SessionData


class JsonFileSessionStore(SessionStore):
    """Session store backed by a JSON file."""

    def __init__(
        self,
        path: str | Path = DEFAULT_SESSION_PATH,
        debug_callback: DebugCallback | None = None,
    ):
        self._path = Path(path).expanduser()
        self._debug_callback = debug_callback

    @property
    def path(self) -> Path:
        return self._path

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback receiving warnings about the session file."""
        self._debug_callback = callback

    def load(self) -> SessionData:
        if not self._path.exists():
            return SessionData()
        try:
            return SessionData.model_validate_json(self._path.read_text(encoding="utf-8"))
        except ValidationError as e:
            # A corrupt file behaves like an empty session; the next save rewrites it.
            if self._debug_callback:
                self._debug_callback(
                    "warning", "Session", f"Ignoring unreadable session file {self._path}: {e}"
                )
            return SessionData()

    def save(self, data: SessionData) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(data.model_dump_json(indent=2), encoding="utf-8")

    @property
    def backend_type(self) -> str:
        return "file"
