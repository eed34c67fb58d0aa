"""In-memory session store.

Data is lost when the application exits. Suitable for throwaway sessions or testing.
"""

from .base import SessionStore
from .models import SessionData


class InMemorySessionStore(SessionStore):
    """Session store holding a single SessionData in memory."""

    def __init__(self, uid: str | None = None, device_id: str | None = None):
        self._data = SessionData(uid=uid, device_id=device_id)

    def load(self) -> SessionData:
        return self._data

    def save(self, data: SessionData) -> None:
        self._data = data

    @property
    def backend_type(self) -> str:
        return "memory"
