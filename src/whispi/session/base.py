"""Abstract base class for session stores.

This module defines the interface for persisting the user identifier and
the device fingerprint. The abstraction hides:
- Storage format (JSON file, in-memory)
- Where the data lives on disk
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from .fingerprint import generate_device_id
from .models import SessionData


class SessionStore(ABC):
    """Abstract session store.

    Subclasses implement ``load`` and ``save``; the accessors below are
    built on top of them.
    """

    @abstractmethod
    def load(self) -> SessionData:
        """Read the persisted session (empty if nothing was saved)."""

    @abstractmethod
    def save(self, data: SessionData) -> None:
        """Persist the session."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def get_uid(self) -> str | None:
        return self.load().uid

    def set_uid(self, uid: str) -> None:
        data = self.load()
        self.save(data.model_copy(update={"uid": uid}))

    def get_or_create_device_id(
        self,
        generator: Callable[[], str] = generate_device_id,
    ) -> str:
        """Return the persisted fingerprint, generating and saving it on first use."""
        data = self.load()
        if data.device_id:
            return data.device_id
        device_id = generator()
        self.save(data.model_copy(update={"device_id": device_id}))
        return device_id

    def clear(self) -> None:
        self.save(SessionData())
