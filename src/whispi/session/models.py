"""Data model for the locally persisted session."""

from pydantic import BaseModel, Field


class SessionData(BaseModel):
    """The only client state that survives a restart.

    Conversation content is never stored locally.
    """

    uid: str | None = Field(default=None, description="Current user identifier")
    device_id: str | None = Field(default=None, description="Generated device fingerprint")
