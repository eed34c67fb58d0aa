"""Frame models for the reply event stream.

Each frame is a JSON object discriminated by its ``type`` field.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class FragmentFrame(BaseModel):
    """An incremental piece of the assistant reply."""

    model_config = ConfigDict(frozen=True)

    type: Literal["chunk"] = "chunk"
    content: str


class CompleteFrame(BaseModel):
    """The authoritative full text of the assistant reply."""

    model_config = ConfigDict(frozen=True)

    type: Literal["complete"] = "complete"
    content: str


class ErrorFrame(BaseModel):
    """A server-side failure reported mid-stream."""

    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    message: str = "Stream error"


StreamFrame = Annotated[
    FragmentFrame | CompleteFrame | ErrorFrame,
    Field(discriminator="type"),
]

STREAM_FRAME_ADAPTER: TypeAdapter[StreamFrame] = TypeAdapter(StreamFrame)
