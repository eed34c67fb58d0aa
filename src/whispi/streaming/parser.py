"""Line-level parsing of the reply event stream.

Hides the wire format: newline-delimited frames, each optionally prefixed
with an SSE ``data:`` marker and carrying a JSON payload.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from ..config import DebugCallback
from ..errors import MalformedFrameError
from .models import STREAM_FRAME_ADAPTER, StreamFrame

DATA_PREFIX = "data:"

# SSE fields that never carry a payload for this stream
_IGNORED_FIELDS = ("event:", "id:", "retry:")


def parse_frame(line: str) -> StreamFrame | None:
    """Parse one line of the stream.

    Args:
        line: Raw line, with or without trailing newline

    Returns:
        The decoded frame, or None for lines that carry no payload
        (blank lines, comments, non-data SSE fields)

    Raises:
        MalformedFrameError: If the payload is not a valid frame
    """
    text = line.strip()
    if not text or text.startswith(":"):
        return None
    if text.startswith(_IGNORED_FIELDS):
        return None
    if text.startswith(DATA_PREFIX):
        text = text[len(DATA_PREFIX):].strip()
        if not text:
            return None

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedFrameError(line, f"invalid JSON ({e.msg})") from e

    if not isinstance(payload, dict):
        raise MalformedFrameError(line, "payload is not an object")

    try:
        return STREAM_FRAME_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise MalformedFrameError(line, f"unrecognized frame ({e.error_count()} errors)") from e


async def iter_frames(
    lines: AsyncIterable[str],
    debug_callback: DebugCallback | None = None,
) -> AsyncIterator[StreamFrame]:
    """Decode frames from an async iterable of lines, in arrival order.

    Malformed frames are reported through the debug callback and skipped;
    they never end the stream.
    """
    async for line in lines:
        try:
            frame = parse_frame(line)
        except MalformedFrameError as e:
            if debug_callback:
                debug_callback("warning", "Stream", f"Skipping malformed frame: {e}")
            continue
        if frame is not None:
            if debug_callback:
                debug_callback("debug", "Stream", f"Frame: {frame.type}")
            yield frame
