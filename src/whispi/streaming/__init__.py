"""Reply stream decoding for whispi."""

from .models import CompleteFrame, ErrorFrame, FragmentFrame, StreamFrame
from .parser import iter_frames, parse_frame

__all__ = [
    "CompleteFrame",
    "ErrorFrame",
    "FragmentFrame",
    "StreamFrame",
    "iter_frames",
    "parse_frame",
]
