"""Device fingerprint generation.

The fingerprint is a best-effort heuristic identifier derived from the
local environment. It is not a security boundary: two machines with the
same traits share a fingerprint, and changing the terminal size changes it.

Hash: first 8 bytes of SHA-256 over the "|"-joined traits, rendered in
base 36 with a ``device_`` prefix.
"""

import hashlib
import locale
import os
import platform
import shutil
from collections.abc import Sequence
from datetime import datetime

DEVICE_ID_PREFIX = "device_"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Render a non-negative integer in base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def collect_environment_traits() -> list[str]:
    """Gather the environment characteristics the fingerprint is built from."""
    size = shutil.get_terminal_size()
    offset = datetime.now().astimezone().utcoffset()
    offset_minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    return [
        platform.platform(),
        platform.machine() or "unknown",
        locale.getlocale()[0] or "unknown",
        f"{size.columns}x{size.lines}",
        str(offset_minutes),
        str(os.cpu_count() or "unknown"),
        platform.python_implementation(),
    ]


def compute_fingerprint(traits: Sequence[str]) -> str:
    """Derive a stable device identifier from environment traits."""
    digest = hashlib.sha256("|".join(traits).encode("utf-8")).digest()
    return DEVICE_ID_PREFIX + to_base36(int.from_bytes(digest[:8], "big"))


def generate_device_id() -> str:
    """Fingerprint the current environment."""
    return compute_fingerprint(collect_environment_traits())
