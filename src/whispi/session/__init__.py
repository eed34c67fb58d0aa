"""Local session persistence for whispi.

Stores the user identifier and the device fingerprint between runs.
"""

from .base import SessionStore
from .factory import create_session_store
from .fingerprint import compute_fingerprint, generate_device_id
from .models import SessionData

__all__ = [
    "SessionData",
    "SessionStore",
    "compute_fingerprint",
    "create_session_store",
    "generate_device_id",
]
