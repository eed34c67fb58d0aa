from typing import Any

from .base import ChatBackend
from .http import HttpChatBackend


def create_chat_backend(backend: str = "http", **config: Any) -> ChatBackend:
    """Create a chat backend instance.

    This factory function hides the instantiation logic for different transports.

    Args:
        backend: Backend type (currently only 'http')
        **config: Backend-specific configuration
            For HTTP:
                - base_url: str (default: the production cloud functions URL)
                - timeout: float | None (default: None, no timeout)
                - debug_callback: DebugCallback | None

    Returns:
        Initialized chat backend instance

    Raises:
        ValueError: If backend type is not supported

    Examples:
        >>> backend = create_chat_backend(
        ...     "http",
        ...     base_url="http://localhost:5001/whispi/us-central1"
        ... )
    """
    if backend.lower() == "http":
        return HttpChatBackend(**config)

    raise ValueError(
        f"Unsupported chat backend: {backend}. "
        f"Supported backends: 'http'"
    )
