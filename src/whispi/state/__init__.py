"""Reducer-style widget state for whispi.

Module structure:
- models.py: the immutable WidgetState snapshot and SendPhase
- actions.py: action variants
- reducer.py: the pure (state, action) -> state function
"""

from . import actions
from .actions import Action
from .models import SendPhase, WidgetState
from .reducer import reduce

__all__ = [
    "Action",
    "SendPhase",
    "WidgetState",
    "actions",
    "reduce",
]
