"""Character catalog filtering for whispi."""

from .filtering import filter_characters, matches_filters, matches_search, toggle_filter
from .tags import FILTER_TAGS

__all__ = [
    "FILTER_TAGS",
    "filter_characters",
    "matches_filters",
    "matches_search",
    "toggle_filter",
]
