"""Client-side character filtering.

Pure functions; the state layer recomputes the filtered list whenever the
characters, the search term or the active filters change.
"""

from collections.abc import Iterable, Sequence

from ..api.models import Character


def matches_search(character: Character, search_term: str) -> bool:
    """Case-insensitive substring match over name, status and personality tags."""
    needle = search_term.lower()
    if not needle:
        return True
    if needle in character.name.lower() or needle in character.status_text.lower():
        return True
    return any(needle in tag.lower() for tag in character.personality_tags or [])


def matches_filters(character: Character, active_filters: Iterable[str]) -> bool:
    """True if the character carries every active filter tag."""
    required = set(active_filters)
    if not required:
        return True
    return required.issubset(character.filter_tags or [])


def filter_characters(
    characters: Sequence[Character],
    search_term: str = "",
    active_filters: Iterable[str] = (),
) -> list[Character]:
    """Return the characters matching both the search term and the tag filters.

    Input order is preserved.
    """
    active = tuple(active_filters)
    return [
        c for c in characters
        if matches_search(c, search_term) and matches_filters(c, active)
    ]


def toggle_filter(active_filters: Sequence[str], tag: str) -> tuple[str, ...]:
    """Add the tag if absent, remove it if present."""
    if tag in active_filters:
        return tuple(t for t in active_filters if t != tag)
    return (*active_filters, tag)
