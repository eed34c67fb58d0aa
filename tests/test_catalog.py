"""Unit tests for character filtering."""
from hypothesis import given
from hypothesis import strategies as st

from whispi.api.models import Character
from whispi.catalog import FILTER_TAGS, filter_characters, toggle_filter
from whispi.catalog.filtering import matches_filters, matches_search

ascii_text = st.text(alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ ", max_size=12)

characters_strategy = st.lists(
    st.builds(
        Character,
        id=st.uuids().map(str),
        name=ascii_text,
        status_text=ascii_text,
        personality_tags=st.one_of(st.none(), st.lists(ascii_text, max_size=3)),
        filter_tags=st.one_of(st.none(), st.lists(st.sampled_from(FILTER_TAGS), max_size=4)),
    ),
    max_size=8,
)
filters_strategy = st.lists(st.sampled_from(FILTER_TAGS), max_size=3, unique=True)


class TestFilterTags:
    """Tests for the tag catalog."""

    def test_catalog_has_twenty_five_unique_tags(self):
        assert len(FILTER_TAGS) == 25
        assert len(set(FILTER_TAGS)) == 25

    def test_catalog_order(self):
        assert FILTER_TAGS[0] == "Realistic"
        assert FILTER_TAGS[-1] == "Curvy"


class TestSearch:
    """Tests for search term matching."""

    def test_empty_search_matches_everything(self, sample_characters):
        assert filter_characters(sample_characters, "") == sample_characters

    def test_search_is_case_insensitive_on_name(self, sample_characters):
        result = filter_characters(sample_characters, "LUNA")
        assert [c.id for c in result] == ["luna"]

    def test_search_matches_status_text(self, sample_characters):
        result = filter_characters(sample_characters, "gym")
        assert [c.id for c in result] == ["max"]

    def test_search_matches_personality_tag(self, sample_characters):
        result = filter_characters(sample_characters, "funny")
        assert [c.id for c in result] == ["ada"]

    def test_search_does_not_match_filter_tags(self, sample_characters):
        assert filter_characters(sample_characters, "fantasy") == []

    def test_character_without_tags_matches_by_name(self, sample_characters):
        result = filter_characters(sample_characters, "gho")
        assert [c.id for c in result] == ["ghost"]

    def test_search_term_is_not_trimmed(self, luna):
        assert not matches_search(luna, " luna ")


class TestFilters:
    """Tests for tag filters."""

    def test_all_active_filters_required(self, sample_characters):
        result = filter_characters(sample_characters, active_filters=["Modern", "Playful"])
        assert [c.id for c in result] == ["max"]

    def test_character_without_filter_tags_fails_any_filter(self, sample_characters):
        ghost = sample_characters[-1]
        assert matches_filters(ghost, [])
        assert not matches_filters(ghost, ["Modern"])

    def test_search_and_filters_combine(self, sample_characters):
        result = filter_characters(sample_characters, "a", ["Modern"])
        assert [c.id for c in result] == ["max", "ada"]

    def test_toggle_adds_then_removes(self):
        active = toggle_filter((), "Anime")
        assert active == ("Anime",)
        active = toggle_filter(active, "Funny")
        assert active == ("Anime", "Funny")
        assert toggle_filter(active, "Anime") == ("Funny",)

    @given(filters_strategy, st.sampled_from(FILTER_TAGS))
    def test_toggle_twice_restores_the_set(self, active: list[str], tag: str):
        assert set(toggle_filter(toggle_filter(tuple(active), tag), tag)) == set(active)


class TestFilterProperties:
    """Property tests over random catalogs."""

    @given(characters_strategy, ascii_text, filters_strategy)
    def test_filtering_is_idempotent(self, characters, term, active):
        once = filter_characters(characters, term, active)
        assert filter_characters(once, term, active) == once

    @given(characters_strategy, ascii_text, filters_strategy)
    def test_result_is_ordered_subsequence(self, characters, term, active):
        result = filter_characters(characters, term, active)
        positions = [characters.index(c) for c in result]
        assert positions == sorted(positions)

    @given(characters_strategy, ascii_text, filters_strategy, st.sampled_from(FILTER_TAGS))
    def test_adding_a_filter_never_grows_the_result(self, characters, term, active, extra):
        before = filter_characters(characters, term, active)
        after = filter_characters(characters, term, [*active, extra])
        assert all(c in before for c in after)

    @given(characters_strategy, st.data())
    def test_substring_of_name_always_matches(self, characters, data):
        for character in characters:
            start = data.draw(st.integers(min_value=0, max_value=len(character.name)))
            end = data.draw(st.integers(min_value=start, max_value=len(character.name)))
            assert matches_search(character, character.name[start:end])
