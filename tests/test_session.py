"""Unit tests for session persistence and the device fingerprint."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from whispi.session import SessionData, compute_fingerprint, create_session_store
from whispi.session.fingerprint import DEVICE_ID_PREFIX, generate_device_id, to_base36
from whispi.session.in_memory import InMemorySessionStore
from whispi.session.json_file import JsonFileSessionStore


class TestFactory:
    """Tests for create_session_store."""

    def test_create_memory_store(self):
        store = create_session_store("memory")
        assert isinstance(store, InMemorySessionStore)
        assert store.backend_type == "memory"

    def test_create_file_store(self, tmp_path):
        store = create_session_store("file", path=tmp_path / "session.json")
        assert isinstance(store, JsonFileSessionStore)
        assert store.backend_type == "file"

    def test_unknown_backend_raises(self):
        with pytest.raises(ValueError, match="Unsupported session backend"):
            create_session_store("redis")


class TestJsonFileSessionStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty_session(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "none.json")
        assert store.load() == SessionData()
        assert store.get_uid() is None

    def test_uid_survives_new_instance(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        JsonFileSessionStore(path).set_uid("u1")

        assert path.exists()
        assert JsonFileSessionStore(path).get_uid() == "u1"

    def test_device_id_generated_once(self, tmp_path):
        path = tmp_path / "session.json"
        calls = []

        def generator():
            calls.append(1)
            return "device_first"

        first = JsonFileSessionStore(path).get_or_create_device_id(generator)
        second = JsonFileSessionStore(path).get_or_create_device_id(generator)

        assert first == second == "device_first"
        assert len(calls) == 1

    def test_set_uid_keeps_device_id(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "session.json")
        store.get_or_create_device_id(lambda: "device_keep")
        store.set_uid("u2")
        assert store.load() == SessionData(uid="u2", device_id="device_keep")

    def test_corrupt_file_is_ignored_and_logged(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        logged = []
        store = JsonFileSessionStore(
            path,
            debug_callback=lambda level, component, message: logged.append((level, component)),
        )

        assert store.load() == SessionData()
        assert logged == [("warning", "Session")]

        store.set_uid("u3")
        assert JsonFileSessionStore(path).get_uid() == "u3"

    def test_clear(self, tmp_path):
        store = JsonFileSessionStore(tmp_path / "session.json")
        store.set_uid("u1")
        store.clear()
        assert store.load() == SessionData()

    def test_home_is_expanded(self):
        store = JsonFileSessionStore("~/whispi-test/session.json")
        assert "~" not in str(store.path)


class TestInMemorySessionStore:
    """Tests for the in-memory store."""

    def test_initial_values(self):
        store = InMemorySessionStore(uid="u1", device_id="device_x")
        assert store.get_uid() == "u1"
        assert store.get_or_create_device_id() == "device_x"

    def test_set_and_clear(self):
        store = InMemorySessionStore()
        store.set_uid("u1")
        assert store.get_uid() == "u1"
        store.clear()
        assert store.get_uid() is None


class TestFingerprint:
    """Tests for device fingerprint generation."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0"), (9, "9"), (10, "a"), (35, "z"), (36, "10"), (1295, "zz")],
    )
    def test_to_base36(self, value: int, expected: str):
        assert to_base36(value) == expected

    def test_to_base36_rejects_negative(self):
        with pytest.raises(ValueError):
            to_base36(-1)

    def test_fingerprint_is_deterministic(self):
        traits = ["Linux-6.1", "x86_64", "en_US", "120x40", "60", "8", "CPython"]
        assert compute_fingerprint(traits) == compute_fingerprint(list(traits))

    def test_fingerprint_depends_on_traits(self):
        assert compute_fingerprint(["a", "b"]) != compute_fingerprint(["a", "c"])

    @given(st.lists(st.text(max_size=20), max_size=8))
    def test_fingerprint_shape(self, traits: list[str]):
        device_id = compute_fingerprint(traits)
        assert device_id.startswith(DEVICE_ID_PREFIX)
        suffix = device_id[len(DEVICE_ID_PREFIX):]
        assert suffix
        assert set(suffix) <= set("0123456789abcdefghijklmnopqrstuvwxyz")
        # 64-bit value: at most 13 base-36 digits
        assert len(suffix) <= 13

    def test_generate_device_id_uses_environment(self):
        assert generate_device_id() == generate_device_id()
