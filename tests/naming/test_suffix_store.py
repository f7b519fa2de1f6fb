"""Tests for random suffix generation and persistence."""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from alz_naming.exceptions import SuffixStateError
from alz_naming.naming.suffix_store import (
    SUFFIX_ALPHABET,
    SuffixStore,
    deployment_key,
    generate_suffix,
)


class TestGenerateSuffix:
    @pytest.mark.parametrize("length", [4, 5, 6])
    def test_length_and_alphabet(self, length):
        suffix = generate_suffix(length)

        assert len(suffix) == length
        assert all(c in SUFFIX_ALPHABET for c in suffix)

    @pytest.mark.parametrize("length", [0, 3, 7])
    def test_rejects_unsupported_length(self, length):
        with pytest.raises(SuffixStateError, match="between 4 and 6"):
            generate_suffix(length)


def test_deployment_key():
    """Test keys are lower-cased and free of spaces."""
    assert deployment_key("avd", "Prod", "West Europe", "AVD") == "avd/prod/westeurope/avd"


class TestSuffixStore:
    """Test suite for SuffixStore."""

    @pytest.fixture
    def state_file(self, tmp_path: Path) -> Path:
        return tmp_path / "state" / "suffixes.json"

    @pytest.fixture
    def store(self, state_file: Path) -> SuffixStore:
        return SuffixStore(state_file)

    def test_unassigned_returns_none(self, store, state_file):
        """Test reading an unassigned key does not create the file."""
        assert store.get("avd/prod/westeurope/avd") is None
        assert not state_file.exists()

    def test_assigned_once(self, store, state_file):
        """Test the first call assigns and persists a suffix."""
        suffix = store.get_or_create("avd/prod/westeurope/avd", length=6)

        assert len(suffix) == 6
        data = json.loads(state_file.read_text())
        assert data["version"] == 1
        assert data["suffixes"]["avd/prod/westeurope/avd"]["suffix"] == suffix
        assert "assigned_at" in data["suffixes"]["avd/prod/westeurope/avd"]

    def test_never_regenerated(self, store, state_file):
        """Test later calls, including from a new store, return the same suffix."""
        first = store.get_or_create("hub/prod/uksouth/hub", length=4)
        second = store.get_or_create("hub/prod/uksouth/hub", length=4)
        third = SuffixStore(state_file).get_or_create("hub/prod/uksouth/hub", length=6)

        assert first == second == third

    def test_keys_are_independent(self, store):
        store.get_or_create("a", length=4)
        store.get_or_create("b", length=5)

        suffixes = store.list_suffixes()
        assert set(suffixes) == {"a", "b"}
        assert len(suffixes["a"]) == 4
        assert len(suffixes["b"]) == 5

    def test_existing_entry_read_back(self, state_file):
        """Test suffixes written by an earlier run are honoured verbatim."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(
            json.dumps(
                {"version": 1, "suffixes": {"avd/prod/we/avd": {"suffix": "ab12cd"}}}
            )
        )

        assert SuffixStore(state_file).get_or_create("avd/prod/we/avd") == "ab12cd"

    def test_invalid_json(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("{not json")

        with pytest.raises(SuffixStateError, match="not valid JSON"):
            SuffixStore(state_file).get("anything")

    def test_unexpected_layout(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps(["ab12"]))

        with pytest.raises(SuffixStateError, match="unexpected layout"):
            SuffixStore(state_file).get("anything")

    def test_corrupt_suffix_not_regenerated(self, state_file):
        """Test an invalid stored suffix raises instead of being replaced."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(
            json.dumps({"version": 1, "suffixes": {"k": {"suffix": "AB-12"}}})
        )
        store = SuffixStore(state_file)

        with pytest.raises(SuffixStateError) as exc_info:
            store.get_or_create("k")

        assert exc_info.value.context["deployment_key"] == "k"
        assert "AB-12" in state_file.read_text()

    def test_concurrent_assignment_keeps_every_entry(self, state_file):
        """Test parallel runs sharing one state file do not overwrite each other."""
        keys = [f"spoke/prod/uksouth/app{i}" for i in range(40)]

        def assign(key: str) -> str:
            return SuffixStore(state_file).get_or_create(key, length=5)

        with ThreadPoolExecutor(max_workers=16) as pool:
            assigned = dict(zip(keys, pool.map(assign, keys)))

        assert SuffixStore(state_file).list_suffixes() == assigned

    def test_concurrent_assignment_same_key(self, state_file):
        """Test parallel runs for one deployment all receive the same suffix."""
        key = "avd/prod/westeurope/avd"

        with ThreadPoolExecutor(max_workers=8) as pool:
            suffixes = set(
                pool.map(lambda _: SuffixStore(state_file).get_or_create(key), range(20))
            )

        assert suffixes == {SuffixStore(state_file).get(key)}
