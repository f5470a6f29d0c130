"""
Tests for JSONEntryFetcher.
"""

import json
from pathlib import Path

import pytest

from jam_judging.exceptions import ValidationError
from jam_judging.fetchers.json_fetcher import JSONEntryFetcher


def write_entries(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestJSONEntryFetcher:
    """Test JSONEntryFetcher behavior through public interface."""

    def test_lists_entries_in_file_order(self, tmp_path: Path) -> None:
        # Arrange
        path = write_entries(tmp_path / "entries.json", {
            "gj7": [
                {"id": 42, "title": "On-Chain Chess", "author_github": "octocat"},
                {"id": "57", "title": "Dojo Dungeon"},
            ]
        })
        fetcher = JSONEntryFetcher(path)

        # Act
        entries = fetcher.list_entries("gj7")

        # Assert
        assert [e.entry_id for e in entries] == ["42", "57"]
        assert entries[0].title == "On-Chain Chess"
        assert entries[0].metadata == {"author_github": "octocat"}

    def test_unknown_jam_is_empty(self, tmp_path: Path) -> None:
        fetcher = JSONEntryFetcher(write_entries(tmp_path / "entries.json", {"gj7": []}))

        assert fetcher.list_entries("gj99") == []

    def test_get_entry(self, tmp_path: Path) -> None:
        fetcher = JSONEntryFetcher(write_entries(tmp_path / "entries.json", {"gj7": [{"id": "1", "title": "One"}]}))

        assert fetcher.get_entry("gj7", "1").title == "One"
        with pytest.raises(KeyError):
            fetcher.get_entry("gj7", "2")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            JSONEntryFetcher(tmp_path / "missing.json")

    def test_invalid_records_rejected(self, tmp_path: Path) -> None:
        fetcher = JSONEntryFetcher(write_entries(tmp_path / "entries.json", {"gj7": [{"title": "no id"}]}))

        with pytest.raises(ValidationError):
            fetcher.list_entries("gj7")

    def test_invalid_json_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "entries.json"
        path.write_text("{not json", encoding="utf-8")
        fetcher = JSONEntryFetcher(path)

        with pytest.raises(ValidationError):
            fetcher.list_entries("gj7")

    def test_reload_picks_up_changes(self, tmp_path: Path) -> None:
        path = write_entries(tmp_path / "entries.json", {"gj7": [{"id": "1"}]})
        fetcher = JSONEntryFetcher(path)
        assert len(fetcher.list_entries("gj7")) == 1

        write_entries(path, {"gj7": [{"id": "1"}, {"id": "2"}]})
        fetcher.reload()

        assert len(fetcher.list_entries("gj7")) == 2

    def test_duplicate_entry_ids_rejected(self, tmp_path: Path) -> None:
        # Arrange
        path = write_entries(tmp_path / "entries.json", {"gj7": [{"id": "a"}, {"id": "b"}, {"id": "a"}]})
        fetcher = JSONEntryFetcher(path)

        # Act / Assert
        with pytest.raises(ValidationError, match="Duplicate entry ids in gj7: a"):
            fetcher.list_entries("gj7")

    def test_same_id_allowed_in_different_jams(self, tmp_path: Path) -> None:
        fetcher = JSONEntryFetcher(write_entries(tmp_path / "entries.json", {"gj7": [{"id": "a"}], "gj8": [{"id": "a"}]}))

        assert fetcher.get_jam_ids() == ["gj7", "gj8"]
        assert fetcher.get_entry("gj8", "a").entry_id == "a"
