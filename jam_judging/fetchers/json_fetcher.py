"""
JSON entry fetcher implementation.

Reads jam entries from a single JSON file mapping jam slug to entry list.
"""

import json
from collections import Counter
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import EntryFetcher
from ..logging_config import get_logger
from ..models import Entry


class EntryRecord(BaseModel):
    """One entry as written in the entries file. Unknown keys become metadata."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str = Field(min_length=1)
    title: str = ""

    def to_entry(self) -> Entry:
        return Entry(entry_id=self.id, title=self.title, metadata=dict(self.model_extra or {}))


_ENTRIES_FILE = TypeAdapter(dict[str, list[EntryRecord]])


class JSONEntryFetcher(EntryFetcher):
    """
    Entry fetcher backed by a JSON file.

    Expected layout: {"<jam slug>": [{"id": "42", "title": "...", ...}, ...]}.
    The file is read once and cached.
    """

    def __init__(self, entries_path: Path):
        """
        Initialize JSON entry fetcher.

        Args:
            entries_path: Path to the entries JSON file
        """
        self.entries_path: Path = Path(entries_path)
        self.logger = get_logger("json_fetcher")

        if not self.entries_path.exists():
            raise FileNotFoundError(f"Entries file does not exist: {self.entries_path}")

        self._cache = dict[str, list[Entry]]()
        self._cache_loaded: bool = False

    def _load_entries(self) -> None:
        if self._cache_loaded:
            return

        try:
            raw = json.loads(self.entries_path.read_text(encoding="utf-8"))
            jams = _ENTRIES_FILE.validate_python(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Entries file is not valid JSON: {self.entries_path}: {e}") from e
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid entries file {self.entries_path}: {e}") from e

        for jam_id, records in jams.items():
            counts = Counter(record.id for record in records)
            duplicates = sorted(entry_id for entry_id, count in counts.items() if count > 1)
            if duplicates:
                raise ValidationError(f"Duplicate entry ids in {jam_id}: {', '.join(duplicates)}")
            self._cache[jam_id] = [record.to_entry() for record in records]

        self._cache_loaded = True
        self.logger.info(
            f"Loaded {sum(len(v) for v in self._cache.values())} entries for {len(self._cache)} jams from {self.entries_path}"
        )

    @override
    def list_entries(self, jam_id: str) -> list[Entry]:
        self._load_entries()
        entries = self._cache.get(jam_id)
        if entries is None:
            self.logger.warning(f"No entries found for jam: {jam_id}")
            return []
        return list(entries)

    @override
    def get_entry(self, jam_id: str, entry_id: str) -> Entry:
        for entry in self.list_entries(jam_id):
            if entry.entry_id == entry_id:
                return entry
        raise KeyError(f"Entry not found in {jam_id}: {entry_id}")

    def get_jam_ids(self) -> list[str]:
        self._load_entries()
        return list(self._cache.keys())

    def reload(self) -> None:
        """Force a re-read of the entries file on next access."""
        self._cache.clear()
        self._cache_loaded = False
