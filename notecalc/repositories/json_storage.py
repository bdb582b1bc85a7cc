"""
JSON-array-backed collection store.

Each store owns one file holding a top-level JSON array of records and treats
it as a single table keyed by one unique field. Every operation re-reads the
file, mutates the in-memory list and writes the whole array back. There is no
lock between the read and the write: two writers sharing a file can lose each
other's updates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Generic, List, Mapping, Optional, Protocol, Type, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
E = TypeVar("E")


class StorageError(Exception):
    """Raised when a collection file cannot be created or written."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class CollectionStore(Protocol[E, K]):
    """Lookup-by-key and full listing over one collection."""

    def list(self) -> List[E]: ...

    def get(self, key: K) -> Optional[E]: ...

    def add(self, record: E) -> Optional[E]: ...

    def update(self, key: K, changes: Mapping[str, Any]) -> Optional[E]: ...

    def delete(self, key: K) -> bool: ...



_NO_KEY = object()


class JsonCollectionStore(Generic[E, K]):
    """
    CollectionStore over a JSON file.

    ``record_type`` must be a frozen dataclass exposing ``KEY_FIELD``,
    ``FIELD_ALIASES`` (attribute name -> on-disk name), ``key``, ``to_dict()``
    and ``from_dict()``.

    * ``add`` returns None when the key already exists (nothing is written).
    * ``update`` returns None when the key is missing (nothing is written) and
      raises ValueError for unknown fields or values of the wrong type.
    * ``delete`` returns False when the key is missing (nothing is written).
    * Unreadable, empty or non-array files read as an empty collection.
    * Array entries that do not decode into a record are hidden from ``list``
      and ``get`` but written back untouched; their key, when present, still
      counts as taken.
    * Write failures raise StorageError.
    """

    record_type: Type[E]

    def __init__(self, path: Path | str, record_type: Optional[Type[E]] = None) -> None:
        self.path = Path(path)
        if record_type is not None:
            self.record_type = record_type

    # -------------------------- storage --------------------------
    def ensure_storage(self) -> None:
        """Create the parent directory and an empty array file when missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise StorageError(self.path, "could not initialize storage") from exc

    def _read_entries(self) -> List[Any]:
        self.ensure_storage()
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            parsed = json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable storage %s treated as empty: %s", self.path, exc)
            return []
        if not isinstance(parsed, list):
            logger.warning("Storage %s is not a JSON array; treated as empty", self.path)
            return []
        return parsed

    def _decode(self, item: Any) -> Optional[E]:
        if not isinstance(item, dict):
            return None
        try:
            return self.record_type.from_dict(item)
        except (KeyError, TypeError, ValueError):
            return None

    def _entry_key(self, item: Any) -> Any:
        record = self._decode(item)
        if record is not None:
            return record.key
        if isinstance(item, dict):
            value = item.get(self.record_type.KEY_FIELD)
            if value is not None and not isinstance(value, bool):
                return value
        return _NO_KEY

    def _write_entries(self, entries: List[Any]) -> None:
        self.ensure_storage()
        data = json.dumps(entries, ensure_ascii=False, indent=2)
        try:
            self.path.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise StorageError(self.path, "could not write storage") from exc
        logger.debug("Wrote %d entr(ies) to %s", len(entries), self.path)

    def _merge(self, record: E, entry: dict, changes: Mapping[str, Any]) -> tuple[E, dict]:
        aliases = self.record_type.FIELD_ALIASES
        fields = record.to_dict()
        for name, value in changes.items():
            disk_name = aliases.get(name, name)
            if disk_name == self.record_type.KEY_FIELD:
                continue
            if disk_name not in fields:
                raise ValueError(f"unknown field {name!r} for {self.record_type.__name__}")
            fields[disk_name] = value
        try:
            updated = self.record_type.from_dict(fields)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid {self.record_type.__name__} update: {exc}") from exc
        merged = dict(entry)
        merged.update(updated.to_dict())
        return updated, merged

    # -------------------------- operations --------------------------
    def list(self) -> List[E]:
        records: List[E] = []
        skipped = 0
        for item in self._read_entries():
            record = self._decode(item)
            if record is None:
                skipped += 1
            else:
                records.append(record)
        if skipped:
            logger.warning("Ignoring %d malformed entr(ies) in %s", skipped, self.path)
        return records

    def get(self, key: K) -> Optional[E]:
        for item in self._read_entries():
            record = self._decode(item)
            if record is not None and record.key == key:
                return record
        return None

    def add(self, record: E) -> Optional[E]:
        entries = self._read_entries()
        if any(self._entry_key(item) == record.key for item in entries):
            return None
        entries.append(record.to_dict())
        self._write_entries(entries)
        return record

    def update(self, key: K, changes: Mapping[str, Any]) -> Optional[E]:
        entries = self._read_entries()
        for index, item in enumerate(entries):
            record = self._decode(item)
            if record is None or record.key != key:
                continue
            updated, entries[index] = self._merge(record, item, changes)
            self._write_entries(entries)
            return updated
        return None

    def delete(self, key: K) -> bool:
        entries = self._read_entries()
        remaining = [item for item in entries if self._entry_key(item) != key]
        if len(remaining) == len(entries):
            return False
        self._write_entries(remaining)
        return True
