"""File-backed note storage."""
from __future__ import annotations

from pathlib import Path

from notecalc.domain.notes import Note
from notecalc.repositories.json_storage import JsonCollectionStore

DEFAULT_NOTES_FILE = "notes.json"


class NoteManager(JsonCollectionStore[Note, str]):
    """Notes keyed by title; only the body can change after creation."""

    record_type = Note

    def __init__(self, data_dir: Path | str, storage_file: str = DEFAULT_NOTES_FILE) -> None:
        super().__init__(Path(data_dir) / storage_file)
