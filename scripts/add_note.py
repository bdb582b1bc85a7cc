#!/usr/bin/env python3
"""
Add a note directly to the configured data directory.

Usage:
  python scripts/add_note.py --title "Shopping" --body "milk, eggs" [--data-dir ./data]
"""
from __future__ import annotations

import argparse
import sys

from notecalc.core.config import get_settings
from notecalc.domain.validation import ValidationFailure, validate_note
from notecalc.repositories.notes_repository import NoteManager


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Add a note to notes.json")
    ap.add_argument("--title", required=True, help="Unique, case-sensitive title")
    ap.add_argument("--body", required=True, help="Note body")
    ap.add_argument("--data-dir", help="Storage directory (default: DATA_DIR setting)")
    args = ap.parse_args(argv)

    settings = get_settings()
    note = validate_note(args.title, args.body)
    if isinstance(note, ValidationFailure):
        raise SystemExit(note.error)

    manager = NoteManager(args.data_dir or settings.data_dir, settings.notes_file)
    if manager.add(note) is None:
        raise SystemExit(f"A note titled '{note.title}' already exists")
    print("OK: note added")
    print(f"  Title: {note.title}")
    print(f"  File: {manager.path}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
