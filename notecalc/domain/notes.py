"""Note record type."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping


@dataclass(frozen=True)
class Note:
    """A titled note. ``title`` is the unique, case-sensitive key."""

    title: str
    body: str

    KEY_FIELD = "title"
    FIELD_ALIASES: ClassVar[dict] = {}

    @property
    def key(self) -> str:
        return self.title

    def to_dict(self) -> dict:
        return {"title": self.title, "body": self.body}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Note":
        title = raw["title"]
        body = raw["body"]
        if not isinstance(title, str) or not isinstance(body, str):
            raise TypeError("note fields must be strings")
        return cls(title=title, body=body)
