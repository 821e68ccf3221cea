from __future__ import annotations
from dataclasses import dataclass
from typing import Any

NoteId = str


@dataclass
class Note:
    id: NoteId
    title: str = ""
    content: str = ""
    updated_at: int = 0  # epoch milliseconds

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("Note.id is immutable")
        super().__setattr__(name, value)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "updatedAt": self.updated_at,
        }

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match; `needle` must already be lowercased."""
        return needle in (self.title or "").lower() or needle in (self.content or "").lower()


@dataclass(frozen=True)
class StoreChange:
    notes: bool = False
    selection: bool = False
    query: bool = False


THEMES = ("light", "dark")
DEFAULT_THEME = "light"
