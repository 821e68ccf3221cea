"""
Notes and theme persistence on top of a key-value storage.

Nothing in here may log note titles or content.
"""

import logging
import math
from typing import Any, Callable, Sequence

from ..core.model import DEFAULT_THEME, THEMES, Note
from ..core.ports import KeyValueStorage, NotesCodec, PersistenceBackend, ThemeStore
from ..core.utils import now_ms

logger = logging.getLogger(__name__)

NOTES_KEY = "notes.v1"
THEME_KEY = "theme"

# 9999-12-31T23:59:59.999Z in epoch milliseconds
MAX_TIMESTAMP_MS = 253_402_300_799_999


def valid_timestamp(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and 0 <= value <= MAX_TIMESTAMP_MS


def sanitize_record(record: Any, default_time: int) -> Note | None:
    """Coerce one stored record into a Note, or None if it cannot be one."""
    if not isinstance(record, dict):
        return None

    raw_id = record.get("id")
    if isinstance(raw_id, str):
        nid = raw_id
    else:
        nid = str(raw_id) if raw_id else ""
    if not nid:
        return None

    title = record.get("title")
    content = record.get("content")
    updated = record.get("updatedAt")
    if not valid_timestamp(updated):
        updated = default_time

    return Note(
        id=nid,
        title=title if isinstance(title, str) else "",
        content=content if isinstance(content, str) else "",
        updated_at=int(updated),
    )


class LocalNotesBackend(PersistenceBackend):
    def __init__(
        self,
        storage: KeyValueStorage,
        codec: NotesCodec,
        key: str = NOTES_KEY,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage
        self.codec = codec
        self.key = key
        self.clock = clock

    def load(self) -> list[Note]:
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return []
            parsed = self.codec.decode(raw)
        except Exception:
            logger.warning("Notes load failed, resetting to empty.")
            return []

        if not isinstance(parsed, list):
            return []

        now = self.clock()
        notes: list[Note] = []
        seen: set[str] = set()
        for record in parsed:
            note = sanitize_record(record, now)
            if note is None or note.id in seen:
                continue
            seen.add(note.id)
            notes.append(note)
        return notes

    def save(self, notes: Sequence[Note]) -> None:
        try:
            records = [n.to_record() for n in notes]
            self.storage.set_item(self.key, self.codec.encode(records))
        except Exception:
            logger.warning("Notes save failed.")


class LocalThemeStore(ThemeStore):
    def __init__(self, storage: KeyValueStorage, key: str = THEME_KEY):
        self.storage = storage
        self.key = key

    def load_theme(self) -> str:
        try:
            value = self.storage.get_item(self.key)
        except Exception:
            logger.warning("Theme load failed, using default.")
            return DEFAULT_THEME
        value = (value or "").strip()
        return value if value in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        value = "dark" if theme == "dark" else "light"
        try:
            self.storage.set_item(self.key, value)
        except Exception:
            logger.warning("Theme save failed.")

    def toggle_theme(self) -> str:
        theme = "dark" if self.load_theme() == "light" else "light"
        self.save_theme(theme)
        return theme
