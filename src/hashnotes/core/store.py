"""In-memory note collection with selection and search."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .model import Note, NoteId, StoreChange
from .ports import IdGenerator, PersistenceBackend
from .utils import now_ms

logger = logging.getLogger(__name__)

Listener = Callable[[StoreChange], None]


class NoteStore:
    """
    Owns the notes (newest first), the selected id and the search query.

    Mutations are synchronous and never touch storage or routing; those are
    driven by listeners registered with subscribe().
    """

    def __init__(
        self,
        idgen: IdGenerator,
        notes: Iterable[Note] = (),
        selected_id: NoteId | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.idgen = idgen
        self.clock = clock
        self._notes: list[Note] = list(notes)
        self._selected_id = selected_id
        self._query = ""
        self._listeners: list[Listener] = []

    @classmethod
    def from_backend(
        cls,
        backend: PersistenceBackend,
        idgen: IdGenerator,
        clock: Callable[[], int] = now_ms,
    ) -> "NoteStore":
        """Load the stored collection once and pre-select its first note."""
        notes = backend.load()
        selected = notes[0].id if notes else None
        logger.debug("Loaded %d notes from backend", len(notes))
        return cls(idgen, notes, selected_id=selected, clock=clock)

    # Observation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    # Reads

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    @property
    def selected_id(self) -> NoteId | None:
        return self._selected_id

    @property
    def query(self) -> str:
        return self._query

    def get(self, note_id: NoteId | None) -> Note | None:
        if not note_id:
            return None
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def __contains__(self, note_id: object) -> bool:
        return isinstance(note_id, str) and self.get(note_id) is not None

    def __len__(self) -> int:
        return len(self._notes)

    @property
    def selected_note(self) -> Note | None:
        return self.get(self._selected_id)

    @property
    def filtered_notes(self) -> list[Note]:
        return self.search(self._query)

    def search(self, query: str) -> list[Note]:
        """Notes matching query, without touching the stored query."""
        needle = (query or "").strip().lower()
        if not needle:
            return list(self._notes)
        return [n for n in self._notes if n.matches(needle)]

    # Mutations

    def _touch(self, note: Note) -> None:
        # updated_at never moves backwards, even if the clock does
        note.updated_at = max(self.clock(), note.updated_at)

    def add(self) -> NoteId:
        note = Note(id=self._unused_id(), title="", content="", updated_at=self.clock())
        self._notes.insert(0, note)
        selection_changed = self._selected_id != note.id
        self._selected_id = note.id
        self._emit(StoreChange(notes=True, selection=selection_changed))
        return note.id

    def _unused_id(self) -> NoteId:
        nid = self.idgen.new_id()
        while self.get(nid) is not None:
            nid = self.idgen.new_id()
        return nid

    def update(
        self,
        note_id: NoteId,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> None:
        note = self.get(note_id)
        if note is None:
            return
        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        self._touch(note)
        self._emit(StoreChange(notes=True))

    def delete(self, note_id: NoteId) -> None:
        note = self.get(note_id)
        if note is None:
            return
        self._notes.remove(note)
        selection_changed = self._selected_id == note_id
        if selection_changed:
            self._selected_id = None
        self._emit(StoreChange(notes=True, selection=selection_changed))

    def select(self, note_id: NoteId | None) -> None:
        # Unknown ids are accepted; selected_note resolves them to None
        if note_id == self._selected_id:
            return
        self._selected_id = note_id
        self._emit(StoreChange(selection=True))

    def set_query(self, query: str) -> None:
        query = query or ""
        if query == self._query:
            return
        self._query = query
        self._emit(StoreChange(query=True))
