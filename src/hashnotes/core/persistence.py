"""Debounced write-through from a NoteStore to a PersistenceBackend."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .model import StoreChange
from .ports import PersistenceBackend, Scheduler
from .store import NoteStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300


class PersistenceScheduler:
    """
    Trailing-edge debouncer: every notes change re-arms one timer, and only
    the latest collection is saved once the changes settle.

    Use as a context manager; leaving the block cancels a pending write.
    """

    def __init__(
        self,
        store: NoteStore,
        backend: PersistenceBackend,
        scheduler: Scheduler,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ):
        self.store = store
        self.backend = backend
        self.scheduler = scheduler
        self.debounce_ms = debounce_ms

        self._token: Any = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> "PersistenceScheduler":
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_change)
        return self

    def close(self) -> None:
        self._cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "PersistenceScheduler":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_change(self, change: StoreChange) -> None:
        if change.notes:
            self._arm()

    def _arm(self) -> None:
        self._cancel()
        self._token = self.scheduler.schedule(self._fire, self.debounce_ms)

    def _cancel(self) -> None:
        if self._token is not None:
            self.scheduler.cancel(self._token)
            self._token = None

    def _fire(self) -> None:
        self._token = None
        notes = self.store.notes
        logger.debug("Saving %d notes", len(notes))
        self.backend.save(notes)

    def flush(self) -> bool:
        """Write now if a write is pending. Returns True if anything was saved."""
        if self._token is None:
            return False
        self._cancel()
        self._fire()
        return True
