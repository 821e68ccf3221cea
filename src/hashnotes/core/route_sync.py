"""Two-way synchronization between the selected note and the URL fragment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .model import NoteId, StoreChange
from .ports import Router
from .route import format_route, parse_route
from .store import NoteStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Uninitialized:
    pass


@dataclass(frozen=True)
class Synced:
    note_id: NoteId | None


SyncState = Uninitialized | Synced


class RouteSync:
    """
    State machine over Uninitialized -> Synced(id).

    startup() reads the router once and normalizes it with replace writes.
    Afterwards selection changes push history entries, router notifications
    pull the selection, and collection changes replace a route that names a
    note which no longer exists. Nothing but startup() acts while
    Uninitialized.
    """

    def __init__(self, store: NoteStore, router: Router):
        self.store = store
        self.router = router
        self.state: SyncState = Uninitialized()
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def synced(self) -> bool:
        return isinstance(self.state, Synced)

    # Lifecycle

    def open(self) -> SyncState:
        if not self._unsubscribers:
            self._unsubscribers = [
                self.store.subscribe(self._on_store_change),
                self.router.subscribe(self.pull),
            ]
        return self.startup()

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def __enter__(self) -> "RouteSync":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Transitions

    def startup(self) -> SyncState:
        if self.synced:
            return self.state

        route_id = parse_route(self.router.read())
        if route_id is not None and route_id in self.store:
            self.store.select(route_id)
            target: NoteId | None = route_id
        elif self.store.selected_id is not None:
            target = self.store.selected_id
        else:
            target = None

        self.router.write_replace(format_route(target))
        self.state = Synced(target)
        logger.debug("Route startup complete: %s", self.state)
        return self.state

    def push(self) -> SyncState:
        if not self.synced:
            return self.state
        selected = self.store.selected_id
        self._write(format_route(selected), replace=False)
        self.state = Synced(selected)
        return self.state

    def pull(self, fragment: str) -> SyncState:
        if not self.synced:
            return self.state
        route_id = parse_route(fragment)
        # Cleared routes and unknown ids leave the selection alone
        if route_id is not None and route_id in self.store:
            self.store.select(route_id)
            self.state = Synced(route_id)
        return self.state

    def reconcile(self) -> SyncState:
        if not self.synced:
            return self.state
        route_id = parse_route(self.router.read())
        if route_id is not None and route_id not in self.store:
            selected = self.store.selected_id
            self._write(format_route(selected), replace=True)
            self.state = Synced(selected)
        return self.state

    def _write(self, fragment: str, replace: bool) -> None:
        current = self.router.read()
        if current == fragment:
            return
        # Same note already shown under another encoding: no history entry
        current_id = parse_route(current)
        if current_id is not None and current_id == parse_route(fragment):
            return
        if replace:
            self.router.write_replace(fragment)
        else:
            self.router.write_push(fragment)

    def _on_store_change(self, change: StoreChange) -> None:
        if change.notes:
            self.reconcile()
        if change.selection:
            self.push()
