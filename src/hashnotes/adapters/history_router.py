"""In-memory stand-in for a browser's location hash and history stack."""

from typing import Callable

from ..core.ports import Router
from ..core.route import EMPTY_ROUTE


class HistoryRouter(Router):
    def __init__(self, initial: str = EMPTY_ROUTE):
        self.entries: list[str] = [initial]
        self.index = 0
        self._listeners: list[Callable[[str], None]] = []

    # Router port

    def read(self) -> str:
        return self.entries[self.index]

    def write_replace(self, fragment: str) -> None:
        self.entries[self.index] = fragment

    def write_push(self, fragment: str) -> None:
        del self.entries[self.index + 1 :]
        self.entries.append(fragment)
        self.index += 1

    def subscribe(self, on_change: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    # User navigation; these notify subscribers

    def _notify(self) -> None:
        fragment = self.read()
        for listener in list(self._listeners):
            listener(fragment)

    def navigate(self, fragment: str) -> None:
        """Manual fragment edit. Re-entering the current fragment changes nothing."""
        if fragment == self.read():
            return
        self.write_push(fragment)
        self._notify()

    def back(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        if self.index >= len(self.entries) - 1:
            return False
        self.index += 1
        self._notify()
        return True

    @property
    def can_go_back(self) -> bool:
        return self.index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.index < len(self.entries) - 1
