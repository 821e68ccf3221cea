from typing import Any, Callable, Protocol, Sequence

from .model import Note, NoteId


class KeyValueStorage(Protocol):
    """
    String keys to string values, like a browser's localStorage.
    """

    def get_item(self, key: str) -> str | None:
        pass

    def set_item(self, key: str, value: str) -> None:
        pass

    def remove_item(self, key: str) -> None:
        pass


class NotesCodec(Protocol):
    """
    Serialize the whole collection as plain records. Decoding may raise;
    callers treat any failure as absent data.
    """

    def decode(self, text: str) -> Any:
        pass

    def encode(self, records: list[dict[str, Any]]) -> str:
        pass


class PersistenceBackend(Protocol):
    """
    load() never raises and returns [] on missing or malformed data.
    save() is best-effort and never raises.
    """

    def load(self) -> list[Note]:
        pass

    def save(self, notes: Sequence[Note]) -> None:
        pass


class ThemeStore(Protocol):
    def load_theme(self) -> str:
        pass

    def save_theme(self, theme: str) -> None:
        pass


class IdGenerator(Protocol):
    def new_id(self) -> NoteId:
        pass


class Router(Protocol):
    """
    Holds the current URL fragment. Only user navigation (back, forward,
    manual edits) notifies subscribers; write_replace/write_push do not.
    """

    def read(self) -> str:
        pass

    def write_replace(self, fragment: str) -> None:
        pass

    def write_push(self, fragment: str) -> None:
        pass

    def subscribe(self, on_change: Callable[[str], None]) -> Callable[[], None]:
        pass


class Scheduler(Protocol):
    """
    Deferred, cancellable callbacks on the owning event loop.
    """

    def schedule(self, action: Callable[[], None], delay_ms: int) -> Any:
        pass

    def cancel(self, token: Any) -> None:
        pass
