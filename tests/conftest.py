"""Shared fakes for the note store, router and clock."""

import pytest

from hashnotes.adapters.history_router import HistoryRouter
from hashnotes.adapters.kv_storage import MemoryKeyValueStorage
from hashnotes.adapters.local_storage import LocalNotesBackend
from hashnotes.adapters.scheduling import ManualScheduler
from hashnotes.adapters.yaml_codec import YamlNotesCodec
from hashnotes.core.model import Note
from hashnotes.core.store import NoteStore


class SequentialIds:
    def __init__(self, prefix: str = "n"):
        self.prefix = prefix
        self.count = 0

    def new_id(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


class FakeClock:
    def __init__(self, now: int = 1_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def tick(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


class RecordingRouter(HistoryRouter):
    """HistoryRouter that remembers every programmatic write."""

    def __init__(self, initial: str = "#"):
        super().__init__(initial)
        self.writes: list[tuple[str, str]] = []

    def write_replace(self, fragment: str) -> None:
        self.writes.append(("replace", fragment))
        super().write_replace(fragment)

    def write_push(self, fragment: str) -> None:
        self.writes.append(("push", fragment))
        super().write_push(fragment)

    def pushes(self) -> list[str]:
        return [f for kind, f in self.writes if kind == "push"]

    def replaces(self) -> list[str]:
        return [f for kind, f in self.writes if kind == "replace"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def idgen():
    return SequentialIds()


@pytest.fixture
def store(idgen, clock):
    return NoteStore(idgen, clock=clock)


@pytest.fixture
def make_store(idgen, clock):
    """Build a store from (id, title, content, updated_at) tuples."""

    def build(*rows, selected=None):
        notes = [Note(id=i, title=t, content=c, updated_at=u) for i, t, c, u in rows]
        return NoteStore(idgen, notes, selected_id=selected, clock=clock)

    return build


@pytest.fixture
def router_factory():
    return RecordingRouter


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def memory_backend(clock):
    return LocalNotesBackend(MemoryKeyValueStorage(), YamlNotesCodec(), clock=clock)
