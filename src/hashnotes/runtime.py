"""Runtime wiring helper for CLI and API applications."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .adapters.history_router import HistoryRouter
from .adapters.idgen import PrefixedId
from .adapters.kv_storage import FsKeyValueStorage
from .adapters.local_storage import LocalNotesBackend, LocalThemeStore
from .adapters.scheduling import ManualScheduler
from .adapters.yaml_codec import YamlNotesCodec
from .config import HashnotesConfig, load_config
from .core.persistence import PersistenceScheduler
from .core.ports import IdGenerator, KeyValueStorage, PersistenceBackend, Router, Scheduler
from .core.route_sync import RouteSync
from .core.store import NoteStore
from .core.utils import now_ms

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Container for all wired components."""
    storage: KeyValueStorage
    backend: PersistenceBackend
    themes: LocalThemeStore
    idgen: IdGenerator
    config: HashnotesConfig


def build_runtime(
    root: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a storage root."""
    config = load_config(config_path=config_path, root=root)

    # Use config values if CLI args not provided
    if root is None:
        root = config.storage.root

    storage = FsKeyValueStorage(root)
    backend = LocalNotesBackend(storage, YamlNotesCodec())
    themes = LocalThemeStore(storage)
    idgen = PrefixedId(prefix=config.id.prefix)

    return Runtime(
        storage=storage,
        backend=backend,
        themes=themes,
        idgen=idgen,
        config=config,
    )


class Session:
    """
    One open notebook: store, debounced persistence and route sync, started
    in that order and torn down in reverse.
    """

    def __init__(
        self,
        runtime: Runtime,
        router: Router | None = None,
        scheduler: Scheduler | None = None,
        flush_on_close: bool = False,
        clock: Callable[[], int] = now_ms,
    ):
        self.runtime = runtime
        self.router = router if router is not None else HistoryRouter()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.flush_on_close = flush_on_close
        self.clock = clock

        self.store: NoteStore | None = None
        self.persistence: PersistenceScheduler | None = None
        self.route_sync: RouteSync | None = None

    def open(self) -> "Session":
        self.store = NoteStore.from_backend(
            self.runtime.backend, self.runtime.idgen, clock=self.clock
        )
        self.persistence = PersistenceScheduler(
            self.store,
            self.runtime.backend,
            self.scheduler,
            debounce_ms=self.runtime.config.persistence.debounce_ms,
        ).start()
        self.route_sync = RouteSync(self.store, self.router)
        try:
            self.route_sync.open()
        except Exception:
            self._teardown(flush=False)
            raise
        logger.debug("Session opened with %d notes", len(self.store))
        return self

    def close(self) -> None:
        self._teardown(flush=self.flush_on_close)
        logger.debug("Session closed")

    def _teardown(self, flush: bool) -> None:
        if self.route_sync is not None:
            self.route_sync.close()
        if self.persistence is not None:
            if flush:
                self.persistence.flush()
            self.persistence.close()

    def __enter__(self) -> "Session":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
