from pathlib import Path

from ..core.ports import KeyValueStorage


class FsKeyValueStorage(KeyValueStorage):
    """One UTF-8 file per key under a root directory."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, key: str) -> Path:
        return self.root / key

    def get_item(self, key: str) -> str | None:
        p = self._path(key)
        return p.read_text(encoding="utf-8") if p.exists() else None

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        # write-then-rename so a failed write leaves the previous value intact
        tmp = self._path(f".{key}.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(self._path(key))

    def remove_item(self, key: str) -> None:
        p = self._path(key)
        if p.exists():
            p.unlink()


class MemoryKeyValueStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None):
        self.items = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
