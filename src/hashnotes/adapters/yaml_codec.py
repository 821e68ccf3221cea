import io
from typing import Any

import yaml

from ..core.ports import NotesCodec


class YamlNotesCodec(NotesCodec):
    """The collection as a YAML sequence of flat mappings."""

    def decode(self, text: str) -> Any:
        return yaml.safe_load(io.StringIO(text))

    def encode(self, records: list[dict[str, Any]]) -> str:
        buf = io.StringIO()
        yaml.safe_dump(records, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
