import secrets

from ..core.ports import IdGenerator
from ..core.utils import now_ms, to_base36


class PrefixedId(IdGenerator):
    def __init__(self, prefix: str = "note", nrandom: int = 6):  # 6 base36 chars
        self.prefix = prefix
        self.nrandom = nrandom

    def new_id(self) -> str:
        ts = to_base36(now_ms())
        rnd = to_base36(secrets.randbits(64)).rjust(self.nrandom, "0")[-self.nrandom:]
        return f"{self.prefix}_{ts}_{rnd}"
