from __future__ import annotations

import hashlib
from dataclasses import dataclass, field


def _name_id(name: str) -> int:
    digest = hashlib.blake2b(name.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


@dataclass(frozen=True)
class Person:
    """A tracked participant, identified by the name read from the sheet.

    `id` is a stable hash of the name used for fast comparison only; it
    carries no ordering meaning.
    """

    name: str
    id: int = field(init=False, repr=False, compare=True)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _name_id(self.name))

    def __str__(self) -> str:
        return self.name
