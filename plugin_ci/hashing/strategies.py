"""
Hash algorithms available for package checksums and content hashes.

``md5`` is the default checksum because it is what the ``.md5`` sidecar
publishes; blake3 and the SHA-2 family are available for content hashes.
"""

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Protocol

import blake3


class Hasher(Protocol):
    def update(self, data: bytes, /) -> object: ...

    def hexdigest(self) -> str: ...


@dataclass(frozen=True)
class HashStrategy:
    """A named algorithm and the factory for its incremental hasher."""

    name: str
    factory: Callable[[], Hasher]

    def create_hasher(self) -> Hasher:
        return self.factory()


def hashlib_strategy(name: str) -> HashStrategy:
    return HashStrategy(name, partial(hashlib.new, name))


BLAKE3 = HashStrategy("blake3", blake3.blake3)

DEFAULT_STRATEGIES = (
    BLAKE3,
    hashlib_strategy("sha256"),
    hashlib_strategy("sha512"),
    hashlib_strategy("md5"),
)
