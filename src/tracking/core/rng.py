from __future__ import annotations

import random
import secrets
from dataclasses import dataclass
from typing import Protocol


class ByteSource(Protocol):
    def randbytes(self, n: int) -> bytes: ...


class CryptoSource:
    """Cryptographically strong bytes from the OS."""

    def randbytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)


@dataclass
class RNG:
    """Pseudo-random fallback. Seedable, so tests get reproducible ids."""

    seed: int | None = None

    def __post_init__(self) -> None:
        self._r = random.Random(self.seed)

    def randbytes(self, n: int) -> bytes:
        return bytes(self._r.getrandbits(8) for _ in range(n))


def default_byte_source() -> ByteSource:
    try:
        secrets.token_bytes(1)
    except NotImplementedError:
        # os.urandom raises this when the platform has no entropy source
        return RNG()
    return CryptoSource()
