from __future__ import annotations

import json
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from tracking.core.rng import ByteSource, default_byte_source

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def canonical_json(obj: Any) -> str:
    # compact serialization, same shape a browser JSON.stringify produces
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=str)


def to_base36(n: int) -> str:
    if n < 0:
        raise ValueError("to_base36 expects a non-negative integer")
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def uuid4_from_bytes(raw: bytes) -> uuid.UUID:
    """
    RFC 4122 §4.4: fix the version (0100) and variant (10xx) bits,
    keep the remaining 122 bits as given.
    """
    if len(raw) != 16:
        raise ValueError("uuid4_from_bytes needs exactly 16 bytes")
    b = bytearray(raw)
    b[6] = (b[6] & 0x0F) | 0x40
    b[8] = (b[8] & 0x3F) | 0x80
    return uuid.UUID(bytes=bytes(b))


@dataclass(slots=True)
class VisitorIdGenerator:
    """
    Visitor ids: <millisecond clock in base 36><version-4 uuid>.
    The clock part is strictly increasing per generator even if the wall clock stalls.
    """

    source: ByteSource = field(default_factory=default_byte_source)
    clock_ms: Callable[[], int] = field(default=lambda: int(time.time() * 1000))
    _last_ms: int = field(default=-1, init=False, repr=False)

    def next_ms(self) -> int:
        ms = max(int(self.clock_ms()), self._last_ms + 1)
        self._last_ms = ms
        return ms

    def generate(self) -> str:
        return to_base36(self.next_ms()) + str(uuid4_from_bytes(self.source.randbytes(16)))
