from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

# Sentinels handed to the callback instead of a parsed body.
RESPONSE_FAILED = 0
RESPONSE_UNPARSABLE = 1

TrackCallback = Callable[[Any, dict[str, Any]], Any]


@dataclass(frozen=True, slots=True)
class Envelope:
    auth: str
    uid: str | None
    event: dict[str, Any]

    def as_dict(self) -> dict[str, Any]:
        return {"auth": self.auth, "uid": self.uid, "event": self.event}


class Transport(Protocol):
    name: str

    def send(self, url: str, envelope: Envelope, callback: TrackCallback | None) -> None: ...
