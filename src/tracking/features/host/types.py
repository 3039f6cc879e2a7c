from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
import simpy


@dataclass(frozen=True)
class Page:
    """What the hosting window reports about the current page."""

    url: str = ""
    user_agent: str = ""
    referrer: str = ""


@dataclass
class Element:
    tag: str
    attrs: dict[str, Any] = field(default_factory=dict)


class Document:
    """
    Ordered element list standing in for the hosting page's DOM.
    Only what script injection needs.
    """

    def __init__(self, elements: list[Element] | None = None) -> None:
        self.elements: list[Element] = list(elements or [])

    def scripts(self) -> list[Element]:
        return [e for e in self.elements if e.tag == "script"]

    def insert_before_first_script(self, element: Element) -> None:
        for idx, e in enumerate(self.elements):
            if e.tag == "script":
                self.elements.insert(idx, element)
                return
        self.elements.append(element)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class Host:
    """
    The environment the library is embedded in.

    - env: cooperative task queue; network completions run on a later env.run() step
    - http: the host's HTTP client (no timeout imposed beyond its own defaults).
      Left as None, one is built on first POST and closed by close(); a
      client passed in stays owned by the caller.
    - supports_cors: whether the HTTP client can do credentialed cross-origin requests
    """

    env: simpy.Environment = field(default_factory=simpy.Environment)
    page: Page = field(default_factory=Page)
    document: Document = field(default_factory=Document)
    http: httpx.Client | None = None
    supports_cors: bool = True
    clock: Callable[[], datetime] = _utc_now
    _owned_http: httpx.Client | None = field(default=None, init=False, repr=False)

    def now(self) -> datetime:
        return self.clock()

    def client(self) -> httpx.Client:
        if self.http is not None:
            return self.http
        if self._owned_http is None:
            self._owned_http = httpx.Client()
        return self._owned_http

    def close(self) -> None:
        if self._owned_http is not None:
            self._owned_http.close()
            self._owned_http = None
