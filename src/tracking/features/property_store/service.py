from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Protocol

from tracking.core.ids import canonical_json
from tracking.features.storage.duckdb_adapter import escape_cookie_part

logger = logging.getLogger(__name__)

UID_KEY = "$uid"
HIDDEN_PROPS: frozenset[str] = frozenset({UID_KEY})


class CookieJarLike(Protocol):
    def get(self, name: str, *, now: datetime | None = None) -> str | None: ...

    def set(
        self,
        name: str,
        value: str,
        *,
        expires_days: float,
        path: str = "/",
        now: datetime | None = None,
    ) -> None: ...


def cookie_name(input_id: str, token: str, prefix: str = "bd_") -> str:
    return prefix + escape_cookie_part(input_id + token)


class PropertyStore:
    """
    Visitor properties persisted as one JSON blob in a cookie slot.

    - set(): last writer wins; set_once(): first writer wins
    - every mutation rewrites the whole blob (no deltas)
    - properties() hides the visitor id; get() does not
    """

    def __init__(
        self,
        *,
        jar: CookieJarLike,
        name: str,
        expiry_days: float = 365,
        path: str = "/",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.jar = jar
        self.name = name
        self.expiry_days = expiry_days
        self.path = path
        self._clock = clock
        self.props: dict[str, Any] = {}
        self.load()

    def _now(self) -> datetime | None:
        return self._clock() if self._clock is not None else None

    def load(self) -> None:
        blob = self.jar.get(self.name, now=self._now())
        if not blob:
            self.props = {}
            return

        try:
            parsed = json.loads(blob)
        except ValueError:
            parsed = None
        if not isinstance(parsed, dict):
            logger.warning(
                "discarding malformed property blob name=%s", self.name, extra={"reason": "malformed"}
            )
            self.props = {}
            return
        self.props = dict(parsed)

    def _write(self, blob: str) -> None:
        self.jar.set(
            self.name,
            blob,
            expires_days=self.expiry_days,
            path=self.path,
            now=self._now(),
        )

    def properties(self) -> dict[str, Any]:
        return {k: v for k, v in self.props.items() if k not in HIDDEN_PROPS}

    def get(self, prop: str) -> Any:
        return self.props.get(prop)

    def set_once(self, props: Any) -> bool:
        return self.set(props, once=True)

    def set(self, props: Any, *, once: bool = False) -> bool:
        if not isinstance(props, Mapping):
            return False
        candidate = dict(self.props)
        for key, value in props.items():
            if once and key in candidate:
                continue
            candidate[key] = value
        return self._commit(candidate)

    def unset(self, prop: str) -> bool:
        if prop not in self.props:
            return False
        candidate = dict(self.props)
        del candidate[prop]
        return self._commit(candidate)

    def _commit(self, candidate: dict[str, Any]) -> bool:
        """Persist candidate and adopt it only if it serializes."""
        try:
            blob = canonical_json(candidate)
        except (TypeError, ValueError) as exc:
            logger.debug(
                "rejecting unserializable properties error=%s",
                exc,
                extra={"reason": "unserializable"},
            )
            return False
        self._write(blob)
        self.props = candidate
        return True
