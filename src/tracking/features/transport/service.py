from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from tracking.core.ids import canonical_json
from tracking.core.types import AccountCredentials
from tracking.features.host.types import Element, Host

from .types import (
    RESPONSE_FAILED,
    RESPONSE_UNPARSABLE,
    Envelope,
    TrackCallback,
    Transport,
)

logger = logging.getLogger(__name__)

_B64URL = str.maketrans({"+": "_", "/": "-"})


def encode_event(event: dict[str, Any]) -> str:
    """base64 of the compact JSON, '+' -> '_', '/' -> '-', padding stripped."""
    raw = base64.b64encode(canonical_json(event).encode("utf-8")).decode("ascii")
    return raw.translate(_B64URL).rstrip("=")


class PostTransport:
    """
    Credentialed cross-origin POST. The round trip runs as a process on the
    host loop, so the callback fires on a later env.run() step.
    """

    name = "post"

    def __init__(self, host: Host) -> None:
        self.host = host

    def send(self, url: str, envelope: Envelope, callback: TrackCallback | None) -> None:
        self.host.env.process(self._round_trip(url, envelope, callback))

    def _round_trip(self, url: str, envelope: Envelope, callback: TrackCallback | None):
        yield self.host.env.timeout(0)
        result = self.deliver(url, envelope)
        if callback is not None:
            callback(result, envelope.event)

    def deliver(self, url: str, envelope: Envelope) -> Any:
        """
        Returns the parsed JSON body on 2xx, RESPONSE_UNPARSABLE when the
        body is not JSON, RESPONSE_FAILED on any other outcome.
        """
        try:
            body = canonical_json(envelope.as_dict()).encode("utf-8")
        except (TypeError, ValueError) as exc:
            logger.warning(
                "dropping unserializable event error=%s",
                exc,
                extra={"transport": self.name, "url": url},
            )
            return RESPONSE_FAILED

        try:
            response = self.host.client().post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TransportError as exc:
            logger.warning(
                "event delivery failed error=%s",
                exc,
                extra={"transport": self.name, "url": url},
            )
            return RESPONSE_FAILED

        if not response.is_success:
            logger.warning(
                "event rejected",
                extra={"transport": self.name, "url": url, "status": response.status_code},
            )
            return RESPONSE_FAILED

        try:
            return response.json()
        except ValueError:
            return RESPONSE_UNPARSABLE


class JsonpTransport:
    """
    Fire-and-forget GET through an injected script element.
    Nothing is read back, so callbacks are never invoked.
    """

    name = "jsonp"

    def __init__(self, host: Host) -> None:
        self.host = host

    def build_url(self, url: str, envelope: Envelope) -> str:
        params: dict[str, str] = {}
        if envelope.auth:
            params["auth"] = envelope.auth
        if envelope.uid:
            params["uid"] = envelope.uid
        if envelope.event:
            params["event"] = encode_event(envelope.event)
        if not params:
            return url
        return f"{url}?{urlencode(params)}"

    def send(self, url: str, envelope: Envelope, callback: TrackCallback | None) -> None:
        try:
            src = self.build_url(url, envelope)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "dropping unserializable event error=%s",
                exc,
                extra={"transport": self.name, "url": url},
            )
            return
        script = Element(tag="script", attrs={"type": "text/javascript", "async": True, "src": src})
        self.host.document.insert_before_first_script(script)
        logger.debug("script injected", extra={"transport": self.name, "url": url})


def select_transport(host: Host) -> Transport:
    if host.supports_cors:
        return PostTransport(host)
    return JsonpTransport(host)


class Request:
    """
    One event, one delivery attempt. The transport is picked once, here.
    """

    def __init__(
        self,
        host: Host,
        *,
        endpoint: str,
        credentials: AccountCredentials,
        uid: str | None,
        event: dict[str, Any],
        callback: TrackCallback | None = None,
    ) -> None:
        self.host = host
        self.transport = select_transport(host)
        self.url = f"{endpoint.rstrip('/')}/{quote(credentials.input_id, safe='')}"
        self.envelope = Envelope(auth=credentials.token, uid=uid, event=event)
        self.callback = callback

    def send(self) -> None:
        self.transport.send(self.url, self.envelope, self.callback)
