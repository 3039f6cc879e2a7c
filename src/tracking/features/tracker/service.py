from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tracking.core.config import TrackerConfig
from tracking.core.types import AccountCredentials
from tracking.features.host.types import Host
from tracking.features.identity.service import IdentityResolver, IdGenerator
from tracking.features.metadata.service import collect
from tracking.features.property_store.service import (
    UID_KEY,
    CookieJarLike,
    PropertyStore,
    cookie_name,
)
from tracking.features.transport.service import Request
from tracking.features.transport.types import TrackCallback

logger = logging.getLogger(__name__)


class Tracker:
    """
    One library instance on a page: account credentials, the visitor's
    property store and the send path. Bad input is ignored, never raised.
    """

    def __init__(
        self,
        *,
        host: Host,
        jar: CookieJarLike,
        cfg: TrackerConfig | None = None,
        ids: IdGenerator | None = None,
    ) -> None:
        self.host = host
        self.jar = jar
        self.cfg = cfg if cfg is not None else TrackerConfig()
        self._ids = ids

        self.credentials: AccountCredentials | None = None
        self.store: PropertyStore | None = None
        self.identity: IdentityResolver | None = None

    # ----------------------------
    # Account / identity
    # ----------------------------
    def set_account(self, input_id: Any, token: Any) -> bool:
        if not isinstance(input_id, str) or not isinstance(token, str):
            return False
        self.credentials = AccountCredentials(input_id=input_id, token=token)

        cookie_cfg = self.cfg.cookie
        self.store = PropertyStore(
            jar=self.jar,
            name=cookie_name(input_id, token, prefix=cookie_cfg.prefix),
            expiry_days=cookie_cfg.expiry_days,
            path=cookie_cfg.path,
            clock=self.host.now,
        )
        self.identity = IdentityResolver(self.store, ids=self._ids)
        logger.debug("account set", extra={"input_id": input_id})
        return True

    @property
    def uid(self) -> str | None:
        return self.store.get(UID_KEY) if self.store is not None else None

    def identify(self, uid: Any) -> bool:
        if self.identity is None:
            return self._no_account("identify")
        return self.identity.identify(uid)

    # ----------------------------
    # Properties
    # ----------------------------
    def set(self, props: Any) -> bool:
        if self.store is None:
            return self._no_account("set")
        return self.store.set(props)

    def set_once(self, props: Any) -> bool:
        if self.store is None:
            return self._no_account("setOnce")
        return self.store.set_once(props)

    def unset(self, prop: Any) -> bool:
        if self.store is None:
            return self._no_account("unset")
        if not isinstance(prop, str):
            return False
        return self.store.unset(prop)

    # ----------------------------
    # Events
    # ----------------------------
    def build_event(self, props: Mapping[str, Any]) -> dict[str, Any]:
        """metadata < persisted properties < call-site properties"""
        meta_cfg = self.cfg.metadata
        event = collect(
            self.host.page,
            max_length=meta_cfg.max_string_length,
            max_depth=meta_cfg.max_depth,
        )
        if self.store is not None:
            event.update(self.store.properties())
        event.update(props)
        return event

    def track_event(
        self, props: Any = None, callback: TrackCallback | None = None
    ) -> Request | None:
        if self.credentials is None or self.store is None:
            self._no_account("trackEvent")
            return None
        if props is None:
            props = {}
        if not isinstance(props, Mapping):
            logger.debug("ignoring trackEvent with non-mapping props", extra={"method": "trackEvent"})
            return None
        if not callable(callback):
            callback = None

        request = Request(
            self.host,
            endpoint=self.cfg.endpoint.events_api,
            credentials=self.credentials,
            uid=self.uid,
            event=self.build_event(props),
            callback=callback,
        )
        request.send()
        logger.debug(
            "event sent",
            extra={"input_id": self.credentials.input_id, "transport": request.transport.name},
        )
        return request

    def _no_account(self, method: str) -> bool:
        logger.debug("dropping call before setAccount", extra={"method": method})
        return False
