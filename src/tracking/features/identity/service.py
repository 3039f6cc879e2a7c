from __future__ import annotations

from typing import Protocol

from tracking.core.ids import VisitorIdGenerator
from tracking.features.property_store.service import UID_KEY, PropertyStore


class IdGenerator(Protocol):
    def generate(self) -> str: ...


class IdentityResolver:
    """
    Assigns a visitor id the first time a store is seen and keeps it afterwards.
    """

    def __init__(self, store: PropertyStore, ids: IdGenerator | None = None) -> None:
        self.store = store
        self.ids = ids if ids is not None else VisitorIdGenerator()
        # store.load() already ran in its constructor
        self.store.set_once({UID_KEY: self.generate()})

    def generate(self) -> str:
        return self.ids.generate()

    @property
    def uid(self) -> str | None:
        return self.store.get(UID_KEY)

    def identify(self, uid: object) -> bool:
        if not isinstance(uid, str):
            return False
        return self.store.set({UID_KEY: uid})
