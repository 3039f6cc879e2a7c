from __future__ import annotations

import logging
from typing import Any, Protocol

from tracking.features.commands.types import (
    Command,
    Identify,
    Set,
    SetAccount,
    SetOnce,
    TrackEvent,
    Unknown,
    Unset,
)

logger = logging.getLogger(__name__)


class TrackerLike(Protocol):
    def set_account(self, input_id: Any, token: Any) -> bool: ...
    def identify(self, uid: Any) -> bool: ...
    def set(self, props: Any) -> bool: ...
    def set_once(self, props: Any) -> bool: ...
    def unset(self, prop: Any) -> bool: ...
    def track_event(self, props: Any = None, callback: Any = None) -> Any: ...


class Executor:
    """Maps one command onto the tracker method it names."""

    def __init__(self, tracker: TrackerLike) -> None:
        self.tracker = tracker

    def execute(self, cmd: Command) -> Any:
        if isinstance(cmd, SetAccount):
            return self.tracker.set_account(cmd.input_id, cmd.token)
        if isinstance(cmd, Identify):
            return self.tracker.identify(cmd.uid)
        if isinstance(cmd, Set):
            return self.tracker.set(cmd.props)
        if isinstance(cmd, SetOnce):
            return self.tracker.set_once(cmd.props)
        if isinstance(cmd, Unset):
            return self.tracker.unset(cmd.prop)
        if isinstance(cmd, TrackEvent):
            return self.tracker.track_event(cmd.props, cmd.callback)
        if isinstance(cmd, Unknown):
            logger.debug("ignoring unknown call", extra={"method": cmd.method})
            return None
        raise TypeError(f"Unsupported command type={type(cmd).__name__}")
