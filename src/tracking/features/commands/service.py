from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import (
    IDENTIFY,
    SET,
    SET_ACCOUNT,
    SET_ONCE,
    TRACK_EVENT,
    UNSET,
    Command,
    Identify,
    Set,
    SetAccount,
    SetOnce,
    TrackEvent,
    Unknown,
    Unset,
)


def parse_call(raw: Any) -> Command | None:
    """
    Turn one queued `[methodName, *args]` entry into a command.

    Returns None for entries that are not a list/tuple headed by a string;
    those are dropped by the queue without any signal.
    """
    if not isinstance(raw, (list, tuple)) or not raw:
        return None
    method = raw[0]
    if not isinstance(method, str):
        return None
    args = tuple(raw[1:])
    # older snippets queue underscore-prefixed names (`_trackEvent`)
    name = method[1:] if method.startswith("_") else method

    if name == SET_ACCOUNT:
        if len(args) >= 2 and isinstance(args[0], str) and isinstance(args[1], str):
            return SetAccount(method=method, input_id=args[0], token=args[1])
    elif name == IDENTIFY:
        if args and isinstance(args[0], str):
            return Identify(method=method, uid=args[0])
    elif name in (SET, SET_ONCE):
        if args and isinstance(args[0], Mapping):
            cls = Set if name == SET else SetOnce
            return cls(method=method, props=args[0])
    elif name == UNSET:
        if args and isinstance(args[0], str):
            return Unset(method=method, prop=args[0])
    elif name == TRACK_EVENT:
        props = args[0] if args else None
        if props is None:
            props = {}
        callback = args[1] if len(args) > 1 and callable(args[1]) else None
        if isinstance(props, Mapping):
            return TrackEvent(method=method, props=props, callback=callback)

    return Unknown(method=method, args=args)
