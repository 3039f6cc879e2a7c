from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

# Method names accepted on the public call surface.
SET_ACCOUNT = "setAccount"
IDENTIFY = "identify"
SET = "set"
SET_ONCE = "setOnce"
UNSET = "unset"
TRACK_EVENT = "trackEvent"


@dataclass(frozen=True, slots=True)
class SetAccount:
    method: str
    input_id: str
    token: str


@dataclass(frozen=True, slots=True)
class Identify:
    method: str
    uid: str


@dataclass(frozen=True, slots=True)
class Set:
    method: str
    props: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class SetOnce:
    method: str
    props: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Unset:
    method: str
    prop: str


@dataclass(frozen=True, slots=True)
class TrackEvent:
    method: str
    props: Mapping[str, Any]
    callback: Callable[[Any, dict[str, Any]], Any] | None = None


@dataclass(frozen=True, slots=True)
class Unknown:
    """
    A well-formed call the library does not implement, or a known method
    called with arguments of the wrong shape. Dispatching it is a no-op.
    """

    method: str
    args: tuple[Any, ...] = ()


Command = SetAccount | Identify | Set | SetOnce | Unset | TrackEvent | Unknown
