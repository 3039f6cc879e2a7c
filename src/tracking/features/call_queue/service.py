from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

from tracking.core.version import LIBRARY_VERSION
from tracking.features.commands.service import parse_call
from tracking.features.commands.types import Command


class ExecutorLike(Protocol):
    def execute(self, cmd: Command) -> Any: ...


def partition(calls: Iterable[Any]) -> list[Command]:
    """
    Dispatch order for a batch of raw calls:
      1. the last call whose name contains "setAccount"
      2. every other non-tracking call, in arrival order
      3. every call whose name contains "track", in arrival order
    Ill-formed entries are dropped.
    """
    set_account: Command | None = None
    config_calls: list[Command] = []
    tracking_calls: list[Command] = []

    for raw in calls:
        cmd = parse_call(raw)
        if cmd is None:
            continue
        if "setAccount" in cmd.method:
            set_account = cmd
        elif "track" in cmd.method:
            tracking_calls.append(cmd)
        else:
            config_calls.append(cmd)

    ordered: list[Command] = [set_account] if set_account is not None else []
    return ordered + config_calls + tracking_calls


class CallQueue:
    """
    Takes over from the pre-attachment buffer: drains it on construction and
    dispatches every later push() immediately. Nothing is held back.
    """

    library_version = LIBRARY_VERSION

    def __init__(self, pending: Iterable[Any] | None, executor: ExecutorLike) -> None:
        self.executor = executor
        self.execute_all(pending or [])

    def push(self, *calls: Any) -> None:
        self.execute_all(calls)

    def execute_all(self, calls: Iterable[Any]) -> None:
        for cmd in partition(calls):
            self.executor.execute(cmd)
