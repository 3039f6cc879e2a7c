from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tracking.core.version import LIBRARY_NAME, LIBRARY_VERSION
from tracking.features.host.types import Page

MAX_STRING_LENGTH = 1023
MAX_DEPTH = 8


def truncate(value: Any, max_length: int = MAX_STRING_LENGTH, max_depth: int = MAX_DEPTH) -> Any:
    """
    Cut every string to max_length, walking into dicts, lists and tuples.
    Containers nested deeper than max_depth are replaced by None.
    """
    return _truncate(value, max_length, max_depth, 0)


def _truncate(value: Any, max_length: int, max_depth: int, depth: int) -> Any:
    if isinstance(value, str):
        return value[:max_length]
    if isinstance(value, Mapping):
        if depth >= max_depth:
            return None
        return {k: _truncate(v, max_length, max_depth, depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        if depth >= max_depth:
            return None
        return [_truncate(v, max_length, max_depth, depth + 1) for v in value]
    return value


def page_info(
    page: Page, *, max_length: int = MAX_STRING_LENGTH, max_depth: int = MAX_DEPTH
) -> dict[str, Any]:
    """Snapshot of the page at call time; empty fields are left out."""
    info = {
        "url": page.url,
        "ua": page.user_agent,
        "referrer": page.referrer,
    }
    return {k: truncate(v, max_length, max_depth) for k, v in info.items() if v != ""}


def library_markers() -> dict[str, str]:
    return {"$lib": LIBRARY_NAME, "$lv": LIBRARY_VERSION}


def collect(
    page: Page, *, max_length: int = MAX_STRING_LENGTH, max_depth: int = MAX_DEPTH
) -> dict[str, Any]:
    """Lowest-precedence layer of every outgoing event."""
    out: dict[str, Any] = dict(library_markers())
    out.update(page_info(page, max_length=max_length, max_depth=max_depth))
    return out
