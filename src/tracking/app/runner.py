from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import httpx

from tracking.core.config import load_config
from tracking.features.bootstrap.service import bootstrap
from tracking.features.host.types import Host, Page


@dataclass(frozen=True)
class ReplayResult:
    uid: str | None
    requests: int
    scripts: int


def load_calls(path: str | Path) -> list:
    data = json.loads(Path(path).read_text())
    if not isinstance(data, list):
        raise ValueError("Calls file must hold a JSON array of [method, ...args] entries.")
    return data


def replay(
    config_path: str,
    calls_path: str,
    *,
    page: Page | None = None,
    supports_cors: bool = True,
    http: httpx.Client | None = None,
) -> ReplayResult:
    cfg = load_config(config_path)
    calls = load_calls(calls_path)

    requests = 0

    def _count(request: httpx.Request) -> None:
        nonlocal requests
        requests += 1

    client = http if http is not None else httpx.Client()
    client.event_hooks["request"].append(_count)

    host = Host(page=page or Page(), http=client, supports_cors=supports_cors)
    result = bootstrap(calls, host, cfg)
    try:
        host.env.run()
    finally:
        result.jar.close()
        if http is None:
            client.close()

    return ReplayResult(
        uid=result.tracker.uid,
        requests=requests,
        scripts=len(host.document.scripts()),
    )
