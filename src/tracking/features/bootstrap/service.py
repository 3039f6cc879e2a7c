from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tracking.core.config import TrackerConfig
from tracking.core.logging import get_logger
from tracking.features.call_queue.service import CallQueue
from tracking.features.executor.service import Executor
from tracking.features.host.types import Host
from tracking.features.identity.service import IdGenerator
from tracking.features.storage.duckdb_adapter import CookieJar
from tracking.features.tracker.service import Tracker


@dataclass(frozen=True)
class BootstrapResult:
    queue: CallQueue
    tracker: Tracker
    jar: CookieJar


def bootstrap(
    pending: Iterable[Any] | None,
    host: Host,
    cfg: TrackerConfig | None = None,
    *,
    jar: CookieJar | None = None,
    ids: IdGenerator | None = None,
) -> BootstrapResult:
    """
    Page-load attach step: the pending command buffer the embedding page
    filled before the library arrived is handed over and replaced by the
    real queue, which drains it right away.
    """
    cfg = cfg if cfg is not None else TrackerConfig()
    logger = get_logger("tracking", cfg.logging.level)

    if jar is None:
        jar = CookieJar(path=cfg.storage.duckdb_path, clean_slate=cfg.storage.clean_slate)
    jar.open()

    tracker = Tracker(host=host, jar=jar, cfg=cfg, ids=ids)
    pending = list(pending or [])
    logger.info("attaching call queue pending=%d", len(pending))
    queue = CallQueue(pending, Executor(tracker))

    return BootstrapResult(queue=queue, tracker=tracker, jar=jar)
