from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_EVENTS_API = "https://events.bitdeli.com/events"


@dataclass(frozen=True)
class EndpointConfig:
    events_api: str = DEFAULT_EVENTS_API


@dataclass(frozen=True)
class CookieConfig:
    prefix: str = "bd_"
    expiry_days: int = 365
    path: str = "/"


@dataclass(frozen=True)
class StorageConfig:
    duckdb_path: str = ":memory:"
    clean_slate: bool = False


@dataclass(frozen=True)
class MetadataConfig:
    max_string_length: int = 1023
    max_depth: int = 8


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class TrackerConfig:
    endpoint: EndpointConfig = EndpointConfig()
    cookie: CookieConfig = CookieConfig()
    storage: StorageConfig = StorageConfig()
    metadata: MetadataConfig = MetadataConfig()
    logging: LoggingConfig = LoggingConfig()


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    data = yaml.safe_load(p.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config YAML must parse to a dict at the top level.")
    return data


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{key}' must be a mapping.")
    return section


def parse_config(data: dict[str, Any]) -> TrackerConfig:
    if not isinstance(data, dict):
        raise ValueError("Config must be a dict at the top level.")

    endpoint = _section(data, "endpoint")
    cookie = _section(data, "cookie")
    storage = _section(data, "storage")
    metadata = _section(data, "metadata")
    logging_cfg = _section(data, "logging")

    endpoint_cfg = EndpointConfig(
        events_api=str(endpoint.get("events_api", DEFAULT_EVENTS_API)).rstrip("/"),
    )

    cookie_cfg = CookieConfig(
        prefix=str(cookie.get("prefix", "bd_")),
        expiry_days=int(cookie.get("expiry_days", 365)),
        path=str(cookie.get("path", "/")),
    )
    if cookie_cfg.expiry_days <= 0:
        raise ValueError("cookie.expiry_days must be positive")

    storage_cfg = StorageConfig(
        duckdb_path=str(storage.get("duckdb_path", ":memory:")),
        clean_slate=bool(storage.get("clean_slate", False)),
    )

    metadata_cfg = MetadataConfig(
        max_string_length=int(metadata.get("max_string_length", 1023)),
        max_depth=int(metadata.get("max_depth", 8)),
    )
    if metadata_cfg.max_string_length < 0 or metadata_cfg.max_depth < 0:
        raise ValueError("metadata limits must be non-negative")

    log_cfg = LoggingConfig(level=str(logging_cfg.get("level", "INFO")).upper())

    return TrackerConfig(
        endpoint=endpoint_cfg,
        cookie=cookie_cfg,
        storage=storage_cfg,
        metadata=metadata_cfg,
        logging=log_cfg,
    )


def load_config(path: str | Path) -> TrackerConfig:
    data = load_yaml(path)
    return parse_config(data)
