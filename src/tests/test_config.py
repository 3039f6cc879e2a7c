import pytest

from tracking.core.config import DEFAULT_EVENTS_API, load_config, parse_config


def test_defaults_when_sections_missing():
    cfg = parse_config({})

    assert cfg.endpoint.events_api == DEFAULT_EVENTS_API
    assert cfg.cookie.prefix == "bd_"
    assert cfg.cookie.expiry_days == 365
    assert cfg.cookie.path == "/"
    assert cfg.storage.duckdb_path == ":memory:"
    assert cfg.metadata.max_string_length == 1023
    assert cfg.logging.level == "INFO"


def test_values_are_parsed(tmp_path):
    p = tmp_path / "tracking.yaml"
    p.write_text(
        "endpoint:\n"
        "  events_api: https://collect.example.com/events/\n"
        "cookie:\n"
        "  expiry_days: 30\n"
        "logging:\n"
        "  level: debug\n"
    )

    cfg = load_config(p)

    assert cfg.endpoint.events_api == "https://collect.example.com/events"
    assert cfg.cookie.expiry_days == 30
    assert cfg.logging.level == "DEBUG"


def test_empty_file_gives_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("")

    assert load_config(p).cookie.expiry_days == 365


def test_rejects_bad_shapes(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n")

    with pytest.raises(ValueError):
        load_config(p)
    with pytest.raises(ValueError):
        parse_config({"cookie": "nope"})
    with pytest.raises(ValueError):
        parse_config({"cookie": {"expiry_days": 0}})


def test_parsed_config_keeps_no_source_document():
    cfg = parse_config({"endpoint": {"events_api": "https://x.example/events"}, "extra": 1})

    assert not hasattr(cfg, "raw")
