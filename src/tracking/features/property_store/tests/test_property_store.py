from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from tracking.features.property_store.service import (
    UID_KEY,
    PropertyStore,
    cookie_name,
)
from tracking.features.storage.duckdb_adapter import CookieJar

T0 = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.fixture
def jar():
    j = CookieJar()
    j.open()
    yield j
    j.close()


def make_store(jar, *, name="bd_acc", now=T0):
    return PropertyStore(jar=jar, name=name, clock=lambda: now)


def test_set_once_keeps_first_value(jar):
    store = make_store(jar)

    assert store.set_once({UID_KEY: "first"}) is True
    assert store.set_once({UID_KEY: "second"}) is True

    assert store.get(UID_KEY) == "first"


def test_set_overwrites(jar):
    store = make_store(jar)

    store.set({UID_KEY: "first"})
    store.set({UID_KEY: "second"})

    assert store.get(UID_KEY) == "second"


def test_set_once_fills_only_missing_keys(jar):
    store = make_store(jar)
    store.set({"plan": "free"})

    store.set_once({"plan": "pro", "country": "fi"})

    assert store.properties() == {"plan": "free", "country": "fi"}


def test_properties_hides_uid_but_get_returns_it(jar):
    store = make_store(jar)
    store.set({UID_KEY: "u1", "plan": "free"})

    assert store.properties() == {"plan": "free"}
    assert store.get(UID_KEY) == "u1"


def test_properties_is_a_copy(jar):
    store = make_store(jar)
    store.set({"a": 1})

    store.properties()["a"] = 2

    assert store.get("a") == 1


def test_set_rejects_non_mapping(jar):
    store = make_store(jar)

    assert store.set(["a", 1]) is False
    assert store.set("a") is False
    assert store.set_once(None) is False
    assert jar.get("bd_acc", now=T0) is None


def test_unset(jar):
    store = make_store(jar)
    store.set({"a": 1, "b": 2})

    assert store.unset("missing") is False
    assert store.unset("a") is True
    assert store.get("a") is None

    reloaded = make_store(jar)
    assert reloaded.properties() == {"b": 2}


def test_roundtrip_through_fresh_instance(jar):
    store = make_store(jar)
    store.set({UID_KEY: "u1", "n": 3, "tags": ["x", "y"], "nested": {"k": None}})

    fresh = make_store(jar)

    assert fresh.props == store.props


def test_every_mutation_rewrites_full_blob(jar):
    store = make_store(jar)
    store.set({"a": 1})
    store.set({"b": 2})

    assert json.loads(jar.get("bd_acc", now=T0)) == {"a": 1, "b": 2}


def test_blob_expires_after_horizon(jar):
    store = make_store(jar)
    store.set({"a": 1})

    later = make_store(jar, now=T0 + timedelta(days=366))

    assert later.props == {}


def test_malformed_blob_loads_as_empty(jar):
    jar.set("bd_acc", "{not json", expires_days=1, now=T0)

    store = make_store(jar)

    assert store.props == {}
    assert store.set({"a": 1}) is True
    assert json.loads(jar.get("bd_acc", now=T0)) == {"a": 1}


def test_non_object_blob_loads_as_empty(jar):
    jar.set("bd_acc", "[1, 2]", expires_days=1, now=T0)

    assert make_store(jar).props == {}


def test_cookie_name_is_prefixed_and_escaped():
    assert cookie_name("input", "token") == "bd_inputtoken"
    assert cookie_name("in put", "t;k", prefix="x_") == "x_in%20putt%3Bk"


def test_unserializable_key_is_rejected_and_store_keeps_working(jar):
    store = make_store(jar)
    store.set({"a": 1})

    assert store.set({("a", "b"): 1}) is False
    assert store.props == {"a": 1}

    assert store.set({"ok": 1}) is True
    assert store.set_once({UID_KEY: "u1"}) is True
    assert store.unset("a") is True
    assert json.loads(jar.get("bd_acc", now=T0)) == {"ok": 1, UID_KEY: "u1"}


def test_circular_value_is_rejected_without_touching_blob(jar):
    store = make_store(jar)
    store.set({"a": 1})
    loop: dict = {}
    loop["self"] = loop

    assert store.set({"loop": loop}) is False
    assert json.loads(jar.get("bd_acc", now=T0)) == {"a": 1}
