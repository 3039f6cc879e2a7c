from __future__ import annotations

from datetime import UTC, datetime

from tracking.features.host.types import Document, Element, Host


def test_insert_before_first_script():
    doc = Document([Element("meta"), Element("script", {"src": "a.js"}), Element("script")])

    doc.insert_before_first_script(Element("script", {"src": "new.js"}))

    assert [e.attrs.get("src") for e in doc.scripts()] == ["new.js", "a.js", None]
    assert doc.elements[0].tag == "meta"


def test_insert_appends_without_scripts():
    doc = Document()

    doc.insert_before_first_script(Element("script", {"src": "new.js"}))

    assert len(doc.scripts()) == 1


def test_host_clock_is_injectable():
    t0 = datetime(2026, 1, 1, tzinfo=UTC)
    host = Host(clock=lambda: t0)

    assert host.now() == t0
    assert host.supports_cors is True
    assert Host().now().tzinfo is not None


def test_http_client_is_built_lazily_and_closed():
    host = Host()
    assert host.http is None

    client = host.client()
    assert host.client() is client

    host.close()
    assert client.is_closed


def test_injected_http_client_is_left_to_the_caller():
    import httpx

    injected = httpx.Client()
    host = Host(http=injected)

    assert host.client() is injected
    host.close()
    assert not injected.is_closed
    injected.close()
