from __future__ import annotations

from tracking.core.version import LIBRARY_NAME, LIBRARY_VERSION
from tracking.features.host.types import Page
from tracking.features.metadata.service import collect, library_markers, page_info, truncate


def test_page_info_snapshots_page():
    page = Page(url="https://shop.example/cart", user_agent="Mozilla/5.0", referrer="https://a.b/")

    assert page_info(page) == {
        "url": "https://shop.example/cart",
        "ua": "Mozilla/5.0",
        "referrer": "https://a.b/",
    }


def test_page_info_strips_empty_fields():
    assert page_info(Page(url="https://x.example/", user_agent="", referrer="")) == {
        "url": "https://x.example/"
    }
    assert page_info(Page()) == {}


def test_page_info_truncates_long_values():
    long_url = "https://x.example/?" + "q" * 5000

    info = page_info(Page(url=long_url))

    assert len(info["url"]) == 1023
    assert info["url"] == long_url[:1023]


def test_truncate_walks_nested_structures():
    value = {"a": "x" * 10, "b": ["y" * 10, {"c": "z" * 10}], "n": 5, "t": ("w" * 10,)}

    out = truncate(value, max_length=3)

    assert out == {"a": "xxx", "b": ["yyy", {"c": "zzz"}], "n": 5, "t": ["www"]}


def test_truncate_is_bounded_by_depth():
    deep = {"l1": {"l2": {"l3": "v"}}}

    assert truncate(deep, max_depth=2) == {"l1": {"l2": None}}
    assert truncate(deep, max_depth=3) == deep


def test_collect_puts_markers_under_page_info():
    out = collect(Page(url="https://x.example/"))

    assert out == {
        "$lib": LIBRARY_NAME,
        "$lv": LIBRARY_VERSION,
        "url": "https://x.example/",
    }
    assert library_markers() == {"$lib": LIBRARY_NAME, "$lv": LIBRARY_VERSION}
