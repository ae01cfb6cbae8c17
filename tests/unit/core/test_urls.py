"""Unit tests for core/utils/urls.py"""

import pytest

from mdxld.core.utils.urls import is_absolute_url, is_internal_url, is_relative_path, resolve_url


@pytest.mark.parametrize("url,expected", [
    ("https://a.test/x", True),
    ("ftp://files.test/f", True),
    ("/abs/path", False),
    ("./rel", False),
    ("mailto:a@b.test", False),
])
def test_is_absolute_url(url, expected):
    assert is_absolute_url(url) is expected


def test_is_relative_path():
    assert is_relative_path("./a")
    assert is_relative_path("../a")
    assert not is_relative_path("a")
    assert not is_relative_path("/a")


@pytest.mark.parametrize("url,base,expected", [
    ("./img.png", "https://example.com", "https://example.com/img.png"),
    ("/guide", "https://example.com/docs/", "https://example.com/guide"),
    ("../up", "https://example.com/docs/a/", "https://example.com/docs/up"),
    ("#frag", "https://example.com/page", "https://example.com/page#frag"),
    ("https://other.com/a", "https://example.com", "https://other.com/a"),
    ("./img.png", None, "./img.png"),
    ("./img.png", "not a base", "./img.png"),
])
def test_resolve_url(url, base, expected):
    assert resolve_url(url, base) == expected


@pytest.mark.parametrize("url,expected", [
    ("https://example.com/a", True),
    ("http://example.com/b", True),
    ("./relative", True),
    ("/root", True),
    ("https://other.com/a", False),
    ("https://sub.example.com/a", False),
    ("https://example.com:8080/a", False),
    ("https://example.com:443/x", True),
    ("http://example.com:80/x", True),
    ("http://example.com:443/x", False),
])
def test_is_internal_url(url, expected):
    assert is_internal_url(url, "https://example.com") is expected


def test_is_internal_url_without_base():
    assert is_internal_url("https://example.com/a", None) is False
