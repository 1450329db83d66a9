"""Unit tests for URL helpers."""

import pytest

from html2gmi.urls import create_url, display_host, has_script_scheme, is_external, is_fragment_only, is_same_page


@pytest.mark.unit
class TestCreateUrl:
    """Test absolute URL creation."""

    @pytest.mark.parametrize(
        "url,base,expected",
        [
            ("/p", "https://site.example/a/", "https://site.example/p"),
            ("p", "https://site.example/a/", "https://site.example/a/p"),
            ("https://other.example/x", "https://site.example/", "https://other.example/x"),
            ("https://other.example/x", None, "https://other.example/x"),
            ("/a b", "https://site.example/", "https://site.example/a%20b"),
            ("/a\n/b", "https://site.example/", "https://site.example/a/b"),
        ],
    )
    def test_resolves(self, url, base, expected):
        assert create_url(url, base) == expected

    @pytest.mark.parametrize(
        "url,base",
        [
            (None, "https://site.example/"),
            ("", "https://site.example/"),
            ("   ", "https://site.example/"),
            ("/relative", None),
            ("javascript:void(0)", "https://site.example/"),
            ("mailto:someone@example.com", "https://site.example/"),
            ("data:image/gif;base64,R0lGOD", "https://site.example/"),
            ("ftp://files.example/x", None),
            ("https://", None),
            ("http://[::1", None),
        ],
    )
    def test_rejects(self, url, base):
        assert create_url(url, base) is None


@pytest.mark.unit
class TestUrlClassification:
    """Test link classification helpers."""

    def test_fragment_only(self):
        assert is_fragment_only("#top")
        assert is_fragment_only("  #top")
        assert not is_fragment_only("/page#top")
        assert not is_fragment_only(None)

    def test_script_scheme(self):
        assert has_script_scheme("javascript:alert(1)")
        assert has_script_scheme(" JavaScript:void(0)")
        assert not has_script_scheme("https://example.com/")

    def test_same_page_ignores_fragment(self):
        assert is_same_page("https://a.example/p#x", "https://a.example/p")
        assert not is_same_page("https://a.example/q", "https://a.example/p")
        assert not is_same_page("https://a.example/p", None)

    def test_display_host_strips_www(self):
        assert display_host("https://www.example.com/x") == "example.com"
        assert display_host("https://blog.example.com/x") == "blog.example.com"

    def test_external_is_host_suffix_match(self):
        base = "https://www.example.com/article"
        assert not is_external("https://example.com/a", base)
        assert not is_external("https://blog.example.com/a", base)
        assert is_external("https://example.org/a", base)
        assert is_external("https://notexample.com/a", base)

    def test_nothing_is_external_without_base(self):
        assert not is_external("https://example.org/a", None)
