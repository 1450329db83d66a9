"""Unit tests for text extraction and sub/superscript transliteration."""

import pytest

from html2gmi.media import MediaResolver
from html2gmi.text import TextExtractor, collapse_whitespace, to_subscript, to_superscript


@pytest.mark.unit
class TestTransliteration:
    """Test unicode sub/superscript rendering."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2", "²"),
            ("10", "¹⁰"),
            ("st", "ˢᵗ"),
            ("n+1", "ⁿ⁺¹"),
            ("!", "^!"),
            ("th!", "^(th!)"),
            ("  ", ""),
        ],
    )
    def test_superscript(self, text, expected):
        assert to_superscript(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2", "₂"),
            ("i", "ᵢ"),
            ("xyz", "˅(xyz)"),
            ("q", "˅q"),
        ],
    )
    def test_subscript(self, text, expected):
        assert to_subscript(text) == expected

    def test_collapse_whitespace(self):
        assert collapse_whitespace("a \n\t b") == "a b"


@pytest.mark.unit
class TestTextExtractor:
    """Test visible-text extraction."""

    def test_hidden_content_ignored(self, soup):
        doc = soup('<a>Hello <b>world</b><span style="display:none">hidden</span><script>x()</script></a>')

        assert TextExtractor().extract(doc.a) == "Hello world"

    def test_whitespace_collapsed_to_single_line(self, soup):
        doc = soup("<td>  Two\n   lines<br>here  </td>")

        assert TextExtractor().extract(doc.td) == "Two lines here"

    def test_line_breaks_kept_when_not_collapsing(self, soup):
        doc = soup("<td>a<br>b</td>")

        assert TextExtractor(collapse_newlines=False).extract(doc.td) == "a\nb"

    def test_superscript_inside_text(self, soup):
        doc = soup("<span>x<sup>2</sup></span>")

        assert TextExtractor().extract(doc.span) == "x²"

    def test_images_are_surfaced(self, soup):
        doc = soup('<a href="/story"><img src="/thumb.jpg" alt="Thumb"></a>')
        extractor = TextExtractor(media=MediaResolver("https://example.com/"))

        assert extractor.extract(doc.a) == ""
        assert extractor.image_alt_texts == ["Thumb"]
        assert [image.source for image in extractor.images] == ["https://example.com/thumb.jpg"]

    def test_images_ignored_without_resolver(self, soup):
        doc = soup('<a><img src="https://example.com/i.jpg" alt="Alt"></a>')
        extractor = TextExtractor()
        extractor.extract(doc.a)

        assert extractor.images == []
        assert extractor.image_alt_texts == ["Alt"]

    def test_depth_limit(self, soup):
        doc = soup("<div>" * 10 + "deep" + "</div>" * 10)

        assert TextExtractor(max_depth=3).extract(doc.div) == ""
