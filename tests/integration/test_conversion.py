"""Integration tests for converting complete documents.

These tests drive the public API over a realistic article page and check the
interaction of link footnotes, figures, tables, deferred sections and
metadata extraction.
"""

import pytest
from bs4 import BeautifulSoup
from bs4.exceptions import FeatureNotFound

from html2gmi import GemtextOptions, convert, html_to_gemtext
from html2gmi import api
from html2gmi.exceptions import DependencyError, ValidationError

BASE_URL = "https://journal.example.com/gardening/small-spaces"


@pytest.fixture
def article_html(fixtures_dir):
    return (fixtures_dir / "article.html").read_text(encoding="utf-8")


@pytest.fixture
def article(article_html):
    return html_to_gemtext(article_html, base_url=BASE_URL, options=GemtextOptions(extract_metadata=True))


@pytest.mark.integration
class TestArticleConversion:
    """Test the conversion of a full article page."""

    def test_body_order(self, article):
        gemtext = article.gemtext

        positions = [
            gemtext.index("# Gardening in Small Spaces"),
            gemtext.index("By Sam Rivera[1]"),
            gemtext.index("## What to plant"),
            gemtext.index("Watering schedule"),
            gemtext.index("> The best time"),
            gemtext.index("```text"),
            gemtext.index("Happy growing!"),
            gemtext.index("## Site menu"),
            gemtext.index("## Related"),
        ]
        assert positions == sorted(positions)

    def test_starts_with_heading(self, article):
        assert article.gemtext.startswith("# Gardening in Small Spaces\nBy Sam Rivera[1]\n")

    def test_footnotes(self, article):
        assert '=> https://journal.example.com/authors/sam 1. "Sam Rivera"\n' in article.gemtext
        assert (
            "Start with hardy herbs[2] and expand to tomatoes once you know how much sun you get.\n"
            '=> https://seeds.example.org/herbs 2. "hardy herbs" (seeds.example.org)\n'
        ) in article.gemtext

    def test_figure_and_spacer(self, article):
        assert "=> https://journal.example.com/images/balcony.jpg Our balcony in June\n" in article.gemtext
        assert "spacer.gif" not in article.gemtext
        assert [(image.source, image.caption) for image in article.images] == [
            ("https://journal.example.com/images/balcony.jpg", "Our balcony in June")
        ]

    def test_ordered_list(self, article):
        assert "1. Basil\n2. Cherry tomatoes\n3. Lettuce\n" in article.gemtext

    def test_data_table(self, article):
        assert (
            "Watering schedule\n"
            "```Watering schedule\n"
            "+---------+--------------+\n"
            "| Plant   | Days         |\n"
            "+=========+==============+\n"
            "| Basil   | Daily        |\n"
            "+---------+--------------+\n"
            "| Lettuce | Every 2 days |\n"
            "+---------+--------------+\n"
            "```\n"
        ) in article.gemtext

    def test_preformatted(self, article):
        assert "```text\nsoil: 40%\ncompost: 60%\n```\n" in article.gemtext

    def test_deferred_sections(self, article):
        assert article.gemtext.endswith(
            "## Site menu\n"
            "=> https://journal.example.com/ Home\n"
            "=> https://journal.example.com/archive Archive\n"
            "\n"
            "## Related\n"
            "Read more in our composting guide[3].\n"
            '=> https://journal.example.com/archive/composting 3. "our composting guide"'
        )

    def test_non_narrative_content_removed(self, article):
        for text in ("Share", "Subscribe", "analytics", "font-family", "↩", "Example Journal"):
            assert text not in article.gemtext

    def test_no_stacked_blank_lines(self, article):
        assert "\n\n\n" not in article.gemtext
        assert article.gemtext == article.gemtext.strip()

    def test_links_in_discovery_order(self, article):
        assert [(link.order_detected, link.url) for link in article.links] == [
            (1, "https://journal.example.com/authors/sam"),
            (2, "https://seeds.example.org/herbs"),
            (3, "https://journal.example.com/"),
            (4, "https://journal.example.com/archive"),
            (5, "https://journal.example.com/archive/composting"),
        ]
        assert [link.is_external for link in article.links] == [False, True, False, False, False]

    def test_metadata(self, article):
        metadata = article.metadata

        assert metadata.title == "Gardening in Small Spaces | Example Journal"
        assert metadata.feed_url == "https://journal.example.com/feed.xml"
        assert metadata.og_title == "Gardening in Small Spaces"
        assert metadata.og_type == "article"
        assert metadata.og_image == "https://journal.example.com/images/balcony.jpg"
        assert article.url == BASE_URL

    def test_without_base_url_relative_links_are_text(self, article_html):
        result = html_to_gemtext(article_html)

        assert result.gemtext.startswith("# Gardening in Small Spaces\nBy Sam Rivera\n")
        assert [link.url for link in result.links] == ["https://seeds.example.org/herbs"]
        assert result.images == []

    def test_proxy_rewriting(self, article_html):
        options = GemtextOptions(link_url_rewriter=lambda url: "gemini://proxy.example/?" + url)

        result = html_to_gemtext(article_html, base_url=BASE_URL, options=options)

        assert "=> gemini://proxy.example/?https://seeds.example.org/herbs 2." in result.gemtext
        assert result.links[1].url == "https://seeds.example.org/herbs"

    @pytest.mark.parametrize("parser", ["html5lib", "lxml"])
    def test_alternative_parsers(self, article_html, parser):
        pytest.importorskip(parser)

        result = html_to_gemtext(article_html, base_url=BASE_URL, options=GemtextOptions(html_parser=parser))

        assert result.gemtext.startswith("# Gardening in Small Spaces")
        assert "## Site menu" in result.gemtext
        assert "\n\n\n" not in result.gemtext


@pytest.mark.integration
class TestPublicApi:
    """Test the raw-HTML and parsed-tree entry points."""

    def test_bytes_input_uses_declared_charset(self):
        html = '<meta charset="utf-8"><p>Café crème</p>'.encode("utf-8")

        assert html_to_gemtext(html).gemtext == "Café crème"

    def test_invisible_characters_removed(self):
        assert html_to_gemtext("<p>a\x00b\u200bc\ufeff</p>").gemtext == "abc"

    def test_invalid_input_type(self):
        with pytest.raises(ValidationError):
            html_to_gemtext(12345)

    def test_convert_element(self):
        soup = BeautifulSoup("<div><p>Outside</p><article><p>Inside</p></article></div>", "html.parser")

        assert convert(soup.article).gemtext == "Inside"

    def test_missing_tree_builder(self, monkeypatch):
        def unavailable(markup, features):
            raise FeatureNotFound(f"Couldn't find a tree builder with the features you requested: {features}.")

        monkeypatch.setattr(api, "BeautifulSoup", unavailable)

        with pytest.raises(DependencyError) as exc_info:
            api.parse_html("<p>x</p>", "lxml")

        assert exc_info.value.missing_packages == [("lxml", "")]
        assert "lxml" in str(exc_info.value)
