"""Unit tests for GemtextOptions validation and cloning."""

from dataclasses import FrozenInstanceError

import pytest

from html2gmi.options import GemtextOptions


@pytest.mark.unit
class TestGemtextOptions:
    """Test option defaults, validation and cloning."""

    def test_defaults(self):
        options = GemtextOptions()

        assert options.render_links is True
        assert options.allow_duplicate_links is False
        assert options.defer_secondary_content is True
        assert options.default_image_caption == "Article Image"
        assert options.deferred_section_titles == {"aside": "Related", "nav": "Navigation"}
        assert options.max_depth == 128
        assert options.html_parser == "html.parser"

    def test_frozen(self):
        options = GemtextOptions()

        with pytest.raises(FrozenInstanceError):
            options.render_links = False

    def test_create_updated(self):
        options = GemtextOptions(render_links=False)
        updated = options.create_updated(allow_duplicate_links=True)

        assert updated.render_links is False
        assert updated.allow_duplicate_links is True
        assert options.allow_duplicate_links is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_depth": 0},
            {"spacer_max_dimension": -1},
            {"default_image_caption": "  "},
            {"html_parser": "xml"},
            {"spacer_filename_pattern": "(unclosed"},
            {"link_url_rewriter": "not callable"},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            GemtextOptions(**kwargs)

    def test_rewriters(self):
        options = GemtextOptions(
            link_url_rewriter=lambda url: "gemini://proxy/?" + url,
            image_url_rewriter=str.upper,
        )

        assert options.rewrite_link_url("https://a/") == "gemini://proxy/?https://a/"
        assert options.rewrite_image_url("https://a/i.png") == "HTTPS://A/I.PNG"
        assert GemtextOptions().rewrite_link_url("https://a/") == "https://a/"

    def test_deferred_titles_not_shared_between_instances(self):
        assert GemtextOptions().deferred_section_titles is not GemtextOptions().deferred_section_titles
