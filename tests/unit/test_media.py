"""Unit tests for image and figure resolution."""

import pytest

from html2gmi.media import MediaResolver, srcset_candidates
from html2gmi.options import GemtextOptions

BASE = "https://example.com/articles/"


@pytest.fixture
def resolver():
    return MediaResolver(BASE)


@pytest.mark.unit
class TestImageSource:
    """Test source URL selection."""

    def test_srcset_candidate_preferred(self, soup, resolver):
        img = soup('<img srcset="/s.jpg 480w, /l.jpg 1080w" src="/x.jpg">').img

        assert resolver.image_url(img) == "https://example.com/s.jpg"

    def test_lazy_source_preferred_over_src(self, soup, resolver):
        img = soup('<img data-src="/real.jpg" src="data:image/gif;base64,R0lGOD">').img

        assert resolver.image_url(img) == "https://example.com/real.jpg"

    def test_falls_back_to_src(self, soup, resolver):
        img = soup('<img src="photo.png">').img

        assert resolver.image_url(img) == "https://example.com/articles/photo.png"

    def test_no_usable_source(self, soup, resolver):
        img = soup('<img src="javascript:alert(1)">').img

        assert resolver.image_url(img) is None
        assert resolver.resolve_image(img) is None

    def test_data_uri_srcset_candidate_passed_over(self, soup, resolver):
        img = soup('<img srcset="data:image/gif;base64,R0lGOD, /real.jpg 2x" src="/x.jpg">').img

        assert resolver.image_url(img) == "https://example.com/real.jpg"

    @pytest.mark.parametrize(
        "srcset,expected",
        [
            ("a.jpg 1x, b.jpg 2x", ["a.jpg", "b.jpg"]),
            ("a.jpg 1x,b.jpg 2x", ["a.jpg", "b.jpg"]),
            ("a.jpg, b.jpg", ["a.jpg", "b.jpg"]),
            ("data:image/png;base64,iVBOR 1x, b.jpg 2x", ["data:image/png;base64,iVBOR", "b.jpg"]),
            ("  ", []),
        ],
    )
    def test_srcset_candidates(self, srcset, expected):
        assert srcset_candidates(srcset) == expected


@pytest.mark.unit
class TestCaptions:
    """Test caption selection."""

    def test_alt_then_title_then_default(self, soup, resolver):
        assert resolver.image_caption(soup('<img alt=" A  cat " title="T">').img) == "A cat"
        assert resolver.image_caption(soup('<img title="Title text">').img) == "Title text"
        assert resolver.image_caption(soup("<img>").img) == "Article Image"

    def test_custom_default_caption(self, soup):
        resolver = MediaResolver(BASE, GemtextOptions(default_image_caption="Picture"))

        assert resolver.image_caption(soup("<img>").img) == "Picture"

    def test_figure_caption_from_figcaption(self, soup, resolver):
        doc = soup('<figure><img src="/a.jpg" alt="Alt"><figcaption>A <em>nice</em> view</figcaption></figure>')

        image = resolver.resolve_figure(doc.figure)

        assert image.source == "https://example.com/a.jpg"
        assert image.caption == "A nice view"

    def test_figure_caption_falls_back_to_alt(self, soup, resolver):
        doc = soup('<figure><img src="/a.jpg" alt="Alt"><figcaption> </figcaption></figure>')

        assert resolver.resolve_figure(doc.figure).caption == "Alt"

    def test_figure_without_image(self, soup, resolver):
        doc = soup("<figure><blockquote>Quote</blockquote><figcaption>Who</figcaption></figure>")

        assert resolver.resolve_figure(doc.figure) is None


@pytest.mark.unit
class TestSpacers:
    """Test spacer and tracking-pixel detection."""

    @pytest.mark.parametrize(
        "html",
        [
            '<img src="/spacer.gif">',
            '<img src="/img/1x1.png">',
            '<img src="/t/pixel.gif?id=3">',
            '<img src="/photo.jpg" width="1" height="1">',
            '<img src="/photo.jpg" width="2px">',
        ],
    )
    def test_spacers_dropped(self, soup, resolver, html):
        assert resolver.resolve_image(soup(html).img) is None

    @pytest.mark.parametrize(
        "html",
        [
            '<img src="/pixel-art-story.png">',
            '<img src="/photo.jpg" width="640" height="480">',
            '<img src="/clearwater.jpg">',
        ],
    )
    def test_regular_images_kept(self, soup, resolver, html):
        assert resolver.resolve_image(soup(html).img) is not None

    def test_threshold_is_configurable(self, soup):
        resolver = MediaResolver(BASE, GemtextOptions(spacer_max_dimension=100))

        assert resolver.resolve_image(soup('<img src="/icon.png" width="32">').img) is None


@pytest.mark.unit
def test_usemap_marks_image_map(soup, resolver):
    image = resolver.resolve_image(soup('<img src="/map.png" usemap="#m" alt="Map">').img)

    assert image.is_map is True
    assert image.caption == "Map"
