#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/media.py
"""Image and figure resolution.

Turns ``<img>`` and ``<figure>`` elements into :class:`~html2gmi.models.ImageLink`
values: picks the best source URL (responsive and lazy-loading attributes
first), finds a caption and filters out spacer and tracking images.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import urlparse

from bs4.element import Tag

from html2gmi.constants import IMAGE_LAZY_SOURCE_ATTRIBUTES, IMAGE_SOURCE_ATTRIBUTE, IMAGE_SRCSET_ATTRIBUTES
from html2gmi.dom import get_attr, get_int_attr, is_hidden
from html2gmi.models import ImageLink
from html2gmi.options import GemtextOptions
from html2gmi.text import TextExtractor, collapse_whitespace
from html2gmi.urls import create_url

logger = logging.getLogger(__name__)


def srcset_candidates(srcset: str) -> list[str]:
    """Return the candidate URLs of a ``srcset`` value, in order.

    Candidates are separated by a comma that follows a URL or a descriptor.
    Commas inside a URL, such as the one in a ``data:`` URI, are part of that
    URL.

    Examples
    --------
    >>> srcset_candidates("small.jpg 480w, large.jpg 1080w")
    ['small.jpg', 'large.jpg']
    >>> srcset_candidates("data:image/gif;base64,R0lGOD 1x,/real.jpg 2x")
    ['data:image/gif;base64,R0lGOD', '/real.jpg']

    """
    candidates: list[str] = []
    expect_url = True
    for token in srcset.split():
        if not expect_url:
            # a descriptor, possibly with the next URL glued after its comma
            _, comma, token = token.partition(",")
            if not comma:
                continue
            expect_url = True
            if not token:
                continue
        if token.endswith(","):
            url = token.rstrip(",")
        else:
            url = token
            expect_url = False
        if url:
            candidates.append(url)
    return candidates


class MediaResolver:
    """Resolve images and figures against a page URL.

    Parameters
    ----------
    base_url : str or None
        Absolute URL of the page, used to resolve relative sources
    options : GemtextOptions, optional
        Caption default and spacer thresholds

    """

    def __init__(self, base_url: Optional[str] = None, options: Optional[GemtextOptions] = None) -> None:
        self.base_url = base_url
        self.options = options or GemtextOptions()
        self._spacer_pattern = re.compile(self.options.spacer_filename_pattern, re.IGNORECASE)

    def image_url(self, img: Tag) -> Optional[str]:
        """Pick the absolute source URL of an image.

        Candidates are tried in order: the ``srcset`` entries, the lazy-load
        attributes, then ``src``. The first candidate that resolves to an
        http(s) URL wins, so inline ``data:`` placeholders are passed over.
        """
        candidates: list[str] = []
        for attr in IMAGE_SRCSET_ATTRIBUTES:
            candidates.extend(srcset_candidates(get_attr(img, attr)))
        candidates.extend(get_attr(img, attr) for attr in IMAGE_LAZY_SOURCE_ATTRIBUTES)
        candidates.append(get_attr(img, IMAGE_SOURCE_ATTRIBUTE))

        for candidate in candidates:
            if not candidate:
                continue
            url = create_url(candidate, self.base_url)
            if url:
                return url
            logger.debug(f"Ignoring unusable image source: {candidate[:100]}")
        return None

    def image_caption(self, img: Tag) -> str:
        """Return the image's alt text, else its title, else the default caption."""
        for attr in ("alt", "title"):
            text = collapse_whitespace(get_attr(img, attr)).strip()
            if text:
                return text
        return self.options.default_image_caption

    def figure_caption(self, figure: Tag, img: Tag) -> str:
        """Return the figure's ``<figcaption>`` text, falling back to the image caption."""
        figcaption = figure.find("figcaption")
        if isinstance(figcaption, Tag) and not is_hidden(figcaption):
            text = TextExtractor(max_depth=self.options.max_depth).extract(figcaption)
            if text:
                return text
        return self.image_caption(img)

    def is_spacer(self, img: Tag, url: str) -> bool:
        """Detect spacer and tracking images.

        An image is a spacer when its declared ``width`` or ``height`` is below
        the configured threshold, or when its filename matches the spacer
        pattern (``spacer.gif``, ``1x1.png``, ``pixel.gif`` ...).
        """
        threshold = self.options.spacer_max_dimension
        for attr in ("width", "height"):
            dimension = get_int_attr(img, attr)
            if dimension is not None and dimension < threshold:
                return True

        try:
            filename = posixpath.basename(urlparse(url).path)
        except ValueError:
            return False
        return bool(filename and self._spacer_pattern.search(filename))

    def resolve_image(self, img: Tag, caption: Optional[str] = None) -> Optional[ImageLink]:
        """Resolve an ``<img>`` element.

        Parameters
        ----------
        img : Tag
            The image element
        caption : str, optional
            Caption to use instead of the image's own alt/title text

        Returns
        -------
        ImageLink or None
            None when the image has no usable source or is a spacer

        """
        url = self.image_url(img)
        if url is None:
            return None

        if self.is_spacer(img, url):
            logger.debug(f"Dropping spacer image: {url}")
            return None

        return ImageLink(
            source=url,
            caption=caption or self.image_caption(img),
            is_map=img.has_attr("usemap"),
        )

    def resolve_figure(self, figure: Tag) -> Optional[ImageLink]:
        """Resolve a ``<figure>`` to its first visible image, captioned by the figcaption."""
        for img in figure.find_all("img"):
            if is_hidden(img):
                continue
            image = self.resolve_image(img, caption=self.figure_caption(figure, img))
            if image is not None:
                return image
        return None


__all__ = ["MediaResolver", "srcset_candidates"]
