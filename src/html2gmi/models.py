#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/models.py
"""Result and value types produced by a conversion.

All URLs stored in these models are absolute http(s) URLs, already resolved
against the page's base URL. URL rewriters configured in
:class:`~html2gmi.options.GemtextOptions` only affect the Gemtext output, never
the values recorded here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Hyperlink:
    """A hyperlink discovered in the document body.

    Parameters
    ----------
    url : str
        Absolute http(s) URL
    text : str
        Display text. May be upgraded by the registry when a longer, unseen
        label for the same URL is found.
    order_detected : int
        Discovery-order index assigned by the registry, starting at 1
    is_external : bool
        True when the link's host is not the page's host (or a subdomain of it)

    """

    url: str
    text: str
    order_detected: int = 0
    is_external: bool = False


@dataclass
class ImageLink:
    """An image or figure resolved from the document.

    Parameters
    ----------
    source : str
        Absolute http(s) URL of the image
    caption : str
        Caption text, never empty
    is_map : bool
        True when the image is a client-side image map (``usemap``)

    """

    source: str
    caption: str
    is_map: bool = False


@dataclass
class HtmlMetadata:
    """Page-level metadata read from ``<head>``."""

    title: str = ""
    feed_url: Optional[str] = None
    og_title: str = ""
    og_description: str = ""
    og_image: Optional[str] = None
    og_site_name: str = ""
    og_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the non-empty fields as a dictionary."""
        return {key: value for key, value in self.__dict__.items() if value}


@dataclass
class ConvertedContent:
    """The result bundle of a conversion.

    Parameters
    ----------
    gemtext : str
        The Gemtext output, with trailing whitespace trimmed
    links : list of Hyperlink
        Registered hyperlinks ordered by discovery index
    images : list of ImageLink
        Resolved images in first-seen order
    url : str or None
        The base URL the document was converted against
    metadata : HtmlMetadata or None
        Page metadata, when extraction was requested

    """

    gemtext: str
    links: list[Hyperlink] = field(default_factory=list)
    images: list[ImageLink] = field(default_factory=list)
    url: Optional[str] = None
    metadata: Optional[HtmlMetadata] = None


__all__ = ["Hyperlink", "ImageLink", "HtmlMetadata", "ConvertedContent"]
