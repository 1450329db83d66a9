#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/metadata.py
"""Page metadata extraction from ``<head>``."""

from __future__ import annotations

import logging
from typing import Any, Optional

from bs4.element import Tag

from html2gmi.dom import get_attr
from html2gmi.models import HtmlMetadata
from html2gmi.text import collapse_whitespace
from html2gmi.urls import create_url

logger = logging.getLogger(__name__)

FEED_TYPES = frozenset({"application/rss+xml", "application/atom+xml"})

# Open Graph property -> HtmlMetadata text field
_OPEN_GRAPH_FIELDS = {
    "og:title": "og_title",
    "og:description": "og_description",
    "og:site_name": "og_site_name",
    "og:type": "og_type",
}


def _normalize(text: Optional[str]) -> str:
    return collapse_whitespace(text or "").strip()


class MetadataParser:
    """Read the title, feed link and Open Graph fields of a page.

    Parameters
    ----------
    base_url : str or None
        Absolute URL of the page, used to resolve the feed and image URLs

    """

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = base_url

    def parse(self, document: Any) -> HtmlMetadata:
        r"""Extract metadata from a parsed document.

        Parameters
        ----------
        document : BeautifulSoup or Tag
            Parsed HTML document

        Returns
        -------
        HtmlMetadata
            Extracted metadata. Fields that are missing from the page stay empty.

        Notes
        -----
        The feed URL is taken from the first ``<link rel="alternate">`` with an
        RSS or Atom type whose title does not mention comments. Open Graph
        fields come from ``<meta property="og:\*">`` tags.

        Examples
        --------
        >>> from bs4 import BeautifulSoup
        >>> soup = BeautifulSoup("<head><title> My  Page </title></head>", "html.parser")
        >>> MetadataParser().parse(soup).title
        'My Page'

        """
        metadata = HtmlMetadata()
        if not isinstance(document, Tag):
            return metadata

        head = document.find("head")
        scope = head if isinstance(head, Tag) else document

        title_tag = scope.find("title")
        if isinstance(title_tag, Tag):
            metadata.title = _normalize(title_tag.get_text())

        metadata.feed_url = self._find_feed_url(scope)

        for meta in scope.find_all("meta", attrs={"property": True}):
            prop = get_attr(meta, "property").lower()
            content = _normalize(get_attr(meta, "content"))
            if prop == "og:image":
                metadata.og_image = create_url(content, self.base_url)
            elif prop in _OPEN_GRAPH_FIELDS:
                setattr(metadata, _OPEN_GRAPH_FIELDS[prop], content)

        logger.debug(f"Extracted metadata fields: {sorted(metadata.to_dict())}")
        return metadata

    def _find_feed_url(self, scope: Tag) -> Optional[str]:
        for link in scope.find_all("link", href=True):
            rel = get_attr(link, "rel").lower().split()
            if "alternate" not in rel:
                continue
            if get_attr(link, "type").lower() not in FEED_TYPES:
                continue
            if "comment" in get_attr(link, "title").lower():
                continue
            url = create_url(get_attr(link, "href"), self.base_url)
            if url:
                return url
        return None


__all__ = ["MetadataParser", "FEED_TYPES"]
