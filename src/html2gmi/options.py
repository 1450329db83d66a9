#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML to Gemtext conversion.

Options are immutable dataclasses. Use ``create_updated`` to derive a modified
copy instead of mutating an instance:

    >>> from html2gmi.options import GemtextOptions
    >>> options = GemtextOptions(render_links=False)
    >>> verbose = options.create_updated(allow_duplicate_links=True)
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from html2gmi.constants import (
    DEFAULT_ALLOW_DUPLICATE_LINKS,
    DEFAULT_DEFER_SECONDARY_CONTENT,
    DEFAULT_DEFERRED_SECTION_TITLES,
    DEFAULT_EXTRACT_METADATA,
    DEFAULT_HTML_PARSER,
    DEFAULT_IMAGE_CAPTION,
    DEFAULT_INCLUDE_IMAGES,
    DEFAULT_MAX_DEPTH,
    DEFAULT_RENDER_LINKS,
    DEFAULT_SPACER_FILENAME_PATTERN,
    DEFAULT_SPACER_MAX_DIMENSION,
    HtmlParser,
)

UrlRewriter = Callable[[str], str]


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class GemtextOptions(CloneFrozenMixin):
    """Configuration options for HTML to Gemtext conversion.

    Parameters
    ----------
    link_url_rewriter : callable or None, default None
        Function applied to every emitted hyperlink URL (after resolution).
        ``None`` emits the absolute URL verbatim. Useful for routing links
        through a Gemini proxy.
    image_url_rewriter : callable or None, default None
        Function applied to every emitted image URL. ``None`` emits the
        absolute URL verbatim.
    render_links : bool, default True
        When False, anchors render as their text only and no link lines or
        footnotes are produced.
    allow_duplicate_links : bool, default False
        When True, a URL that is already registered still renders as a link
        each time it appears.
    include_images : bool, default True
        When False, images and figures are neither rendered nor collected.
    default_image_caption : str, default "Article Image"
        Caption used when an image has no figcaption, alt or title text.
    spacer_max_dimension : int, default 5
        Images whose declared width or height is below this many pixels are
        treated as spacers and dropped.
    spacer_filename_pattern : str, default (spacer/pixel filenames)
        Regular expression matched (case-insensitively) against the image
        filename to detect spacer and tracking-pixel images.
    defer_secondary_content : bool, default True
        Render ``<aside>`` and ``<nav>`` after the main body, each under its
        own section heading, instead of inline.
    deferred_section_titles : mapping, default {"aside": "Related", "nav": "Navigation"}
        Section heading per deferred tag, used when the element has no
        ``aria-label``.
    max_depth : int, default 128
        Maximum element nesting depth converted. Deeper subtrees are skipped
        and a warning is logged.
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder used when converting raw HTML.
    extract_metadata : bool, default False
        Read title, feed URL and Open Graph fields from ``<head>``.

    """

    link_url_rewriter: Optional[UrlRewriter] = field(
        default=None,
        metadata={"help": "Function applied to every emitted link URL", "importance": "advanced"},
    )
    image_url_rewriter: Optional[UrlRewriter] = field(
        default=None,
        metadata={"help": "Function applied to every emitted image URL", "importance": "advanced"},
    )
    render_links: bool = field(
        default=DEFAULT_RENDER_LINKS,
        metadata={"help": "Render hyperlinks as link lines and footnotes", "cli_name": "no-links", "importance": "core"},
    )
    allow_duplicate_links: bool = field(
        default=DEFAULT_ALLOW_DUPLICATE_LINKS,
        metadata={"help": "Render a URL as a link every time it appears", "importance": "core"},
    )
    include_images: bool = field(
        default=DEFAULT_INCLUDE_IMAGES,
        metadata={"help": "Render and collect images", "cli_name": "no-images", "importance": "core"},
    )
    default_image_caption: str = field(
        default=DEFAULT_IMAGE_CAPTION,
        metadata={"help": "Caption for images without figcaption/alt/title text", "importance": "advanced"},
    )
    spacer_max_dimension: int = field(
        default=DEFAULT_SPACER_MAX_DIMENSION,
        metadata={"help": "Images smaller than this many pixels are dropped as spacers", "importance": "advanced"},
    )
    spacer_filename_pattern: str = field(
        default=DEFAULT_SPACER_FILENAME_PATTERN,
        metadata={"help": "Regex matching spacer/tracking image filenames", "importance": "advanced"},
    )
    defer_secondary_content: bool = field(
        default=DEFAULT_DEFER_SECONDARY_CONTENT,
        metadata={"help": "Render aside/nav after the main content", "cli_name": "no-defer", "importance": "core"},
    )
    deferred_section_titles: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_DEFERRED_SECTION_TITLES),
        metadata={"help": "Section heading per deferred tag", "importance": "advanced"},
    )
    max_depth: int = field(
        default=DEFAULT_MAX_DEPTH,
        metadata={"help": "Maximum element nesting depth converted", "importance": "security"},
    )
    html_parser: HtmlParser = field(
        default=DEFAULT_HTML_PARSER,
        metadata={
            "help": "BeautifulSoup tree builder for raw HTML",
            "choices": ["html.parser", "html5lib", "lxml"],
            "importance": "advanced",
        },
    )
    extract_metadata: bool = field(
        default=DEFAULT_EXTRACT_METADATA,
        metadata={"help": "Read title, feed URL and Open Graph fields from <head>", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

        if self.spacer_max_dimension < 0:
            raise ValueError(f"spacer_max_dimension must be non-negative, got {self.spacer_max_dimension}")

        if not self.default_image_caption.strip():
            raise ValueError("default_image_caption must not be empty")

        if self.html_parser not in ("html.parser", "html5lib", "lxml"):
            raise ValueError(f"html_parser must be one of html.parser, html5lib, lxml, got {self.html_parser!r}")

        try:
            re.compile(self.spacer_filename_pattern)
        except re.error as e:
            raise ValueError(f"spacer_filename_pattern is not a valid regular expression: {e}") from e

        for callback_name in ("link_url_rewriter", "image_url_rewriter"):
            callback = getattr(self, callback_name)
            if callback is not None and not callable(callback):
                raise ValueError(f"{callback_name} must be callable or None")

    def rewrite_link_url(self, url: str) -> str:
        """Apply the link rewriter to an absolute URL, if one is configured."""
        return self.link_url_rewriter(url) if self.link_url_rewriter else url

    def rewrite_image_url(self, url: str) -> str:
        """Apply the image rewriter to an absolute URL, if one is configured."""
        return self.image_url_rewriter(url) if self.image_url_rewriter else url


__all__ = ["CloneFrozenMixin", "GemtextOptions", "UrlRewriter"]
