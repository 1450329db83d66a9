#  Copyright (c) 2025 Tom Villani, Ph.D.
"""html2gmi - Convert HTML documents to Gemtext.

Gemtext, the markup of the Gemini protocol, is line oriented: every line is
plain text, a heading, a list item, a quote, a preformatted toggle or a link.
html2gmi walks a BeautifulSoup tree and folds the much richer HTML model into
those line types:

- headings collapse to at most three levels
- links inside running text become ``text[n]`` markers with numbered footnote
  link lines after the paragraph
- images and figures become captioned link lines, with spacer and tracking
  images dropped
- layout tables are flattened and data tables rendered as fixed-width grids
- ``<aside>`` and ``<nav>`` are moved after the main content

Examples
--------
Convert raw HTML:

    >>> from html2gmi import html_to_gemtext
    >>> result = html_to_gemtext("<h1>Title</h1><p>Hello</p>")
    >>> print(result.gemtext)
    # Title
    Hello

Convert an already-parsed tree with options:

    >>> from bs4 import BeautifulSoup
    >>> from html2gmi import GemtextOptions, convert
    >>> soup = BeautifulSoup(page_html, "html.parser")  # doctest: +SKIP
    >>> result = convert(soup, base_url="https://example.com/", options=GemtextOptions(render_links=False))  # doctest: +SKIP

"""

from html2gmi.api import convert, html_to_gemtext
from html2gmi.converter import HtmlToGemtextConverter
from html2gmi.exceptions import (
    DependencyError,
    Html2GmiError,
    InvalidOptionsError,
    ParsingError,
    ValidationError,
)
from html2gmi.models import ConvertedContent, HtmlMetadata, Hyperlink, ImageLink
from html2gmi.options import GemtextOptions

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "convert",
    "html_to_gemtext",
    "HtmlToGemtextConverter",
    "GemtextOptions",
    "ConvertedContent",
    "HtmlMetadata",
    "Hyperlink",
    "ImageLink",
    "Html2GmiError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "DependencyError",
]
