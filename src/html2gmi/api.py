#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/api.py
"""Public conversion entry points.

Two functions cover the common cases:

- :func:`convert` for a tree that is already parsed (a ``BeautifulSoup``
  document or any ``Tag``)
- :func:`html_to_gemtext` for raw HTML, which is parsed with the configured
  BeautifulSoup tree builder first

Examples
--------
>>> from html2gmi import html_to_gemtext
>>> result = html_to_gemtext("<p>See <a href='/docs'>the docs</a>.</p>", base_url="https://example.com/")
>>> print(result.gemtext)
See the docs[1].
=> https://example.com/docs 1. "the docs"

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Union

from bs4 import BeautifulSoup
from bs4.exceptions import FeatureNotFound

from html2gmi.constants import DEPS_HTML_PARSERS
from html2gmi.converter import HtmlToGemtextConverter
from html2gmi.exceptions import DependencyError, ParsingError, ValidationError
from html2gmi.models import ConvertedContent
from html2gmi.options import GemtextOptions

logger = logging.getLogger(__name__)

# Null bytes and zero-width characters never carry visible text
_INVISIBLE_CHARS = re.compile("[\x00\ufeff\u200b\u200c\u200d\u2060]")


def sanitize_null_bytes(text: str) -> str:
    """Remove null bytes and zero-width characters from text."""
    return _INVISIBLE_CHARS.sub("", text)


def parse_html(html: Union[str, bytes], html_parser: str = "html.parser") -> BeautifulSoup:
    """Parse raw HTML with BeautifulSoup.

    Parameters
    ----------
    html : str or bytes
        HTML markup. Bytes are decoded by BeautifulSoup, which honours a
        ``<meta charset>`` declaration.
    html_parser : str, default "html.parser"
        BeautifulSoup tree builder

    Returns
    -------
    BeautifulSoup
        The parsed document

    Raises
    ------
    ValidationError
        If ``html`` is neither str nor bytes
    DependencyError
        If the requested tree builder is not installed
    ParsingError
        If BeautifulSoup fails to build a tree

    """
    if not isinstance(html, (str, bytes)):
        raise ValidationError(
            f"HTML input must be str or bytes, got {type(html).__name__}",
            parameter_name="html",
            parameter_value=type(html).__name__,
        )

    if isinstance(html, str):
        html = sanitize_null_bytes(html)

    try:
        return BeautifulSoup(html, html_parser)
    except FeatureNotFound as e:
        package = DEPS_HTML_PARSERS.get(html_parser)
        missing_packages = [(package[0], package[2])] if package else []
        raise DependencyError(
            converter_name="html2gmi",
            missing_packages=missing_packages,
            message=f"Selected html_parser {html_parser!r} is not available: {e}.",
            original_import_error=e,
        ) from e
    except (ValueError, TypeError, AssertionError) as e:
        raise ParsingError(f"Failed to parse HTML: {e}", parsing_stage="tree_building", original_error=e) from e


def convert(root: Any, base_url: Optional[str] = None, options: Optional[GemtextOptions] = None) -> ConvertedContent:
    """Convert a parsed HTML tree to Gemtext.

    Parameters
    ----------
    root : BeautifulSoup or Tag
        Parsed document or element
    base_url : str, optional
        Absolute URL of the page, used to resolve relative links and images
    options : GemtextOptions, optional
        Conversion options

    Returns
    -------
    ConvertedContent
        Gemtext plus ordered links, images and optional metadata

    """
    return HtmlToGemtextConverter(options).convert(root, base_url)


def html_to_gemtext(
    html: Union[str, bytes], base_url: Optional[str] = None, options: Optional[GemtextOptions] = None
) -> ConvertedContent:
    """Parse raw HTML and convert it to Gemtext.

    Parameters
    ----------
    html : str or bytes
        HTML markup
    base_url : str, optional
        Absolute URL of the page, used to resolve relative links and images
    options : GemtextOptions, optional
        Conversion options. ``options.html_parser`` selects the tree builder.

    Returns
    -------
    ConvertedContent
        Gemtext plus ordered links, images and optional metadata

    """
    converter = HtmlToGemtextConverter(options)
    soup = parse_html(html, converter.options.html_parser)
    return converter.convert(soup, base_url)


__all__ = ["convert", "html_to_gemtext", "parse_html", "sanitize_null_bytes"]
