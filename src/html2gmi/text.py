#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/text.py
"""Plain-text helpers used by the converter.

This module extracts the visible text of a subtree (anchor labels, captions,
table cells) and transliterates sub- and superscript text to unicode.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from bs4.element import Tag

from html2gmi.buffer import GemtextBuffer
from html2gmi.constants import DEFAULT_MAX_DEPTH, SUBSCRIPT_MARKER, SUPERSCRIPT_MARKER
from html2gmi.dom import get_attr, is_block_element, is_text_node, should_skip

if TYPE_CHECKING:
    from html2gmi.media import MediaResolver
    from html2gmi.models import ImageLink

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

SUPERSCRIPT_MAP = {
    "0": "⁰", "1": "¹", "2": "²", "3": "³", "4": "⁴",
    "5": "⁵", "6": "⁶", "7": "⁷", "8": "⁸", "9": "⁹",
    "+": "⁺", "-": "⁻", "=": "⁼", "(": "⁽", ")": "⁾", " ": " ",
    "a": "ᵃ", "b": "ᵇ", "c": "ᶜ", "d": "ᵈ", "e": "ᵉ", "f": "ᶠ", "g": "ᵍ",
    "h": "ʰ", "i": "ⁱ", "j": "ʲ", "k": "ᵏ", "l": "ˡ", "m": "ᵐ", "n": "ⁿ",
    "o": "ᵒ", "p": "ᵖ", "r": "ʳ", "s": "ˢ", "t": "ᵗ", "u": "ᵘ", "v": "ᵛ",
    "w": "ʷ", "x": "ˣ", "y": "ʸ", "z": "ᶻ",
    "A": "ᴬ", "B": "ᴮ", "D": "ᴰ", "E": "ᴱ", "G": "ᴳ", "H": "ᴴ", "I": "ᴵ",
    "J": "ᴶ", "K": "ᴷ", "L": "ᴸ", "M": "ᴹ", "N": "ᴺ", "O": "ᴼ", "P": "ᴾ",
    "R": "ᴿ", "T": "ᵀ", "U": "ᵁ", "V": "ⱽ", "W": "ᵂ",
}  # fmt: skip

SUBSCRIPT_MAP = {
    "0": "₀", "1": "₁", "2": "₂", "3": "₃", "4": "₄",
    "5": "₅", "6": "₆", "7": "₇", "8": "₈", "9": "₉",
    "+": "₊", "-": "₋", "=": "₌", "(": "₍", ")": "₎", " ": " ",
    "a": "ₐ", "e": "ₑ", "h": "ₕ", "i": "ᵢ", "j": "ⱼ", "k": "ₖ", "l": "ₗ",
    "m": "ₘ", "n": "ₙ", "o": "ₒ", "p": "ₚ", "r": "ᵣ", "s": "ₛ", "t": "ₜ",
    "u": "ᵤ", "v": "ᵥ", "x": "ₓ",
}  # fmt: skip


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace (including newlines) with one space.

    Examples
    --------
    >>> collapse_whitespace("  a\\n\\t b ")
    ' a b '

    """
    return _WHITESPACE.sub(" ", text)


def _transliterate(text: str, table: dict[str, str], marker: str) -> str:
    text = collapse_whitespace(text).strip()
    if not text:
        return ""
    if all(char in table for char in text):
        return "".join(table[char] for char in text)
    if len(text) == 1:
        return f"{marker}{text}"
    return f"{marker}({text})"


def to_superscript(text: str) -> str:
    """Render text as superscript.

    Text made only of characters with a unicode superscript form is
    transliterated; anything else falls back to ``^x`` or ``^(text)``.

    Examples
    --------
    >>> to_superscript("2")
    '²'
    >>> to_superscript("th!")
    '^(th!)'

    """
    return _transliterate(text, SUPERSCRIPT_MAP, SUPERSCRIPT_MARKER)


def to_subscript(text: str) -> str:
    """Render text as subscript, falling back to ``˅x`` or ``˅(text)``."""
    return _transliterate(text, SUBSCRIPT_MAP, SUBSCRIPT_MARKER)


class TextExtractor:
    """Extract the visible text of an element subtree.

    Hidden and always-skipped elements contribute nothing. Line breaks and
    block boundaries become newlines unless ``collapse_newlines`` is set, in
    which case the result is a single line. Images found along the way are
    resolved through ``media`` and made available in :attr:`images`, with
    their alt text in :attr:`image_alt_texts`.

    Parameters
    ----------
    media : MediaResolver, optional
        Resolver used to surface nested images. Without one, images are ignored.
    collapse_newlines : bool, default True
        Join the extracted text into a single line
    max_depth : int, default 128
        Maximum nesting depth descended into

    """

    def __init__(
        self,
        media: Optional[MediaResolver] = None,
        collapse_newlines: bool = True,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.media = media
        self.collapse_newlines = collapse_newlines
        self.max_depth = max_depth
        self.images: list[ImageLink] = []
        self.image_alt_texts: list[str] = []
        self._buffer = GemtextBuffer()

    def extract(self, node: Any) -> str:
        """Return the visible text of ``node``.

        :attr:`images` and :attr:`image_alt_texts` are reset on every call.
        """
        self._buffer = GemtextBuffer()
        self.images = []
        self.image_alt_texts = []

        self._extract(node, 0)

        text = self._buffer.content
        if self.collapse_newlines:
            return collapse_whitespace(text).strip()
        return text.strip()

    def _extract(self, node: Any, depth: int) -> None:
        if is_text_node(node):
            self._buffer.append(collapse_whitespace(str(node)))
            return

        if not isinstance(node, Tag):
            return

        if depth > self.max_depth:
            logger.debug("Text extraction stopped at depth %d in <%s>", depth, node.name)
            return

        if should_skip(node):
            return

        name = node.name.lower()

        if name == "br":
            self._buffer.append_line()
            return

        if name == "img":
            self._extract_image(node)
            return

        if name in ("sub", "sup"):
            inner = TextExtractor(max_depth=self.max_depth).extract(node)
            self._buffer.append(to_subscript(inner) if name == "sub" else to_superscript(inner))
            return

        block = is_block_element(node)
        if block:
            self._buffer.ensure_at_line_start()

        for child in node.children:
            self._extract(child, depth + 1)

        if block:
            self._buffer.ensure_at_line_start()

    def _extract_image(self, img: Tag) -> None:
        alt = " ".join(get_attr(img, "alt").split())
        if alt:
            self.image_alt_texts.append(alt)

        if self.media is None:
            return

        image = self.media.resolve_image(img)
        if image is not None:
            self.images.append(image)


__all__ = ["TextExtractor", "collapse_whitespace", "to_subscript", "to_superscript", "SUBSCRIPT_MAP", "SUPERSCRIPT_MAP"]
