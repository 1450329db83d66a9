#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/converter.py
"""HTML to Gemtext conversion.

This module walks a BeautifulSoup tree and writes Gemtext through a
:class:`~html2gmi.buffer.GemtextBuffer`. Every element is classified into an
:class:`ElementCategory`; each category is handled by exactly one method.

Gemtext only allows links on lines of their own, so the walk interleaves two
concerns: text flows into the buffer as it is found, while links that appear
inside running text are written as ``text[n]`` markers and queued. The queue
is flushed at every block boundary, either as numbered footnote link lines or,
when the link was the whole line, by rewriting that line into a link line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from bs4.element import Tag

from html2gmi.buffer import GemtextBuffer
from html2gmi.constants import (
    BACKLINK_CLASSES,
    BACKLINK_GLYPHS,
    BACKLINK_ROLES,
    BULLET_MARKER,
    DEFERRED_SECTION_HEADING_LEVEL,
    HEADING_MARKER,
    HORIZONTAL_RULE,
    INLINE_QUOTE_CLOSE,
    INLINE_QUOTE_OPEN,
    MAX_HEADING_LEVEL,
    PREFORMATTED_FENCE,
)
from html2gmi.dom import (
    get_aria_label,
    get_attr,
    get_classes,
    get_roles,
    is_block_element,
    is_text_node,
    should_skip,
)
from html2gmi.exceptions import InvalidOptionsError, ValidationError
from html2gmi.links import FootnoteQueue, LinkCollection
from html2gmi.media import MediaResolver
from html2gmi.metadata import MetadataParser
from html2gmi.models import ConvertedContent, Hyperlink, ImageLink
from html2gmi.options import GemtextOptions
from html2gmi.tables import TableReducer, parse_table, render_table
from html2gmi.text import TextExtractor, collapse_whitespace, to_subscript, to_superscript
from html2gmi.urls import create_url, has_script_scheme, is_external, is_fragment_only, is_same_page

logger = logging.getLogger(__name__)

_LANGUAGE_CLASS = re.compile(r"^(?:language|lang)-([A-Za-z0-9_+\-]+)$")


class ElementCategory(Enum):
    """The closed set of element handlers."""

    HEADING = "heading"
    LIST = "list"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    PREFORMATTED = "preformatted"
    RULE = "rule"
    PARAGRAPH = "paragraph"
    EMPHASIS = "emphasis"
    INLINE_QUOTE = "inline_quote"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    ANCHOR = "anchor"
    AREA = "area"
    IMAGE = "image"
    FIGURE = "figure"
    TABLE = "table"
    LINE_BREAK = "line_break"
    DEFINITION_LIST = "definition_list"
    DEFINITION_TERM = "definition_term"
    DEFINITION = "definition"
    DEFERRED = "deferred"
    SKIP = "skip"
    GENERIC_BLOCK = "generic_block"
    GENERIC_INLINE = "generic_inline"


_TAG_CATEGORIES: dict[str, ElementCategory] = {
    "h1": ElementCategory.HEADING,
    "h2": ElementCategory.HEADING,
    "h3": ElementCategory.HEADING,
    "h4": ElementCategory.HEADING,
    "h5": ElementCategory.HEADING,
    "h6": ElementCategory.HEADING,
    "ul": ElementCategory.LIST,
    "ol": ElementCategory.LIST,
    "menu": ElementCategory.LIST,
    "li": ElementCategory.LIST_ITEM,
    "blockquote": ElementCategory.BLOCKQUOTE,
    "pre": ElementCategory.PREFORMATTED,
    "hr": ElementCategory.RULE,
    "p": ElementCategory.PARAGRAPH,
    "em": ElementCategory.EMPHASIS,
    "i": ElementCategory.EMPHASIS,
    "strong": ElementCategory.EMPHASIS,
    "b": ElementCategory.EMPHASIS,
    "u": ElementCategory.EMPHASIS,
    "s": ElementCategory.EMPHASIS,
    "strike": ElementCategory.EMPHASIS,
    "del": ElementCategory.EMPHASIS,
    "ins": ElementCategory.EMPHASIS,
    "mark": ElementCategory.EMPHASIS,
    "small": ElementCategory.EMPHASIS,
    "big": ElementCategory.EMPHASIS,
    "cite": ElementCategory.EMPHASIS,
    "dfn": ElementCategory.EMPHASIS,
    "code": ElementCategory.EMPHASIS,
    "kbd": ElementCategory.EMPHASIS,
    "samp": ElementCategory.EMPHASIS,
    "var": ElementCategory.EMPHASIS,
    "tt": ElementCategory.EMPHASIS,
    "q": ElementCategory.INLINE_QUOTE,
    "sub": ElementCategory.SUBSCRIPT,
    "sup": ElementCategory.SUPERSCRIPT,
    "a": ElementCategory.ANCHOR,
    "area": ElementCategory.AREA,
    "img": ElementCategory.IMAGE,
    "figure": ElementCategory.FIGURE,
    "table": ElementCategory.TABLE,
    "br": ElementCategory.LINE_BREAK,
    "dl": ElementCategory.DEFINITION_LIST,
    "dt": ElementCategory.DEFINITION_TERM,
    "dd": ElementCategory.DEFINITION,
    "aside": ElementCategory.DEFERRED,
    "nav": ElementCategory.DEFERRED,
}

_CATEGORY_HANDLERS: dict[ElementCategory, str] = {
    ElementCategory.HEADING: "_convert_heading",
    ElementCategory.LIST: "_convert_list",
    ElementCategory.LIST_ITEM: "_convert_list_item",
    ElementCategory.BLOCKQUOTE: "_convert_blockquote",
    ElementCategory.PREFORMATTED: "_convert_preformatted",
    ElementCategory.RULE: "_convert_rule",
    ElementCategory.PARAGRAPH: "_convert_paragraph",
    ElementCategory.EMPHASIS: "_convert_children",
    ElementCategory.INLINE_QUOTE: "_convert_inline_quote",
    ElementCategory.SUBSCRIPT: "_convert_subscript",
    ElementCategory.SUPERSCRIPT: "_convert_superscript",
    ElementCategory.ANCHOR: "_convert_anchor",
    ElementCategory.AREA: "_convert_area",
    ElementCategory.IMAGE: "_convert_image",
    ElementCategory.FIGURE: "_convert_figure",
    ElementCategory.TABLE: "_convert_table",
    ElementCategory.LINE_BREAK: "_convert_line_break",
    ElementCategory.DEFINITION_LIST: "_convert_definition_list",
    ElementCategory.DEFINITION_TERM: "_convert_block",
    ElementCategory.DEFINITION: "_convert_block",
    ElementCategory.DEFERRED: "_convert_deferred",
    ElementCategory.SKIP: "_convert_nothing",
    ElementCategory.GENERIC_BLOCK: "_convert_block",
    ElementCategory.GENERIC_INLINE: "_convert_children",
}


def classify_element(node: Tag) -> ElementCategory:
    """Return the handler category for an element.

    Hidden elements and always-skipped tags classify as ``SKIP``. Unknown tags
    fall back to a generic block or inline category.
    """
    if should_skip(node):
        return ElementCategory.SKIP
    name = (node.name or "").lower()
    default = ElementCategory.GENERIC_BLOCK if is_block_element(node) else ElementCategory.GENERIC_INLINE
    return _TAG_CATEGORIES.get(name, default)


@dataclass
class ConversionState:
    """Mutable state owned by a single conversion call."""

    base_url: Optional[str]
    media: MediaResolver
    buffer: GemtextBuffer = field(default_factory=GemtextBuffer)
    links: LinkCollection = field(default_factory=LinkCollection)
    footnotes: FootnoteQueue = field(default_factory=FootnoteQueue)
    images: dict[str, ImageLink] = field(default_factory=dict)
    rendered_images: set[str] = field(default_factory=set)
    list_depth: int = 0
    list_counter: Optional[int] = None
    deferred: list[Tag] = field(default_factory=list)
    draining_deferred: bool = False
    depth: int = 0
    depth_limit_reported: bool = False


class HtmlToGemtextConverter:
    """Convert an HTML tree to Gemtext.

    Parameters
    ----------
    options : GemtextOptions or None, default None
        Conversion options

    Examples
    --------
    >>> from bs4 import BeautifulSoup
    >>> soup = BeautifulSoup("<h1>Title</h1><p>Hello</p>", "html.parser")
    >>> print(HtmlToGemtextConverter().convert(soup).gemtext)
    # Title
    Hello

    """

    def __init__(self, options: GemtextOptions | None = None):
        """Initialize the converter with options."""
        if options is not None and not isinstance(options, GemtextOptions):
            raise InvalidOptionsError(
                converter_name="html2gmi", expected_type=GemtextOptions, received_type=type(options)
            )
        self.options: GemtextOptions = options or GemtextOptions()
        self._state: ConversionState | None = None

    @property
    def state(self) -> ConversionState:
        """State of the conversion in progress."""
        if self._state is None:
            raise RuntimeError("No conversion in progress")
        return self._state

    def convert(self, root: Any, base_url: str | None = None) -> ConvertedContent:
        """Convert a parsed document or element to Gemtext.

        Parameters
        ----------
        root : BeautifulSoup or Tag
            Parsed document, or the element to convert (an ``<article>``, say)
        base_url : str or None
            Absolute URL of the page. Relative links and images are resolved
            against it; without it only absolute URLs survive.

        Returns
        -------
        ConvertedContent
            Gemtext plus the ordered link and image lists

        Raises
        ------
        ValidationError
            If ``root`` is None or not an element

        """
        if root is None:
            raise ValidationError("Cannot convert a None document", parameter_name="root", parameter_value=None)
        if not isinstance(root, Tag):
            raise ValidationError(
                f"Expected a BeautifulSoup document or Tag, got {type(root).__name__}",
                parameter_name="root",
                parameter_value=type(root).__name__,
            )

        self._state = ConversionState(base_url=base_url, media=MediaResolver(base_url, self.options))
        try:
            state = self.state

            self._convert_node(root)
            self._flush_links()

            if state.deferred:
                self._render_deferred_sections()

            metadata = MetadataParser(base_url).parse(root) if self.options.extract_metadata else None

            gemtext = state.buffer.content.lstrip("\n").rstrip()
            logger.debug(
                f"Converted document: {len(gemtext)} chars, {len(state.links)} links, {len(state.images)} images"
            )
            return ConvertedContent(
                gemtext=gemtext,
                links=state.links.all(),
                images=list(state.images.values()),
                url=base_url,
                metadata=metadata,
            )
        finally:
            self._state = None

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _convert_node(self, node: Any) -> None:
        """Convert a single node and its subtree."""
        state = self.state

        if is_text_node(node):
            self._convert_text(str(node))
            return

        if not isinstance(node, Tag):
            return

        if state.depth >= self.options.max_depth:
            if not state.depth_limit_reported:
                logger.warning(
                    f"Maximum nesting depth ({self.options.max_depth}) exceeded at <{node.name}>, "
                    "deeper content is skipped"
                )
                state.depth_limit_reported = True
            return

        category = classify_element(node)
        if category is ElementCategory.SKIP:
            logger.debug(f"Skipping <{node.name}>")
            return

        block = is_block_element(node)
        if block:
            self._flush_links()

        handler = getattr(self, _CATEGORY_HANDLERS[category])
        state.depth += 1
        try:
            handler(node)
        finally:
            state.depth -= 1

        if block:
            self._flush_links()

    def _convert_children(self, node: Tag) -> None:
        for child in node.children:
            self._convert_node(child)

    def _convert_nothing(self, node: Tag) -> None:
        return None

    def _convert_text(self, text: str) -> None:
        buffer = self.state.buffer
        text = collapse_whitespace(text)
        if text.startswith(" ") and buffer.ends_with_space:
            text = text[1:]
        buffer.append(text)

    def _flush_links(self) -> None:
        self.state.footnotes.flush(self.state.buffer, self.options.rewrite_link_url)

    # ------------------------------------------------------------------
    # Block handlers
    # ------------------------------------------------------------------

    def _convert_block(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start()
        self._convert_children(node)
        buffer.ensure_at_line_start()

    def _convert_heading(self, node: Tag) -> None:
        buffer = self.state.buffer
        try:
            level = int(node.name[1])
        except (IndexError, ValueError):
            level = 1

        buffer.ensure_at_line_start(reset_prefix=True)
        buffer.set_line_prefix(HEADING_MARKER * min(level, MAX_HEADING_LEVEL) + " ")
        self._convert_children(node)
        buffer.ensure_at_line_start(reset_prefix=True)

    def _convert_paragraph(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start()
        start = buffer.length

        self._convert_children(node)

        buffer.ensure_at_line_start()
        self._flush_links()
        if buffer.length > start:
            buffer.ensure_blank_line()

    def _convert_list(self, node: Tag) -> None:
        state = self.state
        state.buffer.ensure_at_line_start()

        saved_counter = state.list_counter
        state.list_counter = self._list_start(node) if node.name == "ol" else None
        state.list_depth += 1
        try:
            self._convert_children(node)
        finally:
            state.list_depth -= 1
            state.list_counter = saved_counter

        state.buffer.ensure_at_line_start(reset_prefix=True)
        if state.list_depth == 0:
            self._flush_links()
            state.buffer.ensure_blank_line()

    @staticmethod
    def _list_start(node: Tag) -> int:
        """Return the first number of an ordered list (``start``, default 1)."""
        try:
            return int(get_attr(node, "start"))
        except ValueError:
            return 1

    def _convert_list_item(self, node: Tag) -> None:
        state = self.state
        state.buffer.ensure_at_line_start()

        if state.list_counter is not None:
            marker = f"{state.list_counter}. "
            state.list_counter += 1
        else:
            marker = BULLET_MARKER
        nesting = BULLET_MARKER * (max(state.list_depth, 1) - 1)
        state.buffer.set_line_prefix(nesting + marker)

        self._convert_children(node)
        state.buffer.ensure_at_line_start(reset_prefix=True)

    def _convert_blockquote(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start(reset_prefix=True)

        quoted = buffer.in_blockquote
        buffer.in_blockquote = True
        try:
            self._convert_children(node)
            buffer.ensure_at_line_start()
        finally:
            buffer.in_blockquote = quoted

        buffer.ensure_at_line_start(reset_prefix=True)

    def _convert_preformatted(self, node: Tag) -> None:
        text = self._preformatted_text(node)
        if not text.strip():
            return
        self._write_preformatted(text, self._fence_alt_text(node))

    def _write_preformatted(self, text: str, alt_text: str = "") -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start(reset_prefix=True)

        # A line starting with the fence would close the block early
        lines = [" " + line if line.startswith(PREFORMATTED_FENCE) else line for line in text.split("\n")]

        buffer.in_preformatted = True
        try:
            buffer.append_verbatim(f"{PREFORMATTED_FENCE}{alt_text}\n")
            buffer.append_verbatim("\n".join(lines) + "\n")
            buffer.append_verbatim(f"{PREFORMATTED_FENCE}\n")
        finally:
            buffer.in_preformatted = False

        buffer.ensure_blank_line()

    def _preformatted_text(self, node: Tag) -> str:
        """Collect the raw text of a ``<pre>`` block, turning ``<br>`` into newlines."""
        parts: list[str] = []

        def collect(element: Tag, depth: int) -> None:
            if depth > self.options.max_depth:
                return
            for child in element.children:
                if is_text_node(child):
                    parts.append(str(child))
                elif isinstance(child, Tag) and not should_skip(child):
                    if child.name == "br":
                        parts.append("\n")
                    else:
                        collect(child, depth + 1)

        collect(node, 0)
        text = "".join(parts).replace("\r\n", "\n").replace("\r", "\n")
        return text.strip("\n")

    @staticmethod
    def _fence_alt_text(node: Tag) -> str:
        """Pick alt text for a fence: ARIA label, title, then a code language."""
        for attr in ("aria-label", "title"):
            text = collapse_whitespace(get_attr(node, attr)).strip()
            if text:
                return text

        candidates = [node]
        code = node.find("code")
        if isinstance(code, Tag):
            candidates.append(code)

        for element in candidates:
            for cls in get_attr(element, "class").split():
                if match := _LANGUAGE_CLASS.match(cls):
                    return match.group(1)
            language = get_attr(element, "data-lang") or get_attr(element, "data-language")
            if language:
                return language
        return ""

    def _convert_rule(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start(reset_prefix=True)
        buffer.append_line(HORIZONTAL_RULE)

    def _convert_definition_list(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start(reset_prefix=True)
        self._convert_children(node)
        buffer.ensure_at_line_start()
        self._flush_links()
        buffer.ensure_blank_line()

    # ------------------------------------------------------------------
    # Inline handlers
    # ------------------------------------------------------------------

    def _convert_line_break(self, node: Tag) -> None:
        self.state.buffer.append_line()

    def _convert_inline_quote(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.append(INLINE_QUOTE_OPEN)
        self._convert_children(node)
        buffer.append(INLINE_QUOTE_CLOSE)

    def _convert_subscript(self, node: Tag) -> None:
        text = TextExtractor(max_depth=self.options.max_depth).extract(node)
        self.state.buffer.append(to_subscript(text))

    def _convert_superscript(self, node: Tag) -> None:
        text = TextExtractor(max_depth=self.options.max_depth).extract(node)
        self.state.buffer.append(to_superscript(text))

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    @staticmethod
    def _is_backlink(node: Tag) -> bool:
        """Detect footnote back-references ("jump back up" links)."""
        if get_roles(node) & BACKLINK_ROLES:
            return True
        if get_classes(node) & BACKLINK_CLASSES:
            return True
        return node.get_text().strip() in BACKLINK_GLYPHS

    def _accept_link_url(self, href: str) -> Optional[str]:
        """Resolve an ``href``, returning None for links that must not render as links."""
        if not href or is_fragment_only(href) or has_script_scheme(href):
            return None

        base_url = self.state.base_url
        url = create_url(href, base_url)
        if url is None:
            logger.debug(f"Ignoring unusable link target: {href[:100]}")
            return None

        if is_same_page(url, base_url):
            return None
        return url

    def _register_link(self, href: str, text: str) -> Optional[Hyperlink]:
        """Resolve and register a link.

        Returns the registry entry when the link should be rendered, or None
        when it must degrade to plain text (unusable URL, links disabled,
        duplicate URL, or label already used by another URL).
        """
        if not self.options.render_links:
            return None

        url = self._accept_link_url(href)
        if url is None:
            return None

        state = self.state
        known = url in state.links
        link = state.links.add(url, text, is_external(url, state.base_url))
        if link is None:
            return None
        if known and not self.options.allow_duplicate_links:
            logger.debug(f"Link already emitted, rendering as text: {url}")
            return None
        return link

    def _anchor_text(self, node: Tag) -> tuple[str, list[ImageLink]]:
        """Return the label of an anchor and the images nested inside it.

        The label is the ARIA label, else the visible text, else the alt text
        of the first nested image.
        """
        media = self.state.media if self.options.include_images else None
        extractor = TextExtractor(media=media, max_depth=self.options.max_depth)
        text = extractor.extract(node)

        label = get_aria_label(node) or text
        if not label and extractor.image_alt_texts:
            label = extractor.image_alt_texts[0]
        return label, extractor.images

    def _convert_anchor(self, node: Tag) -> None:
        if self._is_backlink(node):
            logger.debug("Skipping footnote back-reference link")
            return

        text, images = self._anchor_text(node)
        if not text:
            for image in images:
                self._collect_image(image)
            return

        link = self._register_link(get_attr(node, "href"), text)
        if link is None:
            # Nested images render normally along with the text
            self._convert_children(node)
            return

        for image in images:
            self._collect_image(image)
        self._write_link(link.url, text, link.is_external)

    def _write_link(self, url: str, text: str, external: bool) -> None:
        buffer = self.state.buffer
        if buffer.at_line_start and not buffer.has_line_prefix:
            buffer.append_link_line(self.options.rewrite_link_url(url), text)
            return

        pending = self.state.footnotes.add(url, text, external)
        buffer.append(pending.marker)

    def _convert_area(self, node: Tag) -> None:
        text = collapse_whitespace(get_attr(node, "alt")).strip()
        if not text:
            return

        link = self._register_link(get_attr(node, "href"), text)
        if link is not None:
            self.state.buffer.append_link_line(self.options.rewrite_link_url(link.url), text)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _collect_image(self, image: ImageLink) -> None:
        """Record an image in the result, once per source."""
        images = self.state.images
        if image.source in images:
            logger.debug(f"Image already recorded: {image.source}")
            return
        images[image.source] = image

    def _write_image(self, image: ImageLink) -> None:
        """Write an image link line unless that source already has one.

        Images seen earlier only inside a link are recorded but not yet
        written, so their first standalone occurrence still renders.
        """
        self._collect_image(image)
        rendered = self.state.rendered_images
        if image.source not in rendered:
            rendered.add(image.source)
            self.state.buffer.append_link_line(self.options.rewrite_image_url(image.source), image.caption)

    def _convert_image(self, node: Tag) -> None:
        if not self.options.include_images:
            return
        image = self.state.media.resolve_image(node)
        if image is not None:
            self._write_image(image)

    def _convert_figure(self, node: Tag) -> None:
        image = self.state.media.resolve_figure(node) if self.options.include_images else None
        if image is None:
            self._convert_block(node)
            return
        self._write_image(image)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _convert_table(self, node: Tag) -> None:
        buffer = self.state.buffer
        buffer.ensure_at_line_start(reset_prefix=True)

        if TableReducer.is_layout_table(node):
            logger.debug("Flattening layout table")
            for child in TableReducer.reduce(node):
                self._convert_node(child)
            buffer.ensure_at_line_start()
            return

        media = self.state.media if self.options.include_images else None
        model = parse_table(node, TextExtractor(media=media, max_depth=self.options.max_depth))
        if model.is_empty and not model.images:
            return

        if not model.is_empty:
            if model.caption:
                buffer.append_line(model.caption)
            self._write_preformatted(render_table(model), model.caption)
            self._write_table_links(node)

        for image in model.images:
            self._write_image(image)
        buffer.ensure_blank_line()

    def _write_table_links(self, table: Tag) -> None:
        """Emit the links found in a data table's cells as link lines."""
        for anchor in table.find_all(["a", "area"]):
            if not self._is_visible_within(anchor, table) or self._is_backlink(anchor):
                continue

            images: list[ImageLink] = []
            if anchor.name == "area":
                text = collapse_whitespace(get_attr(anchor, "alt")).strip()
            else:
                text, images = self._anchor_text(anchor)
            if not text:
                continue

            link = self._register_link(get_attr(anchor, "href"), text)
            if link is not None:
                for image in images:
                    self._collect_image(image)
                self.state.buffer.append_link_line(self.options.rewrite_link_url(link.url), text)

    @staticmethod
    def _is_visible_within(node: Tag, container: Tag) -> bool:
        """True when neither ``node`` nor any ancestor up to ``container`` is skipped."""
        element: Optional[Tag] = node
        while element is not None and element is not container:
            if should_skip(element):
                return False
            element = element.parent
        return True

    # ------------------------------------------------------------------
    # Deferred sections
    # ------------------------------------------------------------------

    def _convert_deferred(self, node: Tag) -> None:
        state = self.state
        if self.options.defer_secondary_content and not state.draining_deferred:
            logger.debug(f"Deferring <{node.name}> until after the main content")
            state.deferred.append(node)
            return
        self._convert_block(node)

    def _section_title(self, node: Tag) -> str:
        label = get_aria_label(node)
        if label:
            return label
        name = (node.name or "").lower()
        return self.options.deferred_section_titles.get(name, name.title())

    def _render_deferred_sections(self) -> None:
        """Render queued ``<aside>``/``<nav>`` elements, each under its own heading."""
        state = self.state
        main = state.buffer
        state.draining_deferred = True
        try:
            for element in state.deferred:
                capture = GemtextBuffer()
                state.buffer = capture
                state.list_depth, state.list_counter = 0, None
                try:
                    self._convert_children(element)
                    self._flush_links()
                finally:
                    state.buffer = main

                body = capture.content.strip("\n").rstrip()
                if not body.strip():
                    logger.debug(f"Dropping empty deferred <{element.name}> section")
                    continue

                heading = HEADING_MARKER * DEFERRED_SECTION_HEADING_LEVEL + " " + self._section_title(element)
                main.ensure_at_line_start(reset_prefix=True)
                main.ensure_blank_line()
                main.append_line(heading)
                main.append_verbatim(body + "\n")
                main.ensure_blank_line()
        finally:
            state.draining_deferred = False
            state.deferred = []


__all__ = [
    "ConversionState",
    "ElementCategory",
    "HtmlToGemtextConverter",
    "classify_element",
]
