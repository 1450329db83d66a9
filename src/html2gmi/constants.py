#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for html2gmi.

This module centralizes the tag sets, ARIA roles, Gemtext markers and default
configuration values used by the converter. Keeping them here makes the
heuristics (spacer detection, deferred sections, skip sets) easy to find and
tune.

Constants are organized by category:
1. Type Definitions
2. Gemtext Markers
3. Element Classification
4. Link Handling
5. Image Handling
6. Conversion Defaults
7. Dependency Specifications
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Gemtext Markers
# =============================================================================

LINK_LINE_MARKER = "=> "
HEADING_MARKER = "#"
MAX_HEADING_LEVEL = 3
BULLET_MARKER = "* "
QUOTE_MARKER = "> "
PREFORMATTED_FENCE = "```"
HORIZONTAL_RULE = "-" * 20

# Inline quotation marks used for <q>
INLINE_QUOTE_OPEN = "“"
INLINE_QUOTE_CLOSE = "”"

# Fallback notation for sub/superscript text without a unicode equivalent
SUBSCRIPT_MARKER = "˅"
SUPERSCRIPT_MARKER = "^"

# =============================================================================
# Element Classification
# =============================================================================

# Tags that are never rendered: head metadata, scripting, forms, widgets, embeds
SKIPPED_TAGS = frozenset(
    {
        "head",
        "title",
        "meta",
        "link",
        "base",
        "style",
        "script",
        "noscript",
        "template",
        "slot",
        "svg",
        "math",
        "canvas",
        "iframe",
        "frame",
        "frameset",
        "object",
        "embed",
        "param",
        "audio",
        "video",
        "track",
        "source",
        "form",
        "input",
        "button",
        "select",
        "option",
        "optgroup",
        "textarea",
        "label",
        "datalist",
        "output",
        "progress",
        "meter",
        "dialog",
    }
)

# ARIA roles for non-narrative affordances with no Gemtext equivalent
SKIPPED_ARIA_ROLES = frozenset(
    {
        "alert",
        "alertdialog",
        "button",
        "checkbox",
        "combobox",
        "dialog",
        "form",
        "listbox",
        "menu",
        "menubar",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "progressbar",
        "radio",
        "radiogroup",
        "scrollbar",
        "search",
        "searchbox",
        "slider",
        "spinbutton",
        "status",
        "switch",
        "tab",
        "tablist",
        "tabpanel",
        "textbox",
        "timer",
        "toolbar",
        "tooltip",
    }
)

# Block-level elements: a pending footnote group never spans one of these
BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "area",
        "article",
        "aside",
        "blockquote",
        "caption",
        "center",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "img",
        "legend",
        "li",
        "main",
        "map",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "ul",
    }
)

# Section headings for deferred elements rendered after the main body
DEFAULT_DEFERRED_SECTION_TITLES: dict[str, str] = {
    "aside": "Related",
    "nav": "Navigation",
}

DEFERRED_SECTION_HEADING_LEVEL = 2

# Inline styles that hide an element
HIDDEN_STYLE_PATTERN = re.compile(r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)

# =============================================================================
# Link Handling
# =============================================================================

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

# Footnote-return links ("jump back up") carry no narrative content
BACKLINK_ROLES = frozenset({"doc-backlink"})
BACKLINK_CLASSES = frozenset({"footnote-backref", "footnote-back", "mw-cite-backlink", "reversefootnote", "backlink"})
BACKLINK_GLYPHS = frozenset({"↩", "↩︎", "↩️", "↑", "⮐", "⮌", "^"})

# =============================================================================
# Image Handling
# =============================================================================

DEFAULT_IMAGE_CAPTION = "Article Image"

# Attribute preference when resolving an image source (srcset is tried first)
IMAGE_SRCSET_ATTRIBUTES = ("srcset", "data-srcset")
IMAGE_LAZY_SOURCE_ATTRIBUTES = ("data-src", "data-lazy-src", "data-original")
IMAGE_SOURCE_ATTRIBUTE = "src"

# Images with a declared width or height below this (in pixels) are spacers
DEFAULT_SPACER_MAX_DIMENSION = 5

# Filenames of well-known spacer and tracking-pixel images
DEFAULT_SPACER_FILENAME_PATTERN = (
    r"(^|[/_\-.])(spacer|blank|pixel|transparent|clear|trans|1x1|tracking|beacon)"
    r"([_\-.]?(gif|png|jpe?g|webp))?$"
)

# =============================================================================
# Conversion Defaults
# =============================================================================

DEFAULT_HTML_PARSER: HtmlParser = "html.parser"
DEFAULT_RENDER_LINKS = True
DEFAULT_ALLOW_DUPLICATE_LINKS = False
DEFAULT_DEFER_SECONDARY_CONTENT = True
DEFAULT_EXTRACT_METADATA = False
DEFAULT_INCLUDE_IMAGES = True

# Nesting beyond this depth is truncated rather than risking RecursionError
DEFAULT_MAX_DEPTH = 128

# =============================================================================
# Dependency Specifications
# =============================================================================
# Each spec is a tuple of (pip_package, import_name, version_constraint)

DEPS_HTML_PARSERS: dict[str, tuple[str, str, str]] = {
    "html5lib": ("html5lib", "html5lib", ""),
    "lxml": ("lxml", "lxml", ""),
}
