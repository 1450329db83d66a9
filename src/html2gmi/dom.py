#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/dom.py
"""Helpers for reading BeautifulSoup elements defensively.

Attribute values on real-world pages are frequently malformed. None of these
helpers raise on bad input; they fall back to an empty or default value.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from html2gmi.constants import BLOCK_ELEMENTS, HIDDEN_STYLE_PATTERN, SKIPPED_ARIA_ROLES, SKIPPED_TAGS

logger = logging.getLogger(__name__)

# String node types that never contribute visible text
NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def is_text_node(node: Any) -> bool:
    """Return True for string nodes that carry visible text."""
    return isinstance(node, NavigableString) and not isinstance(node, NON_TEXT_STRINGS)


def get_attr(element: Tag, name: str) -> str:
    """Return an attribute as a stripped string ("" when missing).

    Multi-valued attributes such as ``class`` or ``rel`` are joined with spaces.
    """
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value).strip()
    return str(value).strip()


def get_int_attr(element: Tag, name: str) -> int | None:
    """Parse the leading integer of an attribute such as ``width="12px"``.

    Returns None when the attribute is missing or does not start with a number.
    """
    match = _LEADING_INT.match(get_attr(element, name))
    return int(match.group(1)) if match else None


def get_classes(element: Tag) -> set[str]:
    """Return the element's CSS classes, lowercased."""
    return {cls.lower() for cls in get_attr(element, "class").split()}


def get_roles(element: Tag) -> set[str]:
    """Return the element's ARIA roles, lowercased (``role`` may list several)."""
    return {role.lower() for role in get_attr(element, "role").split()}


def get_aria_label(element: Tag) -> str:
    """Return the element's ``aria-label`` with whitespace collapsed."""
    return " ".join(get_attr(element, "aria-label").split())


def is_hidden(element: Tag) -> bool:
    """Determine whether an element is hidden or is a non-narrative widget.

    An element is hidden when it carries the ``hidden`` attribute,
    ``aria-hidden="true"``, an inline style of ``display: none`` or
    ``visibility: hidden``, or an ARIA role from the skip set (alerts,
    dialogs, buttons, form controls, sliders, search boxes).
    """
    if element.has_attr("hidden"):
        return True
    if get_attr(element, "aria-hidden").lower() == "true":
        return True
    style = get_attr(element, "style")
    if style and HIDDEN_STYLE_PATTERN.search(style):
        return True
    return bool(get_roles(element) & SKIPPED_ARIA_ROLES)


def should_skip(element: Tag) -> bool:
    """Return True when an element and its subtree must not be rendered."""
    name = (element.name or "").lower()
    if name in SKIPPED_TAGS:
        return True
    return is_hidden(element)


def is_block_element(node: Any) -> bool:
    """Check if a node is a block-level element."""
    return isinstance(node, Tag) and isinstance(node.name, str) and node.name.lower() in BLOCK_ELEMENTS


__all__ = [
    "NON_TEXT_STRINGS",
    "get_aria_label",
    "get_attr",
    "get_classes",
    "get_int_attr",
    "get_roles",
    "is_block_element",
    "is_hidden",
    "is_text_node",
    "should_skip",
]
