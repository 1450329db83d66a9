#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/links.py
"""Hyperlink registry and footnote handling.

Gemtext links must sit on their own line, so a link found in the middle of a
sentence is written inline as ``text[n]`` and its target is emitted later as a
footnote link line. :class:`FootnoteQueue` holds those pending links until the
converter reaches a block boundary and then flushes them.

:class:`LinkCollection` is the document-wide registry of every accepted link,
deduplicated by URL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from html2gmi.buffer import GemtextBuffer
from html2gmi.models import Hyperlink
from html2gmi.urls import display_host

logger = logging.getLogger(__name__)


class LinkCollection:
    """Registry of hyperlinks keyed by absolute URL.

    Rules:

    - a new URL is inserted with the next discovery index, unless its
      case-folded text was already used by another link, in which case the
      link is dropped (one visible label never points at two places)
    - a known URL seen with new, unseen text that is longer than the stored
      text has its text upgraded in place; its index never changes
    - shorter or already-seen text never replaces the stored text

    Examples
    --------
    >>> links = LinkCollection()
    >>> links.add("https://example.com/a", "A")
    Hyperlink(url='https://example.com/a', text='A', order_detected=1, is_external=False)
    >>> _ = links.add("https://example.com/a", "Article A")
    >>> links.all()[0].text
    'Article A'

    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._links: dict[str, Hyperlink] = {}
        self._seen_text: set[str] = set()
        self._counter = 0

    def __len__(self) -> int:
        """Return the number of registered links."""
        return len(self._links)

    def __contains__(self, url: object) -> bool:
        """Return True when ``url`` is registered."""
        return url in self._links

    def contains(self, url: str) -> bool:
        """Return True when ``url`` is registered."""
        return url in self._links

    def get(self, url: str) -> Optional[Hyperlink]:
        """Return the registered link for ``url``, if any."""
        return self._links.get(url)

    def add(self, url: str, text: str, is_external: bool = False) -> Optional[Hyperlink]:
        """Register a link or upgrade the text of an existing one.

        Parameters
        ----------
        url : str
            Absolute URL
        text : str
            Display text
        is_external : bool, default False
            Whether the link is off-host

        Returns
        -------
        Hyperlink or None
            The registry entry for ``url``, or None when a new link was dropped
            because its text is already used by another URL

        """
        normalized = text.casefold()
        existing = self._links.get(url)

        if existing is None:
            if normalized in self._seen_text:
                logger.debug("Dropping link %s: text %r already used by another link", url, text)
                return None
            self._seen_text.add(normalized)
            self._counter += 1
            link = Hyperlink(url=url, text=text, order_detected=self._counter, is_external=is_external)
            self._links[url] = link
            return link

        if normalized not in self._seen_text and len(existing.text) < len(text):
            existing.text = text
            self._seen_text.add(normalized)

        return existing

    def all(self) -> list[Hyperlink]:
        """Return all links ordered by discovery index."""
        return sorted(self._links.values(), key=lambda link: link.order_detected)


@dataclass
class PendingLink:
    """A link rendered inline as ``text[number]`` awaiting its footnote line."""

    url: str
    text: str
    number: int
    is_external: bool = False

    @property
    def marker(self) -> str:
        """The inline marker written into the text."""
        return f"{self.text}[{self.number}]"


class FootnoteQueue:
    """Links written inline since the last block boundary.

    Footnote numbers run through the whole document. Rewriting a footnote
    into a direct link line gives its number back.
    """

    def __init__(self) -> None:
        """Initialize an empty queue."""
        self._pending: list[PendingLink] = []
        self._counter = 0

    def __len__(self) -> int:
        """Return the number of pending links."""
        return len(self._pending)

    @property
    def counter(self) -> int:
        """The last footnote number handed out."""
        return self._counter

    def add(self, url: str, text: str, is_external: bool = False) -> PendingLink:
        """Queue a link and return it with its footnote number."""
        self._counter += 1
        pending = PendingLink(url=url, text=text, number=self._counter, is_external=is_external)
        self._pending.append(pending)
        return pending

    def flush(self, buffer: GemtextBuffer, rewrite_url: Callable[[str], str] | None = None) -> bool:
        """Emit the pending links into ``buffer``.

        A single pending link whose marker is the entire last line (ignoring
        the bullet or quote marker the buffer itself wrote) replaces that
        line with a direct link line. Otherwise one footnote link line per
        pending link is written, followed by a blank line.

        Parameters
        ----------
        buffer : GemtextBuffer
            Buffer the inline markers were written to
        rewrite_url : callable, optional
            Function applied to each URL before it is written

        Returns
        -------
        bool
            True when footnote lines (and their blank separator) were written

        """
        if not self._pending:
            return False

        pending, self._pending = self._pending, []
        rewrite = rewrite_url or (lambda url: url)

        if len(pending) == 1:
            link = pending[0]
            if buffer.get_last_line_content() == link.marker:
                buffer.remove_last_line()
                buffer.append_link_line(rewrite(link.url), link.text)
                self._counter -= 1
                return False

        buffer.ensure_at_line_start(reset_prefix=True)
        for link in pending:
            label = f'{link.number}. "{link.text}"'
            if link.is_external:
                label += f" ({display_host(link.url)})"
            buffer.append_link_line(rewrite(link.url), label)
        buffer.ensure_blank_line()
        return True


__all__ = ["LinkCollection", "PendingLink", "FootnoteQueue"]
