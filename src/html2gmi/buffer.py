#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/buffer.py
"""Gemtext-aware text buffer.

The buffer enforces the line discipline Gemtext needs so that the converter
never has to reason about it directly:

- a *line prefix* (heading marker, bullet) is written lazily, right before the
  first non-whitespace content of a fresh line, and dropped if that line stays
  empty
- while *blockquote mode* is on, every non-blank line starts with a quote
  marker
- blank lines never stack and never lead the document
- while *preformatted mode* is on, text is written exactly as given
"""

from __future__ import annotations

import logging

from html2gmi.constants import LINK_LINE_MARKER, QUOTE_MARKER

logger = logging.getLogger(__name__)


class GemtextBuffer:
    """Accumulates Gemtext output one line at a time.

    Attributes
    ----------
    in_blockquote : bool
        When True, a quote marker is inserted before the first content of
        every non-blank line
    in_preformatted : bool
        When True, text is written verbatim: no prefixes, no quote markers,
        no whitespace trimming and no blank-line collapsing

    Examples
    --------
    >>> buffer = GemtextBuffer()
    >>> buffer.set_line_prefix("# ")
    >>> buffer.append("Title")
    >>> buffer.ensure_at_line_start()
    >>> buffer.append("Body text")
    >>> buffer.content
    '# Title\\nBody text'

    """

    def __init__(self) -> None:
        """Initialize an empty buffer."""
        self._parts: list[str] = []
        self._length = 0
        self._line_prefix: str | None = None
        # quote marker and prefix written at the start of the latest content line
        self._line_marker = ""
        self.in_blockquote = False
        self.in_preformatted = False

    @property
    def content(self) -> str:
        """The accumulated text."""
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    @property
    def length(self) -> int:
        """Number of characters written so far."""
        return self._length

    @property
    def has_content(self) -> bool:
        """True once anything has been written."""
        return self._length > 0

    @property
    def at_line_start(self) -> bool:
        """True when positioned at the very beginning of a line.

        A pending line prefix may still be waiting to be written.
        """
        return not self._parts or self._parts[-1].endswith("\n")

    @property
    def ends_with_space(self) -> bool:
        """True when the current line ends in a space or tab."""
        return self._tail(1) in (" ", "\t")

    @property
    def has_line_prefix(self) -> bool:
        """True when a line prefix is pending."""
        return self._line_prefix is not None

    def reset(self) -> None:
        """Discard all text and any pending prefix."""
        self._parts = []
        self._length = 0
        self._line_prefix = None
        self._line_marker = ""

    def set_line_prefix(self, prefix: str | None) -> None:
        """Set the prefix written before the next content on a fresh line."""
        self._line_prefix = prefix or None

    def append(self, text: str) -> None:
        """Append text to the current line.

        Text containing newlines is split: every segment but the last is
        written with :meth:`append_line`, the remainder with ``append``, so no
        extra trailing line break is introduced.
        """
        if not text:
            return

        if "\n" in text:
            *complete, remainder = text.split("\n")
            for segment in complete:
                self.append_line(segment)
            self.append(remainder)
            return

        if self.in_preformatted:
            self._write(text)
            self._line_marker = ""
            return

        self._write_content(text)

    def append_line(self, text: str = "") -> None:
        """Append text and terminate the line.

        Appending blank text on an empty line produces a blank line, subject
        to the no-stacking rule, and discards any pending prefix.
        """
        if "\n" in text:
            self.append(text)
            self._end_line()
            return

        if self.in_preformatted:
            self._write(text + "\n")
            self._line_marker = ""
            return

        if text.strip():
            self._write_content(text)
            self._end_line()
        elif self.at_line_start:
            # the line stays empty, so its prefix is never written
            self._line_prefix = None
            self._write_blank_line()
        else:
            self._end_line()

    def append_verbatim(self, text: str) -> None:
        """Append text exactly as given, bypassing prefix and quote handling."""
        if text:
            self._write(text)
            self._line_marker = ""

    def append_link_line(self, url: str, text: str = "") -> None:
        """Write a ``=> url text`` line.

        Link lines always start a line of their own and are never quoted or
        prefixed. A pending prefix survives for the content that follows.
        """
        self.ensure_at_line_start()
        line = f"{LINK_LINE_MARKER}{url} {text}" if text else f"{LINK_LINE_MARKER}{url}"

        quoted, prefix = self.in_blockquote, self._line_prefix
        self.in_blockquote, self._line_prefix = False, None
        try:
            self.append_line(line)
        finally:
            self.in_blockquote, self._line_prefix = quoted, prefix

    def ensure_at_line_start(self, reset_prefix: bool = False) -> None:
        """Terminate the current line unless already at the start of one.

        Parameters
        ----------
        reset_prefix : bool, default False
            Also discard any pending prefix, so that content following a
            just-closed block does not inherit a stale heading or bullet marker

        """
        if not self.at_line_start:
            self._end_line()
        if reset_prefix:
            self._line_prefix = None

    def ensure_blank_line(self) -> None:
        """Make sure the next content is separated from previous content by one blank line."""
        self.ensure_at_line_start()
        self._write_blank_line()

    def get_last_line(self) -> str:
        """Return the last non-blank line, stripped of surrounding whitespace."""
        content = self.content.rstrip()
        return content[content.rfind("\n") + 1 :].strip()

    def get_last_line_content(self) -> str:
        """Return the last non-blank line without the markers the buffer wrote.

        Only the quote marker and line prefix actually written at the start
        of that line are removed. Text that merely looks like a bullet or a
        list number is kept.
        """
        line = self.get_last_line()
        marker = self._line_marker.strip()
        if marker and line.startswith(marker):
            line = line[len(marker) :].lstrip()
        return line

    def remove_last_line(self) -> None:
        """Remove the last non-blank line.

        Content before that line is kept and stays terminated by a newline.
        A buffer holding a single line is cleared entirely.
        """
        content = self.content.rstrip()
        index = content.rfind("\n")
        if index <= 0:
            self._set_text("")
        else:
            self._set_text(content[:index] + "\n")

    def _write(self, text: str) -> None:
        self._parts.append(text)
        self._length += len(text)

    def _set_text(self, text: str) -> None:
        self._parts = [text] if text else []
        self._length = len(text)
        self._line_marker = ""

    def _tail(self, count: int) -> str:
        """Return up to ``count`` trailing characters without joining everything."""
        tail = ""
        for part in reversed(self._parts):
            tail = part + tail
            if len(tail) >= count:
                break
        return tail[-count:]

    def _write_content(self, text: str) -> None:
        if self.at_line_start:
            text = text.lstrip()
            if not text:
                return
            marker = QUOTE_MARKER if self.in_blockquote else ""
            if self._line_prefix is not None:
                marker += self._line_prefix
                self._line_prefix = None
            if marker:
                self._write(marker)
            self._line_marker = marker
        self._write(text)

    def _end_line(self) -> None:
        if not self.in_preformatted:
            self._trim_line_end()
        self._write("\n")

    def _trim_line_end(self) -> None:
        while self._parts:
            last = self._parts[-1]
            stripped = last.rstrip(" \t")
            if stripped == last:
                return
            self._length -= len(last) - len(stripped)
            if stripped:
                self._parts[-1] = stripped
                return
            self._parts.pop()

    def _write_blank_line(self) -> None:
        if not self.has_content or self._tail(2) == "\n\n":
            return
        self._write("\n")


__all__ = ["GemtextBuffer"]
