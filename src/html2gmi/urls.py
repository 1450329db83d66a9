#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/urls.py
"""URL resolution helpers.

Every URL that reaches the Gemtext output goes through :func:`create_url`:
it is resolved against the page's base URL and accepted only when the result
is an absolute http(s) URL. Anything else (``javascript:``, ``data:``,
``mailto:``, malformed hosts) resolves to ``None`` so callers can degrade to
plain text.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urldefrag, urljoin, urlparse

from html2gmi.constants import ALLOWED_URL_SCHEMES

logger = logging.getLogger(__name__)

_STRIPPED_URL_CHARS = re.compile(r"[\t\r\n]")


def create_url(url: str | None, base_url: str | None = None) -> str | None:
    """Create an absolute http(s) URL from an attribute value.

    Parameters
    ----------
    url : str or None
        Raw ``href``/``src`` value, possibly relative
    base_url : str or None
        Absolute URL of the page, used to resolve relative URLs. Without a
        base URL only already-absolute URLs are accepted.

    Returns
    -------
    str or None
        Absolute URL, or None when the value is empty, unparsable or not an
        http(s) URL

    Examples
    --------
    >>> create_url("/p", "https://site.example/a/")
    'https://site.example/p'
    >>> create_url("javascript:void(0)", "https://site.example/") is None
    True

    """
    if not url:
        return None

    # Browsers drop tabs and newlines inside URL attributes
    candidate = _STRIPPED_URL_CHARS.sub("", url).strip()
    if not candidate:
        return None
    candidate = candidate.replace(" ", "%20")

    try:
        if base_url:
            resolved = urljoin(base_url, candidate)
        elif "://" in candidate:
            resolved = candidate
        else:
            return None

        parsed = urlparse(resolved)
        # Accessing .hostname validates bracketed IPv6 hosts
        hostname = parsed.hostname
    except ValueError as e:
        logger.debug("Rejected malformed URL %r: %s", url[:100], e)
        return None

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES or not hostname:
        return None

    return resolved


def is_fragment_only(url: str | None) -> bool:
    """Return True for in-page references such as ``#section``."""
    return bool(url) and url.strip().startswith("#")


def has_script_scheme(url: str | None) -> bool:
    """Return True when a raw attribute value uses the ``javascript:`` scheme."""
    if not url:
        return False
    return _STRIPPED_URL_CHARS.sub("", url).strip().lower().startswith("javascript:")


def is_same_page(url: str, base_url: str | None) -> bool:
    """Return True when ``url`` points at the page itself (ignoring fragments)."""
    if not base_url:
        return False
    return urldefrag(url)[0] == urldefrag(base_url)[0]


def _host_of(url: str | None) -> str:
    try:
        return (urlparse(url).hostname or "") if url else ""
    except ValueError:
        return ""


def display_host(url: str) -> str:
    """Return the host of ``url`` without a leading ``www.``."""
    host = _host_of(url)
    return host[4:] if host.startswith("www.") else host


def is_external(url: str, base_url: str | None) -> bool:
    """Determine whether ``url`` lives on a different site than ``base_url``.

    The comparison is a host suffix match: ``blog.example.com`` is internal to
    a page on ``www.example.com``, ``example.org`` is not.

    Parameters
    ----------
    url : str
        Absolute URL of the link
    base_url : str or None
        Absolute URL of the page. Without one, no link is external.

    Returns
    -------
    bool
        True when the link is off-host

    """
    base_host = display_host(base_url) if base_url else ""
    if not base_host:
        return False

    host = _host_of(url)
    return not (host == base_host or host.endswith("." + base_host))


__all__ = [
    "create_url",
    "display_host",
    "has_script_scheme",
    "is_external",
    "is_fragment_only",
    "is_same_page",
]
