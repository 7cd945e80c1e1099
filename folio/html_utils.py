"""HTML helpers for Folio.

Built pages link with root-relative URLs (``/about/``). When a site is
published below an absolute root URL these helpers rewrite them.

Functions:
    join_root_url: Join a base URL with a path.
    absolutize_html_urls: Rewrite root-relative URLs in rendered HTML.
"""

from __future__ import annotations

import re

_URL_ATTR_RE = re.compile(
    r"""(?P<attr>\b(?:href|src|action)=)(?P<quote>["'])(?P<url>.+?)(?P=quote)"""
)

# Schemes and fragments left alone by absolutize_html_urls
_KEEP_AS_IS = ("http://", "https://", "//", "#", "mailto:", "tel:", "data:", "javascript:")


def join_root_url(root_url: str, path: str) -> str:
    """Append ``path`` to ``root_url`` with exactly one slash between them.

    Examples:
        >>> join_root_url('https://example.com/', 'about/')
        'https://example.com/about/'
    """
    if not root_url:
        return path
    return f"{root_url.rstrip('/')}/{path.lstrip('/')}"


def absolutize_html_urls(html: str, root_url: str) -> str:
    """Prefix root-relative ``href``, ``src`` and ``action`` values.

    Args:
        html: Rendered page.
        root_url: Absolute URL the site is served from.

    Returns:
        The page with every local URL made absolute.

    Examples:
        >>> absolutize_html_urls('<a href="/about/">About</a>', 'https://example.com')
        '<a href="https://example.com/about/">About</a>'
    """
    if not root_url:
        return html

    def rewrite(match: re.Match) -> str:
        url = match.group("url")
        if url.startswith(_KEEP_AS_IS):
            return match.group(0)
        quote = match.group("quote")
        return f"{match.group('attr')}{quote}{join_root_url(root_url, url)}{quote}"

    return _URL_ATTR_RE.sub(rewrite, html)
