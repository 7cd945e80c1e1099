"""Markdown rendering for Folio.

Document bodies are plain markdown. This module turns them into HTML for
the secondary pages, with anchored headings, Pygments highlighting for
fenced code and image sources checked against the site's image domain
allow-list.

Key classes:
- MarkdownRenderer: Implementation of the ContentRenderer protocol.
- ImageDomainError: Raised for remote images from hosts not allowed.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .site import SITE_CONFIG, SiteConfig

_IMG_SRC_RE = re.compile(
    r"""<img\b[^>]*?\ssrc\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)


class ImageDomainError(ValueError):
    """Remote image host is not in the image domain allow-list.

    Attributes:
        src: The rejected image source.
    """

    def __init__(self, src: str):
        self.src = src
        super().__init__(f"Image host not allowed: {src}")


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def _rewrite_image_path(src: str, folder: str) -> str:
    """Rewrite relative image sources to point into the images asset folder.

    Args:
        src: Original image source.
        folder: Folder of the document being rendered.

    Returns:
        Rewritten image source path.
    """
    if src.startswith(("http://", "https://", "//", "/", "data:")):
        return src
    prefix = PurePosixPath(folder) if folder else PurePosixPath()
    return f"/assets/images/{(prefix / src).as_posix()}"


class _SiteHTMLRenderer(mistune.HTMLRenderer):
    """Mistune renderer with heading anchors, image checks and highlighting.

    Attributes:
        folder: Folder of the document being rendered.
        site: Site configuration supplying the image allow-list.
    """

    def __init__(self, folder: str, site: SiteConfig):
        super().__init__(escape=False)
        self.folder = folder
        self.site = site
        self._heading_ids: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        slug = _generate_heading_id(text)
        seen = self._heading_ids.get(slug, 0)
        self._heading_ids[slug] = seen + 1
        anchor = f"{slug}-{seen}" if seen else slug
        return f'<h{level} id="{anchor}">{text}</h{level}>\n'

    def image(self, text: str, url: str | None = None, title: str | None = None):
        src = url or ""
        if not self.site.allows_image(src):
            raise ImageDomainError(src)
        return super().image(text, _rewrite_image_path(src, self.folder), title)

    def block_html(self, html: str) -> str:
        return super().block_html(self._check_raw_images(html))

    def inline_html(self, html: str) -> str:
        return super().inline_html(self._check_raw_images(html))

    def _check_raw_images(self, html: str) -> str:
        """Apply the image allow-list to ``<img>`` tags written as raw HTML."""
        for match in _IMG_SRC_RE.finditer(html):
            src = next(group for group in match.groups() if group is not None)
            if not self.site.allows_image(src):
                raise ImageDomainError(src)
        return html

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a fenced code block, highlighted when the language is known."""
        lang = info.split()[0] if info else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                return highlight(code, lexer, HtmlFormatter(cssclass="highlight"))
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders markdown document bodies to HTML."""

    source_type = "markdown"

    def __init__(self, site: SiteConfig = SITE_CONFIG):
        self.site = site

    def render(self, content: str, folder: str = "") -> str:
        """Render markdown to HTML.

        Args:
            content: Markdown source.
            folder: Folder of the document, used for relative image paths.

        Returns:
            Rendered HTML.

        Raises:
            ImageDomainError: If the body embeds an image from a host
                outside the allow-list.
        """
        markdown = mistune.create_markdown(
            renderer=_SiteHTMLRenderer(folder, self.site),
            plugins=["strikethrough", "table", "url"],
        )
        return markdown(content)


def pygments_css() -> str:
    """Return Pygments CSS rules for the ``.highlight`` class."""
    return HtmlFormatter().get_style_defs(".highlight")
