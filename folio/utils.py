"""Utility functions for Folio.

This module contains small helpers shared by the content pipeline, the
build and the CLI.

Key functions:
    slugify: Convert names to URL slugs.
    titleize: Convert filenames to human-readable titles.
    first_paragraph: Extract a plain-text summary from markdown.
    ensure_clean_dir: Ensure a directory exists and is empty.

Note:
    HTML-related utilities (absolutize_html_urls, join_root_url) live in
    html_utils.py.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path


def slugify(name: str) -> str:
    """Convert a name to a URL slug.

    Args:
        name: Free-form name or filename stem.

    Returns:
        Lowercase slug with runs of other characters collapsed to ``-``.

    Examples:
        >>> slugify("My Side Project")
        'my-side-project'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    return cleaned.strip("-").lower()


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Replaces hyphens and underscores with spaces and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("getting-started.md")
        'Getting Started'
    """
    base = Path(filename).stem
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def first_paragraph(text: str, limit: int = 160) -> str:
    """Extract and clean the first paragraph from markdown text.

    Headings, images, fences and HTML tags are skipped or stripped, and
    whitespace is collapsed.

    Args:
        text: Markdown text to extract from.
        limit: Maximum character length of result.

    Returns:
        Cleaned first paragraph, truncated to limit characters.
    """
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    for para in paragraphs:
        if para.startswith(("#", "![", "```")):
            continue
        para = re.sub(r"<[^>]+>", "", para)
        collapsed = " ".join(para.split())
        if collapsed:
            return collapsed[:limit]
    return ""


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
