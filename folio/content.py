"""Content loading for Folio.

This module reads named documents from the content store and splits each
one into a front-matter metadata record and a markdown body.

Key classes:
- ContentDocument: Frozen record of one parsed content file.
- FileContentLoader: Implementation of the ContentLoader protocol for a
  directory of ``.md`` files.

Errors:
- ContentError: Base class for every content pipeline failure.
- NotFoundError: The requested document does not exist.
- MalformedContentError: The document has no parseable front-matter block.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<block>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class ContentError(Exception):
    """Base class for content pipeline errors.

    Attributes:
        name: Logical name of the document involved.
    """

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(f"{name}: {message}")


class NotFoundError(ContentError, FileNotFoundError):
    """Requested content document does not exist in the content store."""


class MalformedContentError(ContentError, ValueError):
    """Content document exists but its front-matter cannot be parsed."""


@dataclass(frozen=True)
class ContentDocument:
    """A parsed content file.

    Attributes:
        name: Logical document name (path relative to the store, no suffix).
        path: File the document was read from.
        metadata: Read-only front-matter mapping.
        body: Markdown text following the front-matter block.
    """

    name: str
    path: Path
    metadata: Mapping[str, Any]
    body: str


def parse_frontmatter(text: str, name: str = "<string>") -> tuple[dict[str, Any], str]:
    """Split a document into its YAML front-matter and body.

    Args:
        text: Raw file content.
        name: Document name used in error messages.

    Returns:
        Tuple of (metadata dict, remaining body).

    Raises:
        MalformedContentError: If the block is missing, is not valid YAML,
            does not contain key/value pairs or has a non-string key.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise MalformedContentError(name, "missing front-matter block")
    try:
        data = yaml.safe_load(match.group("block"))
    except yaml.YAMLError as exc:
        raise MalformedContentError(name, f"invalid front-matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedContentError(
            name, f"front-matter must be key/value pairs, got {type(data).__name__}"
        )
    # YAML folds 1, 1.0 and true into one key; only string keys are accepted
    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise MalformedContentError(
            name, f"front-matter keys must be strings, got {bad_keys[0]!r}"
        )
    return data, text[match.end() :]


class FileContentLoader:
    """Loads content documents from a directory.

    Each document name maps to ``<content_dir>/<name>.md``. Documents are
    read fresh on every call; nothing is cached.

    Attributes:
        content_dir: Directory acting as the content store.
    """

    suffix = ".md"

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def path_for(self, name: str) -> Path:
        """Map a logical document name to its file path.

        Raises:
            NotFoundError: If the name is empty or escapes the content store.
        """
        rel = PurePosixPath(name)
        if not rel.parts or rel.is_absolute() or ".." in rel.parts:
            raise NotFoundError(name, "invalid document name")
        return self.content_dir.joinpath(*rel.parts).with_name(rel.name + self.suffix)

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except NotFoundError:
            return False

    def load(self, name: str) -> ContentDocument:
        """Read and parse a named document.

        Args:
            name: Logical document name, e.g. ``homepage`` or ``projects/atlas``.

        Returns:
            The parsed ContentDocument.

        Raises:
            NotFoundError: If no such document exists.
            MalformedContentError: If the file is not UTF-8 or its
                front-matter cannot be parsed.
        """
        path = self.path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFoundError(name, f"no document at {path}") from exc
        except UnicodeDecodeError as exc:
            raise MalformedContentError(name, f"not valid UTF-8: {exc.reason}") from exc
        metadata, body = parse_frontmatter(text, name)
        return ContentDocument(
            name=name,
            path=path,
            metadata=MappingProxyType(metadata),
            body=body,
        )

    def iter_names(self, folder: str = "", include_drafts: bool = False) -> list[str]:
        """List document names directly inside a folder of the store.

        Only files ending in exactly ``.md`` are listed, since ``load``
        opens that name. Files whose name starts with ``_`` are drafts and
        are skipped unless requested.

        Args:
            folder: Folder relative to the content directory.
            include_drafts: Whether to include draft documents.

        Returns:
            Sorted list of logical document names.
        """
        base = self.content_dir / folder if folder else self.content_dir
        if not base.is_dir():
            return []
        names: list[str] = []
        for path in sorted(base.iterdir()):
            if not path.is_file() or path.suffix != self.suffix:
                continue
            if path.name.startswith("_") and not include_drafts:
                continue
            names.append(f"{folder}/{path.stem}" if folder else path.stem)
        return names
