"""Protocol definitions for Folio.

This module defines the interfaces (protocols) the pipeline pieces depend
on, so the composer, the server and the components can be exercised with
in-memory stand-ins.

These protocols enable:
- Loose coupling between the loader, extractors and composer
- Easy testing through mock implementations
- Swapping the preference store between process memory and browser cookies
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .content import ContentDocument


@runtime_checkable
class ContentLoader(Protocol):
    """Protocol for reading documents from a content store."""

    @abstractmethod
    def load(self, name: str) -> ContentDocument:
        """Read and parse a named document.

        Args:
            name: Logical document name.

        Returns:
            The parsed document.

        Raises:
            NotFoundError: If the document does not exist.
            MalformedContentError: If its front-matter cannot be parsed.
        """
        ...

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether a named document exists."""
        ...

    @abstractmethod
    def iter_names(self, folder: str = "", include_drafts: bool = False) -> list[str]:
        """List document names in a folder of the store."""
        ...


@runtime_checkable
class ViewModelExtractor(Protocol):
    """Protocol for projecting a document into a typed view-model."""

    @abstractmethod
    def extract(self, document: ContentDocument) -> Any:
        """Project a document.

        Args:
            document: Parsed content document.

        Returns:
            A page-specific view-model.

        Raises:
            ValidationError: If required fields are missing or mistyped.
        """
        ...


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering document bodies to HTML."""

    @abstractmethod
    def render(self, content: str, folder: str = "") -> str:
        """Render body text to HTML.

        Args:
            content: Source text.
            folder: Folder of the document, for relative path resolution.

        Returns:
            Rendered HTML.
        """
        ...


@runtime_checkable
class PreferenceStore(Protocol):
    """Protocol for the collaborator that persists the theme preference."""

    @abstractmethod
    def get(self) -> str | None:
        """Return the stored theme name, or None if nothing is stored."""
        ...

    @abstractmethod
    def set(self, value: str) -> None:
        """Persist a theme name."""
        ...


@runtime_checkable
class AssetProcessor(Protocol):
    """Protocol for the per-file steps of the asset pipeline.

    Attributes:
        priority: Registry order, highest first.
    """

    priority: int

    @abstractmethod
    def can_process(self, path: Path) -> bool:
        """Check if this processor can handle the given asset."""
        ...

    @abstractmethod
    def process(self, source: Path, dest: Path) -> bool:
        """Process an asset file.

        Args:
            source: Source asset path.
            dest: Destination path for processed asset.

        Returns:
            True if processing was successful.
        """
        ...
