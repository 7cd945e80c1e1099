"""Asset processors for Folio.

Every file that ends up under ``<output>/assets`` goes through exactly one
processor, chosen by the registry from the file's suffix.

Key classes:
- ImageProcessor: Re-encodes images with Pillow's optimizer.
- JSProcessor: Minifies JavaScript with rjsmin.
- StaticAssetProcessor: Copies everything else unchanged.
- AssetProcessorRegistry: Picks the processor for a file by priority.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from rjsmin import jsmin

from .protocols import AssetProcessor


class BaseAssetProcessor(ABC):
    """Shared behaviour of the processors.

    Subclasses list the suffixes they accept in ``extensions`` (an empty set
    accepts every file) and implement ``transform``.

    Attributes:
        extensions: Lowercase file suffixes handled by the processor.
        priority: Registry order, highest first.
    """

    extensions: frozenset[str] = frozenset()
    priority: int = 0

    def can_process(self, path: Path) -> bool:
        return not self.extensions or path.suffix.lower() in self.extensions

    def process(self, source: Path, dest: Path) -> bool:
        """Write the processed form of ``source`` to ``dest``.

        Returns:
            True once the destination file has been written.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        self.transform(source, dest)
        return True

    @abstractmethod
    def transform(self, source: Path, dest: Path) -> None:
        """Produce ``dest`` from ``source``; the parent directory exists."""


class ImageProcessor(BaseAssetProcessor):
    """Optimizes PNG, JPEG and WebP images.

    Files Pillow cannot decode are copied unchanged.
    """

    extensions = frozenset({".png", ".jpg", ".jpeg", ".webp"})
    priority = 100

    def transform(self, source: Path, dest: Path) -> None:
        try:
            with Image.open(source) as img:
                img.save(dest, optimize=True)
        except (UnidentifiedImageError, OSError) as exc:
            print(f"Image optimization skipped for {source.name}: {exc}")
            shutil.copy2(source, dest)


class JSProcessor(BaseAssetProcessor):
    """Minifies JavaScript files with rjsmin."""

    extensions = frozenset({".js"})
    priority = 80

    def transform(self, source: Path, dest: Path) -> None:
        script = source.read_text(encoding="utf-8")
        dest.write_text(jsmin(script), encoding="utf-8")


class StaticAssetProcessor(BaseAssetProcessor):
    """Fallback that copies stylesheets, fonts, icons and the rest as-is."""

    def transform(self, source: Path, dest: Path) -> None:
        shutil.copy2(source, dest)


class AssetProcessorRegistry:
    """Ordered collection of processors."""

    def __init__(self, processors: list[AssetProcessor] | None = None):
        self._processors: list[AssetProcessor] = []
        for processor in processors or ():
            self.register(processor)

    def register(self, processor: AssetProcessor) -> None:
        self._processors.append(processor)
        self._processors.sort(key=lambda p: -p.priority)

    def processor_for(self, path: Path) -> AssetProcessor | None:
        return next((p for p in self._processors if p.can_process(path)), None)

    def process(self, source: Path, dest: Path) -> bool:
        """Run the first matching processor.

        Returns:
            False when no registered processor accepts the file.
        """
        processor = self.processor_for(source)
        return processor.process(source, dest) if processor else False


def create_default_registry() -> AssetProcessorRegistry:
    return AssetProcessorRegistry(
        [ImageProcessor(), JSProcessor(), StaticAssetProcessor()]
    )
