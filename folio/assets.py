"""Asset pipeline for Folio.

The site ships its own stylesheet and browser script under the package's
``static`` directory. A project may add or override files by placing them
at the same relative path under its own ``assets`` directory. Every file
is run through the processor registry into ``<output>/assets``.

Key components:
- AssetPipeline: Collects built-in and project assets and processes them.
"""

from __future__ import annotations

from pathlib import Path

from .asset_processors import AssetProcessorRegistry, create_default_registry
from .renderers import pygments_css

PACKAGE_STATIC = Path(__file__).parent / "static"


class AssetPipeline:
    """Processes static assets into the output directory.

    Attributes:
        project_root: Root directory of the project.
        assets_dir: Directory containing project assets.
        output_dir: Directory where the site is written.
        processor_registry: Registry of asset processors.
    """

    def __init__(
        self,
        project_root: Path,
        output_dir: Path,
        processor_registry: AssetProcessorRegistry | None = None,
    ):
        self.project_root = project_root
        self.assets_dir = project_root / "assets"
        self.output_dir = output_dir
        self.processor_registry = processor_registry or create_default_registry()

    def collect(self) -> dict[Path, Path]:
        """Map each asset's path under ``assets/`` to its source file.

        Project assets win over built-in ones with the same relative path.
        """
        sources: dict[Path, Path] = {}
        for base in (PACKAGE_STATIC, self.assets_dir):
            if not base.exists():
                continue
            for item in sorted(base.rglob("*")):
                if item.is_file():
                    sources[item.relative_to(base)] = item
        return sources

    def run(self) -> list[Path]:
        """Execute the asset processing pipeline.

        Returns:
            Paths of the written assets, relative to ``<output>/assets``.
        """
        target = self.output_dir / "assets"
        target.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for rel, source in self.collect().items():
            if self.processor_registry.process(source, target / rel):
                written.append(rel)
        highlight = target / "css" / "highlight.css"
        highlight.parent.mkdir(parents=True, exist_ok=True)
        highlight.write_text(pygments_css(), encoding="utf-8")
        written.append(Path("css") / "highlight.css")
        return written
