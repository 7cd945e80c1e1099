"""Static build for Folio.

Reads ``folio.yaml``, composes every route the content store can back into
``<output>/<route>/index.html``, writes ``404.html`` and processes assets.
A failure on any page stops the build with a BuildError pointing at the
document (or template) responsible.

Key functions:
- build_site: Build the whole site.
- load_config: Read project configuration with defaults applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import TemplateError, TemplateSyntaxError

from .assets import AssetPipeline
from .composer import PageComposer, Route
from .content import ContentError, FileContentLoader
from .html_utils import absolutize_html_urls
from .templates import TemplateEngine
from .utils import ensure_clean_dir

CONFIG_FILE = "folio.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "content_dir": "content",
    "output_dir": "output",
    "port": 4000,
    "root_url": "",
    "cms_url": "",
}


class BuildError(Exception):
    """A page could not be built.

    Attributes:
        source_path: Document or template the failure is attributed to.
        message: Human-readable error message.
        original_error: The exception raised while composing the page.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")

    @classmethod
    def wrap(cls, source_path: Path, exc: Exception) -> BuildError:
        """Describe ``exc`` for a person fixing ``source_path``."""
        if isinstance(exc, ContentError):
            message = exc.message
        elif isinstance(exc, TemplateSyntaxError):
            message = f"Template syntax error on line {exc.lineno}: {exc.message}"
            if exc.filename:
                source_path = Path(exc.filename)
        elif isinstance(exc, TemplateError):
            message = f"{type(exc).__name__}: {exc.message}"
        else:
            message = f"{type(exc).__name__}: {exc}"
        return cls(source_path, message, exc)


@dataclass
class BuildResult:
    """What a build wrote.

    Attributes:
        routes: Routes rendered to HTML.
        output_dir: Directory where the site was built.
        config: Effective project configuration.
        assets: Asset paths written under ``<output>/assets``.
    """

    routes: list[Route]
    output_dir: Path
    config: dict[str, Any]
    assets: list[Path] = field(default_factory=list)


def load_config(project_root: Path) -> dict[str, Any]:
    """Read ``folio.yaml`` over DEFAULT_CONFIG.

    A missing file, an empty file or a document that is not a mapping all
    leave the defaults untouched.
    """
    config = dict(DEFAULT_CONFIG)
    path = project_root / CONFIG_FILE
    if path.is_file():
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        if isinstance(loaded, dict):
            config.update(loaded)
    return config


def content_dir_for(project_root: Path, config: dict[str, Any]) -> Path:
    content_dir = project_root / config["content_dir"]
    if not content_dir.is_dir():
        raise FileNotFoundError(f"Expected content directory at {content_dir}")
    return content_dir


def build_site(
    project_root: Path,
    include_drafts: bool = False,
    root_url: str | None = None,
    clean_output: bool = True,
    output_dir_override: Path | None = None,
    year: int | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to build draft documents (names starting with _).
        root_url: Absolute URL the site is hosted at; overrides folio.yaml.
        clean_output: Whether to empty the output directory first.
        output_dir_override: Write here instead of the configured output_dir.
        year: Copyright year for the footer; defaults to the current year.

    Returns:
        BuildResult describing what was written.

    Raises:
        FileNotFoundError: If the content directory does not exist.
        BuildError: If any page fails to load, validate or render.
    """
    config = load_config(project_root)
    if root_url is not None:
        config["root_url"] = root_url
    base_url = str(config["root_url"] or "")
    content_dir = content_dir_for(project_root, config)
    output_dir = output_dir_override or project_root / config["output_dir"]
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    loader = FileContentLoader(content_dir)
    composer = PageComposer(
        loader,
        TemplateEngine(template_dirs=[project_root / "templates"], root_url=base_url),
        include_drafts=include_drafts,
        year=year,
    )
    routes = composer.routes()
    for route in routes:
        html = _compose(composer, loader, route)
        target = output_dir / route.path.strip("/") / "index.html"
        _write(target, html, base_url)
    _write(output_dir / "404.html", composer.compose_not_found(), base_url)

    assets = AssetPipeline(project_root, output_dir).run()
    return BuildResult(routes=routes, output_dir=output_dir, config=config, assets=assets)


def _compose(composer: PageComposer, loader: FileContentLoader, route: Route) -> str:
    try:
        return composer.render_route(route)
    except ContentError as exc:
        # may name a project card rather than the route's own document
        raise BuildError.wrap(loader.path_for(exc.name), exc) from exc
    except Exception as exc:
        raise BuildError.wrap(loader.path_for(route.name), exc) from exc


def _write(target: Path, html: str, base_url: str) -> None:
    if base_url:
        html = absolutize_html_urls(html, base_url)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding="utf-8")
