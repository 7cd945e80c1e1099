"""Template rendering engine for Folio.

This module uses Jinja2 to render pages and components. Built-in templates
ship in the package's ``templates`` directory; a project can override any
of them by placing a file with the same relative path in its own
``templates`` directory.

Key class:
- TemplateEngine: Handles template loading, globals and rendering.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .components import Component
from .html_utils import join_root_url
from .site import SITE_CONFIG, SiteConfig

PACKAGE_TEMPLATES = Path(__file__).parent / "templates"

__all__ = ["PACKAGE_TEMPLATES", "TemplateEngine"]


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        site: Site configuration exposed to every template as ``site``.
        root_url: Optional base URL applied by ``url_for``.
        env: Jinja2 environment.
    """

    def __init__(
        self,
        site: SiteConfig = SITE_CONFIG,
        template_dirs: Iterable[Path] = (),
        root_url: str = "",
    ):
        """Initialize the template engine.

        Args:
            site: Site configuration.
            template_dirs: Override directories searched before the
                package templates.
            root_url: Optional base URL for links.
        """
        self.site = site
        self.root_url = root_url or ""
        search_path = [d for d in template_dirs if d.is_dir()]
        search_path.append(PACKAGE_TEMPLATES)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            enable_async=False,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = self.site
        self.env.globals["url_for"] = self._url_for
        self.env.globals["render"] = self.render_component

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying root_url if configured.

        Args:
            path: Path to generate URL for.

        Returns:
            Full URL with root_url prefix if configured.
        """
        if path.startswith(("http://", "https://", "//", "mailto:")):
            return path
        normalized = path if path.startswith("/") else f"/{path}"
        if self.root_url:
            return join_root_url(self.root_url, normalized)
        return normalized

    def render_component(self, component: Component) -> Markup:
        """Render a component through its template.

        Args:
            component: Component to render.

        Returns:
            Markup-safe HTML, empty when the component is not visible.
        """
        if not component.visible:
            return Markup("")
        template = self.env.get_template(component.template)
        return Markup(template.render(**component.context()))

    def render_page(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a page template.

        Args:
            template_name: Template path, e.g. ``pages/home.html.jinja``.
            context: Variables to make available in the template.

        Returns:
            Rendered HTML string.
        """
        template = self.env.get_template(template_name)
        return template.render(**context)
