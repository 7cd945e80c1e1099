"""Page composition for Folio.

The composer is the entry point of the content pipeline: for one page it
loads the document, projects it into a view-model and renders the result
through the layout and component templates. It is called once per page
during a build and once per request by the dev server.

Key classes:
- Route: A resolved URL path.
- PageComposer: Loads, extracts and renders pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from .collections import ProjectCollection
from .components import Footer, Hero, Navigation, ProjectCard, Theme, ThemeToggle
from .content import NotFoundError
from .extractors import (
    HomepageExtractor,
    PageExtractor,
    PageViewModel,
    ProjectExtractor,
)
from .protocols import ContentLoader, PreferenceStore, ViewModelExtractor
from .site import SITE_CONFIG, SiteConfig
from .templates import TemplateEngine
from .utils import titleize

HOMEPAGE = "homepage"
PROJECTS = "projects"

ROUTE_HOME = "home"
ROUTE_PROJECTS = "projects"
ROUTE_PAGE = "page"


@dataclass(frozen=True)
class Route:
    """A URL path resolved to the page that renders it.

    Attributes:
        kind: One of ``home``, ``projects`` or ``page``.
        name: Document name backing the route.
        path: Canonical URL path.
    """

    kind: str
    name: str
    path: str


class PageComposer:
    """Composes complete pages from the content store.

    Attributes:
        loader: Content loader reading the store.
        engine: Template engine rendering the page tree.
        site: Site configuration.
        include_drafts: Whether draft documents are routable.
        preference_store: Theme preference source. Without one the theme
            toggle stays unresolved and renders nothing.
        year: Copyright year override for the footer.
    """

    def __init__(
        self,
        loader: ContentLoader,
        engine: TemplateEngine | None = None,
        site: SiteConfig = SITE_CONFIG,
        include_drafts: bool = False,
        preference_store: PreferenceStore | None = None,
        year: int | None = None,
    ):
        self.loader = loader
        self.site = site
        self.engine = engine or TemplateEngine(site)
        self.include_drafts = include_drafts
        self.preference_store = preference_store
        self.year = year
        self.homepage_extractor: ViewModelExtractor = HomepageExtractor()
        self.page_extractor: ViewModelExtractor = PageExtractor()
        self.project_extractor: ViewModelExtractor = ProjectExtractor()

    def compose_homepage(self, current_path: str = "/") -> str:
        """Render the homepage.

        Args:
            current_path: Path the navigation marks as active.

        Raises:
            NotFoundError: If the homepage document is missing.
            MalformedContentError: If its front-matter cannot be parsed.
            ValidationError: If a hero field is missing.
        """
        document = self.loader.load(HOMEPAGE)
        homepage = self.homepage_extractor.extract(document)
        context = self._chrome(current_path)
        context.update(hero=Hero(homepage), page_title=None)
        return self.engine.render_page("pages/home.html.jinja", context)

    def compose_page(self, name: str) -> str:
        """Render a secondary page from the document of the same name."""
        document = self.loader.load(name)
        page = self.page_extractor.extract(document)
        context = self._chrome(f"/{name}/")
        context.update(
            page=page, page_title=page.title, page_description=page.description
        )
        return self.engine.render_page("pages/page.html.jinja", context)

    def compose_projects(self) -> str:
        """Render the projects listing.

        The optional ``projects`` document supplies the title and intro;
        every document under ``projects/`` becomes a card.
        """
        if self.loader.exists(PROJECTS):
            page = self.page_extractor.extract(self.loader.load(PROJECTS))
        else:
            page = PageViewModel(
                name=PROJECTS, title=titleize(PROJECTS), description="", body_html=""
            )
        projects = ProjectCollection(
            self.project_extractor.extract(self.loader.load(name))
            for name in self.loader.iter_names(PROJECTS, self.include_drafts)
        ).sorted()
        context = self._chrome(f"/{PROJECTS}/")
        context.update(
            page=page,
            page_title=page.title,
            page_description=page.description,
            cards=[ProjectCard.from_view_model(p) for p in projects],
            technologies=projects.technologies(),
        )
        return self.engine.render_page("pages/projects.html.jinja", context)

    def compose_error(self, status: int, message: str, current_path: str = "") -> str:
        """Render the generic error page. Reads no content."""
        context = self._chrome(current_path)
        context.update(page_title=str(status), status=status, message=message)
        return self.engine.render_page("pages/error.html.jinja", context)

    def compose_not_found(self) -> str:
        return self.compose_error(404, "This page could not be found.")

    def resolve(self, url_path: str) -> Route:
        """Resolve a URL path to a route.

        Args:
            url_path: Request path, with or without trailing slash.

        Returns:
            The matching Route.

        Raises:
            NotFoundError: If no document can back the path.
        """
        path = urlsplit(url_path).path
        segments = [s for s in path.split("/") if s]
        if segments and segments[-1] == "index.html":
            segments = segments[:-1]
        if not segments:
            return Route(ROUTE_HOME, HOMEPAGE, "/")
        if len(segments) != 1 or self.site.is_cms_path(path):
            raise NotFoundError(url_path, "no route")
        name = segments[0]
        if name == PROJECTS:
            return Route(ROUTE_PROJECTS, PROJECTS, f"/{PROJECTS}/")
        if name == HOMEPAGE or (name.startswith("_") and not self.include_drafts):
            raise NotFoundError(url_path, "no route")
        return Route(ROUTE_PAGE, name, f"/{name}/")

    def render_route(self, route: Route) -> str:
        if route.kind == ROUTE_HOME:
            return self.compose_homepage()
        if route.kind == ROUTE_PROJECTS:
            return self.compose_projects()
        return self.compose_page(route.name)

    def render_path(self, url_path: str) -> str:
        """Resolve and render a URL path."""
        return self.render_route(self.resolve(url_path))

    def routes(self) -> list[Route]:
        """List every route the current content store can render."""
        routes: list[Route] = []
        if self.loader.exists(HOMEPAGE):
            routes.append(Route(ROUTE_HOME, HOMEPAGE, "/"))
        if self.loader.exists(PROJECTS) or self.loader.iter_names(PROJECTS):
            routes.append(Route(ROUTE_PROJECTS, PROJECTS, f"/{PROJECTS}/"))
        for name in self.loader.iter_names(include_drafts=self.include_drafts):
            if name in (HOMEPAGE, PROJECTS) or self.site.is_cms_path(f"/{name}/"):
                continue
            routes.append(Route(ROUTE_PAGE, name, f"/{name}/"))
        return routes

    def _chrome(self, current_path: str) -> dict[str, Any]:
        """Build the navigation, footer and theme shared by every page."""
        toggle = ThemeToggle(Theme(self.site.default_theme))
        if self.preference_store is not None:
            toggle.mount(self.preference_store)
        return {
            "navigation": Navigation(self.site, current_path, toggle),
            "footer": Footer(self.site, self.year),
            "theme": toggle.theme.value if toggle.theme else None,
            "page_description": None,
        }
