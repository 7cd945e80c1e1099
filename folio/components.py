"""Presentation components for Folio.

Components are small objects holding the data (and, for navigation and the
theme toggle, the local UI state) a template needs. They never render
themselves; TemplateEngine.render_component turns them into markup using
the template each one names.

Key classes:
- Navigation: Scroll and mobile menu state plus active-link tracking.
- ThemeToggle: Two-value theme preference backed by a PreferenceStore.
- Hero: Homepage hero section.
- ProjectCard: One project card.
- Footer: Social links, footer navigation and copyright line.
- MemoryPreferenceStore / CookiePreferenceStore: PreferenceStore
  implementations.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from http.cookies import SimpleCookie
from typing import Any

from .extractors import HomepageViewModel, ProjectViewModel
from .protocols import PreferenceStore
from .site import SITE_CONFIG, NavItem, SiteConfig

# Pixels the viewport must scroll before the navbar switches style.
SCROLL_THRESHOLD = 10

THEME_COOKIE = "theme"


class MenuState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


class Component:
    """Base class for renderable components.

    Attributes:
        template: Template path relative to the templates directory.
    """

    template: str = ""

    @property
    def visible(self) -> bool:
        """Whether the component renders anything at all."""
        return True

    def context(self) -> dict[str, Any]:
        """Return the variables the component template needs."""
        return {}


class Navigation(Component):
    """Site navigation bar.

    The menu starts closed. Only the menu button (``toggle_menu``) and
    link activation (``activate_link``) change it; link activation only
    ever closes it.

    Attributes:
        site: Site configuration providing the nav items.
        current_path: URL path of the page being shown.
        theme_toggle: Toggle rendered inside the bar.
        scrolled: Whether the viewport is past SCROLL_THRESHOLD.
        menu: Mobile menu state.
    """

    template = "components/navbar.html.jinja"

    def __init__(
        self,
        site: SiteConfig = SITE_CONFIG,
        current_path: str = "/",
        theme_toggle: ThemeToggle | None = None,
    ):
        self.site = site
        self.current_path = current_path
        self.theme_toggle = theme_toggle or ThemeToggle(Theme(site.default_theme))
        self.scrolled = False
        self.menu = MenuState.CLOSED

    @property
    def menu_open(self) -> bool:
        return self.menu is MenuState.OPEN

    def on_scroll(self, offset: float) -> bool:
        """Record a scroll position.

        Args:
            offset: Vertical scroll offset in pixels.

        Returns:
            The updated scrolled flag.
        """
        self.scrolled = offset > SCROLL_THRESHOLD
        return self.scrolled

    def toggle_menu(self) -> MenuState:
        """Handle a menu button activation."""
        self.menu = MenuState.CLOSED if self.menu_open else MenuState.OPEN
        return self.menu

    def activate_link(self, href: str) -> None:
        """Handle a navigation link activation."""
        self.current_path = href
        self.menu = MenuState.CLOSED

    def is_active(self, item: NavItem | str) -> bool:
        href = item.href if isinstance(item, NavItem) else item
        return _normalize_path(href) == _normalize_path(self.current_path)

    def context(self) -> dict[str, Any]:
        return {
            "site": self.site,
            "items": self.site.nav_items,
            "menu_items": self.site.nav_menu_items,
            "scrolled": self.scrolled,
            "menu_open": self.menu_open,
            "is_active": self.is_active,
            "theme_toggle": self.theme_toggle,
        }


class MemoryPreferenceStore:
    """Keeps the theme preference in process memory."""

    def __init__(self, value: str | None = None):
        self.value = value

    def get(self) -> str | None:
        return self.value

    def set(self, value: str) -> None:
        self.value = value


class CookiePreferenceStore:
    """Reads the theme preference from a request's ``Cookie`` header.

    Writes are kept and exposed as a ``Set-Cookie`` header value so a
    server can hand them back to the browser.
    """

    def __init__(self, cookie_header: str | None = None):
        self._cookies: SimpleCookie = SimpleCookie()
        if cookie_header:
            self._cookies.load(cookie_header)
        self.pending: str | None = None

    def get(self) -> str | None:
        if self.pending is not None:
            return self.pending
        morsel = self._cookies.get(THEME_COOKIE)
        return morsel.value if morsel else None

    def set(self, value: str) -> None:
        self.pending = value

    def set_cookie_header(self) -> str | None:
        if self.pending is None:
            return None
        cookie: SimpleCookie = SimpleCookie()
        cookie[THEME_COOKIE] = self.pending
        cookie[THEME_COOKIE]["path"] = "/"
        cookie[THEME_COOKIE]["samesite"] = "Lax"
        return cookie[THEME_COOKIE].OutputString()


class ThemeToggle(Component):
    """Light/dark theme toggle.

    The persisted preference is only known once the toggle is mounted
    against a PreferenceStore. Until then ``theme`` is None and the toggle
    renders nothing, so the server never guesses a theme the browser will
    contradict.

    Attributes:
        default: Theme used when the store holds no valid preference.
        mounted: Whether the preference has been resolved.
    """

    template = "components/theme_toggle.html.jinja"

    def __init__(self, default: Theme = Theme.DARK):
        self.default = default
        self.mounted = False
        self._store: PreferenceStore | None = None
        self._theme: Theme | None = None

    @property
    def visible(self) -> bool:
        return self.mounted

    @property
    def theme(self) -> Theme | None:
        return self._theme

    def mount(self, store: PreferenceStore) -> Theme:
        """Resolve the persisted preference.

        Args:
            store: Preference persistence collaborator.

        Returns:
            The resolved theme.
        """
        self._store = store
        stored = store.get()
        try:
            self._theme = Theme(stored) if stored else self.default
        except ValueError:
            self._theme = self.default
        self.mounted = True
        return self._theme

    def set_theme(self, theme: Theme | str) -> Theme:
        """Set and persist a theme.

        Raises:
            RuntimeError: If the toggle has not been mounted.
            ValueError: If the value is not a known theme.
        """
        if self._store is None:
            raise RuntimeError("Theme toggle is not mounted")
        self._theme = Theme(theme)
        self._store.set(self._theme.value)
        return self._theme

    def toggle(self) -> Theme:
        """Switch to the other theme and persist it."""
        if self._theme is None:
            raise RuntimeError("Theme toggle is not mounted")
        return self.set_theme(self._theme.toggled())

    def context(self) -> dict[str, Any]:
        return {
            "theme": self._theme.value if self._theme else None,
            "next_theme": self._theme.toggled().value if self._theme else None,
            "is_dark": self._theme is Theme.DARK,
        }


class Hero(Component):
    """Homepage hero section: heading, subtitle and call-to-action."""

    template = "components/hero.html.jinja"

    def __init__(self, view_model: HomepageViewModel):
        self.view_model = view_model

    def context(self) -> dict[str, Any]:
        return {"hero": self.view_model}


class ProjectCard(Component):
    """Card summarising one project.

    Attributes:
        title: Project name.
        description: Short description.
        link: Optional project link; no link is rendered without it.
        technologies: Technology tags; no tag block is rendered when empty.
    """

    template = "components/project_card.html.jinja"

    def __init__(
        self,
        title: str,
        description: str,
        link: str | None = None,
        technologies: tuple[str, ...] | list[str] = (),
    ):
        self.title = title
        self.description = description
        self.link = link
        self.technologies = tuple(technologies)

    @classmethod
    def from_view_model(cls, project: ProjectViewModel) -> ProjectCard:
        return cls(
            title=project.title,
            description=project.description,
            link=project.link,
            technologies=project.technologies,
        )

    def context(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "technologies": self.technologies,
        }


class Footer(Component):
    """Site footer."""

    template = "components/footer.html.jinja"

    def __init__(self, site: SiteConfig = SITE_CONFIG, year: int | None = None):
        self.site = site
        self.year = year or datetime.now().year

    def context(self) -> dict[str, Any]:
        return {
            "site": self.site,
            "links": self.site.links,
            "items": self.site.nav_items,
            "year": self.year,
        }


def _normalize_path(path: str) -> str:
    stripped = path.split("#", 1)[0].split("?", 1)[0].strip("/")
    return f"/{stripped}/" if stripped else "/"
