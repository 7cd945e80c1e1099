"""Site-wide configuration for Folio.

The site configuration is compiled into the package and read-only for the
lifetime of the process. Navigation and footer components consume it
directly; nothing in the content pipeline writes to it.

Key objects:
- NavItem: One navigation entry (label and href).
- SiteLinks: Named external link targets.
- SiteConfig: The full site record.
- SITE_CONFIG: The configured instance used by default everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit


@dataclass(frozen=True)
class NavItem:
    """A navigation entry.

    Attributes:
        label: Visible text of the link.
        href: In-site path the link points to.
    """

    label: str
    href: str


@dataclass(frozen=True)
class SiteLinks:
    """External link targets shown in the footer."""

    github: str
    blue_sky: str
    discord: str
    linkedin: str
    email: str


@dataclass(frozen=True)
class SiteConfig:
    """Static site configuration.

    Attributes:
        name: Site name, also the default document title.
        description: One-line description of the site.
        keywords: Descriptive keywords.
        nav_items: Ordered primary navigation entries.
        nav_menu_items: Ordered entries for the mobile menu overlay.
        links: External link targets.
        owner: Copyright holder shown in the footer.
        brand: Navbar logo text.
        brand_suffix: Secondary part of the navbar logo.
        image_domains: Hosts remote images may be loaded from.
        identity_widget_src: Identity script loaded into every page head.
        cms_path: Route prefix reserved for the CMS admin interface.
        default_theme: Theme used before a preference has been stored.
    """

    name: str
    description: str
    keywords: tuple[str, ...]
    nav_items: tuple[NavItem, ...]
    nav_menu_items: tuple[NavItem, ...]
    links: SiteLinks
    owner: str
    brand: str = "BP"
    brand_suffix: str = ".dev"
    image_domains: tuple[str, ...] = field(default=("res.cloudinary.com",))
    identity_widget_src: str = (
        "https://identity.netlify.com/v1/netlify-identity-widget.js"
    )
    cms_path: str = "/outstatic"
    default_theme: str = "dark"

    def title_for(self, page_title: str | None = None) -> str:
        """Return the document title for a page.

        Args:
            page_title: Title of the current page, or None for the site root.

        Returns:
            ``"<page title> - <site name>"`` or the bare site name.
        """
        if not page_title:
            return self.name
        return f"{page_title} - {self.name}"

    def allows_image(self, src: str) -> bool:
        """Check whether an image source may be rendered.

        Relative and root-relative sources are always allowed; remote
        sources must be served from one of ``image_domains``.
        """
        parts = urlsplit(src)
        if not parts.netloc:
            return True
        return (parts.hostname or "") in self.image_domains

    def is_cms_path(self, path: str) -> bool:
        """Check whether a URL path belongs to the CMS admin prefix.

        Query strings and fragments are ignored.
        """
        prefix = self.cms_path.rstrip("/")
        path = urlsplit(path).path
        return path == prefix or path.startswith(prefix + "/")


_NAV = (
    NavItem("Home", "/"),
    NavItem("About", "/about/"),
    NavItem("Experience", "/experience/"),
    NavItem("Projects", "/projects/"),
    NavItem("Blog", "/blog/"),
    NavItem("Contact", "/contact/"),
)

SITE_CONFIG = SiteConfig(
    name="Brett Plemons | Senior Engineering Leader",
    description=(
        "Portfolio of a Senior Engineering Leader with expertise in Software "
        "Architecture, Machine Learning, and Data-Intensive Applications."
    ),
    keywords=(
        "Brett Plemons",
        "Senior Engineering Leader",
        "Software Architecture",
        "Machine Learning",
        "Data-Intensive Applications",
        "software engineering",
        "engineering leader",
        "machine learning",
        "data-intensive applications",
        "developer experience",
    ),
    nav_items=_NAV,
    nav_menu_items=_NAV,
    links=SiteLinks(
        github="https://github.com/plemonsbrett",
        blue_sky="https://bsky.app/profile/brett.plemons.dev",
        discord="https://discord.com/users/brett.plemons.dev",
        linkedin="https://www.linkedin.com/in/brettplemons/",
        email="mailto:brett@plemons.dev",
    ),
    owner="Brett Plemons",
)
