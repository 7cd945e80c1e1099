"""View-model extractors for Folio.

Each extractor projects the front-matter of a ContentDocument into a
typed, page-specific view-model. Required fields are validated up front so
a document missing copy fails loudly instead of rendering an empty hero.

Key classes:
- HomepageViewModel / HomepageExtractor: Homepage hero fields.
- PageViewModel / PageExtractor: Secondary pages with a markdown body.
- ProjectViewModel / ProjectExtractor: Project cards.
- ValidationError: Raised for missing or mistyped fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .content import ContentDocument, ContentError
from .protocols import ContentRenderer
from .renderers import MarkdownRenderer
from .utils import first_paragraph


class ValidationError(ContentError, ValueError):
    """Front-matter fields are missing, empty or of the wrong type.

    Attributes:
        fields: Offending front-matter keys, in declaration order.
    """

    def __init__(self, name: str, fields: list[str], reason: str = "missing or empty"):
        self.fields = fields
        super().__init__(name, f"{reason} field(s): {', '.join(fields)}")


def require_strings(document: ContentDocument, keys: tuple[str, ...]) -> dict[str, str]:
    """Collect required non-empty string fields from a document.

    Args:
        document: Parsed content document.
        keys: Front-matter keys that must be present.

    Returns:
        Mapping of key to the unchanged front-matter value.

    Raises:
        ValidationError: Naming every key that is absent, blank or not a string.
    """
    metadata: Mapping[str, Any] = document.metadata
    bad = [
        key
        for key in keys
        if not isinstance(metadata.get(key), str) or not metadata[key].strip()
    ]
    if bad:
        raise ValidationError(document.name, bad)
    return {key: metadata[key] for key in keys}


def optional_string(document: ContentDocument, key: str) -> str | None:
    value = document.metadata.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(document.name, [key], reason="non-string")
    return value


@dataclass(frozen=True)
class HomepageViewModel:
    """Homepage hero copy.

    Attributes:
        title: Main heading.
        subtitle: Supporting line under the heading.
        cta_text: Label of the call-to-action control.
        cta_link: URL or in-site path the call-to-action points to.
    """

    title: str
    subtitle: str
    cta_text: str
    cta_link: str


@dataclass(frozen=True)
class PageViewModel:
    """A secondary page with markdown body."""

    name: str
    title: str
    description: str
    body_html: str


@dataclass(frozen=True)
class ProjectViewModel:
    """Project card data.

    Attributes:
        name: Logical document name.
        title: Project name.
        description: Short description shown on the card.
        link: Optional external link to the project.
        technologies: Technology tags, possibly empty.
        order: Optional explicit sort position.
    """

    name: str
    title: str
    description: str
    link: str | None = None
    technologies: tuple[str, ...] = ()
    order: int | None = None


class HomepageExtractor:
    """Projects the homepage document into a HomepageViewModel."""

    FIELDS = ("title", "subtitle", "ctaText", "ctaLink")

    def extract(self, document: ContentDocument) -> HomepageViewModel:
        """Extract the four hero fields.

        Args:
            document: The parsed homepage document.

        Returns:
            HomepageViewModel whose fields equal the front-matter values.

        Raises:
            ValidationError: If any field is absent, empty or not a string.
        """
        values = require_strings(document, self.FIELDS)
        return HomepageViewModel(
            title=values["title"],
            subtitle=values["subtitle"],
            cta_text=values["ctaText"],
            cta_link=values["ctaLink"],
        )


class PageExtractor:
    """Projects a secondary page document into a PageViewModel.

    The description falls back to the first paragraph of the body.
    """

    FIELDS = ("title",)

    def __init__(self, renderer: ContentRenderer | None = None):
        self.renderer = renderer or MarkdownRenderer()

    def extract(self, document: ContentDocument) -> PageViewModel:
        values = require_strings(document, self.FIELDS)
        description = optional_string(document, "description")
        folder = document.name.rpartition("/")[0]
        return PageViewModel(
            name=document.name,
            title=values["title"],
            description=description or first_paragraph(document.body),
            body_html=self.renderer.render(document.body, folder),
        )


class ProjectExtractor:
    """Projects a project document into a ProjectViewModel."""

    FIELDS = ("title", "description")

    def extract(self, document: ContentDocument) -> ProjectViewModel:
        values = require_strings(document, self.FIELDS)
        return ProjectViewModel(
            name=document.name,
            title=values["title"],
            description=values["description"],
            link=optional_string(document, "link"),
            technologies=self._technologies(document),
            order=self._order(document),
        )

    def _technologies(self, document: ContentDocument) -> tuple[str, ...]:
        value = document.metadata.get("technologies")
        if value is None:
            return ()
        if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
            raise ValidationError(document.name, ["technologies"], reason="non-list")
        return tuple(value)

    def _order(self, document: ContentDocument) -> int | None:
        value = document.metadata.get("order")
        if value is None:
            return None
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(document.name, ["order"], reason="non-integer")
        return value
