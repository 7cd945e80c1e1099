from pathlib import Path
from types import MappingProxyType

import pytest

from folio.content import ContentDocument
from folio.extractors import (
    HomepageExtractor,
    HomepageViewModel,
    PageExtractor,
    ProjectExtractor,
    ValidationError,
)
from folio.protocols import ViewModelExtractor
from folio.renderers import ImageDomainError


def make_doc(metadata, body="", name="homepage"):
    return ContentDocument(
        name=name,
        path=Path(f"{name}.md"),
        metadata=MappingProxyType(dict(metadata)),
        body=body,
    )


HERO = {"title": "Hello", "subtitle": "World", "ctaText": "Go", "ctaLink": "/start"}


def test_homepage_extractor_passes_values_through():
    homepage = HomepageExtractor().extract(make_doc(HERO))
    assert homepage == HomepageViewModel(
        title="Hello", subtitle="World", cta_text="Go", cta_link="/start"
    )


def test_homepage_extractor_keeps_values_unchanged():
    meta = dict(HERO, title="  Spaced <b>title</b>  ")
    assert HomepageExtractor().extract(make_doc(meta)).title == "  Spaced <b>title</b>  "


def test_homepage_extractor_ignores_unknown_fields():
    meta = dict(HERO, extra="ignored", draft=True)
    assert HomepageExtractor().extract(make_doc(meta)).cta_link == "/start"


def test_homepage_extractor_reports_every_missing_field_in_order():
    meta = {"subtitle": "World"}
    with pytest.raises(ValidationError) as excinfo:
        HomepageExtractor().extract(make_doc(meta))
    assert excinfo.value.fields == ["title", "ctaText", "ctaLink"]
    assert excinfo.value.name == "homepage"
    assert "ctaText" in str(excinfo.value)


@pytest.mark.parametrize("value", ["", "   ", None, 42, ["Go"]])
def test_homepage_extractor_rejects_blank_or_non_string(value):
    meta = dict(HERO, ctaText=value)
    with pytest.raises(ValidationError) as excinfo:
        HomepageExtractor().extract(make_doc(meta))
    assert excinfo.value.fields == ["ctaText"]


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        HomepageExtractor().extract(make_doc({}))


def test_page_extractor_renders_body():
    doc = make_doc({"title": "About"}, "## Intro\n\nI build things.\n", name="about")
    page = PageExtractor().extract(doc)
    assert page.name == "about"
    assert page.title == "About"
    assert '<h2 id="intro">Intro</h2>' in page.body_html
    assert page.description == "I build things."


def test_page_extractor_prefers_explicit_description():
    doc = make_doc({"title": "About", "description": "Short"}, "Long body.", name="about")
    assert PageExtractor().extract(doc).description == "Short"


def test_page_extractor_requires_title():
    with pytest.raises(ValidationError) as excinfo:
        PageExtractor().extract(make_doc({"description": "x"}, name="about"))
    assert excinfo.value.fields == ["title"]


def test_page_extractor_rejects_non_string_description():
    with pytest.raises(ValidationError) as excinfo:
        PageExtractor().extract(make_doc({"title": "A", "description": 3}, name="about"))
    assert excinfo.value.fields == ["description"]
    assert "non-string" in excinfo.value.message


def test_page_extractor_propagates_image_domain_error():
    doc = make_doc(
        {"title": "About"}, "![me](https://evil.example.com/me.png)\n", name="about"
    )
    with pytest.raises(ImageDomainError):
        PageExtractor().extract(doc)


def test_project_extractor_full():
    doc = make_doc(
        {
            "title": "Atlas",
            "description": "Maps",
            "link": "https://example.com",
            "technologies": ["Python", "Rust"],
            "order": 2,
        },
        name="projects/atlas",
    )
    project = ProjectExtractor().extract(doc)
    assert project.name == "projects/atlas"
    assert project.title == "Atlas"
    assert project.description == "Maps"
    assert project.link == "https://example.com"
    assert project.technologies == ("Python", "Rust")
    assert project.order == 2


def test_project_extractor_optional_fields_default():
    project = ProjectExtractor().extract(
        make_doc({"title": "Beacon", "description": "Signals"}, name="projects/beacon")
    )
    assert project.link is None
    assert project.technologies == ()
    assert project.order is None


def test_project_extractor_empty_link_is_absent():
    project = ProjectExtractor().extract(
        make_doc({"title": "B", "description": "S", "link": ""}, name="projects/b")
    )
    assert project.link is None


@pytest.mark.parametrize(
    "field,value,reason",
    [
        ("technologies", "Python", "non-list"),
        ("technologies", ["Python", 3], "non-list"),
        ("order", "first", "non-integer"),
        ("order", True, "non-integer"),
    ],
)
def test_project_extractor_rejects_bad_optional_fields(field, value, reason):
    meta = {"title": "B", "description": "S", field: value}
    with pytest.raises(ValidationError) as excinfo:
        ProjectExtractor().extract(make_doc(meta, name="projects/b"))
    assert excinfo.value.fields == [field]
    assert reason in excinfo.value.message


def test_project_extractor_requires_description():
    with pytest.raises(ValidationError) as excinfo:
        ProjectExtractor().extract(make_doc({"title": "B"}, name="projects/b"))
    assert excinfo.value.fields == ["description"]


def test_extractors_match_protocol():
    for extractor in (HomepageExtractor(), PageExtractor(), ProjectExtractor()):
        assert isinstance(extractor, ViewModelExtractor)
