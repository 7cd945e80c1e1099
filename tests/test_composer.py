import pytest

from conftest import write_doc
from folio.components import MemoryPreferenceStore
from folio.composer import PageComposer, Route
from folio.content import FileContentLoader, MalformedContentError, NotFoundError
from folio.extractors import ValidationError


def make_composer(project, **kwargs):
    return PageComposer(FileContentLoader(project / "content"), year=2024, **kwargs)


def test_homepage_end_to_end(project):
    html = make_composer(project).compose_homepage()
    assert '<h1 class="hero__title">Hello</h1>' in html
    assert '<p class="hero__subtitle">World</p>' in html
    assert '<a class="hero__cta button button--lg" href="/start">Go<span' in html
    assert "<title>Brett Plemons | Senior Engineering Leader</title>" in html
    assert '<footer class="footer">' in html
    assert 'data-navbar' in html


def test_every_page_loads_identity_widget(project):
    composer = make_composer(project)
    script = '<script src="https://identity.netlify.com/v1/netlify-identity-widget.js">'
    assert script in composer.compose_homepage()
    assert script in composer.compose_page("about")
    assert script in composer.compose_not_found()


def test_homepage_has_no_theme_until_preference_known(project):
    html = make_composer(project).compose_homepage()
    assert 'data-theme-toggle-mount></span>' in html
    assert "<html lang=\"en\" data-default-theme=\"dark\">" in html


def test_homepage_with_preference_store_renders_toggle(project):
    html = make_composer(
        project, preference_store=MemoryPreferenceStore("light")
    ).compose_homepage()
    assert 'class="light"' in html
    assert "data-theme-toggle " in html


def test_homepage_missing_field_fails(project):
    write_doc(project / "content", "homepage", "title: Hello\nsubtitle: World\n")
    with pytest.raises(ValidationError) as excinfo:
        make_composer(project).compose_homepage()
    assert excinfo.value.fields == ["ctaText", "ctaLink"]


def test_homepage_missing_document(tmp_path):
    (tmp_path / "content").mkdir()
    with pytest.raises(NotFoundError):
        make_composer(tmp_path).compose_homepage()


def test_homepage_malformed_document(project):
    (project / "content" / "homepage.md").write_text("title: Hello\n", encoding="utf-8")
    with pytest.raises(MalformedContentError):
        make_composer(project).compose_homepage()


def test_homepage_reflects_edits_without_restart(project):
    composer = make_composer(project)
    assert "Hello" in composer.compose_homepage()
    write_doc(
        project / "content",
        "homepage",
        "title: Howdy\nsubtitle: World\nctaText: Go\nctaLink: /start\n",
    )
    assert '<h1 class="hero__title">Howdy</h1>' in composer.compose_homepage()


def test_compose_page(project):
    html = make_composer(project).compose_page("about")
    assert '<h1 class="page__title">About</h1>' in html
    assert "<p>I build things.</p>" in html
    assert "<title>About - Brett Plemons | Senior Engineering Leader</title>" in html
    assert '<meta name="description" content="I build things.">' in html
    assert 'class="nav-link nav-link--active" href="/about/"' in html


def test_compose_projects_orders_cards(project):
    html = make_composer(project).compose_projects()
    assert html.index("Atlas") < html.index("Beacon")
    assert '<span class="tag">Python</span>' in html
    assert "<li>Rust</li>" in html
    assert html.count('class="card__link"') == 1
    assert '<h1 class="projects__title">Projects</h1>' in html


def test_compose_projects_uses_projects_document(project):
    write_doc(project / "content", "projects", "title: My Work\n", "\nSelected work.\n")
    html = make_composer(project).compose_projects()
    assert '<h1 class="projects__title">My Work</h1>' in html
    assert "Selected work." in html


def test_compose_projects_empty(tmp_path):
    (tmp_path / "content").mkdir()
    html = make_composer(tmp_path).compose_projects()
    assert "No projects yet." in html


def test_compose_projects_invalid_card_fails(project):
    write_doc(project / "content", "projects/broken", "title: Broken\n")
    with pytest.raises(ValidationError) as excinfo:
        make_composer(project).compose_projects()
    assert excinfo.value.name == "projects/broken"


def test_compose_not_found_reads_no_content(tmp_path):
    html = make_composer(tmp_path).compose_not_found()
    assert '<h1 class="error__code">404</h1>' in html
    assert "This page could not be found." in html


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/", Route("home", "homepage", "/")),
        ("", Route("home", "homepage", "/")),
        ("/index.html", Route("home", "homepage", "/")),
        ("/about", Route("page", "about", "/about/")),
        ("/about/", Route("page", "about", "/about/")),
        ("/about/index.html", Route("page", "about", "/about/")),
        ("/projects/?q=1", Route("projects", "projects", "/projects/")),
    ],
)
def test_resolve(project, path, expected):
    assert make_composer(project).resolve(path) == expected


@pytest.mark.parametrize(
    "path",
    [
        "/homepage/",
        "/outstatic",
        "/outstatic/posts",
        "/outstatic?x=1",
        "/outstatic/#top",
        "/a/b/",
        "/_draft/",
    ],
)
def test_resolve_rejects(project, path):
    with pytest.raises(NotFoundError):
        make_composer(project).resolve(path)


def test_resolve_drafts_when_enabled(project):
    assert make_composer(project, include_drafts=True).resolve("/_draft/").name == "_draft"


def test_render_path_unknown_document(project):
    with pytest.raises(NotFoundError):
        make_composer(project).render_path("/missing/")


def test_routes(project):
    write_doc(project / "content", "_hidden", "title: Hidden\n")
    routes = make_composer(project).routes()
    assert [r.path for r in routes] == ["/", "/projects/", "/about/"]

    with_drafts = make_composer(project, include_drafts=True).routes()
    assert "/_hidden/" in [r.path for r in with_drafts]


def test_routes_skip_document_named_after_cms_prefix(project):
    write_doc(project / "content", "outstatic", "title: Admin\n")
    routes = make_composer(project).routes()
    assert [r.path for r in routes] == ["/", "/projects/", "/about/"]
