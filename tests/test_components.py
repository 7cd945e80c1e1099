import pytest

from folio.components import (
    SCROLL_THRESHOLD,
    CookiePreferenceStore,
    Footer,
    Hero,
    MemoryPreferenceStore,
    MenuState,
    Navigation,
    ProjectCard,
    Theme,
    ThemeToggle,
)
from folio.extractors import HomepageViewModel, ProjectViewModel
from folio.protocols import PreferenceStore
from folio.site import SITE_CONFIG, NavItem


def test_navigation_menu_starts_closed_and_toggles():
    nav = Navigation()
    assert nav.menu is MenuState.CLOSED
    assert nav.toggle_menu() is MenuState.OPEN
    assert nav.menu_open
    assert nav.toggle_menu() is MenuState.CLOSED
    assert not nav.menu_open


def test_navigation_link_activation_only_closes_menu():
    nav = Navigation()
    nav.activate_link("/about/")
    assert nav.menu is MenuState.CLOSED

    nav.toggle_menu()
    nav.activate_link("/projects/")
    assert nav.menu is MenuState.CLOSED
    assert nav.current_path == "/projects/"


def test_navigation_scroll_threshold():
    nav = Navigation()
    assert nav.on_scroll(0) is False
    assert nav.on_scroll(SCROLL_THRESHOLD) is False
    assert nav.on_scroll(SCROLL_THRESHOLD + 1) is True
    assert nav.scrolled
    assert nav.on_scroll(3) is False
    assert not nav.scrolled


def test_navigation_scroll_does_not_touch_menu():
    nav = Navigation()
    nav.toggle_menu()
    nav.on_scroll(500)
    assert nav.menu is MenuState.OPEN


def test_navigation_active_link_normalizes_paths():
    nav = Navigation(current_path="/about")
    assert nav.is_active(NavItem("About", "/about/"))
    assert nav.is_active("/about/?ref=nav")
    assert not nav.is_active("/")

    home = Navigation(current_path="/")
    assert home.is_active("/")
    assert not home.is_active("/about/")


def test_navigation_context_exposes_site_items():
    context = Navigation(SITE_CONFIG, "/").context()
    assert [item.href for item in context["items"]] == [
        "/",
        "/about/",
        "/experience/",
        "/projects/",
        "/blog/",
        "/contact/",
    ]
    assert context["menu_open"] is False
    assert context["scrolled"] is False


def test_preference_stores_match_protocol():
    assert isinstance(MemoryPreferenceStore(), PreferenceStore)
    assert isinstance(CookiePreferenceStore(), PreferenceStore)


def test_theme_toggle_unmounted_renders_nothing():
    toggle = ThemeToggle()
    assert toggle.visible is False
    assert toggle.theme is None
    with pytest.raises(RuntimeError):
        toggle.toggle()
    with pytest.raises(RuntimeError):
        toggle.set_theme(Theme.LIGHT)


def test_theme_toggle_mount_uses_default_without_preference():
    toggle = ThemeToggle(Theme.DARK)
    assert toggle.mount(MemoryPreferenceStore()) is Theme.DARK
    assert toggle.visible


def test_theme_toggle_mount_falls_back_on_invalid_value():
    toggle = ThemeToggle(Theme.LIGHT)
    assert toggle.mount(MemoryPreferenceStore("purple")) is Theme.LIGHT


def test_theme_round_trip_through_store():
    store = MemoryPreferenceStore()
    toggle = ThemeToggle(Theme.DARK)
    toggle.mount(store)
    assert toggle.toggle() is Theme.LIGHT
    assert store.get() == "light"

    reloaded = ThemeToggle(Theme.DARK)
    assert reloaded.mount(store) is Theme.LIGHT
    assert reloaded.toggle() is Theme.DARK
    assert store.get() == "dark"


@pytest.mark.parametrize("start", [Theme.LIGHT, Theme.DARK])
def test_theme_toggle_twice_returns_to_start(start):
    toggle = ThemeToggle()
    toggle.mount(MemoryPreferenceStore(start.value))
    toggle.toggle()
    assert toggle.toggle() is start
    assert toggle.theme is start


def test_theme_set_dark_reads_back_dark():
    store = MemoryPreferenceStore("light")
    toggle = ThemeToggle()
    toggle.mount(store)
    toggle.set_theme("dark")
    assert toggle.theme is Theme.DARK
    assert ThemeToggle(Theme.LIGHT).mount(store) is Theme.DARK


def test_theme_toggle_rejects_unknown_theme():
    toggle = ThemeToggle()
    toggle.mount(MemoryPreferenceStore())
    with pytest.raises(ValueError):
        toggle.set_theme("sepia")


def test_theme_toggle_context():
    toggle = ThemeToggle()
    toggle.mount(MemoryPreferenceStore("light"))
    assert toggle.context() == {"theme": "light", "next_theme": "dark", "is_dark": False}


def test_cookie_store_reads_and_writes():
    store = CookiePreferenceStore("session=abc; theme=light")
    assert store.get() == "light"
    assert store.set_cookie_header() is None

    store.set("dark")
    assert store.get() == "dark"
    header = store.set_cookie_header()
    assert header.startswith("theme=dark")
    assert "Path=/" in header


def test_cookie_store_without_header():
    assert CookiePreferenceStore(None).get() is None
    assert CookiePreferenceStore("other=1").get() is None


def test_hero_context():
    homepage = HomepageViewModel("Hello", "World", "Go", "/start")
    assert Hero(homepage).context() == {"hero": homepage}


def test_project_card_from_view_model():
    project = ProjectViewModel(
        name="projects/atlas",
        title="Atlas",
        description="Maps",
        link="https://example.com",
        technologies=("Python",),
    )
    card = ProjectCard.from_view_model(project)
    assert card.context() == {
        "title": "Atlas",
        "description": "Maps",
        "link": "https://example.com",
        "technologies": ("Python",),
    }


def test_footer_year_defaults_to_current_year():
    from datetime import datetime

    assert Footer().year == datetime.now().year
    assert Footer(year=2021).context()["year"] == 2021
