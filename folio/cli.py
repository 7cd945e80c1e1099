"""Command-line interface for Folio.

This module defines the CLI commands using the Click framework.

Commands:
- new: Scaffold a new Folio project.
- build: Build the static site into the output directory.
- serve: Run the development server with live reload.
- md: Create a new content document interactively.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import click
import questionary
import yaml

from . import __version__

# Path to the default project scaffold
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold" / "default"

_RESERVED_NAMES = {"homepage", "projects"}

PROMPT_STYLE = questionary.Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:cyan"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:cyan"),
    ]
)


@click.group()
@click.version_option(version=__version__, prog_name="folio")
def cli():
    """Folio portfolio site generator."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Scaffold a new Folio project."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Folio site created at {target}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft content")
@click.option("--root-url", default=None, help="Absolute URL the site is hosted at")
def build(drafts: bool, root_url: str | None):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(project_root, include_drafts=drafts, root_url=root_url)
    except BuildError as exc:
        try:
            rel_path = exc.source_path.relative_to(project_root)
        except ValueError:
            rel_path = exc.source_path
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    click.echo(f"Built {len(result.routes)} pages into {result.output_dir}")


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft content")
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the dev server (overrides folio.yaml)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides folio.yaml ws_port)",
)
def serve(drafts: bool, port: int | None, ws_port: int | None):
    """Run dev server with live reload."""
    project_root = Path.cwd()
    from .server import DevServer

    server = DevServer(project_root, http_port=port, ws_port=ws_port, include_drafts=drafts)
    server.start()


@cli.command()
def md():
    """Create a new content document interactively."""
    project_root = Path.cwd()
    from .build import load_config
    from .utils import slugify

    content_dir = project_root / load_config(project_root)["content_dir"]
    if not content_dir.is_dir():
        raise click.ClickException(
            "No content directory found. Run this command from a Folio project root."
        )

    kind = _prompt(questionary.select, "Document type:", choices=["page", "project"])
    title = _prompt(questionary.text, "Title:", required=True)
    slug = slugify(title)
    if not slug:
        raise click.ClickException(f"Cannot derive a file name from title: {title}")

    metadata: dict[str, object] = {"title": title}
    if kind == "project":
        folder = content_dir / "projects"
        metadata["description"] = _prompt(questionary.text, "Description:", required=True)
        link = _prompt(questionary.text, "Link (optional):")
        technologies = _prompt(
            questionary.text, "Technologies (comma separated, optional):"
        )
        if link:
            metadata["link"] = link
        tags = [t.strip() for t in technologies.split(",") if t.strip()]
        if tags:
            metadata["technologies"] = tags
    elif slug in _RESERVED_NAMES:
        raise click.ClickException(f"'{slug}' is reserved; pick another title")
    else:
        folder = content_dir

    target = folder / f"{slug}.md"
    display = target.relative_to(project_root)
    if target.exists():
        raise click.ClickException(f"File already exists: {display}")
    folder.mkdir(parents=True, exist_ok=True)
    target.write_text(render_document(metadata), encoding="utf-8")
    click.echo(f"Created {display}")


def render_document(metadata: dict[str, object], body: str = "") -> str:
    """Serialize front-matter and body into a content document."""
    frontmatter = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    return f"---\n{frontmatter}---\n\n{body}"


def _prompt(factory, message: str, required: bool = False, **kwargs) -> str:
    """Ask one questionary question.

    Args:
        factory: ``questionary.text`` or ``questionary.select``.
        message: Question shown to the user.
        required: Reject blank answers.
        **kwargs: Passed through to the factory.

    Returns:
        The stripped answer.

    Raises:
        click.Abort: If the user cancels the prompt.
    """
    if required:
        kwargs["validate"] = lambda x: bool(x.strip()) or f"{message.rstrip(':')} is required"
    answer = factory(message, style=PROMPT_STYLE, **kwargs).ask()
    if answer is None:
        raise click.Abort()
    return answer.strip()


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Copy the default project into ``root`` and try to make it a git repo."""
    shutil.copytree(_SCAFFOLD_DIR, root, dirs_exist_ok=True)
    _try_git_init(root)


def _try_git_init(root: Path) -> None:
    """Initialize a git repository if git is available."""
    if os.environ.get("FOLIO_SKIP_GIT_INIT") == "1":
        return
    git_bin = shutil.which("git")
    if not git_bin:
        return
    try:
        subprocess.run(
            [git_bin, "init"],
            cwd=root,
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        click.echo(f"Skipping git init: {exc}", err=True)
