"""Folio portfolio site generator.

This package turns a directory of front-matter markdown documents into a
portfolio website: a homepage hero, secondary pages, a projects listing,
navigation, footer and a theme toggle.

Content flows through a small pipeline:
- Loader: reads a named document and splits front-matter from body.
- Extractor: projects the front-matter into a typed view-model.
- Composer: renders view-models through the component templates.

The CLI module provides commands for scaffolding projects, building the
static site and serving freshly composed pages with live reload.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
