from pathlib import Path

import pytest


def write_doc(content_dir: Path, name: str, metadata: str, body: str = "") -> Path:
    path = content_dir / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{metadata}---\n{body}", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    content = tmp_path / "content"
    write_doc(
        content,
        "homepage",
        "title: Hello\nsubtitle: World\nctaText: Go\nctaLink: /start\n",
    )
    write_doc(content, "about", "title: About\n", "\nI build things.\n")
    write_doc(
        content,
        "projects/atlas",
        "title: Atlas\ndescription: Maps\nlink: https://example.com/atlas\n"
        "technologies:\n  - Python\n  - Rust\norder: 1\n",
    )
    write_doc(content, "projects/beacon", "title: Beacon\ndescription: Signals\n")
    return tmp_path
