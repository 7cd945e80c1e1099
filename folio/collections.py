from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .extractors import ProjectViewModel


class ProjectCollection(Sequence[ProjectViewModel]):
    """Lightweight helper for working with lists of projects in templates and code."""

    def __init__(self, projects: Iterable[ProjectViewModel]):
        self._projects = list(projects)

    def __iter__(self) -> Iterator[ProjectViewModel]:
        return iter(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __getitem__(self, item):
        return self._projects[item]

    def sorted(self) -> ProjectCollection:
        """Sort projects by explicit order, then by title.

        Projects without an ``order`` come after every ordered project.

        Returns:
            A new ProjectCollection with sorted projects.
        """

        def sort_key(p: ProjectViewModel):
            has_order = p.order is not None
            return (not has_order, p.order if has_order else 0, p.title.lower())

        return ProjectCollection(sorted(self._projects, key=sort_key))

    def technologies(self) -> list[str]:
        """Return every technology tag once, in first-seen order."""
        seen: list[str] = []
        for project in self._projects:
            for tech in project.technologies:
                if tech not in seen:
                    seen.append(tech)
        return seen

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"ProjectCollection({len(self._projects)} projects)"
