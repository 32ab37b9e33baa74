"""Data models for notes and link resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath


class NotegardenError(Exception):
    """Base class for errors raised by notegarden."""


class AliasCollisionError(NotegardenError):
    """Two different notes claim the same alias under the 'error' policy."""

    def __init__(self, alias: str, existing_id: str, new_id: str):
        super().__init__(
            f"Alias {alias!r} claimed by both {existing_id!r} and {new_id!r}"
        )
        self.alias = alias
        self.existing_id = existing_id
        self.new_id = new_id


@dataclass(frozen=True)
class Note:
    id: str
    path: str
    title: str
    category: str = "general"
    description: str = ""
    tags: tuple[str, ...] = ()
    date: str = ""
    body: str = ""

    @property
    def alias_candidates(self) -> tuple[str, ...]:
        """Raw alias strings in registration order: title, id, path stem, filename stem."""
        rel = PurePosixPath(self.path)
        return (
            self.title,
            self.id,
            str(rel.with_suffix("")),
            rel.stem,
        )


@dataclass(frozen=True)
class LinkToken:
    """One [[raw]] occurrence; start/end cover the brackets too."""

    raw: str
    start: int
    end: int


@dataclass(frozen=True)
class ResolvedLink:
    target_id: str
    display_text: str


@dataclass(frozen=True)
class UnresolvedMarker:
    display_text: str


RewriteResult = ResolvedLink | UnresolvedMarker


@dataclass
class BuildReport:
    written: int = 0
    unchanged: int = 0
    failed: int = 0
    removed: int = 0
    broken_links: dict[str, list[str]] = field(default_factory=dict)

    @property
    def broken_count(self) -> int:
        return sum(len(v) for v in self.broken_links.values())
