"""Scan a content directory into Note records."""

from __future__ import annotations

import logging
from pathlib import Path

import frontmatter

from .models import Note

log = logging.getLogger(__name__)


def make_slug(rel_path: str) -> str:
    """'guides/Tokyo Adventure.md' -> 'guides-Tokyo Adventure'."""
    stem = rel_path[:-3] if rel_path.endswith(".md") else rel_path
    return stem.replace("/", "-")


def _as_tags(value: object) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v)
    return (str(value),)


def load_note(content_dir: Path, md_file: Path) -> Note:
    """Read one markdown file and its front matter."""
    rel_path = md_file.relative_to(content_dir).as_posix()
    post = frontmatter.load(md_file)
    meta = post.metadata
    slug = make_slug(rel_path)
    parent = Path(rel_path).parent.as_posix()

    return Note(
        id=slug,
        path=rel_path,
        title=str(meta.get("title") or slug),
        category=parent if parent != "." else "general",
        description=str(meta.get("description") or ""),
        tags=_as_tags(meta.get("tags")),
        date=str(meta.get("date") or ""),
        body=post.content,
    )


def load_corpus(content_dir: Path) -> list[Note]:
    """Load every markdown note under content_dir, sorted by relative path.

    Unreadable files are logged and skipped. When two files map to the
    same slug the later path is dropped so ids stay unique.
    """
    if not content_dir.is_dir():
        raise FileNotFoundError(f"Content directory not found: {content_dir}")

    files = sorted(
        content_dir.rglob("*.md"),
        key=lambda p: p.relative_to(content_dir).as_posix(),
    )

    notes: list[Note] = []
    seen: dict[str, str] = {}
    for md_file in files:
        if not md_file.is_file():
            continue
        try:
            note = load_note(content_dir, md_file)
        except Exception:
            log.warning("Failed to load note %s", md_file, exc_info=True)
            continue

        if note.id in seen:
            log.warning(
                "Skipping %s: slug %r already used by %s",
                note.path, note.id, seen[note.id],
            )
            continue
        seen[note.id] = note.path
        notes.append(note)

    log.debug("Loaded %d notes from %s", len(notes), content_dir)
    return notes
