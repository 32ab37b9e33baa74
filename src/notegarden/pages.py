"""Wrap rendered note bodies into full HTML pages and write them to disk."""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from urllib.parse import quote

from .config import Config
from .models import Note

log = logging.getLogger(__name__)

_STYLESHEET = """
body { font-family: system-ui, sans-serif; max-width: 46rem; margin: 2rem auto; padding: 0 1rem; line-height: 1.6; color: #1f2937; }
a { color: #2563eb; }
header.site a { text-decoration: none; color: inherit; font-weight: 600; }
.meta { color: #6b7280; font-size: 0.875rem; }
.tag { display: inline-block; padding: 0 0.4rem; margin-right: 0.25rem; background: #f3f4f6; border-radius: 3px; font-family: monospace; font-size: 0.75rem; }
.category { color: #2563eb; font-size: 1.1rem; }
ul.notes { list-style: none; padding-left: 1rem; }
pre { background: #f9fafb; padding: 0.75rem; overflow-x: auto; }
"""


INDEX_FILENAME = "index.html"


def page_filename(note: Note) -> str:
    return f"{note.id}.html"


def note_href(note_id: str, config: Config) -> str:
    return f"{config.link_prefix}{quote(note_id)}{config.link_suffix}"


def home_href(config: Config) -> str:
    if config.link_suffix:
        return f"{config.link_prefix}index{config.link_suffix}"
    return config.link_prefix


def _stylesheet(config: Config) -> str:
    broken = escape(config.broken_link_class, quote=True)
    return _STYLESHEET + f".{broken} {{ color: #ef4444; font-family: monospace; }}\n"


def _layout(title: str, body: str, config: Config) -> str:
    home = escape(home_href(config), quote=True)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8" />\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1" />\n'
        f"<title>{escape(title)}</title>\n"
        f"<style>{_stylesheet(config)}</style>\n"
        "</head>\n"
        "<body>\n"
        f'<header class="site"><a href="{home}">{escape(config.site_title)}</a></header>\n'
        f"<main>\n{body}</main>\n"
        "</body>\n"
        "</html>\n"
    )


def _render_tags(tags: tuple[str, ...]) -> str:
    return "".join(f'<span class="tag">{escape(t)}</span>' for t in tags)


def render_note_page(note: Note, body_html: str, config: Config) -> str:
    """Build the complete HTML page for one note."""
    meta_parts: list[str] = []
    if note.date:
        meta_parts.append(f"<time>{escape(note.date)}</time>")
    if note.tags:
        meta_parts.append(_render_tags(note.tags))

    header = f"<h1>{escape(note.title)}</h1>\n"
    if note.description:
        header += f'<p class="meta">{escape(note.description)}</p>\n'
    if meta_parts:
        header += f'<p class="meta">{" ".join(meta_parts)}</p>\n'

    body = f"<article>\n{header}{body_html}</article>\n"
    return _layout(f"{note.title} - {config.site_title}", body, config)


def render_index_page(notes: list[Note], config: Config) -> str:
    """Build the home page: notes grouped by category, in load order."""
    categories: dict[str, list[Note]] = {}
    for note in notes:
        categories.setdefault(note.category, []).append(note)

    sections: list[str] = [f"<h1>{escape(config.site_title)}</h1>\n"]
    if config.site_description:
        sections.append(f'<p class="meta">{escape(config.site_description)}</p>\n')

    for category, category_notes in categories.items():
        items: list[str] = []
        for note in category_notes:
            href = escape(note_href(note.id, config), quote=True)
            items.append(
                f'<li><a href="{href}">{escape(note.title)}</a> {_render_tags(note.tags)}</li>'
            )
        sections.append(
            f'<section>\n<h2 class="category">{escape(category)}/</h2>\n'
            f'<ul class="notes">\n' + "\n".join(items) + "\n</ul>\n</section>\n"
        )

    return _layout(config.site_title, "".join(sections), config)


def write_page(
    output_dir: Path,
    filename: str,
    content: str,
    *,
    dry_run: bool = False,
) -> Path:
    """Write a page to disk. Returns the path written."""
    filepath = output_dir / filename

    if dry_run:
        log.info("[DRY RUN] Would write %s (%d chars)", filepath, len(content))
        return filepath

    output_dir.mkdir(parents=True, exist_ok=True)
    filepath.write_text(content, encoding="utf-8")
    log.info("Wrote %s (%d chars)", filepath, len(content))
    return filepath
