"""Orchestrator: load notes -> build alias index -> rewrite links -> render -> write."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from .aliases import AliasIndex, build_alias_index
from .config import Config
from .loader import load_corpus
from .manifest import BuildManifest
from .models import BuildReport, Note
from .pages import (
    INDEX_FILENAME,
    page_filename,
    render_index_page,
    render_note_page,
    write_page,
)
from .renderer import render_html
from .tree import markdown_to_tree
from .wikilinks import collect_broken_links, rewrite_links

log = logging.getLogger(__name__)


def render_note(note: Note, alias_index: AliasIndex, config: Config) -> tuple[str, list[str]]:
    """Render one note to a full HTML page.

    Returns the page and the display texts of its unresolved links. Reads
    the shared index but never mutates it, so notes can render in parallel.
    """
    tree = markdown_to_tree(note.body)
    tree = rewrite_links(
        tree,
        alias_index,
        link_prefix=config.link_prefix,
        link_suffix=config.link_suffix,
        broken_class=config.broken_link_class,
    )
    body_html = render_html(tree)
    return render_note_page(note, body_html, config), collect_broken_links(tree)


def render_notes(
    notes: list[Note],
    alias_index: AliasIndex,
    config: Config,
) -> list[tuple[Note, str | None, list[str]]]:
    """Render all notes concurrently. Results come back in input order.

    A note that fails to render is logged and returned with page ``None``.
    """
    results: list[tuple[Note, str | None, list[str]]] = []
    with ThreadPoolExecutor(max_workers=config.workers) as pool:
        futures = [pool.submit(render_note, note, alias_index, config) for note in notes]
        for note, future in zip(notes, futures):
            try:
                page, broken = future.result()
            except Exception:
                log.error("Failed to render note %s (%s)", note.id, note.path, exc_info=True)
                results.append((note, None, []))
                continue
            results.append((note, page, broken))
    return results


def _emit(
    config: Config,
    manifest: BuildManifest,
    report: BuildReport,
    filename: str,
    content: str,
    *,
    dry_run: bool,
) -> None:
    filepath = config.output_dir / filename
    if not manifest.needs_write(filename, content) and filepath.exists():
        report.unchanged += 1
        return

    write_page(config.output_dir, filename, content, dry_run=dry_run)
    if not dry_run:
        manifest.record(filename, content)
    report.written += 1


def build_site(
    config: Config,
    manifest: BuildManifest | None = None,
    *,
    dry_run: bool = False,
) -> BuildReport:
    """Run a single full build. Returns a report of what happened."""
    report = BuildReport()

    content_dir = config.content_path
    if not content_dir.is_dir():
        log.warning("Content directory not found at %s", content_dir)
        return report

    notes = load_corpus(content_dir)
    if not notes:
        log.debug("No notes found in %s", content_dir)
        return report

    # The index must be complete before any note is rewritten
    alias_index = build_alias_index(notes, on_collision=config.alias_collision)

    if manifest is None:
        manifest = BuildManifest(config.manifest_path)

    keep: set[str] = set()
    for note, page, broken in render_notes(notes, alias_index, config):
        filename = page_filename(note)
        keep.add(filename)
        if page is None:
            report.failed += 1
            continue
        if broken:
            report.broken_links[note.id] = broken
            for text in broken:
                log.info("Unresolved link [[%s]] in %s", text, note.path)
        _emit(config, manifest, report, filename, page, dry_run=dry_run)

    if INDEX_FILENAME in keep:
        log.debug("Note 'index' takes %s, skipping generated listing", INDEX_FILENAME)
    else:
        keep.add(INDEX_FILENAME)
        _emit(config, manifest, report, INDEX_FILENAME, render_index_page(notes, config), dry_run=dry_run)

    stale = [name for name in manifest.filenames() if name not in keep]
    for name in stale:
        path = config.output_dir / name
        if dry_run:
            log.info("[DRY RUN] Would remove %s", path)
            continue
        if path.exists():
            path.unlink()
            log.info("Removed stale page: %s", path)
        report.removed += 1

    if not dry_run:
        manifest.prune(keep)
        manifest.save()

    log.info(
        "Build complete: %d written, %d unchanged, %d failed, %d broken links",
        report.written, report.unchanged, report.failed, report.broken_count,
    )
    return report
