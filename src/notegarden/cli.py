"""Command-line interface for notegarden."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .manifest import BuildManifest
from .models import NotegardenError
from .site_builder import build_site
from .watcher import watch


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="notegarden",
        description="Build a static site from a folder of [[wikilinked]] markdown notes",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to config YAML (default: ~/.config/notegarden/config.yaml)",
    )
    parser.add_argument(
        "--watch", "-w",
        action="store_true",
        help="Keep running and rebuild whenever a note changes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing files",
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    manifest = BuildManifest(config.manifest_path)

    try:
        if args.watch:
            watch(config, manifest, dry_run=args.dry_run)
            return
        report = build_site(config, manifest, dry_run=args.dry_run)
    except (NotegardenError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    if report.written:
        print(f"Built {report.written} page(s)")
    else:
        print("Everything up to date")
    if report.broken_count:
        print(f"{report.broken_count} unresolved link(s) in {len(report.broken_links)} note(s)")
    if report.failed:
        print(f"{report.failed} note(s) failed to render", file=sys.stderr)
        raise SystemExit(1)
