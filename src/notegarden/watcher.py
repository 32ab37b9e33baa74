"""Watchdog-based daemon that rebuilds the site when notes change."""

from __future__ import annotations

import logging
import signal
import threading
import time

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import Config
from .manifest import BuildManifest
from .site_builder import build_site

log = logging.getLogger(__name__)

_DEBOUNCE_SECONDS = 2.0


class _ContentEventHandler(FileSystemEventHandler):
    """Watches the content directory for changes to markdown notes."""

    def __init__(self, config: Config, manifest: BuildManifest, *, dry_run: bool = False):
        super().__init__()
        self._config = config
        self._manifest = manifest
        self._dry_run = dry_run
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        # Held for the whole build; the manifest and output dir are not shared-safe
        self._build_lock = threading.Lock()

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type not in ("created", "modified", "moved", "deleted"):
            return
        paths = [str(event.src_path), str(getattr(event, "dest_path", "") or "")]
        # Only react to markdown notes
        if not any(p.endswith(".md") for p in paths):
            return

        log.debug("%s %s, scheduling rebuild in %.1fs", event.event_type, event.src_path, _DEBOUNCE_SECONDS)
        self._schedule_build()

    def _schedule_build(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(_DEBOUNCE_SECONDS, self._do_build)
            self._timer.daemon = True
            self._timer.start()

    def _do_build(self) -> None:
        with self._build_lock:
            try:
                build_site(self._config, self._manifest, dry_run=self._dry_run)
            except Exception:
                log.error("Build failed", exc_info=True)


def watch(config: Config, manifest: BuildManifest, *, dry_run: bool = False) -> None:
    """Start watching the content directory. Blocks until interrupted."""
    content_dir = config.content_path

    if not content_dir.is_dir():
        log.error("Content directory does not exist: %s", content_dir)
        raise SystemExit(1)

    # Initial build on startup
    log.info("Running initial build...")
    build_site(config, manifest, dry_run=dry_run)

    handler = _ContentEventHandler(config, manifest, dry_run=dry_run)
    observer = Observer()
    observer.schedule(handler, str(content_dir), recursive=True)

    stop_event = threading.Event()

    def _shutdown(signum: int, frame: object) -> None:
        sig_name = signal.Signals(signum).name
        log.info("Received %s, shutting down...", sig_name)
        stop_event.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    observer.start()
    log.info("Watching %s for changes (Ctrl+C to stop)", content_dir)

    try:
        while not stop_event.is_set():
            time.sleep(1)
    finally:
        observer.stop()
        observer.join()
        log.info("Watcher stopped")
