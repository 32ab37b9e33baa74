"""Track written pages to avoid rewriting unchanged output."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class BuildManifest:
    """Persistent record of which pages were written, and with what content."""

    def __init__(self, path: Path):
        self.path = path
        self._entries: dict[str, dict] = {}
        self._load()

    def _load(self) -> None:
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                log.warning("Failed to load build manifest, starting fresh")
                return
            if not isinstance(data, dict):
                log.warning("Build manifest is not a JSON object, starting fresh")
                return
            for filename, entry in data.items():
                if isinstance(entry, dict):
                    self._entries[filename] = entry
                else:
                    log.warning("Dropping malformed build manifest entry for %s", filename)
            log.debug("Loaded build manifest with %d entries", len(self._entries))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._entries, indent=2, sort_keys=True),
            encoding="utf-8",
        )

    def __contains__(self, filename: str) -> bool:
        return filename in self._entries

    def filenames(self) -> list[str]:
        return sorted(self._entries)

    def needs_write(self, filename: str, content: str) -> bool:
        """Check if a page's content differs from what was last written."""
        entry = self._entries.get(filename)
        if entry is None:
            return True
        return entry.get("sha256") != content_hash(content)

    def record(self, filename: str, content: str) -> None:
        """Record that a page has been written."""
        self._entries[filename] = {
            "sha256": content_hash(content),
            "built_at": datetime.now(tz=timezone.utc).isoformat(),
        }

    def prune(self, keep: Iterable[str]) -> list[str]:
        """Forget every page not in keep. Returns the forgotten filenames."""
        keep_set = set(keep)
        stale = sorted(name for name in self._entries if name not in keep_set)
        for name in stale:
            del self._entries[name]
        return stale
