"""Configuration loading and defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .aliases import COLLISION_POLICIES


_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "notegarden"
_DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "config.yaml"


@dataclass
class Config:
    content_path: Path
    output_path: Path | None = None
    site_title: str = "Notes"
    site_description: str = ""
    link_prefix: str = "/"
    link_suffix: str = ".html"
    broken_link_class: str = "broken-link"
    alias_collision: str = "last"
    workers: int = 4

    @property
    def output_dir(self) -> Path:
        if self.output_path is not None:
            return self.output_path
        return self.content_path.parent / "site"

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / ".notegarden-manifest.json"


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file, falling back to defaults where possible."""
    path = config_path or _DEFAULT_CONFIG_PATH
    path = Path(path).expanduser()

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            f"Create one at {_DEFAULT_CONFIG_PATH} or pass --config.\n"
            f"See config.example.yaml for reference."
        )

    raw = yaml.safe_load(path.read_text())
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"Invalid config file: {path}")

    if "content_path" not in raw:
        raise ValueError("'content_path' is required in config")

    content_path = Path(raw["content_path"]).expanduser()

    kwargs: dict = {"content_path": content_path}
    if raw.get("output_path"):
        kwargs["output_path"] = Path(raw["output_path"]).expanduser()
    for key in (
        "site_title",
        "site_description",
        "link_prefix",
        "link_suffix",
        "broken_link_class",
        "alias_collision",
        "workers",
    ):
        if key in raw:
            kwargs[key] = raw[key]

    if kwargs.get("alias_collision", "last") not in COLLISION_POLICIES:
        raise ValueError(
            f"'alias_collision' must be one of {', '.join(COLLISION_POLICIES)}"
        )
    workers = kwargs.get("workers", 1)
    if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
        raise ValueError("'workers' must be a positive integer")

    return Config(**kwargs)
