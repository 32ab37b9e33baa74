"""Shared fixtures for notegarden tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from notegarden.aliases import build_alias_index
from notegarden.config import Config
from notegarden.models import Note


@pytest.fixture
def tokyo_index() -> dict[str, str]:
    return {
        "tokyo adventure": "tokyo-adventure",
        "tokyo-adventure": "tokyo-adventure",
    }


@pytest.fixture
def sample_notes() -> list[Note]:
    return [
        Note(id="guide", path="guide.md", title="Travel Guide", body="Start at [[Tokyo Adventure]]."),
        Note(
            id="travel-Tokyo Adventure",
            path="travel/Tokyo Adventure.md",
            title="Tokyo Adventure",
            category="travel",
            tags=("japan", "trip"),
            date="2024-06-15",
            body="Back to the [[guide]]. See also [[Kyoto]].",
        ),
    ]


@pytest.fixture
def sample_index(sample_notes):
    return build_alias_index(sample_notes)


@pytest.fixture
def content_dir(tmp_path) -> Path:
    root = tmp_path / "content"
    (root / "travel").mkdir(parents=True)
    (root / "guide.md").write_text(
        "---\ntitle: Travel Guide\ntags: [meta]\n---\nStart at [[Tokyo Adventure]].\n"
    )
    (root / "travel" / "Tokyo Adventure.md").write_text(
        "---\ntitle: Tokyo Adventure\ndescription: A week in Tokyo\n---\n"
        "Back to the [[guide]]. See also [[Kyoto]].\n"
    )
    return root


@pytest.fixture
def sample_config(tmp_path, content_dir) -> Config:
    return Config(content_path=content_dir, output_path=tmp_path / "site", workers=2)
