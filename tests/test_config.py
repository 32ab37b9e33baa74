"""Tests for notegarden.config — Config dataclass and load_config()."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from notegarden.config import Config, load_config


class TestConfig:
    def test_output_dir_explicit(self):
        cfg = Config(content_path=Path("/notes"), output_path=Path("/out"))
        assert cfg.output_dir == Path("/out")

    def test_output_dir_default(self):
        cfg = Config(content_path=Path("/home/me/notes"))
        assert cfg.output_dir == Path("/home/me/site")

    def test_manifest_path(self):
        cfg = Config(content_path=Path("/notes"), output_path=Path("/out"))
        assert cfg.manifest_path == Path("/out/.notegarden-manifest.json")

    def test_defaults(self):
        cfg = Config(content_path=Path("/notes"))
        assert cfg.site_title == "Notes"
        assert cfg.link_prefix == "/"
        assert cfg.link_suffix == ".html"
        assert cfg.broken_link_class == "broken-link"
        assert cfg.alias_collision == "last"
        assert cfg.workers == 4


class TestLoadConfig:
    def test_minimal_yaml(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("content_path: /my/notes\n")
        cfg = load_config(cfg_file)
        assert cfg.content_path == Path("/my/notes")
        assert cfg.output_path is None
        assert cfg.alias_collision == "last"

    def test_full_yaml(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            "content_path: /notes\n"
            "output_path: /out\n"
            "site_title: Garden\n"
            "site_description: Linked notes\n"
            "link_prefix: /wiki/\n"
            "link_suffix: ''\n"
            "broken_link_class: dead\n"
            "alias_collision: first\n"
            "workers: 8\n"
        )
        cfg = load_config(cfg_file)
        assert cfg.output_path == Path("/out")
        assert cfg.site_title == "Garden"
        assert cfg.site_description == "Linked notes"
        assert cfg.link_prefix == "/wiki/"
        assert cfg.link_suffix == ""
        assert cfg.broken_link_class == "dead"
        assert cfg.alias_collision == "first"
        assert cfg.workers == 8

    def test_unknown_keys_ignored(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("content_path: /notes\ntheme: dark\n")
        assert load_config(cfg_file).content_path == Path("/notes")

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_yaml_returns_none(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(cfg_file)

    def test_yaml_returns_non_dict(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("- item1\n- item2\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(cfg_file)

    def test_missing_content_path(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("site_title: Garden\n")
        with pytest.raises(ValueError, match="content_path.*required"):
            load_config(cfg_file)

    def test_bad_collision_policy(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("content_path: /notes\nalias_collision: random\n")
        with pytest.raises(ValueError, match="alias_collision"):
            load_config(cfg_file)

    @pytest.mark.parametrize("workers", ["0", "-2", "many", "true"])
    def test_bad_workers(self, tmp_path, workers):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(f"content_path: /notes\nworkers: {workers}\n")
        with pytest.raises(ValueError, match="workers"):
            load_config(cfg_file)

    def test_config_path_none_uses_default(self):
        with patch.object(Path, "exists", return_value=False):
            with pytest.raises(FileNotFoundError):
                load_config(None)

    def test_paths_expanduser(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("content_path: ~/notes\noutput_path: ~/site\n")
        cfg = load_config(cfg_file)
        assert "~" not in str(cfg.content_path)
        assert "~" not in str(cfg.output_path)
