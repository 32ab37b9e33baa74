"""Tests for notegarden.site_builder — render_note, render_notes, build_site."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from notegarden.config import Config
from notegarden.manifest import BuildManifest
from notegarden.models import AliasCollisionError
from notegarden.site_builder import build_site, render_note, render_notes


class TestRenderNote:
    def test_links_and_broken(self, sample_notes, sample_index, sample_config):
        page, broken = render_note(sample_notes[1], sample_index, sample_config)
        assert '<a class="internal-link" href="/guide.html">guide</a>' in page
        assert '<span class="broken-link">Kyoto</span>' in page
        assert broken == ["Kyoto"]

    def test_no_broken(self, sample_notes, sample_index, sample_config):
        page, broken = render_note(sample_notes[0], sample_index, sample_config)
        assert 'href="/travel-Tokyo%20Adventure.html"' in page
        assert broken == []

    def test_href_follows_configured_prefix_and_suffix(self, sample_notes, sample_index, tmp_path):
        cfg = Config(content_path=tmp_path, link_prefix="/notes/", link_suffix="")
        page, _ = render_note(sample_notes[1], sample_index, cfg)
        assert '<a class="internal-link" href="/notes/guide">guide</a>' in page


class TestRenderNotes:
    def test_order_preserved(self, sample_notes, sample_index, sample_config):
        results = render_notes(sample_notes, sample_index, sample_config)
        assert [note.id for note, _, _ in results] == [n.id for n in sample_notes]

    def test_failure_isolated(self, sample_notes, sample_index, sample_config):
        def flaky(note, index, config):
            if note.id == "guide":
                raise RuntimeError("boom")
            return "<html/>", []

        with patch("notegarden.site_builder.render_note", side_effect=flaky):
            results = render_notes(sample_notes, sample_index, sample_config)
        assert results[0][1] is None
        assert results[1][1] == "<html/>"


class TestBuildSite:
    def test_content_dir_missing(self, tmp_path):
        cfg = Config(content_path=tmp_path / "missing", output_path=tmp_path / "site")
        report = build_site(cfg)
        assert report.written == 0
        assert not (tmp_path / "site").exists()

    def test_content_path_is_file(self, tmp_path):
        not_a_dir = tmp_path / "notes.md"
        not_a_dir.write_text("# Just a file")
        cfg = Config(content_path=not_a_dir, output_path=tmp_path / "site")
        report = build_site(cfg)
        assert report.written == 0
        assert not (tmp_path / "site").exists()

    def test_empty_corpus(self, tmp_path):
        (tmp_path / "content").mkdir()
        cfg = Config(content_path=tmp_path / "content", output_path=tmp_path / "site")
        assert build_site(cfg).written == 0

    def test_full_build(self, sample_config):
        report = build_site(sample_config)
        out = sample_config.output_dir
        assert report.written == 3
        assert report.failed == 0
        assert report.broken_links == {"travel-Tokyo Adventure": ["Kyoto"]}
        assert (out / "guide.html").exists()
        assert (out / "travel-Tokyo Adventure.html").exists()
        assert (out / "index.html").exists()
        assert sample_config.manifest_path.exists()

        guide = (out / "guide.html").read_text(encoding="utf-8")
        assert 'href="/travel-Tokyo%20Adventure.html">Tokyo Adventure</a>' in guide

    def test_second_build_unchanged(self, sample_config):
        build_site(sample_config)
        report = build_site(sample_config)
        assert report.written == 0
        assert report.unchanged == 3

    def test_rebuild_after_edit(self, sample_config, content_dir):
        build_site(sample_config)
        (content_dir / "guide.md").write_text("---\ntitle: Travel Guide\ntags: [meta]\n---\nNow [[Kyoto]] too.\n")
        report = build_site(sample_config)
        assert report.written == 1
        assert report.broken_links["guide"] == ["Kyoto"]

    def test_deleted_output_rewritten(self, sample_config):
        build_site(sample_config)
        (sample_config.output_dir / "guide.html").unlink()
        report = build_site(sample_config)
        assert report.written == 1
        assert (sample_config.output_dir / "guide.html").exists()

    def test_stale_page_removed(self, sample_config, content_dir):
        build_site(sample_config)
        (content_dir / "guide.md").unlink()
        report = build_site(sample_config)
        assert report.removed == 1
        assert not (sample_config.output_dir / "guide.html").exists()

    def test_dry_run_writes_nothing(self, sample_config):
        report = build_site(sample_config, dry_run=True)
        assert report.written == 3
        assert not sample_config.output_dir.exists()

    def test_failed_note_counted_and_kept(self, sample_config):
        build_site(sample_config)
        real_render = render_note

        def flaky(note, index, config):
            if note.id == "guide":
                raise RuntimeError("boom")
            return real_render(note, index, config)

        with patch("notegarden.site_builder.render_note", side_effect=flaky):
            report = build_site(sample_config)
        assert report.failed == 1
        assert report.removed == 0
        assert (sample_config.output_dir / "guide.html").exists()

    def test_note_named_index_replaces_listing(self, sample_config, content_dir):
        (content_dir / "index.md").write_text("---\ntitle: Home\n---\nWelcome, see [[guide]].\n")
        build_site(sample_config)
        home = (sample_config.output_dir / "index.html").read_text(encoding="utf-8")
        assert "Welcome" in home

    def test_collision_error_policy(self, tmp_path):
        content = tmp_path / "content"
        (content / "a").mkdir(parents=True)
        (content / "b").mkdir()
        (content / "a" / "guide.md").write_text("x")
        (content / "b" / "guide.md").write_text("y")
        cfg = Config(content_path=content, output_path=tmp_path / "site", alias_collision="error")
        with pytest.raises(AliasCollisionError):
            build_site(cfg)

    def test_uses_given_manifest(self, sample_config):
        manifest = MagicMock(spec=BuildManifest)
        manifest.needs_write.return_value = True
        manifest.filenames.return_value = []
        build_site(sample_config, manifest)
        assert manifest.record.call_count == 3
        manifest.save.assert_called_once()
