"""
Tests for the manifest store: load/save of installed package records.
"""

import json
import os
import stat
from pathlib import Path

import pytest

from starshell.core.errors import ManifestCorrupt, ManifestWriteError
from starshell.core.manifest import Manifest, PackageRecord


def _record(repo="fzf", version="v1.0.0"):
    return PackageRecord(user="junegunn", repo=repo, version=version, file=f"{repo}-linux-amd64.tar.gz")


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path: Path):
        manifest = Manifest(str(tmp_path / "stars" / ".stars"))
        assert manifest.load() == []

    def test_null_is_empty(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.write_text("null\n")
        assert Manifest(str(path)).load() == []

    def test_reads_records_in_order(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.write_text(json.dumps([
            {"user": "a", "repo": "one", "version": "v1", "file": "one-linux-amd64"},
            {"user": "b", "repo": "two", "version": "v2", "file": "two-linux-amd64"},
        ]))
        records = Manifest(str(path)).load()
        assert [r.name for r in records] == ["a/one", "b/two"]
        assert records[1].version == "v2"
        assert records[1].file == "two-linux-amd64"

    def test_invalid_json_is_corrupt(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.write_text("not json at all {{{")
        with pytest.raises(ManifestCorrupt) as exc:
            Manifest(str(path)).load()
        assert str(path) in str(exc.value)

    def test_wrong_document_type_is_corrupt(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.write_text(json.dumps({"user": "a", "repo": "b"}))
        with pytest.raises(ManifestCorrupt):
            Manifest(str(path)).load()

    def test_malformed_record_is_corrupt(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.write_text(json.dumps([{"user": "a", "version": 3}]))
        with pytest.raises(ManifestCorrupt):
            Manifest(str(path)).load()

    def test_directory_in_place_of_file_is_corrupt(self, tmp_path: Path):
        path = tmp_path / ".stars"
        path.mkdir()
        with pytest.raises(ManifestCorrupt):
            Manifest(str(path)).load()


class TestSave:
    def test_save_and_load(self, tmp_path: Path):
        manifest = Manifest(str(tmp_path / ".stars"))
        manifest.save([_record("fzf"), _record("bat", "v0.24.0")])

        loaded = manifest.load()
        assert loaded == [_record("fzf"), _record("bat", "v0.24.0")]

    def test_save_writes_json_array(self, tmp_path: Path):
        path = tmp_path / ".stars"
        Manifest(str(path)).save([_record()])

        data = json.loads(path.read_text())
        assert data == [{
            "user": "junegunn",
            "repo": "fzf",
            "version": "v1.0.0",
            "file": "fzf-linux-amd64.tar.gz",
        }]

    def test_save_creates_directories(self, tmp_path: Path):
        path = tmp_path / "deep" / "stars" / ".stars"
        Manifest(str(path)).save([])
        assert path.is_file()
        assert json.loads(path.read_text()) == []

    def test_save_replaces_whole_file(self, tmp_path: Path):
        manifest = Manifest(str(tmp_path / ".stars"))
        manifest.save([_record("fzf"), _record("bat")])
        manifest.save([_record("bat")])
        assert [r.repo for r in manifest.load()] == ["bat"]

    def test_save_leaves_no_temp_files(self, tmp_path: Path):
        Manifest(str(tmp_path / ".stars")).save([_record()])
        assert list(tmp_path.glob(".stars_*.tmp")) == []

    def test_save_uses_umask_mode(self, tmp_path: Path):
        path = tmp_path / ".stars"
        old = os.umask(0o022)
        try:
            Manifest(str(path)).save([_record()])
        finally:
            os.umask(old)
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_unwritable_location_raises(self, tmp_path: Path):
        blocker = tmp_path / "stars"
        blocker.write_text("a file, not a directory")
        manifest = Manifest(str(blocker / ".stars"))
        with pytest.raises(ManifestWriteError):
            manifest.save([_record()])

    def test_append_keeps_existing(self, tmp_path: Path):
        manifest = Manifest(str(tmp_path / ".stars"))
        manifest.append(_record("fzf"))
        manifest.append(_record("bat"))
        assert [r.repo for r in manifest.load()] == ["fzf", "bat"]
        assert [r.repo for r in manifest.find("junegunn", "bat")] == ["bat"]
