"""
Unit tests for PackageAssembler and the scoped working directory.

Tests verify:
- The working directory is restored on success and on error
- Manifest stamping writes build info back and fails on bad manifests
- Archives use relative entry names and are described accurately
- Archives not larger than the minimum size are rejected
"""

import hashlib
import json
import os
import zipfile
from pathlib import Path

import pytest

from plugin_ci.core.exceptions import ManifestError, PackageTooSmallError, PackagingError
from plugin_ci.core.models import PackagingConfig, PluginBuildInfo
from plugin_ci.services.logging import NullLogger
from plugin_ci.services.packaging import (
    PackageAssembler,
    load_manifest,
    run_in_directory,
    working_directory,
)


@pytest.fixture
def assembler():
    return PackageAssembler(PackagingConfig(), logger=NullLogger())


class TestWorkingDirectory:
    """Tests for working_directory and run_in_directory."""

    def test_restores_after_success(self, tmp_path):
        before = os.getcwd()
        with working_directory(tmp_path) as path:
            assert Path(os.getcwd()).resolve() == tmp_path.resolve()
            assert path == tmp_path
        assert os.getcwd() == before

    def test_restores_after_error(self, tmp_path):
        before = os.getcwd()
        with pytest.raises(RuntimeError):
            with working_directory(tmp_path):
                raise RuntimeError("boom")
        assert os.getcwd() == before

    def test_run_in_directory_returns_result(self, tmp_path):
        before = os.getcwd()
        result = run_in_directory(tmp_path, lambda: Path(os.getcwd()).resolve())
        assert result == tmp_path.resolve()
        assert os.getcwd() == before


class TestStampManifest:
    """Tests for PackageAssembler.stamp_manifest."""

    def test_writes_build_info(self, assembler, plugin_project):
        dist = plugin_project / "dist"
        build = PluginBuildInfo(time=1000, branch="main", hash="abc123", build=42)

        manifest = assembler.stamp_manifest(dist, build)

        assert manifest.build == build
        on_disk = json.loads((dist / "plugin.json").read_text())
        assert on_disk["info"]["build"]["hash"] == "abc123"
        assert on_disk["dependencies"] == {"grafanaVersion": "7.x"}
        assert load_manifest(dist / "plugin.json").build.build == 42

    def test_replaces_existing_build_block(self, assembler, plugin_project):
        manifest_path = plugin_project / "dist" / "plugin.json"
        data = json.loads(manifest_path.read_text())
        data["info"]["build"] = {"time": 1, "hash": "old", "number": 7}
        manifest_path.write_text(json.dumps(data))
        build = PluginBuildInfo(time=1000, branch="main", hash="abc123", build=42)

        manifest = assembler.stamp_manifest(plugin_project / "dist", build)

        assert manifest.build == build
        on_disk = json.loads(manifest_path.read_text())
        assert on_disk["info"]["build"] == {
            "time": 1000,
            "branch": "main",
            "hash": "abc123",
            "build": 42,
        }

    def test_missing_manifest(self, assembler, tmp_path):
        with pytest.raises(ManifestError) as exc_info:
            assembler.stamp_manifest(tmp_path, PluginBuildInfo())
        assert exc_info.value.context["manifest_path"] == str(tmp_path / "plugin.json")

    def test_malformed_manifest(self, assembler, tmp_path):
        (tmp_path / "plugin.json").write_text("{not json")
        with pytest.raises(ManifestError):
            assembler.stamp_manifest(tmp_path, PluginBuildInfo())

    def test_invalid_manifest(self, assembler, tmp_path):
        (tmp_path / "plugin.json").write_text(json.dumps({"id": "x"}))
        with pytest.raises(ManifestError, match="invalid"):
            assembler.stamp_manifest(tmp_path, PluginBuildInfo())


class TestBuildArchive:
    """Tests for PackageAssembler.build_archive."""

    def test_archive_and_descriptor(self, assembler, plugin_project, tmp_path):
        dist = plugin_project / "dist"
        dest = tmp_path / "packages" / "acme-clock-panel-1.2.0.zip"
        before = os.getcwd()

        descriptor = assembler.build_archive(dist, dest)

        assert os.getcwd() == before
        assert descriptor.name == "acme-clock-panel-1.2.0.zip"
        assert descriptor.size == dest.stat().st_size
        assert descriptor.checksum == hashlib.md5(dest.read_bytes()).hexdigest()
        assert descriptor.checksum_algorithm == "md5"
        assert descriptor.content_hash
        with zipfile.ZipFile(dest) as archive:
            assert sorted(archive.namelist()) == ["img/logo.svg", "module.js", "plugin.json"]

    def test_checksum_sidecar(self, assembler, plugin_project, tmp_path):
        dest = tmp_path / "plugin.zip"
        descriptor = assembler.build_archive(plugin_project / "dist", dest)
        sidecar = tmp_path / "plugin.zip.md5"
        assert sidecar.read_text() == f"{descriptor.checksum}  plugin.zip\n"

    def test_relative_destination(self, assembler, plugin_project, tmp_path, monkeypatch):
        """A relative destination is resolved before the working directory changes."""
        monkeypatch.chdir(tmp_path)
        descriptor = assembler.build_archive(plugin_project / "dist", Path("out.zip"))
        assert (tmp_path / "out.zip").stat().st_size == descriptor.size

    def test_content_hash_ignores_location(self, assembler, plugin_project, tmp_path):
        import shutil

        copy = tmp_path / "copy"
        shutil.copytree(plugin_project / "dist", copy)
        a = assembler.build_archive(plugin_project / "dist", tmp_path / "a.zip")
        b = assembler.build_archive(copy, tmp_path / "b.zip")
        assert a.content_hash == b.content_hash

    def test_empty_tree_too_small(self, assembler, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        before = os.getcwd()

        with pytest.raises(PackageTooSmallError) as exc_info:
            assembler.build_archive(empty, tmp_path / "empty.zip")

        assert exc_info.value.minimum == 100
        assert exc_info.value.size <= 100
        assert os.getcwd() == before

    def test_minimum_is_exclusive(self, plugin_project, tmp_path):
        """An archive exactly at the minimum size is rejected."""
        measuring = PackageAssembler(PackagingConfig(min_package_size=0), logger=NullLogger())
        size = measuring.build_archive(plugin_project / "dist", tmp_path / "measure.zip").size

        strict = PackageAssembler(PackagingConfig(min_package_size=size), logger=NullLogger())
        with pytest.raises(PackageTooSmallError):
            strict.build_archive(plugin_project / "dist", tmp_path / "exact.zip")

    def test_missing_source(self, assembler, tmp_path):
        with pytest.raises(PackagingError):
            assembler.build_archive(tmp_path / "missing", tmp_path / "x.zip")


class TestDocsAndExtract:
    """Tests for docs packaging and extraction."""

    def test_missing_docs_is_not_an_error(self, assembler, tmp_path):
        assert assembler.build_docs_archive(tmp_path / "docs", tmp_path / "docs.zip") is None
        assert not (tmp_path / "docs.zip").exists()

    def test_docs_archive(self, assembler, tmp_path):
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "index.html").write_text("<html>" + "docs " * 50 + "</html>")
        descriptor = assembler.build_docs_archive(docs, tmp_path / "p-1.0-docs.zip")
        assert descriptor.name == "p-1.0-docs.zip"

    def test_extract(self, assembler, plugin_project, tmp_path):
        archive = tmp_path / "plugin.zip"
        assembler.build_archive(plugin_project / "dist", archive)
        target = tmp_path / "env" / "plugins" / "acme-clock-panel"

        assembler.extract(archive, target)

        assert (target / "plugin.json").is_file()
        assert (target / "img" / "logo.svg").read_text() == "<svg></svg>\n"
