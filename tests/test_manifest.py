"""
Tests for biomigrate.manifest
=============================

Test Organization
-----------------
- TestJsonWriting: Formatting and atomic replacement
- TestReadManifest: Parsing and error cases
- TestDeclaredLegacyPackages: Dependency lookup
- TestUpdateManifest: Script rewrite and embedded field removal
"""

import os
import stat
from pathlib import Path

import pytest

from biomigrate.manifest import (
    LEGACY_PACKAGES,
    SCRIPT_UPDATES,
    ManifestError,
    declared_legacy_packages,
    dump_json,
    read_manifest,
    update_manifest,
    write_json_atomic,
    write_manifest,
)
from tests.conftest import read_json


# =============================================================================
# JSON Writing Tests
# =============================================================================

class TestJsonWriting:
    """Tests for dump_json and write_json_atomic."""

    def test_two_space_indent_and_trailing_newline(self) -> None:
        text = dump_json({"name": "app", "scripts": {"lint": "biome lint ."}})

        assert text == (
            '{\n'
            '  "name": "app",\n'
            '  "scripts": {\n'
            '    "lint": "biome lint ."\n'
            '  }\n'
            '}\n'
        )

    def test_non_ascii_kept(self) -> None:
        assert '"Zoë"' in dump_json({"author": "Zoë"})

    def test_write_creates_file(self, tmp_path: Path) -> None:
        target = tmp_path / "biome.json"

        write_json_atomic(target, {"a": 1})

        assert target.read_text(encoding="utf-8") == '{\n  "a": 1\n}\n'

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "package.json"
        target.write_text("{}", encoding="utf-8")

        write_json_atomic(target, {"name": "app"})

        assert sorted(p.name for p in tmp_path.iterdir()) == ["package.json"]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_permissions_preserved(self, tmp_path: Path) -> None:
        target = tmp_path / "package.json"
        target.write_text("{}", encoding="utf-8")
        target.chmod(0o664)

        write_json_atomic(target, {"name": "app"})

        assert stat.S_IMODE(target.stat().st_mode) == 0o664

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_writes_through_symlink(self, tmp_path: Path) -> None:
        """Test a symlinked file keeps its link and the target gets the content."""
        shared = tmp_path / "shared"
        shared.mkdir()
        target = shared / "package.json"
        target.write_text('{"name": "before"}', encoding="utf-8")
        app = tmp_path / "app"
        app.mkdir()
        link = app / "package.json"
        link.symlink_to(target)

        write_json_atomic(link, {"name": "after"})

        assert link.is_symlink()
        assert read_json(target) == {"name": "after"}
        assert sorted(p.name for p in app.iterdir()) == ["package.json"]
        assert sorted(p.name for p in shared.iterdir()) == ["package.json"]

    def test_failed_replace_keeps_original(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the original file survives a failed swap and the temp file is removed."""
        target = tmp_path / "package.json"
        target.write_text('{"name": "before"}', encoding="utf-8")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(OSError, match="disk full"):
            write_json_atomic(target, {"name": "after"})

        assert target.read_text(encoding="utf-8") == '{"name": "before"}'
        assert sorted(p.name for p in tmp_path.iterdir()) == ["package.json"]

    def test_write_manifest_wraps_os_error(self, tmp_path: Path) -> None:
        missing_dir = tmp_path / "nope" / "package.json"

        with pytest.raises(ManifestError, match="could not be written"):
            write_manifest(missing_dir, {})


# =============================================================================
# Read Tests
# =============================================================================

class TestReadManifest:
    """Tests for read_manifest."""

    def test_reads_object_in_order(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text('{"version": "1.0.0", "name": "app"}', encoding="utf-8")

        assert list(read_manifest(path)) == ["version", "name"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="file not found"):
            read_manifest(tmp_path / "package.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{ name: app }", encoding="utf-8")

        with pytest.raises(ManifestError, match="invalid JSON") as exc_info:
            read_manifest(path)

        assert exc_info.value.path == path
        assert str(exc_info.value).startswith("package.json: ")

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ManifestError, match="not an object"):
            read_manifest(path)

    def test_manifest_error_is_value_error(self) -> None:
        assert issubclass(ManifestError, ValueError)


# =============================================================================
# Dependency Query Tests
# =============================================================================

class TestDeclaredLegacyPackages:
    """Tests for declared_legacy_packages."""

    def test_none_declared(self) -> None:
        assert declared_legacy_packages({"devDependencies": {"typescript": "5.4.0"}}) == []

    def test_both_sections(self) -> None:
        """Test packages in dependencies and devDependencies both count."""
        manifest = {
            "dependencies": {"prettier": "^3.0.0"},
            "devDependencies": {"eslint": "^8.0.0", "vitest": "1.0.0"},
        }

        assert declared_legacy_packages(manifest) == ["eslint", "prettier"]

    def test_order_follows_known_list(self) -> None:
        manifest = {"devDependencies": {name: "1.0.0" for name in reversed(LEGACY_PACKAGES)}}

        assert declared_legacy_packages(manifest) == list(LEGACY_PACKAGES)

    def test_listed_once_when_in_both_sections(self) -> None:
        manifest = {
            "dependencies": {"eslint": "8.0.0"},
            "devDependencies": {"eslint": "8.0.0"},
        }

        assert declared_legacy_packages(manifest) == ["eslint"]

    def test_empty_version_not_declared(self) -> None:
        assert declared_legacy_packages({"devDependencies": {"eslint": ""}}) == []

    def test_malformed_sections_ignored(self) -> None:
        assert declared_legacy_packages({"devDependencies": ["eslint"]}) == []


# =============================================================================
# Update Tests
# =============================================================================

class TestUpdateManifest:
    """Tests for update_manifest."""

    def test_scripts_set(self, make_project) -> None:
        """Test all five Biome scripts are written."""
        root = make_project(manifest={"name": "app"})

        update = update_manifest(root / "package.json")

        manifest = read_json(root / "package.json")
        assert manifest["scripts"] == dict(SCRIPT_UPDATES)
        assert update.added_scripts == list(SCRIPT_UPDATES)
        assert update.overwritten_scripts == {}

    def test_existing_scripts_overwritten(self, make_project) -> None:
        """Test existing entries are replaced and recorded; others are kept."""
        root = make_project(
            manifest={
                "name": "app",
                "scripts": {"lint": "old-lint", "test": "vitest", "check": "biome check ."},
            },
        )

        update = update_manifest(root / "package.json")

        scripts = read_json(root / "package.json")["scripts"]
        assert scripts["lint"] == "biome lint ."
        assert scripts["test"] == "vitest"
        assert update.overwritten_scripts == {"lint": "old-lint"}
        assert "check" not in update.added_scripts

    def test_embedded_fields_removed(self, make_project) -> None:
        root = make_project(
            manifest={
                "name": "app",
                "eslintConfig": {"extends": "react-app"},
                "prettier": {"semi": False},
                "browserslist": ["defaults"],
            },
        )

        update = update_manifest(root / "package.json")

        manifest = read_json(root / "package.json")
        assert "eslintConfig" not in manifest
        assert "prettier" not in manifest
        assert manifest["browserslist"] == ["defaults"]
        assert update.removed_fields == ["eslintConfig", "prettier"]

    def test_key_order_preserved(self, make_project) -> None:
        root = make_project(
            manifest={"name": "app", "version": "1.0.0", "scripts": {"dev": "vite"}, "private": True},
        )

        update_manifest(root / "package.json")

        assert list(read_json(root / "package.json")) == [
            "name", "version", "scripts", "private",
        ]

    def test_non_object_scripts_replaced(self, make_project) -> None:
        root = make_project(manifest={"scripts": "nonsense"})

        update_manifest(root / "package.json")

        assert read_json(root / "package.json")["scripts"] == dict(SCRIPT_UPDATES)

    def test_written_format(self, make_project) -> None:
        root = make_project(manifest={"name": "app"})

        update_manifest(root / "package.json")

        text = (root / "package.json").read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert '\n  "scripts": {\n    "lint": "biome lint ."' in text

    def test_idempotent(self, make_project) -> None:
        """Test a second run changes nothing and reports nothing overwritten."""
        root = make_project(manifest={"name": "app", "prettier": {}})
        path = root / "package.json"

        update_manifest(path)
        first = path.read_text(encoding="utf-8")
        second_update = update_manifest(path)

        assert path.read_text(encoding="utf-8") == first
        assert second_update.removed_fields == []
        assert second_update.overwritten_scripts == {}
        assert second_update.added_scripts == []

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlinked_manifest_updated_in_place(self, tmp_path: Path) -> None:
        shared = tmp_path / "shared"
        shared.mkdir()
        target = shared / "package.json"
        target.write_text('{"scripts": {"lint": "old"}}', encoding="utf-8")
        link = tmp_path / "package.json"
        link.symlink_to(target)

        update = update_manifest(link)

        assert link.is_symlink()
        assert read_json(target)["scripts"]["lint"] == "biome lint ."
        assert update.overwritten_scripts == {"lint": "old"}

    def test_invalid_manifest_left_untouched(self, make_project) -> None:
        root = make_project(files={"package.json": "{ broken"})

        with pytest.raises(ManifestError):
            update_manifest(root / "package.json")

        assert (root / "package.json").read_text(encoding="utf-8") == "{ broken"
