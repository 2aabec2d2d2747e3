"""
biomigrate.manifest - package.json Reading and Rewriting
========================================================

This module owns every read and write of the project manifest
(``package.json``) and of the other JSON documents biomigrate produces.

Rewrite Rules
-------------
A migration rewrites the manifest exactly once:

1. The embedded legacy configuration fields ``eslintConfig`` and
   ``prettier`` are deleted.
2. Five script entries are set to Biome commands. This is an overwrite,
   not a merge: an existing ``lint`` script is replaced whatever it did.
3. The document is serialized with two-space indentation and a trailing
   newline, and swapped into place atomically.

The manifest itself is not backed up. Callers report the overwritten
script values (see ``ManifestUpdate.overwritten_scripts``) so users can
restore them by hand.

Usage
-----
>>> from pathlib import Path
>>> from biomigrate.manifest import update_manifest
>>> update = update_manifest(Path("package.json"))
>>> update.removed_fields
['eslintConfig']
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from biomigrate.models import LegacyTool


# Embedded config fields in package.json and the tool each belongs to
EMBEDDED_CONFIG_FIELDS = MappingProxyType({
    "eslintConfig": LegacyTool.ESLINT,
    "prettier": LegacyTool.PRETTIER,
})

# Script entries written by a migration
SCRIPT_UPDATES = MappingProxyType({
    "lint": "biome lint .",
    "format": "biome format --write .",
    "format:check": "biome format .",
    "check": "biome check .",
    "check:fix": "biome check --write .",
})

# Packages superseded by Biome
LEGACY_PACKAGES: tuple[str, ...] = (
    "eslint",
    "@typescript-eslint/parser",
    "@typescript-eslint/eslint-plugin",
    "eslint-config-prettier",
    "eslint-plugin-prettier",
    "prettier",
)

DEPENDENCY_SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies")


class ManifestError(ValueError):
    """The manifest is missing, is not a JSON object, or cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path.name}: {reason}")


@dataclass
class ManifestUpdate:
    """
    What a manifest rewrite changed.

    Attributes
    ----------
    path : Path
        The rewritten manifest.

    removed_fields : list[str]
        Embedded legacy config fields that were deleted.

    overwritten_scripts : dict[str, str]
        Scripts that existed with a different command, mapped to the
        command they had before the rewrite.

    added_scripts : list[str]
        Scripts that did not exist before.
    """

    path: Path
    removed_fields: list[str] = field(default_factory=list)
    overwritten_scripts: dict[str, str] = field(default_factory=dict)
    added_scripts: list[str] = field(default_factory=list)


# =============================================================================
# JSON I/O
# =============================================================================


def dump_json(data: Any) -> str:
    """Serialize ``data`` the way npm writes package.json."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Write ``data`` as JSON to ``path`` via a temp file and rename.

    Readers never observe a half-written file. The temp file is created in
    the target directory so the final ``os.replace`` stays on one
    filesystem. A symlinked ``path`` is resolved first, so the link is kept
    and its target receives the new content.

    Raises
    ------
    OSError
        If the temp file cannot be created, written, or renamed.
    """
    content = dump_json(data)
    # Write through symlinks: the rename must replace the link target.
    path = path.resolve()
    try:
        mode = path.stat().st_mode & 0o777
    except FileNotFoundError:
        mode = 0o644

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        # mkstemp creates 0600 files
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_manifest(path: Path) -> dict[str, Any]:
    """
    Parse a package.json file.

    Parameters
    ----------
    path : Path
        Path to the manifest.

    Returns
    -------
    dict[str, Any]
        The parsed top-level object, key order preserved.

    Raises
    ------
    ManifestError
        If the file is missing, unreadable, not valid JSON, or its top
        level is not an object.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ManifestError(path, "file not found") from None
    except json.JSONDecodeError as e:
        raise ManifestError(path, f"invalid JSON ({e})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(path, f"could not be read ({e})") from e

    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value is not an object")
    return data


def write_manifest(path: Path, data: dict[str, Any]) -> None:
    """Write the manifest back in one atomic rewrite."""
    try:
        write_json_atomic(path, data)
    except OSError as e:
        raise ManifestError(path, f"could not be written ({e})") from e


# =============================================================================
# Queries
# =============================================================================


def embedded_config_fields(manifest: dict[str, Any]) -> list[str]:
    """Embedded legacy config fields present in ``manifest``."""
    return [name for name in EMBEDDED_CONFIG_FIELDS if name in manifest]


def declared_legacy_packages(manifest: dict[str, Any]) -> list[str]:
    """
    Legacy packages the manifest declares as a (dev) dependency.

    A package counts as declared when it has a non-empty version in
    ``dependencies`` or ``devDependencies``. The result keeps the order of
    ``LEGACY_PACKAGES``.
    """
    declared: list[str] = []
    for name in LEGACY_PACKAGES:
        for section in DEPENDENCY_SECTIONS:
            deps = manifest.get(section)
            if isinstance(deps, dict) and deps.get(name):
                declared.append(name)
                break
    return declared


# =============================================================================
# Rewrite
# =============================================================================


def apply_manifest_changes(manifest: dict[str, Any], update: ManifestUpdate) -> None:
    """
    Mutate ``manifest`` in place and record the changes in ``update``.

    Split from ``update_manifest`` so the plan preview can compute the same
    changes against a copy without touching disk.
    """
    for name in embedded_config_fields(manifest):
        del manifest[name]
        update.removed_fields.append(name)

    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        scripts = {}
        manifest["scripts"] = scripts

    for name, command in SCRIPT_UPDATES.items():
        previous = scripts.get(name)
        if previous is None:
            update.added_scripts.append(name)
        elif previous != command:
            update.overwritten_scripts[name] = previous
        scripts[name] = command


def update_manifest(path: Path) -> ManifestUpdate:
    """
    Remove embedded legacy config and point the scripts at Biome.

    Parameters
    ----------
    path : Path
        Path to package.json.

    Returns
    -------
    ManifestUpdate
        Record of removed fields and replaced scripts.

    Raises
    ------
    ManifestError
        If the manifest cannot be parsed or written. The file on disk is
        left untouched in that case.
    """
    manifest = read_manifest(path)
    update = ManifestUpdate(path=path)
    apply_manifest_changes(manifest, update)
    write_manifest(path, manifest)
    return update
