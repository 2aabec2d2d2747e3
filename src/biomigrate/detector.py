"""
biomigrate.detector - Project Discovery
=======================================

Read-only probes run before anything is changed:

1. **Root location**: walk up from a directory to the nearest package.json
2. **Legacy config detection**: ESLint and Prettier files plus the fields
   they can embed in package.json
3. **Package manager detection**: by lockfile presence

None of these functions raise for missing or malformed files. Absence of
configuration is the normal case for a project that was never linted.

Usage
-----
>>> from pathlib import Path
>>> from biomigrate.detector import detect_legacy_configs, find_project_root
>>> root = find_project_root()
>>> configs = detect_legacy_configs(root)
>>> [entry.label for entry in configs.linter]
['.eslintrc.json', 'package.json (eslintConfig field)']
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from biomigrate.manifest import (
    EMBEDDED_CONFIG_FIELDS,
    ManifestError,
    embedded_config_fields,
    read_manifest,
)
from biomigrate.models import LegacyTool, PackageManager


MANIFEST_FILENAME = "package.json"

# Standalone config files for each legacy tool, checked in this order
LEGACY_CONFIG_FILES = MappingProxyType({
    LegacyTool.ESLINT: (
        ".eslintrc",
        ".eslintrc.js",
        ".eslintrc.cjs",
        ".eslintrc.json",
        ".eslintrc.yml",
        ".eslintrc.yaml",
    ),
    LegacyTool.PRETTIER: (
        ".prettierrc",
        ".prettierrc.js",
        ".prettierrc.cjs",
        ".prettierrc.json",
        ".prettierrc.yml",
        ".prettierrc.yaml",
        "prettier.config.js",
        "prettier.config.cjs",
    ),
})

# Lockfile probe order; the first manager with a lockfile present wins
PACKAGE_MANAGER_PRIORITY: tuple[PackageManager, ...] = (
    PackageManager.PNPM,
    PackageManager.YARN,
    PackageManager.BUN,
)

DEFAULT_PACKAGE_MANAGER = PackageManager.NPM


@dataclass(frozen=True)
class LegacyConfigEntry:
    """
    One piece of legacy configuration.

    Either ``path`` (a file name relative to the project root) or
    ``field`` (a top-level key embedded in the manifest) is set, never
    both.
    """

    tool: LegacyTool
    path: str | None = None
    field: str | None = None

    @property
    def is_embedded(self) -> bool:
        """True for a config field living inside package.json."""
        return self.field is not None

    @property
    def label(self) -> str:
        """Human-readable name used in reports."""
        if self.is_embedded:
            return f"{MANIFEST_FILENAME} ({self.field} field)"
        return str(self.path)


@dataclass(frozen=True)
class LegacyConfigSet:
    """
    Legacy configuration found in a project.

    Attributes
    ----------
    linter : tuple[LegacyConfigEntry, ...]
        ESLint configuration entries.

    formatter : tuple[LegacyConfigEntry, ...]
        Prettier configuration entries.
    """

    linter: tuple[LegacyConfigEntry, ...] = ()
    formatter: tuple[LegacyConfigEntry, ...] = ()

    @property
    def entries(self) -> tuple[LegacyConfigEntry, ...]:
        return self.linter + self.formatter

    @property
    def standalone_files(self) -> tuple[str, ...]:
        """Relative paths of config files, embedded fields excluded."""
        return tuple(e.path for e in self.entries if e.path is not None)

    @property
    def embedded_fields(self) -> tuple[str, ...]:
        return tuple(e.field for e in self.entries if e.field is not None)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def has_standalone_files(self) -> bool:
        return bool(self.standalone_files)


# =============================================================================
# Detection Functions
# =============================================================================


def find_project_root(
    start: Path | None = None,
    manifest_filename: str = MANIFEST_FILENAME,
) -> Path:
    """
    Find the nearest directory containing the manifest.

    Parameters
    ----------
    start : Path | None
        Directory to start from. Defaults to the current working directory.

    manifest_filename : str
        File that marks a project root.

    Returns
    -------
    Path
        The first of ``start`` and its parents that contains the manifest,
        or ``start`` itself when no ancestor does.
    """
    start = (start or Path.cwd()).resolve()

    for candidate in (start, *start.parents):
        if (candidate / manifest_filename).is_file():
            return candidate

    return start


def detect_legacy_configs(
    root: Path,
    manifest_filename: str = MANIFEST_FILENAME,
) -> LegacyConfigSet:
    """
    Detect ESLint and Prettier configuration in a project.

    Parameters
    ----------
    root : Path
        Project root.

    manifest_filename : str
        Manifest checked for embedded configuration fields.

    Returns
    -------
    LegacyConfigSet
        Standalone files first (in ``LEGACY_CONFIG_FILES`` order), then
        embedded fields, per tool.
    """
    found: dict[LegacyTool, list[LegacyConfigEntry]] = {tool: [] for tool in LegacyTool}

    for tool, filenames in LEGACY_CONFIG_FILES.items():
        for filename in filenames:
            if (root / filename).is_file():
                found[tool].append(LegacyConfigEntry(tool=tool, path=filename))

    manifest_path = root / manifest_filename
    if manifest_path.exists():
        try:
            manifest = read_manifest(manifest_path)
        except ManifestError:
            manifest = {}

        for name in embedded_config_fields(manifest):
            tool = EMBEDDED_CONFIG_FIELDS[name]
            found[tool].append(LegacyConfigEntry(tool=tool, field=name))

    return LegacyConfigSet(
        linter=tuple(found[LegacyTool.ESLINT]),
        formatter=tuple(found[LegacyTool.PRETTIER]),
    )


def detect_package_manager(root: Path) -> PackageManager:
    """
    Detect the package manager used by a project.

    Parameters
    ----------
    root : Path
        Project root.

    Returns
    -------
    PackageManager
        pnpm, yarn or bun when their lockfile is present (checked in that
        order), npm otherwise.
    """
    for manager in PACKAGE_MANAGER_PRIORITY:
        if any((root / lockfile).exists() for lockfile in manager.lockfiles):
            return manager

    return DEFAULT_PACKAGE_MANAGER
