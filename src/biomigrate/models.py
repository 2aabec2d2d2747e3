"""
biomigrate.models - Pydantic Models and Enumerations
====================================================

This module defines the data models shared across biomigrate. Pydantic is
used for the same reasons as everywhere else in the project:

1. **Validation**: Settings are checked when they are constructed
2. **Serialization**: The generated ``biome.json`` is a model dump
3. **Immutability**: Frozen models make the fixed defaults safe to share

Architecture Notes
------------------
The models are organized as:

    MigrationSettings (fixed file names and the Biome version)
    PackageManager (enum: npm, yarn, pnpm, bun)
    LegacyTool (enum: eslint, prettier)
    BiomeConfig (the biome.json document)
    ├── VcsConfig
    ├── FilesConfig
    ├── FormatterConfig
    ├── OrganizeImportsConfig
    ├── LinterConfig
    │   └── LinterRules
    ├── JavaScriptConfig
    │   └── JavaScriptFormatterConfig
    └── JsonConfig

Usage Example
-------------
>>> from biomigrate.models import PackageManager
>>> PackageManager.YARN.install_args("@biomejs/biome@1.9.4")
('yarn', 'add', '--dev', '--exact', '@biomejs/biome@1.9.4')
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


RuleLevel = Literal["off", "info", "warn", "error"]


# =============================================================================
# Enumerations
# =============================================================================

class PackageManager(str, Enum):
    """
    JavaScript package managers biomigrate knows how to drive.

    The manager is chosen by lockfile presence (see
    ``biomigrate.detector.detect_package_manager``) and decides which
    command line is used to install Biome and to remove legacy packages.

    Examples
    --------
    >>> PackageManager.NPM.remove_args(["eslint", "prettier"])
    ('npm', 'uninstall', 'eslint', 'prettier')
    """

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"

    @property
    def lockfiles(self) -> tuple[str, ...]:
        """Lockfile names that identify this manager."""
        return _LOCKFILES[self]

    def install_args(self, package: str) -> tuple[str, ...]:
        """
        Command line adding ``package`` as an exact-pinned dev dependency.

        Parameters
        ----------
        package : str
            Package specifier, e.g. ``"@biomejs/biome@1.9.4"``.

        Returns
        -------
        tuple[str, ...]
            The argv to run from the project root.
        """
        return (*_INSTALL_PREFIXES[self], package)

    def remove_args(self, packages: list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Command line uninstalling ``packages``."""
        return (*_REMOVE_PREFIXES[self], *packages)


_LOCKFILES: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("package-lock.json",),
    PackageManager.YARN: ("yarn.lock",),
    PackageManager.PNPM: ("pnpm-lock.yaml",),
    PackageManager.BUN: ("bun.lockb", "bun.lock"),
}

_INSTALL_PREFIXES: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("npm", "install", "--save-dev", "--save-exact"),
    PackageManager.YARN: ("yarn", "add", "--dev", "--exact"),
    PackageManager.PNPM: ("pnpm", "add", "--save-dev", "--save-exact"),
    PackageManager.BUN: ("bun", "add", "--dev", "--exact"),
}

_REMOVE_PREFIXES: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("npm", "uninstall"),
    PackageManager.YARN: ("yarn", "remove"),
    PackageManager.PNPM: ("pnpm", "remove"),
    PackageManager.BUN: ("bun", "remove"),
}


class LegacyTool(str, Enum):
    """
    Legacy tools replaced by Biome.

    ESLint configuration lands in the "linter" category of a
    ``LegacyConfigSet``, Prettier configuration in the "formatter" one.
    """

    ESLINT = "eslint"
    PRETTIER = "prettier"

    @property
    def display_name(self) -> str:
        """Name used in console output."""
        return {LegacyTool.ESLINT: "ESLint", LegacyTool.PRETTIER: "Prettier"}[self]


# =============================================================================
# Settings
# =============================================================================

class MigrationSettings(BaseModel):
    """
    Fixed names and versions used by a migration run.

    The defaults are the only values the CLI ever uses; the model exists
    so the orchestrator has a single place to read them from and tests can
    point a run at different names.

    Attributes
    ----------
    manifest_filename : str
        Project manifest looked up by the root locator.

    config_filename : str
        Name of the generated Biome configuration file.

    backup_dir_name : str
        Directory (relative to the project root) receiving legacy files.

    biome_package : str
        npm package name of Biome.

    biome_version : str
        Exact Biome version to install. The generated ``$schema`` points at
        the same version so the config and the binary always agree.
    """

    model_config = ConfigDict(frozen=True)

    manifest_filename: str = Field(
        default="package.json",
        description="Project manifest file name",
        min_length=1,
    )
    config_filename: str = Field(
        default="biome.json",
        description="Generated Biome configuration file name",
        min_length=1,
    )
    backup_dir_name: str = Field(
        default=".biome-migration-backup",
        description="Backup directory for removed legacy configuration",
        min_length=1,
    )
    biome_package: str = Field(
        default="@biomejs/biome",
        description="Biome package name on the npm registry",
    )
    biome_version: str = Field(
        default="1.9.4",
        description="Exact Biome version to install",
    )

    @field_validator("manifest_filename", "config_filename", "backup_dir_name")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """
        Reject names containing path separators.

        All three names are resolved directly under the project root.
        """
        if "/" in v or "\\" in v:
            msg = f"Expected a plain file name, got: {v}"
            raise ValueError(msg)
        return v

    @field_validator("biome_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Exact pinning needs a concrete version, not a range."""
        v = v.strip()
        if not v or v[0] in "^~<>=*":
            msg = f"biome_version must be an exact version: {v!r}"
            raise ValueError(msg)
        return v

    @property
    def biome_spec(self) -> str:
        """Package specifier passed to the package manager."""
        return f"{self.biome_package}@{self.biome_version}"

    @property
    def schema_url(self) -> str:
        """JSON schema URL matching ``biome_version``."""
        return f"https://biomejs.dev/schemas/{self.biome_version}/schema.json"


# =============================================================================
# biome.json Document
# =============================================================================

class _BiomeSection(BaseModel):
    """Base for biome.json sections: camelCase aliases, immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class VcsConfig(_BiomeSection):
    enabled: bool = True
    client_kind: Literal["git"] = Field(default="git", alias="clientKind")
    use_ignore_file: bool = Field(default=True, alias="useIgnoreFile")


class FilesConfig(_BiomeSection):
    ignore_unknown: bool = Field(default=False, alias="ignoreUnknown")
    ignore: tuple[str, ...] = (
        "node_modules",
        "dist",
        "build",
        ".next",
        ".nuxt",
        "coverage",
        "*.min.js",
    )


class FormatterConfig(_BiomeSection):
    enabled: bool = True
    format_with_errors: bool = Field(default=False, alias="formatWithErrors")
    indent_style: Literal["space", "tab"] = Field(default="space", alias="indentStyle")
    indent_width: int = Field(default=2, alias="indentWidth", ge=1, le=24)
    line_ending: Literal["lf", "crlf", "cr"] = Field(default="lf", alias="lineEnding")
    line_width: int = Field(default=100, alias="lineWidth", ge=1, le=320)
    attribute_position: Literal["auto", "multiline"] = Field(
        default="auto", alias="attributePosition"
    )


class OrganizeImportsConfig(_BiomeSection):
    enabled: bool = True


class LinterRules(_BiomeSection):
    """
    Rule selection: Biome's recommended set plus a curated handful.

    Severities are fixed; users tune them in biome.json after migrating.
    """

    recommended: bool = True
    correctness: dict[str, RuleLevel] = Field(
        default_factory=lambda: {
            "noUnusedVariables": "error",
            "noUnusedImports": "error",
        }
    )
    style: dict[str, RuleLevel] = Field(
        default_factory=lambda: {
            "useConst": "error",
            "useTemplate": "error",
        }
    )
    suspicious: dict[str, RuleLevel] = Field(
        default_factory=lambda: {
            "noExplicitAny": "warn",
            "noConsoleLog": "warn",
        }
    )


class LinterConfig(_BiomeSection):
    enabled: bool = True
    rules: LinterRules = Field(default_factory=LinterRules)


class JavaScriptFormatterConfig(_BiomeSection):
    quote_style: Literal["single", "double"] = Field(default="single", alias="quoteStyle")
    jsx_quote_style: Literal["single", "double"] = Field(
        default="double", alias="jsxQuoteStyle"
    )
    quote_properties: Literal["asNeeded", "preserve"] = Field(
        default="asNeeded", alias="quoteProperties"
    )
    trailing_commas: Literal["all", "es5", "none"] = Field(
        default="all", alias="trailingCommas"
    )
    semicolons: Literal["always", "asNeeded"] = "always"
    arrow_parentheses: Literal["always", "asNeeded"] = Field(
        default="always", alias="arrowParentheses"
    )
    bracket_spacing: bool = Field(default=True, alias="bracketSpacing")
    bracket_same_line: bool = Field(default=False, alias="bracketSameLine")


class JavaScriptConfig(_BiomeSection):
    formatter: JavaScriptFormatterConfig = Field(default_factory=JavaScriptFormatterConfig)


class JsonFormatterConfig(_BiomeSection):
    enabled: bool = True
    indent_style: Literal["space", "tab"] = Field(default="space", alias="indentStyle")
    indent_width: int = Field(default=2, alias="indentWidth", ge=1, le=24)
    line_width: int = Field(default=100, alias="lineWidth", ge=1, le=320)


class JsonLinterConfig(_BiomeSection):
    enabled: bool = True


class JsonConfig(_BiomeSection):
    formatter: JsonFormatterConfig = Field(default_factory=JsonFormatterConfig)
    linter: JsonLinterConfig = Field(default_factory=JsonLinterConfig)


class BiomeConfig(_BiomeSection):
    """
    The complete ``biome.json`` document written by a migration.

    Every section has fixed defaults; no user input is taken at migration
    time. Field order matches the order of keys in the written file.

    Examples
    --------
    >>> doc = BiomeConfig(schema_="https://biomejs.dev/schemas/1.9.4/schema.json")
    >>> doc.to_document()["formatter"]["lineWidth"]
    100
    """

    schema_: str = Field(alias="$schema")
    vcs: VcsConfig = Field(default_factory=VcsConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    organize_imports: OrganizeImportsConfig = Field(
        default_factory=OrganizeImportsConfig, alias="organizeImports"
    )
    linter: LinterConfig = Field(default_factory=LinterConfig)
    javascript: JavaScriptConfig = Field(default_factory=JavaScriptConfig)
    json_: JsonConfig = Field(default_factory=JsonConfig, alias="json")

    def to_document(self) -> dict:
        """
        Plain JSON-compatible dict using Biome's key names.

        Returns
        -------
        dict
            Ready for ``json.dumps``.
        """
        return self.model_dump(by_alias=True, mode="json")
