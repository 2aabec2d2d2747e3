"""
biomigrate - ESLint + Prettier to Biome Migration
=================================================

A CLI tool that moves a JavaScript/TypeScript project from ESLint and
Prettier to Biome (https://biomejs.dev) in one run, keeping a backup of
the configuration it removes.

Features
--------
- **One Command**: Detects, backs up, installs, configures and cleans up
- **Safe Cleanup**: Config files are deleted only after they are backed up
- **Any Package Manager**: npm, yarn, pnpm and bun, picked by lockfile
- **Dry Run**: Preview every change before making it
- **Skill Validation**: Check SKILL.md files for the agent skill format

Quick Start
-----------
```bash
# Migrate the project containing the current directory
biomigrate migrate

# Preview only
biomigrate migrate --dry-run
```

Example
-------
>>> from biomigrate import migrate_project
>>> outcome = migrate_project()
>>> outcome.success
True

Architecture
------------
- ``cli``: Typer-based command line interface
- ``detector``: Root, legacy config and package manager detection
- ``manifest``: package.json reading and rewriting
- ``generator``: biome.json generation
- ``runner``: Package manager commands
- ``migrator``: The migration pipeline
- ``validator``: SKILL.md validation
- ``models``: Pydantic models and enumerations
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from biomigrate.migrator import MigrationOutcome, migrate_project, plan_migration
from biomigrate.models import MigrationSettings, PackageManager
from biomigrate.validator import validate_skill


__all__ = [
    "MigrationOutcome",
    "MigrationSettings",
    "PackageManager",
    "__version__",
    "migrate_project",
    "plan_migration",
    "validate_skill",
]
