"""
biomigrate.migrator - ESLint/Prettier to Biome Migration
========================================================

This module runs the migration of a JavaScript/TypeScript project from
ESLint and Prettier to Biome.

Pipeline
--------
The migration is a fixed sequence of steps. Each step records a
``StepResult`` and only a failed install stops the run:

    1. Locate        find the directory holding package.json
    2. Detect        find ESLint/Prettier config files and embedded fields
    3. Backup        copy config files to .biome-migration-backup/
    4. Probe         pick npm, yarn, pnpm or bun from the lockfile
    5. Install       add @biomejs/biome (FATAL on failure)
    6. Configure     write biome.json
    7. Manifest      rewrite package.json scripts, drop embedded config
    8. Dependencies  uninstall legacy packages still declared
    9. Cleanup       delete the config files that were backed up

Safety Rules
------------
- A config file is deleted only if it was copied into the backup
  directory first. Files whose backup failed stay where they are.
- Nothing is rewritten before the install succeeds, so a failed install
  leaves the project as it was (plus inert backup copies).
- Every other failure is recorded as DEGRADED and the run continues.
- package.json itself is not backed up. Overwritten scripts are reported
  instead.

Usage
-----
>>> from biomigrate.migrator import migrate_project
>>> outcome = migrate_project()
>>> outcome.success
True
>>> [step.name for step in outcome.steps]
['detect', 'backup', 'probe', 'install', 'configure', 'manifest', 'dependencies', 'cleanup']
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from biomigrate.detector import (
    LegacyConfigSet,
    detect_legacy_configs,
    detect_package_manager,
    find_project_root,
)
from biomigrate.generator import write_biome_config
from biomigrate.manifest import (
    ManifestError,
    ManifestUpdate,
    apply_manifest_changes,
    declared_legacy_packages,
    read_manifest,
    update_manifest,
)
from biomigrate.models import MigrationSettings, PackageManager
from biomigrate.runner import (
    CommandError,
    ProcessRunner,
    SubprocessRunner,
    install_biome,
    remove_legacy_packages,
)


# Console for rich output
console = Console()


class StepOutcome(str, Enum):
    """
    How a pipeline step ended.

    Only ``FATAL`` stops the pipeline.
    """

    OK = "ok"
    DEGRADED = "degraded"
    FATAL = "fatal"


class MigrationState(str, Enum):
    """Orchestrator states, in pipeline order."""

    NOT_STARTED = "not_started"
    LOCATED = "located"
    DETECTED = "detected"
    BACKED_UP = "backed_up"
    NO_BACKUP_NEEDED = "no_backup_needed"
    PROBED = "probed"
    INSTALLED = "installed"
    ABORTED_AT_INSTALL = "aborted_at_install"
    CONFIG_WRITTEN = "config_written"
    MANIFEST_UPDATED = "manifest_updated"
    DEPENDENCIES_HANDLED = "dependencies_handled"
    FILES_REMOVED = "files_removed"
    REPORTED = "reported"


@dataclass
class StepResult:
    """
    Result of one pipeline step.

    Attributes
    ----------
    name : str
        Step name (``detect``, ``backup``, ``install``...).

    outcome : StepOutcome
        OK, DEGRADED or FATAL.

    detail : str
        One-line human-readable summary.
    """

    name: str
    outcome: StepOutcome
    detail: str


@dataclass
class BackupRecord:
    """
    Files copied to the backup directory.

    Attributes
    ----------
    backup_dir : Path
        Backup directory under the project root.

    backed_up : list[str]
        Files copied successfully. Only these may be deleted later.

    failed : dict[str, str]
        Files that could not be copied, mapped to the error message.
    """

    backup_dir: Path
    backed_up: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


@dataclass
class FileRemovalResult:
    """Outcome of deleting backed-up legacy config files."""

    removed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


@dataclass
class MigrationPlan:
    """
    What a migration would do, computed without changing anything.

    Attributes
    ----------
    root : Path
        Project root.

    configs : LegacyConfigSet
        Detected legacy configuration.

    package_manager : PackageManager
        Manager that would be used.

    install_command : tuple[str, ...]
        Command that would install Biome.

    config_exists : bool
        Whether an existing biome.json would be overwritten.

    fields_to_remove : list[str]
        Embedded config fields that would be removed from package.json.

    scripts_to_overwrite : dict[str, str]
        Existing scripts that would be replaced, with their current value.

    packages_to_remove : list[str]
        Legacy packages that would be uninstalled.

    manifest_error : str | None
        Why package.json could not be inspected, if it could not.
    """

    root: Path
    configs: LegacyConfigSet
    package_manager: PackageManager
    install_command: tuple[str, ...]
    config_exists: bool = False
    fields_to_remove: list[str] = field(default_factory=list)
    scripts_to_overwrite: dict[str, str] = field(default_factory=dict)
    packages_to_remove: list[str] = field(default_factory=list)
    manifest_error: str | None = None


@dataclass
class MigrationOutcome:
    """
    Everything that happened during a migration run.

    Used for the end-of-run report; nothing here is persisted.
    """

    root: Path
    state: MigrationState = MigrationState.NOT_STARTED
    configs: LegacyConfigSet = field(default_factory=LegacyConfigSet)
    backup: BackupRecord | None = None
    package_manager: PackageManager | None = None
    install_command: tuple[str, ...] = ()
    config_path: Path | None = None
    config_overwritten: bool = False
    manifest_update: ManifestUpdate | None = None
    packages_removed: list[str] = field(default_factory=list)
    files_removed: list[str] = field(default_factory=list)
    files_skipped: list[str] = field(default_factory=list)
    steps: list[StepResult] = field(default_factory=list)

    @property
    def fatal_step(self) -> StepResult | None:
        """The step that aborted the run, if any."""
        return next((s for s in self.steps if s.outcome == StepOutcome.FATAL), None)

    @property
    def success(self) -> bool:
        """True unless a fatal step aborted the run."""
        return self.fatal_step is None

    @property
    def degraded(self) -> bool:
        """True if any step completed only partially."""
        return any(s.outcome == StepOutcome.DEGRADED for s in self.steps)

    @property
    def exit_code(self) -> int:
        """Process exit status for this outcome."""
        return 0 if self.success else 1

    @property
    def manifest_migrated(self) -> bool:
        return self.manifest_update is not None

    def step(self, name: str) -> StepResult | None:
        """Look up a step result by name."""
        return next((s for s in self.steps if s.name == name), None)


# =============================================================================
# Backup and Cleanup
# =============================================================================


def backup_legacy_configs(
    root: Path,
    configs: LegacyConfigSet,
    backup_dir_name: str = ".biome-migration-backup",
) -> BackupRecord:
    """
    Copy standalone legacy config files into the backup directory.

    Embedded package.json fields are skipped; they are dropped by the
    manifest rewrite instead. The directory is only created when there is
    at least one file to copy.

    Parameters
    ----------
    root : Path
        Project root.

    configs : LegacyConfigSet
        Detected configuration.

    backup_dir_name : str
        Backup directory name under ``root``.

    Returns
    -------
    BackupRecord
        Copied files and per-file failures. One failed copy does not stop
        the others.
    """
    backup_dir = root / backup_dir_name
    record = BackupRecord(backup_dir=backup_dir)

    files = configs.standalone_files
    if not files:
        return record

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        record.failed = {name: f"could not create {backup_dir_name}: {e}" for name in files}
        return record

    for name in files:
        src = root / name
        try:
            shutil.copy2(src, backup_dir / Path(name).name)
        except OSError as e:
            record.failed[name] = str(e)
        else:
            record.backed_up.append(name)

    return record


def remove_legacy_config_files(
    root: Path,
    configs: LegacyConfigSet,
    backup: BackupRecord,
) -> FileRemovalResult:
    """
    Delete legacy config files that were backed up.

    Eligibility comes from ``backup.backed_up``, not from ``configs``: a
    detected file that failed to back up is reported as skipped and left
    in place.
    """
    result = FileRemovalResult()
    eligible = set(backup.backed_up)

    for name in configs.standalone_files:
        if name not in eligible:
            result.skipped.append(name)
            continue
        try:
            (root / name).unlink()
        except OSError as e:
            result.failed[name] = str(e)
        else:
            result.removed.append(name)

    return result


# =============================================================================
# Planning
# =============================================================================


def plan_migration(
    start: Path | None = None,
    settings: MigrationSettings | None = None,
) -> MigrationPlan:
    """
    Compute what ``migrate_project`` would do, without doing it.

    Parameters
    ----------
    start : Path | None
        Directory to locate the project root from (default: cwd).

    settings : MigrationSettings | None
        Fixed names and versions.

    Returns
    -------
    MigrationPlan
        The preview. Package removal is predicted from the manifest as it
        is now, before Biome is installed.
    """
    settings = settings or MigrationSettings()
    root = find_project_root(start, settings.manifest_filename)
    manager = detect_package_manager(root)

    plan = MigrationPlan(
        root=root,
        configs=detect_legacy_configs(root, settings.manifest_filename),
        package_manager=manager,
        install_command=manager.install_args(settings.biome_spec),
        config_exists=(root / settings.config_filename).exists(),
    )

    manifest_path = root / settings.manifest_filename
    try:
        manifest = read_manifest(manifest_path)
    except ManifestError as e:
        plan.manifest_error = str(e)
        return plan

    plan.packages_to_remove = declared_legacy_packages(manifest)
    preview = ManifestUpdate(path=manifest_path)
    apply_manifest_changes(manifest, preview)
    plan.fields_to_remove = preview.removed_fields
    plan.scripts_to_overwrite = preview.overwritten_scripts

    return plan


# =============================================================================
# Main Migration Function
# =============================================================================


_ICONS = {
    StepOutcome.OK: "[green]✓[/]",
    StepOutcome.DEGRADED: "[yellow]⚠[/]",
    StepOutcome.FATAL: "[red]✗[/]",
}


def migrate_project(
    start: Path | None = None,
    *,
    runner: ProcessRunner | None = None,
    settings: MigrationSettings | None = None,
    verbose: bool = True,
) -> MigrationOutcome:
    """
    Migrate a project from ESLint/Prettier to Biome.

    Parameters
    ----------
    start : Path | None
        Directory to locate the project root from (default: cwd).

    runner : ProcessRunner | None
        Runs package manager commands. Defaults to ``SubprocessRunner``.

    settings : MigrationSettings | None
        Fixed names and versions.

    verbose : bool, default=True
        Print progress to the console.

    Returns
    -------
    MigrationOutcome
        Step results and what changed. ``outcome.success`` is False only
        when the install failed, in which case nothing after it ran.
    """
    runner = runner or SubprocessRunner()
    settings = settings or MigrationSettings()

    root = find_project_root(start, settings.manifest_filename)
    outcome = MigrationOutcome(root=root, state=MigrationState.LOCATED)

    def header(message: str) -> None:
        if verbose:
            console.print()
            console.print(f"[bold]{message}[/]")

    def note(message: str) -> None:
        if verbose:
            console.print(f"    [dim]- {escape(message)}[/]")

    def record(name: str, step_outcome: StepOutcome, detail: str) -> None:
        outcome.steps.append(StepResult(name=name, outcome=step_outcome, detail=detail))
        if verbose:
            console.print(f"  {_ICONS[step_outcome]} {escape(detail)}")

    if verbose:
        console.print(f"[dim]Working directory: {escape(str(root))}[/]")

    # Detect
    header("🔍 Checking for existing ESLint/Prettier configuration...")
    configs = detect_legacy_configs(root, settings.manifest_filename)
    outcome.configs = configs
    outcome.state = MigrationState.DETECTED

    if configs.is_empty:
        record("detect", StepOutcome.OK, "No ESLint or Prettier configuration found")
    else:
        parts = []
        if configs.linter:
            parts.append("ESLint: " + ", ".join(e.label for e in configs.linter))
        if configs.formatter:
            parts.append("Prettier: " + ", ".join(e.label for e in configs.formatter))
        record("detect", StepOutcome.OK, "Found " + "; ".join(parts))

    # Backup
    if configs.is_empty:
        outcome.state = MigrationState.NO_BACKUP_NEEDED
        record("backup", StepOutcome.OK, "Nothing to back up")
    else:
        header("💾 Backing up existing configuration...")
        backup = backup_legacy_configs(root, configs, settings.backup_dir_name)
        outcome.backup = backup
        outcome.state = MigrationState.BACKED_UP

        if backup.failed:
            record(
                "backup",
                StepOutcome.DEGRADED,
                f"Backed up {len(backup.backed_up)} file(s), "
                f"{len(backup.failed)} failed (they will not be removed)",
            )
            for name, error in backup.failed.items():
                note(f"{name}: {error}")
        elif backup.backed_up:
            record(
                "backup",
                StepOutcome.OK,
                f"Backed up {len(backup.backed_up)} file(s) to {settings.backup_dir_name}/",
            )
        else:
            record("backup", StepOutcome.OK, "Only embedded package.json config, no files to copy")
        for name in backup.backed_up:
            note(name)

    # Probe
    header("📦 Detecting package manager...")
    manager = detect_package_manager(root)
    outcome.package_manager = manager
    outcome.state = MigrationState.PROBED
    record("probe", StepOutcome.OK, f"Using {manager.value}")

    # Install
    header(f"⬇️  Installing {settings.biome_spec}...")
    try:
        outcome.install_command = install_biome(root, manager, runner, settings)
    except CommandError as e:
        outcome.install_command = e.command
        outcome.state = MigrationState.ABORTED_AT_INSTALL
        record("install", StepOutcome.FATAL, f"Failed to install Biome: {e}")
        return outcome
    outcome.state = MigrationState.INSTALLED
    record("install", StepOutcome.OK, "Biome installed")

    # Configure
    header(f"📝 Writing {settings.config_filename}...")
    config_path = root / settings.config_filename
    outcome.config_overwritten = config_path.exists()
    try:
        outcome.config_path = write_biome_config(root, settings)
    except OSError as e:
        record("configure", StepOutcome.DEGRADED, f"Could not write {settings.config_filename}: {e}")
    else:
        verb = "Replaced" if outcome.config_overwritten else "Created"
        record("configure", StepOutcome.OK, f"{verb} {settings.config_filename}")
    outcome.state = MigrationState.CONFIG_WRITTEN

    # Manifest
    header(f"🔧 Updating {settings.manifest_filename} scripts...")
    try:
        update = update_manifest(root / settings.manifest_filename)
    except ManifestError as e:
        record("manifest", StepOutcome.DEGRADED, f"Manifest not migrated: {e}")
    else:
        outcome.manifest_update = update
        record("manifest", StepOutcome.OK, f"Updated {settings.manifest_filename} scripts")
        if update.removed_fields:
            note(f"Removed fields: {', '.join(update.removed_fields)}")
        for name, previous in update.overwritten_scripts.items():
            note(f"Replaced script '{name}' (was: {previous})")
    outcome.state = MigrationState.MANIFEST_UPDATED

    # Dependencies
    header("🧹 Removing ESLint/Prettier packages...")
    try:
        outcome.packages_removed = remove_legacy_packages(root, manager, runner, settings)
    except (CommandError, ManifestError) as e:
        record(
            "dependencies",
            StepOutcome.DEGRADED,
            f"Failed to remove old packages, remove them manually later: {e}",
        )
    else:
        if outcome.packages_removed:
            record(
                "dependencies",
                StepOutcome.OK,
                f"Removed {len(outcome.packages_removed)} package(s)",
            )
            for name in outcome.packages_removed:
                note(name)
        else:
            record("dependencies", StepOutcome.OK, "No old packages to remove")
    outcome.state = MigrationState.DEPENDENCIES_HANDLED

    # Cleanup
    if outcome.backup is not None and configs.has_standalone_files:
        header("🗑️  Removing old configuration files...")
        removal = remove_legacy_config_files(root, configs, outcome.backup)
        outcome.files_removed = removal.removed
        outcome.files_skipped = removal.skipped

        problems = len(removal.skipped) + len(removal.failed)
        if problems:
            record(
                "cleanup",
                StepOutcome.DEGRADED,
                f"Removed {len(removal.removed)} config file(s), {problems} left in place",
            )
            for name in removal.skipped:
                note(f"{name}: not backed up, kept")
            for name, error in removal.failed.items():
                note(f"{name}: {error}")
        else:
            record("cleanup", StepOutcome.OK, f"Removed {len(removal.removed)} config file(s)")
            for name in removal.removed:
                note(name)
    else:
        record("cleanup", StepOutcome.OK, "No config files to remove")
    outcome.state = MigrationState.FILES_REMOVED

    if outcome.degraded:
        header("⚠️  Migration finished with warnings")
    else:
        header("✅ Migration complete")
    outcome.state = MigrationState.REPORTED
    return outcome
