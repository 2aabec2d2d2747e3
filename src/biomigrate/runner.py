"""
biomigrate.runner - Package Manager Invocation
==============================================

The two steps of a migration that shell out:

- ``install_biome``: add Biome as an exact-pinned dev dependency
- ``remove_legacy_packages``: uninstall ESLint/Prettier packages that the
  manifest still declares

Commands are run through a ``ProcessRunner`` so tests can substitute a fake
and never start a real package manager. ``SubprocessRunner`` is the real
one: it blocks until the command exits, with the child's output going
straight to the terminal. There is no timeout; a hanging package manager
hangs the migration with it.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from biomigrate.manifest import declared_legacy_packages, read_manifest
from biomigrate.models import MigrationSettings, PackageManager


class CommandError(RuntimeError):
    """An external command could not be started or exited non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        cwd: Path,
        returncode: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.cwd = cwd
        self.returncode = returncode
        self.reason = reason

        if reason is not None:
            detail = reason
        else:
            detail = f"exited with status {returncode}"
        super().__init__(f"Command '{' '.join(self.command)}' {detail}")


class ProcessRunner(Protocol):
    """Runs a command to completion and returns its exit status."""

    def run(self, command: Sequence[str], cwd: Path) -> int: ...


class SubprocessRunner:
    """``ProcessRunner`` backed by ``subprocess.run`` with inherited streams."""

    def run(self, command: Sequence[str], cwd: Path) -> int:
        """
        Run ``command`` in ``cwd``.

        The executable is resolved through ``shutil.which`` so wrappers
        like ``npm.cmd`` on Windows are found without a shell.

        Raises
        ------
        OSError
            If the executable cannot be spawned.
        """
        argv = list(command)
        argv[0] = shutil.which(argv[0]) or argv[0]
        completed = subprocess.run(argv, cwd=cwd, check=False)
        return completed.returncode


def run_command(runner: ProcessRunner, command: Sequence[str], cwd: Path) -> None:
    """
    Run ``command`` and turn any failure into ``CommandError``.

    Raises
    ------
    CommandError
        On spawn failure or a non-zero exit status.
    """
    try:
        returncode = runner.run(command, cwd)
    except OSError as e:
        raise CommandError(command, cwd, reason=f"could not be started: {e}") from e

    if returncode != 0:
        raise CommandError(command, cwd, returncode=returncode)


def install_biome(
    root: Path,
    manager: PackageManager,
    runner: ProcessRunner,
    settings: MigrationSettings | None = None,
) -> tuple[str, ...]:
    """
    Install Biome as an exact-pinned dev dependency.

    Parameters
    ----------
    root : Path
        Project root, used as the working directory.

    manager : PackageManager
        Package manager to drive.

    runner : ProcessRunner
        Executes the command.

    settings : MigrationSettings | None
        Supplies the Biome package and version.

    Returns
    -------
    tuple[str, ...]
        The command that was run.

    Raises
    ------
    CommandError
        If the install fails. Callers treat this as fatal.
    """
    settings = settings or MigrationSettings()
    command = manager.install_args(settings.biome_spec)
    run_command(runner, command, root)
    return command


def remove_legacy_packages(
    root: Path,
    manager: PackageManager,
    runner: ProcessRunner,
    settings: MigrationSettings | None = None,
) -> list[str]:
    """
    Uninstall legacy packages still declared in the manifest.

    The manifest is re-read here because the install step may have
    rewritten it.

    Returns
    -------
    list[str]
        Packages that were removed; empty when none were declared and no
        command was run.

    Raises
    ------
    ManifestError
        If the manifest cannot be read.
    CommandError
        If the uninstall command fails.
    """
    settings = settings or MigrationSettings()
    manifest = read_manifest(root / settings.manifest_filename)
    packages = declared_legacy_packages(manifest)

    if not packages:
        return []

    run_command(runner, manager.remove_args(packages), root)
    return packages
