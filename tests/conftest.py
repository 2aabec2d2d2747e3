"""
pytest configuration and shared fixtures for biomigrate tests.

Fixtures defined here are automatically available to all tests.

Fixtures
--------
make_project : Callable
    Factory writing a package.json, config files and a lockfile into a
    temporary directory.

fake_runner : FakeRunner
    A ProcessRunner that records commands instead of running them.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest


class FakeRunner:
    """
    Records package manager commands instead of running them.

    Unless told to fail, it mimics what a package manager does to
    package.json: an install adds the package to devDependencies and a
    remove deletes the packages from both dependency sections.
    """

    def __init__(
        self,
        *,
        fail_install: bool = False,
        fail_remove: bool = False,
        spawn_error: bool = False,
        returncode: int = 1,
    ) -> None:
        self.fail_install = fail_install
        self.fail_remove = fail_remove
        self.spawn_error = spawn_error
        self.returncode = returncode
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [command for command, _ in self.calls]

    def run(self, command: Sequence[str], cwd: Path) -> int:
        command = tuple(command)
        self.calls.append((command, cwd))

        if self.spawn_error:
            raise FileNotFoundError(f"No such file or directory: '{command[0]}'")

        is_install = any(arg.startswith("@biomejs/biome") for arg in command)
        if is_install and self.fail_install:
            return self.returncode
        if not is_install and self.fail_remove:
            return self.returncode

        manifest_path = cwd / "package.json"
        if manifest_path.exists():
            try:
                manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            except ValueError:
                return 0
            if not isinstance(manifest, dict):
                return 0
            if is_install:
                spec = next(arg for arg in command if arg.startswith("@biomejs/biome"))
                version = spec.rsplit("@", 1)[1]
                manifest.setdefault("devDependencies", {})["@biomejs/biome"] = version
            else:
                for name in command[2:]:
                    for section in ("dependencies", "devDependencies"):
                        manifest.get(section, {}).pop(name, None)
            manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")

        return 0


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A runner that succeeds and simulates package.json changes."""
    return FakeRunner()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """
    Build a project directory for a test.

    Returns
    -------
    Callable[..., Path]
        ``make_project(manifest=..., files=..., lockfile=...)`` returning
        the project root.
    """

    def _make(
        manifest: dict[str, Any] | None = None,
        files: dict[str, str] | None = None,
        lockfile: str | None = None,
        name: str = "web-app",
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)

        if manifest is not None:
            (root / "package.json").write_text(
                json.dumps(manifest, indent=2) + "\n", encoding="utf-8"
            )
        for filename, content in (files or {}).items():
            (root / filename).write_text(content, encoding="utf-8")
        if lockfile:
            (root / lockfile).write_text("", encoding="utf-8")

        return root.resolve()

    return _make


def read_json(path: Path) -> dict[str, Any]:
    """Parse a JSON file written by a test or by biomigrate."""
    return json.loads(path.read_text(encoding="utf-8"))


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the test suite."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
