"""
biomigrate.cli - Command Line Interface
=======================================

Typer application exposing biomigrate's two tools.

Architecture
------------
    app (main entry point)
    ├── migrate         - Replace ESLint + Prettier with Biome
    └── validate-skill  - Validate a SKILL.md file

``migrate`` needs no flags: the project root is found by walking up from
the given directory (the current one by default) to the nearest
package.json. ``--dry-run`` prints the plan and changes nothing.

An existing biome.json is always replaced. Only an interactive terminal is
asked first (``--yes`` skips the question); scripted runs never prompt.

Usage Examples
--------------
    $ biomigrate migrate
    $ biomigrate migrate ./packages/web --dry-run
    $ biomigrate validate-skill skills/my-skill/SKILL.md

Exit Status
-----------
0 when the migration finished, even with warnings. 1 when installing
Biome failed, when a skill fails validation, or on an unexpected error.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from biomigrate import __version__
from biomigrate.migrator import (
    MigrationOutcome,
    MigrationPlan,
    StepOutcome,
    migrate_project,
    plan_migration,
)
from biomigrate.models import MigrationSettings
from biomigrate.validator import validate_skill


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="biomigrate",
    help="Migrate JavaScript projects from ESLint + Prettier to Biome.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Console for rich output
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]biomigrate[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]ESLint + Prettier → Biome migration[/]",
            border_style="green",
        ))
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]biomigrate[/] - Replace ESLint and Prettier with [cyan]Biome[/].

    [bold]Quick Start:[/]

        biomigrate migrate
    """


# =============================================================================
# Rendering
# =============================================================================

def _is_interactive() -> bool:
    """True when a person can answer a prompt on stdin."""
    return sys.stdin.isatty()


def _render_plan(plan: MigrationPlan, settings: MigrationSettings) -> None:
    table = Table(title="Migration Plan", show_header=True)
    table.add_column("Step", style="cyan", width=14)
    table.add_column("Action")

    if plan.configs.is_empty:
        table.add_row("detect", "[dim]No ESLint or Prettier configuration found[/]")
    else:
        for entry in plan.configs.entries:
            table.add_row("detect", f"{entry.tool.display_name}: {escape(entry.label)}")

    for name in plan.configs.standalone_files:
        table.add_row("backup", f"{name} → {settings.backup_dir_name}/")

    table.add_row("install", " ".join(plan.install_command))

    verb = "Replace" if plan.config_exists else "Create"
    table.add_row("configure", f"{verb} {settings.config_filename}")

    if plan.manifest_error:
        table.add_row("manifest", f"[red]{escape(plan.manifest_error)}[/]")
    else:
        for name in plan.fields_to_remove:
            table.add_row("manifest", f"Remove field '{name}'")
        for name, previous in plan.scripts_to_overwrite.items():
            table.add_row("manifest", f"[yellow]Replace script '{name}'[/] (was: {escape(previous)})")
        table.add_row("manifest", "Set lint, format, format:check, check, check:fix scripts")

    if plan.packages_to_remove:
        table.add_row("dependencies", ", ".join(plan.packages_to_remove))
    else:
        table.add_row("dependencies", "[dim]No old packages to remove[/]")

    for name in plan.configs.standalone_files:
        table.add_row("cleanup", f"Delete {name}")

    console.print(f"[bold]Project:[/] {escape(str(plan.root))}")
    console.print(f"[bold]Package manager:[/] {plan.package_manager.value}")
    console.print()
    console.print(table)


def _render_outcome(outcome: MigrationOutcome, settings: MigrationSettings) -> None:
    table = Table(title="Migration Summary", show_header=True)
    table.add_column("Step", style="cyan", width=14)
    table.add_column("Result", width=10)
    table.add_column("Detail")

    styles = {
        StepOutcome.OK: "[green]ok[/]",
        StepOutcome.DEGRADED: "[yellow]degraded[/]",
        StepOutcome.FATAL: "[red]fatal[/]",
    }
    for step in outcome.steps:
        table.add_row(step.name, styles[step.outcome], escape(step.detail))

    console.print()
    console.print(table)
    console.print()

    if outcome.config_overwritten:
        console.print(
            f"[yellow]⚠[/] An existing {settings.config_filename} was replaced "
            "with the default configuration."
        )
    if outcome.manifest_update and outcome.manifest_update.overwritten_scripts:
        names = ", ".join(outcome.manifest_update.overwritten_scripts)
        console.print(
            f"[yellow]⚠[/] Replaced existing scripts: {names}. "
            f"{settings.manifest_filename} itself is not backed up."
        )
    if not outcome.manifest_migrated:
        console.print(
            f"[yellow]⚠[/] {settings.manifest_filename} was not migrated; "
            "update its scripts by hand."
        )

    manager = outcome.package_manager.value if outcome.package_manager else "npm"
    next_steps = (
        f"Next steps:\n"
        f"1. Review {settings.config_filename} and adjust rules as needed\n"
        f"2. Run '{manager} run check'\n"
        f"3. Run '{manager} run format'\n"
        f"4. Update CI scripts and editor integrations to use Biome"
    )
    if outcome.backup and outcome.backup.backed_up:
        next_steps += (
            f"\n\nBackup: {settings.backup_dir_name}/ "
            "(safe to delete after verification)"
        )

    if outcome.degraded:
        console.print(Panel(
            "[bold yellow]Migration completed with warnings[/]\n\n" + next_steps,
            title="[bold]Partial Success[/]",
            border_style="yellow",
        ))
    else:
        console.print(Panel(
            "[bold green]Migration complete![/]\n\n" + next_steps,
            title="[bold]Success[/]",
            border_style="green",
        ))


# =============================================================================
# Migrate Command
# =============================================================================

@app.command()
def migrate(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory inside the project to migrate",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path("."),
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be done without making changes",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes", "-y",
            help="Replace an existing biome.json without asking (non-interactive runs never ask)",
        ),
    ] = False,
) -> None:
    """
    Migrate a project from ESLint + Prettier to Biome.

    Backs up ESLint/Prettier config, installs [cyan]@biomejs/biome[/],
    writes biome.json, points the package.json scripts at Biome and
    removes the old packages and config files.

    [bold]Examples:[/]

        biomigrate migrate
        biomigrate migrate ./packages/web --dry-run
    """
    settings = MigrationSettings()

    console.print(Panel(
        "[bold]Biome Migration[/]\nESLint + Prettier → Biome",
        border_style="cyan",
    ))

    plan = plan_migration(path, settings)

    if dry_run:
        console.print("[yellow]DRY RUN - No changes will be made[/]")
        console.print()
        _render_plan(plan, settings)
        console.print()
        console.print("[dim]Run without --dry-run to apply these changes[/]")
        return

    if plan.config_exists and not yes and _is_interactive():
        confirmed = questionary.confirm(
            f"{settings.config_filename} already exists and will be replaced "
            "with the default configuration. Continue?",
            default=True,
        ).ask()
        if not confirmed:
            raise typer.Abort()

    try:
        outcome = migrate_project(path, settings=settings)
    except Exception as e:
        rprint(f"[red]Migration failed:[/] {escape(str(e))}")
        raise typer.Exit(1)

    if not outcome.success:
        fatal = outcome.fatal_step
        console.print()
        console.print(Panel(
            f"[bold red]{escape(fatal.detail) if fatal else 'Migration aborted'}[/]\n\n"
            "No scripts or config files were changed.",
            title="[bold]Migration Failed[/]",
            border_style="red",
        ))
        raise typer.Exit(outcome.exit_code)

    _render_outcome(outcome, settings)


# =============================================================================
# Validate Skill Command
# =============================================================================

@app.command("validate-skill")
def validate_skill_command(
    path: Annotated[
        Path,
        typer.Argument(help="Path to the SKILL.md file"),
    ] = Path("SKILL.md"),
) -> None:
    """
    Validate a SKILL.md file.

    Checks the YAML frontmatter (required [cyan]name[/] and
    [cyan]description[/], naming rules, optional metadata) and the
    recommended sections.

    [bold]Example:[/]

        biomigrate validate-skill skills/my-skill/SKILL.md
    """
    console.print()
    console.print("[bold cyan]=== SKILL.md Validation ===[/]")

    result = validate_skill(path)

    if result.info:
        console.print()
        console.print("[blue]ℹ Info:[/]")
        for message in result.info:
            console.print(f"  [blue]{escape(message)}[/]")

    if result.warnings:
        console.print()
        console.print("[yellow]⚠ Warnings:[/]")
        for message in result.warnings:
            console.print(f"  [yellow]{escape(message)}[/]")

    if result.errors:
        console.print()
        console.print("[red]✗ Errors:[/]")
        for message in result.errors:
            console.print(f"  [red]{escape(message)}[/]")
        console.print()
        console.print(f"[red]❌ Validation FAILED ({len(result.errors)} error(s))[/]")
        raise typer.Exit(1)

    console.print()
    if result.warnings:
        console.print(
            f"[yellow]⚠️  Validation passed with {len(result.warnings)} warning(s)[/]"
        )
    else:
        console.print("[green]✓ Validation PASSED[/]")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
