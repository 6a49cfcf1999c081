"""Resolve command - assemble a preview sandbox for one component."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..lib.merge_utils import normalize_dependencies
from ..lib.resolution import PreviewRequest
from ..lib.resolution import assemble_preview
from ..lib.settings import ResolverSettings
from ..registry import create_registry_client
from ..utils.error_format import escape_markup


@click.command("resolve")
@click.argument("name")
@click.argument("code_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--registry", "registry_location", help="Component registry directory or URL")
@click.option("--entry-registry", "entry_registry_location", help="Registry holding the entry component")
@click.option(
    "--dependency",
    "-d",
    "dependencies",
    multiple=True,
    metavar="NAME[@VERSION]",
    help="Extra dependency (overrides discovered versions)",
)
@click.option("--with", "-w", "extra_components", multiple=True, help="Extra registry component to include")
@click.option("--json", "output_json", is_flag=True, help="Output sandbox setup as JSON")
def resolve_command(
    name: str,
    code_file: Path,
    registry_location: str | None,
    entry_registry_location: str | None,
    dependencies: tuple[str, ...],
    extra_components: tuple[str, ...],
    output_json: bool,
):
    """Assemble the sandbox file tree for component NAME.

    CODE_FILE holds the demo source rendered as the sandbox entry file.

    Example:

        sandbox-resolver resolve gantt demo.tsx --registry ./registry
    """
    settings = ResolverSettings()
    registry_location = registry_location or settings.get_registry()
    entry_registry_location = entry_registry_location or settings.get_entry_registry()

    if not registry_location:
        console.print("[red]Error:[/red] No component registry configured")
        console.print("\n[dim]Pass --registry or set 'registry' in .sandbox-resolver/settings.yaml[/dim]")
        raise SystemExit(1)

    request = PreviewRequest(
        name=name,
        code=code_file.read_text(encoding="utf-8"),
        dependencies=normalize_dependencies(list(dependencies)),
        registry_dependencies=list(extra_components),
    )
    entry_registry = create_registry_client(entry_registry_location) if entry_registry_location else None

    result = asyncio.run(
        assemble_preview(
            request,
            create_registry_client(registry_location),
            entry_registry=entry_registry,
            baseline=settings.get_baseline(),
            max_concurrency=settings.get_max_concurrency(),
        )
    )

    if output_json:
        print(json.dumps(result.to_sandbox_setup(), indent=2))
        return

    files_table = Table(title=f"Sandbox files for {escape_markup(name)}", show_header=True, header_style="bold cyan")
    files_table.add_column("Path", style="green")
    files_table.add_column("Lines", justify="right")
    for path in sorted(result.files):
        files_table.add_row(escape_markup(path), str(result.files[path].count("\n") + 1))
    console.print(files_table)

    deps_table = Table(title="Dependencies", show_header=True, header_style="bold cyan")
    deps_table.add_column("Package", style="green")
    deps_table.add_column("Version")
    deps_table.add_column("Kind", style="dim")
    for package, version in sorted(result.dependencies.items()):
        deps_table.add_row(escape_markup(package), escape_markup(version), "runtime")
    for package, version in sorted(result.dev_dependencies.items()):
        deps_table.add_row(escape_markup(package), escape_markup(version), "dev")
    console.print(deps_table)

    for warning in result.warnings:
        console.print(
            f"[yellow]Warning:[/yellow] skipped {escape_markup(warning.identifier)}: {escape_markup(warning.reason)}"
        )
