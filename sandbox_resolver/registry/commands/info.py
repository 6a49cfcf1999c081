"""Info command - show one component record from the registry."""

from __future__ import annotations

import asyncio
import json

import click
from rich.panel import Panel

from ...console import console
from ...lib.settings import ResolverSettings
from ...utils.error_format import escape_markup
from ...utils.error_format import format_error_message
from ...utils.references import scan_references
from ..client import DirectoryRegistryClient
from ..client import RegistryError
from ..client import create_registry_client


@click.command("info")
@click.argument("identifier")
@click.option("--registry", "registry_location", help="Component registry directory or URL")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info_command(identifier: str, registry_location: str | None, output_json: bool):
    """Show a component record from the registry.

    Example:

        sandbox-resolver info button --registry ./registry
    """
    registry_location = registry_location or ResolverSettings().get_registry()
    if not registry_location:
        console.print("[red]Error:[/red] No component registry configured")
        raise SystemExit(1)

    client = create_registry_client(registry_location)
    try:
        record = asyncio.run(client.fetch(identifier))
    except RegistryError as e:
        console.print(f"[red]Error:[/red] Failed to fetch component: {escape_markup(format_error_message(e))}")
        raise SystemExit(1) from e

    if record is None:
        console.print(f"[red]Component '{escape_markup(identifier)}' not found in registry[/red]")

        if isinstance(client, DirectoryRegistryClient):
            similar = [
                name
                for name in client.list_identifiers()
                if identifier.lower() in name.lower() or name.lower() in identifier.lower()
            ]
            if similar:
                console.print("\n[yellow]Did you mean:[/yellow]")
                for name in similar[:5]:
                    console.print(f"  - {escape_markup(name)}")
        raise SystemExit(1)

    if output_json:
        print(json.dumps(record.model_dump(by_alias=True), indent=2))
        return

    content_parts = []
    for label, manifest in (("Dependencies", record.dependencies), ("Dev Dependencies", record.dev_dependencies)):
        if manifest:
            content_parts.append(f"\n[bold]{label}:[/bold]")
            for package, version in manifest.items():
                content_parts.append(f"  - {escape_markup(package)}: {escape_markup(version)}")

    references = scan_references(record.content, exclude=record.name)
    if references:
        content_parts.append("\n[bold]References:[/bold]")
        content_parts.extend(f"  - {escape_markup(ref)}" for ref in references)

    if record.registry_dependencies:
        content_parts.append("\n[bold]Registry Dependencies:[/bold]")
        content_parts.extend(f"  - {escape_markup(dep)}" for dep in record.registry_dependencies)

    content_parts.append(f"\n[bold]Source blocks:[/bold] {len(record.files)}")

    console.print()
    console.print(Panel("\n".join(content_parts), title=escape_markup(record.name), border_style="cyan", padding=(1, 2)))
    console.print()
