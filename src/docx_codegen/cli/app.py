"""
Main CLI application for docx-codegen.

Provides a Typer-based command-line interface for inspecting the part graph
of a Word package and generating the intermediate code model that rebuilds it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Set
from zipfile import BadZipFile

import typer
from docx.opc.exceptions import PackageNotFoundError
from docx.package import Package
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from ..config import (
    MISC_NODE_KINDS,
    CodegenConfig,
    get_config_manager,
    load_config,
    parse_alias_order,
    parse_misc_node_kinds,
)
from ..converters.compile_unit import generate_package_source, generate_part_source
from ..core.document_graph import DocumentGraph, OwnedPart, PartKey
from ..exceptions import DocxCodegenError

# Initialize Typer app
app = typer.Typer(
    name="docx-codegen",
    help="Generate code that rebuilds Word documents from their OpenXML parts",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()
err_console = Console(stderr=True)

SUPPORTED_SUFFIXES = ('.docx', '.docm', '.dotx', '.dotm')


def setup_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def open_package(file_path: Path) -> Package:
    """Open a Word package, exiting with an error message on failure."""
    if not file_path.exists():
        console.print(f"[red]Error: File not found: {file_path}[/red]")
        raise typer.Exit(1)

    if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        console.print(f"[red]Error: Only {', '.join(SUPPORTED_SUFFIXES)} files are supported[/red]")
        raise typer.Exit(1)

    try:
        return Package.open(str(file_path))
    except (PackageNotFoundError, BadZipFile, KeyError, OSError) as e:
        console.print(f"[red]Error opening package: {e}[/red]")
        raise typer.Exit(1)


def _add_part_branch(tree: Tree, graph: DocumentGraph, owned: OwnedPart, seen: Set[PartKey]) -> None:
    node = graph.node(owned.key)
    label = f"[cyan]\\[{owned.relationship_id}][/cyan] {node.partname} [green]({node.type_name})[/green]"

    if owned.key in seen:
        tree.add(f"{label} [dim]shared, see above[/dim]")
        return
    seen.add(owned.key)

    branch = tree.add(label)
    for hyperlink in node.hyperlinks:
        branch.add(f"[blue]\\[{hyperlink.relationship_id}][/blue] hyperlink → {hyperlink.target}")
    for external in node.external_relationships:
        branch.add(f"[blue]\\[{external.relationship_id}][/blue] external → {external.target}")
    for child in node.children:
        _add_part_branch(branch, graph, child, seen)


@app.command()
def parts(
    file_path: Path = typer.Argument(..., help="Path to the Word document to inspect"),
) -> None:
    """
    Show the part graph of a Word document.

    Parts reached through more than one relationship are listed once and then
    marked as shared.
    """
    package = open_package(file_path)
    graph = DocumentGraph.from_package(package)

    tree = Tree(f"[bold]{file_path.name}[/bold]")
    seen: Set[PartKey] = set()
    for owned in graph.package_children():
        _add_part_branch(tree, graph, owned, seen)

    console.print(tree)
    console.print(f"\n[dim]{len(graph)} parts[/dim]")


@app.command()
def generate(
    file_path: Path = typer.Argument(..., help="Path to the Word document"),
    part_name: Optional[str] = typer.Option(None, "--part", "-p", help="Generate a single part, e.g. /word/document.xml"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON to this file"),
    ignore_unknown: bool = typer.Option(False, "--ignore-unknown", help="Skip elements with no registered schema"),
    ignore_misc: Optional[List[str]] = typer.Option(None, "--ignore-misc", help=f"Skip node kinds: {', '.join(MISC_NODE_KINDS)}"),
    alias_order: Optional[str] = typer.Option(None, "--alias-order", help="none, alias_first or namespace_first"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """
    Generate the intermediate code model for a package or one of its parts.

    The compile unit is written as JSON.  Values that could not be encoded are
    kept as comments in the generated code and counted in the summary.
    """
    try:
        config = load_config()
        settings = config.build_settings()
        if ignore_unknown:
            settings.ignore_unknown_elements = True
        if ignore_misc:
            settings.ignore_misc_node_types = parse_misc_node_kinds(ignore_misc)
        if alias_order:
            settings.namespace_alias_options.order = parse_alias_order(alias_order)
    except DocxCodegenError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else config.log_level)

    package = open_package(file_path)

    try:
        if part_name:
            wanted = PartKey.from_partname(part_name)
            part = next((p for p in package.iter_parts() if PartKey.for_part(p) == wanted), None)
            if part is None:
                console.print(f"[red]Error: Part not found: {part_name}[/red]")
                raise typer.Exit(1)
            unit = generate_part_source(part, settings)
        else:
            unit = generate_package_source(package, settings)
    except DocxCodegenError as e:
        console.print(f"[red]Error generating code: {e}[/red]")
        raise typer.Exit(1)

    json_text = unit.model_dump_json(indent=config.indent_json)
    if output_path:
        output_path.write_text(json_text, encoding="utf-8")
        console.print(f"[green]Wrote {output_path}[/green]")
    else:
        console.print(Syntax(json_text, "json", word_wrap=True))

    anomalies = unit.find_comments()
    summary = Table(title="Generation Summary", show_header=False)
    summary.add_column("Property", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Class", unit.types[0].name)
    summary.add_row("Methods", str(len(unit.types[0].members)))
    summary.add_row("Imports", str(len(unit.imports)))
    summary.add_row("Anomalies", str(len(anomalies)))
    err_console.print(summary)

    if anomalies and verbose:
        err_console.print("\n[yellow]Recovered values:[/yellow]")
        for anomaly in anomalies:
            err_console.print(f"  • {anomaly.text}")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
    set_alias_order: Optional[str] = typer.Option(None, "--set-alias-order", help="Set the namespace alias order"),
) -> None:
    """
    Manage docx-codegen configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        path = config_manager.create_default_config()
        console.print(f"[green]Created default configuration at {path}[/green]")
        return

    if show:
        try:
            config_info = config_manager.get_config_info()
        except DocxCodegenError as e:
            console.print(f"[red]Configuration error: {e}[/red]")
            raise typer.Exit(1)

        config_display = f"""[bold]docx-codegen Configuration[/bold]

[bold cyan]Generation:[/bold cyan]
• Alias Order: {config_info['alias_order']}
• Ignore Unknown Elements: {config_info['ignore_unknown_elements']}
• Ignore Node Kinds: {', '.join(config_info['ignore_misc_node_types']) or 'none'}
• Parse XML Parts: {config_info['parse_xml_parts']}
• Namespace: {config_info['namespace_name']}
• Handlers: {', '.join(config_info['handlers']) or 'none'}

[bold magenta]Files:[/bold magenta]
• Config File: {config_info['config_file']}
• Exists: {'Yes' if config_info['config_exists'] else 'No'}
• Log Level: {config_info['log_level']}"""

        console.print(Panel(config_display, border_style="green"))
        return

    if set_alias_order:
        try:
            current_config: CodegenConfig = load_config()
            current_config.settings.namespace_alias_options.order = parse_alias_order(set_alias_order)
        except DocxCodegenError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

        config_manager.save_config(current_config)
        console.print(f"[green]Set alias order to {current_config.settings.namespace_alias_options.order.value}[/green]")
        return

    # Default: show basic info
    console.print("Use [cyan]docx-codegen config --show[/cyan] to see full configuration")
    console.print("Use [cyan]docx-codegen config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
