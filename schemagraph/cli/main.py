"""schemagraph Command Line Interface."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from schemagraph import __version__
from schemagraph.core.config import SchemaGraphConfig, load_config
from schemagraph.core.exceptions import ConfigurationError, DocumentLoadError
from schemagraph.documents import document_base_uri, load_schema_document
from schemagraph.graph import build_schema_graph, graph_stats, multi_parent_nodes
from schemagraph.resolve import deref, prepare_schema
from schemagraph.uri import resolve_uri

console = Console()


def _load(path: str) -> Any:
    try:
        return load_schema_document(path)
    except DocumentLoadError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        sys.exit(1)


def _config(ctx: click.Context, allow_remote: Optional[bool] = None) -> SchemaGraphConfig:
    config: SchemaGraphConfig = ctx.obj["config"]
    if allow_remote:
        config.resolution.allow_remote_resolution = True
    return config


@click.group()
@click.version_option(version=__version__, prog_name="schemagraph")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str]) -> None:
    """
    schemagraph CLI.

    Resolve URI references and build reference graphs of JSON Schema
    documents.
    """
    ctx.ensure_object(dict)
    try:
        settings = load_config(config)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    ctx.obj["config"] = settings

    logging.basicConfig(
        level=settings.log_level.value,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("init-config")
@click.argument("path", type=click.Path(), default="schemagraph.yaml")
def init_config(path: str) -> None:
    """Write a default configuration file."""
    SchemaGraphConfig().to_yaml(path)
    console.print(f"[green]Configuration written to {path}[/green]")


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--allow-remote", is_flag=True, help="Fetch remote $ref targets (trusted schemas only)")
@click.option("--base-uri", "-b", help="Base URI of the document (defaults to its file URI)")
@click.option("--limit", "-l", default=50, help="Maximum number of nodes to list")
@click.pass_context
def build(
    ctx: click.Context,
    path: str,
    allow_remote: bool,
    base_uri: Optional[str],
    limit: int,
) -> None:
    """Build the reference graph of a schema document."""
    config = _config(ctx, allow_remote)
    document = _load(path)

    graph = build_schema_graph(
        document,
        base_uri=base_uri if base_uri is not None else document_base_uri(path),
        config=config.resolution,
    )

    table = Table(title=f"Schema nodes ({len(graph)})")
    table.add_column("URI", style="dim")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Parents", justify="right")
    table.add_column("Children", justify="right")

    for uri, node in list(sorted(graph.nodes.items()))[:limit]:
        table.add_row(
            uri,
            node.title or "",
            ", ".join(node.type_names),
            str(len(node.parents)),
            str(len(node.children)),
        )

    console.print(table)
    if len(graph) > limit:
        console.print(f"  ... and {len(graph) - limit} more")

    if graph.root is None:
        console.print("[yellow]Document root is an unresolved reference[/yellow]")

    if graph.diagnostics:
        console.print()
        console.print("[yellow]Diagnostics:[/yellow]")
        for diagnostic in graph.diagnostics:
            console.print(f"  - {escape(str(diagnostic))}")


@cli.command()
@click.argument("reference")
@click.argument("base")
def resolve(reference: str, base: str) -> None:
    """Resolve a URI REFERENCE against a BASE URI."""
    console.print(resolve_uri(reference, base))


@cli.command("deref")
@click.argument("path", type=click.Path(exists=True))
@click.argument("ref")
@click.option("--allow-remote", is_flag=True, help="Fetch remote addresses (trusted schemas only)")
@click.pass_context
def deref_command(ctx: click.Context, path: str, ref: str, allow_remote: bool) -> None:
    """Dereference REF within the schema document at PATH."""
    config = _config(ctx, allow_remote)
    document = _load(path)
    id_dict = prepare_schema(document)

    value, error = asyncio.run(deref(config.resolution, id_dict, document, ref))
    if error is not None:
        console.print(f"[red]{escape(str(error))}[/red]")
        sys.exit(1)

    console.print_json(json.dumps(value))


@cli.command()
@click.argument("path", type=click.Path(exists=True))
@click.option("--allow-remote", is_flag=True, help="Fetch remote $ref targets (trusted schemas only)")
@click.pass_context
def stats(ctx: click.Context, path: str, allow_remote: bool) -> None:
    """Show statistics of a schema document's reference graph."""
    config = _config(ctx, allow_remote)
    document = _load(path)
    graph = build_schema_graph(
        document,
        base_uri=document_base_uri(path),
        config=config.resolution,
    )
    summary = graph_stats(graph)

    console.print(f"[bold]Schema graph of {Path(path).name}[/bold]")
    console.print()
    console.print("[cyan]Nodes:[/cyan]")
    console.print(f"  Total: {summary['nodes']}")
    console.print(f"  Edges: {summary['edges']}")
    console.print(f"  References: {summary['reference_nodes']}")
    console.print(f"  Shared (2+ parents): {summary['multi_parent_nodes']}")
    console.print(f"  Detached: {summary['detached_nodes']}")
    console.print(f"  Acyclic: {summary['is_acyclic']}")

    shared = multi_parent_nodes(graph)
    if shared:
        console.print()
        console.print("[cyan]Shared nodes:[/cyan]")
        for node in shared[:10]:
            console.print(f"  - {node.uri} ({len(node.parents)} parents)")
        if len(shared) > 10:
            console.print(f"  ... and {len(shared) - 10} more")

    if summary["diagnostics"]:
        console.print()
        console.print("[yellow]Diagnostics:[/yellow]")
        for kind, count in summary["diagnostics"].items():
            console.print(f"  {kind}: {count}")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
