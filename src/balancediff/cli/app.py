"""
Balance diff CLI: decode unit definitions, compare revisions and process commits.

- decode: print the value tree of one unit file
- diff: classify the balance changes between two revisions of a unit file
- batch: process every changed file of one commit listed in a manifest
- schema: inspect the property schema
"""

from __future__ import annotations

from typing import Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape

from balancediff.cli.formatters import (
    build_change_tree,
    build_failures_table,
    build_property_table,
    build_schema_table,
)
from balancediff.cli.load_helpers import load_or_exit, read_source_or_exit
from balancediff.cli.paths import names_path, schema_path, settings_path
from balancediff.core.values import to_python
from balancediff.decoding.decoder import TableLiteralDecoder
from balancediff.decoding.normalizer import normalize
from balancediff.io.loaders import load_manifest, load_property_schema, load_settings, load_unit_names
from balancediff.parsing.errors import DecodeError
from balancediff.services.balance_service import BalanceChangeService, patch_for
from balancediff.utils.logging import configure_logging

app = typer.Typer(help="Balance diff CLI: decode unit definitions and classify balance changes.")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose)


def _load_service(
    schema: Optional[str],
    names: Optional[str],
    settings: Optional[str],
    *,
    verbose_load: bool = False,
) -> BalanceChangeService:
    property_schema = load_or_exit(
        load_property_schema, schema_path(schema), console=console, verbose_errors=verbose_load
    )
    unit_names: Dict[str, str] = {}
    resolved_names = names_path(names)
    if resolved_names:
        unit_names = load_or_exit(load_unit_names, resolved_names, console=console, verbose_errors=verbose_load)
    resolved_settings = settings_path(settings)
    diff_settings = (
        load_or_exit(load_settings, resolved_settings, console=console, verbose_errors=verbose_load)
        if resolved_settings
        else load_settings(None)
    )
    return BalanceChangeService(property_schema, unit_names, diff_settings)


@app.command("decode")
def decode_command(
    file: str = typer.Argument(..., help="Unit definition file"),
    schema: Optional[str] = typer.Option(None, "--schema", help="Property schema YAML"),
    normalized: bool = typer.Option(True, "--normalize/--raw", help="Apply weapon re-keying"),
) -> None:
    """Decode one unit file and print its value tree as JSON."""
    property_schema = load_or_exit(load_property_schema, schema_path(schema), console=console)
    source = read_source_or_exit(file, console=console)

    try:
        result = TableLiteralDecoder(property_schema).decode_with_diagnostics(source, path=file)
    except DecodeError as exc:
        console.print(f"[red]Malformed source:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if result.bound_name:
        console.print(f"[bold]Bound name:[/bold] {escape(result.bound_name)}")
    for diagnostic in result.diagnostics:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(diagnostic))}")

    tree = normalize(result.value) if normalized else result.value
    console.print_json(data=to_python(tree))


@app.command("diff")
def diff_command(
    before: Optional[str] = typer.Option(None, "--before", help="Unit file before the change"),
    after: Optional[str] = typer.Option(None, "--after", help="Unit file after the change"),
    schema: Optional[str] = typer.Option(None, "--schema", help="Property schema YAML"),
    names: Optional[str] = typer.Option(None, "--names", help="Unit names (.lua language file or YAML)"),
    settings: Optional[str] = typer.Option(None, "--settings", help="Settings YAML"),
    as_json: bool = typer.Option(False, "--json", help="Print the change record as JSON"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Classify the balance changes between two revisions of a unit file."""
    if before is None and after is None:
        console.print("[red]Nothing to compare[/red]: pass --before and/or --after")
        raise typer.Exit(code=2)

    service = _load_service(schema, names, settings, verbose_load=verbose_load)
    previous = read_source_or_exit(before, console=console) if before else None
    current = read_source_or_exit(after, console=console) if after else None

    try:
        change = service.compare(previous, current, path=after or before)
    except DecodeError as exc:
        console.print(f"[red]Malformed source:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(data=change.model_dump(mode="json") if change else None)
        return
    console.print(build_change_tree([change] if change else []))


@app.command()
def batch(
    manifest: str = typer.Argument(..., help="Manifest YAML listing a commit and its changed files"),
    schema: Optional[str] = typer.Option(None, "--schema", help="Property schema YAML"),
    names: Optional[str] = typer.Option(None, "--names", help="Unit names (.lua language file or YAML)"),
    settings: Optional[str] = typer.Option(None, "--settings", help="Settings YAML"),
    as_json: bool = typer.Option(False, "--json", help="Print the patch and failures as JSON"),
    verbose_load: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Process every changed file of one commit. Per-file failures do not abort the batch."""
    service = _load_service(schema, names, settings, verbose_load=verbose_load)
    commit, files = load_or_exit(load_manifest, manifest, console=console, verbose_errors=verbose_load)

    result = service.process_files(files)
    patch = patch_for(commit, result.changes)

    if as_json:
        console.print_json(
            data={
                "patch": patch.model_dump(mode="json"),
                "failures": [failure.model_dump(mode="json") for failure in result.failures],
                "skipped": result.skipped,
            }
        )
        return

    console.print(f"[bold]Commit:[/bold] {escape(patch.sha)}")
    if patch.author:
        console.print(f"Author: {escape(patch.author.name)}")
    if patch.date:
        console.print(f"Date: {patch.date.isoformat()}")
    if patch.message:
        console.print(f"Message: {escape(patch.message.splitlines()[0])}")
    console.print(build_change_tree(patch.changes))
    if result.failures:
        console.print(build_failures_table(result.failures))
    console.print(
        f"{len(result.changes)} unit(s) changed, "
        f"{len(result.failures)} failure(s), {len(result.skipped)} skipped"
    )


@app.command("schema")
def schema_command(
    property_id: Optional[str] = typer.Argument(None, help="Property to show"),
    schema: Optional[str] = typer.Option(None, "--schema", help="Property schema YAML"),
) -> None:
    """List the property schema, or show one property."""
    property_schema = load_or_exit(load_property_schema, schema_path(schema), console=console)
    if property_id is None:
        console.print(build_schema_table(property_schema))
        return

    spec = property_schema.lookup(property_id)
    if spec is None:
        console.print(f"[red]Unknown property[/red]: {escape(property_id)}")
        raise typer.Exit(code=2)
    console.print(build_property_table(spec))


__all__ = ["app"]
