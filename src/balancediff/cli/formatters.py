"""Formatting helpers for CLI presentation."""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from balancediff.core.changes import ChangeRecord, ObjectChange, ValueChange, ValueChangeKind
from balancediff.core.schema import PropertySchema, PropertySpec
from balancediff.services.balance_service import FileFailure

KIND_STYLES = {
    ValueChangeKind.BUFF: "green",
    ValueChangeKind.NERF: "red",
    ValueChangeKind.ADDED: "cyan",
    ValueChangeKind.REMOVED: "magenta",
    ValueChangeKind.UNKNOWN: "yellow",
}


def format_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, list):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{key}: {format_value(item)}" for key, item in value.items()) + "}"
    return str(value)


def format_percent(percent: Optional[float]) -> str:
    if percent is None:
        return ""
    if math.isnan(percent):
        return "n/a"
    if math.isinf(percent):
        return "+inf%" if percent > 0 else "-inf%"
    return f"{percent * 100:+.1f}%"


def format_value_change(change: ValueChange) -> str:
    style = KIND_STYLES.get(change.change_type, "white")
    text = (
        f"{escape(change.property_name)}: {escape(format_value(change.prev_value))}"
        f" -> {escape(format_value(change.new_value))} [{style}]{change.change_type.value}[/{style}]"
    )
    if change.percent_change is not None:
        text += f" ({format_percent(change.percent_change)})"
    if change.array_change is not None:
        added = ", ".join(format_value(item) for item in change.array_change.added)
        removed = ", ".join(format_value(item) for item in change.array_change.removed)
        if added:
            text += f" [green]+{escape(added)}[/green]"
        if removed:
            text += f" [red]-{escape(removed)}[/red]"
    return text


def _add_records(branch: Tree, records: Iterable[ChangeRecord]) -> None:
    for record in records:
        if isinstance(record, ObjectChange):
            label = f"[bold]{escape(record.property_name)}[/bold] [dim]({record.change_type.value})[/dim]"
            if record.variant:
                label += " [dim italic]variant[/dim italic]"
            _add_records(branch.add(label), record.changes)
        else:
            branch.add(format_value_change(record))


def build_change_tree(changes: List[ObjectChange], title: str = "Balance changes") -> Tree:
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    if not changes:
        tree.add("[dim]No balance changes[/dim]")
    _add_records(tree, changes)
    return tree


def build_failures_table(failures: List[FileFailure]) -> Table:
    table = Table(title="Failures", show_header=True, header_style="bold red")
    table.add_column("File", style="cyan")
    table.add_column("Line", style="dim")
    table.add_column("Error")
    for failure in failures:
        line = "" if failure.line is None else str(failure.line)
        table.add_row(escape(failure.path), line, escape(failure.error))
    return table


def build_schema_table(schema: PropertySchema) -> Table:
    table = Table(title=f"Properties ({len(schema)})", show_header=True, header_style="bold blue")
    table.add_column("Property", style="cyan")
    table.add_column("Name")
    table.add_column("Shape", style="dim")
    table.add_column("Comparator", style="green")
    table.add_column("Balance", style="dim")
    for property_id, spec in schema.items():
        table.add_row(
            property_id,
            escape(spec.friendly_name or ""),
            spec.shape.value if spec.shape else "",
            spec.comparator_name or "",
            "✗" if spec.excluded else "✓",
        )
    return table


def build_property_table(spec: PropertySpec) -> Table:
    table = Table(title=spec.property_id, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Name", escape(spec.friendly_name or "-"))
    table.add_row("Shape", spec.shape.value if spec.shape else "-")
    table.add_row("Comparator", spec.comparator_name or "-")
    table.add_row("Balance change", "no" if spec.excluded else "yes")
    table.add_row("Lua table", "yes" if spec.is_lua_table else "no")
    return table


__all__ = [
    "format_value",
    "format_percent",
    "format_value_change",
    "build_change_tree",
    "build_failures_table",
    "build_schema_table",
    "build_property_table",
]
