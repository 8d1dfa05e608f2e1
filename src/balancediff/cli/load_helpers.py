from __future__ import annotations

"""Shared helpers for loading reference data and sources with CLI-friendly errors."""

from pathlib import Path
from typing import Any, Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from balancediff.io.loaders import LoaderError

T = TypeVar("T")


def load_or_exit(
    loader_fn: Callable[..., T],
    *args: Any,
    console: Console,
    verbose_errors: bool = False,
    **kwargs: Any,
) -> T:
    if args:
        first = args[0]
        if isinstance(first, str) and not Path(first).exists():
            console.print(f"[red]Path not found:[/red] {escape(first)}")
            raise typer.Exit(code=1)
    try:
        return loader_fn(*args, **kwargs)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load data:[/red] {escape(err.message)}\n{escape(str(err.cause))}")
        else:
            console.print(f"[red]Failed to load data:[/red] {escape(str(err))}")
        raise typer.Exit(code=1)


def read_source_or_exit(path: str, *, console: Console) -> bytes:
    """Read a unit file as raw bytes."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        console.print(f"[red]Cannot read[/red] {escape(path)}: {escape(exc.strerror or str(exc))}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit", "read_source_or_exit"]
