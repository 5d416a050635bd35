"""pkgworld CLI.

Usage:
    pkgworld add 'stm-io-hooks -any --flags="-debug"'
    pkgworld remove stm-io-hooks
    pkgworld list --json
    pkgworld expand world text
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from typing_extensions import Annotated

from pkgworld.runtime import ConfigError, resolve_world_file
from pkgworld.world import (
    CorruptStoreError,
    RecordParseError,
    RequestRecord,
    WorldTargetError,
    delete,
    expand_targets,
    format_constraint,
    format_flags,
    format_line,
    get_contents,
    insert,
    is_world_target,
    parse_line,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pkgworld",
    help="Manage the world file of explicitly requested packages",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def _world_file(ctx: typer.Context) -> Path:
    return ctx.obj["world_file"]


def _parse_targets(targets: list[str]) -> list[RequestRecord]:
    """Parse target strings, exiting with code 1 on the first bad one."""
    records: list[RequestRecord] = []
    for target in targets:
        try:
            records.append(parse_line(target))
        except RecordParseError as e:
            console.print(f"[red]Error:[/red] Invalid target {target!r}: {e}")
            raise typer.Exit(1)
    return records


def _report_update(result: bool | None) -> None:
    if result is True:
        console.print("[green]World file updated[/green]")
    elif result is False:
        console.print("World file already up to date")
    else:
        console.print("[yellow]World file was not updated[/yellow]")


@app.callback()
def main(
    ctx: typer.Context,
    world_file: Annotated[
        Optional[Path],
        typer.Option("--world-file", "-w", help="World file to operate on"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show informational messages")
    ] = False,
) -> None:
    """Manage the world file of explicitly requested packages."""
    _configure_logging(verbose)
    try:
        path = resolve_world_file(world_file)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    ctx.obj = {"world_file": path}


@app.command()
def add(
    ctx: typer.Context,
    targets: Annotated[List[str], typer.Argument(help="Records such as 'foo >=1.0 --flags=\"-debug\"'")],
) -> None:
    """Add packages to the world file (replacing same-named entries)."""
    records = []
    for record in _parse_targets(targets):
        if is_world_target(record):
            console.print("[dim]Skipping the 'world' target[/dim]")
            continue
        records.append(record)

    try:
        result = insert(_world_file(ctx), records)
    except CorruptStoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if records:
        _report_update(result)


@app.command()
def remove(
    ctx: typer.Context,
    targets: Annotated[List[str], typer.Argument(help="Package names to remove")],
) -> None:
    """Remove packages from the world file."""
    records = _parse_targets(targets)
    try:
        result = delete(_world_file(ctx), records)
    except CorruptStoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _report_update(result)


@app.command("list")
def list_records(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output JSON")] = False,
) -> None:
    """Show the packages stored in the world file."""
    try:
        records = get_contents(_world_file(ctx))
    except (CorruptStoreError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([
            {
                "name": record.name,
                "constraint": format_constraint(record.constraint),
                "flags": [str(flag) for flag in record.flags],
            }
            for record in records
        ]))
        return

    if not records:
        console.print("[dim]World file is empty[/dim]")
        return

    table = Table(title=str(_world_file(ctx)))
    table.add_column("Package", style="bold")
    table.add_column("Constraint", style="cyan")
    table.add_column("Flags", style="magenta")
    for record in records:
        table.add_row(record.name, format_constraint(record.constraint), format_flags(record.flags))
    console.print(table)


@app.command()
def expand(
    ctx: typer.Context,
    targets: Annotated[List[str], typer.Argument(help="Targets, 'world' included")],
) -> None:
    """Print the targets with 'world' replaced by the world file contents."""
    records = _parse_targets(targets)
    try:
        expanded = expand_targets(records, _world_file(ctx))
    except (WorldTargetError, CorruptStoreError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    for record in expanded:
        print(format_line(record))
