# src/blockgrid/cli.py
"""
BlockGrid Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`. It
runs the layout and reconciliation algorithms on JSON files, which is handy
for inspecting stored layouts or replaying a client submission.

Input files hold either a JSON array of blocks or an object with a `blocks`
array (e.g. a task as returned by the API).

Usage
-----
    # Display order of a (possibly malformed) layout
    $ blockgrid sort layout.json

    # Repair a layout and write the result
    $ blockgrid normalize layout.json -o fixed.json

    # Drag block "b2" to the full-width slot of row 0
    $ blockgrid place layout.json --id b2 --row 0 --position full

    # What would saving `incoming.json` over `stored.json` do?
    $ blockgrid reconcile stored.json incoming.json --strict
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from blockgrid.core.contracts.block import Block, dump_blocks
from blockgrid.core.contracts.changeset import BlockChangeSet
from blockgrid.layout.edits import move_block
from blockgrid.layout.normalizer import normalize
from blockgrid.layout.reader import ingest_blocks, read_order, read_position, read_row
from blockgrid.layout.sorter import sort_for_display
from blockgrid.sync.reconciler import reconcile

load_dotenv()

app = typer.Typer(
    help="BlockGrid: lay out and reconcile task content blocks.",
    rich_markup_mode="markdown",
)
console = Console()

InputFile = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="JSON file with a block array (or an object with a `blocks` array).",
    ),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Write the resulting layout as JSON."),
]


# --------------------------------------------------------------------------- #
# Helpers: I/O & Rendering
# --------------------------------------------------------------------------- #


def _load_raw_blocks(path: Path) -> list[dict[str, Any]]:
    """Read raw block mappings from ``path``."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("blocks", [])
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{path} does not contain a list of block objects")
    return data


def _write_blocks(blocks: list[Block], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(dump_blocks(blocks), f, ensure_ascii=False, indent=2)
        f.write("\n")
    console.print(f"[dim]Wrote {len(blocks)} blocks to {path}[/dim]")


def _render_layout(title: str, blocks: Sequence[Any]) -> None:
    """Print blocks (typed or raw) as a table, reading layout tolerantly."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("id")
    table.add_column("type", style="cyan")
    table.add_column("row", justify="right")
    table.add_column("position", style="magenta")
    table.add_column("order", justify="right")

    for index, block in enumerate(blocks):
        raw_id = block.get("id") if isinstance(block, dict) else block.id
        raw_type = block.get("type") if isinstance(block, dict) else block.type
        order = read_order(block)
        table.add_row(
            str(index),
            str(raw_id) if raw_id else "-",
            str(raw_type or "?"),
            str(read_row(block)),
            read_position(block).value,
            "∞" if order == float("inf") else f"{order:g}",
        )
    console.print(table)


def _render_changes(changes: BlockChangeSet) -> None:
    table = Table(title="Change set")
    table.add_column("action", style="bold")
    table.add_column("count", justify="right")
    table.add_column("ids")
    rows = (
        ("add", "green", [str(b.id) for b in changes.to_add]),
        ("update", "yellow", [str(b.id) for b in changes.to_update]),
        ("remove", "red", [str(b.id) for b in changes.to_remove]),
        ("unchanged", "dim", changes.unchanged),
    )
    for action, style, ids in rows:
        table.add_row(f"[{style}]{action}[/{style}]", str(len(ids)), ", ".join(ids))
    console.print(table)


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]❌ {type(exc).__name__}:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=1)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def sort(file: InputFile) -> None:
    """Print blocks in display order (malformed layout fields fall back to defaults)."""
    try:
        raw = _load_raw_blocks(file)
    except ValueError as e:
        raise _fail(e) from e
    _render_layout(f"Display order: {file.name}", sort_for_display(raw))


@app.command("normalize")  # type: ignore[misc]
def normalize_command(file: InputFile, output: OutputOption = None) -> None:
    """Repair row/position conflicts, compact rows and renumber orders."""
    try:
        blocks = normalize(ingest_blocks(_load_raw_blocks(file)))
    except ValueError as e:
        raise _fail(e) from e
    _render_layout(f"Normalized: {file.name}", blocks)
    if output:
        _write_blocks(blocks, output)


@app.command()  # type: ignore[misc]
def place(
    file: InputFile,
    block_id: Annotated[str, typer.Option("--id", help="Id of the block to move.")],
    row: Annotated[int, typer.Option("--row", "-r", help="Target row.")],
    position: Annotated[
        str, typer.Option("--position", "-p", help="Target slot: left, right or full.")
    ],
    output: OutputOption = None,
) -> None:
    """Move one block to a target slot (swap/evict), then normalize."""
    try:
        blocks = move_block(ingest_blocks(_load_raw_blocks(file)), block_id, row, position)
    except ValueError as e:
        raise _fail(e) from e
    _render_layout(f"After moving {block_id} to ({row}, {position})", blocks)
    if output:
        _write_blocks(blocks, output)


@app.command("reconcile")  # type: ignore[misc]
def reconcile_command(
    existing: InputFile,
    incoming: InputFile,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Reject unknown non-empty ids instead of adding them."),
    ] = False,
) -> None:
    """Show the add/update/remove decisions for saving INCOMING over EXISTING."""
    try:
        stored = ingest_blocks(_load_raw_blocks(existing))
        submitted = normalize(ingest_blocks(_load_raw_blocks(incoming)))
        changes = reconcile(
            {b.id: b for b in stored if b.has_id and b.id is not None},
            submitted,
            allow_implicit_create=not strict,
        )
    except ValueError as e:
        raise _fail(e) from e

    console.print(
        Panel.fit(
            f"[bold cyan]BlockGrid reconcile[/bold cyan]\n{existing.name} ← {incoming.name}",
            border_style="cyan",
        )
    )
    _render_changes(changes)


if __name__ == "__main__":
    app()
