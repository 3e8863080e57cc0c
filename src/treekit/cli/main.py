"""CLI entry point for treekit.

Invoked as::

    treekit [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m treekit.cli.main

Tree files hold a version 1 envelope, as JSON or, for ``.yaml``/``.yml``
paths, as YAML.  Editing commands load the file, apply one operation and
write the file back in place.

Commands
--------
new         Write a fresh tree holding only a root node
show        Print a tree as an indented outline
validate    Check a tree file against every structural invariant
insert      Add a child node
rename      Change a node's name
delete      Delete a node and its subtree
move        Move a node under a new parent
reorder     Move a node to a new position among its siblings
version     Show version information
"""
from __future__ import annotations

import logging
import sys
import uuid
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

import treekit
from treekit import (
    ConfigError,
    Node,
    TreeConfig,
    TreeDeserializationError,
    TreeSerializer,
    TreeState,
)

console = Console()
err_console = Console(stderr=True)

_serializer = TreeSerializer()


def _is_yaml(path: str) -> bool:
    return Path(path).suffix.lower() in (".yaml", ".yml")


def _load_or_exit(path: str) -> TreeState:
    """Read and validate a tree file, exiting on error."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    try:
        return _serializer.from_yaml(text) if _is_yaml(path) else _serializer.from_json(text)
    except TreeDeserializationError as exc:
        err_console.print(f"[red]Invalid tree[/red] in {path}: {exc.reason}")
        sys.exit(1)


def _write(path: str, state: TreeState) -> None:
    text = _serializer.to_yaml(state) if _is_yaml(path) else _serializer.to_json(state) + "\n"
    Path(path).write_text(text, encoding="utf-8")


def _apply_or_exit(path: str, result: treekit.OperationResult[TreeState]) -> None:
    """Write a successful result back to ``path`` or report the failure."""
    if not result.success:
        err_console.print(f"[red]{result.error.kind.label}[/red]: {result.error}")
        sys.exit(1)
    _write(path, result.data)


def _config(ctx: click.Context) -> TreeConfig:
    return ctx.obj["config"] if ctx.obj else TreeConfig()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="treekit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="YAML file with order_gap / min_order_gap / history_limit",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log engine decisions")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Ordered tree engine: create, inspect and edit tree files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = treekit.load_config(config_path) if config_path else TreeConfig()
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    table = Table(show_header=False, box=None)
    table.add_row("[bold]treekit[/bold]", f"v{treekit.__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# new / show / validate
# ---------------------------------------------------------------------------


@cli.command(name="new")
@click.argument("file", type=click.Path(exists=False))
@click.option("--name", default="Root", show_default=True, help="Name of the root node")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing file")
def new_command(file: str, name: str, force: bool) -> None:
    """Write a fresh tree holding only a root node to FILE."""
    if Path(file).exists() and not force:
        err_console.print(f"[red]Error:[/red] {file} already exists (use --force to overwrite)")
        sys.exit(1)
    state = treekit.create_tree_state(name=name)
    _write(file, state)
    console.print(f"[green]Created[/green] {file} [dim](root {state.root_id})[/dim]")


@cli.command(name="show")
@click.argument("file", type=click.Path(exists=False))
@click.option("--keys", is_flag=True, default=False, help="Show order keys")
def show_command(file: str, keys: bool) -> None:
    """Print the tree in FILE as an indented outline."""
    state = _load_or_exit(file)
    branches: dict[str, Tree] = {}
    outline: Tree | None = None
    for _depth, node in treekit.iter_depth_first(state):
        label = f"[bold]{escape(node.name)}[/bold] [dim]{escape(node.id)}[/dim]"
        if keys:
            label += f" [cyan]#{node.order_key}[/cyan]"
        if node.parent_id is None or node.parent_id not in branches:
            outline = Tree(label)
            branches[node.id] = outline
        else:
            branches[node.id] = branches[node.parent_id].add(label)
    if outline is not None:
        console.print(outline)


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
def validate_command(file: str) -> None:
    """Check the tree in FILE against every structural invariant."""
    state = _load_or_exit(file)
    audit = treekit.check_tree(state)
    if not audit.success:
        err_console.print(f"[red]{audit.error.kind.label}[/red]: {audit.error}")
        sys.exit(1)
    console.print(f"[green]OK[/green] {len(state)} node(s) in {file}")


# ---------------------------------------------------------------------------
# editing commands
# ---------------------------------------------------------------------------


@cli.command(name="insert")
@click.argument("file", type=click.Path(exists=False))
@click.argument("parent_id")
@click.argument("name")
@click.option("--id", "node_id", default=None, help="Id of the new node (defaults to a UUID)")
@click.option("--key", "order_key", default="", help="Requested order key (blank appends)")
@click.pass_context
def insert_command(
    ctx: click.Context, file: str, parent_id: str, name: str, node_id: str | None, order_key: str
) -> None:
    """Insert a node called NAME under PARENT_ID."""
    state = _load_or_exit(file)
    node = Node(id=node_id or str(uuid.uuid4()), name=name, parent_id=parent_id, order_key=order_key)
    _apply_or_exit(file, treekit.insert_node(state, parent_id, node, _config(ctx)))
    console.print(f"[green]Inserted[/green] {node.id}")


@cli.command(name="rename")
@click.argument("file", type=click.Path(exists=False))
@click.argument("node_id")
@click.argument("name")
def rename_command(file: str, node_id: str, name: str) -> None:
    """Rename NODE_ID to NAME."""
    state = _load_or_exit(file)
    current = state.nodes_by_id.get(node_id)
    if current is None:
        err_console.print(f"[red]NodeNotFound[/red]: Node {node_id!r} not found")
        sys.exit(1)
    _apply_or_exit(file, treekit.update_node(state, node_id, current.with_changes(name=name)))
    console.print(f"[green]Renamed[/green] {node_id}")


@cli.command(name="delete")
@click.argument("file", type=click.Path(exists=False))
@click.argument("node_id")
def delete_command(file: str, node_id: str) -> None:
    """Delete NODE_ID and its whole subtree."""
    state = _load_or_exit(file)
    _apply_or_exit(file, treekit.delete_node(state, node_id))
    console.print(f"[green]Deleted[/green] {node_id}")


@cli.command(name="move")
@click.argument("file", type=click.Path(exists=False))
@click.argument("node_id")
@click.argument("parent_id")
@click.pass_context
def move_command(ctx: click.Context, file: str, node_id: str, parent_id: str) -> None:
    """Move NODE_ID to the end of PARENT_ID's children."""
    state = _load_or_exit(file)
    _apply_or_exit(file, treekit.move_node(state, node_id, parent_id, _config(ctx)))
    console.print(f"[green]Moved[/green] {node_id} → {parent_id}")


@cli.command(name="reorder")
@click.argument("file", type=click.Path(exists=False))
@click.argument("node_id")
@click.argument("index", type=int)
@click.pass_context
def reorder_command(ctx: click.Context, file: str, node_id: str, index: int) -> None:
    """Move NODE_ID to position INDEX among its siblings."""
    state = _load_or_exit(file)
    _apply_or_exit(file, treekit.reorder_sibling(state, node_id, index, _config(ctx)))
    console.print(f"[green]Reordered[/green] {node_id}")


if __name__ == "__main__":
    cli()
