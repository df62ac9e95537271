from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.blocks_repository import FileSystemBlocksRepository
from adapters.filesystem.layout_repository import FileSystemLayoutRepository
from adapters.layout.hierarchical import HierarchicalLayoutEngine
from app.config import AppSettings, LayoutSettings, load_settings
from domain.models import Block, BlockGraph, SelectionState
from domain.services.block_navigation import handle_block_navigation
from domain.services.build_block_graph import build_block_graph
from domain.services.categorize_blocks import categorize_blocks
from domain.services.graph_diagnostics import compute_graph_diagnostics
from domain.services.process_blocks import BlocksGraphProcessor, GraphView

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)."),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_blocks(input_path: Path) -> List[Block]:
    try:
        return FileSystemBlocksRepository().load(input_path)
    except (ValueError, FileNotFoundError) as exc:
        console.print(f"[red]Failed to load blocks:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _resolve_settings(
    config_path: Optional[Path],
    orientation: Optional[str],
    max_nodes_per_level: Optional[int],
    transitive_reduction: Optional[bool],
) -> AppSettings:
    try:
        settings = load_settings(config_path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1) from exc

    layout_overrides: dict[str, object] = {}
    if orientation is not None:
        layout_overrides["orientation"] = orientation
    if max_nodes_per_level is not None:
        layout_overrides["max_nodes_per_level"] = max_nodes_per_level
    if layout_overrides:
        settings.layout = LayoutSettings.model_validate(
            {**settings.layout.model_dump(), **layout_overrides}
        )
    if transitive_reduction is not None:
        settings.render = settings.render.model_copy(
            update={"transitive_reduction": transitive_reduction}
        )
    return settings


def _print_view(view: GraphView) -> None:
    table = Table(title="Blocks")
    table.add_column("id")
    table.add_column("title")
    table.add_column("level", justify="right")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("state")
    for item in view.plan.positioned:
        block_id = item.block.id
        state = "dimmed" if block_id in view.categorized.dimmed else "visible"
        table.add_row(
            block_id,
            item.block.title.en,
            str(view.plan.levels.get(block_id, 0)),
            f"{item.position.x:g}",
            f"{item.position.y:g}",
            state,
        )
    console.print(table)
    console.print(f"Edges drawn: {len(view.connections)}")


@app.command("layout")
def layout(
    input_path: Path = typer.Argument(..., help="JSON file with the block list."),
    output: Optional[Path] = typer.Option(None, help="Write the computed view as JSON."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    orientation: Optional[str] = typer.Option(None, help="ttb, btt, ltr or rtl."),
    max_nodes_per_level: Optional[int] = typer.Option(None, help="Wrap levels wider than this."),
    select: List[str] = typer.Option([], help="Navigation stack, outermost block first."),
    transitive_reduction: Optional[bool] = typer.Option(
        None, "--transitive-reduction/--no-transitive-reduction", help="Hide implied edges."
    ),
) -> None:
    settings = _resolve_settings(config, orientation, max_nodes_per_level, transitive_reduction)
    blocks = _load_blocks(input_path)
    processor = BlocksGraphProcessor(
        HierarchicalLayoutEngine(settings.layout.to_layout_config()),
        transitive_reduction=settings.render.transitive_reduction,
    )
    try:
        view = processor.render_view(blocks, SelectionState(tuple(select)))
    except ValueError as exc:
        console.print(f"[red]Layout failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    if output is None:
        _print_view(view)
        return
    FileSystemLayoutRepository().save(view.to_dict(), output)
    console.print(f"[green]Wrote[/] {output}")


@app.command("inspect")
def inspect(
    input_path: Path = typer.Argument(..., help="JSON file with the block list."),
    output: Optional[Path] = typer.Option(None, help="Write the diagnostics report as JSON."),
) -> None:
    blocks = _load_blocks(input_path)
    try:
        graph = build_block_graph(blocks)
    except ValueError as exc:
        console.print(f"[red]Invalid block graph:[/] {exc}")
        raise typer.Exit(code=1) from exc
    diagnostics = compute_graph_diagnostics(graph)

    summary = Table(title="Graph")
    summary.add_column("metric")
    summary.add_column("value", justify="right")
    summary.add_row("blocks", str(diagnostics.blocks))
    summary.add_row("prerequisite edges", str(diagnostics.prerequisite_edges))
    summary.add_row("parent edges", str(diagnostics.parent_edges))
    summary.add_row("roots", ", ".join(diagnostics.roots))
    summary.add_row("levels", str(diagnostics.max_level + 1 if diagnostics.blocks else 0))
    summary.add_row("acyclic", "yes" if diagnostics.is_acyclic else "no")
    console.print(summary)

    if diagnostics.cycles:
        for cycle in diagnostics.cycles:
            console.print(f"[yellow]Cycle:[/] {' -> '.join(cycle)}")
    elif diagnostics.topological_order is not None:
        console.print(f"Topological order: {', '.join(diagnostics.topological_order)}")
    for block_id, reference in diagnostics.dangling_references:
        console.print(f"[yellow]Unresolved reference:[/] {block_id} -> {reference}")

    if output is not None:
        FileSystemLayoutRepository().save(diagnostics.to_dict(), output)
        console.print(f"[green]Wrote[/] {output}")


@app.command("navigate")
def navigate(
    input_path: Path = typer.Argument(..., help="JSON file with the block list."),
    clicks: List[str] = typer.Argument(..., help="Block ids clicked, in order."),
) -> None:
    blocks = _load_blocks(input_path)
    try:
        graph = build_block_graph(blocks)
    except ValueError as exc:
        console.print(f"[red]Invalid block graph:[/] {exc}")
        raise typer.Exit(code=1) from exc

    state = SelectionState()
    _print_selection("start", blocks, graph, state)
    for block_id in clicks:
        result = handle_block_navigation(block_id, graph, state)
        state = result.state
        if not result.should_render:
            console.print(f"{block_id}: [dim]no navigation change[/]")
            continue
        _print_selection(block_id, blocks, graph, state)


def _print_selection(
    label: str, blocks: Sequence[Block], graph: BlockGraph, state: SelectionState
) -> None:
    categorized = categorize_blocks(blocks, graph, state)
    stack = " > ".join(state.navigation_stack) or "root"
    visible = ", ".join(sorted(categorized.visible))
    dimmed = ", ".join(sorted(categorized.dimmed))
    console.print(f"{label}: [bold]{stack}[/] visible=[green]{visible}[/] dimmed=[dim]{dimmed}[/]")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="JSON file with the block list.")) -> None:
    blocks = _load_blocks(input_path)
    try:
        build_block_graph(blocks)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"[green]Valid block list ({len(blocks)} blocks):[/] {input_path}")


if __name__ == "__main__":
    app()
