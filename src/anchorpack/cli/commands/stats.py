"""
Stats Command - Summarize a graph snapshot.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ...core.exceptions import AnchorpackError
from ...core.graph import DependencyGraph
from ..utils import echo_error, load_graph_source, load_settings, render_json

console = Console()


class StatsResponse(BaseModel):
    total_classes: int
    total_dependencies: int
    total_locations: int
    unlocated_classes: int = 0
    locations_by_scheme: Dict[str, int] = Field(default_factory=dict)
    orphans: int = 0


@click.command()
@click.option("-g", "--graph", "graph_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Graph snapshot (.json/.yaml)")
@click.option("-c", "--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="Settings file (anchorpack.toml or pyproject.toml)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(graph_file: Optional[Path], config_file: Optional[str], as_json: bool) -> None:
    """Show class, dependency and location counts of a graph snapshot."""
    try:
        settings = load_settings(config_file).merge(graph=graph_file)
        graph = DependencyGraph.from_source(load_graph_source(settings.graph), name=str(settings.graph))
    except AnchorpackError as e:
        if as_json:
            render_json("stats", error=e)
        else:
            echo_error(str(e))
        sys.exit(1)

    response = StatsResponse.model_validate(graph.get_stats())
    if as_json:
        render_json("stats", data=response)
        return

    table = Table(title="📊 Dependency Graph")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Classes", str(response.total_classes))
    table.add_row("Dependencies", str(response.total_dependencies))
    table.add_row("Locations", str(response.total_locations))
    table.add_row("Unlocated classes", str(response.unlocated_classes))
    for scheme, count in sorted(response.locations_by_scheme.items()):
        table.add_row(f"  {scheme}:", str(count))
    table.add_row("Orphan classes", str(response.orphans))
    console.print(table)
