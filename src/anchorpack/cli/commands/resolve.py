"""
Resolve Command - Find the artifacts anchor classes depend on.

Usage:
    anchorpack resolve com.example.Root --graph class-graph.json
    anchorpack resolve com.example.Root -g graph.yaml -e geode-core --archive --json
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from pydantic import BaseModel, Field

from ...core.exceptions import AnchorpackError
from ...core.resolver import ClassDependencyResolver
from ...core.types import ResolutionResult
from ..utils import (
    configure_logging,
    echo_error,
    echo_success,
    echo_warning,
    load_graph_source,
    load_settings,
    render_json,
)

logger = logging.getLogger(__name__)


# --- API Models ---
class ResolveResponse(BaseModel):
    anchors: List[str]
    paths: List[str]
    locations: List[str]
    archives_created: List[str] = Field(default_factory=list)
    excluded: List[str] = Field(default_factory=list)
    skipped_roots: List[str] = Field(default_factory=list)
    visited_classes: int = 0

    @classmethod
    def from_result(cls, anchors: List[str], result: ResolutionResult) -> "ResolveResponse":
        return cls(
            anchors=anchors,
            paths=result.paths(),
            locations=[str(loc) for loc in result.sorted_locations()],
            archives_created=[str(loc) for loc in result.archives_created],
            excluded=sorted(str(loc) for loc in result.excluded),
            skipped_roots=result.skipped_roots,
            visited_classes=result.visited_classes,
        )


@click.command()
@click.argument("anchors", nargs=-1)
@click.option("-g", "--graph", "graph_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Graph snapshot (.json/.yaml) to resolve against")
@click.option("-e", "--exclude", "exclusions", multiple=True,
              help="Drop locations containing this text (repeatable)")
@click.option("--archive/--no-archive", "archive", default=None,
              help="Pack class directories into temporary archives")
@click.option("-c", "--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="Settings file (anchorpack.toml or pyproject.toml)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def resolve(
    anchors: tuple,
    graph_file: Optional[Path],
    exclusions: tuple,
    archive: Optional[bool],
    config_file: Optional[str],
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Resolve the archives and directories ANCHORS depend on.

    With no anchors (on the command line or in the settings file) every
    location known to the graph is returned.
    """
    configure_logging(verbose)

    try:
        settings = load_settings(config_file).merge(
            anchors=list(anchors),
            exclusions=list(exclusions),
            graph=graph_file,
            archive_directories=archive,
        )
        source = load_graph_source(settings.graph)
        resolver = (
            ClassDependencyResolver(
                source,
                archiver=settings.create_archiver(),
                source_name=str(settings.graph),
            )
            .with_classes(settings.anchors)
            .excluding(*settings.exclusions)
        )
        result = resolver.run(resolver.request(settings.archive_directories))
    except AnchorpackError as e:
        if as_json:
            render_json("resolve", error=e)
        else:
            echo_error(str(e))
        sys.exit(1)

    if as_json:
        render_json("resolve", data=ResolveResponse.from_result(settings.anchors, result))
        return

    for path in result.paths():
        click.echo(path)

    for root in result.skipped_roots:
        echo_warning(f"Anchor not found in graph: {root}", err=True)

    summary = f"{len(result.locations)} artifact(s) resolved"
    if result.archives_created:
        summary += f", {len(result.archives_created)} archive(s) built from directories"
    echo_success(summary, err=True)
