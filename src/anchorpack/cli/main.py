"""
anchorpack CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import resolve, stats


@click.group()
@click.version_option(package_name="anchorpack")
def main():
    """anchorpack: ship the artifacts your classes depend on.

    Resolves the archives and class directories that anchor classes
    transitively depend on, using a graph snapshot produced by a
    class scanner.

    \b
    Quick Start:
      anchorpack stats --graph class-graph.json
      anchorpack resolve com.example.Root --graph class-graph.json
      anchorpack resolve com.example.Root -g class-graph.json --archive --json
    """
    pass


# Register commands
main.add_command(resolve.resolve)
main.add_command(stats.stats)

if __name__ == "__main__":
    main()
