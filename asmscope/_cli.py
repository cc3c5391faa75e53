#!/usr/bin/env python3

import click
from . import __version__, defaults, descs, main


@click.command(
    context_settings={
        # Make asmscope -h (or just asmscope by itself) show the help text
        "help_option_names": ["-h", "--help"],
        # Click's default of 80 is too short to fit most of our options on
        # one line each
        "max_content_width": 87,
    },
    no_args_is_help=True,
)
@click.option(
    "-g",
    "--graph",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    required=True,
    help=descs.GRAPH,
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    required=True,
    help=descs.OUTPUT,
)
@click.option(
    "--tsv",
    "output_ccstats",
    type=click.Path(dir_okay=False, writable=True),
    required=False,
    default=None,
    help=descs.OUTPUT_CCSTATS,
)
@click.option(
    "--maxn",
    type=click.IntRange(min=1),
    default=defaults.MAXN,
    show_default=True,
    help=descs.MAXN,
)
@click.option(
    "--maxe",
    type=click.IntRange(min=1),
    default=defaults.MAXE,
    show_default=True,
    help=descs.MAXE,
)
@click.option(
    "--layout/--no-layout",
    is_flag=True,
    default=defaults.LAYOUT,
    show_default=True,
    help=descs.LAYOUT,
)
@click.option(
    "--verbose/--no-verbose",
    is_flag=True,
    default=defaults.VERBOSE,
    show_default=True,
    help=descs.VERBOSE,
)
@click.version_option(__version__, "-v", "--version")
def run_script(
    graph: str,
    output: str,
    output_ccstats: str,
    maxn: int,
    maxe: int,
    layout: bool,
    verbose: bool,
) -> None:
    """Identifies structural patterns in an assembly graph.

    The JSON output describes the graph's components, their nested patterns,
    and their layouts; the viewer (asmscope.viewer) reads it back in.
    """
    main.run(
        graph=graph,
        output=output,
        output_ccstats=output_ccstats,
        max_node_count=maxn,
        max_edge_count=maxe,
        layout=layout,
        verbose=verbose,
    )


if __name__ == "__main__":
    run_script()
