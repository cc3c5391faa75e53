#!/usr/bin/env python3

import logging
from . import defaults
from .log_utils import start_log, log_lines_with_sep
from .graph import AssemblyGraph


def run(
    graph: str = None,
    output: str = None,
    output_ccstats: str = None,
    max_node_count: int = defaults.MAXN,
    max_edge_count: int = defaults.MAXE,
    layout: bool = defaults.LAYOUT,
    verbose: bool = defaults.VERBOSE,
):
    """Reads the graph, identifies patterns, and writes out the results.

    Parameters
    ----------
    graph: str
        Path to the assembly graph to be visualized.

    output: str
        Path to which we'll write the JSON output.

    output_ccstats: str or None
        If not None, path to which we'll write per-component statistics.

    max_node_count: int
        Components with more nodes than this won't be laid out.

    max_edge_count: int
        Components with more edges than this won't be laid out.

    layout: bool
        If False, skip layout (the output will have no positions).

    verbose: bool
        If True, include DEBUG messages in the log output.

    Returns
    -------
    None
    """
    start_log(verbose)
    logger = logging.getLogger(__name__)
    log_lines_with_sep(
        [
            "Settings:",
            f"Graph: {graph}",
            f"Output JSON: {output}",
            f"Output component stats: {output_ccstats}",
            f"Max node count: {max_node_count:,}",
            f"Max edge count: {max_edge_count:,}",
            f"Layout?: {layout}",
            f"Verbose?: {verbose}",
        ],
        logger.info,
        endsepline=True,
    )

    # Creating the AssemblyGraph object parses the graph; process() scales
    # nodes and edges, identifies patterns, and (maybe) does layout.
    ag = AssemblyGraph(
        graph, max_node_count=max_node_count, max_edge_count=max_edge_count
    )
    ag.process(layout=layout)

    if output_ccstats is not None:
        ag.to_tsv(output_ccstats)

    logger.info(f'Writing out the graph data to "{output}"...')
    with open(output, "w") as fh:
        fh.write(ag.to_json())
    logger.info("...Done.")
