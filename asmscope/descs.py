#!/usr/bin/env python3

GRAPH = "MetaCarvel-style GML file describing the assembly graph."

OUTPUT = (
    "Filepath to which we'll save a JSON file describing the graph, its "
    "structural patterns, and (if layout is done) its layout. The viewer "
    "reads this file back in."
)

OUTPUT_CCSTATS = (
    "If provided, we'll save a tab-separated values (TSV) file describing the "
    "numbers of nodes, edges, and structural patterns in each connected "
    "component of the graph to this filepath."
)

MAXN = (
    "Components with more nodes than this won't be laid out. (They'll still "
    "be described in the TSV file.)"
)

MAXE = (
    "Components with more edges than this won't be laid out. (They'll still "
    "be described in the TSV file.)"
)

LAYOUT = (
    "Lay out components using Graphviz. If --no-layout is given, the JSON "
    "file will still contain patterns, but no positions."
)

VERBOSE = "Log extra details."
