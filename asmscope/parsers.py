# This module contains utility functions for parsing assembly graph files.
# All of the parse_() functions here should return a NetworkX MultiDiGraph
# representing the assembly graph in the input file, assuming the input file
# is "valid."
#
# Right now we only support MetaCarvel-style GML files. To add another
# filetype: write a function that takes a filename and returns a
# nx.MultiDiGraph, add its lowercase file extension to
# SUPPORTED_FILETYPE_TO_PARSER, add a human-readable name to FILETYPE2HR, and
# add tests for it in asmscope/tests/.

import networkx as nx
from . import config
from .errors import GraphParsingError, WeirdError


def is_not_pos_int(number_string):
    """Returns False if a str represents a positive integer; True otherwise.

    (Also, if number_string is actually an int, this'll return False if it's
    a *positive* int. If number_string is actually a float, this'll immediately
    return True.)

    The behavior of this function is a tad bit confusing, so another way to
    think about it is "should we throw an error, given this input (which is
    supposed to represent a positive integer number)?"

    Note that we explicitly consider 0 as non-positive.
    """
    if type(number_string) == int:
        return number_string <= 0
    elif type(number_string) == float:
        return True
    elif type(number_string) == str:
        # Due to boolean short-circuiting, the int() call won't happen if
        # not number_string.isdigit() is True
        return not number_string.isdigit() or int(number_string) <= 0
    else:
        # This isn't an int, float, or str. (It could be a list, as is the case
        # if the same attribute is specified twice for a given element.) Return
        # True -- this definitely isn't handleable as a positive integer.
        return True


def validate_nx_digraph(g, required_node_fields, required_edge_fields):
    if not g.is_directed():
        raise GraphParsingError("The input graph should be directed.")

    # Verify that all nodes have the properties we expect nodes to have
    num_nodes = len(g.nodes)
    for required_field in required_node_fields:
        num_nodes_with_field = len(nx.get_node_attributes(g, required_field))
        if num_nodes_with_field < num_nodes:
            raise GraphParsingError(
                f"Only {num_nodes_with_field} / {num_nodes} nodes have "
                f'"{required_field}" given.'
            )

    # Verify that all edges have the properties we expect edges to have
    num_edges = len(g.edges)
    for required_field in required_edge_fields:
        num_edges_with_field = len(nx.get_edge_attributes(g, required_field))
        if num_edges_with_field < num_edges:
            raise GraphParsingError(
                f"Only {num_edges_with_field} / {num_edges} edges have "
                f'"{required_field}" given.'
            )


def make_multigraph_if_not_already(g):
    """Converts a nx.DiGraph to a nx.MultiDiGraph, if needed.

    Also, raises an error if the input graph is not a nx.DiGraph or a
    nx.MultiDiGraph.
    """
    if type(g) is nx.DiGraph:
        return nx.MultiDiGraph(g)
    elif type(g) is nx.MultiDiGraph:
        # we don't need to do anything
        return g
    else:
        raise WeirdError(
            f"Graph isn't a (Multi)DiGraph: it's of type {type(g)}?"
        )


def standardize_node_attrs(g):
    """Validates and standardizes node orientations and lengths, in place.

    Orientations can be given as "+"/"-" or as MetaCarvel's "FOW"/"REV";
    we convert these all to config.FWD / config.REV. Lengths are optional,
    but if a node has one then it must be a positive integer.
    """
    for n in g.nodes:
        data = g.nodes[n]
        orientation = data["orientation"]
        if (
            type(orientation) != str
            or orientation not in config.ORIENTATION_ALIASES
        ):
            raise GraphParsingError(
                f'Node {n} has unsupported orientation "{orientation}". '
                'Should be one of "+", "-", "FOW", or "REV".'
            )
        data["orientation"] = config.ORIENTATION_ALIASES[orientation]
        if "length" in data:
            if is_not_pos_int(data["length"]):
                raise GraphParsingError(
                    f'Node {n} has non-positive-integer length '
                    f'"{data["length"]}".'
                )
            data["length"] = int(data["length"])


def parse_metacarvel_gml(filename):
    """Returns a nx.MultiDiGraph representation of a MetaCarvel GML file.

    The GML file format isn't inherently tied to MetaCarvel, but we make the
    simplifying assumption that -- if you're trying to load in a GML file --
    that file looks like what MetaCarvel outputs: every node has an
    "orientation", and edges may have a "bsize" (bundle size) and an
    "orientation" of their own.

    Since NetworkX has a function for reading GML files built-in, the bulk of
    effort in this function is just spent validating that the graph
    produced by NetworkX's reader follows the format we expect.

    Notes
    -----
    Nodes in GML files are expected (by nx.read_gml()) to have both "id"
    and "label" fields, and both of these should be unique. By default,
    nx.read_gml() names nodes according to their label; node IDs won't
    actually be visible to us. This is fine, since (in MetaCarvel outputs)
    node labels seem to be more important than IDs.
    """
    g = nx.read_gml(filename)
    validate_nx_digraph(g, ("orientation",), ())

    # nx.read_gml() returns graphs of variable types, depending on the
    # "directed" and "multigraph" flags in the first few lines of the file.
    # We want to make sure we return a nx.MultiDiGraph object from here, even
    # if the graph contains no parallel edges.
    g = make_multigraph_if_not_already(g)
    standardize_node_attrs(g)

    for e in g.edges:
        data = g.edges[e]
        if "orientation" in data and data["orientation"] not in (
            "EE",
            "EB",
            "BE",
            "BB",
        ):
            raise GraphParsingError(
                f'Edge {e} has unsupported orientation "{data["orientation"]}"'
                '. Should be one of "EE", "EB", "BE", or "BB".'
            )
        if "bsize" in data and is_not_pos_int(data["bsize"]):
            raise GraphParsingError(
                f'Edge {e} has non-positive-integer bsize "{data["bsize"]}".'
            )
    return g


SUPPORTED_FILETYPE_TO_PARSER = {
    "gml": parse_metacarvel_gml,
}

FILETYPE2HR = {
    "gml": "GML",
}


def sniff_filetype(filename):
    """Attempts to determine the filetype of a file from its extension.

    Returns
    -------
    filetype: str
        The filename's extension.

    Raises
    ------
    NotImplementedError
        If the filename doesn't end with one of the supported input filetype
        suffixes.
    """
    lowercase_fn = filename.lower()
    for suffix in SUPPORTED_FILETYPE_TO_PARSER:
        if lowercase_fn.endswith(suffix):
            return suffix
    allowed_suffixes = (
        "{"
        + ", ".join(f'"{s}"' for s in SUPPORTED_FILETYPE_TO_PARSER.keys())
        + "}"
    )
    raise NotImplementedError(
        f"The input filename ({filename}) doesn't end with one of the "
        f"following supported filetype suffixes: {allowed_suffixes}."
    )


def parse(filename):
    filetype = sniff_filetype(filename)
    return SUPPORTED_FILETYPE_TO_PARSER[filetype](filename)
