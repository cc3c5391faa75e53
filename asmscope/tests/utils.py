# This file contains some utility functions that should help simplify the
# process of creating tests for AsmScope.

import networkx as nx
from asmscope import config
from asmscope.graph import GraphIndex, Node, Edge, AssemblyGraph
from asmscope.graph.assembly_graph import NODE_FIELDS, EDGE_FIELDS, PATT_FIELDS


def make_index(edges, extra_node_ids=()):
    """Creates a GraphIndex from a list of (src, tgt) pairs.

    Node IDs should be ints. Each node is named after its ID, and edge IDs
    are assigned in the order the edges are given.
    """
    node_ids = set(extra_node_ids)
    for src, tgt in edges:
        node_ids.add(src)
        node_ids.add(tgt)
    nodes = [Node(n, str(n)) for n in sorted(node_ids)]
    edge_objs = [Edge(i, src, tgt) for i, (src, tgt) in enumerate(edges)]
    return GraphIndex(nodes, edge_objs)


def make_multidigraph(edges):
    """Creates a nx.MultiDiGraph from a list of (src, tgt) pairs."""
    g = nx.MultiDiGraph()
    g.add_edges_from(edges)
    return g


def make_assembly_graph(edges, lengths=None, edge_data=None):
    """Creates an AssemblyGraph from a list of (src, tgt) pairs.

    Node names are the string versions of whatever is in edges. All nodes
    are forward-oriented. If lengths is given, it should map node names to
    lengths; if edge_data is given, it should map (src, tgt) pairs to dicts
    of edge attributes.
    """
    g = nx.DiGraph()
    for src, tgt in edges:
        data = {} if edge_data is None else dict(edge_data.get((src, tgt), {}))
        g.add_edge(str(src), str(tgt), **data)
    for n in g.nodes:
        g.nodes[n]["orientation"] = config.FWD
        if lengths is not None:
            g.nodes[n]["length"] = lengths[n]
    return AssemblyGraph(digraph=g)


def get_patterns_by_type(patterns, pattern_type):
    return [p for p in patterns if p.pattern_type == pattern_type]


def get_stored_data():
    r"""Returns a small, hand-written example of AssemblyGraph.to_dict().

    Component 1 is a bubble (12) from node 0 to node 4. One path through the
    bubble is the chain (10) 1 -> 2; the other path is just node 3. The
    edge from 0 to 3 is curved.

               +-----------12-----------+
               | +------10-------+      |
            /----->  1 -----> 2 -----\  |
           0   | +---------------+    \ |
            \----->  3 ---------------->4
               +------------------------+

    Component 2 is a cyclic chain (11) of 5 -> 6 -> 7 -> 5. Its edges don't
    have control points.

    Component 3 was too large to lay out.
    """

    def node(name, x, y, orientation, parent_id, extra=None):
        return [
            name,
            1000,
            x,
            y,
            30,
            20,
            orientation,
            parent_id,
            False,
            {} if extra is None else extra,
        ]

    def edge(coords, parent_id, is_outlier="none", rw=0.5):
        return [coords, is_outlier, rw, False, parent_id, {}]

    cc1 = {
        "nodes": {
            0: node("c0", 10, 50, "+", None),
            1: node("c1", 60, 50, "+", 10),
            2: node("c2", 100, 50, "-", 10, {"cov": 4.5}),
            3: node("c3", 100, 20, "+", 12),
            4: node("c4", 180, 40, "+", None),
        },
        "edges": {
            0: {
                1: edge([10, 50, 35, 50, 60, 50], None),
                3: edge([10, 50, 55, 10, 100, 20], None),
            },
            1: {2: edge([60, 50, 80, 50, 100, 50], 10)},
            2: {4: edge([100, 50, 140, 45, 180, 40], None)},
            3: {4: edge([100, 20, 140, 30, 180, 40], None, "high", 1)},
        },
        "patts": [
            [12, 40, 5, 160, 80, 120, 75, "bubble", None],
            [10, 45, 35, 125, 65, 80, 30, "chain", 12],
        ],
        "bb": [200, 100],
        "skipped": False,
    }
    cc2 = {
        "nodes": {
            5: node("c5", 20, 20, "+", 11),
            6: node("c6", 60, 40, "+", 11),
            7: node("c7", 100, 20, "-", 11),
        },
        "edges": {
            5: {6: edge(None, 11)},
            6: {7: edge(None, 11)},
            7: {5: edge(None, 11)},
        },
        "patts": [[11, 5, 5, 115, 55, 110, 50, "cyclicchain", None]],
        "bb": [120, 60],
        "skipped": False,
    }
    return {
        "node_attrs": {f: i for i, f in enumerate(NODE_FIELDS)},
        "edge_attrs": {f: i for i, f in enumerate(EDGE_FIELDS)},
        "patt_attrs": {f: i for i, f in enumerate(PATT_FIELDS)},
        "extra_node_attrs": ["cov"],
        "extra_edge_attrs": [],
        "components": [cc1, cc2, {"skipped": True}],
        "input_file_basename": "example.gml",
        "input_file_type": "GML",
        "total_num_nodes": 20,
        "total_num_edges": 30,
    }
