import logging
import networkx as nx
from asmscope.errors import GraphError, WeirdError
from .edge import Edge


logger = logging.getLogger(__name__)


class IDCounter(object):
    """Hands out increasing integer IDs.

    A single counter is shared by everything that needs new node IDs in an
    assembly graph (duplicate nodes and patterns alike), so that node and
    pattern IDs never collide -- even across components.
    """

    def __init__(self, start=0):
        self.next_id = start

    def __call__(self):
        new_id = self.next_id
        self.next_id += 1
        return new_id


class GraphIndex(object):
    """Adjacency-indexed representation of (part of) an assembly graph.

    This is a "composition" with a NetworkX MultiDiGraph: rather than
    subclassing nx.MultiDiGraph, this class contains an instance of it
    (self.graph) that we delegate to for adjacency lookups. Each edge in
    self.graph is keyed by its Edge's unique ID (which is also stored in the
    "uid" attribute of the edge), so there's no ambiguity about which Edge
    object a graph edge refers to.

    Although self.graph is a multigraph (pattern detection needs this once
    patterns are collapsed), the GraphIndex itself forbids parallel edges
    between the same ordered pair of nodes.
    """

    def __init__(
        self, nodes, edges, get_new_node_id=None, get_new_edge_id=None
    ):
        """Initializes this GraphIndex.

        Parameters
        ----------
        nodes: iterable of Node

        edges: iterable of Edge
            Each edge's (new_src_id, new_tgt_id) should be present in nodes.

        get_new_node_id: callable or None
            Called with no arguments to get an unused node ID (for duplicate
            nodes and patterns). If None, we'll count upwards from the largest
            node ID in this index.

        get_new_edge_id: callable or None
            Like get_new_node_id, but for edge IDs (used for dup edges).

        Raises
        ------
        GraphError
            If there are duplicate node/edge IDs, if an edge refers to a node
            not in this index, or if there are parallel edges.
        """
        self.graph = nx.MultiDiGraph()
        self.nodeid2obj = {}
        self.edgeid2obj = {}
        for node in nodes:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

        if get_new_node_id is None:
            get_new_node_id = IDCounter(max(self.nodeid2obj, default=-1) + 1)
        if get_new_edge_id is None:
            get_new_edge_id = IDCounter(max(self.edgeid2obj, default=-1) + 1)
        self.get_new_node_id = get_new_node_id
        self.get_new_edge_id = get_new_edge_id

    def __repr__(self):
        return (
            f"GraphIndex({self.num_nodes:,} node(s), "
            f"{self.num_edges:,} edge(s))"
        )

    @property
    def num_nodes(self):
        return len(self.nodeid2obj)

    @property
    def num_edges(self):
        return len(self.edgeid2obj)

    @property
    def node_ids(self):
        return list(self.graph.nodes)

    @property
    def edge_ids(self):
        return list(self.edgeid2obj)

    def has_node(self, node_id):
        return node_id in self.nodeid2obj

    def get_node(self, node_id):
        try:
            return self.nodeid2obj[node_id]
        except KeyError:
            raise GraphError(f"Node {node_id} isn't in this GraphIndex")

    def get_edge(self, edge_id):
        try:
            return self.edgeid2obj[edge_id]
        except KeyError:
            raise GraphError(f"Edge {edge_id} isn't in this GraphIndex")

    def add_node(self, node):
        if node.unique_id in self.nodeid2obj:
            raise GraphError(f"Duplicate node ID: {node.unique_id}")
        self.nodeid2obj[node.unique_id] = node
        self.graph.add_node(node.unique_id)

    def add_edge(self, edge):
        src, tgt = edge.new_src_id, edge.new_tgt_id
        if edge.unique_id in self.edgeid2obj:
            raise GraphError(f"Duplicate edge ID: {edge.unique_id}")
        for n in (src, tgt):
            if n not in self.nodeid2obj:
                raise GraphError(
                    f"{edge} refers to node {n}, which isn't here"
                )
        if self.graph.has_edge(src, tgt):
            raise GraphError(
                f"Parallel edges from node {src} to node {tgt} aren't allowed"
            )
        self.edgeid2obj[edge.unique_id] = edge
        self.graph.add_edge(src, tgt, key=edge.unique_id, uid=edge.unique_id)

    def in_degree(self, node_id):
        return self.graph.in_degree(node_id)

    def out_degree(self, node_id):
        return self.graph.out_degree(node_id)

    def in_edges(self, node_id):
        """Returns a list of the Edges pointing to a node."""
        return [
            self.edgeid2obj[k]
            for _, _, k in self.graph.in_edges(node_id, keys=True)
        ]

    def out_edges(self, node_id):
        """Returns a list of the Edges pointing from a node."""
        return [
            self.edgeid2obj[k]
            for _, _, k in self.graph.out_edges(node_id, keys=True)
        ]

    def predecessors(self, node_id):
        return list(self.graph.pred[node_id])

    def successors(self, node_id):
        return list(self.graph.adj[node_id])

    def reroute_edge_src(self, edge, new_src_id):
        """Makes an edge start at another node, in self.graph and the Edge."""
        self.graph.remove_edge(
            edge.new_src_id, edge.new_tgt_id, key=edge.unique_id
        )
        edge.reroute_src(new_src_id)
        self.graph.add_edge(
            new_src_id,
            edge.new_tgt_id,
            key=edge.unique_id,
            uid=edge.unique_id,
        )

    def reroute_edge_tgt(self, edge, new_tgt_id):
        """Makes an edge end at another node, in self.graph and the Edge."""
        self.graph.remove_edge(
            edge.new_src_id, edge.new_tgt_id, key=edge.unique_id
        )
        edge.reroute_tgt(new_tgt_id)
        self.graph.add_edge(
            edge.new_src_id,
            new_tgt_id,
            key=edge.unique_id,
            uid=edge.unique_id,
        )

    def duplicate_node(self, node_id, take):
        """Creates a duplicate of a node, giving it some of the node's edges.

        Parameters
        ----------
        node_id: int
            ID of the node to duplicate.

        take: str
            If "out", the duplicate takes over all of the node's outgoing
            edges, and we add a dup edge from the node to its duplicate. If
            "in", the duplicate takes over all of the node's incoming edges,
            and we add a dup edge from the duplicate to the node.

            Either way, the path through the graph is preserved:

            "out":  X -> N -> Y   becomes   X -> N ==> N' -> Y
            "in":   X -> N -> Y   becomes   X -> N' ==> N -> Y

        Returns
        -------
        (Node, Edge, list of Edge)
            The new duplicate Node, the new dup Edge, and the existing Edges
            that were moved to the duplicate.
        """
        node = self.get_node(node_id)
        dup = node.make_duplicate(self.get_new_node_id())
        self.add_node(dup)
        if take == "out":
            moved = self.out_edges(node_id)
            for edge in moved:
                self.reroute_edge_src(edge, dup.unique_id)
            dup_edge_ends = (node_id, dup.unique_id)
        elif take == "in":
            moved = self.in_edges(node_id)
            for edge in moved:
                self.reroute_edge_tgt(edge, dup.unique_id)
            dup_edge_ends = (dup.unique_id, node_id)
        else:
            raise WeirdError(f"take should be 'in' or 'out', not {take}")

        dup_edge = Edge(self.get_new_edge_id(), *dup_edge_ends, is_dup=True)
        self.add_edge(dup_edge)
        logger.debug(f"Duplicated {node} as {dup} (took {take} edges)")
        return dup, dup_edge, moved
