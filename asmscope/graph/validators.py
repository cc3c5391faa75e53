# This file contains validation functions for potential patterns "starting"
# at a given node ID in a (decomposed) assembly graph, in addition to related
# utilities.
#
# All of these functions only care about the topology of the graph they're
# given. Each node in this graph might be an actual node or a collapsed
# pattern; the validators can't tell the difference, and that's the point.
#
# Degrees here are counted in edges, not in neighbors: so if a node has two
# parallel edges to a collapsed pattern, it has two outgoing edges.


from asmscope import config
from asmscope.misc_utils import verify_subset
from asmscope.errors import WeirdError


class ValidationResults(object):
    """Stores the results of trying to validate a pattern.

    This class should make it easier to work with the results of different
    validation methods -- if we know that each method will return an instance
    of this object, it becomes easier to interpret the validation results.
    """

    def __init__(
        self,
        pattern_type=None,
        is_valid=False,
        nodes=None,
        start_node_ids=None,
        end_node_ids=None,
        source_id=None,
        sink_id=None,
    ):
        """Initializes this object.

        Pro tip: if you just want to indicate that you failed to identify a
        pattern, you can just call ValidationResults() (with no parameters
        set). You only need to set the parameters here if you successfully
        identified a pattern.

        Parameters
        ----------
        pattern_type: int or None
            The type of pattern that has been identified (or, if is_valid is
            False, this can just be None). If is_valid is True, this should
            correspond to a key in config.PT2HR.

        is_valid: bool
            True if the proposed pattern was valid; False otherwise.

        nodes: list or None
            If is_valid is True, contains a list of the nodes in the pattern,
            in order.

        start_node_ids: list or None
            The nodes in this pattern through which paths enter it. Must be a
            subset of nodes.

        end_node_ids: list or None
            The nodes in this pattern through which paths leave it. Must be a
            subset of nodes.

        source_id: int or None
            For bubbles, the node outside of the bubble that its paths start
            from.

        sink_id: int or None
            For bubbles, the node outside of the bubble that its paths end at.

        Raises
        ------
        WeirdError
            If is_valid is True and pattern_type is unrecognized, or if the
            start/end nodes aren't all in nodes.
        """
        if is_valid and pattern_type not in config.PT2HR:
            raise WeirdError(f"Invalid pattern type: {pattern_type}")
        self.pattern_type = pattern_type
        self.is_valid = is_valid
        self.nodes = [] if nodes is None else nodes
        self.start_node_ids = [] if start_node_ids is None else start_node_ids
        self.end_node_ids = [] if end_node_ids is None else end_node_ids
        verify_subset(self.start_node_ids, self.nodes)
        verify_subset(self.end_node_ids, self.nodes)
        self.source_id = source_id
        self.sink_id = sink_id

    def __bool__(self):
        """Returns self.is_valid; useful for quick testing."""
        return self.is_valid

    def __repr__(self):
        if self.is_valid:
            return (
                f"Valid {config.PT2HR[self.pattern_type]} of nodes "
                f"{repr(self.nodes)} from {repr(self.start_node_ids)} to "
                f"{repr(self.end_node_ids)}"
            )
        else:
            return "Invalid pattern"


def verify_node_in_graph(g, node_id):
    """Raises a WeirdError if a node is not present in a graph."""
    if node_id not in g.nodes:
        raise WeirdError(
            f"Node {node_id} is not present in the graph's nodes? Something "
            "may have gone wrong during hierarchical decomposition."
        )


def not_single_edge(g, adj_view):
    """Returns True if an AdjacencyView doesn't describe exactly 1 edge.

    This accounts for two cases:
    - The case where there are != 1 adjacent nodes
    - The case where there is just one adjacent node, but there are parallel
      edges between this node and the node described by this AdjacencyView

    Parameters
    ----------
    g: nx.MultiDiGraph

    adj_view: nx.classes.coreviews.AdjacencyView
        The result of g.pred[n] or g.adj[n], where n is a node in g.
        g.pred refers to the incoming adjacencies of n; g.adj refers to the
        outgoing adjacencies of n.

    Returns
    -------
    bool
    """
    # Let's say that adj_view was given to us from g.pred[n].
    # If len(adj_view) != 1, then n has incoming edges from multiple nodes.
    # If len(adj_view) == 1 but the other gross condition is true, then n has
    # parallel edges from a single node.
    return len(adj_view) != 1 or len(adj_view[list(adj_view)[0]]) != 1


def is_single_in_single_out(g, node_id):
    return not (
        not_single_edge(g, g.pred[node_id])
        or not_single_edge(g, g.adj[node_id])
    )


def is_valid_chain(g, start_node_id):
    r"""Validates a chain "starting at" a node in a graph.

    Parameters
    ----------
    g: nx.MultiDiGraph
    start_node_id: int

    Returns
    -------
    ValidationResults

    Notes
    -----
    - A chain is a path n0 -> n1 -> ... -> nk (k >= 1) where n0 has exactly
      one outgoing edge, nk has exactly one incoming edge, and every node in
      between has exactly one incoming and one outgoing edge. n0 and nk are
      members of the chain, so A -> B -> C -> D gives [A, B, C, D].

    - THIS FINDS THE LONGEST POSSIBLE CHAIN that includes the starting node
      (herein referred to as "s" for brevity), if a chain exists beginning at
      s. If we find that no chain exists starting at s then we give up, but
      if one does exist then we traverse "backwards" to find the longest
      possible chain including s. (This way, if this function returns a chain,
      it's guaranteed to be "maximal.")

      If "s" is really present in a chain (as the final node), then that's
      fine -- we should come back to this later when running this function on
      another node earlier on in that chain.

    - IF THIS IS AN ISOLATED CYCLE (every node in the chain has exactly one
      incoming and one outgoing edge, and the end node of the chain has an
      edge to the start node), we will not identify a valid chain here. These
      sorts of cases should be caught when looking for cyclic chains. If the
      path closes on itself but some node in it has another edge, though, it
      *is* a chain (the closing edge is just an edge inside it):

           +---------+
           V         |
      X -> 0 -> 1 -> 2

      ... gives a chain of [0, 1, 2].

    - Chains cannot contain parallel edges. If the only reason that a region
      of the graph is not a valid chain is that this region happens to
      contain some parallel edges (e.g. 1 -> 2 => 3 -> 4, where 2 => 3 is a
      pair of parallel edges to or from a collapsed pattern), then that's
      that -- these won't be chains.
    """
    verify_node_in_graph(g, start_node_id)
    adj = g.adj[start_node_id]
    # If the starting node doesn't have exactly one outgoing edge -- or even
    # if it does, but that edge is to itself -- then this isn't a valid chain
    if not_single_edge(g, adj):
        return ValidationResults()
    curr_node_id = list(adj)[0]
    if curr_node_id == start_node_id:
        return ValidationResults()

    chain_list = [start_node_id]
    # Iterate "down" through the chain
    while True:
        if curr_node_id in chain_list:
            # We've looped back around to the start of the chain. Whether or
            # not this is a cyclic chain is decided below.
            break

        if not_single_edge(g, g.pred[curr_node_id]):
            # The chain has ended, and this can't be the last node in it.
            # (The node before this node is the chain's actual end.)
            break

        chain_list.append(curr_node_id)

        adj = g.adj[curr_node_id]
        if not_single_edge(g, adj):
            # curr_node_id is a fine end node for the chain (its outgoing
            # edges can be whatever), but we can't go any further.
            break
        curr_node_id = list(adj)[0]

    if len(chain_list) < 2:
        # There wasn't a chain starting at the specified node ID. There might
        # be a chain that starts before this node that *includes* this node
        # as an end node, but we don't bother with that; we should get to it
        # eventually.
        return ValidationResults()

    # If we're here, we know a chain exists starting at start_node_id. Can it
    # be extended in the opposite direction? To figure that out, we
    # basically just repeat what we did above but in reverse.
    while True:
        pred = g.pred[chain_list[0]]
        if not_single_edge(g, pred):
            break
        prev_node_id = list(pred)[0]
        if prev_node_id in chain_list:
            # The chain "begins" cyclically
            break
        if not_single_edge(g, g.adj[prev_node_id]):
            # Since this node has multiple outgoing edges, it can't be in the
            # chain. The current start of the chain is optimal.
            break
        chain_list.insert(0, prev_node_id)

    # Is this entire thing just an isolated cycle? If so, leave it for cyclic
    # chain detection.
    if chain_list[0] in g.adj[chain_list[-1]] and all(
        is_single_in_single_out(g, n) for n in chain_list
    ):
        return ValidationResults()

    return ValidationResults(
        config.PT_CHAIN,
        True,
        chain_list,
        [chain_list[0]],
        [chain_list[-1]],
    )


def is_valid_cyclic_chain(g, start_node_id):
    r"""Validates a cyclic chain "starting at" a node in a graph.

    Parameters
    ----------
    g: nx.MultiDiGraph
    start_node_id: int

    Returns
    -------
    ValidationResults

    Notes
    -----
    - A cyclic chain is a cycle of >= 2 nodes, where every node has exactly one
      incoming edge and exactly one outgoing edge:

      0 -> 1 -> 2
      ^         |
      |         |
      +---------+

      ... in other words, an isolated cycle. All of the edges in the cycle
      (including the one from the "end" back to the "start") are inside the
      cyclic chain.

    - "start_node_id" is sort of a misnomer, since any node in the cycle will
      work as a "starting node." We use whatever we're given as the start of
      the cyclic chain, and the node before it as the end.

    - As with is_valid_chain(), cyclic chains cannot contain parallel edges.

    - We require that all cyclic chains contain at least two nodes, so nodes
      with just a self-loop are not cyclic chains.
    """
    verify_node_in_graph(g, start_node_id)
    if not is_single_in_single_out(g, start_node_id):
        return ValidationResults()

    curr = list(g.adj[start_node_id])[0]
    if curr == start_node_id:
        return ValidationResults()

    cch_list = [start_node_id]
    while True:
        if curr == start_node_id:
            return ValidationResults(
                config.PT_CYCLICCHAIN,
                True,
                cch_list,
                [start_node_id],
                [cch_list[-1]],
            )
        if curr in cch_list:
            # We looped back to somewhere in the middle of what we've seen.
            # That can't happen if every node has 1 incoming edge, but whatever
            raise WeirdError(
                f"Cyclic chain detection from {start_node_id} hit {curr} "
                "twice?"
            )
        if not is_single_in_single_out(g, curr):
            return ValidationResults()
        cch_list.append(curr)
        curr = list(g.adj[curr])[0]


def is_valid_frayed_rope(g, start_node_id):
    r"""Validates a frayed rope starting at a node in a graph.

    A frayed rope will have multiple starting nodes, of course -- this
    function doesn't care which of these is given (any is fine).

    Parameters
    ----------
    g: nx.MultiDiGraph
    start_node_id: int

    Returns
    -------
    ValidationResults

    Notes
    -----
    - We only consider "simple" frayed ropes that look like

      s1 -\ /-> e1
           m
      s2 -/ \-> e2

      ...that is, frayed ropes containing only one middle node. There can
      be an arbitrary amount of start and end nodes defined (so long as
      there are >= 2 start/end nodes), though. (Also, the number of start
      and end nodes doesn't have to match up.)

      (We could explicitly try to search for frayed ropes containing a chain
      of middle nodes, but these chains should have already been collapsed
      by the time we call this function.)

    - Every start node must have exactly one outgoing edge (to m), and every
      end node must have exactly one incoming edge (from m). All of m's
      incoming edges thus come from the start nodes.

    - The nodes in the returned ValidationResults are ordered as
      [start nodes] + [m] + [end nodes].
    """
    verify_node_in_graph(g, start_node_id)

    # If the starting node doesn't have exactly 1 outgoing edge, fail
    if not_single_edge(g, g.adj[start_node_id]):
        return ValidationResults()

    # Get the tentative "middle" node in the rope
    middle_node_id = list(g.adj[start_node_id])[0]
    if middle_node_id == start_node_id:
        return ValidationResults()

    # Now, get all "starting" nodes (the incoming nodes on the middle node)
    start_node_ids = sorted(g.pred[middle_node_id])

    # A frayed rope must have multiple paths from which to converge to
    # the "middle node" section
    if len(start_node_ids) < 2:
        return ValidationResults()

    # Ensure none of the start nodes have extraneous outgoing edges. (This
    # also makes sure that there's just one edge from each start node to m.)
    for n in start_node_ids:
        if not_single_edge(g, g.adj[n]):
            return ValidationResults()

    end_node_ids = sorted(g.adj[middle_node_id])

    # The middle node has to diverge to something for this to be a frayed
    # rope.
    if len(end_node_ids) < 2:
        return ValidationResults()
    for n in end_node_ids:
        # Check for extraneous incoming edges, including parallel ones from m
        if not_single_edge(g, g.pred[n]):
            return ValidationResults()
        # NOTE: We allow cyclic frayed ropes (e.g. where an end node has an
        # edge back to a start node).

    # Check the entire frayed rope's structure
    composite = start_node_ids + [middle_node_id] + end_node_ids

    # Verify all nodes in the frayed rope are distinct
    if len(set(composite)) != len(composite):
        return ValidationResults()

    # If we've made it here, this frayed rope is valid!
    return ValidationResults(
        config.PT_FRAYEDROPE, True, composite, start_node_ids, end_node_ids
    )


def is_valid_bubble(g, start_node_id):
    r"""Validates a bubble starting at a node in a graph.

    Parameters
    ----------
    g: nx.MultiDiGraph
        Graph containing start_node_id.

    start_node_id: int
        Source node to use when searching for a bubble.

    Returns
    -------
    ValidationResults

    Notes
    -----
    - A bubble looks like

         /-> p1 -> ... -> p1' -\
        s                       t
         \-> p2 -> ... -> p2' -/

      The source node s has >= 2 outgoing edges, each to a different node.
      Each of these nodes starts a path in which every node has exactly one
      incoming and one outgoing edge; all of these paths must end at the
      same sink node t (t != s), and all of t's incoming edges must come from
      the ends of these paths.

    - s and t are NOT members of the bubble -- they remain separate nodes that
      the bubble attaches to. Only the nodes on the paths are members. (s and
      t are stored in the source_id and sink_id attributes of the result.)

    - This means that a direct s -> t edge makes a bubble invalid: since s
      and t are outside the bubble, there would be nothing on that path.

    - The paths are "internally disjoint" by construction, since every node
      on a path has just one incoming edge.

    - Bubbles where t has edge(s) back to s are fine, since those edges
      are outside the bubble. Bubbles that loop back to s in the middle of a
      path aren't.
    """
    verify_node_in_graph(g, start_node_id)

    adj = g.adj[start_node_id]
    if len(adj) < 2:
        return ValidationResults()

    paths = []
    for first_node_id in sorted(adj):
        if len(adj[first_node_id]) != 1:
            # parallel edges from s to this node
            return ValidationResults()
        path = []
        curr = first_node_id
        while True:
            if curr == start_node_id or curr in path:
                return ValidationResults()
            if not is_single_in_single_out(g, curr):
                break
            path.append(curr)
            curr = list(g.adj[curr])[0]
        if len(path) == 0:
            # s points directly to something that isn't a single-in/out node
            # (possibly the sink itself)
            return ValidationResults()
        paths.append((path, curr))

    sink_id = paths[0][1]
    for path, end in paths:
        if end != sink_id:
            return ValidationResults()

    path_ends = [path[-1] for path, _ in paths]
    sink_pred = g.pred[sink_id]
    if set(sink_pred) != set(path_ends):
        return ValidationResults()
    for n in path_ends:
        if len(sink_pred[n]) != 1:
            return ValidationResults()

    composite = []
    for path, _ in paths:
        composite.extend(path)
    if len(set(composite)) != len(composite):
        return ValidationResults()

    return ValidationResults(
        config.PT_BUBBLE,
        True,
        composite,
        [path[0] for path, _ in paths],
        path_ends,
        source_id=start_node_id,
        sink_id=sink_id,
    )
