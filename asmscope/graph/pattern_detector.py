import logging
from collections import deque
from copy import deepcopy
from asmscope import config
from asmscope.errors import WeirdError
from . import validators
from .pattern import Pattern
from .pattern_stats import PatternStats


logger = logging.getLogger(__name__)


class PatternDetector(object):
    """Hierarchically identifies patterns in one component of a graph.

    We keep two views of the component:

    - The GraphIndex (self.graph_index) describes the actual nodes and edges
      of the component. Pattern detection never adds patterns to it, but it
      can add duplicate nodes and dup edges to it.

    - The decomposed graph (self.decomposed_graph) starts out as a copy of the
      GraphIndex's graph. As we identify patterns, we replace their children
      with a single node (representing the pattern) in this graph. So, after
      detection is done, the decomposed graph describes the "top level" /
      "fully collapsed" structure of the component.

    (If you recursively replace all pattern nodes in the decomposed graph with
    their child nodes and edges, you should get back the GraphIndex's graph.)
    """

    # The order in which we try to identify each type of pattern during a
    # single pass over the graph. Earlier types get first dibs on nodes.
    VALIDATORS = (
        (config.PT_CHAIN, validators.is_valid_chain),
        (config.PT_CYCLICCHAIN, validators.is_valid_cyclic_chain),
        (config.PT_FRAYEDROPE, validators.is_valid_frayed_rope),
        (config.PT_BUBBLE, validators.is_valid_bubble),
    )

    def __init__(self, graph_index):
        self.graph_index = graph_index
        self.decomposed_graph = deepcopy(graph_index.graph)

        # Maps pattern IDs to Pattern objects. Chains that get merged into
        # another chain are removed from this.
        self.id2pattern = {}

        # IDs of the duplicate nodes we've created
        self.dup_node_ids = []

        self.done = False

    def __repr__(self):
        return f"PatternDetector for {self.graph_index}"

    @property
    def patterns(self):
        """List of all Patterns identified, in order of creation."""
        return list(self.id2pattern.values())

    @property
    def top_level_pattern_ids(self):
        return sorted(
            pid for pid, p in self.id2pattern.items() if p.parent_id is None
        )

    def get_stats(self):
        return PatternStats.from_patterns(self.id2pattern.values())

    def run(self):
        """Runs all of the validators on the graph until nothing changes.

        Each "pass" runs through every type of pattern (in the order given in
        PatternDetector.VALIDATORS). For each type, we try out every node in
        the decomposed graph (in sorted order) as a starting node. Whenever
        we find a pattern, we collapse it into a single node and put this new
        node at the end of the line of candidate nodes -- so patterns
        containing this pattern can be identified later on in this pass.

        Once a full pass goes by without us collapsing anything, we're done.

        Returns
        -------
        list of Pattern
        """
        if self.done:
            raise WeirdError(f"Already ran {self}")
        num_passes = 0
        while True:
            num_passes += 1
            something_collapsed_in_this_pass = False
            for ptype, validator in PatternDetector.VALIDATORS:
                candidate_nodes = deque(sorted(self.decomposed_graph.nodes))
                while len(candidate_nodes) > 0:
                    n = candidate_nodes.popleft()
                    # n might have been absorbed into a pattern since we added
                    # it to the line
                    if n not in self.decomposed_graph.nodes:
                        continue
                    validation_results = validator(self.decomposed_graph, n)
                    if validation_results:
                        new_node_ids = []
                        if ptype == config.PT_FRAYEDROPE:
                            new_node_ids.extend(
                                self._duplicate_shared_rope_nodes(
                                    validation_results
                                )
                            )
                        p = self._add_pattern(validation_results)
                        candidate_nodes.append(p.pattern_id)
                        candidate_nodes.extend(new_node_ids)
                        something_collapsed_in_this_pass = True

            if not something_collapsed_in_this_pass:
                break

        self.done = True
        logger.debug(
            f"Identified {len(self.id2pattern):,} pattern(s) in "
            f"{num_passes:,} pass(es) over {self.graph_index}."
        )
        return self.patterns

    def _get_child(self, child_id):
        """Returns the Node or Pattern with a given ID."""
        if child_id in self.id2pattern:
            return self.id2pattern[child_id]
        return self.graph_index.get_node(child_id)

    def _add_pattern(self, validation_results):
        """Collapses a pattern into a single node in the decomposed graph.

        Parameters
        ----------
        validation_results: validators.ValidationResults
            Results from validating this pattern in the decomposed graph. We
            assume that this is the result of a *successful* validation, i.e.
            the is_valid attribute of this is True.

        Returns
        -------
        Pattern
        """
        dg = self.decomposed_graph
        pattern_id = self.graph_index.get_new_node_id()
        dg.add_node(pattern_id)
        member_ids = list(validation_results.nodes)
        members = set(member_ids)

        # For every edge from outside this pattern to a node within this
        # pattern: route this edge to just point (in the decomposed graph)
        # to the new pattern node. We'll remove the edge that this is
        # replacing soon, when we remove the members from the graph.
        for src, _, key in list(dg.in_edges(member_ids, keys=True)):
            if src not in members:
                self.graph_index.get_edge(key).reroute_dec_tgt(pattern_id)
                dg.add_edge(src, pattern_id, key=key, uid=key)

        # Same deal for edges from inside this pattern to outside it. Edges
        # between two members (including self-loops) are inside the pattern.
        child_edge_ids = []
        for _, tgt, key in list(dg.out_edges(member_ids, keys=True)):
            if tgt in members:
                child_edge_ids.append(key)
            else:
                self.graph_index.get_edge(key).reroute_dec_src(pattern_id)
                dg.add_edge(pattern_id, tgt, key=key, uid=key)

        dg.remove_nodes_from(member_ids)

        p = Pattern(
            pattern_id,
            validation_results.pattern_type,
            member_ids,
            edge_ids=child_edge_ids,
            start_node_ids=validation_results.start_node_ids,
            end_node_ids=validation_results.end_node_ids,
            source_id=validation_results.source_id,
            sink_id=validation_results.sink_id,
        )
        for eid in child_edge_ids:
            self.graph_index.get_edge(eid).parent_id = pattern_id
        for mid in member_ids:
            self._get_child(mid).parent_id = pattern_id
        self.id2pattern[pattern_id] = p

        # If this is a chain containing other chains, then merge them into it.
        # (A chain of chains is just a longer chain.)
        if p.pattern_type in (config.PT_CHAIN, config.PT_CYCLICCHAIN):
            for mid in member_ids:
                if (
                    mid in self.id2pattern
                    and self.id2pattern[mid].pattern_type == config.PT_CHAIN
                ):
                    self._merge_child_chain(p, self.id2pattern[mid])

        logger.debug(f"Identified {p}")
        return p

    def _merge_child_chain(self, p, child):
        """Merges a child chain into a pattern, removing the child chain.

        Edges between the child chain and its siblings in p point (in the
        decomposed graph) to the child chain. These edges can only enter the
        child chain through its start node, and leave through its end node --
        so that's where we send them now.
        """
        cid = child.pattern_id
        for eid in p.edge_ids:
            edge = self.graph_index.get_edge(eid)
            if edge.dec_src_id == cid:
                edge.reroute_dec_src(child.end_node_ids[0])
            if edge.dec_tgt_id == cid:
                edge.reroute_dec_tgt(child.start_node_ids[0])
        for eid in child.edge_ids:
            self.graph_index.get_edge(eid).parent_id = p.pattern_id
        for mid in child.node_ids:
            self._get_child(mid).parent_id = p.pattern_id
        p.absorb_child(child)
        del self.id2pattern[cid]
        logger.debug(f"Merged chain {cid} into {p.name}")

    def _duplicate_shared_rope_nodes(self, validation_results):
        r"""Duplicates nodes shared by this frayed rope and adjacent ropes.

        Consider two frayed ropes that share a node N:

        s1 -\ /-> e1    /-> f1
             m         N
        s2 -/ \-> N --m2
                  s3 -/ \-> f2

        N is an end node of the first rope, and a start node of the second.
        Collapsing the first rope would then break the second. So, we split
        N into N (which stays in the first rope) and a duplicate N' (which
        takes over N's outgoing edge, and can belong to the second rope):

        ... -> m -> N ==> N' -> m2 -> ...

        This works the same way in the opposite direction, if one of this
        rope's start nodes is an end node of another rope.

        We never duplicate pattern nodes -- just actual nodes.

        Parameters
        ----------
        validation_results: validators.ValidationResults
            Successful validation results for a frayed rope.

        Returns
        -------
        list of int
            IDs of the duplicate nodes created.
        """
        dg = self.decomposed_graph
        new_ids = []
        for t in validation_results.end_node_ids:
            if not self._can_duplicate(t):
                continue
            if validators.not_single_edge(dg, dg.adj[t]):
                continue
            if validators.is_valid_frayed_rope(dg, t):
                new_ids.append(self._duplicate_node(t, "out"))

        for s in validation_results.start_node_ids:
            if not self._can_duplicate(s):
                continue
            if validators.not_single_edge(dg, dg.pred[s]):
                continue
            m = list(dg.pred[s])[0]
            if m == s or len(dg.pred[m]) == 0:
                continue
            other_rope = validators.is_valid_frayed_rope(
                dg, sorted(dg.pred[m])[0]
            )
            if other_rope and s in other_rope.end_node_ids:
                new_ids.append(self._duplicate_node(s, "in"))
        return new_ids

    def _can_duplicate(self, node_id):
        return (
            self.graph_index.has_node(node_id)
            and not self.graph_index.get_node(node_id).is_dup
        )

    def _duplicate_node(self, node_id, take):
        """Duplicates a node in both the GraphIndex and decomposed graph."""
        dg = self.decomposed_graph
        dup, dup_edge, moved = self.graph_index.duplicate_node(node_id, take)
        dup_id = dup.unique_id
        dg.add_node(dup_id)
        for edge in moved:
            key = edge.unique_id
            if take == "out":
                dg.remove_edge(node_id, edge.dec_tgt_id, key=key)
                edge.reroute_dec_src(dup_id)
            else:
                dg.remove_edge(edge.dec_src_id, node_id, key=key)
                edge.reroute_dec_tgt(dup_id)
            dg.add_edge(edge.dec_src_id, edge.dec_tgt_id, key=key, uid=key)
        dg.add_edge(
            dup_edge.new_src_id,
            dup_edge.new_tgt_id,
            key=dup_edge.unique_id,
            uid=dup_edge.unique_id,
        )
        self.dup_node_ids.append(dup_id)
        return dup_id
