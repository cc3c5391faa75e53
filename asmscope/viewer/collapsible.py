import logging
from .. import config
from ..graph.hierarchy import PatternHierarchyBuilder
from ..layout.layout_utils import convert_ctrl_pts_to_dists_and_weights
from ..misc_utils import normalize_id, pluralize_children, verify_unique
from ..errors import NotFoundError, WeirdError


logger = logging.getLogger(__name__)


def edge_cyjs_id(edge_id):
    src, tgt = edge_id
    return f"{src}-{tgt}"


def pos_to_cyjs(pos):
    if pos is None:
        return None
    return {"x": pos[0], "y": pos[1]}


class CanonicalEdgeMap(object):
    """The true endpoints of the edges crossing a pattern's boundary.

    incoming maps edge ID -> (true source, true target) for edges entering
    the pattern, and outgoing does the same for edges leaving it. These
    never change, no matter what is collapsed.
    """

    def __init__(self, incoming, outgoing):
        shared = set(incoming) & set(outgoing)
        if len(shared) > 0:
            raise WeirdError(f"Edges {shared} both enter and leave a pattern")
        self.incoming = incoming
        self.outgoing = outgoing

    def __repr__(self):
        return (
            f"CanonicalEdgeMap({len(self.incoming):,} in, "
            f"{len(self.outgoing):,} out)"
        )

    @property
    def edge_ids(self):
        return set(self.incoming) | set(self.outgoing)


class InteriorSet(object):
    """Everything hidden when a pattern is collapsed.

    This includes all descendant nodes and patterns, and every edge with both
    endpoints inside the pattern (so the edge from the "end" of a cyclic chain
    back to its "start" is interior).
    """

    def __init__(self, node_ids, pattern_ids, edge_ids):
        self.node_ids = frozenset(node_ids)
        self.pattern_ids = frozenset(pattern_ids)
        self.edge_ids = frozenset(edge_ids)

    def __repr__(self):
        return (
            f"InteriorSet({len(self.node_ids):,} node(s), "
            f"{len(self.pattern_ids):,} pattern(s), "
            f"{len(self.edge_ids):,} edge(s))"
        )

    def __contains__(self, obj_id):
        return (
            obj_id in self.node_ids
            or obj_id in self.pattern_ids
            or obj_id in self.edge_ids
        )


def build_edge_maps(forest, edges):
    """Computes the CanonicalEdgeMap and InteriorSet of every pattern.

    Parameters
    ----------
    forest: PatternForest

    edges: list of EdgeRecord

    Returns
    -------
    (dict, dict)
        Maps pattern ID -> CanonicalEdgeMap, and pattern ID -> InteriorSet.

    Notes
    -----
    An edge "enters" a pattern if its target is inside the pattern, and it
    "leaves" a pattern if its source is. Edges that do both are left out of
    both maps, and are treated as interior.
    """
    # Index edges by endpoint, so each pattern only looks at the edges
    # touching its own descendant nodes
    node2in = {}
    node2out = {}
    for e in edges:
        node2in.setdefault(e.tgt_id, []).append(e)
        node2out.setdefault(e.src_id, []).append(e)

    edge_maps = {}
    interiors = {}
    for pid in forest.order:
        desc_nodes = forest.descendant_node_ids(pid)
        incomers = {}
        outgoers = {}
        for n in sorted(desc_nodes):
            for e in node2in.get(n, []):
                incomers[e.edge_id] = (e.src_id, e.tgt_id)
            for e in node2out.get(n, []):
                outgoers[e.edge_id] = (e.src_id, e.tgt_id)
        incoming = {
            eid: ends for eid, ends in incomers.items() if eid not in outgoers
        }
        outgoing = {
            eid: ends for eid, ends in outgoers.items() if eid not in incomers
        }
        interior_edges = (set(incomers) | set(outgoers)) - (
            set(incoming) | set(outgoing)
        )
        edge_maps[pid] = CanonicalEdgeMap(incoming, outgoing)
        interiors[pid] = InteriorSet(
            desc_nodes, forest.descendant_pattern_ids(pid), interior_edges
        )
    return edge_maps, interiors


class CollapsibleGraphModel(object):
    """The state of one or more drawn components, with collapsible patterns.

    Every pattern has a collapse flag, which starts out as False (expanded).
    Everything else -- which elements are visible, where each edge currently
    points, and which edges are "simplified" -- is derived from these flags,
    the pattern forest, and the canonical edge maps. So collapsing and then
    uncollapsing a pattern always gets us back to exactly where we started,
    regardless of what else is collapsed.

    The edge maps and interior sets live in side tables here; nothing is
    written back to the records we were given.
    """

    def __init__(self, components):
        """Initializes this model.

        Parameters
        ----------
        components: list of ComponentRecord
            The components to draw. They'll be stacked vertically in this
            order, separated by config.COMPONENT_PADDING points.
        """
        if len(components) == 0:
            raise WeirdError("Need at least one component to draw")
        verify_unique([c.cc_num for c in components], "component ranks")

        self.components = list(components)
        self.nodes = {}
        self.edges = {}
        self.patterns = {}
        order = []
        for cmp in self.components:
            self.nodes.update(cmp.nodes)
            for e in cmp.iter_edges():
                self.edges[e.edge_id] = e
            for p in cmp.patterns:
                self.patterns[p.pattern_id] = p
            order.extend(p.pattern_id for p in cmp.patterns)
        verify_unique(order, "pattern IDs")

        self.forest = PatternHierarchyBuilder(
            self.patterns.values(), self.nodes.keys()
        ).build()
        # Keep each component's patterns together, in the order they were
        # given to us (parents first)
        self.pattern_order = order

        self.edge_maps, self.interiors = build_edge_maps(
            self.forest, list(self.edges.values())
        )
        self.collapsed = {pid: False for pid in self.pattern_order}

        # Vertical offset used to flip each component's y-coordinates
        self._cc2dy = {}
        y_offset = 0
        for cmp in self.components:
            self._cc2dy[cmp.cc_num] = y_offset + cmp.bb_height
            y_offset += cmp.bb_height + config.COMPONENT_PADDING

        self._edge_geometry = {
            eid: self._compute_edge_geometry(e)
            for eid, e in self.edges.items()
        }

        self._listeners = []
        self._in_operation = False
        logger.debug(
            f"Initialized collapsible model: {len(self.nodes):,} node(s), "
            f"{len(self.edges):,} edge(s), {len(self.patterns):,} "
            "pattern(s)."
        )

    def __repr__(self):
        num_collapsed = sum(self.collapsed.values())
        return (
            f"CollapsibleGraphModel({len(self.patterns):,} pattern(s), "
            f"{num_collapsed:,} collapsed)"
        )

    @classmethod
    def from_data_holder(cls, data_holder, size_ranks=None):
        """Creates a model for some components in a DataHolder.

        If size_ranks is None, we'll just use the lowest size rank that was
        laid out (see DataHolder.smallest_viewable_component()). Size ranks
        are 1-indexed and sorted by decreasing component size, so this is the
        largest component that wasn't skipped.
        """
        if size_ranks is None:
            size_ranks = [data_holder.smallest_viewable_component()]
        return cls([data_holder.get_component(r) for r in size_ranks])

    ###########################################################################
    # Geometry
    ###########################################################################

    def _get_dy(self, cc_num):
        return self._cc2dy[cc_num]

    def _node_pos(self, node):
        if not node.has_position:
            return None
        return (node.x, self._get_dy(node.cc_num) - node.y)

    def _pattern_pos(self, patt):
        if not patt.has_position:
            return None
        x = (patt.left + patt.right) / 2
        y = self._get_dy(patt.cc_num) - (patt.bottom + patt.top) / 2
        return (x, y)

    def _compute_edge_geometry(self, edge):
        """Returns (is_complex, dists, weights) for an edge."""
        if edge.is_self_loop or edge.ctrl_pt_coords is None:
            return (False, [], [])
        src_pos = self._node_pos(self.nodes[edge.src_id])
        tgt_pos = self._node_pos(self.nodes[edge.tgt_id])
        if src_pos is None or tgt_pos is None:
            return (False, [], [])
        return convert_ctrl_pts_to_dists_and_weights(
            src_pos,
            tgt_pos,
            edge.ctrl_pt_coords,
            self._get_dy(edge.cc_num),
        )

    ###########################################################################
    # Derived state
    ###########################################################################

    def _get_pattern(self, pattern_id):
        pid = normalize_id(pattern_id)
        if pid not in self.patterns:
            raise NotFoundError(f"Pattern {pattern_id} not found in data.")
        return pid

    def get_active_id(self, obj_id):
        """Returns the ID that a node or pattern is currently drawn as.

        This is the outermost collapsed ancestor of obj_id, or obj_id itself
        if none of its ancestors are collapsed.
        """
        active = obj_id
        for anc in self.forest.ancestors(obj_id):
            if self.collapsed[anc]:
                active = anc
        return active

    def is_hidden(self, obj_id):
        """True if any strict ancestor of a node / pattern is collapsed."""
        return any(self.collapsed[a] for a in self.forest.ancestors(obj_id))

    def get_active_endpoints(self, edge_id):
        src, tgt = edge_id
        return (self.get_active_id(src), self.get_active_id(tgt))

    def is_edge_visible(self, edge_id):
        src, tgt = edge_id
        active_src, active_tgt = self.get_active_endpoints(edge_id)
        if src == tgt:
            return active_src == src
        return active_src != active_tgt

    def is_edge_simplified(self, edge_id):
        """True if at least one of an edge's endpoints has been redirected."""
        return self.get_active_endpoints(edge_id) != edge_id

    def _get_state(self, obj_id):
        if obj_id in self.edges:
            return (
                self.is_edge_visible(obj_id),
                self.get_active_endpoints(obj_id),
                self.is_edge_simplified(obj_id),
            )
        if obj_id in self.patterns:
            return (not self.is_hidden(obj_id), self.collapsed[obj_id])
        return (not self.is_hidden(obj_id),)

    def _affected_ids(self, pattern_id):
        interior = self.interiors[pattern_id]
        return (
            [pattern_id]
            + sorted(interior.pattern_ids)
            + sorted(interior.node_ids)
            + sorted(interior.edge_ids)
            + sorted(self.edge_maps[pattern_id].edge_ids)
        )

    ###########################################################################
    # Operations
    ###########################################################################

    def add_listener(self, fn):
        """Registers a function to be called after each change.

        fn will be called once per collapse / uncollapse / toggle /
        collapse_all / expand_all call that changes anything, with a list of
        the IDs of the nodes, patterns, and edges whose state changed.
        """
        self._listeners.append(fn)

    def remove_listener(self, fn):
        self._listeners.remove(fn)

    def _run(self, pattern_ids, target):
        if self._in_operation:
            raise WeirdError(
                "Can't start a collapse / uncollapse while another is running"
            )
        self._in_operation = True
        try:
            # dict keeps the first-seen order while dropping repeats
            affected = {}
            for pid in pattern_ids:
                affected.update(dict.fromkeys(self._affected_ids(pid)))
            before = {obj_id: self._get_state(obj_id) for obj_id in affected}
            for pid in pattern_ids:
                self.collapsed[pid] = target
            changed = [
                obj_id
                for obj_id in affected
                if self._get_state(obj_id) != before[obj_id]
            ]
            if len(changed) > 0:
                for fn in list(self._listeners):
                    fn(changed)
        finally:
            self._in_operation = False
        return changed

    def collapse(self, pattern_id):
        """Collapses a pattern. Does nothing if it is already collapsed.

        Returns
        -------
        list
            IDs of the nodes, patterns, and edges whose state changed.
        """
        pid = self._get_pattern(pattern_id)
        if self.collapsed[pid]:
            return []
        logger.debug(f"Collapsing pattern {pid}.")
        return self._run([pid], True)

    def uncollapse(self, pattern_id):
        """Uncollapses a pattern. Does nothing if it is already expanded.

        The collapse flags of the pattern's descendants aren't touched, so
        anything inside this pattern that was collapsed stays collapsed.
        """
        pid = self._get_pattern(pattern_id)
        if not self.collapsed[pid]:
            return []
        logger.debug(f"Uncollapsing pattern {pid}.")
        return self._run([pid], False)

    def toggle(self, pattern_id):
        pid = self._get_pattern(pattern_id)
        if self.collapsed[pid]:
            return self.uncollapse(pid)
        return self.collapse(pid)

    def _set_all_top_level(self, target):
        to_change = [
            pid
            for pid in self.pattern_order
            if self.forest.parent_of(pid) is None
            and self.collapsed[pid] != target
        ]
        if len(to_change) == 0:
            return []
        return self._run(to_change, target)

    def collapse_all(self):
        """Collapses every top-level pattern that isn't already collapsed."""
        return self._set_all_top_level(True)

    def expand_all(self):
        """Uncollapses every top-level pattern that is currently collapsed."""
        return self._set_all_top_level(False)

    ###########################################################################
    # Drawing
    ###########################################################################

    def _pattern_to_cyjs(self, patt):
        pid = patt.pattern_id
        num_children = len(self.forest.children(pid))
        ele = {
            "data": {
                "id": str(pid),
                "w": patt.width,
                "h": patt.height,
                "isCollapsed": self.collapsed[pid],
                "collapsedLabel": pluralize_children(num_children),
            },
            "position": pos_to_cyjs(self._pattern_pos(patt)),
            "classes": f"pattern {config.PT2CLASS[patt.pattern_type]}",
        }
        if patt.parent_id is not None:
            ele["data"]["parent"] = str(patt.parent_id)
        return ele

    def _node_to_cyjs(self, node):
        ndir = "rightdir" if node.orientation == config.FWD else "leftdir"
        classes = f"basic {ndir}"
        if node.is_dup:
            classes += " is_dup"
        ele = {
            "data": {
                "id": str(node.node_id),
                "label": node.name,
                "length": node.length,
                "w": node.width,
                "h": node.height,
            },
            "position": pos_to_cyjs(self._node_pos(node)),
            "classes": classes,
        }
        if node.parent_id is not None:
            ele["data"]["parent"] = str(node.parent_id)
        return ele

    def _edge_to_cyjs(self, edge):
        eid = edge.edge_id
        active_src, active_tgt = self.get_active_endpoints(eid)
        thickness = config.MIN_EDGE_THICKNESS + edge.relative_weight * (
            config.MAX_EDGE_THICKNESS - config.MIN_EDGE_THICKNESS
        )
        classes = "oriented"
        if edge.is_outlier == config.OUTLIER_HIGH:
            classes += " high_outlier"
        elif edge.is_outlier == config.OUTLIER_LOW:
            classes += " low_outlier"
        if edge.is_dup:
            classes += " is_dup"

        data = {
            "id": edge_cyjs_id(eid),
            "source": str(active_src),
            "target": str(active_tgt),
            "thickness": thickness,
        }
        if edge.parent_id is not None:
            data["parent"] = str(edge.parent_id)

        is_complex, dists, weights = self._edge_geometry[eid]
        if is_complex:
            # Hold on to these even when simplified, so that the renderer
            # can switch back to the curve without asking us again
            data["cpd"] = " ".join(f"{d:.2f}" for d in dists)
            data["cpw"] = " ".join(f"{w:.2f}" for w in weights)

        if self.is_edge_simplified(eid):
            classes += " basicbezier not_using_ports"
        elif is_complex:
            classes += " unbundledbezier"
        else:
            classes += " basicbezier"
        return {"data": data, "classes": classes}

    def get_drawable(self):
        """Returns the currently visible elements, in Cytoscape.js format.

        Patterns come first (parents before children), then nodes, then
        edges. Node and pattern positions are None if the component wasn't
        laid out.
        """
        eles = []
        for pid in self.pattern_order:
            if not self.is_hidden(pid):
                eles.append(self._pattern_to_cyjs(self.patterns[pid]))
        for nid in sorted(self.nodes):
            if not self.is_hidden(nid):
                eles.append(self._node_to_cyjs(self.nodes[nid]))
        for eid in sorted(self.edges):
            if self.is_edge_visible(eid):
                eles.append(self._edge_to_cyjs(self.edges[eid]))
        return eles

    def get_visible_ids(self):
        """Returns the set of IDs of all visible nodes, patterns, and edges.

        Useful for checking that a sequence of operations left the visible
        graph as it was.
        """
        visible = set()
        for pid in self.pattern_order:
            if not self.is_hidden(pid):
                visible.add(pid)
        for nid in self.nodes:
            if not self.is_hidden(nid):
                visible.add(nid)
        for eid in self.edges:
            if self.is_edge_visible(eid):
                visible.add((eid, self.get_active_endpoints(eid)))
        return visible
