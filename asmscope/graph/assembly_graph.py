import math
import json
import os
import logging
from copy import deepcopy
import numpy
import networkx as nx
from .. import parsers, config
from ..layout import layout_config
from ..misc_utils import pluralize
from ..errors import GraphParsingError, NoViewableComponentsError, WeirdError
from .component import Component
from .graph_index import GraphIndex, IDCounter
from .hierarchy import PatternHierarchyBuilder
from .pattern_detector import PatternDetector
from .pattern_stats import PatternStats
from .node import Node
from .edge import Edge


logger = logging.getLogger(__name__)

# Attributes of nodes / edges in the exported data. Input graphs can't have
# attributes with these names, since they'd be ambiguous.
NODE_FIELDS = [
    "name",
    "length",
    "x",
    "y",
    "width",
    "height",
    "orientation",
    "parent_id",
    "is_dup",
    "extra_data",
]
EDGE_FIELDS = [
    "ctrl_pt_coords",
    "is_outlier",
    "relative_weight",
    "is_dup",
    "parent_id",
    "extra_data",
]
PATT_FIELDS = [
    "pattern_id",
    "left",
    "bottom",
    "right",
    "top",
    "width",
    "height",
    "pattern_type",
    "parent_id",
]

# "length" and "orientation" are fine as input node attributes -- these are
# how the input graph tells us those things, after all.
RESERVED_NODE_ATTRS = set(NODE_FIELDS) - {"length", "orientation"}
RESERVED_EDGE_ATTRS = set(EDGE_FIELDS)


class AssemblyGraph(object):
    """Representation of an assembly graph.

    In fancy object-oriented programming terminology, this class is a
    "composition" with NetworkX: rather than subclassing nx.MultiDiGraph, this
    class contains an instance of it (.graph) describing the input graph's
    structure, relabelled so that each node's ID is its Node object's
    unique_id.

    Pattern detection happens per component. Each Component has its own
    GraphIndex (describing its nodes and edges, including any duplicate nodes
    created during pattern detection) -- so, after pattern detection, .graph
    won't include duplicate nodes. Use the Components (or .nodeid2obj,
    .edgeid2obj, and .pattid2obj) to see everything.

    References
    ----------
    This "composition" paradigm was based on this post:
    https://www.thedigitalcatonline.com/blog/2014/08/20/python-3-oop-part-3-delegation-composition-and-inheritance/
    """

    def __init__(
        self,
        filename=None,
        digraph=None,
        max_node_count=config.MAXN_DEFAULT,
        max_edge_count=config.MAXE_DEFAULT,
    ):
        """Parses the input graph and initializes the AssemblyGraph.

        After you create a graph, you should usually call process() in order
        to scale nodes and edges, identify patterns, and lay out the graph.

        Parameters
        ----------
        filename: str or None
            Path to the assembly graph to be visualized. Exactly one of
            filename or digraph must be given.

        digraph: nx.DiGraph or nx.MultiDiGraph or None
            An already-parsed graph. Every node must have an "orientation"
            attribute, and can have a "length" attribute.

        max_node_count: int
            Components with more nodes than this won't be laid out.

        max_edge_count: int
            Components with more edges than this won't be laid out.
        """
        if (filename is None) == (digraph is None):
            raise WeirdError("Specify exactly one of filename or digraph")

        self.max_node_count = max_node_count
        self.max_edge_count = max_edge_count

        if filename is not None:
            self.filename = filename
            self.basename = os.path.basename(filename)
            logger.info(f'Loading input graph "{self.basename}"...')
            self.filetype = parsers.FILETYPE2HR[
                parsers.sniff_filetype(filename)
            ]
            self.graph = parsers.parse(filename)
            logger.info(f'...Loaded graph. Filetype: "{self.filetype}".')
        else:
            self.filename = None
            self.basename = None
            self.filetype = "NetworkX"
            digraph = parsers.make_multigraph_if_not_already(
                deepcopy(digraph)
            )
            parsers.validate_nx_digraph(digraph, ("orientation",), ())
            parsers.standardize_node_attrs(digraph)
            self.graph = digraph

        self.check_attrs()

        # These are the "raw" counts, before adding duplicate nodes and edges
        self.node_ct = len(self.graph.nodes)
        self.edge_ct = len(self.graph.edges)
        logger.info(
            f"Graph contains {self.node_ct:,} node(s) and {self.edge_ct:,} "
            "edge(s)."
        )

        # These store Node, Edge, and Pattern objects. We still use NetworkX
        # to identify connected components, but data about these objects
        # (both user-provided [e.g. "bsize"] and internal [e.g. "width"]) is
        # primarily stored in these objects.
        self.nodeid2obj = {}
        self.edgeid2obj = {}
        self.pattid2obj = {}

        # "Extra" data for nodes / edges -- e.g. GC content, coverage,
        # multiplicity, ... -- based on what we see in _init_graph_objs().
        self.extra_node_attrs = set()
        self.extra_edge_attrs = set()

        self._init_graph_objs()

        # Filled in by hierarchically_identify_patterns(). Sorted in
        # descending order of size.
        self.components = []
        self.pattern_stats = PatternStats()
        self.detection_done = False
        self.layout_done = False

    def __repr__(self):
        return (
            f"AssemblyGraph: {len(self.nodeid2obj):,} Node(s), "
            f"{len(self.edgeid2obj):,} Edge(s), "
            f"{len(self.pattid2obj):,} Pattern(s), "
            f"{len(self.components):,} Component(s)"
        )

    def check_attrs(self):
        """Raises a GraphParsingError if the input uses reserved attributes.

        Things like "x" and "parent_id" are computed by us, so we don't allow
        the input graph to also specify them.
        """
        node_attrs = set()
        for _, data in self.graph.nodes(data=True):
            node_attrs |= set(data.keys())
        edge_attrs = set()
        for _, _, data in self.graph.edges(data=True):
            edge_attrs |= set(data.keys())

        for objtype, seen, reserved in (
            ("Node", node_attrs, RESERVED_NODE_ATTRS),
            ("Edge", edge_attrs, RESERVED_EDGE_ATTRS),
        ):
            bad = seen & reserved
            if len(bad) > 0:
                raise GraphParsingError(
                    f"{objtype} attribute(s) {sorted(bad)} are reserved; "
                    "please rename them in the input graph."
                )

    def _init_graph_objs(self):
        """Initializes Node and Edge objects for the original graph.

        This clears the NetworkX data stored for each node and edge in the
        graph (don't worry, this data isn't lost -- it's saved in the
        corresponding Node and Edge objects).

        This also relabels nodes in the graph to match their corresponding
        Node object's unique_id, and adds an "uid" attribute to edges' NetworkX
        data that matches their corresponding Edge object's unique_id.
        """
        logger.debug("  Initializing node and edge graph objects...")
        oldid2uniqueid = {}
        for node_id, node_name in enumerate(self.graph.nodes):
            data = deepcopy(self.graph.nodes[node_name])
            orientation = data.pop("orientation")
            length = data.pop("length", None)
            self.nodeid2obj[node_id] = Node(
                node_id, str(node_name), length, orientation, data
            )
            self.extra_node_attrs |= set(data.keys())
            self.graph.nodes[node_name].clear()
            oldid2uniqueid[node_name] = node_id

        nx.relabel_nodes(self.graph, oldid2uniqueid, copy=False)

        for edge_id, (src, tgt, key, data) in enumerate(
            list(self.graph.edges(keys=True, data=True))
        ):
            edata = deepcopy(data)
            self.edgeid2obj[edge_id] = Edge(edge_id, src, tgt, edata)
            self.extra_edge_attrs |= set(edata.keys())
            self.graph.edges[src, tgt, key].clear()
            self.graph.edges[src, tgt, key]["uid"] = edge_id
        logger.debug("  ...Done.")

    def is_pattern(self, node_id):
        return node_id in self.pattid2obj

    def scale_nodes(self):
        """Scales nodes in the graph based on their lengths.

        This assigns two new attributes for each node:

        1. relative_length: a number in the range [0, 1]. Corresponds to
           where log(node length) falls in a range between log(min node
           length) and log(max node length), relative to the rest of the
           graph's nodes. Used for scaling node area.

        2. longside_proportion: another number in the range [0, 1], assigned
           based on the relative percentile range the node's log length
           falls into. Used for determining the proportions of a node, and
           how "long" it looks.

        Notes
        -----
        If at least one of the graph's nodes does not have a length, then
        we leave these attributes as None for all nodes; they'll get
        constant dimensions in compute_node_dimensions(). If all nodes in the
        graph have the same length, this will assign each node a
        relative_length of 0.5 and a longside_proportion of
        layout_config.MID_LONGSIDE_PROPORTION.
        """
        logger.debug("Scaling nodes based on lengths...")
        nodes = list(self.nodeid2obj.values())
        if len(nodes) == 0 or any(n.length is None for n in nodes):
            logger.debug("...Not all nodes have lengths; skipping.")
            return

        node_log_lengths = {
            n.unique_id: math.log(
                n.length, layout_config.NODE_SCALING_LOG_BASE
            )
            for n in nodes
        }
        min_log_len = min(node_log_lengths.values())
        max_log_len = max(node_log_lengths.values())
        if min_log_len == max_log_len:
            for n in nodes:
                n.relative_length = 0.5
                n.longside_proportion = layout_config.MID_LONGSIDE_PROPORTION
        else:
            log_len_range = max_log_len - min_log_len
            q25, q75 = numpy.percentile(
                list(node_log_lengths.values()), [25, 75]
            )
            for n in nodes:
                node_log_len = node_log_lengths[n.unique_id]
                n.relative_length = (
                    node_log_len - min_log_len
                ) / log_len_range
                if node_log_len < q25:
                    lp = layout_config.LOW_LONGSIDE_PROPORTION
                elif node_log_len < q75:
                    lp = layout_config.MID_LONGSIDE_PROPORTION
                else:
                    lp = layout_config.HIGH_LONGSIDE_PROPORTION
                n.longside_proportion = lp
        logger.debug("...Done.")

    def compute_node_dimensions(self):
        """Adds height and width attributes (in inches) to each node.

        It is assumed that scale_nodes() has already been called.
        Patterns are not assigned dimensions here, since those are based on
        the bounding box needed to contain their child elements.
        """
        for node in self.nodeid2obj.values():
            if node.relative_length is not None:
                area = layout_config.MIN_NODE_AREA + (
                    node.relative_length * layout_config.NODE_AREA_RANGE
                )
                node.width = area**node.longside_proportion
                node.height = area / node.width
            else:
                node.width = layout_config.NOLENGTH_NODE_WIDTH
                node.height = layout_config.NOLENGTH_NODE_HEIGHT

    def get_edge_weight_field(self, field_names=config.EDGE_WEIGHT_FIELDS):
        """Returns the name of the edge weight field this graph has.

        If the graph does not have any edge weight fields, or if only some
        edges have an edge weight field, returns None.

        Raises
        ------
        GraphParsingError
            If there are multiple edge weight fields.
        WeirdError
            If any of the edges in the graph are dup edges (we shouldn't have
            done pattern detection yet).
        """

        def _check_edge_weight_fields(edge_data):
            edge_fns = set(edge_data.keys()) & set(field_names)
            if len(edge_fns) > 1:
                raise GraphParsingError(
                    f"Graph has multiple 'edge weight' fields ({edge_fns}). "
                    "It's ambiguous which we should use for scaling."
                )
            elif len(edge_fns) == 1:
                return list(edge_fns)[0]
            else:
                return None

        chosen_fn = None
        for e in self.edgeid2obj.values():
            if e.is_dup:
                raise WeirdError("Dup edges shouldn't exist in the graph yet.")
            fn = _check_edge_weight_fields(e.data)
            if fn is None:
                return None
            else:
                if chosen_fn is None:
                    chosen_fn = fn
                elif chosen_fn != fn:
                    raise GraphParsingError(
                        "One edge has only the 'edge weight' field "
                        f"{chosen_fn}, while another has only {fn}. "
                        "It's ambiguous how we should do scaling."
                    )
        return chosen_fn

    def scale_edges(self):
        """Scales edges in the graph based on their weights, if present.

        If this graph has edge weights, this assigns two new attributes for
        each edge:

        1. is_outlier: one of config.OUTLIER_HIGH, config.OUTLIER_LOW, or
           config.OUTLIER_NONE. NOTE that if the graph has less than 4 edges,
           this'll just set all of these to config.OUTLIER_NONE (since with
           such a small number of data points the notion of "outliers" kinda
           breaks apart).

        2. relative_weight: a number in the range [0, 1]. If this edge is not
           an outlier, this corresponds to where this edge's weight falls
           within a range between the minimum non-outlier edge weight and the
           maximum non-outlier edge weight. If this edge is a low outlier, this
           will just be 0, and if this edge is a high outlier, this will just
           be 1.

        If edge weight scaling cannot be done for some or all edges
        (e.g. no edge weight data is available, or only one non-outlier edge
        exists) then this will assign config.OUTLIER_NONE and
        config.DEFAULT_RELATIVE_WEIGHT to the impacted edges.

        Outlier detection is done using "inner" Tukey fences, as described in
        Exploratory Data Analysis (1977).
        """

        def _assign_default_weight_attrs(edges):
            for edge in edges:
                edge.is_outlier = config.OUTLIER_NONE
                edge.relative_weight = config.DEFAULT_RELATIVE_WEIGHT

        ew_field = self.get_edge_weight_field()
        if ew_field is None:
            _assign_default_weight_attrs(self.edgeid2obj.values())
            return

        logger.debug(f'Scaling edges based on "{ew_field}"...')
        edges = list(self.edgeid2obj.values())
        weights = [float(e.data[ew_field]) for e in edges]
        non_outlier_edges = []
        non_outlier_edge_weights = []
        if len(weights) >= 4:
            # Calculate lower and upper Tukey fences. First, compute the
            # upper and lower quartiles (aka the 25th and 75th percentiles)
            lq, uq = numpy.percentile(weights, [25, 75])
            d = 1.5 * (uq - lq)
            lf = lq - d
            uf = uq + d
            for edge, ew in zip(edges, weights):
                if ew > uf:
                    edge.is_outlier = config.OUTLIER_HIGH
                    edge.relative_weight = 1
                elif ew < lf:
                    edge.is_outlier = config.OUTLIER_LOW
                    edge.relative_weight = 0
                else:
                    edge.is_outlier = config.OUTLIER_NONE
                    non_outlier_edges.append(edge)
                    non_outlier_edge_weights.append(ew)
        else:
            # There are < 4 edges, so consider all edges as "non-outliers."
            for edge, ew in zip(edges, weights):
                edge.is_outlier = config.OUTLIER_NONE
                non_outlier_edges.append(edge)
                non_outlier_edge_weights.append(ew)

        # Perform relative scaling for non-outlier edges, if possible.
        if (
            len(non_outlier_edges) >= 2
            and min(non_outlier_edge_weights) != max(non_outlier_edge_weights)
        ):
            min_ew = min(non_outlier_edge_weights)
            ew_range = max(non_outlier_edge_weights) - min_ew
            for edge, ew in zip(non_outlier_edges, non_outlier_edge_weights):
                edge.relative_weight = (ew - min_ew) / ew_range
        else:
            # Can't do edge scaling, so just assign this list of edges
            # "default" edge weight attributes
            _assign_default_weight_attrs(non_outlier_edges)
        logger.debug("...Done.")

    def hierarchically_identify_patterns(self):
        """Splits the graph into components and identifies their patterns.

        Each weakly connected component gets its own GraphIndex,
        PatternDetector, and PatternHierarchyBuilder. All components share
        the same ID counters, so that the IDs of duplicate nodes, dup edges,
        and patterns never collide across components.

        This leaves self.components sorted in descending order by number of
        nodes, then number of edges, then number of patterns. Each component
        is labelled with its 1-indexed size rank (its "cc_num").
        """
        if self.detection_done:
            raise WeirdError("Already identified patterns in this graph")
        logger.debug("Hierarchically identifying patterns in the graph...")
        get_new_node_id = IDCounter(len(self.nodeid2obj))
        get_new_edge_id = IDCounter(len(self.edgeid2obj))
        components = []
        for cc_node_ids in nx.weakly_connected_components(self.graph):
            cc_edge_ids = [
                uid
                for _, _, uid in self.graph.out_edges(cc_node_ids, data="uid")
            ]
            gi = GraphIndex(
                [self.nodeid2obj[n] for n in sorted(cc_node_ids)],
                [self.edgeid2obj[e] for e in sorted(cc_edge_ids)],
                get_new_node_id,
                get_new_edge_id,
            )
            detector = PatternDetector(gi)
            patterns = detector.run()
            forest = PatternHierarchyBuilder(patterns, gi.node_ids).build()
            id2obj = dict(gi.nodeid2obj)
            id2obj.update(detector.id2pattern)
            forest.assign_parent_ids(id2obj)

            cobj = Component(gi)
            cobj.set_patterns(patterns, forest, detector.get_stats())
            components.append(cobj)

            # Duplicate nodes and dup edges were added to the GraphIndex
            self.nodeid2obj.update(gi.nodeid2obj)
            self.edgeid2obj.update(gi.edgeid2obj)
            self.pattid2obj.update(detector.id2pattern)
            self.pattern_stats += cobj.pattern_stats

        self.components = sorted(
            components, key=lambda cobj: cobj.sort_key(), reverse=True
        )
        for i, cobj in enumerate(self.components, 1):
            cobj.set_cc_num(i)
        self.detection_done = True
        logger.debug(
            f"...Done. Found {self.pattern_stats} in "
            f"{pluralize(len(self.components), 'component')}."
        )

    def layout(self):
        """Lays out the graph's components, handling patterns specially.

        Components with more than self.max_node_count nodes or
        self.max_edge_count edges are skipped.

        Raises
        ------
        NoViewableComponentsError
            If every component was skipped, since then there would be
            nothing to draw.
        """
        # Importing this here means that you can do pattern detection without
        # having pygraphviz installed
        from ..layout.layout import layout_component

        if not self.detection_done:
            raise WeirdError("Identify patterns before doing layout")
        logger.info("Laying out the graph...")
        for cobj in self.components:
            if (
                cobj.num_nodes > self.max_node_count
                or cobj.num_edges > self.max_edge_count
            ):
                logger.info(f"  Skipping too-large {cobj}.")
                cobj.skipped = True
            else:
                layout_component(cobj)
        if all(cobj.skipped for cobj in self.components):
            raise NoViewableComponentsError(
                "Every component was too large to lay out. Try increasing "
                "the maximum node and/or edge counts."
            )
        self.layout_done = True
        logger.info("...Finished laying out the graph.")

    def process(self, layout=True):
        """Scales nodes and edges, identifies patterns, and (maybe) lays out.

        Scaling has to happen before pattern detection, so that duplicate
        nodes get the same dimensions as their originals.
        """
        logger.info("Processing the graph to prep for visualization...")
        self.scale_nodes()
        self.compute_node_dimensions()
        self.scale_edges()
        self.hierarchically_identify_patterns()
        if layout:
            self.layout()
        logger.info("...Done.")

    def to_dict(self):
        """Returns a dict representation of the graph usable as JSON.

        (The dict will need to be pushed through json.dumps() first in order
        to make it valid JSON, of course -- e.g. converting Nones to nulls,
        etc.)

        Each component is described by a dict with "nodes" (keyed by node
        ID), "edges" (keyed by source node ID, then target node ID), "patts"
        (a list in which every pattern comes before its child patterns),
        "bb" (the component's bounding box [width, height] in points) and
        "skipped". If a component was skipped during layout, its dict is
        just {"skipped": True}.

        Notes
        -----
        If layout hasn't been done, positions and bounding boxes are None.
        """
        if not self.detection_done:
            raise WeirdError("Identify patterns before calling to_dict()")

        node_attrs = {f: i for i, f in enumerate(NODE_FIELDS)}
        edge_attrs = {f: i for i, f in enumerate(EDGE_FIELDS)}
        patt_attrs = {f: i for i, f in enumerate(PATT_FIELDS)}

        def _to_pts(inches):
            if inches is None:
                return None
            return inches * layout_config.POINTS_PER_INCH

        def get_node_data(node):
            return [
                node.name,
                node.length,
                node.x,
                node.y,
                _to_pts(node.width),
                _to_pts(node.height),
                node.orientation,
                node.parent_id,
                node.is_dup,
                node.data,
            ]

        def get_edge_data(edge):
            return [
                edge.ctrl_pt_coords,
                edge.is_outlier,
                edge.relative_weight,
                edge.is_dup,
                edge.parent_id,
                edge.data,
            ]

        def get_patt_data(patt):
            return [
                patt.pattern_id,
                patt.left,
                patt.bottom,
                patt.right,
                patt.top,
                _to_pts(patt.width),
                _to_pts(patt.height),
                config.PT2HR_NOSPACE[patt.pattern_type],
                patt.parent_id,
            ]

        out = {
            "node_attrs": node_attrs,
            "edge_attrs": edge_attrs,
            "patt_attrs": patt_attrs,
            "extra_node_attrs": sorted(self.extra_node_attrs),
            "extra_edge_attrs": sorted(self.extra_edge_attrs),
            "components": [],
            "input_file_basename": self.basename,
            "input_file_type": self.filetype,
            "total_num_nodes": len(self.nodeid2obj),
            "total_num_edges": len(self.edgeid2obj),
        }

        for cobj in self.components:
            if cobj.skipped:
                out["components"].append({"skipped": True})
                continue
            this_component = {
                "nodes": {},
                "edges": {},
                "patts": [get_patt_data(p) for p in cobj.patterns],
                "bb": None if cobj.bb is None else list(cobj.bb),
                "skipped": False,
            }
            for node in cobj.nodes:
                this_component["nodes"][node.unique_id] = get_node_data(node)
            for edge in cobj.edges:
                src, tgt = edge.new_src_id, edge.new_tgt_id
                tgt2data = this_component["edges"].setdefault(src, {})
                if tgt in tgt2data:
                    raise WeirdError(f"Edge {src} -> {tgt} exported twice?")
                tgt2data[tgt] = get_edge_data(edge)
            out["components"].append(this_component)
        return out

    def to_json(self):
        """Calls self.to_dict() and then pushes that through json.dumps()."""
        return json.dumps(self.to_dict())

    def to_tsv(self, output_fp):
        """Writes out a TSV file describing connected component statistics.

        Parameters
        ----------
        output_fp: str
            Filepath to which we'll write out this TSV file.
        """
        logger.info(
            "Writing out graph component statistics to filepath "
            f'"{output_fp}"...'
        )
        output_stats = (
            "ComponentNumber\tTotalNodes\tDuplicateNodes\tTotalEdges\t"
            "Bubbles\tChains\tCyclicChains\tFrayedRopes\tMiscs\n"
        )
        for cc in self.components:
            row = [cc.cc_num, cc.num_nodes, cc.num_dup_nodes, cc.num_edges]
            row += cc.pattern_stats.counts()
            output_stats += "\t".join(str(v) for v in row) + "\n"
        with open(output_fp, "w") as fh:
            fh.write(output_stats)
        logger.info("...Done.")
