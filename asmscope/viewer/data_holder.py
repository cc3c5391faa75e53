import json
import logging
from .. import config
from ..graph.hierarchy import PatternHierarchyBuilder
from ..misc_utils import normalize_id
from ..errors import (
    GraphError,
    GraphParsingError,
    HierarchyError,
    NoViewableComponentsError,
    NotFoundError,
    InvalidComponentRankError,
    ComponentRankTooLargeError,
)


logger = logging.getLogger(__name__)


def _get(vals, attrs, field):
    return vals[attrs[field]]


class NodeRecord(object):
    """A node, as read back in from stored data."""

    def __init__(
        self,
        node_id,
        name,
        length,
        x,
        y,
        width,
        height,
        orientation,
        parent_id,
        is_dup,
        extra_data,
        cc_num=None,
    ):
        if orientation not in (config.FWD, config.REV):
            raise GraphParsingError(f"Invalid node orientation {orientation}")
        self.node_id = node_id
        self.name = name
        self.length = length
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.orientation = orientation
        self.parent_id = parent_id
        self.is_dup = is_dup
        self.extra_data = extra_data
        self.cc_num = cc_num

    def __repr__(self):
        return f"NodeRecord({self.node_id}, name={self.name})"

    @classmethod
    def from_list(cls, node_id, vals, attrs, cc_num=None):
        return cls(
            normalize_id(node_id),
            _get(vals, attrs, "name"),
            _get(vals, attrs, "length"),
            _get(vals, attrs, "x"),
            _get(vals, attrs, "y"),
            _get(vals, attrs, "width"),
            _get(vals, attrs, "height"),
            _get(vals, attrs, "orientation"),
            _get(vals, attrs, "parent_id"),
            _get(vals, attrs, "is_dup"),
            _get(vals, attrs, "extra_data"),
            cc_num=cc_num,
        )

    @property
    def has_position(self):
        return self.x is not None and self.y is not None


class EdgeRecord(object):
    """An edge, as read back in from stored data.

    Edges are identified by their (source ID, target ID) pair, since the
    stored data never contains parallel edges.
    """

    def __init__(
        self,
        src_id,
        tgt_id,
        ctrl_pt_coords,
        is_outlier,
        relative_weight,
        is_dup,
        parent_id,
        extra_data,
        cc_num=None,
    ):
        self.src_id = src_id
        self.tgt_id = tgt_id
        self.ctrl_pt_coords = ctrl_pt_coords
        self.is_outlier = is_outlier
        self.relative_weight = relative_weight
        self.is_dup = is_dup
        self.parent_id = parent_id
        self.extra_data = extra_data
        self.cc_num = cc_num

    def __repr__(self):
        return f"EdgeRecord({self.src_id} -> {self.tgt_id})"

    @property
    def edge_id(self):
        return (self.src_id, self.tgt_id)

    @property
    def is_self_loop(self):
        return self.src_id == self.tgt_id

    @classmethod
    def from_list(cls, src_id, tgt_id, vals, attrs, cc_num=None):
        return cls(
            normalize_id(src_id),
            normalize_id(tgt_id),
            _get(vals, attrs, "ctrl_pt_coords"),
            _get(vals, attrs, "is_outlier"),
            _get(vals, attrs, "relative_weight"),
            _get(vals, attrs, "is_dup"),
            _get(vals, attrs, "parent_id"),
            _get(vals, attrs, "extra_data"),
            cc_num=cc_num,
        )


class PatternRecord(object):
    """A pattern, as read back in from stored data.

    The stored data doesn't list the members of each pattern (each node and
    pattern just knows its parent_id), so node_ids is filled in by the
    ComponentRecord that owns this pattern.
    """

    def __init__(
        self,
        pattern_id,
        left,
        bottom,
        right,
        top,
        width,
        height,
        pattern_type,
        parent_id,
        cc_num=None,
    ):
        self.pattern_id = pattern_id
        self.left = left
        self.bottom = bottom
        self.right = right
        self.top = top
        self.width = width
        self.height = height
        self.pattern_type = self.parse_pattern_type(pattern_type)
        self.parent_id = parent_id
        self.cc_num = cc_num
        self.node_ids = []

    def __repr__(self):
        return (
            f"PatternRecord({self.pattern_id}, "
            f"{config.PT2HR[self.pattern_type]})"
        )

    @staticmethod
    def parse_pattern_type(pattern_type):
        """Accepts either a PT_* constant or its stored name (e.g. "chain")."""
        if pattern_type in config.HR_NOSPACE2PT:
            return config.HR_NOSPACE2PT[pattern_type]
        if pattern_type in config.PT2HR:
            return pattern_type
        raise GraphError(f"Unrecognized pattern type {pattern_type}")

    @classmethod
    def from_list(cls, vals, attrs, cc_num=None):
        return cls(
            _get(vals, attrs, "pattern_id"),
            _get(vals, attrs, "left"),
            _get(vals, attrs, "bottom"),
            _get(vals, attrs, "right"),
            _get(vals, attrs, "top"),
            _get(vals, attrs, "width"),
            _get(vals, attrs, "height"),
            _get(vals, attrs, "pattern_type"),
            _get(vals, attrs, "parent_id"),
            cc_num=cc_num,
        )

    @property
    def has_position(self):
        return self.left is not None


class ComponentRecord(object):
    """The stored nodes, edges, and patterns of one laid-out component."""

    def __init__(self, cc_num, nodes, edges, patterns, bb):
        """Initializes this ComponentRecord, and checks its patterns.

        Parameters
        ----------
        cc_num: int
            Size rank of this component.

        nodes: list of NodeRecord

        edges: list of EdgeRecord

        patterns: list of PatternRecord
            Should be in an order where every pattern comes before its
            children.

        bb: list or None
            [width, height] of this component's bounding box, in points.

        Raises
        ------
        HierarchyError
            If a pattern comes before its parent, or if the containment
            relationships are otherwise broken.
        """
        self.cc_num = cc_num
        self.nodes = {n.node_id: n for n in nodes}
        self.edges = {}
        for e in edges:
            self.edges.setdefault(e.src_id, {})[e.tgt_id] = e
        self.patterns = list(patterns)
        self.bb = bb

        id2patt = {p.pattern_id: p for p in self.patterns}
        seen = set()
        for p in self.patterns:
            if p.parent_id is not None and p.parent_id not in seen:
                raise HierarchyError(
                    f"Pattern {p.pattern_id} is listed before its parent "
                    f"{p.parent_id}"
                )
            seen.add(p.pattern_id)

        for obj in list(self.nodes.values()) + self.patterns:
            if obj.parent_id is not None:
                if obj.parent_id not in id2patt:
                    raise HierarchyError(
                        f"{obj} has unknown parent {obj.parent_id}"
                    )
                oid = getattr(obj, "pattern_id", None)
                if oid is None:
                    oid = obj.node_id
                id2patt[obj.parent_id].node_ids.append(oid)

        self.forest = PatternHierarchyBuilder(
            self.patterns, self.nodes.keys()
        ).build()

    def __repr__(self):
        return (
            f"ComponentRecord {self.cc_num}: {len(self.nodes):,} node(s), "
            f"{len(self.patterns):,} pattern(s)"
        )

    def iter_edges(self):
        for tgt2edge in self.edges.values():
            yield from tgt2edge.values()

    @property
    def bb_height(self):
        if self.bb is None:
            return 0
        return self.bb[1]


class DataHolder(object):
    """Reads the stored output of AssemblyGraph.to_dict().

    This is what the viewer side of things uses to figure out what is in the
    graph. Component size ranks are 1-indexed (so the largest component is
    component 1), and IDs can be given either as ints or as the strings that
    a trip through JSON turns them into.
    """

    def __init__(self, data):
        """Initializes this DataHolder.

        Parameters
        ----------
        data: dict
            Output of AssemblyGraph.to_dict(), possibly after a round trip
            through json.dumps() and json.loads().
        """
        self.data = data
        self.node_attrs = data["node_attrs"]
        self.edge_attrs = data["edge_attrs"]
        self.patt_attrs = data["patt_attrs"]
        self.extra_node_attrs = data.get("extra_node_attrs", [])
        self.extra_edge_attrs = data.get("extra_edge_attrs", [])

        # None for skipped components
        self.components = []
        for cc_num, cmp in enumerate(data["components"], 1):
            if cmp.get("skipped", False):
                self.components.append(None)
            else:
                self.components.append(self._load_component(cc_num, cmp))
        logger.debug(
            f"Loaded data for {self.num_components:,} component(s), "
            f"{len(self.get_all_laid_out_component_ranks()):,} laid out."
        )

    @classmethod
    def from_json(cls, json_text):
        return cls(json.loads(json_text))

    @classmethod
    def from_file(cls, filepath):
        with open(filepath, "r") as fh:
            return cls(json.load(fh))

    def _load_component(self, cc_num, cmp):
        nodes = [
            NodeRecord.from_list(nid, vals, self.node_attrs, cc_num=cc_num)
            for nid, vals in cmp["nodes"].items()
        ]
        edges = []
        for src, tgt2vals in cmp["edges"].items():
            for tgt, vals in tgt2vals.items():
                edges.append(
                    EdgeRecord.from_list(
                        src, tgt, vals, self.edge_attrs, cc_num=cc_num
                    )
                )
        patterns = [
            PatternRecord.from_list(vals, self.patt_attrs, cc_num=cc_num)
            for vals in cmp["patts"]
        ]
        return ComponentRecord(cc_num, nodes, edges, patterns, cmp["bb"])

    def _laid_out_components(self):
        return [c for c in self.components if c is not None]

    @property
    def num_components(self):
        return len(self.components)

    @property
    def total_num_nodes(self):
        return self.data["total_num_nodes"]

    @property
    def total_num_edges(self):
        return self.data["total_num_edges"]

    @property
    def file_type(self):
        return self.data["input_file_type"]

    @property
    def file_name(self):
        return self.data["input_file_basename"]

    def smallest_viewable_component(self):
        """Returns the smallest size rank of a component that was laid out.

        Since components are sorted from largest to smallest, this is the
        largest component we can actually draw.

        Raises
        ------
        NoViewableComponentsError
            If every component in the graph was skipped.
        """
        for i, cmp in enumerate(self.components, 1):
            if cmp is not None:
                return i
        raise NoViewableComponentsError(
            "No components were laid out -- every component was skipped."
        )

    def find_component_containing_node_name(self, name):
        """Returns the size rank of the component containing a node name.

        Skipped components are not searched. This is case sensitive. If no
        laid-out component contains this name, returns -1.
        """
        for cmp in self._laid_out_components():
            if any(n.name == name for n in cmp.nodes.values()):
                return cmp.cc_num
        return -1

    def get_all_laid_out_component_ranks(self):
        return [c.cc_num for c in self._laid_out_components()]

    def validate_component_rank(self, size_rank):
        """Checks that a size rank is in [1, number of components].

        Raises
        ------
        InvalidComponentRankError
            If size_rank isn't a positive integer.

        ComponentRankTooLargeError
            If size_rank is larger than the number of components.
        """
        # bool is a subclass of int, but True isn't a component rank
        if type(size_rank) is not int or size_rank < 1:
            raise InvalidComponentRankError(
                f"Size rank of {size_rank} isn't a positive integer"
            )
        if size_rank > self.num_components:
            raise ComponentRankTooLargeError(
                f"Size rank of {size_rank} is too large: only "
                f"{self.num_components} components in the graph"
            )

    def get_component(self, size_rank):
        """Returns the ComponentRecord with a given size rank.

        Raises
        ------
        NotFoundError
            If this component was skipped during layout.
        """
        self.validate_component_rank(size_rank)
        cmp = self.components[size_rank - 1]
        if cmp is None:
            raise NotFoundError(
                f"Component {size_rank} was skipped, so it has no data."
            )
        return cmp

    def get_patterns_in_component(self, size_rank):
        return self.get_component(size_rank).patterns

    def get_nodes_in_component(self, size_rank):
        return self.get_component(size_rank).nodes

    def get_edges_in_component(self, size_rank):
        return self.get_component(size_rank).edges

    def get_component_bounding_box(self, size_rank):
        return self.get_component(size_rank).bb

    def get_node_info(self, node_id):
        nid = normalize_id(node_id)
        for cmp in self._laid_out_components():
            if nid in cmp.nodes:
                return cmp.nodes[nid]
        raise NotFoundError(f"Node {node_id} not found in data.")

    def get_node_name(self, node_id):
        return self.get_node_info(node_id).name

    def get_edge_info(self, src_id, tgt_id):
        src = normalize_id(src_id)
        tgt = normalize_id(tgt_id)
        for cmp in self._laid_out_components():
            if src in cmp.edges:
                if tgt in cmp.edges[src]:
                    return cmp.edges[src][tgt]
                raise NotFoundError(
                    f"Found source node {src_id} but couldn't find an edge "
                    f"from it to the target node {tgt_id}."
                )
        raise NotFoundError(
            f"Edge from {src_id} to {tgt_id} not found in data."
        )

    def get_pattern_info(self, pattern_id):
        pid = normalize_id(pattern_id)
        if type(pid) is not int or pid < 0:
            raise NotFoundError(
                f"Pattern ID {pattern_id} is not a nonnegative integer."
            )
        for cmp in self._laid_out_components():
            for p in cmp.patterns:
                if p.pattern_id == pid:
                    return p
        raise NotFoundError(f"Pattern {pattern_id} not found in data.")
