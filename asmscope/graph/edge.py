# Copyright (C) 2016-- Marcus Fedarko, Jay Ghurye, Todd Treangen, Mihai Pop
# Authored by Marcus Fedarko
#
# This file is part of AsmScope.
#
# AsmScope is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# AsmScope is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with AsmScope.  If not, see <http://www.gnu.org/licenses/>.


from asmscope import config
from asmscope.layout import layout_config, layout_utils
from asmscope.errors import WeirdError


class Edge(object):
    """Represents an edge in an assembly graph.

    Similarly to the Node class, Edges can have wildly varying amounts of data
    depending on the input graph.

    All Edge objects should be created either (1) soon after we load the input
    assembly graph, or (2) whenever pattern detection duplicates a node (when
    we add a "dup" edge linking the original node and its duplicate).

    As we duplicate nodes and collapse patterns in the graph, we may need to
    re-route edges. What two nodes does an edge actually connect? You can
    think of three "levels" of this:

    1. The original source and target ID of an edge. These correspond to the
       IDs of nodes in the input assembly graph (or, for a dup edge, to the
       original node and its duplicate). These are stored in orig_src_id and
       orig_tgt_id, and should never be modified.

    2. The current source and target ID of an edge in the GraphIndex. These
       still correspond to node IDs, but can change if one of the edge's
       nodes is duplicated and the duplicate takes over this edge. If you
       draw out all the edges in the graph at this level, you'd see the
       original graph -- albeit with some duplicate nodes and dup edges.

       These are stored in new_src_id and new_tgt_id; use reroute_src() and
       reroute_tgt() to update them.

    3. The source and target ID of an edge in the decomposed graph (where
       detected patterns have been collapsed into single nodes). If at least
       one of this edge's nodes is inside a pattern that doesn't also contain
       the other node, then at least one of these will point to a pattern.

       These are stored in dec_src_id and dec_tgt_id; use reroute_dec_src()
       and reroute_dec_tgt() to update them.
    """

    def __init__(
        self, unique_id, orig_src_id, orig_tgt_id, data=None, is_dup=False
    ):
        """Initializes this Edge object.

        Parameters
        ----------
        unique_id: int
            Unique (with respect to all other edges in the assembly graph)
            integer ID of this edge.

        orig_src_id: int
            Unique ID of the original source node of this edge. This should
            correspond to an actual Node, not a pattern.

        orig_tgt_id: int
            Unique ID of the original target node of this edge.

        data: dict or None
            Maps field names (e.g. "bsize", "multiplicity", ...) to their
            values for this edge.

        is_dup: bool
            If True, this edge links a node with one of its duplicates.
        """
        self.unique_id = unique_id
        self.orig_src_id = orig_src_id
        self.orig_tgt_id = orig_tgt_id
        if data is None:
            data = {}
        self.data = data
        self.is_dup = is_dup

        self.new_src_id = orig_src_id
        self.new_tgt_id = orig_tgt_id

        self.dec_src_id = orig_src_id
        self.dec_tgt_id = orig_tgt_id

        # Filled in during layout. Absolute coords, in points.
        self.ctrl_pt_coords = None
        # Coords relative to this edge's parent pattern.
        self.relative_ctrl_pt_coords = None

        # Filled in during edge scaling; see AssemblyGraph.scale_edges().
        # Dup edges are never scaled, so they just keep these defaults.
        self.is_outlier = config.OUTLIER_NONE
        self.relative_weight = config.DEFAULT_RELATIVE_WEIGHT

        # ID of the pattern containing this edge, or None if this edge
        # exists in the top level of the graph. You can think of the parent
        # pattern of an edge as the "least common ancestor" pattern that
        # contains both of an edge's nodes.
        self.parent_id = None

        # Number (1-indexed) of the connected component containing this edge.
        self.cc_num = None

    def __repr__(self):
        return (
            f"Edge {self.unique_id} (orig: {self.orig_src_id} -> "
            f"{self.orig_tgt_id}; new: {self.new_src_id} -> "
            f"{self.new_tgt_id}; dec: {self.dec_src_id} -> "
            f"{self.dec_tgt_id})"
        )

    def is_self_loop(self):
        return self.new_src_id == self.new_tgt_id

    def reroute_src(self, new_src_id):
        self.new_src_id = new_src_id

    def reroute_tgt(self, new_tgt_id):
        self.new_tgt_id = new_tgt_id

    def reroute_dec_src(self, dec_src_id):
        self.dec_src_id = dec_src_id

    def reroute_dec_tgt(self, dec_tgt_id):
        self.dec_tgt_id = dec_tgt_id

    def set_cc_num(self, cc_num):
        self.cc_num = cc_num

    def to_dot(self, level="dec", indent=layout_config.INDENT):
        if level == "dec":
            src, tgt = self.dec_src_id, self.dec_tgt_id
        elif level == "new":
            src, tgt = self.new_src_id, self.new_tgt_id
        else:
            raise WeirdError(f"Unrecognized edge level: {level}")
        return layout_utils.get_edge_dot(
            src, tgt, self.unique_id, self.is_dup, indent
        )
