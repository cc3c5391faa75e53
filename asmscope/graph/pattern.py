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
from asmscope.layout import layout_config
from asmscope.misc_utils import verify_subset, verify_unique
from asmscope.errors import WeirdError


class Pattern(object):
    """A structural pattern (chain, bubble, ...) detected in the graph.

    Patterns act as nodes in the decomposed graph, so they share the ID space
    of nodes -- no pattern has the same ID as a node or another pattern.
    """

    def __init__(
        self,
        pattern_id,
        pattern_type,
        node_ids,
        edge_ids=None,
        start_node_ids=None,
        end_node_ids=None,
        source_id=None,
        sink_id=None,
    ):
        """Initializes this Pattern object.

        Parameters
        ----------
        pattern_id: int
            Unique ID of this pattern.

        pattern_type: int
            One of the PT_* constants in config.

        node_ids: list of int
            IDs of the children of this pattern, in order. Each may be a node
            or another pattern.

        edge_ids: list of int or None
            IDs of the edges between this pattern's children.

        start_node_ids: list of int or None
            The children of this pattern through which paths "enter" it (e.g.
            the first node of each path in a bubble, or the first node of a
            chain). Must be a subset of node_ids.

        end_node_ids: list of int or None
            Like start_node_ids, but for the children through which paths
            leave this pattern.

        source_id: int or None
            For bubbles: the node (or pattern) outside this bubble that all of
            its paths diverge from.

        sink_id: int or None
            For bubbles: the node (or pattern) outside this bubble that all of
            its paths converge to.

        Raises
        ------
        WeirdError
            If the pattern type is unrecognized, if this pattern has no
            children, if node_ids contains duplicates, or if the start/end
            node IDs aren't children of this pattern.
        """
        if pattern_type not in config.PT2HR:
            raise WeirdError(f"Invalid pattern type: {pattern_type}")
        if len(node_ids) == 0:
            raise WeirdError(f"Pattern {pattern_id} has no children?")
        verify_unique(node_ids, "pattern child IDs")

        self.pattern_id = pattern_id
        self.pattern_type = pattern_type
        self.node_ids = list(node_ids)
        self.edge_ids = [] if edge_ids is None else list(edge_ids)
        self.start_node_ids = (
            [] if start_node_ids is None else list(start_node_ids)
        )
        self.end_node_ids = [] if end_node_ids is None else list(end_node_ids)
        verify_subset(self.start_node_ids, self.node_ids)
        verify_subset(self.end_node_ids, self.node_ids)
        self.source_id = source_id
        self.sink_id = sink_id

        # Will be filled in after this pattern is laid out. Stored in inches,
        # same as Node.width and Node.height.
        self.width = None
        self.height = None

        # Will be filled in after either the parent pattern of this pattern is
        # laid out, or the entire component is laid out (if this pattern has
        # no parent). Stored in points.
        self.relative_x = None
        self.relative_y = None

        # Will be filled in when self.set_bb() is called. Stored in points.
        self.left = None
        self.bottom = None
        self.right = None
        self.top = None

        # ID of the pattern containing this pattern, or None if this pattern
        # exists in the top level of the graph.
        self.parent_id = None

        # Number (1-indexed) of the connected component containing this
        # pattern and its descendants.
        self.cc_num = None

        # This is the shape used for this pattern during layout. The renderer
        # might draw collapsed patterns with fancier shapes, but these should
        # take up space that is a subset of the rectangle.
        self.shape = layout_config.PATTERN_SHAPE

    def __repr__(self):
        return (
            f"{config.PT2HR[self.pattern_type]} (ID {self.pattern_id}) of "
            f"nodes {self.node_ids}"
        )

    @property
    def name(self):
        return f"{config.PT2HR_NOSPACE[self.pattern_type]}_{self.pattern_id}"

    def absorb_child(self, child):
        """Merges a child pattern's contents into this pattern.

        Used when merging chains: if a chain contains another chain, the
        inner chain's children take the inner chain's spot in the outer
        chain's ordered list of children, and the inner chain's edges become
        this pattern's edges. (If the inner chain was this chain's start or
        end node, then the inner chain's start or end node takes its place.)

        This doesn't update parent IDs or anything outside of this object;
        the caller is responsible for that.
        """
        old_id = child.pattern_id
        i = self.node_ids.index(old_id)
        self.node_ids[i : i + 1] = list(child.node_ids)
        verify_unique(self.node_ids, "pattern child IDs")
        for ids, child_ids in (
            (self.start_node_ids, child.start_node_ids),
            (self.end_node_ids, child.end_node_ids),
        ):
            if old_id in ids:
                j = ids.index(old_id)
                ids[j : j + 1] = list(child_ids)
        self.edge_ids.extend(child.edge_ids)

    def get_counts(self, id2pattern):
        """Returns [node count, edge count, pattern count] of descendants.

        The pattern count doesn't include this pattern itself.
        """
        node_ct = 0
        edge_ct = len(self.edge_ids)
        patt_ct = 0
        for node_id in self.node_ids:
            if node_id in id2pattern:
                patt_ct += 1
                counts = id2pattern[node_id].get_counts(id2pattern)
                node_ct += counts[0]
                edge_ct += counts[1]
                patt_ct += counts[2]
            else:
                node_ct += 1
        return [node_ct, edge_ct, patt_ct]

    def set_cc_num(self, cc_num):
        self.cc_num = cc_num

    def set_bb(self, x, y):
        """Given a center position of this Pattern, sets its bounding box.

        This assumes that x and y are both given in points, and converts this
        pattern's width and height (in inches) to points accordingly.
        """
        if self.width is None or self.height is None:
            raise WeirdError(f"{self} hasn't been laid out yet")
        half_w = (self.width * layout_config.POINTS_PER_INCH) / 2
        half_h = (self.height * layout_config.POINTS_PER_INCH) / 2
        self.left = x - half_w
        self.right = x + half_w
        self.bottom = y - half_h
        self.top = y + half_h

    def to_dot(self, indent=layout_config.INDENT):
        if self.width is None or self.height is None:
            raise WeirdError(f"{self} hasn't been laid out yet")
        return (
            f"{indent}{self.pattern_id} [width={self.width},"
            f"height={self.height},shape={self.shape}];\n"
        )
