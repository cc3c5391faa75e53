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
from asmscope.errors import WeirdError, GraphParsingError


class Node(object):
    """Represents a node in an assembly graph.

    Since the "type" of these assembly graphs is not strict (they can represent
    de Bruijn graphs, overlap graphs, scaffold graphs, ...), these nodes can
    have a lot of associated metadata (coverage, GC content, ...), or barely
    any associated metadata.

    Nodes are not modified (in terms of their name, length, or orientation)
    after pattern detection begins. If pattern detection needs a node to be in
    two places at once, it creates a separate duplicate Node -- see
    Node.make_duplicate().
    """

    def __init__(
        self,
        unique_id,
        name,
        length=None,
        orientation=config.FWD,
        data=None,
        dup_of=None,
    ):
        """Initializes this Node object.

        Parameters
        ----------
        unique_id: int
            Unique (with respect to all other nodes and patterns in the
            assembly graph) integer ID of this node.

        name: str
            Name of this node, to be displayed in the visualization interface.
            Duplicate nodes share the name of their original node.

        length: int or None
            Sequence length of this node, if known.

        orientation: str
            Either config.FWD ("+") or config.REV ("-").

        data: dict or None
            Extra fields (e.g. "cov", "gc_content", ...) for this node. The
            amount of this data will vary based on the input file.

        dup_of: int or None
            If this node is a duplicate of another node, this is the ID of the
            original node.

        Raises
        ------
        GraphParsingError
            If orientation is not one of {config.FWD, config.REV}.
        """
        self.unique_id = unique_id
        self.name = name
        self.length = length
        if orientation not in (config.FWD, config.REV):
            # We could just draw weirdly-oriented nodes as circles or
            # something, but it's safer to loudly throw an error since this
            # shouldn't normally happen
            raise GraphParsingError(
                f"Unsupported node orientation: {orientation}. Should be "
                f'"{config.FWD}" or "{config.REV}".'
            )
        self.orientation = orientation
        if data is None:
            data = {}
        self.data = data
        self.dup_of = dup_of

        # Will be filled in after node scaling. See
        # AssemblyGraph.scale_nodes().
        self.relative_length = None
        self.longside_proportion = None

        # Will be filled in after computing node dimensions. Stored in inches.
        self.width = None
        self.height = None

        # Relative position of this node within its parent pattern, if this
        # node is located within a pattern. (None if this node exists in the
        # top level of the graph.) Stored in points.
        self.relative_x = None
        self.relative_y = None

        # Absolute position of this node within its connected component.
        self.x = None
        self.y = None

        # ID of the pattern containing this node, or None if this node
        # exists in the top level of the graph.
        self.parent_id = None

        # Number (1-indexed) of the connected component containing this node.
        self.cc_num = None

    def __repr__(self):
        return f"Node {self.unique_id} (name: {self.name})"

    @property
    def is_dup(self):
        return self.dup_of is not None

    def make_duplicate(self, new_id):
        """Returns a copy of this Node with a new ID.

        The copy shares all of this node's attributes, including its scaled
        dimensions, but is flagged as a duplicate of this node.
        """
        if self.is_dup:
            # Duplicating a duplicate would be fine structurally, but it'd
            # make "which node is the real one" confusing
            raise WeirdError(f"{self} is already a duplicate; can't dup it")
        dup = Node(
            new_id,
            self.name,
            self.length,
            self.orientation,
            dict(self.data),
            dup_of=self.unique_id,
        )
        dup.relative_length = self.relative_length
        dup.longside_proportion = self.longside_proportion
        dup.width = self.width
        dup.height = self.height
        dup.cc_num = self.cc_num
        return dup

    def set_cc_num(self, cc_num):
        self.cc_num = cc_num

    def to_dot(self, indent=layout_config.INDENT):
        if self.width is None or self.height is None:
            raise WeirdError(
                "Can't call to_dot() on a Node with unset width and/or height"
            )
        return layout_utils.get_node_dot(
            self.unique_id,
            self.width,
            self.height,
            layout_config.NODE_ORIENTATION_TO_SHAPE[self.orientation],
            indent,
        )
