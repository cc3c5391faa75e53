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

from .pattern_stats import PatternStats


class Component(object):
    """Represents a weakly connected component in an assembly graph.

    Each Component owns the GraphIndex, detected patterns, and pattern forest
    for its part of the graph. Pattern detection and layout both happen on a
    per-component basis.
    """

    def __init__(self, graph_index):
        """Initializes this Component object.

        Parameters
        ----------
        graph_index: GraphIndex
            Describes the nodes and edges in this component. Pattern
            detection may add duplicate nodes and dup edges to this.
        """
        self.graph_index = graph_index

        # Filled in by set_patterns(), after pattern detection.
        self.patterns = []
        self.forest = None
        self.pattern_stats = PatternStats()

        # Number (1-indexed) of this component in the list of all components,
        # sorted from largest to smallest. Assigned by set_cc_num().
        self.cc_num = None

        # Filled in after layout: width and height of this component's
        # bounding box, in points.
        self.bb = None

        # True if this component was too large to lay out.
        self.skipped = False

    def __repr__(self):
        return (
            f"Component {self.cc_num}: {self.num_nodes:,} node(s), "
            f"{self.num_edges:,} edge(s), {self.num_patterns:,} pattern(s)"
        )

    @property
    def nodes(self):
        return list(self.graph_index.nodeid2obj.values())

    @property
    def edges(self):
        return list(self.graph_index.edgeid2obj.values())

    @property
    def num_nodes(self):
        return self.graph_index.num_nodes

    @property
    def num_edges(self):
        return self.graph_index.num_edges

    @property
    def num_dup_nodes(self):
        return sum(1 for n in self.nodes if n.is_dup)

    @property
    def num_patterns(self):
        return len(self.patterns)

    def sort_key(self):
        return (self.num_nodes, self.num_edges, self.num_patterns)

    def set_patterns(self, patterns, forest, pattern_stats):
        """Stores the results of pattern detection for this component.

        patterns will be stored in the forest's order, so parent patterns
        always come before their children.
        """
        id2patt = {p.pattern_id: p for p in patterns}
        self.patterns = [id2patt[pid] for pid in forest.order]
        self.forest = forest
        self.pattern_stats = pattern_stats

    def set_cc_num(self, cc_num):
        self.cc_num = cc_num
        for obj in self.nodes + self.edges + self.patterns:
            obj.set_cc_num(cc_num)
