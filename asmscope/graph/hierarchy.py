import logging
from collections import deque
from asmscope.errors import HierarchyError


logger = logging.getLogger(__name__)


class PatternForest(object):
    """The containment relationships between a collection of patterns.

    Each tree in this forest is rooted at a "top-level" pattern (one that
    isn't contained in any other pattern). The children of a pattern are the
    nodes and patterns it directly contains.
    """

    def __init__(self, id2members, child2parent, roots, order):
        """Initializes this PatternForest.

        You should usually create these via PatternHierarchyBuilder.build(),
        since that's what actually checks that the structure makes sense.

        Parameters
        ----------
        id2members: dict
            Maps each pattern ID to a list of its children's IDs.

        child2parent: dict
            Maps the ID of each node or pattern contained in a pattern to its
            parent pattern's ID.

        roots: list
            Sorted IDs of top-level patterns.

        order: list
            All pattern IDs, in an order where parents precede children.
        """
        self.id2members = id2members
        self.child2parent = child2parent
        self.roots = roots
        self.order = order
        self._desc_node_cache = {}

    def __repr__(self):
        return (
            f"PatternForest({len(self.order):,} pattern(s), "
            f"{len(self.roots):,} top-level)"
        )

    def is_pattern(self, obj_id):
        return obj_id in self.id2members

    def parent_of(self, obj_id):
        """Returns the parent pattern ID of a node or pattern (or None)."""
        return self.child2parent.get(obj_id)

    def children(self, pattern_id):
        return list(self.id2members[pattern_id])

    def ancestors(self, obj_id):
        """Returns the ancestors of something, innermost first."""
        ancs = []
        curr = self.parent_of(obj_id)
        while curr is not None:
            ancs.append(curr)
            curr = self.parent_of(curr)
        return ancs

    def descendant_node_ids(self, pattern_id):
        """Returns the set of all non-pattern IDs within a pattern."""
        if pattern_id not in self._desc_node_cache:
            desc = set()
            for child_id in self.id2members[pattern_id]:
                if self.is_pattern(child_id):
                    desc |= self.descendant_node_ids(child_id)
                else:
                    desc.add(child_id)
            self._desc_node_cache[pattern_id] = frozenset(desc)
        return self._desc_node_cache[pattern_id]

    def assign_parent_ids(self, id2obj):
        """Sets the parent_id attribute of every node / pattern in id2obj.

        Things in id2obj that aren't in any pattern get a parent_id of None.
        """
        for obj_id, obj in id2obj.items():
            obj.parent_id = self.parent_of(obj_id)

    def descendant_pattern_ids(self, pattern_id):
        """Returns the set of all pattern IDs within a pattern.

        Doesn't include pattern_id itself.
        """
        desc = set()
        to_visit = [pattern_id]
        while len(to_visit) > 0:
            curr = to_visit.pop()
            for child_id in self.id2members[curr]:
                if self.is_pattern(child_id):
                    desc.add(child_id)
                    to_visit.append(child_id)
        return desc


class PatternHierarchyBuilder(object):
    """Orders patterns such that every parent is before its children.

    This doesn't care what sort of objects it's given, so long as they have
    pattern_id and node_ids attributes. (The node_ids of a pattern can include
    the IDs of other patterns, which is how nesting is described.) If these
    objects also have a parent_id attribute, build() checks that it agrees
    with what we figure out from the node_ids.
    """

    def __init__(self, patterns, node_ids=None):
        """Initializes this builder.

        Parameters
        ----------
        patterns: iterable
            Objects describing patterns (e.g. Patterns or PatternRecords).

        node_ids: iterable or None
            If given, the IDs of all (non-pattern) nodes that these patterns
            can contain; we'll complain about any member IDs that aren't
            in this or in the pattern IDs. If None, we won't check this.
        """
        self.patterns = list(patterns)
        self.node_ids = None if node_ids is None else set(node_ids)

    def build(self):
        """Builds a PatternForest from the patterns.

        Returns
        -------
        PatternForest

        Raises
        ------
        HierarchyError
            - If two patterns have the same ID
            - If a pattern has no children
            - If a pattern has an unknown child
            - If a pattern contains itself
            - If something is a child of multiple patterns
            - If the parent_id of a pattern doesn't match up with the pattern
              that contains it
            - If the containment relationships are cyclic (in which case some
              patterns will be unreachable from the top-level patterns)
        """
        id2patt = {}
        for p in self.patterns:
            if p.pattern_id in id2patt:
                raise HierarchyError(f"Duplicate pattern ID: {p.pattern_id}")
            id2patt[p.pattern_id] = p

        id2members = {}
        child2parent = {}
        for pid, p in id2patt.items():
            members = list(p.node_ids)
            if len(members) == 0:
                raise HierarchyError(f"Pattern {pid} has no children")
            for m in members:
                if m == pid:
                    raise HierarchyError(f"Pattern {pid} contains itself")
                if m not in id2patt and (
                    self.node_ids is not None and m not in self.node_ids
                ):
                    raise HierarchyError(
                        f"Pattern {pid} contains unknown ID {m}"
                    )
                if m in child2parent:
                    raise HierarchyError(
                        f"{m} is a child of both pattern {child2parent[m]} "
                        f"and pattern {pid}"
                    )
                child2parent[m] = pid
            id2members[pid] = members

        for pid, p in id2patt.items():
            claimed_parent = getattr(p, "parent_id", None)
            actual_parent = child2parent.get(pid)
            if claimed_parent != actual_parent:
                raise HierarchyError(
                    f"Pattern {pid} says its parent is {claimed_parent}, but "
                    f"it's contained in {actual_parent}"
                )

        roots = sorted(pid for pid in id2patt if pid not in child2parent)

        # BFS from the roots. If containment is cyclic, then the patterns in
        # that cycle all have parents (so none of them are roots), and we'll
        # never reach them.
        order = []
        seen = set()
        queue = deque(roots)
        while len(queue) > 0:
            pid = queue.popleft()
            if pid in seen:
                raise HierarchyError(f"Reached pattern {pid} twice?")
            seen.add(pid)
            order.append(pid)
            for m in id2members[pid]:
                if m in id2members:
                    queue.append(m)

        if len(order) != len(id2patt):
            unreachable = sorted(set(id2patt) - seen)
            raise HierarchyError(
                "Containment is cyclic: patterns "
                f"{unreachable} aren't reachable from any top-level pattern"
            )

        logger.debug(
            f"Ordered {len(order):,} pattern(s) under "
            f"{len(roots):,} top-level pattern(s)."
        )
        return PatternForest(id2members, child2parent, roots, order)
