class WeirdError(Exception):
    """Something is wrong with the code, not with the user's input.

    If one of these gets raised then there is a bug somewhere.
    """


class GraphParsingError(Exception):
    """The input graph data is malformed (e.g. a bad node orientation)."""


class GraphError(Exception):
    """The graph (or data describing it) is inconsistent."""


class HierarchyError(GraphError):
    """The containment relationships between patterns are malformed."""


class NoViewableComponentsError(GraphError):
    """Every component in the graph was skipped during layout."""


class UIError(Exception):
    """Something the user asked for can't be done."""


class NotFoundError(UIError):
    """A node, edge, or pattern that the user asked about doesn't exist."""


class InvalidComponentRankError(UIError):
    """A component size rank isn't a positive integer."""


class ComponentRankTooLargeError(UIError):
    """A component size rank exceeds the number of components."""
