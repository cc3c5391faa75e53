from .data_holder import (
    DataHolder,
    ComponentRecord,
    NodeRecord,
    EdgeRecord,
    PatternRecord,
)
from .collapsible import CollapsibleGraphModel, CanonicalEdgeMap, InteriorSet

__all__ = [
    "DataHolder",
    "ComponentRecord",
    "NodeRecord",
    "EdgeRecord",
    "PatternRecord",
    "CollapsibleGraphModel",
    "CanonicalEdgeMap",
    "InteriorSet",
]
