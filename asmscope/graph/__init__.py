from .assembly_graph import AssemblyGraph
from .component import Component
from .graph_index import GraphIndex, IDCounter
from .hierarchy import PatternHierarchyBuilder, PatternForest
from .node import Node
from .edge import Edge
from .pattern import Pattern
from .pattern_detector import PatternDetector
from .pattern_stats import PatternStats
from . import validators

__all__ = [
    "AssemblyGraph",
    "Component",
    "GraphIndex",
    "IDCounter",
    "PatternHierarchyBuilder",
    "PatternForest",
    "Node",
    "Edge",
    "Pattern",
    "PatternDetector",
    "PatternStats",
    "validators",
]
