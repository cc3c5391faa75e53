import networkx as nx
from asmscope import config
from asmscope.graph import validators


def get_simple_frayed_rope():
    r"""Returns a graph that looks like:

    0 -\ /-> 3
        2
    1 -/ \-> 4
    """
    g = nx.MultiDiGraph()
    g.add_edges_from([(0, 2), (1, 2), (2, 3), (2, 4)])
    return g


def test_simple_frayed_rope():
    g = get_simple_frayed_rope()
    for start in (0, 1):
        results = validators.is_valid_frayed_rope(g, start)
        assert results
        assert results.pattern_type == config.PT_FRAYEDROPE
        assert results.nodes == [0, 1, 2, 3, 4]
        assert results.start_node_ids == [0, 1]
        assert results.end_node_ids == [3, 4]


def test_wrong_starting_nodes():
    g = get_simple_frayed_rope()
    for start in (2, 3, 4):
        assert not validators.is_valid_frayed_rope(g, start)


def test_uneven_frayed_rope():
    g = get_simple_frayed_rope()
    g.add_edge(5, 2)
    results = validators.is_valid_frayed_rope(g, 5)
    assert results.nodes == [0, 1, 5, 2, 3, 4]


def test_start_node_with_extra_outgoing_edge():
    g = get_simple_frayed_rope()
    g.add_edge(0, 5)
    assert not validators.is_valid_frayed_rope(g, 1)


def test_end_node_with_extra_incoming_edge():
    g = get_simple_frayed_rope()
    g.add_edge(5, 3)
    assert not validators.is_valid_frayed_rope(g, 0)


def test_parallel_edges_from_middle_node():
    g = get_simple_frayed_rope()
    g.add_edge(2, 4)
    assert not validators.is_valid_frayed_rope(g, 0)


def test_single_start_node():
    g = nx.MultiDiGraph()
    g.add_edges_from([(0, 2), (2, 3), (2, 4)])
    assert not validators.is_valid_frayed_rope(g, 0)


def test_cyclic_frayed_rope():
    """An edge from an end node back to a start node is fine."""
    g = get_simple_frayed_rope()
    g.add_edge(3, 0)
    results = validators.is_valid_frayed_rope(g, 1)
    assert results
    assert results.nodes == [0, 1, 2, 3, 4]


def test_shared_start_and_end_node():
    r"""0 -> 2 -> 0 and 1 -> 2 -> 3: 0 would be both a start and an end node.

    0 -\ /-> 0
        2
    1 -/ \-> 3
    """
    g = nx.MultiDiGraph()
    g.add_edges_from([(0, 2), (1, 2), (2, 0), (2, 3)])
    assert not validators.is_valid_frayed_rope(g, 1)
