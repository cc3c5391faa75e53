import networkx as nx
from asmscope import config
from asmscope.graph import validators


def get_cycle(num_nodes):
    g = nx.MultiDiGraph()
    for i in range(num_nodes):
        g.add_edge(i, (i + 1) % num_nodes)
    return g


def test_simple_cycle():
    g = get_cycle(3)
    results = validators.is_valid_cyclic_chain(g, 0)
    assert results
    assert results.pattern_type == config.PT_CYCLICCHAIN
    assert results.nodes == [0, 1, 2]
    assert results.start_node_ids == [0]
    assert results.end_node_ids == [2]

    # Any node works as a starting point
    results = validators.is_valid_cyclic_chain(g, 1)
    assert results.nodes == [1, 2, 0]


def test_two_node_cycle():
    g = get_cycle(2)
    results = validators.is_valid_cyclic_chain(g, 1)
    assert results
    assert results.nodes == [1, 0]


def test_self_loop_is_not_a_cyclic_chain():
    g = nx.MultiDiGraph()
    g.add_edge(0, 0)
    assert not validators.is_valid_cyclic_chain(g, 0)


def test_cycle_with_extra_edges():
    g = get_cycle(4)
    g.add_edge(5, 2)
    for n in g.nodes:
        assert not validators.is_valid_cyclic_chain(g, n)

    # Node 2 has an extra incoming edge, so the cycle fails from there too
    results = validators.is_valid_cyclic_chain(g, 2)
    assert not results
    assert results.nodes == []


def test_not_a_cycle():
    g = nx.path_graph(4, nx.MultiDiGraph())
    for n in range(4):
        assert not validators.is_valid_cyclic_chain(g, n)


def test_parallel_edges():
    g = nx.MultiDiGraph()
    g.add_edges_from([(0, 1), (1, 0), (1, 0)])
    assert not validators.is_valid_cyclic_chain(g, 0)
    assert not validators.is_valid_cyclic_chain(g, 1)
