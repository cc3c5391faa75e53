from asmscope import config
from asmscope.graph import PatternDetector, PatternHierarchyBuilder
from asmscope.tests.utils import make_index, get_patterns_by_type


def test_bubble_of_chains():
    r"""The paths through this bubble are chains, which get found first:

      /-> 1 -> 2 -\
     0             5
      \-> 3 -> 4 -/
    """
    gi = make_index([(0, 1), (1, 2), (2, 5), (0, 3), (3, 4), (4, 5)])
    detector = PatternDetector(gi)
    patterns = detector.run()

    chains = get_patterns_by_type(patterns, config.PT_CHAIN)
    bubbles = get_patterns_by_type(patterns, config.PT_BUBBLE)
    assert len(patterns) == 3
    assert [c.node_ids for c in chains] == [[1, 2], [3, 4]]
    assert [c.pattern_id for c in chains] == [6, 7]
    assert len(bubbles) == 1
    assert bubbles[0].pattern_id == 8
    assert bubbles[0].node_ids == [6, 7]
    assert bubbles[0].source_id == 0
    assert bubbles[0].sink_id == 5

    assert detector.id2pattern[6].parent_id == 8
    assert detector.id2pattern[7].parent_id == 8
    assert detector.top_level_pattern_ids == [8]

    forest = PatternHierarchyBuilder(patterns, gi.node_ids).build()
    assert forest.roots == [8]
    assert forest.order == [8, 6, 7]
    assert forest.descendant_node_ids(8) == {1, 2, 3, 4}


def test_chain_absorbs_chain():
    r"""The cycle 0 -> 1 -> 2 -> 0 has a tail, so it's a chain. Once it's
    collapsed, 8 -> 9 -> [0 1 2] is also a chain -- and since a chain of
    chains is just a longer chain, we merge the first chain into it.

               +---------+
               V         |
    8 -> 9 ->  0 -> 1 -> 2
    """
    gi = make_index([(8, 9), (9, 0), (0, 1), (1, 2), (2, 0)])
    detector = PatternDetector(gi)
    patterns = detector.run()

    assert len(patterns) == 1
    p = patterns[0]
    assert p.pattern_type == config.PT_CHAIN
    # 10 was the inner chain; it's gone now
    assert p.pattern_id == 11
    assert 10 not in detector.id2pattern
    assert p.node_ids == [8, 9, 0, 1, 2]
    assert p.start_node_ids == [8]
    assert p.end_node_ids == [2]
    assert sorted(p.edge_ids) == [0, 1, 2, 3, 4]
    for n in (8, 9, 0, 1, 2):
        assert gi.get_node(n).parent_id == 11

    # The edge into the inner chain now points to where it actually goes
    assert gi.get_edge(1).dec_tgt_id == 0


def test_chain_of_frayed_ropes_with_duplication():
    r"""Two frayed ropes that share node 4:

    0 -\ /-> 3
        2        /-> 7
    1 -/ \-> 4 -6
            5 -/ \-> 8

    4 is an end node of the first rope and a start node of the second, so we
    duplicate it: 4 stays in the first rope, and a duplicate (9) takes over
    4's outgoing edge and joins the second rope. The two ropes are then
    linked by the dup edge 4 -> 9, which makes them a chain.
    """
    gi = make_index(
        [(0, 2), (1, 2), (2, 3), (2, 4), (4, 6), (5, 6), (6, 7), (6, 8)]
    )
    detector = PatternDetector(gi)
    patterns = detector.run()

    assert detector.dup_node_ids == [9]
    dup = gi.get_node(9)
    assert dup.is_dup
    assert dup.dup_of == 4
    assert dup.name == "4"
    assert gi.num_nodes == 10
    assert gi.num_edges == 9

    # The duplicate took over 4's outgoing edge
    moved = gi.get_edge(4)
    assert (moved.orig_src_id, moved.orig_tgt_id) == (4, 6)
    assert (moved.new_src_id, moved.new_tgt_id) == (9, 6)
    dup_edge = gi.get_edge(8)
    assert dup_edge.is_dup
    assert (dup_edge.new_src_id, dup_edge.new_tgt_id) == (4, 9)

    ropes = get_patterns_by_type(patterns, config.PT_FRAYEDROPE)
    chains = get_patterns_by_type(patterns, config.PT_CHAIN)
    assert [r.node_ids for r in ropes] == [[0, 1, 2, 3, 4], [5, 9, 6, 7, 8]]
    assert [r.pattern_id for r in ropes] == [10, 11]
    assert len(chains) == 1
    assert chains[0].node_ids == [10, 11]
    assert chains[0].edge_ids == [8]
    assert dup_edge.parent_id == chains[0].pattern_id

    forest = PatternHierarchyBuilder(patterns, gi.node_ids).build()
    assert forest.order == [12, 10, 11]


def test_sibling_patterns_partition_nodes():
    """No node or pattern is a child of two patterns."""
    gi = make_index(
        [
            (0, 2),
            (1, 2),
            (2, 3),
            (2, 4),
            (4, 6),
            (5, 6),
            (6, 7),
            (6, 8),
            (8, 9),
            (9, 10),
            (10, 11),
            (10, 12),
            (11, 13),
            (12, 13),
        ]
    )
    detector = PatternDetector(gi)
    patterns = detector.run()
    seen = set()
    for p in patterns:
        for m in p.node_ids:
            assert m not in seen
            seen.add(m)
    # This will also complain if anything has two parents
    PatternHierarchyBuilder(patterns, gi.node_ids).build()


def test_deterministic():
    edges = [(0, 1), (1, 2), (2, 5), (0, 3), (3, 4), (4, 5), (5, 6), (6, 0)]
    results = []
    for _ in range(2):
        detector = PatternDetector(make_index(edges))
        results.append(
            [
                (p.pattern_id, p.pattern_type, p.node_ids)
                for p in detector.run()
            ]
        )
    assert results[0] == results[1]
