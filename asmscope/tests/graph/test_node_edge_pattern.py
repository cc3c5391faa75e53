import pytest
from asmscope import config
from asmscope.graph import Node, Edge, Pattern
from asmscope.errors import GraphParsingError, WeirdError


def test_node_bad_orientation():
    with pytest.raises(GraphParsingError) as ei:
        Node(0, "a", orientation="FOW")
    assert str(ei.value) == (
        'Unsupported node orientation: FOW. Should be "+" or "-".'
    )


def test_node_to_dot():
    n = Node(3, "contig_3", 100, config.REV)
    with pytest.raises(WeirdError):
        n.to_dot()
    n.width = 1.5
    n.height = 2
    assert n.to_dot() == "  3 [width=1.5,height=2,shape=house];\n"
    n.orientation = config.FWD
    assert n.to_dot(indent="") == "3 [width=1.5,height=2,shape=invhouse];\n"


def test_node_make_duplicate():
    n = Node(3, "contig_3", 100, config.REV, {"cov": 5})
    n.width = 1.5
    n.height = 2
    n.set_cc_num(4)
    d = n.make_duplicate(10)
    assert d.unique_id == 10
    assert d.name == "contig_3"
    assert d.length == 100
    assert d.orientation == config.REV
    assert d.data == {"cov": 5}
    assert d.data is not n.data
    assert (d.width, d.height, d.cc_num) == (1.5, 2, 4)
    assert d.is_dup
    assert d.dup_of == 3
    assert not n.is_dup
    # Layout stuff doesn't carry over
    assert d.x is None
    assert d.parent_id is None


def test_edge_levels():
    e = Edge(5, 0, 1, {"bsize": 3})
    assert not e.is_self_loop()
    e.reroute_src(7)
    e.reroute_dec_tgt(20)
    assert (e.orig_src_id, e.orig_tgt_id) == (0, 1)
    assert (e.new_src_id, e.new_tgt_id) == (7, 1)
    assert (e.dec_src_id, e.dec_tgt_id) == (0, 20)
    assert e.to_dot() == '  0 -> 20 [uid="5"];\n'
    assert e.to_dot(level="new") == '  7 -> 1 [uid="5"];\n'
    with pytest.raises(WeirdError) as ei:
        e.to_dot(level="orig")
    assert str(ei.value) == "Unrecognized edge level: orig"


def test_dup_edge_to_dot():
    e = Edge(5, 0, 0, is_dup=True)
    assert e.is_self_loop()
    assert e.to_dot() == '  0 -> 0 [uid="5",style="dashed"];\n'


def test_edge_defaults():
    e = Edge(5, 0, 1)
    assert e.data == {}
    assert e.is_outlier == config.OUTLIER_NONE
    assert e.relative_weight == config.DEFAULT_RELATIVE_WEIGHT
    assert e.ctrl_pt_coords is None


def test_pattern_init_errors():
    with pytest.raises(WeirdError) as ei:
        Pattern(5, 99, [0, 1])
    assert str(ei.value) == "Invalid pattern type: 99"

    with pytest.raises(WeirdError) as ei:
        Pattern(5, config.PT_CHAIN, [])
    assert str(ei.value) == "Pattern 5 has no children?"

    with pytest.raises(WeirdError):
        Pattern(5, config.PT_CHAIN, [0, 1, 0])

    with pytest.raises(WeirdError):
        Pattern(5, config.PT_CHAIN, [0, 1], start_node_ids=[2])


def test_pattern_name_and_repr():
    p = Pattern(5, config.PT_CYCLICCHAIN, [0, 1])
    assert p.name == "cyclicchain_5"
    assert repr(p) == "Cyclic Chain (ID 5) of nodes [0, 1]"


def test_absorb_child_in_middle():
    outer = Pattern(
        10,
        config.PT_CHAIN,
        [0, 9, 3],
        edge_ids=[0, 1],
        start_node_ids=[0],
        end_node_ids=[3],
    )
    inner = Pattern(
        9,
        config.PT_CHAIN,
        [1, 2],
        edge_ids=[5],
        start_node_ids=[1],
        end_node_ids=[2],
    )
    outer.absorb_child(inner)
    assert outer.node_ids == [0, 1, 2, 3]
    assert outer.edge_ids == [0, 1, 5]
    assert outer.start_node_ids == [0]
    assert outer.end_node_ids == [3]


def test_absorb_child_at_boundary():
    outer = Pattern(
        10, config.PT_CHAIN, [9, 3], start_node_ids=[9], end_node_ids=[3]
    )
    inner = Pattern(
        9, config.PT_CHAIN, [1, 2], start_node_ids=[1], end_node_ids=[2]
    )
    outer.absorb_child(inner)
    assert outer.node_ids == [1, 2, 3]
    assert outer.start_node_ids == [1]
    assert outer.end_node_ids == [3]


def test_get_counts():
    inner = Pattern(11, config.PT_BUBBLE, [2, 3])
    outer = Pattern(10, config.PT_CHAIN, [1, 11, 4], edge_ids=[0, 1])
    id2pattern = {10: outer, 11: inner}
    assert inner.get_counts(id2pattern) == [2, 0, 0]
    assert outer.get_counts(id2pattern) == [4, 2, 1]


def test_set_bb_and_to_dot():
    p = Pattern(5, config.PT_BUBBLE, [0, 1])
    with pytest.raises(WeirdError):
        p.set_bb(100, 50)
    with pytest.raises(WeirdError):
        p.to_dot()
    p.width = 2
    p.height = 1
    p.set_bb(100, 50)
    assert (p.left, p.right) == (37, 163)
    assert (p.bottom, p.top) == (18.5, 81.5)
    assert p.to_dot() == "  5 [width=2,height=1,shape=rectangle];\n"
