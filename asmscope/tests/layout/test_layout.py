import pytest
from asmscope.graph import AssemblyGraph
from asmscope.viewer import DataHolder, CollapsibleGraphModel
from asmscope.errors import NoViewableComponentsError, WeirdError
from asmscope.tests.utils import make_assembly_graph

# Layout needs Graphviz
pytest.importorskip("pygraphviz")


def test_layout_before_detection():
    ag = make_assembly_graph([(0, 1)])
    with pytest.raises(WeirdError) as ei:
        ag.layout()
    assert str(ei.value) == "Identify patterns before doing layout"


def test_layout_positions():
    ag = AssemblyGraph("asmscope/tests/input/three_components.gml")
    ag.process()
    assert ag.layout_done
    for cobj in ag.components:
        assert not cobj.skipped
        w, h = cobj.bb
        assert w > 0 and h > 0
        for n in cobj.nodes:
            assert 0 <= n.x <= w
            assert 0 <= n.y <= h
        for e in cobj.edges:
            assert len(e.ctrl_pt_coords) >= 4
            assert len(e.ctrl_pt_coords) % 2 == 0

    # Nodes in the bubble are inside its bounding box
    bubble = ag.pattid2obj[8]
    for nid in bubble.node_ids:
        n = ag.nodeid2obj[nid]
        assert bubble.left <= n.x <= bubble.right
        assert bubble.bottom <= n.y <= bubble.top
    assert bubble.width > 0 and bubble.height > 0


def test_nested_layout():
    ag = make_assembly_graph(
        [(0, 1), (1, 2), (2, 5), (0, 3), (3, 4), (4, 5)],
        lengths={str(i): 100 * (i + 1) for i in range(6)},
    )
    ag.process()
    bubble, chain1, chain2 = ag.components[0].patterns
    for chain in (chain1, chain2):
        assert bubble.left <= chain.left <= chain.right <= bubble.right
        assert bubble.bottom <= chain.bottom <= chain.top <= bubble.top
        for nid in chain.node_ids:
            n = ag.nodeid2obj[nid]
            assert chain.left <= n.x <= chain.right


def test_skip_large_components():
    ag = AssemblyGraph(
        "asmscope/tests/input/three_components.gml", max_node_count=3
    )
    ag.process()
    assert [c.skipped for c in ag.components] == [True, False, False]
    assert ag.components[0].bb is None
    d = ag.to_dict()
    assert d["components"][0] == {"skipped": True}
    assert d["components"][1]["bb"] is not None

    dh = DataHolder(d)
    assert dh.smallest_viewable_component() == 2
    model = CollapsibleGraphModel.from_data_holder(dh)
    eles = model.get_drawable()
    for ele in eles:
        if "position" in ele:
            assert ele["position"] is not None


def test_laid_out_drawable():
    ag = AssemblyGraph("asmscope/tests/input/three_components.gml")
    ag.process()
    dh = DataHolder.from_json(ag.to_json())
    model = CollapsibleGraphModel.from_data_holder(dh, [1, 2, 3])
    eles = model.get_drawable()
    positions = [ele["position"] for ele in eles if "position" in ele]
    assert len(positions) == 8 + 2
    for pos in positions:
        assert set(pos) == {"x", "y"}


def test_every_component_skipped():
    ag = AssemblyGraph("asmscope/tests/input/sample1.gml", max_node_count=3)
    with pytest.raises(NoViewableComponentsError) as ei:
        ag.process()
    assert str(ei.value) == (
        "Every component was too large to lay out. Try increasing the "
        "maximum node and/or edge counts."
    )
    assert [c.skipped for c in ag.components] == [True]
    assert not ag.layout_done


def test_cli_fails_if_every_component_skipped(tmp_path):
    from click.testing import CliRunner
    from asmscope._cli import run_script

    out_fp = tmp_path / "out.json"
    result = CliRunner().invoke(
        run_script,
        [
            "-g",
            "asmscope/tests/input/sample1.gml",
            "-o",
            str(out_fp),
            "--maxe",
            "1",
        ],
    )
    assert result.exit_code != 0
    assert isinstance(result.exception, NoViewableComponentsError)
    assert not out_fp.exists()
