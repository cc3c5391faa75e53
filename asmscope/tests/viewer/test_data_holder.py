import json
import pytest
from asmscope import config
from asmscope.viewer import DataHolder, PatternRecord
from asmscope.errors import (
    GraphError,
    GraphParsingError,
    HierarchyError,
    NoViewableComponentsError,
    NotFoundError,
    InvalidComponentRankError,
    ComponentRankTooLargeError,
)
from asmscope.tests.utils import get_stored_data


def test_basic_properties():
    dh = DataHolder(get_stored_data())
    assert dh.num_components == 3
    assert dh.total_num_nodes == 20
    assert dh.total_num_edges == 30
    assert dh.file_type == "GML"
    assert dh.file_name == "example.gml"
    assert dh.get_all_laid_out_component_ranks() == [1, 2]
    assert dh.components[2] is None


def test_from_json_and_file(tmp_path):
    data = get_stored_data()
    dh = DataHolder.from_json(json.dumps(data))
    # Keys were turned into strings by JSON, but we convert them back
    assert sorted(dh.get_nodes_in_component(1)) == [0, 1, 2, 3, 4]
    assert dh.get_edge_info(0, 3).edge_id == (0, 3)

    fp = tmp_path / "out.json"
    fp.write_text(json.dumps(data))
    dh = DataHolder.from_file(str(fp))
    assert dh.get_node_name(6) == "c6"


def test_smallest_viewable_component():
    data = get_stored_data()
    assert DataHolder(data).smallest_viewable_component() == 1

    data["components"][0] = {"skipped": True}
    assert DataHolder(data).smallest_viewable_component() == 2

    data["components"][1] = {"skipped": True}
    with pytest.raises(NoViewableComponentsError) as ei:
        DataHolder(data).smallest_viewable_component()
    assert str(ei.value) == (
        "No components were laid out -- every component was skipped."
    )


def test_validate_component_rank():
    dh = DataHolder(get_stored_data())
    for r in (1, 2, 3):
        dh.validate_component_rank(r)
    for bad in (0, -1, 1.0, "1", True, None):
        with pytest.raises(InvalidComponentRankError) as ei:
            dh.validate_component_rank(bad)
        assert str(ei.value) == f"Size rank of {bad} isn't a positive integer"
    with pytest.raises(ComponentRankTooLargeError) as ei:
        dh.validate_component_rank(4)
    assert str(ei.value) == (
        "Size rank of 4 is too large: only 3 components in the graph"
    )


def test_get_component():
    dh = DataHolder(get_stored_data())
    cmp = dh.get_component(2)
    assert cmp.cc_num == 2
    assert sorted(cmp.nodes) == [5, 6, 7]
    assert dh.get_component_bounding_box(1) == [200, 100]
    assert [p.pattern_id for p in dh.get_patterns_in_component(1)] == [
        12,
        10,
    ]
    assert sorted(dh.get_edges_in_component(1)[0]) == [1, 3]
    with pytest.raises(NotFoundError) as ei:
        dh.get_component(3)
    assert str(ei.value) == "Component 3 was skipped, so it has no data."


def test_find_component_containing_node_name():
    dh = DataHolder(get_stored_data())
    assert dh.find_component_containing_node_name("c0") == 1
    assert dh.find_component_containing_node_name("c6") == 2
    assert dh.find_component_containing_node_name("C6") == -1
    assert dh.find_component_containing_node_name("c99") == -1


def test_get_node_info():
    dh = DataHolder(get_stored_data())
    n = dh.get_node_info("2")
    assert n.node_id == 2
    assert n.name == "c2"
    assert n.orientation == config.REV
    assert n.parent_id == 10
    assert n.extra_data == {"cov": 4.5}
    assert n.cc_num == 1
    assert n.has_position
    assert dh.get_node_name(4) == "c4"
    with pytest.raises(NotFoundError) as ei:
        dh.get_node_info(99)
    assert str(ei.value) == "Node 99 not found in data."


def test_get_edge_info():
    dh = DataHolder(get_stored_data())
    e = dh.get_edge_info("3", "4")
    assert e.is_outlier == config.OUTLIER_HIGH
    assert e.relative_weight == 1
    assert e.parent_id is None
    assert not e.is_self_loop
    assert dh.get_edge_info(5, 6).parent_id == 11
    with pytest.raises(NotFoundError) as ei:
        dh.get_edge_info(0, 4)
    assert str(ei.value) == (
        "Found source node 0 but couldn't find an edge from it to the target "
        "node 4."
    )
    with pytest.raises(NotFoundError) as ei:
        dh.get_edge_info(4, 0)
    assert str(ei.value) == "Edge from 4 to 0 not found in data."


def test_get_pattern_info():
    dh = DataHolder(get_stored_data())
    p = dh.get_pattern_info("10")
    assert p.pattern_type == config.PT_CHAIN
    assert p.parent_id == 12
    assert sorted(p.node_ids) == [1, 2]
    assert sorted(dh.get_pattern_info(12).node_ids) == [3, 10]
    assert dh.get_pattern_info(11).pattern_type == config.PT_CYCLICCHAIN
    for bad in (-1, "abc", 1.5):
        with pytest.raises(NotFoundError) as ei:
            dh.get_pattern_info(bad)
        assert str(ei.value) == (
            f"Pattern ID {bad} is not a nonnegative integer."
        )
    with pytest.raises(NotFoundError) as ei:
        dh.get_pattern_info(99)
    assert str(ei.value) == "Pattern 99 not found in data."


def test_component_forest():
    dh = DataHolder(get_stored_data())
    forest = dh.get_component(1).forest
    assert forest.roots == [12]
    assert forest.order == [12, 10]
    assert forest.ancestors(1) == [10, 12]


def test_parse_pattern_type():
    assert PatternRecord.parse_pattern_type("bubble") == config.PT_BUBBLE
    assert PatternRecord.parse_pattern_type("misc") == config.PT_MISC
    assert PatternRecord.parse_pattern_type(config.PT_CHAIN) == (
        config.PT_CHAIN
    )
    with pytest.raises(GraphError) as ei:
        PatternRecord.parse_pattern_type("blob")
    assert str(ei.value) == "Unrecognized pattern type blob"


def test_pattern_listed_before_parent():
    data = get_stored_data()
    data["components"][0]["patts"].reverse()
    with pytest.raises(HierarchyError) as ei:
        DataHolder(data)
    assert str(ei.value) == "Pattern 10 is listed before its parent 12"


def test_unknown_parent():
    data = get_stored_data()
    data["components"][0]["nodes"][0][7] = 99
    with pytest.raises(HierarchyError) as ei:
        DataHolder(data)
    assert str(ei.value) == "NodeRecord(0, name=c0) has unknown parent 99"


def test_bad_node_orientation():
    data = get_stored_data()
    data["components"][1]["nodes"][5][6] = "?"
    with pytest.raises(GraphParsingError) as ei:
        DataHolder(data)
    assert str(ei.value) == "Invalid node orientation ?"
