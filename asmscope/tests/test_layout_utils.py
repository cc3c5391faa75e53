import pytest
from pytest import approx
from asmscope import config
from asmscope.layout import layout_utils
from asmscope.errors import WeirdError


def test_get_control_points():
    assert layout_utils.get_control_points("1,2 3,4") == [1, 2, 3, 4]
    assert layout_utils.get_control_points("e,10,20 1,2 3.5,4") == [
        1,
        2,
        3.5,
        4,
    ]
    assert layout_utils.get_control_points("s,1,1 e,2,2 5,6 7,8") == [
        5,
        6,
        7,
        8,
    ]
    with pytest.raises(ValueError):
        layout_utils.get_control_points("1,2 3")


def test_shift_control_points():
    assert layout_utils.shift_control_points([1, 2, 3, 4], 10, 100) == [
        11,
        102,
        13,
        104,
    ]
    with pytest.raises(ValueError):
        layout_utils.shift_control_points([1, 2, 3], 10, 100)


def test_getxy_and_bb():
    assert layout_utils.getxy("1.5,2") == (1.5, 2.0)
    assert layout_utils.get_bb_x2_y2("0,0,63,126") == (1.0, 2.0)


def test_dot_snippets():
    assert layout_utils.get_node_dot(3, 1.5, 2, "house") == (
        "  3 [width=1.5,height=2,shape=house];\n"
    )
    assert layout_utils.get_edge_dot(1, 2, 5) == '  1 -> 2 [uid="5"];\n'
    assert layout_utils.get_edge_dot(1, 2, 5, True, "") == (
        '1 -> 2 [uid="5",style="dashed"];\n'
    )
    header = layout_utils.get_gv_header("cc_1")
    assert header.startswith("digraph cc_1 {\n")
    assert "rankdir=LR;" in header


def test_point_to_line_distance():
    a = (0, 0)
    b = (10, 0)
    assert layout_utils.point_to_line_distance((5, 10), a, b) == approx(10)
    assert layout_utils.point_to_line_distance((5, -10), a, b) == approx(-10)
    assert layout_utils.point_to_line_distance((3, 0), a, b) == approx(0)
    with pytest.raises(WeirdError) as ei:
        layout_utils.point_to_line_distance((5, 10), a, a)
    assert str(ei.value) == "Line distance is zero?"


# In these tests the source is at (0, 0) and the target is at (10, 0), in the
# renderer's coordinate system. Control points are given in Graphviz'
# coordinate system, so their y-coordinates get flipped using dy = 100.
SRC = (0, 0)
TGT = (10, 0)
DY = 100


def convert(coords):
    return layout_utils.convert_ctrl_pts_to_dists_and_weights(
        SRC, TGT, coords, DY
    )


def test_convert_straight():
    is_complex, dists, weights = convert([5, 100])
    assert not is_complex
    assert dists == [0]
    assert weights == [0.5]


def test_convert_curved():
    is_complex, dists, weights = convert([5, 90, 5, 110])
    assert is_complex
    assert dists == [10, -10]
    assert weights == [0.5, 0.5]


def test_convert_barely_curved():
    eps = config.CTRL_PT_DIST_EPSILON
    is_complex, dists, weights = convert([5, 100 - eps])
    assert not is_complex
    assert dists == [eps]


def test_convert_behind_source():
    is_complex, dists, weights = convert([-5, 100])
    assert weights == [-0.5]


def test_convert_weight_endpoints_nudged():
    is_complex, dists, weights = convert([0, 90, 10, 90])
    assert is_complex
    assert weights == [config.CTRL_PT_MIN_WEIGHT, config.CTRL_PT_MAX_WEIGHT]


def test_convert_degenerate():
    assert convert([]) == (False, [], [])
    assert layout_utils.convert_ctrl_pts_to_dists_and_weights(
        SRC, SRC, [1, 2], DY
    ) == (False, [], [])
    with pytest.raises(ValueError):
        convert([1, 2, 3])
