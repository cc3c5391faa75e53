import math
from . import layout_config
from .. import config
from ..errors import WeirdError


def get_gv_header(name="g"):
    """Returns the opening of a DOT digraph named name.

    The graph, node, and edge defaults from layout_config are included (each
    is skipped if empty). Callers append node and edge statements and close
    the graph with "}".
    """
    lines = [f"digraph {name} {{"]
    for prefix, style in (
        ("", layout_config.GRAPH_STYLE),
        ("node ", layout_config.GLOBALNODE_STYLE),
        ("edge ", layout_config.GLOBALEDGE_STYLE),
    ):
        if style != "":
            if prefix:
                style = f"[{style}]"
            lines.append(f"{layout_config.INDENT}{prefix}{style};")
    return "\n".join(lines) + "\n"


def get_node_dot(node_id, width, height, shape, indent=layout_config.INDENT):
    return (
        f"{indent}{node_id} [width={width},height={height},shape={shape}];\n"
    )


def get_edge_dot(
    src_id, tgt_id, edge_id, is_dup=False, indent=layout_config.INDENT
):
    # The uid attribute lets us match Graphviz' edges back to ours, since
    # there can be parallel edges between the same pair of nodes.
    attrs = [f'uid="{edge_id}"']
    if is_dup:
        attrs.append(layout_config.DUPEDGE_STYLE)
    attrs_str = ",".join(attrs)
    return f"{indent}{src_id} -> {tgt_id} [{attrs_str}];\n"


def get_control_points(pos):
    """Parses the "pos" attribute of a laid-out edge.

    Graphviz gives edge splines as space-separated "x,y" points, optionally
    preceded by "s,x,y" and/or "e,x,y" arrowhead endpoints. We drop those
    endpoints and return the remaining points flattened into
    [x1, y1, x2, y2, ...] as floats.

    Raises
    ------
    ValueError
        If the remaining numbers can't be paired up into points.
    """
    tokens = pos.split()
    while tokens and tokens[0][:2] in ("s,", "e,"):
        tokens = tokens[1:]
    coords = [float(c) for t in tokens for c in t.split(",")]
    if len(coords) % 2 != 0:
        raise ValueError(f"Invalid Graphviz edge control points: {pos}")
    return coords


def shift_control_points(coords, left, bottom):
    r"""Moves a flattened [x1, y1, x2, y2, ...] list by (left, bottom).

    Edges inside a pattern are laid out relative to that pattern's
    bottom-left corner. Once we know where the pattern ended up, adding its
    left and bottom positions gives the edge's absolute control points.

        +-----------+
        | /->3--\   |
    1 ->|2       5  |
        | \->4--/   |
        +-----------+
    (left, bottom)
    """
    if len(coords) % 2 != 0:
        raise ValueError(f"Non-even number of control points: {coords}")
    offsets = (left, bottom)
    return [c + offsets[i % 2] for i, c in enumerate(coords)]


def euclidean_distance(p1, p2):
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def point_to_line_distance(point, a, b):
    """Returns the signed distance from point to the line through a and b.

    Parameters
    ----------
    point: (float, float)

    a: (float, float)

    b: (float, float)

    Returns
    -------
    dist: float
        Positive if point is to the left of the direction a -> b, negative
        if it is to the right. (With y pointing down, as in the renderer,
        "left" is below the line.) This is the sign convention that
        unbundled-bezier edges use for control point distances.

    Raises
    ------
    WeirdError
        If a and b are the same point, since then there's no line.
    """
    line_distance = euclidean_distance(a, b)
    if line_distance == 0:
        raise WeirdError("Line distance is zero?")
    # 2D cross product of (b - a) and (point - a)
    cross = (b[0] - a[0]) * (point[1] - a[1]) - (b[1] - a[1]) * (
        point[0] - a[0]
    )
    return cross / line_distance


def convert_ctrl_pts_to_dists_and_weights(src_pos, tgt_pos, coords, dy):
    """Converts an edge's control points to distances and weights.

    Parameters
    ----------
    src_pos: (float, float)
        Position of the edge's source node, in the renderer's coordinate
        system (origin at the top left).

    tgt_pos: (float, float)
        Position of the edge's target node, in the same system.

    coords: list of float
        The edge's control points, [x1, y1, x2, y2, ...], in Graphviz'
        coordinate system (origin at the bottom left).

    dy: float
        Vertical offset used to flip the control points' y-coordinates into
        the renderer's coordinate system.

    Returns
    -------
    is_complex, dists, weights: bool, list of float, list of float
        If is_complex is False, every control point is within
        config.CTRL_PT_DIST_EPSILON of the straight line between the source
        and target, so this edge can be drawn as a straight line.

        dists[i] is the signed perpendicular distance from the i-th control
        point to that line, and weights[i] is the position of the i-th
        control point's projection along the line (0 = source, 1 = target;
        negative if it falls "behind" the source). Both are rounded to
        config.CTRL_PT_DECIMALS places.
    """
    if len(coords) % 2 != 0:
        raise ValueError(f"Non-even number of control points: {coords}")
    src_tgt_dist = euclidean_distance(src_pos, tgt_pos)
    if len(coords) == 0 or src_tgt_dist == 0:
        # Nothing to bend around, or no line to measure against
        return False, [], []

    is_complex = False
    dists = []
    weights = []
    for i in range(0, len(coords), 2):
        curr_pt = (coords[i], dy - coords[i + 1])
        pld = point_to_line_distance(curr_pt, src_pos, tgt_pos)
        pldsq = pld**2
        dsp = euclidean_distance(curr_pt, src_pos)
        dtp = euclidean_distance(curr_pt, tgt_pos)

        # The interiors of the sqrts below should always be positive, but
        # rounding jank can cause them to become slightly negative. Hence the
        # abs().
        ws = math.sqrt(abs(dsp**2 - pldsq))
        wt = math.sqrt(abs(dtp**2 - pldsq))

        # If the control point is "behind" the source node we make its weight
        # negative, and if it is "past" the target node it'll be > 1.
        if wt > src_tgt_dist and wt > ws:
            w = -ws / src_tgt_dist
        else:
            w = ws / src_tgt_dist

        if abs(pld) > config.CTRL_PT_DIST_EPSILON:
            is_complex = True

        # Weights of exactly 0 or 1 collide with the implicit endpoints of the
        # edge, so nudge them inwards.
        w = round(w, config.CTRL_PT_DECIMALS)
        if w == 0:
            w = config.CTRL_PT_MIN_WEIGHT
        elif w == 1:
            w = config.CTRL_PT_MAX_WEIGHT

        dists.append(round(pld, config.CTRL_PT_DECIMALS))
        weights.append(w)
    return is_complex, dists, weights


def getxy(pos_string):
    """Parses an "x,y" node position into two floats."""
    x, y = pos_string.split(",")
    return float(x), float(y)


def get_bb_x2_y2(bb_string):
    """Returns the width and height, in inches, of a Graphviz bounding box.

    Graphviz gives bounding boxes as "llx,lly,urx,ury" in points. The lower
    left corner of a graph's own bounding box is (0, 0), so the upper right
    corner gives its size. We convert back to inches since that's what node
    and pattern dimensions are given to Graphviz in.
    """
    x2, y2 = bb_string.split(",")[2:]
    return (
        float(x2) / layout_config.POINTS_PER_INCH,
        float(y2) / layout_config.POINTS_PER_INCH,
    )
