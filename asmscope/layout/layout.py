import logging
from collections import deque
import pygraphviz
from . import layout_utils, layout_config
from ..errors import WeirdError


logger = logging.getLogger(__name__)


class Layout(object):
    """Performs layout on some part of a component and stores the results.

    The region laid out is either a single pattern or the top level of an
    entire component. Child patterns are laid out first (recursively), and
    then represented as solid rectangles in the layout of their parent --
    so the layout of each pattern is done in isolation.

    All of the positions we get from Graphviz for the children of a pattern
    are relative to the bottom-left corner of that pattern. Once the top level
    of the component has been laid out, reconcile() converts these to
    absolute positions.
    """

    def __init__(self, component, pattern=None):
        """Initializes this Layout object, and does the layout.

        Parameters
        ----------
        component: Component
            The component containing the region to be laid out.

        pattern: Pattern or None
            If this is None, we'll lay out the top level of the component.
            Otherwise, we'll lay out just this pattern (and its descendants).
        """
        self.component = component
        self.pattern = pattern
        self.gi = component.graph_index
        self.id2pattern = {p.pattern_id: p for p in component.patterns}

        if pattern is None:
            self.name = f"cc_{component.cc_num}"
            top_nodes = [
                n.unique_id for n in component.nodes if n.parent_id is None
            ]
            top_patts = [
                p.pattern_id for p in component.patterns if p.parent_id is None
            ]
            self.child_ids = top_nodes + top_patts
            self.edges = [e for e in component.edges if e.parent_id is None]
        else:
            self.name = pattern.name
            self.child_ids = list(pattern.node_ids)
            self.edges = [self.gi.get_edge(eid) for eid in pattern.edge_ids]

        # Set in _run(). Width and height are in inches, like node
        # dimensions; positions and control points are in points.
        self.dot = None
        self.width = None
        self.height = None
        self._run()

    def __repr__(self):
        return f"Layout({self.name})"

    def _get_obj(self, obj_id):
        if obj_id in self.id2pattern:
            return self.id2pattern[obj_id]
        return self.gi.get_node(obj_id)

    def _to_dot(self):
        """Creates a DOT string describing this region.

        Child patterns are laid out here, before we represent them as
        rectangles in this region's DOT.
        """
        dot = layout_utils.get_gv_header(self.name)
        for child_id in self.child_ids:
            if child_id in self.id2pattern:
                # This is a pattern; lay it out first
                Layout(self.component, self.id2pattern[child_id])
            dot += self._get_obj(child_id).to_dot()
        for edge in self.edges:
            dot += edge.to_dot(level="dec")
        dot += "}"
        return dot

    def _run(self):
        self.dot = self._to_dot()
        cg = pygraphviz.AGraph(self.dot)
        # If you're wondering why this is taking so long to run on your graph
        # and you traced your way back to this line of code, then boy do I
        # have an NP-Hard problem for you
        cg.layout(prog="dot")

        # The first two coordinates in the bounding box (bb) should always be
        # (0, 0), so the top right corner tells us how large this region is.
        self.width, self.height = layout_utils.get_bb_x2_y2(
            cg.graph_attr["bb"]
        )

        for child_id in self.child_ids:
            gv_node = cg.get_node(child_id)
            x, y = layout_utils.getxy(gv_node.attr["pos"])
            obj = self._get_obj(child_id)
            obj.relative_x = x
            obj.relative_y = y

        # We match up edges using the uid attribute we gave them, since there
        # can be parallel edges here (e.g. two edges pointing into the same
        # pattern).
        seen_edge_ids = set()
        for gv_edge in cg.edges():
            eid = int(gv_edge.attr["uid"])
            edge = self.gi.get_edge(eid)
            edge.relative_ctrl_pt_coords = layout_utils.get_control_points(
                gv_edge.attr["pos"]
            )
            seen_edge_ids.add(eid)
        if len(seen_edge_ids) != len(self.edges):
            raise WeirdError(
                f"Laid out {len(seen_edge_ids)} edge(s) in {self}, but "
                f"expected {len(self.edges)}?"
            )

        if self.pattern is not None:
            self.pattern.width = self.width
            self.pattern.height = self.height

    def reconcile(self):
        """Converts relative positions to absolute positions.

        This should only be called on the Layout of a component's top level.
        We traverse the patterns breadth-first, so whenever we get to a
        pattern we've already set the absolute position of its parent.

        Returns
        -------
        (float, float)
            The width and height of the component's bounding box, in points.
        """
        if self.pattern is not None:
            raise WeirdError(f"Can't reconcile a pattern's layout: {self}")

        patt_queue = deque()
        for child_id in self.child_ids:
            obj = self._get_obj(child_id)
            if child_id in self.id2pattern:
                obj.set_bb(obj.relative_x, obj.relative_y)
                patt_queue.append(obj)
            else:
                obj.x = obj.relative_x
                obj.y = obj.relative_y
        for edge in self.edges:
            edge.ctrl_pt_coords = edge.relative_ctrl_pt_coords

        while len(patt_queue) > 0:
            curr_patt = patt_queue.popleft()
            for child_id in curr_patt.node_ids:
                obj = self._get_obj(child_id)
                cx = curr_patt.left + obj.relative_x
                cy = curr_patt.bottom + obj.relative_y
                if child_id in self.id2pattern:
                    obj.set_bb(cx, cy)
                    patt_queue.append(obj)
                else:
                    obj.x = cx
                    obj.y = cy
            for eid in curr_patt.edge_ids:
                edge = self.gi.get_edge(eid)
                edge.ctrl_pt_coords = layout_utils.shift_control_points(
                    edge.relative_ctrl_pt_coords,
                    curr_patt.left,
                    curr_patt.bottom,
                )

        return (
            self.width * layout_config.POINTS_PER_INCH,
            self.height * layout_config.POINTS_PER_INCH,
        )


def layout_component(component):
    """Lays out a component, and stores its bounding box in component.bb."""
    logger.debug(f"Laying out {component}...")
    lay = Layout(component)
    component.bb = lay.reconcile()
    logger.debug("...Done.")
