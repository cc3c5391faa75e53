###############################################################################
# Graphviz settings
###############################################################################

INDENT = "  "

# The conversion factor between points (in Graphviz output) and inches, as
# used by Graphviz. Graphviz uses 72 points per inch, but here we use 63
# points per inch -- this is kind of a compromise. Using 72 squishes the
# graph too much (some edge arrows in bubbles don't even show up), and using
# 54 spaces it out too much. Since this scales _all_ distances in the graph,
# changing this doesn't change the interpretation of the layout.
POINTS_PER_INCH = 63.0

########
# Node scaling
########

# The base we use when logarithmically scaling contig dimensions from length
NODE_SCALING_LOG_BASE = 10
# The minimum/maximum area of a node, in "inches". Inches are an intermediate
# unit from our perspective, since they get converted to points before being
# stored.
MAX_NODE_AREA = 10
MIN_NODE_AREA = 1
NODE_AREA_RANGE = MAX_NODE_AREA - MIN_NODE_AREA
# Proportions of the "long side" of a contig, for various levels of contigs in
# the graph.
# Used for the lower 25% (from 0% to 25%) of contigs
LOW_LONGSIDE_PROPORTION = 0.5
# Used for the middle 50% (from 25% to 75%) of contigs
MID_LONGSIDE_PROPORTION = 2.0 / 3.0
# Used for the upper 25% (from 75% to 100%) of contigs
HIGH_LONGSIDE_PROPORTION = 5.0 / 6.0

# Dimensions used for nodes without a length (so that we can't scale them)
NOLENGTH_NODE_WIDTH = 0.4
NOLENGTH_NODE_HEIGHT = 0.4

########
# Graph style
########
# General graph style. Any text here must end without a semicolon.
GRAPH_STYLE = "rankdir=LR"

########
# Node style
########
# "fixedsize=true" is needed in order to prevent node labels from causing
# nodes to be resized.
#
# "orientation=90" is needed in order to get nodes to be correctly rotated (to
# point in the left --> right direction), which makes the graph look as
# intended when rankdir=LR.
GLOBALNODE_STYLE = "fixedsize=true,orientation=90"

########
# Edge style
########
GLOBALEDGE_STYLE = "headport=w,tailport=e"
DUPEDGE_STYLE = 'style="dashed"'

# Graphviz shapes for each node orientation. Patterns are laid out as
# rectangles regardless of how the renderer eventually draws them.
NODE_ORIENTATION_TO_SHAPE = {"+": "invhouse", "-": "house"}
PATTERN_SHAPE = "rectangle"
