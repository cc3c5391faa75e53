###############################################################################
# Miscellaneous settings
###############################################################################

# Node orientations
FWD = "+"
REV = "-"

# The input formats we accept for orientations, mapped to FWD / REV. (GML files
# produced by MetaCarvel say "FOW" and "REV"; other tools just say + or -.)
ORIENTATION_ALIASES = {
    "+": FWD,
    "-": REV,
    "FOW": FWD,
    "REV": REV,
}

# Used to create lines in logging output like =====
SEPBIG = "="
SEPSML = "-"

###############################################################################
# Patterns
###############################################################################

# Pattern types -- used internally.
PT_BUBBLE = 0
PT_CHAIN = 1
PT_CYCLICCHAIN = 2
PT_FRAYEDROPE = 3
# Recognized (so that, e.g., stored data containing misc patterns can still be
# loaded and styled) but never produced by pattern detection.
PT_MISC = 4

# Maps pattern types to human-readable names.
PT2HR = {
    PT_BUBBLE: "Bubble",
    PT_CHAIN: "Chain",
    PT_CYCLICCHAIN: "Cyclic Chain",
    PT_FRAYEDROPE: "Frayed Rope",
    PT_MISC: "Misc",
}

# Maps pattern types to human-readable names without spaces. Used in the
# stored output and in the names of clusters in DOT files.
PT2HR_NOSPACE = {
    PT_BUBBLE: "bubble",
    PT_CHAIN: "chain",
    PT_CYCLICCHAIN: "cyclicchain",
    PT_FRAYEDROPE: "frayedrope",
    PT_MISC: "misc",
}

# Reverse of PT2HR_NOSPACE, for when we read stored data back in.
HR_NOSPACE2PT = {v: k for k, v in PT2HR_NOSPACE.items()}

# One-letter style classes for each pattern type. The renderer keys pattern
# colors / shapes on these.
PT2CLASS = {
    PT_BUBBLE: "B",
    PT_CHAIN: "C",
    PT_CYCLICCHAIN: "Y",
    PT_FRAYEDROPE: "F",
    PT_MISC: "M",
}

###############################################################################
# Edge weights
###############################################################################

# Fields that we'll treat as "edge weights" when scaling edges. A graph can
# have at most one of these.
EDGE_WEIGHT_FIELDS = ["bsize", "multiplicity", "weight"]

# Outlier statuses for edges, based on their weights.
OUTLIER_HIGH = "high"
OUTLIER_LOW = "low"
OUTLIER_NONE = "none"

# Relative weight given to edges when we can't (or don't need to) scale them
DEFAULT_RELATIVE_WEIGHT = 0.5

# Display thickness of edges, computed from relative weight
MIN_EDGE_THICKNESS = 3
MAX_EDGE_THICKNESS = 10

###############################################################################
# Edge control points
###############################################################################

# If every control point of an edge is at most this far from the straight line
# between its source and target, we'll just draw it as a straight line.
CTRL_PT_DIST_EPSILON = 5.0

# Control point weights of exactly 0 or 1 collide with the implicit endpoints
# of an edge in the renderer's bezier model, so we nudge them to these.
CTRL_PT_MIN_WEIGHT = 0.01
CTRL_PT_MAX_WEIGHT = 0.99

# Number of decimal places we round control point distances/weights to.
CTRL_PT_DECIMALS = 2

###############################################################################
# Components
###############################################################################

# Components with more nodes / edges than this won't be laid out.
MAXN_DEFAULT = 8000
MAXE_DEFAULT = 8000

# When drawing multiple components at once, each component is placed this
# many points below the one drawn before it.
COMPONENT_PADDING = 50
