from . import config

MAXN = config.MAXN_DEFAULT
MAXE = config.MAXE_DEFAULT
LAYOUT = True
VERBOSE = False
