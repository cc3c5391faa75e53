from asmscope import config
from asmscope.errors import WeirdError

# Order in which counts are reported (in repr() and in TSV rows)
PT_ORDER = [
    config.PT_BUBBLE,
    config.PT_CHAIN,
    config.PT_CYCLICCHAIN,
    config.PT_FRAYEDROPE,
    config.PT_MISC,
]


class PatternStats(object):
    """Counts of each type of pattern in a component (or a whole graph).

    Counts are stored per pattern type; the num_* properties are just
    shorthand for looking these up.
    """

    def __init__(
        self,
        num_bubbles=0,
        num_chains=0,
        num_cyclicchains=0,
        num_frayedropes=0,
        num_miscs=0,
    ):
        self.type2count = {
            config.PT_BUBBLE: num_bubbles,
            config.PT_CHAIN: num_chains,
            config.PT_CYCLICCHAIN: num_cyclicchains,
            config.PT_FRAYEDROPE: num_frayedropes,
            config.PT_MISC: num_miscs,
        }

    @classmethod
    def from_patterns(cls, patterns):
        stats = cls()
        for p in patterns:
            stats.update(p.pattern_type)
        return stats

    @property
    def num_bubbles(self):
        return self.type2count[config.PT_BUBBLE]

    @property
    def num_chains(self):
        return self.type2count[config.PT_CHAIN]

    @property
    def num_cyclicchains(self):
        return self.type2count[config.PT_CYCLICCHAIN]

    @property
    def num_frayedropes(self):
        return self.type2count[config.PT_FRAYEDROPE]

    @property
    def num_miscs(self):
        return self.type2count[config.PT_MISC]

    def __add__(self, other):
        total = PatternStats()
        for pt in PT_ORDER:
            total.type2count[pt] = self.type2count[pt] + other.type2count[pt]
        return total

    def __eq__(self, other):
        if not isinstance(other, PatternStats):
            return NotImplemented
        return self.type2count == other.type2count

    def __repr__(self):
        counts = ", ".join(
            f"{self.type2count[pt]:,} {config.PT2HR[pt].lower()}(s)"
            for pt in PT_ORDER
        )
        return f"PatternStats({counts})"

    def sum(self):
        return sum(self.type2count.values())

    def counts(self):
        """Returns a list of counts, ordered bubble -> misc."""
        return [self.type2count[pt] for pt in PT_ORDER]

    def update(self, pattern_type):
        if pattern_type not in self.type2count:
            raise WeirdError(f"Unrecognized pattern type: {pattern_type}")
        self.type2count[pattern_type] += 1
