from asmscope import config
from asmscope.graph.pattern_stats import PT_ORDER


def test_pattern_type_tables_agree():
    pts = set(PT_ORDER)
    assert set(config.PT2HR) == pts
    assert set(config.PT2HR_NOSPACE) == pts
    assert set(config.PT2CLASS) == pts
    for pt, name in config.PT2HR_NOSPACE.items():
        assert config.HR_NOSPACE2PT[name] == pt


def test_pattern_classes_are_distinct():
    # The renderer picks pattern colors based on these classes
    assert len(set(config.PT2CLASS.values())) == len(config.PT2CLASS)
