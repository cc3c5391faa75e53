import pytest
from asmscope import config
from asmscope.errors import WeirdError
from asmscope.graph import PatternStats


def test_update_and_sum():
    ps = PatternStats()
    ps.update(config.PT_CHAIN)
    ps.update(config.PT_CHAIN)
    ps.update(config.PT_BUBBLE)
    assert ps.num_chains == 2
    assert ps.num_bubbles == 1
    assert ps.sum() == 3
    assert ps.counts() == [1, 2, 0, 0, 0]
    with pytest.raises(WeirdError) as ei:
        ps.update(99)
    assert str(ei.value) == "Unrecognized pattern type: 99"


def test_add():
    total = PatternStats(num_bubbles=1, num_miscs=2) + PatternStats(
        num_bubbles=3, num_frayedropes=1
    )
    assert total == PatternStats(num_bubbles=4, num_frayedropes=1, num_miscs=2)
    assert total != PatternStats()


def test_repr():
    assert repr(PatternStats(num_cyclicchains=1234)) == (
        "PatternStats(0 bubble(s), 0 chain(s), 1,234 cyclic chain(s), "
        "0 frayed rope(s), 0 misc(s))"
    )
