from bubbleset import BubbleSet, fixed_solution
from bubbleset.strategies import force
import pytest

layout_function = fixed_solution({"A": {"x": 0.0, "y": 0.0, "radius": 1.0}})


def test_default_packing_strategy():
    layout = BubbleSet(layout_function=layout_function)
    records = layout.fit([{"set": ["A"]}, {"set": ["A"]}])
    assert all(r["x"] is not None for r in records)
    assert layout.packer is None


# This raises a DeprecationWarning
def test_packing_stragegy_deprecation_warning():
    with pytest.warns(DeprecationWarning, match='The argument `packing_stragegy` is being deprecated'):
        layout = BubbleSet(packing_stragegy='force', layout_function=layout_function)
        assert layout.packing_strategy is force


def test_both_arguments_agree():
    with pytest.warns(DeprecationWarning):
        layout = BubbleSet(packing_strategy='force', packing_stragegy='force')
        assert layout.packing_strategy is force


def test_argument_mismatch():
    with pytest.raises(ValueError, match='Conflicting values:'):
        with pytest.warns(DeprecationWarning):
            _ = BubbleSet(packing_strategy='pack', packing_stragegy='force')


def test_invalid_packing_strategy():
    with pytest.raises(ValueError, match='Invalid packing strategy: circle'):
        _ = BubbleSet(packing_strategy='circle')


def test_invalid_size():
    with pytest.raises(ValueError, match='Invalid canvas size'):
        _ = BubbleSet(size=(0, 100))


def test_missing_layout_function():
    with pytest.raises(ValueError, match='no circle solver is set'):
        BubbleSet().fit([{"set": ["A"]}])
