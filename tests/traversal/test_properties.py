"""Property-based tests for deep copy invariants using Hypothesis.

Critical Invariants:
- Copy is structurally equal to its source at every depth
- No mutable container in the copy is a container of the source
- Terminals in the copy are the source's own objects
"""

from dataclasses import dataclass

from hypothesis import given
from hypothesis import strategies as st

from deepclone import CopySettings, DeepCopier
from deepclone.core.category import Category, classify

copier = DeepCopier(CopySettings(_env_file=None))

scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False),
    st.text(max_size=5),
    st.binary(max_size=5),
)

graphs = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.tuples(children, children),
        st.dictionaries(st.text(max_size=3), children, max_size=4),
        st.sets(st.integers(), max_size=4),
    ),
    max_leaves=25,
)


@dataclass
class Box:
    content: object


def _pairs(source, result):
    """Walk source and copy side by side, yielding aligned value pairs."""
    yield source, result
    if isinstance(source, dict):
        for key in source:
            yield from _pairs(source[key], result[key])
    elif isinstance(source, (list, tuple)):
        for left, right in zip(source, result, strict=True):
            yield from _pairs(left, right)
    elif isinstance(source, Box):
        yield from _pairs(source.content, result.content)


@given(graphs)
def test_copy_is_structurally_equal(value):
    """Property: copy == source, field for field, at every depth."""
    assert copier.copy(value) == value


@given(graphs)
def test_no_shared_mutable_storage(value):
    """Property: every non-terminal in the copy is a new object."""
    result = copier.copy(value)
    for left, right in _pairs(value, result):
        if classify(left) is Category.TERMINAL:
            assert right is left
        else:
            assert right is not left
            assert type(right) is type(left)


@given(graphs)
def test_composite_wrapping(value):
    """Property: records holding arbitrary graphs copy like the graphs themselves."""
    box = Box(value)
    result = copier.copy(box)

    assert result == box
    assert result is not box
    for left, right in _pairs(box, result):
        if classify(left) is not Category.TERMINAL:
            assert right is not left


@given(st.lists(st.integers(), min_size=1, max_size=5), st.integers(min_value=2, max_value=5))
def test_sharing_topology_is_preserved(items, fanout):
    """Property: one list referenced N times copies to one list referenced N times."""
    shared = list(items)
    result = copier.copy([shared] * fanout)

    assert all(entry is result[0] for entry in result)
    assert result[0] is not shared
    assert result[0] == shared
