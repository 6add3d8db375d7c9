"""Tests for the traversal engine.

Critical Invariants:
- Non-terminal values are copied to distinct instances, terminals are returned as-is
- Cycles terminate and are reproduced, not unrolled
- Shared references stay shared within one call
- Every level of an inheritance chain is copied
- Failures propagate, no partial copies
"""

import array
import sys
from collections import OrderedDict, UserDict, defaultdict, deque, namedtuple
from collections.abc import MutableMapping
from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel

from deepclone import (
    AccessError,
    AllocationPolicy,
    CopySettings,
    DeepCopier,
    InstantiationError,
    TraversalDepthError,
    deep_copy,
)


@dataclass
class Record:
    name: str
    tags: list[str]
    self: "Record | None" = None


class Animal:
    def __init__(self, legs):
        self.legs = legs
        self._habitat = ["land"]


class Mammal(Animal):
    __slots__ = ("fur",)

    def __init__(self, legs, fur):
        super().__init__(legs)
        self.fur = fur


class Dog(Mammal):
    __slots__ = ("__owner",)

    def __init__(self, owner):
        super().__init__(4, "short")
        self.__owner = owner

    @property
    def owner(self):
        return self.__owner


@dataclass(frozen=True)
class Money:
    amount: int
    history: list[int] = field(default_factory=list)


class Tagged(list):
    pass


class Profile(BaseModel):
    name: str
    scores: list[int]


Pair = namedtuple("Pair", "left right")


class Widget:
    def __init__(self):
        self.clicks = []
        self.handler = self.on_click
        self.record = self.clicks.append

    def on_click(self):
        self.clicks.append(1)


class Labeled(str):
    pass


class TaggedDict(UserDict):
    pass


class Store(MutableMapping):
    def __init__(self, name):
        self.name = name
        self._data = {}

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = value

    def __delitem__(self, key):
        del self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)


# Identity separation and terminals


@pytest.mark.parametrize("value", [0, 3.5, True, "text", b"raw", 10**30], ids=repr)
def test_terminals_are_returned_as_is(copier, value):
    """CRITICAL: terminal values are never duplicated."""
    assert copier.copy(value) is value
    assert copier.copy(value) is value


def test_none_copies_to_none(copier):
    assert copier.copy(None) is None


@pytest.mark.parametrize(
    "value",
    [[1], {"a": 1}, {1, 2}, (1, [2]), frozenset({1}), bytearray(b"x"), Record("a", [])],
    ids=["list", "dict", "set", "tuple", "frozenset", "bytearray", "record"],
)
def test_non_terminals_get_new_identity(copier, value):
    """CRITICAL: copy is a distinct instance of the identical runtime type."""
    result = copier.copy(value)
    assert result is not value
    assert type(result) is type(value)
    assert result == value


def test_nested_containers_are_independent(copier):
    source = {"outer": [{"inner": [1, 2]}]}
    result = copier.copy(source)

    result["outer"][0]["inner"].append(3)

    assert source == {"outer": [{"inner": [1, 2]}]}
    assert result["outer"][0] is not source["outer"][0]


# Cycles and sharing


def test_self_referential_composite(copier, node_cls):
    """CRITICAL: a.next == a copies to b.next == b, not to the source."""
    a = node_cls("a")
    a.next = a

    b = copier.copy(a)

    assert b is not a
    assert b.next is b


def test_two_node_cycle(copier, node_cls):
    a = node_cls("a")
    b = node_cls("b", next=a)
    a.next = b

    a2 = copier.copy(a)

    assert a2.next.next is a2
    assert a2.next is not b


def test_self_containing_list(copier):
    items = [1]
    items.append(items)

    result = copier.copy(items)

    assert result[1] is result
    assert result is not items


def test_cycle_through_tuple(copier):
    """Immutable containers in a cycle resolve to one copy."""
    inner = []
    outer = (inner,)
    inner.append(outer)

    result = copier.copy(outer)

    assert result[0][0] is result
    assert result[0] is not inner


def test_shared_reference_is_preserved(copier, holder_cls):
    """CRITICAL: one source reached twice yields one copy."""
    shared = ["payload"]
    x = holder_cls(shared, "x")
    y = holder_cls(shared, "y")

    x2, y2 = copier.copy([x, y])

    assert x2.ref is y2.ref
    assert x2.ref is not shared


def test_mapping_values_sharing_one_identity(copier):
    """{k1: v1, k2: v1} keeps both values as one new object."""
    v1 = ["v"]
    result = copier.copy({"k1": v1, "k2": v1})

    assert result["k1"] is result["k2"]
    assert result["k1"] is not v1
    assert list(result) == ["k1", "k2"]


def test_identity_not_shared_across_calls(copier):
    shared = [1]
    first = copier.copy(shared)
    second = copier.copy(shared)
    assert first is not second


def test_equal_but_distinct_values_stay_distinct(copier):
    a = [1]
    b = [1]
    a2, b2 = copier.copy([a, b])
    assert a2 is not b2


# Composite records


def test_record_scenario(copier):
    """{name: "A", tags: ["x", "y"], self: <cycle>}."""
    source = Record("A", ["x", "y"])
    source.self = source

    result = copier.copy(source)

    assert result is not source
    assert result.name is source.name
    assert result.tags == ["x", "y"]
    assert result.tags is not source.tags
    assert result.tags[0] is source.tags[0]
    assert result.self is result


def test_inheritance_chain_is_copied_completely(copier):
    """CRITICAL: slots declared at every level of the hierarchy are copied."""
    owner = {"name": "Ada"}
    dog = Dog(owner)

    result = copier.copy(dog)

    assert type(result) is Dog
    assert result.owner == owner
    assert result.owner is not owner
    assert result.fur == "short"
    assert result.legs == 4
    assert result._habitat == ["land"]
    assert result._habitat is not dog._habitat


def test_frozen_dataclass(copier):
    source = Money(5, [1, 2])
    result = copier.copy(source)

    assert result == source
    assert result.history is not source.history


def test_unset_slots_stay_unset(copier):
    dog = Dog.__new__(Dog)
    dog.fur = "long"

    result = copier.copy(dog)

    assert result.fur == "long"
    assert not hasattr(result, "legs")


def test_initializer_side_effects_are_overwritten(copier):
    """Defaults from the zero-argument initializer are replaced by copied state."""

    @dataclass
    class Config:
        values: list[int] = field(default_factory=lambda: [9, 9, 9])

    result = copier.copy(Config([1]))
    assert result.values == [1]


def test_pydantic_model(copier):
    source = Profile(name="ada", scores=[1, 2])
    result = copier.copy(source)

    assert result == source
    assert result.scores is not source.scores
    result.scores.append(3)
    assert source.scores == [1, 2]


# Containers


def test_container_subclass_keeps_attributes(copier):
    tagged = Tagged([[1], [2]])
    tagged.label = ["important"]

    result = copier.copy(tagged)

    assert type(result) is Tagged
    assert result == [[1], [2]]
    assert result[0] is not tagged[0]
    assert result.label == ["important"]
    assert result.label is not tagged.label


def test_stdlib_containers_keep_shape(copier):
    window = deque([[1]], maxlen=3)
    groups = defaultdict(list, {"a": [1]})
    ordered = OrderedDict([("z", 1), ("a", 2)])
    numbers = array.array("i", [1, 2, 3])

    window2, groups2, ordered2, numbers2 = copier.copy((window, groups, ordered, numbers))

    assert window2.maxlen == 3
    assert window2[0] is not window[0]
    assert groups2.default_factory is list
    assert groups2["a"] == [1]
    assert list(ordered2) == ["z", "a"]
    assert numbers2 == numbers
    assert numbers2 is not numbers


def test_namedtuple(copier):
    source = Pair([1], "right")
    result = copier.copy(source)

    assert type(result) is Pair
    assert result == source
    assert result.left is not source.left


def test_mapping_keys_are_copied(copier):
    @dataclass(eq=False)
    class Key:
        name: str

    key = Key("k")
    result = copier.copy({key: 1})

    (copied_key,) = result
    assert copied_key is not key
    assert copied_key.name == "k"


def test_bound_methods_follow_their_receiver(copier):
    """CRITICAL: a stored bound method must act on the copy, not the source.

    Why: a method left bound to the source lets the copy mutate the original.
    """
    widget = Widget()

    result = copier.copy(widget)
    result.handler()
    result.record(2)

    assert widget.clicks == []
    assert result.clicks == [1, 2]
    assert result.handler.__self__ is result
    assert result.record.__self__ is result.clicks


def test_bound_method_as_root(copier):
    widget = Widget()

    handler = copier.copy(widget.on_click)
    handler()

    assert handler.__self__ is not widget
    assert handler.__self__.clicks == [1]
    assert widget.clicks == []


def test_scalar_subclass_with_attributes_is_copied(copier):
    """Subclasses of str carrying mutable attributes are not terminal."""
    label = Labeled("x")
    label.meta = ["m"]

    (result,) = copier.copy([label])

    assert result is not label
    assert type(result) is Labeled
    assert result == "x"
    assert result.meta == ["m"]
    assert result.meta is not label.meta


def test_pure_python_container_keeps_attributes(copier):
    tagged = TaggedDict({"a": [1]})
    tagged.label = ["x"]

    result = copier.copy(tagged)

    assert type(result) is TaggedDict
    assert result == {"a": [1]}
    assert result["a"] is not tagged["a"]
    assert result.label == ["x"]
    assert result.label is not tagged.label


def test_raw_allocated_container_copies_backing_storage(copier):
    """A container whose initializer needs arguments is copied through its state."""
    store = Store("n")
    store["a"] = [1]

    result = copier.copy(store)

    assert type(result) is Store
    assert result.name == "n"
    assert dict(result) == {"a": [1]}
    assert result["a"] is not store["a"]
    assert result._data is not store._data


# Errors


def test_uninstantiable_type_raises(settings):
    class NeedsArgs:
        def __init__(self, value):
            self.value = value

    copier = DeepCopier(settings.model_copy(update={"allocation_policy": AllocationPolicy.NEVER}))
    with pytest.raises(InstantiationError, match="NeedsArgs"):
        copier.copy({"nested": [NeedsArgs(1)]})


def test_initializer_error_propagates(copier):
    class Broken:
        def __init__(self):
            raise RuntimeError("boom")

    source = Broken.__new__(Broken)
    with pytest.raises(InstantiationError, match="Broken"):
        copier.copy([source])


def test_native_state_raises_access_error(copier):
    class Failure(Exception):
        pass

    with pytest.raises(AccessError) as info:
        copier.copy({"error": Failure("x")})
    assert "Failure" in info.value.type_name


def test_unreadable_slot_raises_access_error(copier):
    class Guarded:
        __slots__ = ("value",)

    class Boom:
        def __get__(self, obj, owner=None):
            raise RuntimeError("no reading")

        def __set__(self, obj, value):
            pass

    Guarded.value = Boom()  # replaces the member descriptor
    with pytest.raises(AccessError, match="'value'") as info:
        copier.copy(Guarded())
    assert info.value.slot == "value"


def test_element_insertion_failure_raises_access_error(copier):
    class ReadOnly(UserDict):
        def __setitem__(self, key, value):
            raise RuntimeError("read-only")

    source = ReadOnly()
    source.data["a"] = 1

    with pytest.raises(AccessError, match="read-only") as info:
        copier.copy(source)
    assert info.value.slot == "<elements>"
    assert "ReadOnly" in info.value.type_name


def test_missing_declared_slot_raises_access_error(copier):
    """CRITICAL: a declared slot that cannot be read fails the copy.

    Why: skipping it would silently produce an incomplete copy.
    """

    class Computed:
        __copy_slots__ = ("value",)

        @property
        def value(self):
            raise AttributeError("not computed yet")

    with pytest.raises(AccessError, match="not computed yet") as info:
        copier.copy(Computed())
    assert info.value.slot == "value"


def test_max_depth(settings):
    copier = DeepCopier(settings.model_copy(update={"max_depth": 2}))
    assert copier.copy([[["ok"]]]) == [[["ok"]]]

    with pytest.raises(TraversalDepthError, match="max_depth 2") as info:
        copier.copy([[[["too deep"]]]])
    assert info.value.depth == 3


def test_recursion_limit_becomes_depth_error(copier):
    nested = []
    for _ in range(sys.getrecursionlimit() * 2):
        nested = [nested]

    with pytest.raises(TraversalDepthError, match="recursion limit"):
        copier.copy(nested)


# Configuration and tracing


def test_extra_terminal_types(settings):
    copier = DeepCopier(settings.model_copy(update={"extra_terminal_types": ["collections.deque"]}))
    window = deque([1])
    assert copier.copy([window])[0] is window


def test_history_receives_record(settings, history, node_cls):
    copier = DeepCopier(settings, history=history)
    a = node_cls("a", tags=["t"])
    a.next = a

    copier.copy(a)

    (record,) = history.get_records()
    assert record.root_type.endswith("FixtureNode")
    assert record.copied == {"composite": 1, "sequence": 1}
    assert record.registry_hits == 1
    assert record.duration_ms >= 0


def test_history_counts_raw_allocations(settings, history):
    copier = DeepCopier(settings, history=history)
    copier.copy(Dog("x"))
    assert history.get_records()[0].raw_allocations == 1


def test_history_disabled(settings, history):
    copier = DeepCopier(settings.model_copy(update={"record_history": False}), history=history)
    copier.copy([1])
    assert history.get_records() == []


def test_failed_copy_is_not_recorded(settings, history):
    class Failure(Exception):
        pass

    copier = DeepCopier(settings, history=history)
    with pytest.raises(AccessError):
        copier.copy(Failure())
    assert history.get_records() == []


def test_deep_copy_shortcut(settings):
    source = {"a": [1]}
    result = deep_copy(source, settings=settings)
    assert result == source
    assert result["a"] is not source["a"]


def test_copier_exposes_settings(settings):
    assert DeepCopier(settings).settings is settings


def test_default_settings_shortcut():
    assert deep_copy([1, [2]]) == [1, [2]]


def test_settings_validation_sanity():
    assert CopySettings(_env_file=None, max_depth=5).max_depth == 5
