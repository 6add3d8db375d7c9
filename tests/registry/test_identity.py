"""Tests for the identity registry.

Critical Invariants:
- Keys compare by identity, never equality
- At most one entry per identity
"""

import pytest

from deepclone.registry import MISSING, IdentityRegistry


@pytest.fixture
def registry():
    """Create an empty IdentityRegistry."""
    return IdentityRegistry()


def test_lookup_missing_returns_sentinel(registry):
    assert registry.lookup([1]) is MISSING
    assert registry.hits == 0


def test_register_then_lookup(registry):
    source = [1, 2]
    copy = [1, 2]
    registry.register(source, copy)

    assert registry.lookup(source) is copy
    assert source in registry
    assert len(registry) == 1
    assert registry.hits == 1


def test_equal_but_distinct_sources_do_not_alias(registry):
    """CRITICAL: two equal sources must not share one copy.

    Why: equality-keyed lookup would merge independent objects in the copy.
    """
    first = {"a": 1}
    second = {"a": 1}
    registry.register(first, "copy-of-first")

    assert first == second
    assert registry.lookup(second) is MISSING
    assert second not in registry


def test_double_registration_is_rejected(registry):
    """CRITICAL: one identity, one copy."""
    source = object()
    registry.register(source, object())

    with pytest.raises(ValueError, match="already has a registered copy"):
        registry.register(source, object())


def test_sources_are_kept_alive(registry):
    """Temporaries registered mid-call must not have their id recycled."""
    registry.register([], "first")
    # A fresh temporary list may reuse a freed address; the registry holds
    # the first one so the id stays taken.
    assert registry.lookup([]) is MISSING
