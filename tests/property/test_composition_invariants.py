"""Property tests: composition and per-receiver state invariants.

Uses hypothesis to generate behaviors with random method names and random
call sequences and verifies that composition, conflict detection, policy
ordering and private state behave the same regardless of the input.
"""

from hypothesis import given, settings, strategies as st

import pytest

from composable.behavior import Behavior, behavior, private, resolve
from composable.composition import compose
from composable.core.errors import UnresolvedDuplicateMethod


method_names = st.from_regex(r"[a-z][a-z0-9_]{0,10}", fullmatch=True)


def _constant(value):
    def method(self):
        return value

    return method


def _recording(tag, log):
    def method(self):
        log.append(tag)
        return tag

    return method


@behavior
class Tally:
    _total = private

    def add(self, amount):
        self._total = (self._total or 0) + amount
        return self

    def total(self):
        return self._total or 0


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


@st.composite
def disjoint_groups(draw):
    names = draw(st.lists(method_names, min_size=1, max_size=12, unique=True))
    owners = draw(st.lists(st.integers(0, 4), min_size=len(names), max_size=len(names)))
    groups = [
        {name for name, owner in zip(names, owners) if owner == i} for i in range(5)
    ]
    return [group for group in groups if group]


@given(disjoint_groups())
@settings(max_examples=100)
def test_disjoint_behaviors_compose_to_union(groups):
    """Behaviors with disjoint names compose to the union of their methods."""
    behaviors = [
        Behavior(f"B{i}", {name: _constant((i, name)) for name in group})
        for i, group in enumerate(groups)
    ]
    composite = compose(None, *behaviors)
    instance = composite.create()

    assert set(composite.method_names()) == set().union(*groups)
    for i, group in enumerate(groups):
        for name in group:
            assert getattr(instance, name)() == (i, name)


@given(method_names, st.sets(method_names, max_size=3))
def test_shared_name_without_resolution_fails(shared, extra):
    first = Behavior("First", {shared: _constant(1)})
    second = Behavior("Second", {shared: _constant(2), **{n: _constant(n) for n in extra}})
    with pytest.raises(UnresolvedDuplicateMethod) as info:
        compose(None, first, second)
    assert info.value.name == shared
    assert info.value.behavior == "Second"


@given(st.integers(min_value=1, max_value=6))
def test_after_chain_runs_in_composition_order(count):
    """Each ``after`` resolution appends to the chain; the last result wins."""
    log: list[int] = []
    behaviors = [Behavior("B0", {"run": _recording(0, log)})]
    behaviors += [
        resolve(Behavior(f"B{i}", {"run": _recording(i, log)}), {"run": "after"})
        for i in range(1, count)
    ]
    instance = compose(None, *behaviors).create()

    assert instance.run() == count - 1
    assert log == list(range(count))


@given(st.integers(min_value=1, max_value=6))
def test_before_chain_runs_in_reverse_order(count):
    """Each ``before`` resolution prepends; the first behavior's result wins."""
    log: list[int] = []
    behaviors = [Behavior("B0", {"run": _recording(0, log)})]
    behaviors += [
        resolve(Behavior(f"B{i}", {"run": _recording(i, log)}), {"run": "before"})
        for i in range(1, count)
    ]
    instance = compose(None, *behaviors).create()

    assert instance.run() == 0
    assert log == list(reversed(range(count)))


# ---------------------------------------------------------------------------
# Private state
# ---------------------------------------------------------------------------


@given(st.lists(st.integers(min_value=-1000, max_value=1000), max_size=30))
def test_private_state_persists_between_calls(amounts):
    instance = compose(None, Tally).create()
    for amount in amounts:
        instance.add(amount)
    assert instance.total() == sum(amounts)


@given(st.lists(st.tuples(st.booleans(), st.integers(-100, 100)), max_size=40))
def test_receivers_never_share_state(operations):
    """Interleaved calls on two receivers keep two separate totals."""
    composite = compose(None, Tally)
    left, right = composite.create(), composite.create()
    expected = {True: 0, False: 0}

    for to_left, amount in operations:
        (left if to_left else right).add(amount)
        expected[to_left] += amount

    assert left.total() == expected[True]
    assert right.total() == expected[False]


@given(st.integers(min_value=0, max_value=10))
def test_returning_self_yields_the_receiver(depth):
    instance = compose(None, Tally).create()
    result = instance
    for _ in range(depth):
        result = result.add(1)
    assert result is instance
    assert instance.total() == depth
