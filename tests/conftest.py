"""Shared fixtures for the composable test suite."""

from __future__ import annotations

import logging

import pytest
import structlog

from composable.behavior import Behavior, behavior, private, requires
from composable.composition import compose
from composable.examples.musicians import HasAwards, SingsSongs


# ---------------------------------------------------------------------------
# Behaviors
# ---------------------------------------------------------------------------

@pytest.fixture
def sings_songs() -> Behavior:
    return SingsSongs


@pytest.fixture
def has_awards() -> Behavior:
    return HasAwards


@pytest.fixture
def counter() -> Behavior:
    """A behavior with one private slot and chainable methods."""

    @behavior
    class Counter:
        _count = private

        def reset(self):
            self._count = 0
            return self

        def increment(self, by=1):
            self._count = (self._count or 0) + by
            return self

        def count(self):
            return self._count

    return Counter


@pytest.fixture
def greets() -> Behavior:
    """A behavior that depends on ``name`` from whatever it joins."""

    @behavior
    class Greets:
        name = requires

        def greet(self):
            return f"Hello, {self.name()}"

    return Greets


@pytest.fixture
def named() -> Behavior:
    @behavior
    class Named:
        _name = private

        def set_name(self, value):
            self._name = value
            return self

        def name(self):
            return self._name

    return Named


# ---------------------------------------------------------------------------
# Composites
# ---------------------------------------------------------------------------

@pytest.fixture
def counter_composite(counter):
    return compose(None, counter)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def reset_logging():
    """Undo ``setup_logging`` so structlog handlers don't leak across tests."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers = [
        h for h in root.handlers
        if not isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]
    root.setLevel(level)
    structlog.reset_defaults()
