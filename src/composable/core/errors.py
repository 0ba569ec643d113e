"""Custom exception hierarchy for the composition engine.

Every error here is a programming error: it points at an authoring mistake
in a behavior or in the order behaviors are composed. None of them is
retried or recovered by the engine.
"""

from __future__ import annotations

from typing import Any


class ComposableError(Exception):
    """Base exception for all composition engine errors."""


# --- Configuration ---
class ConfigError(ComposableError):
    """Invalid configuration or unresolvable CLI target."""


# --- Composition time ---
class CompositionError(ComposableError):
    """A behavior could not be folded into the object being composed."""

    def __init__(self, name: str, behavior: str, message: str) -> None:
        self.name = name
        self.behavior = behavior
        super().__init__(message)


class UnresolvedDuplicateMethod(CompositionError):
    """Two behaviors define the same method and neither says how to merge."""

    def __init__(self, name: str, behavior: str) -> None:
        super().__init__(
            name,
            behavior,
            f"{behavior} defines '{name}', which is already defined; "
            f"annotate it with a resolution policy",
        )


class SpuriousResolution(CompositionError):
    """A resolution targets a method that nothing has defined yet."""

    def __init__(self, name: str, behavior: str) -> None:
        super().__init__(
            name,
            behavior,
            f"{behavior} resolves '{name}', but no method of that name "
            f"has been composed yet",
        )


class UnsupportedPolicy(CompositionError):
    """A resolution names a policy outside the recognised set."""

    def __init__(self, name: str, behavior: str, policy: Any) -> None:
        self.policy = policy
        super().__init__(
            name,
            behavior,
            f"{behavior} resolves '{name}' with unsupported policy {policy!r}",
        )


# --- Call time ---
class UndeclaredAccess(ComposableError, AttributeError):
    """Behavior code touched a member its Context does not declare."""

    def __init__(self, name: str, behavior: str = "") -> None:
        owner = f" of {behavior}" if behavior else ""
        super().__init__(
            f"'{name}' is not a declared dependency or private slot{owner}"
        )
        # AttributeError.__init__ resets ``name``
        self.name = name
        self.behavior = behavior


class MissingCapability(ComposableError, LookupError):
    """A declared dependency is not provided by anything composed before it."""

    def __init__(self, name: str, behavior: str) -> None:
        self.name = name
        self.behavior = behavior
        super().__init__(
            f"{behavior} requires '{name}', but it is not provided by the "
            f"parent, an earlier behavior, or the receiver"
        )
