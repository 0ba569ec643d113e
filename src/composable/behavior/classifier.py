"""Split a behavior's members into methods, dependencies, slots and resolutions.

Classification never fails. Values that are none of the recognised kinds are
reported as ``ignored``; an unknown policy tag on a resolution is carried
through untouched and only rejected when the engine applies it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple

from composable.core.enums import MemberKind, Policy

from .descriptor import (
    _NON_METHODS,
    Behavior,
    Placeholder,
    Resolution,
    as_behavior,
    private,
    requires,
)

logger = logging.getLogger(__name__)


class ResolutionEntry(NamedTuple):
    name: str
    policy: Policy | str
    method: Callable[..., Any]


@dataclass(frozen=True)
class ClassifiedBehavior:
    """A behavior's members grouped by kind, in declaration order."""

    name: str
    methods: tuple[tuple[str, Callable[..., Any]], ...] = ()
    dependencies: tuple[str, ...] = ()
    private_slots: tuple[str, ...] = ()
    resolutions: tuple[ResolutionEntry, ...] = ()
    ignored: tuple[str, ...] = ()

    @property
    def method_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.methods)

    @property
    def resolution_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.resolutions)

    @property
    def declared(self) -> frozenset[str]:
        """Names a Context for this behavior will expose."""
        return frozenset(self.dependencies) | frozenset(self.private_slots)

    def kind_of(self, member_name: str) -> MemberKind:
        if member_name in self.method_names:
            return MemberKind.METHOD
        if member_name in self.dependencies:
            return MemberKind.DEPENDENCY
        if member_name in self.private_slots:
            return MemberKind.PRIVATE_SLOT
        if member_name in self.resolution_names:
            return MemberKind.RESOLUTION
        if member_name in self.ignored:
            return MemberKind.IGNORED
        raise KeyError(f"{self.name} has no member '{member_name}'")

    def summary(self) -> dict[str, Any]:
        """Plain-data view, used by the CLI."""
        return {
            "name": self.name,
            "methods": list(self.method_names),
            "dependencies": list(self.dependencies),
            "private_slots": list(self.private_slots),
            "resolutions": {
                entry.name: (
                    entry.policy.value
                    if isinstance(entry.policy, Policy)
                    else entry.policy
                )
                for entry in self.resolutions
            },
            "ignored": list(self.ignored),
        }


def member_kind(value: Any) -> MemberKind:
    """Classify a single member value."""
    if isinstance(value, Resolution):
        return MemberKind.RESOLUTION
    if value is requires:
        return MemberKind.DEPENDENCY
    if value is private or value is None:
        return MemberKind.PRIVATE_SLOT
    if isinstance(value, (*_NON_METHODS, Placeholder)):
        return MemberKind.IGNORED
    if callable(value):
        return MemberKind.METHOD
    return MemberKind.IGNORED


def classify(target: Behavior | Any) -> ClassifiedBehavior:
    """Group a behavior's members by kind."""
    source = as_behavior(target)

    methods: list[tuple[str, Callable[..., Any]]] = []
    dependencies: list[str] = []
    private_slots: list[str] = []
    resolutions: list[ResolutionEntry] = []
    ignored: list[str] = []

    for member_name, value in source.items():
        kind = member_kind(value)
        if kind == MemberKind.METHOD:
            methods.append((member_name, value))
        elif kind == MemberKind.DEPENDENCY:
            dependencies.append(member_name)
        elif kind == MemberKind.PRIVATE_SLOT:
            private_slots.append(member_name)
        elif kind == MemberKind.RESOLUTION:
            resolutions.append(
                ResolutionEntry(member_name, value.policy, value.method)
            )
        else:
            ignored.append(member_name)

    if ignored:
        logger.debug(
            "Behavior %s: ignoring non-method members %s",
            source.name,
            ", ".join(ignored),
        )

    return ClassifiedBehavior(
        name=source.name,
        methods=tuple(methods),
        dependencies=tuple(dependencies),
        private_slots=tuple(private_slots),
        resolutions=tuple(resolutions),
        ignored=tuple(ignored),
    )
