"""Behavior descriptors: immutable bundles of members folded into composites.

A behavior maps member names to one of four things:

- a plain function, which becomes a method of the composite;
- ``requires``, declaring a dependency on a method provided by whatever the
  behavior is composed with;
- ``private`` (or ``None``), declaring a private slot that starts out empty
  for every receiver;
- a :class:`Resolution`, a method that must be merged with an existing
  method of the same name under a policy.

Behaviors can be built from a mapping or from a class body::

    @behavior
    class SingsSongs:
        _songs = private

        def initialize(self):
            self._songs = []
            return self

        def add_song(self, name):
            self._songs.append(name)
            return self

Inside a method, ``self`` is the behavior's Context for the receiver, never
the receiver itself.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from composable.core.enums import Policy

_ANONYMOUS = "<anonymous>"


class Placeholder:
    """Marker value for a declared-but-not-implemented member."""

    __slots__ = ("_label",)

    def __init__(self, label: str) -> None:
        self._label = label

    def __repr__(self) -> str:
        return self._label

    def __copy__(self) -> Placeholder:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Placeholder:
        return self


requires = Placeholder("requires")
private = Placeholder("private")


@dataclass(frozen=True)
class Resolution:
    """A method to merge with an existing same-named method."""

    policy: Policy | str
    method: Callable[..., Any]

    def __post_init__(self) -> None:
        if not callable(self.method):
            raise TypeError(
                f"Resolution needs a callable, got {type(self.method).__name__}"
            )


class Behavior(Mapping[str, Any]):
    """An immutable, named mapping of member declarations."""

    __slots__ = ("_name", "_members", "_doc")

    def __init__(
        self,
        name: str = _ANONYMOUS,
        members: Mapping[str, Any] | None = None,
        *,
        doc: str | None = None,
    ) -> None:
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_members", MappingProxyType(dict(members or {})))
        object.__setattr__(self, "_doc", doc)

    @property
    def name(self) -> str:
        return self._name

    @property
    def doc(self) -> str | None:
        return self._doc

    def __getitem__(self, key: str) -> Any:
        return self._members[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Behavior {self._name} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Behavior {self._name} is immutable")

    def __repr__(self) -> str:
        return f"Behavior({self._name!r}, members={list(self._members)})"


# Class-body descriptors that would misbehave if called with a Context
_NON_METHODS = (staticmethod, classmethod, property)


def behavior(cls: type | None = None, *, name: str | None = None) -> Any:
    """Class decorator turning a class body into a :class:`Behavior`.

    Dunder attributes are skipped; everything else becomes a member. Can be
    used bare (``@behavior``) or with a display name
    (``@behavior(name="Sings")``).
    """

    def decorator(klass: type) -> Behavior:
        members = {
            key: value
            for key, value in vars(klass).items()
            if not (key.startswith("__") and key.endswith("__"))
        }
        return Behavior(name or klass.__name__, members, doc=klass.__doc__)

    if cls is None:
        return decorator
    return decorator(cls)


def resolves(policy: Policy | str) -> Callable[[Callable[..., Any]], Resolution]:
    """Method decorator marking a class-body method as a resolution."""

    def decorator(method: Callable[..., Any]) -> Resolution:
        return Resolution(policy, method)

    return decorator


def resolve(
    target: Behavior | Mapping[str, Any],
    policies: Mapping[str, Policy | str],
) -> Behavior:
    """Return a copy of *target* with the named methods marked as resolutions.

    Names that already carry a resolution get their policy replaced.

    Raises:
        KeyError: If a name is not a member of *target*.
        TypeError: If a name is bound to something other than a method.
    """
    source = as_behavior(target)
    members = dict(source)

    for member_name, policy in policies.items():
        if member_name not in members:
            raise KeyError(f"{source.name} has no member '{member_name}' to resolve")
        value = members[member_name]
        if isinstance(value, Resolution):
            members[member_name] = Resolution(policy, value.method)
        elif callable(value) and not isinstance(value, (*_NON_METHODS, Placeholder)):
            members[member_name] = Resolution(policy, value)
        else:
            raise TypeError(
                f"{source.name}.{member_name} is not a method and cannot be resolved"
            )

    return Behavior(source.name, members, doc=source.doc)


def as_behavior(value: Any) -> Behavior:
    """Coerce a Behavior, mapping, or undecorated class into a Behavior."""
    if isinstance(value, Behavior):
        return value
    if isinstance(value, Mapping):
        return Behavior(_ANONYMOUS, value)
    if isinstance(value, type):
        return behavior(value)
    raise TypeError(
        f"Cannot use {type(value).__name__} as a behavior; "
        f"pass a Behavior, a mapping, or a class"
    )
