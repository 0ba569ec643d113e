"""Composition engine: folds behaviors into a single composite object.

Behaviors are folded strictly left to right onto a fresh set of methods,
optionally chained to one parent composite:

- a plain method whose name the composite already owns is an error
  (:class:`UnresolvedDuplicateMethod`);
- a resolution whose name the composite does not own yet is an error
  (:class:`SpuriousResolution`);
- otherwise the resolution's policy merges the existing method with the
  incoming one.

Every failure happens here, before any instance exists, and no composite is
produced. Each behavior gets its own :class:`ContextFactory`, so every
attached method runs against that behavior's Context for the receiver.

Usage::

    Songwriter = compose(None, SingsSongs, resolve(HasAwards, {"initialize": "after"}))
    artist = Songwriter.create()
    artist.initialize().add_song("Fast Car").add_award("Grammy")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType, MethodType
from typing import Any

from composable.behavior.classifier import classify
from composable.behavior.descriptor import as_behavior
from composable.context.factory import ContextFactory
from composable.core.config import CompositionConfig
from composable.core.errors import SpuriousResolution, UnresolvedDuplicateMethod
from composable.policy.library import apply_policy, to_policy

from .instance import DomainObject
from .wrapper import wrap_method

logger = logging.getLogger(__name__)


class CompositeObject:
    """The method surface produced by :func:`compose`.

    Methods are reachable as attributes, bound to the composite itself, and
    through instances made with :meth:`create`. Lookups the composite cannot
    answer go to its parent, fixed at composition time.

    Behavior methods shadow the introspection API (``create``, ``lookup``,
    ``name``, ``parent``, ...) when read off the composite, so a composite
    whose behaviors define ``name`` is still a working receiver. The
    module-level functions (:func:`lookup_method`, :func:`name_of`, ...)
    answer the same questions regardless of what the behaviors define.
    """

    def __init__(
        self,
        methods: Mapping[str, Callable[..., Any]],
        parent: CompositeObject | None = None,
        *,
        name: str = "",
        origins: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        object.__setattr__(self, "_methods", MappingProxyType(dict(methods)))
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_name", name or "<composite>")
        object.__setattr__(
            self, "_origins", MappingProxyType(dict(origins or {}))
        )

    @property
    def name(self) -> str:
        return name_of(self)

    @property
    def parent(self) -> CompositeObject | None:
        return parent_of(self)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Callable[..., Any]:
        """Find the unbound method *name* here or up the parent chain."""
        return lookup_method(self, name)

    def has_method(self, name: str) -> bool:
        return _find(self, name) is not None

    def own_method_names(self) -> tuple[str, ...]:
        return own_method_names_of(self)

    def method_names(self) -> tuple[str, ...]:
        """Every method reachable from this composite, own methods first."""
        return method_names_of(self)

    def origins(self, name: str) -> tuple[str, ...]:
        """Behaviors that contributed to *name*, in composition order."""
        return origins_of(self, name)

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def create(self, **fields: Any) -> DomainObject:
        """Make a new domain object delegating to this composite."""
        return DomainObject(self, **fields)

    # ------------------------------------------------------------------
    # Attribute protocol
    # ------------------------------------------------------------------

    def __getattribute__(self, name: str) -> Any:
        if not name.startswith("_"):
            method = _find(self, name)
            if method is not None:
                return MethodType(method, self)
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return MethodType(lookup_method(self, name), self)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"composite {self._name} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"composite {self._name} is immutable")

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _find(self, name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(method_names_of(self))

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *method_names_of(self)})

    def __repr__(self) -> str:
        parent = f" parent={self._parent._name}" if self._parent else ""
        return f"<CompositeObject {self._name} methods={list(self._methods)}{parent}>"


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------


def _find(composite: CompositeObject, name: str) -> Callable[..., Any] | None:
    current: CompositeObject | None = composite
    while current is not None:
        method = current._methods.get(name)
        if method is not None:
            return method
        current = current._parent
    return None


def lookup_method(composite: CompositeObject, name: str) -> Callable[..., Any]:
    """Find the unbound method *name* on *composite* or up its parent chain."""
    method = _find(composite, name)
    if method is None:
        raise AttributeError(f"{composite._name} has no method '{name}'")
    return method


def name_of(composite: CompositeObject) -> str:
    return composite._name


def parent_of(composite: CompositeObject) -> CompositeObject | None:
    return composite._parent


def own_method_names_of(composite: CompositeObject) -> tuple[str, ...]:
    return tuple(composite._methods)


def method_names_of(composite: CompositeObject) -> tuple[str, ...]:
    """Every method reachable from *composite*, own methods first."""
    seen: dict[str, None] = {}
    current: CompositeObject | None = composite
    while current is not None:
        for name in current._methods:
            seen.setdefault(name, None)
        current = current._parent
    return tuple(seen)


def origins_of(composite: CompositeObject, name: str) -> tuple[str, ...]:
    """Behaviors that contributed to *name*, in composition order."""
    current: CompositeObject | None = composite
    while current is not None:
        if name in current._methods:
            return current._origins.get(name, ())
        current = current._parent
    raise AttributeError(f"{composite._name} has no method '{name}'")


def compose(
    parent: CompositeObject | None,
    *behaviors: Any,
    config: CompositionConfig | None = None,
    name: str = "",
) -> CompositeObject:
    """Fold *behaviors* left to right into a new composite.

    Args:
        parent: Composite to delegate unresolved lookups to, or ``None``.
        *behaviors: ``Behavior`` objects, mappings, or classes.
        config: Composition options; defaults to :class:`CompositionConfig`.
        name: Display name; defaults to the behavior names joined by ``+``.

    Raises:
        UnresolvedDuplicateMethod: Two behaviors define the same method and
            the later one carries no resolution.
        SpuriousResolution: A resolution targets a method the composite
            does not own yet.
        UnsupportedPolicy: A resolution names an unknown policy.
        TypeError: *parent* is not a composite, or a behavior is not a
            behavior.
    """
    if parent is not None and not isinstance(parent, CompositeObject):
        raise TypeError(
            f"parent must be a CompositeObject or None, got {type(parent).__name__}"
        )
    config = config or CompositionConfig()

    inherited = frozenset(method_names_of(parent)) if parent is not None else frozenset()
    methods: dict[str, Callable[..., Any]] = {}
    origins: dict[str, tuple[str, ...]] = {}
    names: list[str] = []

    for item in behaviors:
        classified = classify(as_behavior(item))
        names.append(classified.name)

        # Dependencies may only be met by the parent or earlier behaviors
        factory = ContextFactory(
            classified,
            capabilities=inherited.union(methods),
            receiver_capabilities=config.receiver_capabilities,
        )

        for method_name, method in classified.methods:
            if method_name in methods:
                logger.warning(
                    "Composition failed: %s redefines '%s' (from %s)",
                    classified.name,
                    method_name,
                    ", ".join(origins[method_name]),
                )
                raise UnresolvedDuplicateMethod(method_name, classified.name)
            methods[method_name] = wrap_method(method, factory)
            origins[method_name] = (classified.name,)

        for entry in classified.resolutions:
            if entry.name not in methods:
                logger.warning(
                    "Composition failed: %s resolves missing method '%s'",
                    classified.name,
                    entry.name,
                )
                raise SpuriousResolution(entry.name, classified.name)
            policy = to_policy(entry.policy, name=entry.name, behavior=classified.name)
            methods[entry.name] = apply_policy(
                policy,
                methods[entry.name],
                wrap_method(entry.method, factory),
                name=entry.name,
                behavior=classified.name,
            )
            origins[entry.name] = (
                *origins[entry.name],
                f"{classified.name} ({policy.value})",
            )

    composite = CompositeObject(
        methods,
        parent,
        name=name or "+".join(names),
        origins=origins,
    )
    logger.debug(
        "Composed %s: %d behaviors, %d own methods, %d inherited",
        name_of(composite),
        len(names),
        len(methods),
        len(inherited.difference(methods)),
    )
    return composite
