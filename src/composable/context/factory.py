"""Builds and caches one Context per receiver for a behavior.

Each composed behavior owns a :class:`ContextFactory`. The factory keeps a
registration table keyed by receiver identity, holding a weak reference to
the receiver so a Context lives exactly as long as its receiver. The first
method call on a receiver builds its Context under a lock, so concurrent
first calls still agree on a single Context.

Declared dependencies are checked once, when the Context is built, against
the capabilities that were visible when the behavior was composed.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable, Iterable
from typing import Any

from composable.behavior.classifier import ClassifiedBehavior
from composable.core.errors import MissingCapability

from .proxy import Context, install_forwarders

logger = logging.getLogger(__name__)


def _provides(
    receiver: Any,
    name: str,
    capabilities: frozenset[str] | None,
    receiver_capabilities: bool,
) -> bool:
    """Whether *name* is available to a dependency on *receiver*."""
    if capabilities is None:
        return callable(getattr(receiver, name, None))
    if name in capabilities:
        return True
    if receiver_capabilities:
        own = getattr(receiver, "__dict__", None) or {}
        return callable(own.get(name))
    return False


def _forwarder(
    receiver_ref: weakref.ref, name: str, context: Context, behavior: str
) -> Callable[..., Any]:
    def forward(*args: Any, **kwargs: Any) -> Any:
        receiver = receiver_ref()
        if receiver is None:
            raise ReferenceError(
                f"receiver of {behavior} was garbage collected"
            )
        result = getattr(receiver, name)(*args, **kwargs)
        # Chaining through a dependency keeps operating on this Context
        return context if result is receiver else result

    forward.__name__ = name
    forward.__qualname__ = f"{behavior}.{name}"
    return forward


def build_context(
    receiver: Any,
    dependencies: Iterable[str] = (),
    private_slots: Iterable[str] = (),
    *,
    behavior: str = "",
    capabilities: frozenset[str] | None = None,
    receiver_capabilities: bool = True,
) -> Context:
    """Build a sealed Context for *receiver*.

    Args:
        receiver: The object behavior methods are invoked on.
        dependencies: Method names the behavior requires.
        private_slots: Field names the behavior keeps private.
        behavior: Display name used in errors.
        capabilities: Method names the behavior may depend on. ``None``
            accepts any callable attribute of the receiver.
        receiver_capabilities: Also accept callables stored in the
            receiver's own instance attributes.

    Raises:
        MissingCapability: If a dependency is not available.
        TypeError: If the receiver cannot be weakly referenced.
    """
    try:
        receiver_ref = weakref.ref(receiver)
    except TypeError as exc:
        raise TypeError(
            f"{type(receiver).__name__} objects cannot receive {behavior or 'behavior'} "
            f"methods: they do not support weak references"
        ) from exc

    context = Context(behavior, private_slots)
    forwarders: dict[str, Callable[..., Any]] = {}
    for name in dependencies:
        if not _provides(receiver, name, capabilities, receiver_capabilities):
            raise MissingCapability(name, behavior)
        forwarders[name] = _forwarder(receiver_ref, name, context, behavior)
    install_forwarders(context, forwarders)
    return context


class ContextFactory:
    """Per-behavior source of receiver Contexts.

    Parameters
    ----------
    classified:
        The behavior whose Contexts this factory builds.
    capabilities:
        Method names visible when the behavior was composed (parent chain
        plus earlier behaviors). ``None`` leaves dependencies unchecked
        beyond the receiver actually having the attribute.
    receiver_capabilities:
        Let callables in a receiver's own attributes satisfy dependencies.
    """

    def __init__(
        self,
        classified: ClassifiedBehavior,
        capabilities: frozenset[str] | None = None,
        *,
        receiver_capabilities: bool = True,
    ) -> None:
        self._classified = classified
        self._capabilities = capabilities
        self._receiver_capabilities = receiver_capabilities
        self._contexts: dict[int, tuple[weakref.ref, Context]] = {}
        self._lock = threading.Lock()

    @property
    def behavior(self) -> str:
        return self._classified.name

    @property
    def classified(self) -> ClassifiedBehavior:
        return self._classified

    @property
    def capabilities(self) -> frozenset[str] | None:
        return self._capabilities

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _cached(self, receiver: Any) -> Context | None:
        entry = self._contexts.get(id(receiver))
        if entry is not None and entry[0]() is receiver:
            return entry[1]
        return None

    def get_context(self, receiver: Any) -> Context:
        """Return the receiver's Context, building it on first use."""
        context = self._cached(receiver)
        if context is not None:
            return context

        with self._lock:
            context = self._cached(receiver)
            if context is not None:
                return context

            context = build_context(
                receiver,
                self._classified.dependencies,
                self._classified.private_slots,
                behavior=self._classified.name,
                capabilities=self._capabilities,
                receiver_capabilities=self._receiver_capabilities,
            )
            key = id(receiver)
            self._contexts[key] = (weakref.ref(receiver, self._discard(key)), context)
            logger.debug(
                "Built %s context for %s (%d live)",
                self._classified.name,
                type(receiver).__name__,
                len(self._contexts),
            )
            return context

    def has_context(self, receiver: Any) -> bool:
        return self._cached(receiver) is not None

    def __len__(self) -> int:
        return len(self._contexts)

    def _discard(self, key: int) -> Callable[[weakref.ref], None]:
        def callback(ref: weakref.ref) -> None:
            entry = self._contexts.get(key)
            if entry is not None and entry[0] is ref:
                self._contexts.pop(key, None)

        return callback

    def __repr__(self) -> str:
        return f"<ContextFactory {self._classified.name} live={len(self._contexts)}>"
