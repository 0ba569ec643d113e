"""Sealed capability proxy handed to behavior methods as ``self``.

A Context exposes exactly what its behavior declared: private slots (plain
mutable fields, empty until first written) and dependencies (forwarding
callables bound to the receiver). Anything else raises
:class:`UndeclaredAccess` instead of silently creating a field.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from composable.core.errors import UndeclaredAccess

# Value of a private slot that has never been written
EMPTY = None


class Context:
    """Per-receiver private view of one behavior."""

    __slots__ = ("__behavior", "__values", "__forwarders", "__weakref__")

    def __init__(
        self,
        behavior: str,
        private_slots: Iterable[str] = (),
        forwarders: Mapping[str, Callable[..., Any]] | None = None,
    ) -> None:
        object.__setattr__(self, "_Context__behavior", behavior)
        object.__setattr__(
            self, "_Context__values", {name: EMPTY for name in private_slots}
        )
        object.__setattr__(self, "_Context__forwarders", dict(forwarders or {}))

    # ------------------------------------------------------------------
    # Sealed member access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        values = self.__values
        if name in values:
            return values[name]
        forwarders = self.__forwarders
        if name in forwarders:
            return forwarders[name]
        raise UndeclaredAccess(name, self.__behavior)

    def __setattr__(self, name: str, value: Any) -> None:
        values = self.__values
        if name in values:
            values[name] = value
            return
        if name in self.__forwarders:
            raise AttributeError(
                f"dependency '{name}' of {self.__behavior} is read-only"
            )
        raise UndeclaredAccess(name, self.__behavior)

    def __delattr__(self, name: str) -> None:
        values = self.__values
        if name in values:
            values[name] = EMPTY
            return
        if name in self.__forwarders:
            raise AttributeError(
                f"dependency '{name}' of {self.__behavior} is read-only"
            )
        raise UndeclaredAccess(name, self.__behavior)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __dir__(self) -> list[str]:
        return sorted([*self.__values, *self.__forwarders])

    def __repr__(self) -> str:
        return (
            f"<Context of {self.__behavior} "
            f"slots={list(self.__values)} deps={list(self.__forwarders)}>"
        )


def context_behavior(context: Context) -> str:
    """Name of the behavior a Context belongs to."""
    return object.__getattribute__(context, "_Context__behavior")


def context_slots(context: Context) -> dict[str, Any]:
    """Snapshot of a Context's private slot values."""
    return dict(object.__getattribute__(context, "_Context__values"))


def install_forwarders(
    context: Context, forwarders: Mapping[str, Callable[..., Any]]
) -> None:
    """Add dependency forwarders; only used while a Context is being built."""
    object.__getattribute__(context, "_Context__forwarders").update(forwarders)
