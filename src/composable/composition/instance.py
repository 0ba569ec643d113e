"""Domain objects that take their methods from a composite."""

from __future__ import annotations

import types
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .engine import CompositeObject


class DomainObject:
    """An instance delegating method lookups to a composite.

    Keyword fields become plain instance attributes. Fields holding
    callables can satisfy a behavior's dependencies when the composition
    allows receiver capabilities.
    """

    __slots__ = ("_composite", "__dict__", "__weakref__")

    def __init__(self, composite: CompositeObject, /, **fields: Any) -> None:
        object.__setattr__(self, "_composite", composite)
        self.__dict__.update(fields)

    def __getattr__(self, name: str) -> Any:
        from .engine import lookup_method

        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return types.MethodType(lookup_method(self._composite, name), self)

    def __dir__(self) -> list[str]:
        from .engine import method_names_of

        return sorted({*self.__dict__, *method_names_of(self._composite)})

    def __repr__(self) -> str:
        from .engine import name_of

        return f"<DomainObject of {name_of(self._composite)}>"


def composite_of(instance: DomainObject) -> CompositeObject:
    """The composite a domain object delegates to."""
    return object.__getattribute__(instance, "_composite")
