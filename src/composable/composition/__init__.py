"""Composition engine, method wrapping, and domain instances.

Usage::

    from composable.behavior import behavior, private, resolve
    from composable.composition import compose

    Songwriter = compose(None, SingsSongs, resolve(HasAwards, {"initialize": "after"}))
    artist = Songwriter.create()
"""

from composable.composition.engine import (
    CompositeObject,
    compose,
    lookup_method,
    method_names_of,
    name_of,
    origins_of,
    own_method_names_of,
    parent_of,
)
from composable.composition.instance import DomainObject, composite_of
from composable.composition.wrapper import wrap_method

__all__ = [
    "CompositeObject",
    "DomainObject",
    "compose",
    "composite_of",
    "lookup_method",
    "method_names_of",
    "name_of",
    "origins_of",
    "own_method_names_of",
    "parent_of",
    "wrap_method",
]
