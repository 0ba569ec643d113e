"""Resolution policies: combinators merging two same-named methods.

Both arguments are already-wrapped methods with the signature
``(receiver, *args, **kwargs)``; each handles its own Context. A policy only
decides which of them runs, in what order, and whose result is returned.

+-----------+----------------------------------------------------------+
| overwrite | incoming replaces existing                               |
| discard   | existing is kept, incoming dropped                       |
| before    | incoming runs, then existing; existing's result returned |
| after     | existing runs, then incoming; incoming's result returned |
| around    | incoming gets a bound ``existing`` and decides           |
+-----------+----------------------------------------------------------+
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from composable.core.enums import Policy
from composable.core.errors import UnsupportedPolicy

Method = Callable[..., Any]


def overwrite(existing: Method, incoming: Method) -> Method:
    return incoming


def discard(existing: Method, incoming: Method) -> Method:
    return existing


def before(existing: Method, incoming: Method) -> Method:
    @functools.wraps(existing)
    def combined(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        incoming(receiver, *args, **kwargs)
        return existing(receiver, *args, **kwargs)

    return combined


def after(existing: Method, incoming: Method) -> Method:
    @functools.wraps(existing)
    def combined(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        existing(receiver, *args, **kwargs)
        return incoming(receiver, *args, **kwargs)

    return combined


def around(existing: Method, incoming: Method) -> Method:
    """``incoming(proceed, *args)`` where ``proceed(*args)`` runs existing."""

    @functools.wraps(existing)
    def combined(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        def proceed(*inner_args: Any, **inner_kwargs: Any) -> Any:
            return existing(receiver, *inner_args, **inner_kwargs)

        return incoming(receiver, proceed, *args, **kwargs)

    return combined


POLICIES: dict[Policy, Callable[[Method, Method], Method]] = {
    Policy.OVERWRITE: overwrite,
    Policy.DISCARD: discard,
    Policy.BEFORE: before,
    Policy.AFTER: after,
    Policy.AROUND: around,
}


def to_policy(policy: Any, *, name: str = "", behavior: str = "") -> Policy:
    """Parse a policy tag, raising UnsupportedPolicy for unknown ones."""
    try:
        return Policy(policy)
    except (ValueError, TypeError):
        raise UnsupportedPolicy(name, behavior, policy) from None


def apply_policy(
    policy: Policy | str,
    existing: Method,
    incoming: Method,
    *,
    name: str = "",
    behavior: str = "",
) -> Method:
    """Merge *incoming* into *existing* under *policy*.

    ``name`` and ``behavior`` only feed the error message.

    Raises:
        UnsupportedPolicy: If *policy* is not one of the five recognised tags.
    """
    return POLICIES[to_policy(policy, name=name, behavior=behavior)](
        existing, incoming
    )
