"""Wraps behavior methods so they run against the receiver's Context.

A behavior method is written as ``def m(self, ...)`` where ``self`` is its
Context. The wrapper looks the Context up for whatever receiver the method
is called on, and translates a returned Context back into the receiver, so
``return self`` chains on the receiver from the caller's point of view. Only
the exact Context of this behavior is translated; any other value, including
another behavior's Context, is returned untouched.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from composable.context.factory import ContextFactory


def wrap_method(
    method: Callable[..., Any], factory: ContextFactory
) -> Callable[..., Any]:
    @functools.wraps(method)
    def wrapped(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        context = factory.get_context(receiver)
        result = method(context, *args, **kwargs)
        return receiver if result is context else result

    wrapped.__behavior__ = factory.behavior  # type: ignore[attr-defined]
    return wrapped
