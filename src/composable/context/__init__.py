"""Per-receiver Contexts: sealed capability proxies and their factories."""

from composable.context.factory import ContextFactory, build_context
from composable.context.proxy import (
    EMPTY,
    Context,
    context_behavior,
    context_slots,
)

__all__ = [
    "EMPTY",
    "Context",
    "ContextFactory",
    "build_context",
    "context_behavior",
    "context_slots",
]
