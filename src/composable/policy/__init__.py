"""Policy library for resolving method-name conflicts between behaviors."""

from composable.policy.library import (
    POLICIES,
    after,
    apply_policy,
    around,
    before,
    discard,
    overwrite,
    to_policy,
)

__all__ = [
    "POLICIES",
    "after",
    "apply_policy",
    "around",
    "before",
    "discard",
    "overwrite",
    "to_policy",
]
