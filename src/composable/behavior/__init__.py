"""Behavior descriptors and their classification.

- **Descriptors**: ``Behavior``, the ``@behavior`` class decorator, the
  ``requires``/``private`` placeholders and ``Resolution`` markers
- **Resolution helpers**: ``resolve`` and the ``@resolves`` decorator
- **Classifier**: ``classify`` groups members into methods, dependencies,
  private slots and resolutions
"""

from composable.behavior.classifier import (
    ClassifiedBehavior,
    ResolutionEntry,
    classify,
    member_kind,
)
from composable.behavior.descriptor import (
    Behavior,
    Placeholder,
    Resolution,
    as_behavior,
    behavior,
    private,
    requires,
    resolve,
    resolves,
)

__all__ = [
    "Behavior",
    "ClassifiedBehavior",
    "Placeholder",
    "Resolution",
    "ResolutionEntry",
    "as_behavior",
    "behavior",
    "classify",
    "member_kind",
    "private",
    "requires",
    "resolve",
    "resolves",
]
