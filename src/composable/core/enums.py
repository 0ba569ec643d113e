"""Enumerations used across the composition engine."""

from enum import Enum


class Policy(str, Enum):
    """Strategies for merging two methods that share a name."""

    OVERWRITE = "overwrite"  # Incoming replaces existing
    DISCARD = "discard"      # Existing wins, incoming dropped
    BEFORE = "before"        # Incoming runs first, existing's result returned
    AFTER = "after"          # Existing runs first, incoming's result returned
    AROUND = "around"        # Incoming receives existing and decides


class MemberKind(str, Enum):
    METHOD = "method"
    DEPENDENCY = "dependency"
    PRIVATE_SLOT = "private_slot"
    RESOLUTION = "resolution"
    IGNORED = "ignored"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
