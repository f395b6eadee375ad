"""dict.leo.org backend."""

from weblookup.backends.leo.plugin import LANGUAGE_PAIRS, LeoBackend, TargetRequest

__all__ = ["LANGUAGE_PAIRS", "LeoBackend", "TargetRequest"]
