"""Command-line interface for weblookup."""
