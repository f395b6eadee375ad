"""Route lookups to pluggable web backends and open the result in a browser."""

__version__ = "0.3.0"
