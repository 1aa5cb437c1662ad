"""Model Context Protocol message types, builders, result helpers and request hooks."""

__version__ = "0.1.0"