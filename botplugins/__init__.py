"""Chat bot plugin logic: lookups, games and image helpers, independent of any bot framework."""

__version__ = "0.1.0"