"""Vrux: version history and diff engine for generated UI components."""

__version__ = "0.1.0"
