"""Tunarr tool server - typed access to channels, programs and search."""

__version__ = "0.1.0"
