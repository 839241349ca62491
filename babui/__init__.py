"""Babui: rental property search and listings for Bangladesh."""

__version__ = "0.1.0"
