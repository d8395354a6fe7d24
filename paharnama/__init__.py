"""Paharnama mountain information API."""

__version__ = "0.1.0"
