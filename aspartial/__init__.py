"""Partial types: read incomplete JSON values into objects whose fields may all be missing."""

__version__ = "0.0.1"