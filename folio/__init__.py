"""Folio - content back end for a personal blog."""

__version__ = "0.1.0"
