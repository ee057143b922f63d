from __future__ import annotations


class WordstressError(Exception):
    """Base class for errors raised by wordstress."""


class ConfigurationError(WordstressError):
    """Invalid run configuration. Raised before any request is sent."""
