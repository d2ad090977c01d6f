"""Errors raised at the catalog parse/fetch boundary."""

from __future__ import annotations


class CatalogError(Exception):
    """Error from catalog operations."""
    pass


class ParseConfigurationError(CatalogError):
    """The XML parser could not be set up."""
    pass


class CatalogIOError(CatalogError, OSError):
    """The catalog document could not be read or downloaded."""
    pass


class MalformedDocumentError(CatalogError, ValueError):
    """The catalog document is not well-formed or violates the schema."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class FilterError(CatalogError, TypeError):
    """A filter token was not a string.

    Unknown filter names never raise; they match everything.
    """
    pass
