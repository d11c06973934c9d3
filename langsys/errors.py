#!/usr/bin/env python3
"""
Error types raised by the catalog parser, writer and builder.

The parser and writer always raise these to their direct caller.
CatalogBuilder decides, depending on its ``strict`` setting, whether
they propagate further or are only logged.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""


class DocumentNotFound(CatalogError):
    """A catalog document is missing or cannot be opened for reading."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = str(path)
        super().__init__(message or f"Document not found: {self.path}")


class MalformedDocument(CatalogError):
    """A catalog document is not well-formed XML."""

    def __init__(
        self,
        source: str,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.source = source
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Malformed document {source}{location}: {message}")


class ImportFailed(CatalogError):
    """An ``<import-language>`` target could not be parsed."""

    def __init__(self, path: str, cause: Optional[Exception] = None, message: Optional[str] = None):
        self.path = str(path)
        self.cause = cause
        if message is None:
            message = f"Import failed: {self.path}"
            if cause is not None:
                message += f" ({cause})"
        super().__init__(message)


class ImportCycleDetected(ImportFailed):
    """An import target is already being parsed further up the import chain."""

    def __init__(self, path: str, chain: tuple[str, ...] = ()):
        self.chain = tuple(chain)
        trail = " -> ".join(self.chain + (str(path),))
        super().__init__(path, message=f"Import cycle detected: {trail}")


class ImportDepthExceeded(ImportFailed):
    """An import would nest deeper than the configured limit."""

    def __init__(self, path: str, limit: int, chain: tuple[str, ...] = ()):
        self.limit = limit
        self.chain = tuple(chain)
        super().__init__(path, message=f"Import depth limit of {limit} exceeded: {path}")


class IOWriteFailure(CatalogError):
    """A serialized catalog could not be written."""

    def __init__(self, path: Optional[str], cause: Optional[Exception] = None):
        self.path = None if path is None else str(path)
        self.cause = cause
        if self.path is None:
            message = "No target path to save the catalog to"
        else:
            message = f"Cannot write catalog to {self.path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ConfigurationError(CatalogError):
    """A settings file or mapping is invalid."""


__all__ = [
    "CatalogError",
    "DocumentNotFound",
    "MalformedDocument",
    "ImportFailed",
    "ImportCycleDetected",
    "ImportDepthExceeded",
    "IOWriteFailure",
    "ConfigurationError",
]
