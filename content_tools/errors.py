from __future__ import annotations


class ToolError(Exception):
    """Base class for errors raised by the content tools."""


class UsageError(ToolError):
    pass


class FormatError(ToolError):
    """Raised when a map document does not have the expected shape."""
