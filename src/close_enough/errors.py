"""
Error types raised while matching and resolving queries.

Every failure surfaces as a subclass of CloseEnoughError so the command-line
layer has a single place to turn it into a diagnostic and an exit status.
"""

from pathlib import Path
from typing import Optional, Union


class CloseEnoughError(Exception):
    """Base class for all close-enough failures."""
    pass


class NoMatchError(CloseEnoughError):
    """
    Raised when a query matched none of its candidates.

    Attributes:
        query: The query (or query token) that failed to match
        context: The path reached so far, or None for plain input selection
    """

    def __init__(self, query: str, context: Optional[Union[str, Path]] = None):
        self.query = query
        self.context = str(context) if context is not None else None
        if self.context is None:
            message = f"query '{query}' failed to match any inputs"
        else:
            message = f"no directory matching '{query}' in '{self.context}'"
        super().__init__(message)


class FilesystemError(CloseEnoughError):
    """Raised when a directory, stdin or the history file cannot be read."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class MalformedTokenError(CloseEnoughError):
    """Raised for a query token that cannot be applied to the working path."""

    def __init__(self, token: str, message: str):
        self.token = token
        super().__init__(f"{message}: '{token}'")
