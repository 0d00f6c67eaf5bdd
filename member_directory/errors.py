"""
Exception types for the member directory.

Store failures are raised as StoreUnavailable. An empty query result is never an
error: it is returned as an empty list.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DirectoryError(Exception):
    """Base exception for directory errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class StoreUnavailable(DirectoryError):
    """The event store could not answer a query (connection or SQL failure)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "STORE_UNAVAILABLE", details)
