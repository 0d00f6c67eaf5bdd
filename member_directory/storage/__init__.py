"""
Storage package for the member directory.

This package provides the SQLite backend answering directory and event queries.
"""

from member_directory.storage.sqlite import SQLiteBackend, store_query, to_store_time

__all__ = [
    "SQLiteBackend",
    "store_query",
    "to_store_time",
]
