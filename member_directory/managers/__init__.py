"""
Manager classes for the member directory.
"""

from member_directory.managers.selection import (
    Loaded,
    LoadFailed,
    Loading,
    NoSelection,
    SelectionController,
    SelectionState,
)

__all__ = [
    "SelectionController",
    "SelectionState",
    "NoSelection",
    "Loading",
    "Loaded",
    "LoadFailed",
]
