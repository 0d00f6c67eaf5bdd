"""
API module for the member directory.
"""

from member_directory.api.routes import (
    get_directory,
    get_member,
    get_member_events,
    list_members,
)

__all__ = [
    "get_directory",
    "list_members",
    "get_member",
    "get_member_events",
]
