"""
Member Directory: a community member listing with per-member upcoming events.

This package lists community members with their hosted event counts and, for a
selected member, fetches their upcoming hosted and attended events.
"""

from member_directory.core import MemberDirectory
from member_directory.version import __version__

__all__ = [
    "MemberDirectory",
    "__version__",
]
