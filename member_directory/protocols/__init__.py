"""
Protocols package for the member directory.
"""

from member_directory.protocols.base import EventFetcher, EventStoreProtocol

__all__ = [
    "EventFetcher",
    "EventStoreProtocol",
]
