"""
Read models returned by the store and the services built on it.
"""

from __future__ import annotations

import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..constants import DEFAULT_VIBE


class DirectoryEntry(BaseModel):
    """A member as listed in the directory."""

    id: int = Field(..., description="Unique identifier of the user")
    display_name: str = Field(..., description="Name shown in the directory")
    bio: Optional[str] = Field(default=None, description="Free-text biography")
    vibes: List[str] = Field(
        default_factory=list, description="Vibe tags, in display order"
    )
    hosted_events_count: int = Field(
        default=0,
        ge=0,
        description="Number of events ever hosted by this user, past and future",
    )


class EventSummary(BaseModel):
    id: str
    title: str
    start_time: datetime.datetime
    vibe: Optional[str] = None
    host_id: int
    attendees: List[int] = Field(
        default_factory=list, description="IDs of attending users, ascending"
    )

    @property
    def display_vibe(self) -> str:
        return self.vibe or DEFAULT_VIBE


class UserEvents(BaseModel):
    """
    Upcoming events of one user, as seen at one fetch instant.

    `hosting` and `attending` are disjoint and ascending by start time. A list
    whose query failed is empty and its name is recorded in `failed`, so a
    failed fetch can be told apart from a user with no upcoming events.
    """

    user_id: int
    fetched_at: datetime.datetime
    hosting: List[EventSummary] = Field(default_factory=list)
    attending: List[EventSummary] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def is_empty(self) -> bool:
        return not self.hosting and not self.attending


class DirectoryListing(BaseModel):
    """Result of a directory load. `loaded` is False when the store query failed."""

    members: List[DirectoryEntry] = Field(default_factory=list)
    loaded: bool = True
    error: Optional[str] = None
