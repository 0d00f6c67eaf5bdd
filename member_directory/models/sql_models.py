"""
SQLModel table definitions for the member directory.

Users and events are owned by the store; this package only reads them. Event
attendance lives in a link table so containment is a plain indexed predicate.
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import List, Optional

from sqlmodel import Field, SQLModel

logger = logging.getLogger(__name__)


class User(SQLModel, table=True):
    """SQLModel for the users table."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    display_name: Optional[str] = Field(default=None, index=True)
    bio: Optional[str] = None
    vibes_str: Optional[str] = None  # JSON list of vibe tags, in display order
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @property
    def vibes(self) -> List[str]:
        """Parse the vibes_str field into a list of tags."""
        if not self.vibes_str:
            return []
        try:
            vibes = json.loads(self.vibes_str)
        except json.JSONDecodeError:
            logger.warning(f"Failed to parse vibes for user {self.id}: {self.vibes_str}")
            return []
        if not isinstance(vibes, list) or not all(isinstance(v, str) for v in vibes):
            logger.warning(f"Ignoring vibes for user {self.id}, not a list of tags: {self.vibes_str}")
            return []
        return vibes

    @vibes.setter
    def vibes(self, value: List[str]) -> None:
        assert isinstance(value, list), "vibes must be a list"
        self.vibes_str = json.dumps(value)


class Event(SQLModel, table=True):
    """SQLModel for the events table."""

    __tablename__ = "events"

    id: str = Field(primary_key=True)
    title: str
    start_time: datetime.datetime = Field(index=True)
    vibe: Optional[str] = None
    host_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class EventAttendee(SQLModel, table=True):
    """Link table: one row per (event, attending user)."""

    __tablename__ = "event_attendees"

    event_id: str = Field(foreign_key="events.id", primary_key=True)
    user_id: int = Field(foreign_key="users.id", primary_key=True, index=True)
