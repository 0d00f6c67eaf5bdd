"""
Protocol definitions for the member directory.

This module contains the protocols for the event store backend and for
anything that can fetch a user's upcoming events on behalf of the selection
controller.
"""

from __future__ import annotations

import datetime
from typing import List, Protocol, runtime_checkable

from member_directory.models import DirectoryEntry, EventSummary, UserEvents


@runtime_checkable
class EventStoreProtocol(Protocol):
    def list_members(self) -> List[DirectoryEntry]:
        ...

    def hosting_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        ...

    def attending_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        ...


@runtime_checkable
class EventFetcher(Protocol):
    async def afetch_for(self, user_id: int, now: datetime.datetime) -> UserEvents:
        ...
