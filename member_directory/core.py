"""
Core wiring for the member directory.

This module contains the MemberDirectory class, which ties a storage backend to
the directory loader, the event aggregator and the selection controller.
"""

from __future__ import annotations

import datetime
from typing import Callable, Optional

from .errors import StoreUnavailable
from .managers.selection import SelectionController
from .models import DirectoryEntry, DirectoryListing, UserEvents
from .protocols.base import EventStoreProtocol
from .services.directory import DirectoryLoader
from .services.events import EventAggregator
from .storage.sqlite import SQLiteBackend


class MemberDirectory:
    """
    Main class for browsing the member directory.

    Loads the directory once and answers per-member event queries.
    """

    def __init__(
        self,
        storage: Optional[EventStoreProtocol] = None,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
        fetch_timeout: Optional[float] = None,
    ):
        """
        Initialize a new MemberDirectory instance.

        Args:
            storage: Storage backend instance (defaults to SQLite in the home directory)
            clock: Source of "now" for event queries
            fetch_timeout: Seconds before a selection fetch is abandoned
        """
        self.storage = storage or SQLiteBackend()
        self.clock = clock

        self.directory_loader = DirectoryLoader(self.storage)
        self.event_aggregator = EventAggregator(self.storage)
        self.selection = SelectionController(
            self.event_aggregator, clock=clock, fetch_timeout=fetch_timeout
        )

    def load_directory(self) -> DirectoryListing:
        return self.directory_loader.load()

    def find_member(self, user_id: int) -> Optional[DirectoryEntry]:
        """
        Look up a listed member in the loaded directory, loading it on first use.

        Raises:
            StoreUnavailable: if the directory has to be loaded and the load fails
        """
        if not self.directory_loader.loaded:
            listing = self.load_directory()
            if not listing.loaded:
                raise StoreUnavailable(listing.error or "Directory could not be loaded")
        return self.directory_loader.get(user_id)

    def events_for(
        self, user_id: int, now: Optional[datetime.datetime] = None
    ) -> UserEvents:
        return self.event_aggregator.fetch_for(user_id, now or self.clock())

    async def aevents_for(
        self, user_id: int, now: Optional[datetime.datetime] = None
    ) -> UserEvents:
        return await self.event_aggregator.afetch_for(user_id, now or self.clock())
