import asyncio
import datetime
import logging
from typing import Callable, List, Optional, Tuple

from ..constants import ATTENDING, HOSTING
from ..errors import StoreUnavailable
from ..models import EventSummary, UserEvents
from ..protocols.base import EventStoreProtocol

logger = logging.getLogger(__name__)

Query = Callable[[int, datetime.datetime], List[EventSummary]]


class EventAggregator:
    def __init__(self, storage: EventStoreProtocol):
        """
        Initialize a new EventAggregator instance.

        Args:
            storage: The event store to query
        """
        self.storage = storage

    def fetch_for(self, user_id: int, now: datetime.datetime) -> UserEvents:
        """
        Fetch a user's upcoming hosted and attended events.

        The two queries are independent. The attending query excludes events the
        user hosts, so the lists are disjoint without post-processing. A list
        whose query fails comes back empty and is named in `failed`.

        Args:
            user_id: ID of the selected user
            now: Events starting before this instant are excluded

        Returns:
            The UserEvents for this user at `now`
        """
        hosting = self._run(HOSTING, self.storage.hosting_events, user_id, now)
        attending = self._run(ATTENDING, self.storage.attending_events, user_id, now)
        return self._merge(user_id, now, hosting, attending)

    async def afetch_for(self, user_id: int, now: datetime.datetime) -> UserEvents:
        """Same as fetch_for, with both queries running concurrently on worker threads."""
        hosting, attending = await asyncio.gather(
            asyncio.to_thread(
                self._run, HOSTING, self.storage.hosting_events, user_id, now
            ),
            asyncio.to_thread(
                self._run, ATTENDING, self.storage.attending_events, user_id, now
            ),
        )
        return self._merge(user_id, now, hosting, attending)

    def _run(
        self, name: str, query: Query, user_id: int, now: datetime.datetime
    ) -> Tuple[str, Optional[List[EventSummary]]]:
        try:
            return name, query(user_id, now)
        except StoreUnavailable as e:
            logger.warning(f"Fetching {name} events for user {user_id} failed: {e.message}")
            return name, None

    def _merge(
        self,
        user_id: int,
        now: datetime.datetime,
        *results: Tuple[str, Optional[List[EventSummary]]],
    ) -> UserEvents:
        lists = {name: events or [] for name, events in results}
        return UserEvents(
            user_id=user_id,
            fetched_at=now,
            hosting=lists[HOSTING],
            attending=lists[ATTENDING],
            failed=[name for name, events in results if events is None],
        )
