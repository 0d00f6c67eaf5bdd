import logging
from typing import Dict, List, Optional

from ..errors import StoreUnavailable
from ..models import DirectoryEntry, DirectoryListing
from ..protocols.base import EventStoreProtocol

logger = logging.getLogger(__name__)


class DirectoryLoader:
    def __init__(self, storage: EventStoreProtocol):
        """
        Initialize a new DirectoryLoader instance.

        Args:
            storage: The event store to list members from
        """
        self.storage = storage
        self.is_loading = False
        self.loaded = False
        self._members: List[DirectoryEntry] = []
        self._by_id: Dict[int, DirectoryEntry] = {}

    def load(self) -> DirectoryListing:
        """
        Load the full member list with hosted event counts.

        A store failure does not propagate: the listing comes back empty with
        `loaded` set to False and the error message attached.

        Returns:
            The DirectoryListing
        """
        self.is_loading = True
        try:
            members = self.storage.list_members()
        except StoreUnavailable as e:
            logger.warning(f"Directory load failed: {e.message}")
            self._cache([])
            self.loaded = False
            return DirectoryListing(members=[], loaded=False, error=e.message)
        finally:
            self.is_loading = False

        self._cache(members)
        self.loaded = True
        logger.info(f"Loaded {len(members)} directory members")
        return DirectoryListing(members=members, loaded=True)

    def _cache(self, members: List[DirectoryEntry]) -> None:
        self._members = members
        self._by_id = {member.id: member for member in members}

    @property
    def members(self) -> List[DirectoryEntry]:
        return list(self._members)

    def get(self, user_id: int) -> Optional[DirectoryEntry]:
        return self._by_id.get(user_id)
