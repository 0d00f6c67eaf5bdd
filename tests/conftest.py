import datetime
from typing import Any, Dict, Generator, List, Optional, Set

import pytest
from sqlmodel import Session

from member_directory.errors import StoreUnavailable
from member_directory.models import (
    DirectoryEntry,
    Event,
    EventAttendee,
    EventSummary,
    User,
)
from member_directory.storage.sqlite import SQLiteBackend

NOW = datetime.datetime(2026, 10, 18, 12, 0, 0)
DAY = datetime.timedelta(days=1)

AMY = 1
BO = 2
HIDDEN = 3
CY = 4


def seed_store(
    storage: SQLiteBackend,
    users: List[User],
    events: List[Event],
    attendees: Dict[str, List[int]],
) -> None:
    """Write fixture rows straight through the engine."""
    with Session(storage.engine) as session:
        for user in users:
            session.add(user)
        for event in events:
            session.add(event)
        for event_id, user_ids in attendees.items():
            for user_id in user_ids:
                session.add(EventAttendee(event_id=event_id, user_id=user_id))
        session.commit()


def community_users() -> List[User]:
    return [
        User(id=AMY, display_name="Amy", bio="Makes jello", vibes_str='["🍮", "🎉"]'),
        User(id=BO, display_name="Bo"),
        User(id=HIDDEN, display_name=None, bio="Not listed", vibes_str='["👻"]'),
        User(id=CY, display_name="Cy"),
    ]


def community_events() -> List[Event]:
    return [
        Event(id="e1", title="Jello tasting", start_time=NOW + DAY, vibe="🎉", host_id=AMY),
        Event(id="e2", title="Board games", start_time=NOW + 2 * DAY, host_id=BO),
        Event(id="e0", title="Past picnic", start_time=NOW - 3 * DAY, host_id=AMY),
    ]


COMMUNITY_ATTENDEES = {"e1": [BO], "e2": [AMY, BO], "e0": [BO]}


@pytest.fixture(scope="function")
def storage() -> Generator[SQLiteBackend, Any, None]:
    """Create an in-memory SQLite database for testing."""
    db = SQLiteBackend(":memory:")

    yield db

    db.close()


@pytest.fixture(scope="function")
def seeded_storage(storage: SQLiteBackend) -> SQLiteBackend:
    """Amy hosts e1 (Bo attends) and a past event; Bo hosts e2 (Amy and Bo attend)."""
    seed_store(storage, community_users(), community_events(), COMMUNITY_ATTENDEES)
    return storage


class MockEventStore:
    """Mock event store for testing. Operations named in `failing` raise StoreUnavailable."""

    def __init__(
        self,
        members: Optional[List[DirectoryEntry]] = None,
        events: Optional[List[EventSummary]] = None,
    ):
        self.members = members or []
        self.events = events or []
        self.failing: Set[str] = set()
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise StoreUnavailable(f"{operation} failed", {"operation": operation})

    def list_members(self) -> List[DirectoryEntry]:
        self._check("list_members")
        return sorted(self.members, key=lambda m: (m.display_name, m.id))

    def hosting_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        self._check("hosting_events")
        return sorted(
            (e for e in self.events if e.host_id == user_id and e.start_time >= now),
            key=lambda e: (e.start_time, e.id),
        )

    def attending_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        self._check("attending_events")
        return sorted(
            (
                e
                for e in self.events
                if user_id in e.attendees
                and e.host_id != user_id
                and e.start_time >= now
            ),
            key=lambda e: (e.start_time, e.id),
        )


@pytest.fixture(scope="function")
def mock_store() -> MockEventStore:
    return MockEventStore(
        members=[
            DirectoryEntry(id=AMY, display_name="Amy", hosted_events_count=1),
            DirectoryEntry(id=BO, display_name="Bo", hosted_events_count=1),
        ],
        events=[
            EventSummary(
                id="e1", title="Jello tasting", start_time=NOW + DAY, host_id=AMY, attendees=[BO]
            ),
            EventSummary(
                id="e2",
                title="Board games",
                start_time=NOW + 2 * DAY,
                host_id=BO,
                attendees=[AMY, BO],
            ),
        ],
    )
