"""
SQLite storage backend for the member directory.
"""

from __future__ import annotations

import datetime
import logging
import os
from functools import wraps
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select
from toolz import groupby

from ..constants import DEFAULT_DB_DIR, DEFAULT_DB_NAME
from ..errors import StoreUnavailable
from ..models import DirectoryEntry, Event, EventAttendee, EventSummary, User
from ..protocols import EventStoreProtocol

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def store_query(fn: F) -> F:
    """Raise StoreUnavailable for any database failure inside a store query."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception(f"Store query {fn.__name__} failed")
            raise StoreUnavailable(
                f"Event store unavailable: {e}", {"operation": fn.__name__}
            ) from e

    return wrapper  # type: ignore


def to_store_time(value: datetime.datetime) -> datetime.datetime:
    """Start times are stored as naive local time; convert aware values to match."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class SQLiteBackend:
    """SQLite storage backend"""

    __protocol_class__ = EventStoreProtocol

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize the SQLite backend.

        Args:
            connection_string: Path to the SQLite database file, or ":memory:".
                If None, uses a default path in the user's home directory.
        """
        if connection_string is None:
            os.makedirs(DEFAULT_DB_DIR, exist_ok=True)
            connection_string = os.path.join(DEFAULT_DB_DIR, DEFAULT_DB_NAME)

        self.connection_string = connection_string

        # Queries may run on worker threads, so connections must not be tied to
        # the creating thread. An in-memory database only exists on a single
        # connection, hence StaticPool.
        if connection_string == ":memory:":
            self.engine = create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{connection_string}",
                connect_args={"check_same_thread": False},
            )
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Initialize the database schema."""
        SQLModel.metadata.create_all(self.engine)

    @store_query
    def list_members(self) -> List[DirectoryEntry]:
        """
        List every user with a display name, with their hosted event count.

        A single statement: the count is a correlated subquery, not a query per
        user. Ordered by display name (store collation), ties by id.

        Returns:
            List of DirectoryEntry objects
        """
        statement = _members_statement().order_by(
            col(User.display_name), col(User.id)
        )
        with Session(self.engine) as session:
            rows = session.exec(statement).all()
            return [_to_entry(user, count) for user, count in rows]

    @store_query
    def hosting_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        """
        Events hosted by the user starting at or after `now`, ascending by start time.
        """
        statement = (
            select(Event)
            .where(Event.host_id == user_id, Event.start_time >= to_store_time(now))
            .order_by(col(Event.start_time), col(Event.id))
        )
        with Session(self.engine) as session:
            return self._summarize(session, session.exec(statement).all())

    @store_query
    def attending_events(
        self, user_id: int, now: datetime.datetime
    ) -> List[EventSummary]:
        """
        Events the user attends but does not host, starting at or after `now`,
        ascending by start time.
        """
        attended = select(EventAttendee.event_id).where(
            EventAttendee.user_id == user_id
        )
        statement = (
            select(Event)
            .where(
                col(Event.id).in_(attended),
                Event.host_id != user_id,
                Event.start_time >= to_store_time(now),
            )
            .order_by(col(Event.start_time), col(Event.id))
        )
        with Session(self.engine) as session:
            return self._summarize(session, session.exec(statement).all())

    def _summarize(
        self, session: Session, events: Sequence[Event]
    ) -> List[EventSummary]:
        """Attach attendee IDs to events, fetched in one query for the whole batch."""
        if not events:
            return []

        links = session.exec(
            select(EventAttendee).where(
                col(EventAttendee.event_id).in_([event.id for event in events])
            )
        ).all()
        attendees_by_event = groupby(lambda link: link.event_id, links)

        return [
            EventSummary(
                id=event.id,
                title=event.title,
                start_time=event.start_time,
                vibe=event.vibe,
                host_id=event.host_id,
                attendees=sorted(
                    link.user_id for link in attendees_by_event.get(event.id, [])
                ),
            )
            for event in events
        ]

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def _to_entry(user: User, hosted_events_count: Optional[int]) -> DirectoryEntry:
    assert user.id is not None and user.display_name is not None
    return DirectoryEntry(
        id=user.id,
        display_name=user.display_name,
        bio=user.bio,
        vibes=user.vibes,
        hosted_events_count=hosted_events_count or 0,
    )


def _members_statement():
    """Users with a display name, each paired with a correlated hosted-event count."""
    hosted_count = (
        select(func.count(col(Event.id)))
        .where(Event.host_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("hosted_events_count")
    )
    return select(User, hosted_count).where(col(User.display_name).is_not(None))
