"""
Selection management for the member directory.

This module contains the SelectionController, which owns the currently
selected member and fetches that member's upcoming events. Each selection is
tagged with a token; a fetch result is only applied while its token is still
current, so a slow fetch for an earlier selection never overwrites a later one.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..models import DirectoryEntry, UserEvents
from ..protocols.base import EventFetcher

logger = logging.getLogger(__name__)


class NoSelection(BaseModel):
    model_config = ConfigDict(frozen=True)


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: DirectoryEntry


class Loaded(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: DirectoryEntry
    events: UserEvents


class LoadFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: DirectoryEntry
    error: str


SelectionState = Union[NoSelection, Loading, Loaded, LoadFailed]
StateListener = Callable[[SelectionState], None]


class SelectionController:
    """
    State machine over NoSelection, Loading, Loaded and LoadFailed.

    Meant to be driven from a single event loop; the only suspension point is
    the fetch itself.
    """

    def __init__(
        self,
        fetcher: EventFetcher,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
        fetch_timeout: Optional[float] = None,
    ):
        """
        Initialize a new SelectionController instance.

        Args:
            fetcher: Fetches a user's events (usually an EventAggregator)
            clock: Returns the "now" each fetch is filtered against
            fetch_timeout: Seconds before a fetch is abandoned as LoadFailed; None waits forever
        """
        self.fetcher = fetcher
        self.clock = clock
        self.fetch_timeout = fetch_timeout
        self._token = 0
        self._state: SelectionState = NoSelection()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def token(self) -> int:
        return self._token

    @property
    def selected_user(self) -> Optional[DirectoryEntry]:
        if isinstance(self._state, NoSelection):
            return None
        return self._state.user

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new state.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def select(self, user: DirectoryEntry) -> SelectionState:
        """
        Select a user and fetch their upcoming events.

        Moves to Loading immediately. When the fetch resolves, moves to Loaded
        (or LoadFailed) unless another select() or clear() happened meanwhile,
        in which case the result is dropped.

        Returns:
            The controller's state once this fetch has resolved
        """
        self._token += 1
        token = self._token
        self._set_state(Loading(user=user))

        next_state: SelectionState
        try:
            fetch = self.fetcher.afetch_for(user.id, self.clock())
            if self.fetch_timeout is None:
                events = await fetch
            else:
                events = await asyncio.wait_for(fetch, self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Fetching events for user {user.id} timed out after {self.fetch_timeout}s"
            )
            next_state = LoadFailed(
                user=user, error=f"Timed out after {self.fetch_timeout} seconds"
            )
        except Exception as e:
            logger.exception(f"Fetching events for user {user.id} failed")
            next_state = LoadFailed(user=user, error=str(e))
        else:
            next_state = Loaded(user=user, events=events)

        if token != self._token:
            logger.debug(
                f"Discarding stale events for user {user.id} (token {token}, current {self._token})"
            )
            return self._state

        self._set_state(next_state)
        return next_state

    def select_nowait(self, user: DirectoryEntry) -> asyncio.Task:
        """Start select() as a task on the running loop."""
        return asyncio.ensure_future(self.select(user))

    def clear(self) -> None:
        """Drop the selection; any fetch still in flight is discarded when it resolves."""
        self._token += 1
        self._set_state(NoSelection())

    def _set_state(self, state: SelectionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"Selection listener {listener!r} failed")
