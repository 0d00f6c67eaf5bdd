"""
API route handlers for the member directory.

This module provides FastAPI route handlers for listing members and fetching a
member's upcoming events.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException
from fastapi.responses import JSONResponse

from ..core import MemberDirectory
from ..errors import StoreUnavailable
from ..models import DirectoryEntry, DirectoryListing, UserEvents

logger = logging.getLogger(__name__)


def get_directory() -> MemberDirectory:
    """Get the MemberDirectory instance."""
    raise NotImplementedError("Should be implemented in the main app")


async def list_members(
    directory: MemberDirectory = Depends(get_directory),
) -> DirectoryListing:
    """
    List the directory.

    A listing that failed to load is still returned, with status 503, so
    clients can tell an outage from an empty community.
    """
    listing = directory.load_directory()
    if not listing.loaded:
        return JSONResponse(status_code=503, content=listing.model_dump(mode="json"))  # type: ignore
    return listing


def _get_member_or_404(directory: MemberDirectory, user_id: int) -> DirectoryEntry:
    try:
        member = directory.find_member(user_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)
    if not member:
        raise HTTPException(status_code=404, detail=f"Member {user_id} not found")
    return member


async def get_member(
    user_id: int,
    directory: MemberDirectory = Depends(get_directory),
) -> DirectoryEntry:
    """
    Get a member by ID.

    Args:
        user_id: The ID of the member to retrieve
    """
    return _get_member_or_404(directory, user_id)


async def get_member_events(
    user_id: int,
    directory: MemberDirectory = Depends(get_directory),
) -> UserEvents:
    """
    Get a member's upcoming hosted and attended events, as of the request time.

    Args:
        user_id: The ID of the member
    """
    _get_member_or_404(directory, user_id)
    return await directory.aevents_for(user_id)
