"""
HTTP API server for the member directory.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from member_directory.core import MemberDirectory
from member_directory.models import DirectoryEntry, DirectoryListing, UserEvents

from .api.routes import get_directory, get_member, get_member_events, list_members

logger = logging.getLogger(__name__)


def create_app(
    directory: MemberDirectory,
) -> FastAPI:
    """
    Create a FastAPI app for the directory server.

    Args:
        directory: The MemberDirectory to serve

    Returns:
        A FastAPI app
    """
    app = FastAPI(
        title="Member Directory API",
        description="Community members and their upcoming events",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.dependency_overrides[get_directory] = lambda: directory

    app.get("/v1/members", response_model=DirectoryListing)(list_members)
    app.get("/v1/members/{user_id}", response_model=DirectoryEntry)(get_member)
    app.get("/v1/members/{user_id}/events", response_model=UserEvents)(
        get_member_events
    )

    return app
