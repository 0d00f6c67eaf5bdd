from .pydantic_models import DirectoryEntry, DirectoryListing, EventSummary, UserEvents
from .sql_models import Event, EventAttendee, User

__all__ = [
    "User",
    "Event",
    "EventAttendee",
    "DirectoryEntry",
    "DirectoryListing",
    "EventSummary",
    "UserEvents",
]
