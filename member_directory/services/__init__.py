from .directory import DirectoryLoader
from .events import EventAggregator

__all__ = ["DirectoryLoader", "EventAggregator"]
