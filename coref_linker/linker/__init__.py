"""Linker: orchestrates resolvers over the mentions of a document."""

from .mode import LinkerMode
from .config import LinkerConfig
from .trace import EventType, TraceEvent, TraceRecorder
from .linker import Linker

__all__ = [
    "LinkerMode",
    "LinkerConfig",
    "EventType",
    "TraceEvent",
    "TraceRecorder",
    "Linker",
]
