"""Record of the linker's per-mention decisions."""

from __future__ import annotations

import json
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class EventType(str, Enum):
    """Kinds of linker decisions."""

    RESOLVER_CLAIM = "RESOLVER_CLAIM"  # An applicable resolver answered
    ENTITIES_MERGED = "ENTITIES_MERGED"
    ENTITY_CREATED = "ENTITY_CREATED"
    ENTITY_MENTIONED = "ENTITY_MENTIONED"  # Mention joined an existing entity
    MENTION_DISCARDED = "MENTION_DISCARDED"
    MODE_SKIPPED = "MODE_SKIPPED"  # Mode does not resolve mentions


# Keys of event data that name an entity
_ENTITY_KEYS = ("entity_id", "survivor_id", "absorbed_id")


@dataclass
class TraceEvent:
    """One decision taken for one mention."""

    event_type: EventType
    timestamp_ms: int
    data: dict[str, Any] = field(default_factory=dict)
    mention_index: Optional[int] = None
    resolver_name: Optional[str] = None

    def involves_entity(self, entity_id: int) -> bool:
        return any(self.data.get(key) == entity_id for key in _ENTITY_KEYS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "timestamp_ms": self.timestamp_ms,
            "mention_index": self.mention_index,
            "resolver_name": self.resolver_name,
            "data": self.data,
        }


class TraceRecorder:
    """Collects TraceEvents over one linking run."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def log(
        self,
        event_type: Union[EventType, str],
        data: dict[str, Any],
        *,
        mention_index: Optional[int] = None,
        resolver_name: Optional[str] = None,
    ) -> TraceEvent:
        """
        Append an event.

        Raises:
            ValueError: if event_type is not an EventType value
        """
        event = TraceEvent(
            event_type=EventType(event_type),
            timestamp_ms=int(time.time() * 1000),
            data=data,
            mention_index=mention_index,
            resolver_name=resolver_name,
        )
        self.events.append(event)
        return event

    def clear(self) -> None:
        self.events.clear()

    def filter_by_type(self, event_type: Union[EventType, str]) -> list[TraceEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def filter_by_mention(self, mention_index: int) -> list[TraceEvent]:
        """Events for the mention at this document position, in order."""
        return [e for e in self.events if e.mention_index == mention_index]

    def entity_history(self, entity_id: int) -> list[TraceEvent]:
        """
        Events naming an entity id: its creation, the claims and mentions
        that reached it and the merges it took part in.
        """
        return [e for e in self.events if e.involves_entity(entity_id)]

    def summary(self) -> dict[str, int]:
        """Number of events of each type, by type name."""
        counts = Counter(e.event_type.value for e in self.events)
        return {kind.value: counts.get(kind.value, 0) for kind in EventType}

    def export_json(self, indent: int = 2) -> str:
        return json.dumps([e.to_dict() for e in self.events], indent=indent, default=str)
