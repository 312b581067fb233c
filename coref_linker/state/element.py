"""Base class for items held in the discourse model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..mention.models import MentionContext


@dataclass(eq=False)
class DiscourseElement:
    """
    An ordered group of mentions sharing a referent.

    Mentions are kept in the order they were added. Elements compare by
    identity: two elements with equal mentions are still distinct.
    """

    mentions: list[MentionContext] = field(default_factory=list)
    entity_id: int = -1

    @property
    def recent_mentions(self) -> list[MentionContext]:
        """Mentions, most recently added first."""
        return list(reversed(self.mentions))

    @property
    def mention_count(self) -> int:
        return len(self.mentions)

    @property
    def last_mention(self) -> Optional[MentionContext]:
        return self.mentions[-1] if self.mentions else None

    def add_mention(self, mention: MentionContext) -> None:
        self.mentions.append(mention)

    def __str__(self) -> str:
        return "[ " + ", ".join(m.to_text() for m in self.mentions) + " ]"
