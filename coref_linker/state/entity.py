"""Discourse entities: clusters of coreferent mentions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..mention.models import Gender, MentionContext, Number
from .element import DiscourseElement


@dataclass(eq=False)
class DiscourseEntity(DiscourseElement):
    """
    An entity in the discourse model.

    category holds a named-entity type when one is known.
    """

    category: Optional[str] = None
    synsets: set[str] = field(default_factory=set)
    gender: Gender = Gender.UNKNOWN
    gender_confidence: float = 0.0
    number: Number = Number.UNKNOWN
    number_confidence: float = 0.0

    @classmethod
    def from_mention(cls, mention: MentionContext) -> DiscourseEntity:
        """Start an entity seeded with the mention's gender and number."""
        return cls(
            mentions=[mention],
            gender=mention.gender,
            gender_confidence=mention.gender_confidence,
            number=mention.number,
            number_confidence=mention.number_confidence,
        )

    def __repr__(self) -> str:
        return f"DiscourseEntity(id={self.entity_id}, mentions={self.mention_count}, {self})"
