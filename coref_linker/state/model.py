"""Discourse model - the recency-ordered entities of one document."""

from __future__ import annotations

import logging
from typing import Iterator

from ..errors import DiscourseModelError
from .entity import DiscourseEntity

logger = logging.getLogger(__name__)


class DiscourseModel:
    """
    Entities of a document ordered by recency (index 0 = most recent).

    Ids are assigned from a per-model counter starting at 1. The counter is
    never reset, so ids of entities later removed by a merge are not reused.
    """

    def __init__(self) -> None:
        self._entities: list[DiscourseEntity] = []
        self._next_entity_id = 1

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    @property
    def entities(self) -> list[DiscourseEntity]:
        """Snapshot of the entities in recency order."""
        return list(self._entities)

    @property
    def next_entity_id(self) -> int:
        return self._next_entity_id

    def add_entity(self, entity: DiscourseEntity) -> None:
        """Assign the next id and make the entity the most recent."""
        entity.entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities.insert(0, entity)

    def mention_entity(self, entity: DiscourseEntity) -> None:
        """
        Promote an entity to the front of the recency order.

        Raises:
            DiscourseModelError: if the entity is not in this model
        """
        if entity not in self._entities:
            raise DiscourseModelError(
                f"Cannot promote entity {entity.entity_id} {entity}: not in discourse model"
            )
        self._entities.remove(entity)
        self._entities.insert(0, entity)

    def get_entity(self, rank: int) -> DiscourseEntity:
        """Entity at the given recency rank."""
        return self._entities[rank]

    def merge_entities(
        self,
        first: DiscourseEntity,
        second: DiscourseEntity,
        confidence: float = 1.0,
    ) -> None:
        """
        Move every mention of second onto first and drop second.

        confidence is accepted for future weighting and has no effect.

        Raises:
            ValueError: if first and second are the same entity
            DiscourseModelError: if second is not in this model
        """
        if first is second:
            raise ValueError(f"Cannot merge entity {first.entity_id} with itself")
        if second not in self._entities:
            raise DiscourseModelError(
                f"Cannot merge entity {second.entity_id} {second}: not in discourse model"
            )

        for mention in second.mentions:
            first.add_mention(mention)
        self._entities.remove(second)
        logger.debug(f"Merged entity {second.entity_id} into {first.entity_id}")

    def clear(self) -> None:
        """Remove all entities. The id counter keeps its value."""
        self._entities.clear()

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[DiscourseEntity]:
        return iter(list(self._entities))

    def __contains__(self, entity: object) -> bool:
        return any(e is entity for e in self._entities)
