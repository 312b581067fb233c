"""Base class for resolvers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..mention.models import MentionContext
    from ..state.entity import DiscourseEntity
    from ..state.model import DiscourseModel

logger = logging.getLogger(__name__)


class Resolver(ABC):
    """
    Base class for all resolvers.

    A resolver proposes an existing entity that a mention refers to.
    Subclasses should:
    1. Use @resolver decorator for registration
    2. Implement can_resolve() - structural applicability test
    3. Implement resolve() - antecedent lookup used in TEST mode
    4. Optionally override retain() and train() for TRAIN / EVAL mode
    """

    _resolver_name: str = "Resolver"
    _singular_pronoun: bool = False

    def __init__(self, entities_back: int = 30) -> None:
        self.entities_back = entities_back
        # Recency rank of the antecedent for every labeled mention retained
        self.distances: Counter[int] = Counter()

    @property
    def name(self) -> str:
        return self._resolver_name

    @abstractmethod
    def can_resolve(self, mention: "MentionContext") -> bool:
        """Return True if this resolver applies to the mention."""
        ...

    @abstractmethod
    def resolve(
        self, mention: "MentionContext", model: "DiscourseModel"
    ) -> Optional["DiscourseEntity"]:
        """Return the entity the mention refers to, or None."""
        ...

    def retain(
        self, mention: "MentionContext", model: "DiscourseModel"
    ) -> Optional["DiscourseEntity"]:
        """
        Return the entity carrying the mention's gold label.

        The model is scanned in recency order for an entity whose last
        mention has the same id. Unlabeled mentions (id -1) give None.
        """
        if mention.mention_id == -1:
            return None

        for rank, entity in enumerate(model.entities):
            last = entity.last_mention
            if last is not None and last.mention_id == mention.mention_id:
                self.distances[rank] += 1
                return entity
        return None

    def train(self) -> None:
        """
        Fit the candidate window to what retain() observed.

        entities_back becomes one past the farthest antecedent rank seen.
        Without retained observations the window is left as it is.
        """
        if not self.distances:
            return
        self.entities_back = max(self.distances) + 1
        logger.info(
            f"{self.name}: entities_back={self.entities_back} from "
            f"{sum(self.distances.values())} retained antecedents"
        )

    def candidates(self, model: "DiscourseModel") -> list["DiscourseEntity"]:
        """The most recent entities this resolver will consider."""
        return model.entities[: self.entities_back]

    def is_excluded(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        """
        True if the entity cannot be an antecedent of the mention.

        An entity whose last mention is in the same sentence and ends at or
        after the mention (it contains or follows it) is excluded.
        """
        last = entity.last_mention
        if last is None or last.sentence_index != mention.sentence_index:
            return False
        if mention.span is not None and last.span is not None:
            return mention.span[1] <= last.span[1]
        return mention.document_index <= last.document_index

    def is_out_of_range(self, mention: "MentionContext", entity: "DiscourseEntity") -> bool:
        """True if the entity and all less recent ones are too far back."""
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
