"""Linker - runs the resolver cascade over a document's mentions."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..mention.context import build_mention_contexts
from ..mention.models import Mention, MentionContext
from ..resolver.base import Resolver
from ..resolver.heuristic import GoldLabelResolver
from ..resolver.registry import get_resolver
from ..resolver.result import ResolverClaim
from ..similarity import (
    GenderClassifier,
    HeuristicGenderClassifier,
    HeuristicNumberClassifier,
    NumberClassifier,
)
from ..state.entity import DiscourseEntity
from ..state.model import DiscourseModel
from .config import LinkerConfig
from .mode import LinkerMode
from .trace import EventType, TraceRecorder

logger = logging.getLogger(__name__)

_RESOLVING_MODES = (LinkerMode.TEST, LinkerMode.TRAIN, LinkerMode.EVAL)


class Linker:
    """
    Groups mentions into discourse entities.

    Every resolver of the cascade is asked about every mention
    independently. When two resolvers name different entities for the same
    mention, those entities are merged. Mentions are processed strictly in
    document order and each run works on its own DiscourseModel.
    """

    def __init__(
        self,
        resolvers: Sequence[Resolver],
        config: Optional[LinkerConfig] = None,
        gender_classifier: Optional[GenderClassifier] = None,
        number_classifier: Optional[NumberClassifier] = None,
    ) -> None:
        self.config = config or LinkerConfig()
        self.mode = self.config.mode
        self.resolvers: list[Resolver] = list(resolvers)
        self.use_discourse_model = self.config.use_discourse_model
        self.remove_unresolved_mentions = self.config.remove_unresolved_mentions
        self.singular_pronoun_index = self._find_singular_pronoun_index()

        self.gender_classifier = gender_classifier or HeuristicGenderClassifier()
        self.number_classifier = number_classifier or HeuristicNumberClassifier()

        self.trace = TraceRecorder()

    @classmethod
    def from_config(cls, config: Optional[LinkerConfig] = None, **kwargs: Any) -> Linker:
        """
        Build a linker whose cascade is instantiated from registry names.

        In TRAIN mode the gold-label resolver is appended when the cascade
        does not already end with it.
        """
        config = config or LinkerConfig()
        names = list(config.resolvers)
        if config.mode == LinkerMode.TRAIN and (not names or names[-1] != GoldLabelResolver._resolver_name):
            names.append(GoldLabelResolver._resolver_name)

        resolvers = [get_resolver(name)() for name in names]
        return cls(resolvers, config=config, **kwargs)

    def _find_singular_pronoun_index(self) -> int:
        index = self.config.singular_pronoun_index
        if index is not None:
            if index >= len(self.resolvers):
                raise ValueError(
                    f"singular_pronoun_index {index} is outside a cascade of "
                    f"{len(self.resolvers)} resolvers"
                )
            return index

        for position, candidate in enumerate(self.resolvers):
            if candidate._singular_pronoun:
                return position
        return -1

    # =========================================================================
    # Entry points
    # =========================================================================

    def construct_mention_contexts(self, mentions: Sequence[Mention]) -> list[MentionContext]:
        """Build mention contexts; gender and number are skipped in SIM mode."""
        return build_mention_contexts(
            mentions,
            compute_features=self.mode != LinkerMode.SIM,
            gender_classifier=self.gender_classifier,
            number_classifier=self.number_classifier,
        )

    def link_mentions(self, mentions: Sequence[Mention]) -> DiscourseModel:
        """Run the cascade over all mentions and return the resulting model."""
        if mentions is None:
            raise ValueError("mentions must not be None")

        contexts = self.construct_mention_contexts(mentions)
        model = DiscourseModel()
        self.trace.clear()

        for context in contexts:
            self.resolve(context, model)

        logger.info(
            f"Linked {len(contexts)} mentions into {model.entity_count} entities "
            f"(mode={self.mode.value if isinstance(self.mode, LinkerMode) else self.mode})"
        )
        return model

    def get_entities_from_mentions(self, mentions: Sequence[Mention]) -> list[DiscourseEntity]:
        """Entities for the mentions, most recently mentioned first."""
        return self.link_mentions(mentions).entities

    def set_entities_from_mentions(self, mentions: Sequence[Mention]) -> None:
        """
        Feed labeled mentions to the resolvers.

        The mentions' ids mark which ones corefer. Clusters are discarded;
        call train() once all documents have been given.
        """
        self.link_mentions(mentions)

    def train(self) -> None:
        """Train every resolver on what it has retained."""
        for resolver in self.resolvers:
            resolver.train()
        logger.info(f"Trained {len(self.resolvers)} resolvers")

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, mention: MentionContext, model: DiscourseModel) -> None:
        """Resolve one mention against the model and record the outcome."""
        if self.mode == LinkerMode.SIM:
            self._trace(EventType.MODE_SKIPPED, {"mode": LinkerMode.SIM.value}, mention)
            return
        if self.mode not in _RESOLVING_MODES:
            logger.error(
                f"Unknown linker mode {self.mode!r}; skipping mention "
                f"{mention.document_index} {mention.text!r}"
            )
            self._trace(EventType.MODE_SKIPPED, {"mode": str(self.mode)}, mention)
            return

        valid_entity = True  # False: the mention is not added to the model
        can_resolve = False
        last_index = len(self.resolvers) - 1
        claims: list[ResolverClaim] = []

        for index, resolver in enumerate(self.resolvers):
            if not resolver.can_resolve(mention):
                claims.append(ResolverClaim.not_applicable(resolver.name))
                continue

            if self.mode == LinkerMode.TEST:
                entity = resolver.resolve(mention, model)
            else:
                entity = resolver.retain(mention, model)

            if self.mode == LinkerMode.TRAIN:
                # The final TRAIN resolver only supplies gold links
                if index != last_index:
                    can_resolve = True
            else:
                can_resolve = True

            if index == self.singular_pronoun_index and entity is None:
                valid_entity = False

            claim = ResolverClaim.from_entity(resolver.name, entity)
            claims.append(claim)
            self._trace(
                EventType.RESOLVER_CLAIM,
                {
                    "status": claim.status.name,
                    "entity_id": entity.entity_id if entity is not None else None,
                },
                mention,
                resolver_name=resolver.name,
            )

        if not can_resolve and self.remove_unresolved_mentions:
            valid_entity = False

        entity = self.check_for_merges(model, claims, mention)
        if valid_entity:
            self.update_extent(model, mention, entity, self.use_discourse_model)
        else:
            logger.debug(f"Discarded mention {mention.document_index} {mention.text!r}")
            self._trace(EventType.MENTION_DISCARDED, {"can_resolve": can_resolve}, mention)

    def check_for_merges(
        self,
        model: DiscourseModel,
        claims: Sequence[ResolverClaim],
        mention: Optional[MentionContext] = None,
    ) -> Optional[DiscourseEntity]:
        """
        Reconcile the resolvers' claims into a single entity.

        The first matched entity absorbs every later, different matched
        entity. Returns the surviving entity, or None if no resolver matched.
        """
        survivor: Optional[DiscourseEntity] = None
        absorbed: list[DiscourseEntity] = []

        for claim in claims:
            if not claim.matched:
                continue
            entity = claim.entity
            if survivor is None:
                survivor = entity
                continue
            if entity is survivor or any(entity is gone for gone in absorbed):
                continue

            model.merge_entities(survivor, entity, self.config.merge_confidence)
            absorbed.append(entity)
            self._trace(
                EventType.ENTITIES_MERGED,
                {"survivor_id": survivor.entity_id, "absorbed_id": entity.entity_id},
                mention,
                resolver_name=claim.resolver_name,
            )

        return survivor

    def update_extent(
        self,
        model: DiscourseModel,
        mention: MentionContext,
        entity: Optional[DiscourseEntity],
        use_discourse_model: bool,
    ) -> None:
        """
        Record the mention in the model.

        With the discourse model the mention joins its entity (or starts a
        new one). Without it every mention becomes its own entity and only
        borrows the antecedent's id.
        """
        if use_discourse_model:
            if entity is not None:
                if mention.gender_confidence > entity.gender_confidence:
                    entity.gender = mention.gender
                    entity.gender_confidence = mention.gender_confidence
                if mention.number_confidence > entity.number_confidence:
                    entity.number = mention.number
                    entity.number_confidence = mention.number_confidence
                entity.add_mention(mention)
                model.mention_entity(entity)
                self._trace(EventType.ENTITY_MENTIONED, {"entity_id": entity.entity_id}, mention)
            else:
                new_entity = DiscourseEntity.from_mention(mention)
                model.add_entity(new_entity)
                self._trace(EventType.ENTITY_CREATED, {"entity_id": new_entity.entity_id}, mention)
            return

        new_entity = DiscourseEntity.from_mention(mention)
        model.add_entity(new_entity)
        if entity is not None:
            new_entity.entity_id = entity.entity_id
        self._trace(EventType.ENTITY_CREATED, {"entity_id": new_entity.entity_id}, mention)

    def _trace(
        self,
        event_type: EventType,
        data: dict[str, Any],
        mention: Optional[MentionContext],
        resolver_name: Optional[str] = None,
    ) -> None:
        if not self.config.include_trace:
            return
        self.trace.log(
            event_type,
            data,
            mention_index=mention.document_index if mention is not None else None,
            resolver_name=resolver_name,
        )
