"""Construction of mention contexts from raw mentions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from ..errors import MentionOrderError
from .models import Mention, MentionContext

if TYPE_CHECKING:
    from ..similarity import GenderClassifier, NumberClassifier

logger = logging.getLogger(__name__)


def _count_sentence_mentions(mentions: Sequence[Mention], start: int) -> int:
    """Count the run of mentions sharing the sentence of mentions[start]."""
    sentence_index = mentions[start].sentence_index
    count = 0
    for mention in mentions[start:]:
        if mention.sentence_index != sentence_index:
            break
        count += 1
    return count


def build_mention_contexts(
    mentions: Sequence[Mention],
    *,
    compute_features: bool = True,
    gender_classifier: Optional["GenderClassifier"] = None,
    number_classifier: Optional["NumberClassifier"] = None,
) -> list[MentionContext]:
    """
    Build one MentionContext per mention, in the same order.

    Mentions must be grouped contiguously by sentence with sentence indices
    increasing. Gender and number are only computed when compute_features
    is set and the matching classifier is given.

    Raises:
        ValueError: if mentions is None
        MentionOrderError: if sentences are out of order or interleaved
    """
    if mentions is None:
        raise ValueError("mentions must not be None")

    contexts: list[MentionContext] = []
    index_in_sentence = -1
    mentions_in_sentence = -1
    previous_sentence = -1

    for document_index, mention in enumerate(mentions):
        if mention.parse is None:
            logger.warning(f"No parse for mention {document_index}: {mention.text!r}")

        sentence_index = mention.sentence_index
        if sentence_index != previous_sentence:
            if sentence_index < previous_sentence:
                raise MentionOrderError(document_index, sentence_index, previous_sentence)
            index_in_sentence = 0
            previous_sentence = sentence_index
            mentions_in_sentence = _count_sentence_mentions(mentions, document_index)

        context = MentionContext(
            mention=mention,
            document_index=document_index,
            sentence_index=sentence_index,
            index_in_sentence=index_in_sentence,
            mentions_in_sentence=mentions_in_sentence,
            mention_id=mention.mention_id,
        )
        index_in_sentence += 1

        if compute_features:
            if gender_classifier is not None:
                context = context.with_gender(gender_classifier.classify(context))
            if number_classifier is not None:
                context = context.with_number(number_classifier.classify(context))

        contexts.append(context)

    logger.debug(f"Built {len(contexts)} mention contexts")
    return contexts
