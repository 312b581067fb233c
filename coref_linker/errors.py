"""Exceptions raised by the coreference linker."""

from __future__ import annotations


class CorefLinkerError(Exception):
    """Base class for linker errors."""


class DiscourseModelError(CorefLinkerError, RuntimeError):
    """
    The discourse model and the linker disagree about which entities exist.

    Raised when an entity is promoted that the model does not hold.
    """


class MentionOrderError(CorefLinkerError, ValueError):
    """Mentions are not grouped by sentence in increasing sentence order."""

    def __init__(self, mention_index: int, sentence_index: int, previous_sentence: int) -> None:
        self.mention_index = mention_index
        self.sentence_index = sentence_index
        self.previous_sentence = previous_sentence
        super().__init__(
            f"Mention {mention_index} is in sentence {sentence_index} "
            f"after sentence {previous_sentence}; mentions must be grouped "
            f"contiguously by increasing sentence index"
        )
